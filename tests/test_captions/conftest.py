"""Shared fixtures for caption tests."""
from __future__ import annotations

import pytest

from pdbimages.captions.captions import StructureContext
from pdbimages.interfaces.entity_info import EntityInfo


@pytest.fixture
def hemoglobin_entities():
    return {
        "1": EntityInfo("HEMOGLOBIN (DEOXY) (ALPHA CHAIN)", "polymer", ["A", "C"], 0),
        "2": EntityInfo("HEMOGLOBIN (DEOXY) (BETA CHAIN)", "polymer", ["B", "D"], 1),
        "3": EntityInfo("PROTOPORPHYRIN IX CONTAINING FE", "non-polymer", ["E", "F", "G", "H"], 2),
    }


@pytest.fixture
def deposited_context(hemoglobin_entities):
    return StructureContext(
        pdb_id="1hda",
        entity_names={"1": ["Hemoglobin subunit alpha"], "2": ["Hemoglobin subunit beta"]},
        entity_info=hemoglobin_entities,
    )


@pytest.fixture
def assembly_context(deposited_context):
    return StructureContext(
        pdb_id="1hda",
        assembly_id="1",
        entity_names=deposited_context.entity_names,
        entity_info=deposited_context.entity_info,
    )
