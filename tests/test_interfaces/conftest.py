"""Shared fixtures for interface tests."""
from __future__ import annotations

import pytest

from pdbimages.interfaces import DomainChunk, DomainRecord, ImageSpec


@pytest.fixture
def sample_domain():
    return DomainRecord(
        id="1hdaA00",
        source="CATH",
        family="1.10.490.10",
        family_name="Globins",
        chunks=[
            DomainChunk(entity_id="1", chain_id="A", auth_chain_id="A",
                        start_residue=1, end_residue=141, segment=1),
        ],
    )


@pytest.fixture
def sample_image_spec():
    return ImageSpec(
        filename="1hda_ligand_HEM",
        alt="The binding environment for an instance of HEM in PDB entry 1hda.",
        description="...",
        clean_description="...",
        entry_id="1hda",
        view=None,
        section=["entry", "ligands", "HEM"],
        extras={"entity": "3", "number_of_instances": 4},
    )
