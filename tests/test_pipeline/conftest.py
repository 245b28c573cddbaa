"""Shared fixtures for planner and CLI tests.

``planner_api`` is a ``MagicMock(spec=PDBeAPI)`` with 1hda-like metadata;
``api_mirror`` writes the same metadata as a ``file://`` API directory.
"""
from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from pdbimages.api.pdbe_api import PDBeAPI
from pdbimages.interfaces import AssemblyRecord, DomainChunk, DomainRecord, EntityTypeRecord, ModifiedResidueRecord
from pdbimages.interfaces.run_config import RunConfig


def _cath(domain_id, entity_id, chain_id):
    return DomainRecord(domain_id, "CATH", "1.10.490.10", "Globins", [
        DomainChunk(entity_id, chain_id, chain_id, 1, 141),
    ])


@pytest.fixture
def planner_api():
    api = MagicMock(spec=PDBeAPI)
    api.get_entity_types.return_value = {
        "1": EntityTypeRecord("polypeptide(L)"),
        "2": EntityTypeRecord("polypeptide(L)"),
        "10": EntityTypeRecord("bound", "SO4"),
        "3": EntityTypeRecord("bound", "HEM"),
        "4": EntityTypeRecord("water", "HOH"),
    }
    api.get_assemblies.return_value = [AssemblyRecord("1", "hetero", True, "tetramer")]
    api.get_sifts_mappings.return_value = {
        "CATH": {"1.10.490.10": [
            _cath("1hdaA00", "1", "A"), _cath("1hdaB00", "2", "B"),
            _cath("1hdaC00", "1", "C"), _cath("1hdaD00", "2", "D"),
        ]},
        "Pfam": {}, "Rfam": {}, "SCOP": {},
    }
    api.get_chain_coverages.return_value = {"A": 100, "B": 200, "C": 95, "D": 202}
    api.get_modified_residues.return_value = [
        ModifiedResidueRecord("1", "A", "A", 5, "SEP", "PHOSPHOSERINE"),
        ModifiedResidueRecord("1", "A", "A", 1, "MSE", "SELENOMETHIONINE"),
        ModifiedResidueRecord("2", "B", "B", 1, "MSE", "SELENOMETHIONINE"),
    ]
    api.get_experimental_methods.return_value = ["X-ray diffraction"]
    return api


@pytest.fixture
def make_config(tmp_path):
    def _make(**kwargs):
        data = {"entry_id": "1hda", "output_dir": str(tmp_path / "out")}
        data.update(kwargs)
        return RunConfig.from_dict(data)
    return _make


@pytest.fixture
def api_mirror(tmp_path):
    """Minimal ``file://`` API directory for entry 1hda."""
    root = tmp_path / "api"
    routes = {
        "pdb/entry/molecules/1hda": {"1hda": [
            {"entity_id": 1, "molecule_name": ["Hemoglobin subunit alpha"], "molecule_type": "polypeptide(L)"},
            {"entity_id": 2, "molecule_name": ["PROTOPORPHYRIN IX CONTAINING FE"], "molecule_type": "bound",
             "chem_comp_ids": ["HEM"]},
            {"entity_id": 3, "molecule_name": ["water"], "molecule_type": "water", "chem_comp_ids": ["HOH"]},
        ]},
        "pdb/entry/summary/1hda": {"1hda": [{
            "experimental_method": ["Solution NMR"],
            "assemblies": [{"assembly_id": "1", "form": "homo", "preferred": True, "name": "dimer"}],
        }]},
        "mappings/1hda": {"1hda": {"CATH": {"1.10.490.10": {
            "identifier": "Globins",
            "mappings": [{
                "domain": "1hdaA00", "entity_id": 1, "struct_asym_id": "A", "chain_id": "A",
                "start": {"residue_number": 1}, "end": {"residue_number": 141},
            }],
        }}}},
        "pdb/entry/polymer_coverage/1hda": {"1hda": {"molecules": [{"entity_id": 1, "chains": [
            {"struct_asym_id": "A", "chain_id": "A",
             "observed": [{"start": {"residue_number": 1}, "end": {"residue_number": 141}}]},
        ]}]}},
    }
    for route, payload in routes.items():
        path = root / route
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload))
    return root
