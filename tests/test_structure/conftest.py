"""Shared fixtures for structure-level tests.

Structures are synthetic: small helical chains with exact, reproducible
coordinates, no coordinate parser involved.
"""
from __future__ import annotations

import json
import math
from pathlib import Path

import numpy as np
import pytest

from pdbimages.interfaces import (
    AtomTable,
    ChainRecord,
    DomainRecord,
    EntityRecord,
    StructureData,
)

FIXTURES = Path(__file__).parent / "fixtures"


def _add_residue_atoms(atoms, chain_index, res_num, comp_id, names_elements, center):
    for k, (name, element) in enumerate(names_elements):
        atoms["x"].append(center[0] + 0.5 * k)
        atoms["y"].append(center[1] - 0.3 * k)
        atoms["z"].append(center[2] + 0.2 * k)
        atoms["element"].append(element)
        atoms["comp_id"].append(comp_id)
        atoms["atom_name"].append(name)
        atoms["residue_number"].append(res_num)
        atoms["chain_index"].append(chain_index)


def build_structure() -> StructureData:
    """Two copies of a 12-residue protein, a heme, a zinc ion and two waters."""
    atoms = {k: [] for k in ("x", "y", "z", "element", "comp_id", "atom_name", "residue_number", "chain_index")}
    backbone = [("N", "N"), ("CA", "C"), ("C", "C"), ("O", "O")]
    for chain_index, offset in ((0, 0.0), (1, 9.0)):
        for i in range(12):
            center = (3.8 * i, offset + 2.3 * math.cos(1.7 * i), 1.5 * math.sin(1.7 * i) + 0.1 * i * i)
            _add_residue_atoms(atoms, chain_index, i + 1, "ALA", backbone, center)
    _add_residue_atoms(atoms, 2, 1, "HEM", [("FE", "FE"), ("NA", "N"), ("CHA", "C")], (20.0, 4.0, 3.0))
    _add_residue_atoms(atoms, 3, 1, "ZN", [("ZN", "ZN")], (10.0, -4.0, 1.0))
    _add_residue_atoms(atoms, 4, 1, "HOH", [("O", "O")], (0.0, 12.0, -5.0))
    _add_residue_atoms(atoms, 4, 2, "HOH", [("O", "O")], (30.0, -6.0, 5.0))

    chain_index = atoms["chain_index"]
    units = [[i for i, c in enumerate(chain_index) if c == k] for k in range(5)]
    return StructureData(
        entities=[
            EntityRecord(id="1", type="polymer", descriptions=["Hemoglobin subunit alpha"]),
            EntityRecord(id="2", type="non-polymer", descriptions=["PROTOPORPHYRIN IX CONTAINING FE"]),
            EntityRecord(id="3", type="non-polymer", descriptions=["ZINC ION"]),
            EntityRecord(id="4", type="water", descriptions=["water"]),
        ],
        chains=[
            ChainRecord(label_chain_id="A", auth_chain_id="A", entity_id="1"),
            ChainRecord(label_chain_id="B", auth_chain_id="C", entity_id="1"),
            ChainRecord(label_chain_id="C", auth_chain_id="A", entity_id="2"),
            ChainRecord(label_chain_id="D", auth_chain_id="A", entity_id="3"),
            ChainRecord(label_chain_id="E", auth_chain_id="A", entity_id="4"),
        ],
        atoms=AtomTable(**atoms),
        units=units,
    )


@pytest.fixture
def structure():
    return build_structure()


@pytest.fixture
def ligand_only_structure():
    """Only the heme, so no polymer trace atoms are available."""
    full = build_structure()
    heme_atoms = full.units[2]
    return StructureData(
        entities=full.entities,
        chains=full.chains,
        atoms=full.atoms,
        units=[heme_atoms],
    )


@pytest.fixture
def sifts_1hda():
    data = json.loads((FIXTURES / "1hda_domains.json").read_text())
    return {
        source: {family: [DomainRecord.from_dict(d) for d in domains] for family, domains in families.items()}
        for source, families in data.items()
    }


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def elongated_cloud(rng):
    """300 points stretched 10:3:1 along x, y, z."""
    return rng.normal(size=(300, 3)) * np.array([10.0, 3.0, 1.0])


@pytest.fixture
def zn_peptide_path():
    return FIXTURES / "zn_peptide.json"
