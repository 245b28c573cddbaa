"""Tests for per-structure facts."""
from __future__ import annotations

import pytest

from pdbimages.interfaces import ChainRecord, StructureData
from pdbimages.interfaces.api_records import ModifiedResidueRecord
from pdbimages.structure.structure_info import (
    count_chain_residues,
    get_chain_info,
    get_elements_in_chains,
    get_entity_info,
    get_ligand_info,
    get_modified_residue_info,
)


class TestEntityInfo:
    def test_entities(self, structure):
        info = get_entity_info(structure)
        assert list(info) == ["1", "2", "3", "4"]
        assert info["1"].chains == ["A", "B"]
        assert info["1"].n_instances == 2
        assert info["1"].type == "polymer"
        assert info["4"].index == 3

    def test_digit_comma(self, structure):
        structure.entities[1].descriptions = ["1, 2-ETHANEDIOL"]
        structure.entities[0].descriptions = ["Endolysin", "Beta-2 adrenergic receptor"]
        info = get_entity_info(structure)
        assert info["2"].description == "1,2-ETHANEDIOL"
        assert info["1"].description == "Endolysin, Beta-2 adrenergic receptor"

    def test_entity_without_units(self, ligand_only_structure):
        info = get_entity_info(ligand_only_structure)
        assert info["1"].chains == []
        assert info["2"].chains == ["C"]


class TestLigandInfo:
    def test_ligands(self, structure):
        ligands = get_ligand_info(structure)
        assert list(ligands) == ["HEM", "ZN"]
        heme = ligands["HEM"]
        assert heme.entity_id == "2"
        assert heme.chain_id == "C"
        assert heme.auth_chain_id == "A"
        assert heme.n_instances_in_entry == 1
        assert heme.description == "PROTOPORPHYRIN IX CONTAINING FE"

    def test_absent_ligands_skipped(self, ligand_only_structure):
        assert list(get_ligand_info(ligand_only_structure)) == ["HEM"]


class TestChains:
    def test_residue_counts(self, structure):
        assert count_chain_residues(structure) == {"A": 12, "B": 12, "C": 1, "D": 1, "E": 2}

    def test_chain_info(self, structure):
        info = get_chain_info(structure)
        assert info["B"] == {"auth_chain_id": "C", "entity_id": "1"}

    def test_duplicate_chain(self, structure):
        structure.chains.append(ChainRecord(label_chain_id="A", auth_chain_id="Z", entity_id="1"))
        with pytest.raises(ValueError, match="Duplicate"):
            get_chain_info(structure)

    def test_elements(self, structure):
        assert get_elements_in_chains(structure, ["C"]) == ["C", "FE", "N"]
        assert get_elements_in_chains(structure, ["A", "B"]) == ["C", "N", "O"]
        assert get_elements_in_chains(structure, ["D"]) == ["ZN"]
        assert get_elements_in_chains(structure, []) == []


class TestModifiedResidues:
    def test_grouped_and_sorted(self):
        records = [
            ModifiedResidueRecord("1", "A", "A", 10, "SEP", "PHOSPHOSERINE"),
            ModifiedResidueRecord("1", "A", "A", 1, "MSE", "SELENOMETHIONINE"),
            ModifiedResidueRecord("1", "B", "B", 1, "MSE", "SELENOMETHIONINE"),
        ]
        info = get_modified_residue_info(records)
        assert list(info) == ["MSE", "SEP"]
        assert info["MSE"].n_instances == 2
        assert info["MSE"].instances == {"A": [1], "B": [1]}
        assert info["SEP"].comp_name == "PHOSPHOSERINE"


class TestStructureFile:
    def test_load_fixture(self, zn_peptide_path):
        structure = StructureData.from_file(zn_peptide_path)
        assert len(structure.atoms) == 4
        assert structure.coords().shape == (4, 3)
        assert structure.is_trace_atom(0)
        assert not structure.is_trace_atom(3)
        info = get_entity_info(structure)
        assert list(info) == ["1", "2"]
        assert info["2"].chains == ["B"]
        assert count_chain_residues(structure) == {"A": 3, "B": 1}
        assert get_elements_in_chains(structure, ["B"]) == ["ZN"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="not found"):
            StructureData.from_file(tmp_path / "missing.json")
