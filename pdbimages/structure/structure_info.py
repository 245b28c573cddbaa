"""Per-structure facts derived once and shared by colours, captions and planning."""
from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List

from pdbimages.interfaces.api_records import ModifiedResidueRecord
from pdbimages.interfaces.entity_info import EntityInfo, LigandInfo, ModifiedResidueInfo
from pdbimages.interfaces.structure_data import StructureData

logger = logging.getLogger(__name__)

# '1,2-ethanediol' keeps no space after the comma (1bvy), while
# 'Endolysin, Beta-2 adrenergic receptor' keeps it (3sn6)
_DIGIT_COMMA_RE = re.compile(r"\b(\d+), (\d+)\b")


def get_entity_info(structure: StructureData) -> Dict[str, EntityInfo]:
    """Basic info about every entity, keyed by entity id, in entity-table order.

    ``chains`` lists the label_asym_id of each unit of the entity in unit order.
    """
    chains_by_entity: Dict[str, List[str]] = {ent.id: [] for ent in structure.entities}
    for unit in structure.units:
        chain = structure.chains[structure.unit_chain_index(unit)]
        chains_by_entity[chain.entity_id].append(chain.label_chain_id)

    result: Dict[str, EntityInfo] = {}
    for index, ent in enumerate(structure.entities):
        description = _DIGIT_COMMA_RE.sub(r"\1,\2", ", ".join(ent.descriptions))
        result[ent.id] = EntityInfo(
            description=description,
            type=ent.type,
            chains=chains_by_entity[ent.id],
            index=index,
        )
    return result


def get_ligand_info(structure: StructureData) -> Dict[str, LigandInfo]:
    """Info about ligands (non-polymer entities present in the structure), keyed by compound id."""
    chain_index = {chain.label_chain_id: i for i, chain in enumerate(structure.chains)}
    result: Dict[str, LigandInfo] = {}
    for entity_id, info in get_entity_info(structure).items():
        if info.type != "non-polymer" or not info.chains:
            continue
        i_chain = chain_index[info.chains[0]]
        chain = structure.chains[i_chain]
        first_atom = structure.atoms.chain_index.index(i_chain)
        comp_id = structure.atoms.comp_id[first_atom]
        result[comp_id] = LigandInfo(
            comp_id=comp_id,
            description=info.description,
            entity_id=entity_id,
            chain_id=chain.label_chain_id,
            auth_chain_id=chain.auth_chain_id,
            n_instances_in_entry=info.n_instances,
        )
    return result


def count_chain_residues(structure: StructureData) -> Dict[str, int]:
    """Number of residues forming each chain, keyed by label_asym_id."""
    counts: Dict[str, int] = {}
    atoms = structure.atoms
    previous = None
    for i_chain, res_num in zip(atoms.chain_index, atoms.residue_number):
        key = (i_chain, res_num)
        if key != previous:
            chain_id = structure.chains[i_chain].label_chain_id
            counts[chain_id] = counts.get(chain_id, 0) + 1
            previous = key
    return counts


def get_chain_info(structure: StructureData) -> Dict[str, Dict[str, str]]:
    """``{label_asym_id: {"auth_chain_id": ..., "entity_id": ...}}`` for every chain."""
    result: Dict[str, Dict[str, str]] = {}
    for chain in structure.chains:
        if chain.label_chain_id in result:
            raise ValueError(f"Duplicate chain id {chain.label_chain_id!r} in chain table")
        result[chain.label_chain_id] = {
            "auth_chain_id": chain.auth_chain_id,
            "entity_id": chain.entity_id,
        }
    return result


def get_elements_in_chains(structure: StructureData, chain_ids: Iterable[str]) -> List[str]:
    """Sorted distinct element symbols of all atoms in the given chains."""
    chain_set = set(chain_ids)
    wanted = {i for i, chain in enumerate(structure.chains) if chain.label_chain_id in chain_set}
    atoms = structure.atoms
    return sorted({atoms.element[i] for i, c in enumerate(atoms.chain_index) if c in wanted})


def get_modified_residue_info(records: Iterable[ModifiedResidueRecord]) -> Dict[str, ModifiedResidueInfo]:
    """Group modified-residue records by compound id (sorted alphabetically)."""
    grouped: Dict[str, List[ModifiedResidueRecord]] = {}
    for rec in records:
        grouped.setdefault(rec.compound_id, []).append(rec)
    result: Dict[str, ModifiedResidueInfo] = {}
    for comp_id in sorted(grouped):
        instances: Dict[str, List[int]] = {}
        for rec in grouped[comp_id]:
            instances.setdefault(rec.label_chain_id, []).append(rec.residue_number)
        result[comp_id] = ModifiedResidueInfo(
            comp_id=comp_id,
            comp_name=grouped[comp_id][0].compound_name,
            n_instances=len(grouped[comp_id]),
            instances=instances,
        )
    logger.debug("Modified residues (%d): %s", len(result), ", ".join(result))
    return result
