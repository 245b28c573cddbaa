"""Typed records returned by the metadata gateway."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class AssemblyRecord:
    """One assembly of a PDB entry.

    Attributes:
        assembly_id:  Usually "1", "2", ...
        form:         Usually "homo" or "hetero".
        preferred:    Preferred assembly flag (should be set for exactly one).
        name:         Description like "monomer", "tetramer".
    """
    assembly_id: str
    form: str
    preferred: bool
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


#: Neutral assembly used when running without the API.
DEFAULT_ASSEMBLY = AssemblyRecord(assembly_id="1", form="?", preferred=True, name="?")


@dataclass
class ModifiedResidueRecord:
    """One instance of a modified residue.

    Attributes:
        entity_id:      Entity containing the residue.
        label_chain_id: label_asym_id.
        auth_chain_id:  auth_asym_id.
        residue_number: label_seq_id.
        compound_id:    Compound code, e.g. "MSE".
        compound_name:  Full compound name, e.g. "SELENOMETHIONINE".
    """
    entity_id: str
    label_chain_id: str
    auth_chain_id: str
    residue_number: int
    compound_id: str
    compound_name: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class EntityTypeRecord:
    """Molecule type of an entity as reported by the API.

    ``type`` is the API molecule type (e.g. "polypeptide(L)", "bound",
    "water"); ``comp_id`` is the chemical component code when the entity
    is a single compound (ligands, water).
    """
    type: str
    comp_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
