"""StructureData interface — renderer-independent view of a loaded structure.

Coordinate parsing lives outside this package; whoever loads a structure
fills these tables.  Atom order is the file order, so chains and residues
form contiguous runs of atoms.

Example (JSON form)::

    {
      "entities": [{"id": "1", "type": "polymer", "descriptions": ["Globin"]}],
      "chains":   [{"label_chain_id": "A", "auth_chain_id": "A", "entity_id": "1"}],
      "atoms": {
        "x": [...], "y": [...], "z": [...],
        "element": ["N", "C", ...], "comp_id": ["MET", ...],
        "atom_name": ["N", "CA", ...], "residue_number": [1, 1, ...],
        "chain_index": [0, 0, ...]
      },
      "units": [[0, 1, 2, ...]]
    }
"""
from __future__ import annotations

import copy
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np

#: Atoms forming the polymer trace (protein C-alpha, nucleic-acid O3').
TRACE_ATOM_NAMES = ("CA", "O3'")


@dataclass
class EntityRecord:
    """One row of the entity table (``_entity``)."""
    id: str
    type: str
    descriptions: List[str] = field(default_factory=list)


@dataclass
class ChainRecord:
    """One row of the chain table: label/auth chain id and its entity."""
    label_chain_id: str
    auth_chain_id: str
    entity_id: str


@dataclass
class AtomTable:
    """Per-atom columns; all lists have the same length.

    Attributes:
        x, y, z:         Cartesian coordinates.
        element:         Element symbol (``type_symbol``), e.g. "C", "FE".
        comp_id:         Residue/compound code, e.g. "ALA", "HOH".
        atom_name:       ``label_atom_id``, e.g. "CA".
        residue_number:  ``label_seq_id`` (or author number for non-polymers).
        chain_index:     Index into :attr:`StructureData.chains`.
        trace:           Optional polymer-trace flags; derived from atom names
                         of polymer chains when omitted.
    """
    x: List[float] = field(default_factory=list)
    y: List[float] = field(default_factory=list)
    z: List[float] = field(default_factory=list)
    element: List[str] = field(default_factory=list)
    comp_id: List[str] = field(default_factory=list)
    atom_name: List[str] = field(default_factory=list)
    residue_number: List[int] = field(default_factory=list)
    chain_index: List[int] = field(default_factory=list)
    trace: Optional[List[bool]] = None

    def __len__(self) -> int:
        return len(self.x)


@dataclass
class StructureData:
    """Entities, chains, atoms and units (chain instances) of one structure.

    A *unit* is a list of atom indices forming one chain instance.  In the
    deposited model every chain is one unit; in an assembly a chain can
    appear in several units.
    """
    entities: List[EntityRecord] = field(default_factory=list)
    chains: List[ChainRecord] = field(default_factory=list)
    atoms: AtomTable = field(default_factory=AtomTable)
    units: List[List[int]] = field(default_factory=list)

    def coords(self, indices: Optional[List[int]] = None) -> np.ndarray:
        """(N, 3) coordinate array, optionally restricted to ``indices``."""
        xyz = np.column_stack([
            np.asarray(self.atoms.x, dtype=float),
            np.asarray(self.atoms.y, dtype=float),
            np.asarray(self.atoms.z, dtype=float),
        ]) if len(self.atoms) else np.zeros((0, 3))
        if indices is None:
            return xyz
        return xyz[np.asarray(indices, dtype=int)] if indices else np.zeros((0, 3))

    def entity(self, entity_id: str) -> Optional[EntityRecord]:
        for ent in self.entities:
            if ent.id == entity_id:
                return ent
        return None

    def unit_chain_index(self, unit: List[int]) -> int:
        """Chain of a unit, taken from its first atom."""
        return self.atoms.chain_index[unit[0]]

    def is_trace_atom(self, index: int) -> bool:
        if self.atoms.trace is not None:
            return bool(self.atoms.trace[index])
        if self.atoms.atom_name[index] not in TRACE_ATOM_NAMES:
            return False
        chain = self.chains[self.atoms.chain_index[index]]
        ent = self.entity(chain.entity_id)
        return ent is not None and ent.type == "polymer"

    # ── Serialization ────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> StructureData:
        data = copy.deepcopy(d)
        atoms = AtomTable(**data.get("atoms", {}))
        n = len(atoms)
        for name in ("y", "z", "element", "comp_id", "atom_name", "residue_number", "chain_index"):
            if len(getattr(atoms, name)) != n:
                raise ValueError(f"Atom column {name!r} has {len(getattr(atoms, name))} values, expected {n}")
        return cls(
            entities=[EntityRecord(**e) for e in data.get("entities", [])],
            chains=[ChainRecord(**c) for c in data.get("chains", [])],
            atoms=atoms,
            units=[list(u) for u in data.get("units", [])],
        )

    @classmethod
    def from_json(cls, s: str) -> StructureData:
        return cls.from_dict(json.loads(s))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> StructureData:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Structure file not found: {path}")
        return cls.from_json(path.read_text(encoding="utf-8"))
