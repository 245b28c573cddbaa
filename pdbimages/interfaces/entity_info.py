"""EntityInfo interface — per-entity facts derived once per structure."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

#: Entity types as used in mmCIF ``_entity.type``.
ENTITY_TYPES = ("polymer", "non-polymer", "branched", "macrolide", "water")


@dataclass(frozen=True)
class EntityInfo:
    """Basic info about one entity of a structure.

    Attributes:
        description:  Entity name(s), comma-joined.
        type:         ``_entity.type`` ("polymer", "non-polymer", "water", ...).
        chains:       label_asym_id of every instance of the entity, in unit
                      order (repeats when an assembly operator copies a chain).
        index:        Zero-based row index of the entity in the structure,
                      also the entity's position in the colour assignment.
    """
    description: str
    type: str
    chains: List[str] = field(default_factory=list)
    index: int = 0

    @property
    def n_instances(self) -> int:
        return len(self.chains)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> EntityInfo:
        return cls(
            description=d["description"],
            type=d["type"],
            chains=list(d.get("chains", [])),
            index=d.get("index", 0),
        )


@dataclass(frozen=True)
class LigandInfo:
    """A ligand (non-polymer entity) and its occurrences in a structure.

    ``chain_id`` / ``auth_chain_id`` identify the first copy of the ligand.
    """
    comp_id: str
    description: str
    entity_id: str
    chain_id: str
    auth_chain_id: str
    n_instances_in_entry: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ModifiedResidueInfo:
    """Occurrences of one modified residue type in a structure.

    ``instances`` maps label_asym_id to the residue numbers of the
    occurrences in that chain.
    """
    comp_id: str
    comp_name: str
    n_instances: int
    instances: Dict[str, List[int]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
