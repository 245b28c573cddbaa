"""DomainRecord interface — one structural-domain instance from SIFTS.

A domain belongs to a family of one of the SIFTS source databases (CATH,
Pfam, Rfam, SCOP) and consists of one or more contiguous residue ranges
(chunks).  Records are produced by :class:`pdbimages.api.PDBeAPI` and
reorganized (never mutated) by :mod:`pdbimages.structure.sifts`.
"""
from __future__ import annotations

import copy
import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

#: Supported SIFTS source databases, in output order.
SIFTS_SOURCES = ("CATH", "Pfam", "Rfam", "SCOP")


@dataclass
class DomainChunk:
    """One contiguous residue range forming (part of) a domain.

    Attributes:
        entity_id:      label_entity_id of the chain.
        chain_id:       label_asym_id (structural chain id).
        auth_chain_id:  auth_asym_id (author chain id, used in filenames).
        start_residue:  label_seq_id of the first residue.
        end_residue:    label_seq_id of the last residue.
        segment:        1-based index of this chunk within its domain.
    """
    entity_id: str
    chain_id: str
    auth_chain_id: str
    start_residue: int
    end_residue: int
    segment: int = 1

    def __post_init__(self) -> None:
        # Known upstream data-quality issue: the API occasionally reports
        # inverted ranges.  Normalize, but keep it visible in debug logs.
        if self.start_residue > self.end_residue:
            logger.debug(
                "Inverted residue range %d-%d in chain %s, swapping",
                self.start_residue, self.end_residue, self.chain_id,
            )
            self.start_residue, self.end_residue = self.end_residue, self.start_residue


@dataclass
class DomainRecord:
    """A single domain instance with all its chunks.

    Attributes:
        id:           Domain identifier (e.g. "1hdaA00", "d1hdaa_", "PF00042_1").
        source:       SIFTS source database (one of :data:`SIFTS_SOURCES`).
        family:       Family identifier (e.g. "1.10.490.10", "PF00042").
        family_name:  Human-readable family name (e.g. "Globin-like").
        chunks:       Residue ranges, ordered by segment.
    """
    id: str
    source: str
    family: str
    family_name: str
    chunks: List[DomainChunk] = field(default_factory=list)

    @property
    def first_chunk(self) -> DomainChunk:
        """The chunk whose entity/chain identifies the whole domain."""
        return self.chunks[0]

    # ── Serialization ────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> DomainRecord:
        data = copy.deepcopy(d)
        data["chunks"] = [DomainChunk(**c) for c in data.get("chunks", [])]
        return cls(**data)

    @classmethod
    def from_json(cls, s: str) -> DomainRecord:
        return cls.from_dict(json.loads(s))


#: source -> family -> domains
DomainsBySource = Dict[str, Dict[str, List[DomainRecord]]]
#: source -> family -> entity -> domains
DomainsByEntity = Dict[str, Dict[str, Dict[str, List[DomainRecord]]]]
#: chain -> source -> family -> domains
DomainsByChain = Dict[str, Dict[str, Dict[str, List[DomainRecord]]]]
