"""Tests for DomainChunk / DomainRecord interfaces."""
from __future__ import annotations

import json

from pdbimages.interfaces.domain_record import SIFTS_SOURCES, DomainChunk, DomainRecord


class TestDomainChunk:
    def test_construction(self):
        c = DomainChunk(entity_id="1", chain_id="A", auth_chain_id="B",
                        start_residue=5, end_residue=20)
        assert c.segment == 1
        assert (c.start_residue, c.end_residue) == (5, 20)

    def test_inverted_range_is_swapped(self):
        c = DomainChunk(entity_id="1", chain_id="A", auth_chain_id="A",
                        start_residue=90, end_residue=12, segment=2)
        assert (c.start_residue, c.end_residue) == (12, 90)
        assert c.segment == 2


class TestDomainRecord:
    def test_first_chunk(self, sample_domain):
        assert sample_domain.first_chunk.chain_id == "A"

    def test_json_round_trip(self, sample_domain):
        d2 = DomainRecord.from_json(sample_domain.to_json())
        assert d2 == sample_domain
        assert isinstance(d2.chunks[0], DomainChunk)

    def test_to_json_is_plain(self, sample_domain):
        parsed = json.loads(sample_domain.to_json())
        assert parsed["chunks"][0]["end_residue"] == 141
        assert parsed["family_name"] == "Globins"

    def test_sources(self):
        assert SIFTS_SOURCES == ("CATH", "Pfam", "Rfam", "SCOP")
