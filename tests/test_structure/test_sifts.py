"""Tests for the domain resolver."""
from __future__ import annotations

from pdbimages.interfaces.domain_record import DomainChunk, DomainRecord
from pdbimages.structure.sifts import (
    count_domains,
    iter_selected_domains,
    resolve_domains,
    select_best_chain_for_domains,
    sort_domains_by_chain,
    sort_domains_by_entity,
)

COVERAGES_1HDA = {"A": 100, "B": 200, "C": 95, "D": 202}


def _chains(selected, source, family):
    return {
        entity_id: sorted({d.first_chunk.chain_id for d in doms})
        for entity_id, doms in selected[source][family].items()
    }


class TestSortDomainsByEntity:
    def test_grouping(self, sifts_1hda):
        by_entity = sort_domains_by_entity(sifts_1hda)
        cath = by_entity["CATH"]["1.10.490.10"]
        assert [d.id for d in cath["1"]] == ["1hdaA00", "1hdaC00"]
        assert [d.id for d in cath["2"]] == ["1hdaB00", "1hdaD00"]

    def test_empty_sources_dropped(self, sifts_1hda):
        assert set(sort_domains_by_entity(sifts_1hda)) == {"CATH", "Pfam"}

    def test_input_not_mutated(self, sifts_1hda):
        before = {s: {f: list(d) for f, d in fams.items()} for s, fams in sifts_1hda.items()}
        sort_domains_by_entity(sifts_1hda)
        assert sifts_1hda == before


class TestSelectBestChain:
    def test_with_coverages(self, sifts_1hda):
        selected = select_best_chain_for_domains(sort_domains_by_entity(sifts_1hda), COVERAGES_1HDA)
        assert _chains(selected, "CATH", "1.10.490.10") == {"1": ["A"], "2": ["D"]}
        assert _chains(selected, "Pfam", "PF00042") == {"1": ["A"], "2": ["D"]}

    def test_without_coverages_first_chain_wins(self, sifts_1hda):
        selected = select_best_chain_for_domains(sort_domains_by_entity(sifts_1hda))
        assert _chains(selected, "CATH", "1.10.490.10") == {"1": ["A"], "2": ["B"]}

    def test_tie_keeps_first_encountered(self, sifts_1hda):
        selected = select_best_chain_for_domains(
            sort_domains_by_entity(sifts_1hda), {"A": 50, "B": 50, "C": 50, "D": 50},
        )
        assert _chains(selected, "CATH", "1.10.490.10") == {"1": ["A"], "2": ["B"]}

    def test_missing_coverage_counts_as_zero(self, sifts_1hda):
        selected = select_best_chain_for_domains(sort_domains_by_entity(sifts_1hda), {"C": 5})
        assert _chains(selected, "CATH", "1.10.490.10") == {"1": ["C"], "2": ["B"]}

    def test_keeps_all_domains_of_selected_chain(self):
        def dom(domain_id, chain_id, start):
            return DomainRecord(domain_id, "Pfam", "PF1", "Fam", [
                DomainChunk("1", chain_id, chain_id, start, start + 50),
            ])
        domains = {"Pfam": {"PF1": [dom("PF1_1", "B", 1), dom("PF1_2", "A", 1), dom("PF1_3", "A", 100)]}}
        selected = resolve_domains(domains, {"A": 300, "B": 100})
        assert [d.id for d in selected["Pfam"]["PF1"]["1"]] == ["PF1_2", "PF1_3"]


class TestReorganize:
    def test_sort_by_chain(self, sifts_1hda):
        selected = resolve_domains(sifts_1hda, COVERAGES_1HDA)
        by_chain = sort_domains_by_chain(selected)
        assert set(by_chain) == {"A", "D"}
        assert [d.id for d in by_chain["A"]["CATH"]["1.10.490.10"]] == ["1hdaA00"]
        assert [d.id for d in by_chain["D"]["Pfam"]["PF00042"]] == ["PF00042_4"]

    def test_count_domains(self, sifts_1hda):
        counts = count_domains(sort_domains_by_entity(sifts_1hda))
        assert counts == {
            "CATH": {"1.10.490.10": {"1": 2, "2": 2}},
            "Pfam": {"PF00042": {"1": 2, "2": 2}},
        }

    def test_iter_entities_in_numeric_order(self):
        def dom(domain_id, entity_id, chain_id):
            return DomainRecord(domain_id, "CATH", "1.10.490.10", "Globins", [
                DomainChunk(entity_id, chain_id, chain_id, 1, 141),
            ])
        domains = {"CATH": {"1.10.490.10": [dom("d10", "10", "X"), dom("d2", "2", "A"), dom("d1", "1", "B")]}}
        selected = resolve_domains(domains)
        assert list(selected["CATH"]["1.10.490.10"]) == ["10", "2", "1"]
        order = [(source, family, entity_id) for source, family, entity_id, _ in iter_selected_domains(selected)]
        assert order == [
            ("CATH", "1.10.490.10", "1"),
            ("CATH", "1.10.490.10", "2"),
            ("CATH", "1.10.490.10", "10"),
        ]
