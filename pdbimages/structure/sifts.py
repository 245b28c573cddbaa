"""Domain Resolver — reorganize SIFTS domains for per-chain visualization.

For each source-family-entity combination we need the total number of
domain instances, but only the domains of one representative chain are
shown.  Visualization happens chain by chain, so the chain visual can be
reused across families.

All functions are pure: inputs are never mutated and the same
``DomainRecord`` objects are shared between input and output.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from pdbimages.helpers.helpers import entity_id_sort_key
from pdbimages.interfaces.domain_record import (
    DomainsByChain,
    DomainsByEntity,
    DomainsBySource,
)


def sort_domains_by_entity(domains: DomainsBySource) -> DomainsByEntity:
    """Regroup source -> family -> domains into source -> family -> entity -> domains.

    The entity of a domain is the entity of its first chunk.  Sources and
    families without any domain do not appear in the result.
    """
    result: DomainsByEntity = {}
    for source, source_domains in domains.items():
        for family, family_domains in source_domains.items():
            for domain in family_domains:
                entity_id = domain.first_chunk.entity_id
                (result.setdefault(source, {})
                       .setdefault(family, {})
                       .setdefault(entity_id, [])
                       .append(domain))
    return result


def select_best_chain_for_domains(
    domains: DomainsByEntity,
    chain_coverages: Optional[Mapping[str, int]] = None,
) -> DomainsByEntity:
    """Keep only the domains of one chain per source-family-entity.

    The chain with the highest coverage (observed residue count, keyed by
    label_asym_id) wins; ties and missing coverage data keep the chain
    encountered first.  Without ``chain_coverages`` the first chain wins.
    """
    result: DomainsByEntity = {}
    for source, source_domains in domains.items():
        for family, family_domains in source_domains.items():
            for entity_id, entity_domains in family_domains.items():
                chain_ids: List[str] = []
                for dom in entity_domains:
                    if dom.first_chunk.chain_id not in chain_ids:
                        chain_ids.append(dom.first_chunk.chain_id)
                selected = chain_ids[0]
                if chain_coverages is not None:
                    for other in chain_ids:
                        if chain_coverages.get(other, 0) > chain_coverages.get(selected, 0):
                            selected = other
                selected_domains = [d for d in entity_domains if d.first_chunk.chain_id == selected]
                result.setdefault(source, {}).setdefault(family, {})[entity_id] = selected_domains
    return result


def sort_domains_by_chain(domains: DomainsByEntity) -> DomainsByChain:
    """Regroup source -> family -> entity -> domains into chain -> source -> family -> domains."""
    result: DomainsByChain = {}
    for source, source_domains in domains.items():
        for family, family_domains in source_domains.items():
            for entity_domains in family_domains.values():
                for dom in entity_domains:
                    (result.setdefault(dom.first_chunk.chain_id, {})
                           .setdefault(source, {})
                           .setdefault(family, [])
                           .append(dom))
    return result


def count_domains(domains: DomainsByEntity) -> Dict[str, Dict[str, Dict[str, int]]]:
    """Number of domains per source-family-entity."""
    result: Dict[str, Dict[str, Dict[str, int]]] = {}
    for source, source_domains in domains.items():
        for family, family_domains in source_domains.items():
            for entity_id, entity_domains in family_domains.items():
                result.setdefault(source, {}).setdefault(family, {})[entity_id] = len(entity_domains)
    return result


def resolve_domains(
    domains: DomainsBySource,
    chain_coverages: Optional[Mapping[str, int]] = None,
) -> DomainsByEntity:
    """Convenience: regroup by entity, then select the best chain."""
    return select_best_chain_for_domains(sort_domains_by_entity(domains), chain_coverages)


def iter_selected_domains(domains: DomainsByEntity):
    """Yield (source, family, entity_id, domains); entities in numeric id order."""
    for source, source_domains in domains.items():
        for family, family_domains in source_domains.items():
            for entity_id in sorted(family_domains, key=entity_id_sort_key):
                yield source, family, entity_id, family_domains[entity_id]
