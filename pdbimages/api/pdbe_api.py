"""Client for the PDBe REST API (structural metadata gateway).

Every query returns typed records.  A 404 response means "nothing there"
(e.g. an entry without modified residues) and yields an empty result;
any other failure raises :class:`~pdbimages.errors.ApiCallError`.

With ``offline=True`` no request is made at all and every query returns
the neutral default (empty mapping / empty list).

Usage::

    api = PDBeAPI("https://www.ebi.ac.uk/pdbe/api", retry=True)
    assemblies = api.get_assemblies("1tqn")
    api.save_cache("out/1tqn_api_data.json")
"""
from __future__ import annotations

import json
import logging
import random
import threading
import time
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

from pdbimages.errors import ApiCallError
from pdbimages.helpers.warnings_policy import WarningPolicy
from pdbimages.interfaces.api_records import (
    DEFAULT_ASSEMBLY,
    AssemblyRecord,
    EntityTypeRecord,
    ModifiedResidueRecord,
)
from pdbimages.interfaces.domain_record import (
    SIFTS_SOURCES,
    DomainChunk,
    DomainRecord,
    DomainsBySource,
)

logger = logging.getLogger(__name__)

FETCH_RETRY_N_TRIES = 5
FETCH_RETRY_MAX_WAIT_SECONDS = 30
DEFAULT_TIMEOUT_SECONDS = 60


class PDBeAPI:
    """Client for access to the PDBe REST API.

    Args:
        base_url:        API base URL, e.g. "https://www.ebi.ac.uk/pdbe/api",
                         or a "file://" directory mirroring the API routes.
        offline:         Mock client returning correct types without data.
        retry:           Retry calls failing with 5xx or connection errors.
        warning_policy:  Where preference tie-break warnings go.
        timeout:         Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        offline: bool = False,
        retry: bool = False,
        warning_policy: Optional[WarningPolicy] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url[:-1] if base_url.endswith("/") else base_url
        self.offline = offline
        self.retry = retry
        self.warning_policy = warning_policy or WarningPolicy()
        self.timeout = timeout
        self._cache: Dict[str, Future] = {}
        self._lock = threading.Lock()

    # ── Entities ─────────────────────────────────────────────────────

    def get_entity_names(self, pdb_id: str) -> Dict[str, List[str]]:
        """Names of entities within a PDB entry, keyed by entity id."""
        json_data = self._get(f"{self.base_url}/pdb/entry/molecules/{pdb_id}")
        names: Dict[str, List[str]] = {}
        for record in json_data.get(pdb_id) or []:
            names[str(record["entity_id"])] = list(record.get("molecule_name") or [])
        return names

    def get_entity_types(self, pdb_id: str) -> Dict[str, EntityTypeRecord]:
        """Molecule type and compound code of entities within a PDB entry."""
        json_data = self._get(f"{self.base_url}/pdb/entry/molecules/{pdb_id}")
        result: Dict[str, EntityTypeRecord] = {}
        for record in json_data.get(pdb_id) or []:
            comp_ids = record.get("chem_comp_ids") or []
            result[str(record["entity_id"])] = EntityTypeRecord(
                type=record.get("molecule_type", ""),
                comp_id=comp_ids[0] if comp_ids else None,
            )
        return result

    # ── Assemblies ───────────────────────────────────────────────────

    def get_assemblies(self, pdb_id: str) -> List[AssemblyRecord]:
        """List of assemblies of a PDB entry."""
        json_data = self._get(f"{self.base_url}/pdb/entry/summary/{pdb_id}")
        assemblies: List[AssemblyRecord] = []
        for record in json_data.get(pdb_id) or []:
            for assembly in record.get("assemblies") or []:
                assemblies.append(AssemblyRecord(
                    assembly_id=str(assembly["assembly_id"]),
                    form=assembly.get("form", "?"),
                    preferred=bool(assembly.get("preferred", False)),
                    name=assembly.get("name", "?"),
                ))
        return assemblies

    def default_assemblies(self) -> List[AssemblyRecord]:
        """Fixed neutral assembly list used when the API is not available."""
        return [DEFAULT_ASSEMBLY]

    def get_preferred_assembly_id(self, pdb_id: str) -> Optional[str]:
        """Preferred assembly id, or None when offline / no assemblies.

        The preferred assembly is not always "1" (e.g. 1l7c prefers "4").
        If none is flagged, the first assembly is used; if several are
        flagged, the first flagged one is used.  Both cases warn.
        """
        if self.offline:
            return None
        assemblies = self.get_assemblies(pdb_id)
        if not assemblies:
            return None
        preferred = [a for a in assemblies if a.preferred]
        if not preferred:
            self.warning_policy.warn(
                f"PDB entry {pdb_id} has no preferred assembly. "
                "Using the first assembly instead.",
                logger,
            )
            return assemblies[0].assembly_id
        if len(preferred) > 1:
            self.warning_policy.warn(
                f"PDB entry {pdb_id} has more than one preferred assembly. "
                "Only the first one will be used.",
                logger,
            )
        return preferred[0].assembly_id

    # ── Modified residues ────────────────────────────────────────────

    def get_modified_residues(self, pdb_id: str) -> List[ModifiedResidueRecord]:
        """All instances of modified residues within a PDB entry."""
        json_data = self._get(f"{self.base_url}/pdb/entry/modified_AA_or_NA/{pdb_id}")
        result: List[ModifiedResidueRecord] = []
        for record in json_data.get(pdb_id) or []:
            result.append(ModifiedResidueRecord(
                entity_id=str(record["entity_id"]),
                label_chain_id=record["struct_asym_id"],
                auth_chain_id=record["chain_id"],
                residue_number=int(record["residue_number"]),
                compound_id=record["chem_comp_id"],
                compound_name=record.get("chem_comp_name", ""),
            ))
        return result

    # ── SIFTS domains ────────────────────────────────────────────────

    def get_sifts_mappings(self, pdb_id: str) -> DomainsBySource:
        """SIFTS domain instances, keyed by source then family (both sorted).

        Protein and nucleic-acid mappings are merged; all sources in
        :data:`SIFTS_SOURCES` are always present (possibly empty).
        """
        json_protein = self._get(f"{self.base_url}/mappings/{pdb_id}")
        json_nucleic = self._get(f"{self.base_url}/nucleic_mappings/{pdb_id}")
        entry_data: Dict[str, Any] = {}
        entry_data.update(json_protein.get(pdb_id) or {})
        entry_data.update(json_nucleic.get(pdb_id) or {})

        result: DomainsBySource = {}
        for source in SIFTS_SOURCES:
            result[source] = {}
            source_data = entry_data.get(source) or {}
            for family in sorted(source_data):
                family_name = source_data[family].get("identifier", "")
                mappings = source_data[family].get("mappings") or []
                result[source][family] = self._extract_domain_mappings(
                    mappings, source, family, family_name,
                )
        return result

    @staticmethod
    def _extract_domain_mappings(
        mappings: List[Dict[str, Any]],
        source: str,
        family: str,
        family_name: str,
    ) -> List[DomainRecord]:
        """Convert API mappings of one family into DomainRecords sorted by id.

        Mappings sharing a domain id are discontiguous parts of one domain
        and become consecutive chunks (segment 1, 2, ...).
        """
        domains: Dict[str, DomainRecord] = {}
        counter = 0
        for mapping in mappings:
            domain_id = mapping.get("domain") or mapping.get("scop_id")
            if not domain_id:
                counter += 1
                domain_id = f"{family}_{counter}"
            existing = domains.get(domain_id)
            chunk = DomainChunk(
                entity_id=str(mapping["entity_id"]),
                chain_id=mapping["struct_asym_id"],
                auth_chain_id=mapping["chain_id"],
                start_residue=int(mapping["start"]["residue_number"]),
                end_residue=int(mapping["end"]["residue_number"]),
                segment=len(existing.chunks) + 1 if existing else 1,
            )
            if existing:
                existing.chunks.append(chunk)
            else:
                domains[domain_id] = DomainRecord(
                    id=domain_id,
                    source=source,
                    family=family,
                    family_name=family_name,
                    chunks=[chunk],
                )
        return sorted(domains.values(), key=lambda d: d.id)

    # ── Experimental methods & coverage ──────────────────────────────

    def get_experimental_methods(self, pdb_id: str) -> List[str]:
        """Experimental methods, e.g. ["X-ray diffraction"]."""
        json_data = self._get(f"{self.base_url}/pdb/entry/summary/{pdb_id}")
        methods: List[str] = []
        for record in json_data.get(pdb_id) or []:
            methods.extend(record.get("experimental_method") or [])
        return methods

    def get_chain_coverages(self, pdb_id: str) -> Dict[str, int]:
        """Absolute number of observed residues per chain (label_asym_id)."""
        json_data = self._get(f"{self.base_url}/pdb/entry/polymer_coverage/{pdb_id}")
        coverages: Dict[str, int] = {}
        entry = json_data.get(pdb_id) or {}
        for entity in entry.get("molecules") or []:
            for chain in entity.get("chains") or []:
                chain_id = chain["struct_asym_id"]
                coverages.setdefault(chain_id, 0)
                for rng in chain.get("observed") or []:
                    length = rng["end"]["residue_number"] - rng["start"]["residue_number"] + 1
                    coverages[chain_id] += length
        return coverages

    def get_chain_coverage_ratios(self, pdb_id: str) -> Dict[str, float]:
        """Relative ratio (0-1) of observed residues per chain."""
        json_data = self._get(f"{self.base_url}/pdb/entry/observed_residues_ratio/{pdb_id}")
        ratios: Dict[str, float] = {}
        for chains in (json_data.get(pdb_id) or {}).values():
            for chain in chains:
                ratios[chain["struct_asym_id"]] = chain["observed_ratio"]
        return ratios

    def structure_quality_report_prefix(self) -> Optional[str]:
        """URL prefix for residue-wise validation reports (None offline)."""
        if self.offline:
            return None
        return f"{self.base_url}/validation/residuewise_outlier_summary/entry/"

    # ── Transport ────────────────────────────────────────────────────

    def _get(self, url: str) -> Dict[str, Any]:
        """Fetch ``url`` as JSON, sharing one fetch per URL across threads."""
        with self._lock:
            future = self._cache.get(url)
            owner = future is None
            if owner:
                future = Future()
                self._cache[url] = future
        if owner:
            try:
                future.set_result(self._get_without_cache(url))
            except Exception as exc:
                future.set_exception(exc)
        return future.result()

    def _get_without_cache(self, url: str) -> Dict[str, Any]:
        if self.offline:
            return {}
        if url.startswith("file://"):
            path = Path(url[len("file://"):])
            if not path.exists():
                logger.debug("No local API data at %s", path)
                return {}
            return json.loads(path.read_text(encoding="utf-8"))

        if self.retry:
            response = self._fetch_with_retry(url, FETCH_RETRY_N_TRIES, FETCH_RETRY_MAX_WAIT_SECONDS)
        else:
            response = requests.get(url, timeout=self.timeout)
        if response.status_code == 404:
            # PDBe API answers 404 when there is nothing to report
            logger.debug("404 for %s, treating as empty", url)
            return {}
        if not response.ok:
            raise ApiCallError(url, response.status_code)
        return response.json()

    def _fetch_with_retry(self, url: str, n_tries: int, max_wait_seconds: float) -> requests.Response:
        """Fetch ``url`` up to ``n_tries`` times.

        Returns the first response without a 5xx status, or the last response
        regardless of status.  Raises if the last try raised.
        """
        if n_tries < 1:
            raise ValueError("Invalid value for 'n_tries', must be at least 1")
        for i in range(1, n_tries + 1):
            response: Optional[requests.Response] = None
            error: Optional[Exception] = None
            try:
                response = requests.get(url, timeout=self.timeout)
            except requests.RequestException as exc:
                error = exc
            if response is not None and not 500 <= response.status_code <= 599:
                if i > 1:
                    logger.debug("Succeeded to fetch %s, try %d/%d", url, i, n_tries)
                return response
            reason = f"status code {response.status_code}" if response is not None else f"threw error {error}"
            logger.debug("Failed to fetch %s, try %d/%d, %s", url, i, n_tries, reason)
            if i == n_tries:
                logger.error("Failed to fetch %s after trying %d times", url, n_tries)
                if response is not None:
                    return response
                raise error
            if max_wait_seconds > 0:
                wait = max_wait_seconds * random.random()
                logger.debug("Waiting %d seconds before retry", round(wait))
                time.sleep(wait)
        raise AssertionError("unreachable")

    def save_cache(self, path: Union[str, Path]) -> Path:
        """Dump every successfully fetched response into a JSON file."""
        with self._lock:
            items = list(self._cache.items())
        data = {}
        for url, future in items:
            if future.done() and future.exception() is None:
                data[url] = future.result()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        logger.debug("Saved %d cached API responses to %s", len(data), path)
        return path
