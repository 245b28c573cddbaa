"""Output Planner — the exact set of files a run is expected to produce.

The planner decides filename stems from API metadata only (no structure
file is needed), so the list can be produced before rendering and
checked afterwards.

Stems are emitted type by type in a fixed order (entry, assembly, entity,
domain, ligand, modres, bfactor, validation; plddt for AlphaFold mode)
no matter in which order the concurrent API queries finish.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Union

from pdbimages.api.pdbe_api import PDBeAPI
from pdbimages.errors import MissingOutputFilesError
from pdbimages.helpers.helpers import entity_id_sort_key
from pdbimages.interfaces.run_config import RunConfig
from pdbimages.pipeline import paths
from pdbimages.structure.sifts import iter_selected_domains, select_best_chain_for_domains, sort_domains_by_entity

logger = logging.getLogger(__name__)

#: API queries needed by each image type.
QUERIES_FOR_TYPES: Dict[str, Sequence[str]] = {
    "assembly": ("assemblies",),
    "entity": ("entities",),
    "domain": ("domains", "chain_coverages"),
    "ligand": ("entities",),
    "modres": ("modres_records",),
    "bfactor": ("methods",),
}

MAX_API_WORKERS = 6


def _submit_queries(executor: ThreadPoolExecutor, api: PDBeAPI, entry_id: str, types: Sequence[str]) -> Dict[str, Future]:
    calls: Dict[str, Callable] = {
        "assemblies": api.get_assemblies,
        "entities": api.get_entity_types,
        "domains": api.get_sifts_mappings,
        "chain_coverages": api.get_chain_coverages,
        "modres_records": api.get_modified_residues,
        "methods": api.get_experimental_methods,
    }
    needed = []
    for image_type in types:
        for query in QUERIES_FOR_TYPES.get(image_type, ()):
            if query not in needed:
                needed.append(query)
    logger.debug("API queries for %s: %s", entry_id, ", ".join(needed) or "none")
    return {query: executor.submit(calls[query], entry_id) for query in needed}


def get_expected_filename_stems(config: RunConfig, api: PDBeAPI) -> List[str]:
    """Stems of all images to be created, e.g. '1tqn_deposited_chain_front'."""
    if config.mode == "pdb":
        return _stems_for_pdb_mode(config, config.resolved_types(), api)
    if config.mode == "alphafold":
        return _stems_for_alphafold_mode(config, config.resolved_types())
    raise ValueError(f"Invalid value for mode: {config.mode}")


def _stems_for_pdb_mode(config: RunConfig, types: Sequence[str], api: PDBeAPI) -> List[str]:
    entry_id, view = config.entry_id, config.view
    result: List[str] = []
    with ThreadPoolExecutor(max_workers=MAX_API_WORKERS) as executor:
        futures = _submit_queries(executor, api, entry_id, types)

        if "entry" in types:
            for coloring in paths.ENTRY_COLORINGS:
                for v in paths.views_for("entry", view):
                    result.append(paths.entry_stem(entry_id, None, coloring, v))

        if "assembly" in types:
            for assembly in futures["assemblies"].result():
                for coloring in paths.ENTRY_COLORINGS:
                    for v in paths.views_for("assembly", view):
                        result.append(paths.entry_stem(entry_id, assembly.assembly_id, coloring, v))

        if "entity" in types:
            entities = futures["entities"].result()
            for entity_id in sorted(entities, key=entity_id_sort_key):
                if entities[entity_id].type == "water":
                    continue
                for v in paths.views_for("entity", view):
                    result.append(paths.entity_stem(entry_id, entity_id, v))

        if "domain" in types:
            domains = sort_domains_by_entity(futures["domains"].result())
            selected = select_best_chain_for_domains(domains, futures["chain_coverages"].result())
            for source, family, entity_id, entity_domains in iter_selected_domains(selected):
                auth_chain_id = entity_domains[0].first_chunk.auth_chain_id
                for v in paths.views_for("domain", view):
                    result.append(paths.domain_stem(entry_id, entity_id, auth_chain_id, source, family, v))

        if "ligand" in types:
            entities = futures["entities"].result()
            for entity_id in sorted(entities, key=entity_id_sort_key):
                record = entities[entity_id]
                if record.type != "bound":
                    continue
                for v in paths.views_for("ligand", view):
                    result.append(paths.ligand_stem(entry_id, record.comp_id, v))

        if "modres" in types:
            comp_ids = sorted({rec.compound_id for rec in futures["modres_records"].result()})
            for comp_id in comp_ids:
                for v in paths.views_for("modres", view):
                    result.append(paths.modres_stem(entry_id, comp_id, v))

        if "bfactor" in types:
            methods = futures["methods"].result()
            from_diffraction = any("diffraction" in method.lower() for method in methods)
            if from_diffraction or config.force_bfactor:
                for v in paths.views_for("bfactor", view):
                    result.append(paths.bfactor_stem(entry_id, v))
            else:
                logger.info("Skipping bfactor images for %s (methods: %s)", entry_id, ", ".join(methods) or "unknown")

        if "validation" in types:
            for v in paths.views_for("validation", view):
                result.append(paths.validation_stem(entry_id, v))
    return result


def _stems_for_alphafold_mode(config: RunConfig, types: Sequence[str]) -> List[str]:
    result: List[str] = []
    if "plddt" in types:
        for v in paths.views_for("plddt", config.view):
            result.append(paths.plddt_stem(config.entry_id, v))
    return result


def get_expected_files(config: RunConfig, api: PDBeAPI) -> List[str]:
    """All expected file names (relative to the output directory), with suffixes."""
    result = [
        paths.filelist(None, config.entry_id),
        paths.captions_json(None, config.entry_id),
    ]
    for stem in get_expected_filename_stems(config, api):
        result.append(paths.image_caption_json(None, stem))
        result.append(paths.image_state_molj(None, stem))
        for size in config.sizes:
            result.append(paths.image_png(None, stem, size))
    return result


def write_expected_filelist(directory: Union[str, Path], entry_id: str, files: Sequence[str]) -> Path:
    """Write ``files`` one per line into ``<entry>_expected_files.txt``."""
    path = Path(paths.expected_filelist(str(directory), entry_id))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{file}\n" for file in files), encoding="utf-8")
    logger.debug("Wrote %d expected files to %s", len(files), path)
    return path


def check_missing_files(directory: Union[str, Path], files: Sequence[str], entry_id: str) -> None:
    """Raise :class:`MissingOutputFilesError` if any of ``files`` is absent or empty in ``directory``."""
    directory = Path(directory)
    missing: List[str] = []
    for file in files:
        full_path = directory / file
        if not full_path.exists():
            missing.append(file)
            logger.error("Missing output file: %s", file)
        elif full_path.stat().st_size == 0:
            missing.append(file)
            logger.error("Empty output file: %s", file)
    if missing:
        error = MissingOutputFilesError(missing, paths.expected_filelist(None, entry_id))
        logger.error("%s", error)
        raise error
    logger.debug("Checking for missing/empty output files passed (all %d expected files are present)", len(files))
