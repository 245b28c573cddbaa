"""``pdbimages`` command line: plan, check and collect image outputs of one entry.

    pdbimages plan 1tqn out/ --type entry assembly --view front
    pdbimages check 1tqn out/
    pdbimages collect 1tqn out/ --date 2023-04-04

Settings come from a YAML file (``--config``, default
``pdbimages/pipeline/pdbimages_config.yaml``) with command-line flags on top.
"""
from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pdbimages.api.pdbe_api import PDBeAPI
from pdbimages.captions.collect import collect_captions
from pdbimages.errors import MissingOutputFilesError, WarningAsError
from pdbimages.helpers.warnings_policy import WarningPolicy
from pdbimages.interfaces.run_config import IMAGE_TYPES, MODES, VIEW_MODES, RunConfig
from pdbimages.pipeline import paths
from pdbimages.pipeline.expected_files import (
    check_missing_files,
    get_expected_filename_stems,
    get_expected_files,
    write_expected_filelist,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path(__file__).resolve().parent / "pdbimages_config.yaml"


def load_config(args: argparse.Namespace) -> RunConfig:
    """YAML config with the command-line overrides applied."""
    overrides: Dict[str, Any] = {
        "entry_id": args.entry_id,
        "output_dir": args.output_dir,
        "date": getattr(args, "date", None),
        "log_level": "DEBUG" if args.verbose else None,
        "fail_on_warning": args.fail_on_warning,
    }
    if args.command in ("plan", "check"):
        overrides.update({
            "mode": args.mode,
            "types": args.type,
            "view": args.view,
            "sizes": args.size,
            "api_url": args.api_url,
            "api_retry": args.api_retry,
            "no_api": args.no_api,
            "force_bfactor": args.force_bfactor,
        })
    if args.command == "plan":
        overrides["clear"] = args.clear
    config = RunConfig.from_yaml(args.config, overrides)
    config.validate()
    return config


def make_api(config: RunConfig, warning_policy: WarningPolicy) -> PDBeAPI:
    return PDBeAPI(
        config.api_url,
        offline=config.no_api,
        retry=config.api_retry,
        warning_policy=warning_policy,
    )


def clear_directory(directory: Path) -> None:
    """Remove all contents of ``directory`` (not the directory itself)."""
    for child in directory.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


def run_plan(config: RunConfig, warning_policy: WarningPolicy) -> List[str]:
    output_dir = Path(config.output_dir)
    if config.clear and output_dir.exists():
        logger.info("Clearing %s", output_dir)
        clear_directory(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    api = make_api(config, warning_policy)
    if config.mode == "pdb" and "assembly" in config.resolved_types():
        if config.no_api:
            preferred = api.default_assemblies()[0].assembly_id
        else:
            preferred = api.get_preferred_assembly_id(config.entry_id)
        logger.info("Preferred assembly of %s: %s", config.entry_id, preferred)

    stems = get_expected_filename_stems(config, api)
    files = get_expected_files(config, api)
    filelist = write_expected_filelist(output_dir, config.entry_id, files)
    api.save_cache(paths.api_data_path(str(output_dir), config.entry_id))
    logger.info("Planned %d images (%d files) for %s, see %s",
                len(stems), len(files), config.entry_id, filelist)
    return stems


def run_check(config: RunConfig, warning_policy: WarningPolicy) -> None:
    api = make_api(config, warning_policy)
    files = get_expected_files(config, api)
    check_missing_files(config.output_dir, files, config.entry_id)
    logger.info("All %d expected files present for %s", len(files), config.entry_id)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pdbimages",
        description="Plan and verify static images and captions of macromolecular structures",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("entry_id", help="PDB ID or AlphaFoldDB ID")
    common.add_argument("output_dir", help="Output directory")
    common.add_argument(
        "--config", default=str(DEFAULT_CONFIG),
        help="YAML config (default: pdbimages/pipeline/pdbimages_config.yaml)",
    )
    common.add_argument(
        "--fail-on-warning", action="store_true", default=None,
        help="Treat warnings as errors",
    )
    common.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose logging",
    )

    planning = argparse.ArgumentParser(add_help=False)
    planning.add_argument("--mode", choices=MODES, default=None, help="pdb or alphafold")
    planning.add_argument(
        "--type", nargs="+", choices=IMAGE_TYPES, default=None,
        help="Image types to plan (default from config: all)",
    )
    planning.add_argument("--view", choices=VIEW_MODES, default=None, help="front, all or auto")
    planning.add_argument(
        "--size", nargs="+", default=None,
        help="Image sizes, e.g. 800x800 200x200",
    )
    planning.add_argument("--api-url", default=None, help="PDBe API base URL (http(s):// or file://)")
    planning.add_argument("--api-retry", action="store_true", default=None, help="Retry failed API calls")
    planning.add_argument("--no-api", action="store_true", default=None, help="Do not use the PDBe API")
    planning.add_argument(
        "--force-bfactor", action="store_true", default=None,
        help="Plan bfactor images even for entries not determined by diffraction",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    plan = sub.add_parser("plan", parents=[common, planning], help="Write the list of expected files")
    plan.add_argument("--clear", action="store_true", default=None, help="Clear the output directory first")
    sub.add_parser("check", parents=[common, planning], help="Verify that all expected files exist")
    collect = sub.add_parser("collect", parents=[common], help="Collect captions into <entry>.json")
    collect.add_argument("--date", default=None, help="last_modification date, YYYY-MM-DD (default: today)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    config = load_config(args)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    warning_policy = WarningPolicy(fail_on_warning=config.fail_on_warning)

    try:
        if args.command == "plan":
            for stem in run_plan(config, warning_policy):
                print(stem)
        elif args.command == "check":
            run_check(config, warning_policy)
        elif args.command == "collect":
            collect_captions(config.output_dir, config.entry_id, config.date)
    except (MissingOutputFilesError, WarningAsError) as exc:
        logger.error("%s", exc)
        sys.exit(1)

    if warning_policy.issued:
        logger.info("Finished with %d warning(s)", len(warning_policy.issued))


if __name__ == "__main__":
    main()
