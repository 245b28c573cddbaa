"""Caption Collector — merge per-image caption records into one manifest.

Reads every ``*.caption.json`` in a directory, keeps the records of one
entry and writes:

    <entry>.json       {entry: {<nested sections>, image_suffix, last_modification}}
    <entry>_filelist   sorted filename stems, newline-separated

Both files are rebuilt from scratch on every run and replaced atomically.

Usage::

    python -m pdbimages.captions.collect out/ 1tqn --date 2023-04-04
"""
from __future__ import annotations

import argparse
import datetime
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from pdbimages.helpers.helpers import write_text_atomic
from pdbimages.pipeline import paths

logger = logging.getLogger(__name__)

CAPTION_SUFFIX = ".caption.json"


def collect_captions(
    directory: Union[str, Path],
    entry_id: str,
    last_modification_date: Optional[str] = None,
) -> Dict[str, Any]:
    """Collect caption records of ``entry_id`` in ``directory``; return the manifest."""
    directory = Path(directory)
    all_files = sorted(os.listdir(directory))
    result: Dict[str, Any] = {}
    stems: List[str] = []
    for name in all_files:
        if not name.endswith(CAPTION_SUFFIX):
            continue
        with open(directory / name, encoding="utf-8") as f:
            record = json.load(f)
        if record.get("_entry_id") != entry_id:
            logger.debug("Skipping %s (entry %s)", name, record.get("_entry_id"))
            continue
        clean = {key: value for key, value in record.items() if not key.startswith("_")}
        section = get_section(result, record.get("_section") or [])
        section.setdefault("image", []).append(clean)
        for key, value in (record.get("_extras") or {}).items():
            section[key] = value
        stems.append(record["filename"])

    stems = sorted(set(stems))
    result["image_suffix"] = get_common_suffixes(all_files, stems)
    result["last_modification"] = last_modification_date or datetime.date.today().isoformat()

    manifest = {entry_id: result}
    write_text_atomic(paths.captions_json(str(directory), entry_id), json.dumps(manifest, indent=2))
    write_text_atomic(paths.filelist(str(directory), entry_id), "\n".join(stems))
    logger.info("Collected %d caption records for %s", len(stems), entry_id)
    return manifest


def get_section(obj: Dict[str, Any], section: Sequence[str]) -> Dict[str, Any]:
    """Nested mapping at ``section`` (e.g. ['a', 'b'] -> obj['a']['b']), created if missing."""
    for key in section:
        obj = obj.setdefault(key, {})
    return obj


def get_common_suffixes(names: Iterable[str], prefixes: Iterable[str]) -> List[str]:
    """Maximal sorted set of suffixes such that every prefix + suffix is in ``names``.

    Each name is matched against the longest prefix it starts with, so a
    stem like "ab" is never read as "a" + "b...".
    """
    names = list(names)
    name_set = set(names)
    prefixes = sorted(prefixes, reverse=True)  # longest matching prefix comes first
    all_suffixes = set()
    for name in names:
        prefix = next((p for p in prefixes if name.startswith(p)), None)
        if prefix is None:
            continue
        all_suffixes.add(name[len(prefix):])
    common = {
        suffix for suffix in all_suffixes
        if all(prefix + suffix in name_set for prefix in prefixes)
    }
    return sorted(common)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Collect image caption records into <entry>.json and <entry>_filelist",
    )
    parser.add_argument("directory", help="Directory with *.caption.json files")
    parser.add_argument("entry_id", help="PDB or AlphaFoldDB ID")
    parser.add_argument(
        "--date", default=None,
        help="last_modification date, YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    collect_captions(args.directory, args.entry_id, args.date)


if __name__ == "__main__":
    main()
