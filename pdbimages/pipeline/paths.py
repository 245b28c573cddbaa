"""Naming conventions shared by the planner, caption builders and collector.

Every output filename is derived here; nothing else in the package
formats a stem or a suffix by hand.

    stem                      1tqn_deposited_chain_front
    caption record            1tqn_deposited_chain_front.caption.json
    renderer state            1tqn_deposited_chain_front.molj
    image                     1tqn_deposited_chain_front_image-800x800.png
"""
from __future__ import annotations

import os
from typing import List, Optional

from pdbimages.interfaces.image_spec import ViewType
from pdbimages.interfaces.run_config import ImageSize

#: Views rendered when a type gets all views.
VIEWS = ("front", "side", "top")

#: Image types rendered in all three views under ``view="auto"``.
MULTI_VIEW_TYPES = frozenset({"entry", "assembly", "entity", "modres", "plddt"})

ENTRY_COLORINGS = ("chain", "chemically_distinct_molecules")


def views_for(image_type: str, view_mode: str) -> List[ViewType]:
    """Views to render for ``image_type``; ``[None]`` means one un-suffixed image."""
    if view_mode == "front":
        return [None]
    if view_mode == "all" or (view_mode == "auto" and image_type in MULTI_VIEW_TYPES):
        return list(VIEWS)
    if view_mode == "auto":
        return [None]
    raise ValueError(f"Invalid value for view: {view_mode}")


def view_suffix(view: ViewType) -> str:
    """'_front' for "front", '' for None."""
    return f"_{view}" if view else ""


# ── Stems ────────────────────────────────────────────────────────────

def entry_stem(entry_id: str, assembly_id: Optional[str], coloring: str, view: ViewType = None) -> str:
    """``coloring`` is "chain" or "chemically_distinct_molecules"."""
    prefix = f"assembly_{assembly_id}" if assembly_id else "deposited"
    return f"{entry_id}_{prefix}_{coloring}{view_suffix(view)}"


def entity_stem(entry_id: str, entity_id: str, view: ViewType = None) -> str:
    return f"{entry_id}_entity_{entity_id}{view_suffix(view)}"


def domain_stem(
    entry_id: str,
    entity_id: str,
    auth_chain_id: str,
    source: str,
    family_id: str,
    view: ViewType = None,
) -> str:
    return f"{entry_id}_{entity_id}_{auth_chain_id}_{source}_{family_id}{view_suffix(view)}"


def ligand_stem(entry_id: str, comp_id: str, view: ViewType = None) -> str:
    return f"{entry_id}_ligand_{comp_id}{view_suffix(view)}"


def modres_stem(entry_id: str, comp_id: str, view: ViewType = None) -> str:
    return f"{entry_id}_modres_{comp_id}{view_suffix(view)}"


def bfactor_stem(entry_id: str, view: ViewType = None) -> str:
    return f"{entry_id}_bfactor{view_suffix(view)}"


def validation_stem(entry_id: str, view: ViewType = None) -> str:
    return f"{entry_id}_validation_geometry_deposited{view_suffix(view)}"


def plddt_stem(entry_id: str, view: ViewType = None) -> str:
    return f"{entry_id}_plddt{view_suffix(view)}"


# ── Files ────────────────────────────────────────────────────────────

def _join(out_dir: Optional[str], name: str) -> str:
    return os.path.join(out_dir, name) if out_dir else name


def filelist(out_dir: Optional[str], entry_id: str) -> str:
    """e.g. ``out/1tqn_filelist``"""
    return _join(out_dir, f"{entry_id}_filelist")


def captions_json(out_dir: Optional[str], entry_id: str) -> str:
    """e.g. ``out/1tqn.json``"""
    return _join(out_dir, f"{entry_id}.json")


def expected_filelist(out_dir: Optional[str], entry_id: str) -> str:
    """e.g. ``out/1tqn_expected_files.txt``"""
    return _join(out_dir, f"{entry_id}_expected_files.txt")


def api_data_path(out_dir: Optional[str], entry_id: str) -> str:
    """e.g. ``out/1tqn_api_data.json``"""
    return _join(out_dir, f"{entry_id}_api_data.json")


def image_caption_json(out_dir: Optional[str], stem: str) -> str:
    return _join(out_dir, f"{stem}.caption.json")


def image_state_molj(out_dir: Optional[str], stem: str) -> str:
    return _join(out_dir, f"{stem}.molj")


def image_png(out_dir: Optional[str], stem: str, size: ImageSize) -> str:
    return _join(out_dir, f"{stem}_image-{size.width}x{size.height}.png")
