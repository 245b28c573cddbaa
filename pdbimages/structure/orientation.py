"""Orientation Solver — canonical 3D orientation via principal-axis analysis.

The rotation returned by :func:`canonical_rotation` is applied to the
whole scene so that the structure lies with its longest dimension along
X, the second along Y and the shortest along Z (towards the viewer).
The remaining sign ambiguity of PCA is resolved deterministically:

* **Reference mode**: pick the 180-degree flip closest to a reference
  rotation, so that a sub-selection (e.g. one entity) rendered later has
  the same orientation as the whole structure.
* **Canonical mode**: pick the flip after which the start and end of the
  atom sequence tend to be in front (z > 0) and the start tends to be top
  left while the end tends to be bottom right.

All matrices are 3x3 numpy arrays acting on column vectors
(``rotated = R @ v``).
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

import numpy as np

from pdbimages.helpers.warnings_policy import WarningPolicy
from pdbimages.interfaces.structure_data import StructureData
from pdbimages.structure.camera import combine_rotations

logger = logging.getLogger(__name__)

MIN_ATOMS_FOR_PCA = 3

ROTATION_MATRICES: Dict[str, np.ndarray] = {
    "eye": np.eye(3),
    "rotX90": np.array([[1, 0, 0], [0, 0, -1], [0, 1, 0]], dtype=float),
    "rotY90": np.array([[0, 0, 1], [0, 1, 0], [-1, 0, 0]], dtype=float),
    "rotZ90": np.array([[0, -1, 0], [1, 0, 0], [0, 0, 1]], dtype=float),
    "rotX270": np.array([[1, 0, 0], [0, 0, 1], [0, -1, 0]], dtype=float),
    "rotY270": np.array([[0, 0, -1], [0, 1, 0], [1, 0, 0]], dtype=float),
    "rotZ270": np.array([[0, 1, 0], [-1, 0, 0], [0, 0, 1]], dtype=float),
    "rotX180": np.diag([1.0, -1.0, -1.0]),
    "rotY180": np.diag([-1.0, 1.0, -1.0]),
    "rotZ180": np.diag([-1.0, -1.0, 1.0]),
}

#: Candidate flips for reference mode, in tie-break order.
FLIP_CANDIDATES = ("eye", "rotX180", "rotY180", "rotZ180")


# ---------------------------------------------------------------------------
# Atom selection
# ---------------------------------------------------------------------------

def select_main_coords(structure: StructureData, min_atoms: int = MIN_ATOMS_FOR_PCA) -> np.ndarray:
    """Coordinates used for PCA, trying selections until ``min_atoms`` are found.

    1. polymer trace atoms (C-alpha, O3')
    2. all non-hydrogen atoms except water
    3. all atoms

    Atoms are taken unit by unit, in unit order.
    """
    trace = [i for unit in structure.units for i in unit if structure.is_trace_atom(i)]
    if len(trace) >= min_atoms:
        return structure.coords(trace)

    atoms = structure.atoms
    heavy = [
        i for unit in structure.units for i in unit
        if atoms.element[i] != "H" and atoms.comp_id[i] != "HOH"
    ]
    if len(heavy) >= min_atoms:
        return structure.coords(heavy)

    return structure.coords([i for unit in structure.units for i in unit])


# ---------------------------------------------------------------------------
# PCA
# ---------------------------------------------------------------------------

def principal_axes(coords: np.ndarray):
    """Return ``(rotation, origin)`` for an (N, 3) coordinate array.

    Rows of ``rotation`` are the normalized principal axes, ordered by
    decreasing variance; ``origin`` is the mean of the coordinates.
    """
    coords = np.asarray(coords, dtype=float)
    origin = coords.mean(axis=0)
    centered = coords - origin
    covariance = centered.T @ centered
    u, _, _ = np.linalg.svd(covariance)
    rotation = u.T.copy()
    rotation /= np.linalg.norm(rotation, axis=1, keepdims=True)
    return rotation, origin


def avoid_mirror_rotation(rotation: np.ndarray) -> np.ndarray:
    """Negate the third axis if ``rotation`` includes mirroring."""
    result = np.array(rotation, dtype=float)
    if np.linalg.det(result) < 0:
        result[2, :] = -result[2, :]
    return result


def minimal_flip(rotation: np.ndarray, reference_rotation: np.ndarray) -> np.ndarray:
    """Flip (one of :data:`FLIP_CANDIDATES`) bringing ``rotation`` closest to the reference.

    Similarity is the element-wise dot product of the two matrices; ties
    keep the earlier candidate.
    """
    reference = np.asarray(reference_rotation, dtype=float)
    best_flip = ROTATION_MATRICES["eye"]
    best_score = 0.0  # at least one candidate always scores positive
    for name in FLIP_CANDIDATES:
        flip = ROTATION_MATRICES[name]
        score = float(np.sum((flip @ rotation) * reference))
        if score > best_score:
            best_flip = flip
            best_score = score
    return best_flip.copy()


def vee_slope(i: int, n: int) -> int:
    """V-shaped weight over a sequence of length ``n``: high at both ends, 0 in the middle."""
    mid = n // 2
    if i < mid:
        return mid - i if n % 2 else mid - i - 1
    return i - mid


def canonical_flip(coords: np.ndarray, rotation: np.ndarray, origin: np.ndarray) -> np.ndarray:
    """Flip to apply after ``rotation`` to reach the canonical orientation.

    ``origin`` must be the mean of ``coords``.
    """
    centered = np.asarray(coords, dtype=float) - origin
    n = len(centered)
    index = np.arange(n, dtype=float)
    vee = np.array([vee_slope(i, n) for i in range(n)], dtype=float)
    x_cum = float(np.sum(index * (centered @ rotation[0])))
    y_cum = float(np.sum(index * (centered @ rotation[1])))
    z_cum = float(np.sum(vee * (centered @ rotation[2])))

    wrong_front_back = z_cum < 0
    wrong_lt_rb = (x_cum + y_cum < 0) if wrong_front_back else (x_cum - y_cum < 0)
    if wrong_lt_rb and wrong_front_back:
        return ROTATION_MATRICES["rotY180"].copy()  # around X, then Z
    if wrong_front_back:
        return ROTATION_MATRICES["rotX180"].copy()
    if wrong_lt_rb:
        return ROTATION_MATRICES["rotZ180"].copy()
    return np.eye(3)


def canonical_rotation(
    coords: np.ndarray,
    reference_rotation: Optional[np.ndarray] = None,
    warning_policy: Optional[WarningPolicy] = None,
) -> np.ndarray:
    """Rotation laying the point cloud ``coords`` (N, 3) along its principal axes.

    Returns the identity (with a warning) for an empty point cloud.
    The result is always a proper rotation (det = +1).
    """
    coords = np.asarray(coords, dtype=float).reshape(-1, 3)
    if len(coords) == 0:
        (warning_policy or WarningPolicy()).warn("Skipping PCA, no atoms", logger)
        return np.eye(3)
    rotation, origin = principal_axes(coords)
    rotation = avoid_mirror_rotation(rotation)
    if reference_rotation is not None:
        flip = minimal_flip(rotation, reference_rotation)
    else:
        flip = canonical_flip(coords, rotation, origin)
    return flip @ rotation


def structure_laying_rotation(
    structure: StructureData,
    reference_rotation: Optional[np.ndarray] = None,
    warning_policy: Optional[WarningPolicy] = None,
) -> np.ndarray:
    """:func:`canonical_rotation` of the main atoms of ``structure``."""
    coords = select_main_coords(structure, MIN_ATOMS_FOR_PCA)
    logger.debug("PCA on %d atoms", len(coords))
    return canonical_rotation(coords, reference_rotation, warning_policy)


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

def view_rotations(rotation: np.ndarray, views: Optional[List[str]] = None) -> Dict[str, np.ndarray]:
    """Front/side/top scene rotations derived from a canonical rotation."""
    all_views = {
        "front": np.array(rotation, dtype=float),
        "side": combine_rotations(rotation, ROTATION_MATRICES["rotY270"]),
        "top": combine_rotations(rotation, ROTATION_MATRICES["rotX90"]),
    }
    if views is None:
        return all_views
    return {view: all_views[view] for view in views}
