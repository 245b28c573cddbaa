"""Camera snapshot maths for the rendering collaborator.

The renderer owns the actual camera; this module only computes new
snapshots from old ones.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict

import numpy as np

#: Default zoom-out after fitting the whole scene into the viewport.
ZOOMOUT = 0.75


@dataclass(frozen=True)
class CameraSnapshot:
    """Camera position, target and up vector (3-vectors), plus scene radius."""
    position: np.ndarray
    target: np.ndarray
    up: np.ndarray
    radius: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": [float(v) for v in self.position],
            "target": [float(v) for v in self.target],
            "up": [float(v) for v in self.up],
            "radius": float(self.radius),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> CameraSnapshot:
        return cls(
            position=np.asarray(d["position"], dtype=float),
            target=np.asarray(d["target"], dtype=float),
            up=np.asarray(d["up"], dtype=float),
            radius=float(d.get("radius", 0.0)),
        )


def change_camera_zoom(old: CameraSnapshot, zoomout: float) -> CameraSnapshot:
    """Same target and orientation, camera nearer (``zoomout < 1``) or farther (``> 1``)."""
    rel_position = (np.asarray(old.position, dtype=float) - old.target) * zoomout
    return replace(old, position=old.target + rel_position)


def change_camera_rotation(old: CameraSnapshot, rotation: np.ndarray) -> CameraSnapshot:
    """Same target and distance, orientation given by ``rotation``.

    The camera is rotated by the inverse of ``rotation``, which looks the
    same as applying ``rotation`` to the scene.  The rotation is relative to
    the default orientation (looking down -Z with Y up), not to ``old``.
    """
    camera_rotation = np.linalg.inv(np.asarray(rotation, dtype=float))
    dist = float(np.linalg.norm(np.asarray(old.position, dtype=float) - old.target))
    rel_position = camera_rotation @ np.array([0.0, 0.0, dist])
    new_up = camera_rotation @ np.array([0.0, 1.0, 0.0])
    return replace(old, position=old.target + rel_position, up=new_up)


def combine_rotations(*matrices: np.ndarray) -> np.ndarray:
    """Combine rotations given in the order they are applied.

    The first applied rotation is the rightmost factor of the product.
    """
    result = np.eye(3)
    for matrix in matrices:
        result = np.asarray(matrix, dtype=float) @ result
    return result
