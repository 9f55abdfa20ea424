"""
Small deterministic triangle meshes for the avatar parts.

Every generator returns `(vertices, faces)`: an (N,3) float array and an
(M,3) int array of triangle indices. Shapes are centred on the origin with
+y up, matching the part transforms produced by `morph`.
"""
from typing import Sequence, Tuple

import numpy as np

Geometry = Tuple[np.ndarray, np.ndarray]


def _grid_faces(rows: int, cols: int) -> np.ndarray:
    """Triangulate a rows x cols vertex grid laid out row-major."""
    r, c = np.meshgrid(np.arange(rows - 1), np.arange(cols - 1), indexing='ij')
    a = (r * cols + c).ravel()
    b = a + cols
    faces = np.empty((a.size * 2, 3), dtype=int)
    faces[0::2] = np.stack([a, b, a + 1], axis=-1)
    faces[1::2] = np.stack([b + 1, a + 1, b], axis=-1)
    return faces


def lathe(profile: Sequence[Sequence[float]], segments: int = 24) -> Geometry:
    """Revolve a (radius, height) profile around the y axis.

    The seam is duplicated (segments + 1 columns) so each column of the grid
    is one full copy of the profile.
    """
    if segments < 3:
        raise ValueError(f"lathe needs at least 3 segments, got {segments}")
    pts = np.asarray(profile, dtype=float)
    if pts.ndim != 2 or pts.shape[1] != 2 or pts.shape[0] < 2:
        raise ValueError("lathe profile must be a sequence of at least two (radius, height) points")
    phi = np.linspace(0.0, 2.0 * np.pi, segments + 1)
    radius = pts[:, 0][None, :]
    x = radius * np.sin(phi)[:, None]
    z = radius * np.cos(phi)[:, None]
    y = np.broadcast_to(pts[:, 1][None, :], x.shape)
    verts = np.stack([x, y, z], axis=-1).reshape(-1, 3)
    # rows = angular columns, cols = profile points
    faces = _grid_faces(segments + 1, pts.shape[0])
    return verts, faces


def sphere(radius: float, segments: int = 16) -> Geometry:
    rings = max(2, segments // 2)
    theta = np.linspace(0.0, np.pi, rings + 1)
    profile = np.stack([radius * np.sin(theta), -radius * np.cos(theta)], axis=-1)
    return lathe(profile, segments)


def capsule(radius: float, length: float, segments: int = 16, cap_segments: int = 4) -> Geometry:
    """Cylinder of `length` capped with hemispheres (total height length + 2*radius)."""
    a = np.linspace(-np.pi / 2, 0.0, cap_segments + 1)
    lower = np.stack([radius * np.cos(a), -length / 2 + radius * np.sin(a)], axis=-1)
    upper = np.stack([radius * np.cos(-a[::-1]), length / 2 + radius * np.sin(-a[::-1])], axis=-1)
    return lathe(np.vstack([lower, upper]), segments)


def cylinder(radius_top: float, radius_bottom: float, height: float, segments: int = 16) -> Geometry:
    h = height / 2.0
    profile = [(0.0, -h), (radius_bottom, -h), (radius_top, h), (0.0, h)]
    return lathe(profile, segments)


def box(width: float, height: float, depth: float) -> Geometry:
    w, h, d = width / 2.0, height / 2.0, depth / 2.0
    verts = np.array([
        [-w, -h, -d], [w, -h, -d], [w, h, -d], [-w, h, -d],
        [-w, -h, d], [w, -h, d], [w, h, d], [-w, h, d],
    ], dtype=float)
    faces = np.array([
        [0, 2, 1], [0, 3, 2],  # back
        [4, 5, 6], [4, 6, 7],  # front
        [0, 1, 5], [0, 5, 4],  # bottom
        [3, 7, 6], [3, 6, 2],  # top
        [0, 4, 7], [0, 7, 3],  # left
        [1, 2, 6], [1, 6, 5],  # right
    ], dtype=int)
    return verts, faces


def polygon(points: Sequence[Sequence[float]]) -> Geometry:
    """Flat fan-triangulated convex polygon in the z=0 plane."""
    pts = np.asarray(points, dtype=float)
    verts = np.hstack([pts, np.zeros((pts.shape[0], 1))])
    faces = np.array([[0, i, i + 1] for i in range(1, pts.shape[0] - 1)], dtype=int)
    return verts, faces
