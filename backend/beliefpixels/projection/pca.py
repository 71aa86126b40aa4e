"""3D projection of embeddings: approximate PCA by power iteration.

Not an eigensolver: each of the three components starts from a random unit
vector and gets a fixed number of multiply/deflate/normalize rounds. Output
varies between runs unless a seeded ``rng`` is passed. The aim is a usable
visual spread, not exact principal axes.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

N_COMPONENTS = 3
POWER_ITERATIONS = 10
DEFAULT_SCALE = 5.0

_EPS = 1e-12


def _as_matrix(vectors: Sequence[Sequence[float]] | NDArray[np.float64]) -> NDArray[np.float64]:
    """Stack equal-length vectors into an (n, d) float matrix."""
    if isinstance(vectors, np.ndarray):
        matrix = vectors.astype(np.float64, copy=False)
        if matrix.ndim != 2:
            raise ValueError(f"Expected a 2D array of vectors, got shape {matrix.shape}")
        return matrix

    lengths = {len(v) for v in vectors}
    if len(lengths) > 1:
        raise ValueError(f"Vectors must share one length, got lengths {sorted(lengths)}")
    width = lengths.pop() if lengths else 0
    return np.asarray(vectors, dtype=np.float64).reshape(len(vectors), width)


def _unit(v: NDArray[np.float64]) -> NDArray[np.float64]:
    norm = float(np.linalg.norm(v))
    if norm < _EPS:
        return np.zeros_like(v)
    return v / norm


def covariance_matrix(centered: NDArray[np.float64]) -> NDArray[np.float64]:
    """Sample covariance (n-1 denominator) of already-centered rows."""
    n = centered.shape[0]
    return centered.T @ centered / (n - 1)


def power_iteration_components(
    cov: NDArray[np.float64],
    n_components: int = N_COMPONENTS,
    iterations: int = POWER_ITERATIONS,
    rng: np.random.Generator | None = None,
) -> NDArray[np.float64]:
    """Top components of ``cov`` as rows of a (n_components, d) matrix.

    Every round removes the projection onto earlier components before
    normalizing, which keeps the components roughly orthogonal.
    A component that collapses to zero (e.g. zero covariance) stays zero.
    """
    rng = rng if rng is not None else np.random.default_rng()
    d = cov.shape[0]
    components: list[NDArray[np.float64]] = []

    for _ in range(n_components):
        v = _unit(rng.random(d) - 0.5)
        for _ in range(iterations):
            w = cov @ v
            for prev in components:
                w = w - float(w @ prev) * prev
            v = _unit(w)
        components.append(v)

    return np.vstack(components)


def reduce_to_3d(
    embeddings: Sequence[Sequence[float]] | NDArray[np.float64],
    rng: np.random.Generator | None = None,
    iterations: int = POWER_ITERATIONS,
) -> NDArray[np.float64]:
    """Project embeddings to 3 coordinates each. Output keeps input order.

    - no embeddings → empty (0, 3)
    - one embedding → the origin
    - 3 or fewer dims → the input, zero-padded to 3 columns
    """
    n = len(embeddings)
    if n == 0:
        return np.zeros((0, N_COMPONENTS))

    data = _as_matrix(embeddings)
    if n == 1:
        return np.zeros((1, N_COMPONENTS))

    dims = data.shape[1]
    if dims <= N_COMPONENTS:
        out = np.zeros((n, N_COMPONENTS))
        out[:, :dims] = data
        return out

    centered = data - data.mean(axis=0)
    cov = covariance_matrix(centered)
    components = power_iteration_components(cov, N_COMPONENTS, iterations, rng)
    return centered @ components.T


def normalize_positions(
    positions: Sequence[Sequence[float]] | NDArray[np.float64],
    scale: float = DEFAULT_SCALE,
) -> NDArray[np.float64]:
    """Center the bounding box on the origin and fit the largest axis to ``scale``.

    All axes are divided by the single largest axis range, so proportions
    survive. After this the largest axis spans [-scale/2, scale/2].
    A set with no spread at all collapses onto the origin.
    """
    if len(positions) == 0:
        return np.zeros((0, N_COMPONENTS))

    pts = _as_matrix(positions)
    if pts.shape[1] < N_COMPONENTS:
        pts = np.hstack([pts, np.zeros((pts.shape[0], N_COMPONENTS - pts.shape[1]))])
    pts = pts[:, :N_COMPONENTS]

    mins = pts.min(axis=0)
    maxs = pts.max(axis=0)
    centers = (mins + maxs) / 2
    max_range = float((maxs - mins).max())
    if max_range == 0:
        max_range = 1.0

    return (pts - centers) / max_range * scale


def project_embeddings(
    embeddings: Sequence[Sequence[float]] | NDArray[np.float64],
    scale: float = DEFAULT_SCALE,
    rng: np.random.Generator | None = None,
) -> NDArray[np.float64]:
    """reduce_to_3d followed by normalize_positions."""
    return normalize_positions(reduce_to_3d(embeddings, rng=rng), scale)
