"""
Spatial Index Adapter API

Provides a stable interface for radius and nearest-within-radius queries
over a snapshot of 2D points (food, predators, prey).

Backends:
- scipy.cKDTree (default, O(log N) candidate search)
- O(n) linear scan (USE_CKDTREE = False, used for A/B comparison)

Both backends return identical results: candidates are filtered with a
strict `distance < radius` test, ordered by ascending row index, and
distances are computed with the same formula.
"""

import numpy as np
import time
from typing import Optional, Tuple
from scipy.spatial import cKDTree

from . import constants


_EMPTY_ROWS = np.empty(0, dtype=np.int64)
_EMPTY_DISTANCES = np.empty(0, dtype=np.float64)


# ============================================================================
# O(n) Fallback Implementations
# ============================================================================

def points_within(
    positions: np.ndarray,
    point: np.ndarray,
    radius: float
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Find all points strictly closer than radius.

    Args:
        positions: (N, 2) array of points
        point: Query point [x, y]
        radius: Search radius

    Returns:
        Tuple of (rows, distances), rows in ascending order
    """
    if len(positions) == 0:
        return _EMPTY_ROWS, _EMPTY_DISTANCES

    distances = np.linalg.norm(positions - point, axis=1)
    rows = np.nonzero(distances < radius)[0].astype(np.int64)
    return rows, distances[rows]


def nearest_within(
    positions: np.ndarray,
    point: np.ndarray,
    radius: float
) -> Tuple[Optional[int], float]:
    """
    Find nearest point strictly closer than radius.

    Tie-breaking:
        Equal distances resolved by lowest row (first in scan order)

    Returns:
        Tuple of (row or None, distance or inf)
    """
    rows, distances = points_within(positions, point, radius)
    return _pick_nearest(rows, distances)


def _pick_nearest(rows: np.ndarray, distances: np.ndarray) -> Tuple[Optional[int], float]:
    if len(rows) == 0:
        return None, float('inf')
    # argmin returns first occurrence, rows are ascending
    best = int(np.argmin(distances))
    return int(rows[best]), float(distances[best])


# ============================================================================
# SpatialIndexAdapter Class with cKDTree
# ============================================================================

class SpatialIndexAdapter:
    """
    Spatial index adapter with stable API.

    Backend selection via constants.USE_CKDTREE:
    - True: Uses scipy.cKDTree for candidate search
    - False: Uses O(n) fallback implementations

    A built index is a snapshot: later changes to the source array are not
    seen until build() is called again.
    """

    def __init__(self, use_ckdtree: Optional[bool] = None, leafsize: Optional[int] = None):
        """
        Initialize spatial adapter.

        Args:
            use_ckdtree: Override USE_CKDTREE constant (for testing)
            leafsize: Override CKDTREE_LEAFSIZE constant (for testing)
        """
        self._use_ckdtree = use_ckdtree if use_ckdtree is not None else constants.USE_CKDTREE
        self._leafsize = leafsize if leafsize is not None else constants.CKDTREE_LEAFSIZE
        self._positions: np.ndarray = np.empty((0, 2), dtype=np.float64)
        self._tree: Optional[cKDTree] = None

        # Build timing (for performance breakdown logging)
        self.last_build_ms: float = 0.0

    @property
    def use_ckdtree(self) -> bool:
        return self._use_ckdtree

    @property
    def positions(self) -> np.ndarray:
        """(N, 2) snapshot the index was built from"""
        return self._positions

    def __len__(self) -> int:
        return len(self._positions)

    def build(self, positions: np.ndarray):
        """
        Build spatial index from a positions array.

        cKDTree mode: Constructs tree from positions
        Fallback mode: Just stores the array

        Args:
            positions: (N, 2) array of points (N may be 0)

        Raises:
            ValueError: If positions is not shaped (N, 2)
        """
        positions = np.asarray(positions, dtype=np.float64)
        if positions.size == 0:
            positions = positions.reshape(0, 2)
        if positions.ndim != 2 or positions.shape[1] != 2:
            raise ValueError(f"positions must be shaped (N, 2), got {positions.shape}")

        self._positions = positions
        self.last_build_ms = 0.0

        if self._use_ckdtree and len(positions) > 0:
            build_start = time.perf_counter()
            self._tree = cKDTree(positions, leafsize=self._leafsize)
            self.last_build_ms = (time.perf_counter() - build_start) * 1000.0
        else:
            self._tree = None

    def within(self, point: np.ndarray, radius: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Find all indexed points strictly closer than radius.

        cKDTree mode: query_ball_point, then strict distance filter
        Fallback mode: Delegate to O(n) function

        Returns:
            Tuple of (rows, distances), rows in ascending order
        """
        if self._use_ckdtree and self._tree is not None:
            return self._within_ckdtree(point, radius)
        else:
            return points_within(self._positions, point, radius)

    def nearest_within(self, point: np.ndarray, radius: float) -> Tuple[Optional[int], float]:
        """
        Find nearest indexed point strictly closer than radius.

        Returns:
            Tuple of (row or None, distance or inf)
        """
        rows, distances = self.within(point, radius)
        return _pick_nearest(rows, distances)

    def _within_ckdtree(self, point: np.ndarray, radius: float) -> Tuple[np.ndarray, np.ndarray]:
        if radius <= 0.0:
            return _EMPTY_ROWS, _EMPTY_DISTANCES

        candidates = self._tree.query_ball_point(point, radius)
        if not candidates:
            return _EMPTY_ROWS, _EMPTY_DISTANCES

        rows = np.sort(np.asarray(candidates, dtype=np.int64))

        # Same distance formula as the O(n) path, ball query is inclusive
        distances = np.linalg.norm(self._positions[rows] - point, axis=1)
        keep = distances < radius
        return rows[keep], distances[keep]
