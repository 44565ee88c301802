"""Utility functions for the minefield solver."""

from typing import Dict, List, Tuple

# Offsets of the 8-neighbourhood as (dcol, drow); order fixes the order in
# which neighbours are visited, and therefore the order of the worklist.
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (1, 1),
    (1, 0),
    (1, -1),
    (0, 1),
    (0, -1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
)

# Module-level cache: (width, height) -> {(col,row): ((ncol,nrow), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[
    Tuple[int, int],
    Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]]
] = {}


def get_neighborhoods(
    width: int, height: int
) -> Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]]:
    """
    Precompute and cache 8-connected neighbor coordinates for every cell in a grid.

    Args:
        width: Grid width (number of columns). Must be positive.
        height: Grid height (number of rows). Must be positive.

    Returns:
        Mapping from each cell (col, row) to a tuple of valid neighboring
        coordinates under 8-connectivity, clipped to the grid.

    Raises:
        ValueError: If width or height is non-positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")

    key = (width, height)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]] = {}
    for row in range(height):
        for col in range(width):
            nbrs: List[Tuple[int, int]] = []
            for dc, dr in NEIGHBOR_OFFSETS:
                nc, nr = col + dc, row + dr
                if 0 <= nc < width and 0 <= nr < height:
                    nbrs.append((nc, nr))
            neighborhoods[(col, row)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[key] = neighborhoods
    return neighborhoods


def in_bounds(col: int, row: int, width: int, height: int) -> bool:
    """Return True if (col, row) lies on a width x height grid."""
    return 0 <= col < width and 0 <= row < height
