"""Placement grid rules: rectangle shape and per-breakpoint non-overlap. Pure, no I/O."""
from __future__ import annotations
from bisect import bisect_left
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from app.domain.common.errors import GridError
from app.domain.common.result import Result
from app.domain.dashboard.models import PlacementSpec

_END = 0
_START = 1

# Grid units. Keeps every edge well inside SQLite's 64-bit INTEGER.
MAX_GRID_EXTENT = 100_000


def check_dimensions(index: int, p: PlacementSpec) -> Optional[GridError]:
    if p.width <= 0 or p.height <= 0:
        return GridError.invalid_dimensions(
            index, f"Placement {index} has invalid size {p.width}x{p.height}; width and height must be positive."
        )
    if p.position_x < 0 or p.position_y < 0:
        return GridError.invalid_dimensions(
            index, f"Placement {index} has negative position ({p.position_x}, {p.position_y})."
        )
    if p.right > MAX_GRID_EXTENT or p.bottom > MAX_GRID_EXTENT:
        return GridError.invalid_dimensions(
            index, f"Placement {index} extends past the grid limit of {MAX_GRID_EXTENT} units."
        )
    return None


def group_by_layout(placements: Sequence[PlacementSpec]) -> Dict[str, List[int]]:
    """Indexes of `placements` keyed by layout_type, in input order."""
    groups: Dict[str, List[int]] = defaultdict(list)
    for index, p in enumerate(placements):
        groups[p.layout_type].append(index)
    return dict(groups)


def find_overlap(placements: Sequence[PlacementSpec], indexes: List[int]) -> Optional[Tuple[int, int]]:
    """
    Sweep a vertical line left to right over one layout group.

    Rectangles are half-open, so shared edges do not count. While no overlap
    has been found, the y-intervals crossing the sweep line are pairwise
    disjoint, so checking the two neighbours of a new interval in the
    ordered active set is enough.
    """
    events = []
    for i in indexes:
        p = placements[i]
        events.append((p.position_x, _START, i))
        events.append((p.right, _END, i))
    # Ends sort before starts at the same x
    events.sort()

    active_starts: List[int] = []
    active: List[Tuple[int, int, int]] = []  # (y_start, y_end, index)

    for _, kind, i in events:
        p = placements[i]
        pos = bisect_left(active_starts, p.position_y)
        if kind == _END:
            del active_starts[pos]
            del active[pos]
            continue
        if pos > 0 and active[pos - 1][1] > p.position_y:
            return active[pos - 1][2], i
        if pos < len(active) and active[pos][0] < p.bottom:
            return active[pos][2], i
        active_starts.insert(pos, p.position_y)
        active.insert(pos, (p.position_y, p.bottom, i))
    return None


def validate_placement_set(placements: Sequence[PlacementSpec]) -> Result[None]:
    """
    Accepts the set iff every rectangle has positive size and no two
    rectangles sharing a layout_type intersect with positive area.
    Unknown layout types are just another group.
    """
    for index, p in enumerate(placements):
        error = check_dimensions(index, p)
        if error is not None:
            return Result.fail(error)

    for layout_type, indexes in group_by_layout(placements).items():
        pair = find_overlap(placements, indexes)
        if pair is not None:
            return Result.fail(GridError.overlap(pair, layout_type))
    return Result.ok(None)
