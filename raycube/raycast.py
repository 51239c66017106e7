"""Casting single rays through the map grid to find the nearest wall face."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from raycube.constants import IMG_SIZE, Side

_HALF_PI = math.pi / 2
_THREE_HALF_PI = 3 * math.pi / 2
_TWO_PI = 2 * math.pi
_SOLID_CELLS = ("1", " ", "\0")
_PROBE_NUDGE = 5

Grid = Sequence[str]
_AxisCheck = Callable[[Grid, float, float], bool]


@dataclass(frozen=True)
class RayHit:
    """Distance travelled by a ray and the face of the wall it struck."""

    length: float
    side: Side


def _columns(grid: Grid) -> int:
    return len(grid[0]) if grid else 0


def _cell_index(coord: float, limit: int) -> Optional[int]:
    """Cell index for a world coordinate, or None when it falls outside the map."""
    q = coord / IMG_SIZE
    if not math.isfinite(q) or q <= -1:
        return None
    index = int(q)
    return index if index < limit else None


def _column_in_range(grid: Grid, x: float, y: float) -> bool:
    return _cell_index(x, _columns(grid)) is not None


def _row_in_range(grid: Grid, x: float, y: float) -> bool:
    return _cell_index(y, len(grid)) is not None


def is_wall_point(grid: Grid, x: float, y: float) -> bool:
    """True if world point ``(x, y)`` lies in a wall, a void, or outside the map."""
    i = _cell_index(x, _columns(grid))
    j = _cell_index(y, len(grid))
    if i is None or j is None:
        return True
    row = grid[j]
    cell = row[i] if i < len(row) else "\0"
    return cell in _SOLID_CELLS


def _straight(
    grid: Grid, probe_x: float, probe_y: float, dx: float, dy: float, length: float
) -> float:
    """Walk an axis-aligned probe one cell at a time until it meets a wall."""
    while not is_wall_point(grid, probe_x, probe_y):
        probe_x += dx
        probe_y += dy
        length += IMG_SIZE
    return length


def _march(
    grid: Grid,
    x: float,
    y: float,
    dx: float,
    dy: float,
    first: float,
    periodic: float,
    in_range: _AxisCheck,
) -> float:
    """Follow grid crossings of one kind; 0 means the ray left the map first."""
    if not in_range(grid, x, y):
        return 0.0
    length = first
    while not is_wall_point(grid, x, y):
        x += dx
        y += dy
        length += periodic
        if not in_range(grid, x, y):
            return 0.0
    return length


def _nearest(line_len: float, col_len: float) -> float:
    if line_len == 0:
        return col_len
    if col_len == 0:
        return line_len
    return col_len if line_len >= col_len else line_len


def _cast_first(grid: Grid, x: float, y: float, angle: float) -> RayHit:
    i = int(x / IMG_SIZE)
    j = int(y / IMG_SIZE)
    if angle == 0:
        edge = (i + 1) * IMG_SIZE
        return RayHit(_straight(grid, edge, y, IMG_SIZE, 0, edge - x), Side.EAST)
    tan_a, sin_a, cos_a = math.tan(angle), math.sin(angle), math.cos(angle)

    delta_y = (j + 1) * IMG_SIZE - y
    delta_x = delta_y / tan_a
    periodic = IMG_SIZE / sin_a
    line_len = _march(
        grid, x + delta_x, y + delta_y, periodic * cos_a, IMG_SIZE,
        delta_y / sin_a, periodic, _column_in_range,
    )

    delta_x = (i + 1) * IMG_SIZE - x
    delta_y = delta_x * tan_a
    periodic = IMG_SIZE / cos_a
    col_len = _march(
        grid, x + delta_x, y + delta_y, IMG_SIZE, periodic * sin_a,
        delta_y / sin_a, periodic, _row_in_range,
    )

    if line_len == 0:
        side = Side.EAST
    elif col_len == 0:
        side = Side.SOUTH
    else:
        side = Side.EAST if col_len <= line_len else Side.SOUTH
    return RayHit(_nearest(line_len, col_len), side)


def _cast_second(grid: Grid, x: float, y: float, angle: float) -> RayHit:
    i = int(x / IMG_SIZE)
    j = int(y / IMG_SIZE)
    if angle == _HALF_PI:
        edge = (j + 1) * IMG_SIZE
        return RayHit(_straight(grid, x, edge, 0, IMG_SIZE, edge - y), Side.SOUTH)
    alpha = angle - _HALF_PI
    tan_a, sin_a, cos_a = math.tan(alpha), math.sin(alpha), math.cos(alpha)

    delta_y = (j + 1) * IMG_SIZE - y
    delta_x = delta_y * tan_a
    periodic = IMG_SIZE / cos_a
    line_len = _march(
        grid, x - delta_x, y + delta_y, -periodic * sin_a, IMG_SIZE,
        delta_y / cos_a, periodic, _column_in_range,
    )

    delta_x = x - i * IMG_SIZE
    delta_y = delta_x / tan_a
    periodic = IMG_SIZE / sin_a
    col_len = _march(
        grid, x - delta_x - _PROBE_NUDGE, y + delta_y, -IMG_SIZE,
        periodic * cos_a, delta_x / sin_a, periodic, _row_in_range,
    )

    if line_len == 0:
        side = Side.WEST
    elif col_len == 0:
        side = Side.SOUTH
    else:
        side = Side.SOUTH if line_len <= col_len else Side.WEST
    return RayHit(_nearest(line_len, col_len), side)


def _cast_third(grid: Grid, x: float, y: float, angle: float) -> RayHit:
    i = int(x / IMG_SIZE)
    j = int(y / IMG_SIZE)
    if angle == math.pi:
        return RayHit(
            _straight(
                grid, i * IMG_SIZE - _PROBE_NUDGE, y, -IMG_SIZE, 0,
                x - i * IMG_SIZE,
            ),
            Side.WEST,
        )
    alpha = angle - math.pi
    tan_a, sin_a, cos_a = math.tan(alpha), math.sin(alpha), math.cos(alpha)

    delta_y = y - j * IMG_SIZE
    delta_x = delta_y / tan_a
    periodic = IMG_SIZE / sin_a
    line_len = _march(
        grid, x - delta_x, y - delta_y - _PROBE_NUDGE, -IMG_SIZE / tan_a,
        -IMG_SIZE, delta_y / sin_a, periodic, _column_in_range,
    )

    delta_x = x - i * IMG_SIZE
    delta_y = delta_x * tan_a
    periodic = IMG_SIZE / cos_a
    col_len = _march(
        grid, x - delta_x - _PROBE_NUDGE, y - delta_y, -IMG_SIZE,
        -IMG_SIZE * math.tan(angle), delta_x / cos_a, periodic, _row_in_range,
    )

    if line_len == 0:
        side = Side.WEST
    elif col_len == 0:
        side = Side.NORTH
    else:
        side = Side.WEST if col_len <= line_len else Side.NORTH
    return RayHit(_nearest(line_len, col_len), side)


def _cast_fourth(grid: Grid, x: float, y: float, angle: float) -> RayHit:
    i = int(x / IMG_SIZE)
    j = int(y / IMG_SIZE)
    if angle == _THREE_HALF_PI:
        return RayHit(
            _straight(
                grid, x, j * IMG_SIZE - _PROBE_NUDGE, 0, -IMG_SIZE,
                y - j * IMG_SIZE,
            ),
            Side.NORTH,
        )
    alpha = angle - _THREE_HALF_PI
    tan_a, sin_a, cos_a = math.tan(alpha), math.sin(alpha), math.cos(alpha)

    delta_y = y - j * IMG_SIZE
    delta_x = delta_y * tan_a
    periodic = IMG_SIZE / cos_a
    line_len = _march(
        grid, x + delta_x, y - delta_y - _PROBE_NUDGE, periodic * sin_a,
        -IMG_SIZE, delta_y / cos_a, periodic, _column_in_range,
    )

    delta_x = (i + 1) * IMG_SIZE - x
    delta_y = delta_x / tan_a
    periodic = IMG_SIZE / sin_a
    col_len = _march(
        grid, x + delta_x, y - delta_y, IMG_SIZE, -IMG_SIZE / tan_a,
        delta_x / sin_a, periodic, _row_in_range,
    )

    if col_len == 0:
        side = Side.NORTH
    elif line_len == 0:
        side = Side.EAST
    else:
        side = Side.NORTH if line_len < col_len else Side.EAST
    return RayHit(_nearest(line_len, col_len), side)


def cast_ray(grid: Grid, x: float, y: float, angle: float) -> RayHit:
    """Cast a ray from world point ``(x, y)`` at ``angle`` in ``[0, 2*pi)``."""
    if not 0 <= angle < _TWO_PI:
        raise ValueError(f"ray angle outside [0, 2*pi): {angle!r}")
    if angle < _HALF_PI:
        return _cast_first(grid, x, y, angle)
    if angle < math.pi:
        return _cast_second(grid, x, y, angle)
    if angle < _THREE_HALF_PI:
        return _cast_third(grid, x, y, angle)
    return _cast_fourth(grid, x, y, angle)