"""The small overhead map drawn in the top-left corner of the view."""

from __future__ import annotations

import math
from typing import Sequence

from raycube.constants import (
    IMG_SIZE,
    MINI_COLS,
    MINI_HEIGHT,
    MINI_LINES,
    MINI_TILE,
    MINI_WIDTH,
)
from raycube.game import Game, Player
from raycube.render import Frame

_BACKGROUND = 0xD3D3D3
_WALL = 0x343534
_PLAYER = 0x011826
_DIRECTION = 0x012840
_DIRECTION_LENGTH = 15
_SOLID_CELLS = ("1", " ", "\0")
_PLAYER_SHAPE = (
    (0, 0), (1, 0), (-1, 0), (0, 1), (0, -1),
    (2, 0), (-2, 0), (0, 2), (0, -2),
    (1, 1), (-1, -1), (-1, 1), (1, -1),
)


def _trunc_mod(a: int, b: int) -> int:
    r = abs(a) % b
    return -r if a < 0 else r


def draw_background(frame: Frame) -> None:
    """Paint the minimap area in its background color."""
    frame.pixels[:MINI_HEIGHT, :MINI_WIDTH] = _BACKGROUND


def draw_tile(frame: Frame, i_mini: int, j_mini: int) -> None:
    """Paint the wall tile at minimap column ``i_mini`` and row ``j_mini``."""
    x0 = i_mini * MINI_TILE
    y0 = j_mini * MINI_TILE
    for y in range(y0, y0 + MINI_TILE):
        for x in range(x0, x0 + MINI_TILE):
            frame.put_pixel(x, y, _WALL)


def first_tile(player: Player) -> tuple[int, int]:
    """Map cell ``(i, j)`` shown in the minimap's top-left tile."""
    i_map = int(player.x / IMG_SIZE) - MINI_COLS // 2
    j_map = int(player.y / IMG_SIZE) - MINI_LINES // 2
    return i_map, j_map


def is_solid_cell(grid: Sequence[str], i_map: int, j_map: int) -> bool:
    """True for walls, voids and cells outside the map."""
    if i_map < 0 or j_map < 0:
        return True
    columns = len(grid[0]) if grid else 0
    if i_map >= columns or j_map >= len(grid):
        return True
    row = grid[j_map]
    cell = row[i_map] if i_map < len(row) else "\0"
    return cell in _SOLID_CELLS


def draw_walls(frame: Frame, game: Game) -> None:
    """Paint a tile for every solid cell around the player."""
    i_first, j_first = first_tile(game.player)
    for j_mini in range(MINI_LINES):
        for i_mini in range(MINI_COLS):
            if is_solid_cell(game.grid, i_first + i_mini, j_first + j_mini):
                draw_tile(frame, i_mini, j_mini)


def draw_player(frame: Frame, game: Game) -> None:
    """Draw the player marker in the centre tile and a short facing line."""
    player = game.player
    x_tile = _trunc_mod(int(player.x), IMG_SIZE)
    y_tile = _trunc_mod(int(player.y), IMG_SIZE)
    dx_mini = (MINI_TILE - 1) * x_tile // (IMG_SIZE - 1)
    dy_mini = (MINI_TILE - 1) * y_tile // (IMG_SIZE - 1)
    px = ((MINI_WIDTH // MINI_TILE) // 2) * MINI_TILE + dx_mini
    py = ((MINI_HEIGHT // MINI_TILE) // 2) * MINI_TILE + dy_mini
    for ox, oy in _PLAYER_SHAPE:
        frame.put_pixel(px + ox, py + oy, _PLAYER)
    dir_x = math.cos(player.angle)
    dir_y = math.sin(player.angle)
    for step in range(_DIRECTION_LENGTH):
        frame.put_pixel(int(px + step * dir_x), int(py + step * dir_y), _DIRECTION)


def draw_minimap(frame: Frame, game: Game) -> None:
    """Draw the whole minimap: background, walls, then the player."""
    draw_background(frame)
    draw_walls(frame, game)
    draw_player(frame, game)