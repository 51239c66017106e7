"""Reading and validating ``.cub`` scene description files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from raycube.textutil import (
    erase_key,
    is_blank,
    parse_uint,
    read_lines,
    split,
    trim_spaces,
)

_HEADER_LINES = 6
_VALID_CELLS = frozenset("10 NSWE")
_PLAYER_CELLS = frozenset("NSWE")
_WALKABLE_CELLS = _PLAYER_CELLS | {"0"}
_OPEN_NEIGHBOURS = (" ", "\0")
_TEXTURE_KEYS = {"NO": "north", "SO": "south", "WE": "west", "EA": "east"}


class SceneError(ValueError):
    """Raised when a scene description is malformed."""


def parse_color(text: str) -> int:
    """Turn ``"R,G,B"`` into a packed ``0xRRGGBB`` integer."""
    if text.count(",") != 2:
        raise SceneError(f"a color needs exactly two commas: {text!r}")
    parts = split(text, ",")
    if len(parts) != 3:
        raise SceneError(f"a color needs three components: {text!r}")
    channels = []
    for part in parts:
        try:
            value = parse_uint(part)
        except ValueError as exc:
            raise SceneError(f"invalid color component: {part!r}") from exc
        if value > 255:
            raise SceneError(f"color component out of range: {part!r}")
        channels.append(value)
    red, green, blue = channels
    return red << 16 | green << 8 | blue


@dataclass
class Scene:
    """Textures, colors, map grid and player start of one level."""

    north: Optional[str] = None
    south: Optional[str] = None
    west: Optional[str] = None
    east: Optional[str] = None
    floor: Optional[int] = None
    ceiling: Optional[int] = None
    grid: list[str] = field(default_factory=list)
    player_row: int = 0
    player_col: int = 0
    player_dir: str = ""

    def set_texture(self, line: str) -> None:
        """Record a ``NO|SO|WE|EA <path>`` line; each key may appear once."""
        parts = split(line, " ")
        if len(parts) != 2:
            raise SceneError("in texture")
        key, path = parts
        attribute = _TEXTURE_KEYS.get(key)
        if attribute is None or getattr(self, attribute) is not None:
            raise SceneError("in texture")
        setattr(self, attribute, path)

    def set_color(self, line: str) -> None:
        """Record a floor (``F``) or ceiling (``C``) color line."""
        kind = line[:1]
        if kind == "F":
            what = "floor"
        elif kind == "C":
            what = "ceiling"
        else:
            raise SceneError("in texture")
        try:
            color = parse_color(erase_key(line))
        except SceneError as exc:
            raise SceneError(f"in {what}") from exc
        setattr(self, what, color)

    def _is_complete(self) -> bool:
        return None not in (
            self.north,
            self.south,
            self.west,
            self.east,
            self.floor,
            self.ceiling,
        )


def collect_lines(lines: Iterable[str]) -> list[str]:
    """Keep header lines and map rows, dropping blank lines before the map.

    Once the map has started, a blank line may only be followed by more
    blank lines.
    """
    kept: list[str] = []
    gap_seen = False
    for line in lines:
        blank = is_blank(line)
        if blank and len(kept) <= _HEADER_LINES:
            continue
        if not blank and gap_seen:
            raise SceneError("Empty line in Map")
        if blank:
            gap_seen = True
        kept.append(line)
    return kept


def make_rectangular(lines: Iterable[str]) -> list[str]:
    """Strip line terminators and pad every row with spaces to a common width."""
    rows = [line[:-1] if line.endswith("\n") else line for line in lines]
    width = max((len(row) for row in rows), default=0)
    return [row.ljust(width) for row in rows]


def _cell(rows: list[str], row: int, col: int) -> str:
    if 0 <= row < len(rows) and 0 <= col < len(rows[row]):
        return rows[row][col]
    return "\0"


def validate_map(grid: Iterable[str]) -> tuple[list[str], int, int, str]:
    """Check that the map is closed and holds exactly one player.

    Returns the grid with the player cell replaced by ``'0'``, followed by
    the player's row, column and facing letter.
    """
    rows = list(grid)
    height = len(rows)
    player: Optional[tuple[int, int, str]] = None
    for r, row in enumerate(rows):
        if is_blank(row):
            break
        width = len(row)
        for c, ch in enumerate(row):
            if ch not in _VALID_CELLS:
                raise SceneError("Map is not valid")
            if ch not in _WALKABLE_CELLS:
                continue
            if r == 0 or c == 0 or r == height - 1 or c == width - 1:
                raise SceneError("Map is not closed")
            neighbours = (
                _cell(rows, r, c + 1),
                _cell(rows, r, c - 1),
                _cell(rows, r + 1, c),
                _cell(rows, r - 1, c),
            )
            if any(n in _OPEN_NEIGHBOURS for n in neighbours):
                raise SceneError("Map is not closed")
            if ch in _PLAYER_CELLS:
                if player is not None:
                    raise SceneError("Multiple players")
                player = (r, c, ch)
                rows[r] = rows[r][:c] + "0" + rows[r][c + 1:]
    if player is None:
        raise SceneError("No map or No player")
    return (rows, *player)


def parse_scene_lines(lines: Iterable[str]) -> Scene:
    """Build a Scene from the raw lines of a scene description."""
    kept = collect_lines(lines)
    if len(kept) < _HEADER_LINES:
        raise SceneError("Map is empty")
    scene = Scene()
    for raw in kept[:_HEADER_LINES]:
        line = trim_spaces(raw)
        first = line[:1]
        if first in ("F", "C"):
            scene.set_color(line)
        elif first in ("N", "S", "W", "E"):
            scene.set_texture(line)
        else:
            raise SceneError("in texture")
    if not scene._is_complete():
        raise SceneError("in texture")
    grid = make_rectangular(kept[_HEADER_LINES:])
    scene.grid, scene.player_row, scene.player_col, scene.player_dir = (
        validate_map(grid)
    )
    return scene


def check_path(path: Union[str, os.PathLike]) -> None:
    """Require a ``.cub`` extension and a readable file."""
    if not os.fspath(path).endswith(".cub"):
        raise SceneError("Check file extension")
    try:
        with open(path, "rb"):
            pass
    except OSError as exc:
        raise SceneError("Open failed") from exc


def load_scene(path: Union[str, os.PathLike]) -> Scene:
    """Read, parse and validate the scene file at ``path``."""
    check_path(path)
    try:
        lines = read_lines(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise SceneError("Open failed") from exc
    return parse_scene_lines(lines)