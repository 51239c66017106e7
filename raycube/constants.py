"""Shared dimensions, tuning values and enumerations for the game."""

from __future__ import annotations

import enum

IMG_SIZE = 32
"""Side length of one map cell in world units."""

ROTATE_ANGLE = 0.064
"""Radians turned per frame while a rotation key is held."""

MOVE_DISTANCE = 7
"""World units travelled per frame while a movement key is held."""

SCREEN_WIDTH = 1080
SCREEN_HEIGHT = 720

FIELD_OF_VIEW = 1.0466666667
"""Horizontal field of view in radians (about 60 degrees)."""

MINI_TILE = 20
MINI_WIDTH = 260
MINI_HEIGHT = 180
MINI_COLS = 13
MINI_LINES = 9


class Side(enum.IntEnum):
    """The face of a wall cell that a ray struck."""

    EAST = 1
    SOUTH = 2
    WEST = 3
    NORTH = 4

    def texture_index(self) -> int:
        """Index of the texture drawn on this face (east, south, west, north)."""
        return self.value - 1


class Key(enum.IntEnum):
    """Keyboard codes the game reacts to."""

    A = 0
    S = 1
    D = 2
    W = 13
    ESC = 53
    LEFT_ARROW = 123
    RIGHT_ARROW = 124