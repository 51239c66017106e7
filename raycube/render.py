"""Drawing the textured 3D view into an in-memory frame."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import Sequence, Union

import numpy as np
from PIL import Image

from raycube.constants import (
    FIELD_OF_VIEW,
    IMG_SIZE,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    Side,
)
from raycube.game import Game, Player, normalize_angle
from raycube.raycast import RayHit, cast_ray
from raycube.scene import Scene

_TWO_PI = 2 * math.pi
_HALF_PI = math.pi / 2
_THREE_HALF_PI = 3 * math.pi / 2
_MAX_WALL_HEIGHT = 2**31 - 1
PROJECTION_DISTANCE = (SCREEN_WIDTH // 2) / math.tan(FIELD_OF_VIEW / 2)
"""Distance from the eye to the projection plane, in pixels."""


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _trunc_mod(a: int, b: int) -> int:
    """Remainder whose sign follows the dividend."""
    r = abs(a) % abs(b)
    return -r if a < 0 else r


@dataclass
class Frame:
    """A block of 0xRRGGBB pixels, indexed as ``pixels[y, x]``."""

    width: int = SCREEN_WIDTH
    height: int = SCREEN_HEIGHT
    pixels: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("frame dimensions must be positive")
        self.pixels = np.zeros((self.height, self.width), dtype=np.uint32)

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Set one pixel; writes outside the frame are dropped."""
        if self._inside(x, y):
            self.pixels[y, x] = color & 0xFFFFFFFF

    def get_pixel(self, x: int, y: int) -> int:
        """Read one pixel; IndexError outside the frame."""
        if not self._inside(x, y):
            raise IndexError(f"pixel ({x}, {y}) outside the frame")
        return int(self.pixels[y, x])


@dataclass
class Texture:
    """An image of 0xRRGGBB pixels, indexed as ``pixels[y, x]``."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        self.pixels = np.asarray(self.pixels, dtype=np.uint32)
        if self.pixels.ndim != 2 or 0 in self.pixels.shape:
            raise ValueError("a texture needs a non-empty two-dimensional array")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @classmethod
    def from_file(cls, path: Union[str, os.PathLike]) -> "Texture":
        """Load any image format Pillow reads (XPM included)."""
        with Image.open(path) as image:
            rgb = np.asarray(image.convert("RGB"), dtype=np.uint32)
        packed = (rgb[:, :, 0] << 16) | (rgb[:, :, 1] << 8) | rgb[:, :, 2]
        return cls(packed)

    def _sample(self, x_tile: int, counts: np.ndarray, wall_height: int) -> np.ndarray:
        x_tile = max(x_tile, 0)
        x_img = min(((self.width - 1) * x_tile) // (IMG_SIZE - 1), self.width - 1)
        if wall_height > 1:
            y_img = ((self.height - 1) * counts) // (wall_height - 1)
        else:
            y_img = np.zeros_like(counts)
        y_img = np.clip(y_img, 0, self.height - 1)
        return self.pixels[y_img, x_img]

    def color_at(self, x_tile: int, count: int, wall_height: int) -> int:
        """Color for row ``count`` of a wall slice of the given height."""
        counts = np.array([count], dtype=np.int64)
        return int(self._sample(x_tile, counts, wall_height)[0])


def load_textures(scene: Scene) -> list[Texture]:
    """Load the wall textures in east, south, west, north order."""
    paths = (scene.east, scene.south, scene.west, scene.north)
    if any(path is None for path in paths):
        raise ValueError("Invalid path")
    return [Texture.from_file(path) for path in paths]


def wall_height(length: float, ray_angle: float, player_angle: float) -> int:
    """On-screen height of a wall slice seen at ``length`` along the ray."""
    real = length * math.cos(ray_angle - player_angle)
    if not math.isfinite(real) or real <= 0:
        return _MAX_WALL_HEIGHT
    height = IMG_SIZE * PROJECTION_DISTANCE / real
    if height >= _MAX_WALL_HEIGHT:
        return _MAX_WALL_HEIGHT
    return int(height)


def texture_offset(player: Player, hit: RayHit, ray_angle: float) -> int:
    """Horizontal position of the hit inside its wall cell, in world units."""
    if ray_angle in (0, math.pi):
        return _trunc_mod(int(player.y), IMG_SIZE)
    if ray_angle in (_HALF_PI, _THREE_HALF_PI):
        return _trunc_mod(int(player.x), IMG_SIZE)
    length = hit.length
    if ray_angle < _HALF_PI:
        alpha = ray_angle
        if hit.side == Side.EAST:
            along = player.y + length * math.sin(alpha)
        else:
            along = player.x + length * math.cos(alpha)
    elif ray_angle < math.pi:
        alpha = ray_angle - _HALF_PI
        if hit.side == Side.SOUTH:
            along = player.x - length * math.sin(alpha)
        else:
            along = player.y + length * math.cos(alpha)
    elif ray_angle < _THREE_HALF_PI:
        alpha = ray_angle - math.pi
        if hit.side == Side.WEST:
            along = player.y - length * math.sin(alpha)
        else:
            along = player.x - length * math.cos(alpha)
    else:
        alpha = ray_angle - _THREE_HALF_PI
        if hit.side == Side.NORTH:
            along = player.x + length * math.sin(alpha)
        else:
            along = player.y - length * math.cos(alpha)
    if not math.isfinite(along):
        return 0
    return _trunc_mod(int(along), IMG_SIZE)


def draw_sky_and_ground(frame: Frame, ceiling: int, floor: int) -> None:
    """Fill the upper half with the ceiling color and the rest with the floor."""
    half = frame.height // 2
    frame.pixels[:half, :] = ceiling & 0xFFFFFFFF
    frame.pixels[half:, :] = floor & 0xFFFFFFFF


def draw_column(
    frame: Frame, x_screen: int, height: int, texture: Texture, x_tile: int
) -> None:
    """Draw one textured wall slice centred vertically in column ``x_screen``."""
    if height <= 0 or not 0 <= x_screen < frame.width:
        return
    start = max(_trunc_div(frame.height - height, 2) - 1, 0)
    rows = min(height, frame.height - start)
    if rows <= 0:
        return
    counts = np.arange(rows, dtype=np.int64)
    frame.pixels[start:start + rows, x_screen] = texture._sample(x_tile, counts, height)


def draw_walls(frame: Frame, game: Game, textures: Sequence[Texture]) -> None:
    """Cast one ray per screen column and draw the walls they meet."""
    player = game.player
    step = FIELD_OF_VIEW / frame.width
    angle = normalize_angle(player.angle - FIELD_OF_VIEW / 2)
    for x_screen in range(frame.width):
        angle = normalize_angle(angle)
        if angle >= _TWO_PI:
            angle = 0.0
        hit = cast_ray(game.grid, player.x, player.y, angle)
        height = wall_height(hit.length, angle, player.angle)
        x_tile = texture_offset(player, hit, angle)
        draw_column(frame, x_screen, height, textures[hit.side.texture_index()], x_tile)
        angle += step