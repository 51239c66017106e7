"""Player state, input handling and movement through the map grid."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from raycube.constants import IMG_SIZE, MOVE_DISTANCE, ROTATE_ANGLE, Key
from raycube.scene import Scene

_TWO_PI = 2 * math.pi

_START_ANGLES = {
    "N": 3 * (math.pi / 2),
    "S": math.pi / 2,
    "E": 0.0,
    "W": math.pi,
}


def normalize_angle(angle: float) -> float:
    """Bring an angle that is at most one turn off back into ``[0, 2*pi)``."""
    if angle < 0:
        return angle + _TWO_PI
    if angle >= _TWO_PI:
        return angle - _TWO_PI
    return angle


def angle_range(angle: float) -> int:
    """Quadrant (1 to 4) of an angle in ``[0, 2*pi)``; ValueError otherwise."""
    if 0 <= angle < math.pi / 2:
        return 1
    if math.pi / 2 <= angle < math.pi:
        return 2
    if math.pi <= angle < 3 * math.pi / 2:
        return 3
    if 3 * math.pi / 2 <= angle < _TWO_PI:
        return 4
    raise ValueError(f"angle outside [0, 2*pi): {angle!r}")


@dataclass
class Player:
    """Position in world units and viewing angle in radians."""

    x: float
    y: float
    angle: float


@dataclass
class Game:
    """The running state of one level: map, player and held keys."""

    scene: Scene
    grid: list[str]
    player: Player
    fb_status: int = 0
    rl_status: int = 0
    rotate_status: int = 0
    angle_range: Optional[int] = None
    running: bool = True
    _unused: None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_scene(cls, scene: Scene) -> "Game":
        """Place the player at the centre of its start cell, facing its letter."""
        if scene.player_dir not in _START_ANGLES:
            raise ValueError(f"unknown player direction: {scene.player_dir!r}")
        player = Player(
            x=scene.player_col * IMG_SIZE + IMG_SIZE // 2,
            y=scene.player_row * IMG_SIZE + IMG_SIZE // 2,
            angle=_START_ANGLES[scene.player_dir],
        )
        grid = list(scene.grid)
        row = grid[scene.player_row]
        col = scene.player_col
        grid[scene.player_row] = row[:col] + "0" + row[col + 1:]
        game = cls(scene=scene, grid=grid, player=player)
        game.update_range()
        return game

    @property
    def columns(self) -> int:
        """Width of the map in cells."""
        return len(self.grid[0]) if self.grid else 0

    @property
    def lines(self) -> int:
        """Height of the map in cells."""
        return len(self.grid)

    def _cell(self, i: int, j: int) -> str:
        if 0 <= j < len(self.grid) and 0 <= i < len(self.grid[j]):
            return self.grid[j][i]
        return "\0"

    def press(self, key: int) -> None:
        """Start the motion bound to ``key``; Escape ends the game."""
        if key == Key.W:
            self.fb_status = 1
        elif key == Key.S:
            self.fb_status = -1
        elif key == Key.D:
            self.rl_status = 1
        elif key == Key.A:
            self.rl_status = -1
        elif key == Key.RIGHT_ARROW:
            self.rotate_status = 1
        elif key == Key.LEFT_ARROW:
            self.rotate_status = -1
        elif key == Key.ESC:
            self.running = False

    def release(self, key: int) -> None:
        """Stop the motion bound to ``key``."""
        if key in (Key.W, Key.S):
            self.fb_status = 0
        elif key in (Key.A, Key.D):
            self.rl_status = 0
        elif key in (Key.RIGHT_ARROW, Key.LEFT_ARROW):
            self.rotate_status = 0

    def update(self) -> None:
        """Advance one frame: refresh the quadrant, move, then turn."""
        self.update_range()
        self.update_position()
        self.update_angle()

    def update_range(self) -> None:
        """Record the quadrant of the viewing angle, keeping the old one if invalid."""
        try:
            self.angle_range = angle_range(self.player.angle)
        except ValueError:
            pass

    def update_position(self) -> None:
        """Apply forward/backward and then sideways motion for the held keys."""
        if self.angle_range is None:
            return
        step_x = MOVE_DISTANCE * math.cos(self.player.angle)
        step_y = MOVE_DISTANCE * math.sin(self.player.angle)
        if self.fb_status:
            self.try_move(self.fb_status * step_x, self.fb_status * step_y)
        if self.rl_status:
            self.try_move(-self.rl_status * step_y, self.rl_status * step_x)

    def update_angle(self) -> None:
        """Turn by the rotation step for the held arrow key."""
        self.player.angle = normalize_angle(
            self.player.angle + self.rotate_status * ROTATE_ANGLE
        )

    def try_move(self, dx: float, dy: float) -> bool:
        """Move by ``(dx, dy)`` if the target cell is open; report whether it moved."""
        i = int((self.player.x + dx) / IMG_SIZE)
        j = int((self.player.y + dy) / IMG_SIZE)
        if self.blocked_diagonal(i, j):
            return False
        if self._cell(i, j) != "0":
            return False
        self.player.x += dx
        self.player.y += dy
        return True

    def blocked_diagonal(self, i: int, j: int) -> bool:
        """True if cell ``(i, j)`` is a diagonal neighbour squeezed between two walls."""
        cur_i = int(self.player.x / IMG_SIZE)
        cur_j = int(self.player.y / IMG_SIZE)
        if abs(i - cur_i) != 1 or abs(j - cur_j) != 1:
            return False
        return (
            self._cell(i, j) == "0"
            and self._cell(i, cur_j) == "1"
            and self._cell(cur_i, j) == "1"
        )