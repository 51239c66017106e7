"""Command entry point: load a scene, open a window and run the game loop."""

from __future__ import annotations

import os
import sys
from typing import Optional, Sequence

import numpy as np

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

from raycube import minimap  # noqa: E402
from raycube.constants import SCREEN_HEIGHT, SCREEN_WIDTH, Key  # noqa: E402
from raycube.game import Game  # noqa: E402
from raycube.render import (  # noqa: E402
    Frame,
    Texture,
    draw_sky_and_ground,
    draw_walls,
    load_textures,
)
from raycube.scene import Scene, SceneError, load_scene  # noqa: E402

_WINDOW_TITLE = "my window"
_FRAMES_PER_SECOND = 60

_PYGAME_KEYS = {
    pygame.K_w: Key.W,
    pygame.K_s: Key.S,
    pygame.K_d: Key.D,
    pygame.K_a: Key.A,
    pygame.K_RIGHT: Key.RIGHT_ARROW,
    pygame.K_LEFT: Key.LEFT_ARROW,
    pygame.K_ESCAPE: Key.ESC,
}


def render_frame(frame: Frame, game: Game, textures: Sequence[Texture]) -> None:
    """Draw sky, ground, textured walls and the minimap for the current state."""
    scene = game.scene
    if scene.ceiling is None or scene.floor is None:
        raise ValueError("the scene has no floor or ceiling color")
    draw_sky_and_ground(frame, scene.ceiling, scene.floor)
    draw_walls(frame, game, textures)
    minimap.draw_minimap(frame, game)


def key_from_pygame(code: int) -> Optional[Key]:
    """Translate a pygame key code into a game key, or None if it is unbound."""
    return _PYGAME_KEYS.get(code)


def _to_rgb(frame: Frame) -> np.ndarray:
    """Unpack 0xRRGGBB pixels into a ``(width, height, 3)`` byte array."""
    packed = frame.pixels.T
    rgb = np.empty(packed.shape + (3,), dtype=np.uint8)
    rgb[..., 0] = (packed >> 16) & 0xFF
    rgb[..., 1] = (packed >> 8) & 0xFF
    rgb[..., 2] = packed & 0xFF
    return rgb


def _handle_events(game: Game) -> None:
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            game.running = False
        elif event.type == pygame.KEYDOWN:
            key = key_from_pygame(event.key)
            if key is not None:
                game.press(key)
        elif event.type == pygame.KEYUP:
            key = key_from_pygame(event.key)
            if key is not None:
                game.release(key)


def run(scene: Scene) -> None:
    """Open the game window for ``scene`` and play until it is closed."""
    game = Game.from_scene(scene)
    try:
        textures = load_textures(scene)
    except (OSError, ValueError):
        print("error\nInvalid path")
        print("Game over.")
        return
    pygame.init()
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption(_WINDOW_TITLE)
        clock = pygame.time.Clock()
        frame = Frame()
        while game.running:
            _handle_events(game)
            if not game.running:
                break
            game.update()
            render_frame(frame, game, textures)
            pygame.surfarray.blit_array(screen, _to_rgb(frame))
            pygame.display.flip()
            clock.tick(_FRAMES_PER_SECOND)
    finally:
        pygame.quit()
    print("Game over.")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the game on the ``.cub`` file named in ``argv``.

    The exit status is 1 whichever way the program ends, errors included.
    """
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        sys.stderr.write("Error\nCheck arguments\n")
        return 1
    try:
        scene = load_scene(args[0])
    except SceneError as exc:
        sys.stderr.write(f"Error\n{exc}\n")
        return 1
    run(scene)
    return 1


if __name__ == "__main__":
    sys.exit(main())