# raycube

A small first-person maze explorer. It reads a `.cub` scene file that describes
four wall textures, the floor and ceiling colours and a grid map. It then renders
the maze with ray casting in a 1080×720 window, with a minimap in the top-left
corner.

## Installing

```
pip install .
```

## Running

```
raycube path/to/level.cub
```

Controls:

| Key           | Action               |
|---------------|----------------------|
| W / S         | move forward / back  |
| A / D         | strafe left / right  |
| ← / →         | turn left / right    |
| Esc           | quit                 |

Closing the window also quits. On exit the program prints `Game over.`

## Scene files

A scene file must have the `.cub` extension. Its first six non-blank lines set
the textures and colours, in any order:

```
NO ./textures/north.png
SO ./textures/south.png
WE ./textures/west.png
EA ./textures/east.png
F 1,24,38
C 1,40,64
```

Textures are loaded with Pillow, so any image format it can read will work,
XPM included. Each colour is three unsigned integers from 0 to 255, separated
by exactly two commas. Each key may appear only once.

The map follows these lines. It may use these characters:

- `1` for a wall
- `0` for open floor
- a space for void
- `N`, `S`, `E` or `W` for the player's start and facing

Rows are padded with spaces to the width of the longest row. The map needs
exactly one player. It must be closed, so no floor or player cell may touch
the map's edge or a space. A blank line inside the map, with more map rows
after it, is an error.

```
111111
100101
1000N1
111111
```

Problems with the arguments, the file or the map are reported on standard
error as `Error` followed by a short reason. If a texture cannot be loaded, the
program prints `error` / `Invalid path` and then `Game over.` The exit status
is 1 however the program ends, including a normal quit.

## Using it as a library

```python
from raycube.scene import load_scene
from raycube.game import Game
from raycube.raycast import cast_ray

scene = load_scene("level.cub")
game = Game.from_scene(scene)
hit = cast_ray(game.grid, game.player.x, game.player.y, game.player.angle)
print(hit.length, hit.side)
```

The modules:

- `raycube.scene`: `load_scene`, `parse_scene_lines`, `Scene` and `SceneError`.
- `raycube.game`: `Game` (key presses and releases, and a per-frame `update`),
  `Player`, `normalize_angle` and `angle_range`.
- `raycube.raycast`: `cast_ray` returns a `RayHit` with the distance and the
  `Side` of the wall face that was struck.
- `raycube.render`: `Frame` (a numpy array of `0xRRGGBB` pixels), `Texture`,
  `load_textures`, `draw_sky_and_ground` and `draw_walls`.
- `raycube.minimap`: `draw_minimap` and its parts.
- `raycube.app`: `render_frame` draws a complete view into a `Frame` without
  opening a window. `run(scene)` opens the window and runs the game loop for a
  scene that has already been loaded. `main` is the `raycube` command.

## Tests

```
pip install .[test]
pytest
```