import math

import numpy as np
import pytest
from PIL import Image

from raycube.constants import IMG_SIZE, SCREEN_HEIGHT, SCREEN_WIDTH, Side
from raycube.game import Game, Player
from raycube.raycast import RayHit, cast_ray
from raycube.render import (
    Frame,
    Texture,
    draw_column,
    draw_sky_and_ground,
    draw_walls,
    load_textures,
    texture_offset,
    wall_height,
)
from raycube.scene import Scene

ROOM = ["11111", "10001", "10001", "10001", "11111"]
SIDE_COLORS = {
    Side.EAST: 0x110000,
    Side.SOUTH: 0x002200,
    Side.WEST: 0x000033,
    Side.NORTH: 0x444444,
}


def _game(direction="E"):
    scene = Scene(grid=list(ROOM), player_row=2, player_col=2, player_dir=direction)
    return Game.from_scene(scene)


def _uniform_textures():
    ordered = sorted(SIDE_COLORS, key=lambda side: side.texture_index())
    return [Texture(np.full((4, 4), SIDE_COLORS[side])) for side in ordered]


def _gradient_texture(width=8, height=6):
    return Texture(np.arange(width * height).reshape(height, width) + 1)


def test_frame_defaults_to_screen_size():
    frame = Frame()
    assert frame.pixels.shape == (SCREEN_HEIGHT, SCREEN_WIDTH)


def test_put_and_get_pixel_round_trip():
    frame = Frame(10, 5)
    frame.put_pixel(3, 4, 0xABCDEF)
    assert frame.get_pixel(3, 4) == 0xABCDEF


def test_put_pixel_outside_is_dropped():
    frame = Frame(10, 5)
    frame.put_pixel(-1, 0, 0x123456)
    frame.put_pixel(10, 0, 0x123456)
    assert int(frame.pixels.sum()) == 0


def test_get_pixel_outside_raises():
    frame = Frame(10, 5)
    with pytest.raises(IndexError):
        frame.get_pixel(0, 5)
    with pytest.raises(IndexError):
        frame.get_pixel(-1, 0)


def test_frame_rejects_empty_size():
    with pytest.raises(ValueError):
        Frame(0, 4)


def test_texture_from_file_round_trip(tmp_path):
    path = tmp_path / "wall.png"
    image = Image.new("RGB", (3, 2), (0x12, 0x34, 0x56))
    image.putpixel((2, 1), (0xAA, 0xBB, 0xCC))
    image.save(path)
    texture = Texture.from_file(path)
    assert (texture.width, texture.height) == (3, 2)
    assert int(texture.pixels[0, 0]) == 0x123456
    assert int(texture.pixels[1, 2]) == 0xAABBCC


def test_texture_from_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        Texture.from_file(tmp_path / "missing.png")


def test_color_at_corners():
    texture = _gradient_texture()
    assert texture.color_at(0, 0, 10) == int(texture.pixels[0, 0])
    assert texture.color_at(IMG_SIZE - 1, 9, 10) == int(
        texture.pixels[texture.height - 1, texture.width - 1]
    )


def test_color_at_negative_offset_is_clamped():
    texture = _gradient_texture()
    assert texture.color_at(-5, 3, 10) == texture.color_at(0, 3, 10)


def test_color_at_single_row_wall():
    texture = _gradient_texture()
    assert texture.color_at(0, 0, 1) == int(texture.pixels[0, 0])


def test_load_textures_orders_by_side(tmp_path):
    colors = {"east": (1, 0, 0), "south": (0, 2, 0), "west": (0, 0, 3), "north": (4, 4, 4)}
    paths = {}
    for name, rgb in colors.items():
        path = tmp_path / f"{name}.png"
        Image.new("RGB", (2, 2), rgb).save(path)
        paths[name] = str(path)
    scene = Scene(**paths)
    textures = load_textures(scene)
    assert textures[Side.EAST.texture_index()].color_at(0, 0, 2) == 0x010000
    assert textures[Side.NORTH.texture_index()].color_at(0, 0, 2) == 0x040404


def test_load_textures_missing_path_raises():
    with pytest.raises(ValueError):
        load_textures(Scene(north="a", south="b", west="c"))


def test_wall_height_halves_with_double_distance():
    near = wall_height(100.0, 0.0, 0.0)
    far = wall_height(200.0, 0.0, 0.0)
    assert abs(near - 2 * far) <= 1


def test_wall_height_grows_off_axis():
    assert wall_height(100.0, 0.3, 0.0) > wall_height(100.0, 0.0, 0.0)


def test_wall_height_zero_distance_fills_screen():
    assert wall_height(0.0, 0.0, 0.0) >= SCREEN_HEIGHT


def test_texture_offset_easy_cases():
    player = Player(x=3 * IMG_SIZE + 11, y=5 * IMG_SIZE + 7, angle=0.0)
    hit = RayHit(10.0, Side.EAST)
    assert texture_offset(player, hit, 0.0) == 7
    assert texture_offset(player, hit, math.pi) == 7
    assert texture_offset(player, hit, math.pi / 2) == 11
    assert texture_offset(player, hit, 3 * math.pi / 2) == 11


@pytest.mark.parametrize("angle", [0.4, 2.0, 3.9, 5.5])
def test_texture_offset_within_cell(angle):
    game = _game()
    player = game.player
    hit = cast_ray(game.grid, player.x, player.y, angle)
    offset = texture_offset(player, hit, angle)
    assert 0 <= offset < IMG_SIZE


def test_draw_sky_and_ground_halves():
    frame = Frame(4, 6)
    draw_sky_and_ground(frame, 0x0000FF, 0x00FF00)
    assert frame.get_pixel(0, 0) == 0x0000FF
    assert frame.get_pixel(3, 2) == 0x0000FF
    assert frame.get_pixel(3, 3) == 0x00FF00
    assert frame.get_pixel(0, 5) == 0x00FF00


def test_draw_column_paints_height_rows_only():
    frame = Frame(4, 20)
    texture = _gradient_texture()
    draw_column(frame, 1, 6, texture, 0)
    assert int(np.count_nonzero(frame.pixels[:, 1])) == 6
    assert int(np.count_nonzero(frame.pixels[:, 0])) == 0
    painted = np.nonzero(frame.pixels[:, 1])[0]
    assert list(painted) == list(range(painted[0], painted[0] + 6))


def test_draw_column_tall_wall_fills_column():
    frame = Frame(2, 8)
    draw_column(frame, 0, 1000, _gradient_texture(), 3)
    assert int(np.count_nonzero(frame.pixels[:, 0])) == frame.height


def test_draw_column_outside_frame_is_ignored():
    frame = Frame(2, 8)
    draw_column(frame, 5, 4, _gradient_texture(), 0)
    assert int(frame.pixels.sum()) == 0


def test_draw_walls_fills_every_column_with_side_colors():
    frame = Frame(8, 6)
    draw_walls(frame, _game(), _uniform_textures())
    used = set(int(v) for v in np.unique(frame.pixels))
    assert used <= set(SIDE_COLORS.values())
    assert all(np.count_nonzero(frame.pixels[:, x]) > 0 for x in range(frame.width))


def test_draw_walls_centre_shows_facing_side():
    frame = Frame(8, 6)
    draw_walls(frame, _game("E"), _uniform_textures())
    assert frame.get_pixel(frame.width // 2, frame.height // 2) == SIDE_COLORS[Side.EAST]