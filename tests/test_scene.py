import pytest

from raycube.scene import (
    Scene,
    SceneError,
    check_path,
    collect_lines,
    load_scene,
    make_rectangular,
    parse_color,
    parse_scene_lines,
    validate_map,
)

HEADER = [
    "NO ./n.xpm\n",
    "SO ./s.xpm\n",
    "WE ./w.xpm\n",
    "EA ./e.xpm\n",
    "F 1,24,38\n",
    "C 1,40,64\n",
]

MAP = ["1111\n", "10N1\n", "1001\n", "1111\n"]


def test_parse_color_packs_channels():
    assert parse_color("1,24,38") == 0x011826
    assert parse_color(" 1, 40 ,64") == 0x012840


@pytest.mark.parametrize(
    "text", ["1,2", "1,2,3,4", "256,0,0", "-1,0,0", "1,,2", "a,b,c", "1,2,+3"]
)
def test_parse_color_rejects(text):
    with pytest.raises(SceneError):
        parse_color(text)


def test_set_texture_records_path():
    scene = Scene()
    scene.set_texture("NO ./north.xpm")
    scene.set_texture("EA   ./east.xpm")
    assert scene.north == "./north.xpm"
    assert scene.east == "./east.xpm"


@pytest.mark.parametrize("line", ["NO a b", "NO", "XX ./a.xpm", "NORTH ./a.xpm"])
def test_set_texture_rejects_bad_lines(line):
    with pytest.raises(SceneError, match="in texture"):
        Scene().set_texture(line)


def test_set_texture_rejects_duplicates():
    scene = Scene()
    scene.set_texture("SO ./a.xpm")
    with pytest.raises(SceneError, match="in texture"):
        scene.set_texture("SO ./b.xpm")
    assert scene.south == "./a.xpm"


def test_set_color_floor_and_ceiling():
    scene = Scene()
    scene.set_color("F 1,24,38")
    scene.set_color("C   1,40,64")
    assert scene.floor == 0x011826
    assert scene.ceiling == 0x012840


def test_set_color_errors_name_the_surface():
    with pytest.raises(SceneError, match="in floor"):
        Scene().set_color("F 300,0,0")
    with pytest.raises(SceneError, match="in ceiling"):
        Scene().set_color("C 1,2")


def test_collect_lines_drops_blank_lines_before_map():
    lines = [HEADER[0], "\n", *HEADER[1:], "\n", "  \n", *MAP, "\n"]
    kept = collect_lines(lines)
    assert kept[:6] == HEADER
    assert kept[6:10] == MAP
    assert kept[-1] == "\n"
    assert len(kept) == len(HEADER) + len(MAP) + 1


def test_collect_lines_rejects_gap_inside_map():
    lines = [*HEADER, *MAP[:2], "\n", *MAP[2:]]
    with pytest.raises(SceneError, match="Empty line"):
        collect_lines(lines)


def test_make_rectangular_pads_rows():
    rows = make_rectangular(["11\n", "1111\n", "1"])
    assert rows == ["11  ", "1111", "1   "]
    assert len({len(row) for row in rows}) == 1


def test_make_rectangular_empty():
    assert make_rectangular([]) == []


def test_validate_map_finds_player_and_clears_cell():
    grid, row, col, direction = validate_map(["1111", "10N1", "1001", "1111"])
    assert (row, col, direction) == (1, 2, "N")
    assert grid == ["1111", "1001", "1001", "1111"]


@pytest.mark.parametrize(
    "grid",
    [
        ["1111", "10N1", "1001", "1101"],
        ["1111", "0N01", "1111"],
        ["1111", "1N 1", "1111"],
        ["1 11", "1N01", "1111"],
    ],
)
def test_validate_map_rejects_open_maps(grid):
    with pytest.raises(SceneError, match="not closed"):
        validate_map(grid)


def test_validate_map_rejects_unknown_cells():
    with pytest.raises(SceneError, match="not valid"):
        validate_map(["1111", "1N21", "1111"])


def test_validate_map_rejects_two_players():
    with pytest.raises(SceneError, match="Multiple players"):
        validate_map(["11111", "1NS01", "11111"])


def test_validate_map_requires_a_player():
    with pytest.raises(SceneError, match="No map or No player"):
        validate_map(["1111", "1001", "1111"])
    with pytest.raises(SceneError, match="No map or No player"):
        validate_map([])


def test_parse_scene_lines_full_scene():
    scene = parse_scene_lines(["   NO ./n.xpm  \n", *HEADER[1:], "\n", *MAP])
    assert scene.north == "./n.xpm"
    assert scene.south == "./s.xpm"
    assert scene.west == "./w.xpm"
    assert scene.east == "./e.xpm"
    assert scene.floor == 0x011826
    assert scene.ceiling == 0x012840
    assert scene.grid == ["1111", "1001", "1001", "1111"]
    assert (scene.player_row, scene.player_col, scene.player_dir) == (1, 2, "N")


def test_parse_scene_lines_header_order_is_free():
    reordered = list(reversed(HEADER))
    assert parse_scene_lines([*reordered, *MAP]).ceiling == 0x012840


def test_parse_scene_lines_too_short():
    with pytest.raises(SceneError, match="empty"):
        parse_scene_lines(HEADER[:4])


def test_parse_scene_lines_missing_texture():
    header = [*HEADER[:3], "F 1,1,1\n", *HEADER[4:]]
    with pytest.raises(SceneError, match="in texture"):
        parse_scene_lines([*header, *MAP])


def test_parse_scene_lines_unknown_header_line():
    header = [*HEADER[:5], "X 1,2,3\n"]
    with pytest.raises(SceneError, match="in texture"):
        parse_scene_lines([*header, *MAP])


def test_parse_scene_lines_without_map():
    with pytest.raises(SceneError, match="No map or No player"):
        parse_scene_lines(HEADER)


def test_check_path_rejects_extension(tmp_path):
    target = tmp_path / "level.txt"
    target.write_text("".join(HEADER + MAP))
    with pytest.raises(SceneError, match="extension"):
        check_path(target)


def test_check_path_rejects_missing_file(tmp_path):
    with pytest.raises(SceneError, match="Open failed"):
        check_path(tmp_path / "missing.cub")


def test_load_scene_reads_file(tmp_path):
    target = tmp_path / "level.cub"
    target.write_text("".join(HEADER + ["\n"] + MAP))
    scene = load_scene(target)
    assert scene.grid == ["1111", "1001", "1001", "1111"]
    assert scene.player_dir == "N"
    assert scene.floor == 0x011826