"""
Unit tests for level parsing and validation.

Canonical format errors are fatal for the whole load; legacy segments with
fewer than three rows are dropped silently.
"""

import sys
from pathlib import Path

from board_system import Point, TileKind
from map_parser import (
    LevelFormat, LoadError, detect_format, legacy_to_canonical, load_level_file,
    parse_canonical, parse_legacy, parse_levels
)

LEVELS_DIR = Path(__file__).resolve().parent / "levels"


def canonical_text(rows, title="", width=None, height=None):
    """Wrap layout rows in !LEVEL ... !END; dimensions default to the rows' extent."""
    width = width if width is not None else max(len(r) for r in rows)
    height = height if height is not None else len(rows)
    lines = [f"!LEVEL {title}", f"!WIDTH {width}", f"!HEIGHT {height}", "!BEGIN"]
    lines.extend(rows)
    lines.append("!END")
    return '\n'.join(lines) + '\n'


def expect_load_error(text, fragment=None, parse=parse_levels):
    try:
        parse(text)
    except LoadError as e:
        if fragment is not None:
            assert fragment in str(e), f"Expected {fragment!r} in {str(e)!r}"
        return e
    raise AssertionError("Expected LoadError")


def test_parse_single_level():
    print("\n[Test] Canonical single level")
    levels = parse_canonical(canonical_text(["#####", "#@$.#", "#####"], title="Tiny"))

    assert len(levels) == 1
    level = levels[0]
    assert level.title == "Tiny"
    assert (level.width, level.height) == (5, 3)
    assert len(level.grid.tiles) == level.width * level.height
    assert level.player_spawn == Point(1, 1)
    assert level.box_spawns == (Point(2, 1),)
    assert level.targets == frozenset({Point(3, 1)})
    assert level.grid.tile_at(3, 1) == TileKind.TARGET
    assert level.grid.tile_at(1, 1) == TileKind.FLOOR
    print("[OK] PASS")


def test_short_rows_padded_with_floor():
    print("\n[Test] Short rows padded")
    rows = ["  ####", "###  ####", "#@  $ .#", "#########"]
    level = parse_canonical(canonical_text(rows))[0]

    assert level.width == 9
    assert len(level.grid.tiles) == 9 * 4
    # Leading spaces are floor cells, not trimmed
    assert level.grid.tile_at(0, 0) == TileKind.FLOOR
    assert level.grid.tile_at(2, 0) == TileKind.WALL
    assert level.grid.tile_at(8, 0) == TileKind.FLOOR
    assert level.grid.tile_at(8, 2) == TileKind.FLOOR
    print("[OK] PASS")


def test_combined_glyphs_register_targets():
    level = parse_canonical(canonical_text(["#######", "#+*$$.#", "#######"]))[0]

    assert level.player_spawn == Point(1, 1)
    assert level.targets == frozenset({Point(1, 1), Point(2, 1), Point(5, 1)})
    assert level.box_spawns == (Point(2, 1), Point(3, 1), Point(4, 1))
    assert level.grid.tile_at(1, 1) == TileKind.TARGET
    assert level.grid.tile_at(2, 1) == TileKind.TARGET
    assert level.grid.tile_at(3, 1) == TileKind.FLOOR


def test_box_ids_in_reading_order():
    level = parse_canonical(canonical_text(["#####", "#@$ #", "#$..#", "# $.#", "#####"]))[0]

    assert level.box_definitions() == {1: Point(2, 1), 2: Point(1, 2), 3: Point(2, 3)}


def test_player_spawn_at_origin_is_valid():
    print("\n[Test] Player spawn at (0, 0)")
    level = parse_canonical(canonical_text(["@$.", "###"]))[0]

    assert level.player_spawn == Point(0, 0)
    print("[OK] PASS: origin spawn accepted")


def test_grid_lookup_is_bounds_checked():
    level = parse_canonical(canonical_text(["#####", "#@$.#", "#####"]))[0]
    grid = level.grid

    assert grid.tile_at(-1, 0) is None
    assert grid.tile_at(0, -1) is None
    assert grid.tile_at(5, 0) is None
    assert grid.tile_at(0, 3) is None
    assert not grid.is_accessible(Point(-1, 1))
    assert not grid.is_accessible(Point(0, 1))
    assert grid.is_accessible(Point(1, 1))
    assert grid.is_accessible(Point(3, 1))


def test_commands_are_case_insensitive_and_comments_skipped():
    text = "; header comment\n\n!level Lower\n!width 5\n!height 3\n!begin\n#####\n#@$.#\n#####\n!end\n"
    levels = parse_canonical(text)

    assert len(levels) == 1
    assert levels[0].title == "Lower"


def test_missing_player_is_fatal():
    expect_load_error(canonical_text(["#####", "# $.#", "#####"]), "no player spawn")


def test_second_player_is_fatal():
    expect_load_error(canonical_text(["######", "#@$.@#", "######"]), "second player")


def test_no_targets_is_fatal():
    expect_load_error(canonical_text(["#####", "#@$ #", "#####"]), "no targets")


def test_too_few_boxes_is_fatal():
    expect_load_error(canonical_text(["#####", "#@$.#", "# ..#", "#####"]), "1 boxes for 3 targets")


def test_tile_count_mismatch_is_fatal():
    print("\n[Test] Tile count mismatch")
    # Extra row beyond the declared height
    expect_load_error(canonical_text(["#####", "#@$.#", "#####"], height=2), "expected 5x2=10")
    # Row longer than the declared width
    expect_load_error(canonical_text(["#####", "#@$.##", "#####"], width=5), "16 tiles")
    # Missing row
    expect_load_error(canonical_text(["#####", "#@$.#"], height=3), "10 tiles")
    print("[OK] PASS")


def test_malformed_dimension_commands():
    print("\n[Test] Malformed !WIDTH / !HEIGHT")
    err = expect_load_error("!LEVEL\n!WIDTH 5 6\n", "exactly one integer")
    assert err.line == 2, f"Expected error on line 2, got {err.line}"

    err = expect_load_error("!LEVEL\n!WIDTH 5\n!HEIGHT three\n", "not an integer")
    assert err.line == 3

    expect_load_error("!LEVEL\n!WIDTH\n", "exactly one integer")
    expect_load_error("!LEVEL\n!HEIGHT 0\n", "must be positive")
    print("[OK] PASS")


def test_command_order_errors():
    expect_load_error("!WIDTH 5\n", "outside of a !LEVEL", parse=parse_canonical)
    expect_load_error("!LEVEL\n!BEGIN\n", "!BEGIN before")
    expect_load_error("!END\n", "outside of a !LEVEL", parse=parse_canonical)
    expect_load_error("!LEVEL\n!WIDTH 3\n!HEIGHT 1\n!FROB\n", "unknown command")
    expect_load_error(canonical_text(["#####", "#@$.#", "#####"]) + "#####\n", "unexpected text")


def test_unknown_glyph_is_fatal():
    err = expect_load_error(canonical_text(["#####", "#@$x.#", "#####"], width=6), "unknown glyph 'x'")
    assert err.line == 6


def test_unterminated_level_is_fatal():
    text = canonical_text(["#####", "#@$.#", "#####"]).replace("!END\n", "")
    expect_load_error(text, "missing !END")


def test_level_restart_discards_draft():
    text = "!LEVEL Broken\n!WIDTH 2\n" + canonical_text(["#####", "#@$.#", "#####"], title="Good")
    levels = parse_canonical(text)

    assert [lvl.title for lvl in levels] == ["Good"]


def test_one_bad_level_aborts_whole_load():
    print("\n[Test] Hard failure aborts load")
    good = canonical_text(["#####", "#@$.#", "#####"], title="Good")
    bad = canonical_text(["#####", "# $.#", "#####"], title="Bad")

    expect_load_error(good + bad, "level 'Bad' has no player spawn")
    print("[OK] PASS: no partial level set returned")


def test_empty_text_is_fatal():
    expect_load_error("", "no playable levels")
    expect_load_error("; only a comment\n", "no playable levels")


def test_legacy_segments():
    print("\n[Test] Legacy segments")
    text = (
        "; One\n\n#####\n#@$.#\n#####\n"
        "; Too short\n#####\n#####\n"
        "; Two\n\n####\n#+*$$.#\n#######\n"
    )
    levels = parse_legacy(text)

    assert [lvl.title for lvl in levels] == ["One", "Two"], f"Got {[lvl.title for lvl in levels]}"
    two = levels[1]
    assert (two.width, two.height) == (7, 3)
    assert len(two.grid.tiles) == 21
    assert two.grid.tile_at(4, 0) == TileKind.FLOOR  # padded
    assert two.targets == frozenset({Point(1, 1), Point(2, 1), Point(5, 1)})
    print("[OK] PASS: short segment dropped, rows padded")


def test_legacy_unknown_glyph_becomes_floor():
    level = parse_legacy("#####\n#@$.x#\n######\n")[0]

    assert level.width == 6
    assert len(level.grid.tiles) == 18
    assert level.grid.tile_at(4, 1) == TileKind.FLOOR


def test_legacy_structural_error_is_fatal():
    try:
        parse_legacy("; Nobody\n#####\n# $.#\n#####\n")
    except LoadError as e:
        assert "no player spawn" in str(e)
    else:
        raise AssertionError("Expected LoadError")


def test_legacy_adapter_emits_canonical_text():
    text = legacy_to_canonical("; T\n#####\n#@$.#\n#####\n")

    assert text.startswith("!LEVEL T\n!WIDTH 5\n!HEIGHT 3\n!BEGIN\n")
    assert detect_format(text) == LevelFormat.CANONICAL


def test_detect_format():
    assert detect_format(canonical_text(["#####", "#@$.#", "#####"])) == LevelFormat.CANONICAL
    assert detect_format("; 1\n#####\n#@$.#\n#####\n") == LevelFormat.LEGACY
    assert detect_format("  !level Indented\n") == LevelFormat.CANONICAL
    assert detect_format("!! Collection notes\n; 1\n#####\n") == LevelFormat.LEGACY


def test_legacy_file_with_bang_header_line():
    print("\n[Test] Legacy file with a '!' header line")
    text = "!! Collection by someone\n; First\n#####\n#@$.#\n#####\n"
    levels = parse_levels(text)

    assert levels.count == 1
    assert levels.get_level(0).title == "First"
    assert levels.get_level(0).player_spawn == Point(1, 1)
    print("[OK] PASS: header skipped, segment loaded")


def test_bundled_level_files():
    print("\n[Test] Bundled level files")
    canonical = load_level_file(LEVELS_DIR / "levels.txt")
    legacy = load_level_file(LEVELS_DIR / "legacy_levels.txt")

    assert canonical.count == 4, f"Expected 4 levels, got {canonical.count}"
    assert len(legacy) == 3, f"Expected 3 legacy levels, got {len(legacy)}"
    for level in list(canonical) + list(legacy):
        assert len(level.grid.tiles) == level.width * level.height
        assert len(level.box_spawns) >= len(level.targets) > 0

    # Same puzzles in both files
    for a, b in zip(canonical, legacy):
        assert a.title == b.title
        assert a.grid == b.grid
        assert a.player_spawn == b.player_spawn
        assert a.box_spawns == b.box_spawns
    assert canonical.get_level(4) is None
    assert canonical.get_level(-1) is None
    print("[OK] PASS")


def test_unreadable_file_is_load_error(tmp_path=None):
    missing = (Path(tmp_path) if tmp_path else LEVELS_DIR) / "does_not_exist.txt"
    try:
        load_level_file(missing)
    except LoadError as e:
        assert "cannot read level file" in str(e)
    else:
        raise AssertionError("Expected LoadError")


def run_all_tests():
    """Run all parser tests"""
    print("=" * 60)
    print("MAP PARSER UNIT TESTS")
    print("=" * 60)

    tests = [obj for name, obj in sorted(globals().items())
             if name.startswith("test_") and callable(obj)]
    try:
        for test in tests:
            test()
        print("\n" + "=" * 60)
        print("ALL TESTS PASSED [OK]")
        print("=" * 60)
        return True
    except AssertionError as e:
        print(f"\nX TEST FAILED: {e}")
        import traceback
        traceback.print_exc()
        return False


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
