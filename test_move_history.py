"""
Unit tests for the undo stack and LURD notation.
"""

import sys

from board_system import Direction, Point
from game_logic import MoveRecord
from move_history import MoveHistory, lurd_to_directions

WALK_RIGHT = MoveRecord(delta=Point(1, 0))
PUSH_UP = MoveRecord(delta=Point(0, -1), box_id=2)
WALK_LEFT = MoveRecord(delta=Point(-1, 0))


def test_undo_is_lifo():
    print("\n[Test] Undo pops most recent move")
    history = MoveHistory()
    for record in (WALK_RIGHT, PUSH_UP, WALK_LEFT):
        history.push(record)

    assert len(history) == 3
    assert history.undo() == WALK_LEFT
    assert history.undo() == PUSH_UP
    assert history.undo() == WALK_RIGHT
    assert history.undo() is None
    assert len(history) == 0
    print("[OK] PASS")


def test_push_count_and_clear():
    history = MoveHistory()
    history.push(WALK_RIGHT)
    history.push(PUSH_UP)

    assert history.push_count == 1
    assert list(history) == [WALK_RIGHT, PUSH_UP]

    history.clear()
    assert len(history) == 0
    assert history.push_count == 0


def test_to_lurd():
    history = MoveHistory()
    for record in (WALK_RIGHT, PUSH_UP, WALK_LEFT, MoveRecord(delta=Point(0, 1), box_id=1)):
        history.push(record)

    assert history.to_lurd() == "rUlD"
    assert MoveHistory().to_lurd() == ""


def test_lurd_to_directions():
    print("\n[Test] Parse LURD string")
    assert lurd_to_directions("rUl D\n") == [
        Direction.RIGHT, Direction.UP, Direction.LEFT, Direction.DOWN
    ]
    assert lurd_to_directions("") == []

    for bad in ("x", "r1", "up"):
        try:
            lurd_to_directions(bad)
        except ValueError:
            continue
        raise AssertionError(f"Expected ValueError for {bad!r}")
    print("[OK] PASS")


def run_all_tests():
    """Run all history tests"""
    print("=" * 60)
    print("MOVE HISTORY UNIT TESTS")
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
