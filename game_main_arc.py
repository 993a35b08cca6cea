# game_main_arc.py - Arcade Main Loop
#
# Arcade-based game window; same controller and view model as game_main.py.

import argparse
import logging
import sys
from pathlib import Path

import arcade

from game_controller import Command, GameController, GamePhase
from map_parser import LevelSet, LoadError, load_level_file
from presentation_model import ViewModelBuilder
from render_arc import ArcadeRenderer, WINDOW_WIDTH, WINDOW_HEIGHT

logger = logging.getLogger(__name__)

DEFAULT_LEVELS = Path(__file__).resolve().parent / "levels" / "levels.txt"

KEY_COMMANDS = {
    arcade.key.UP: Command.UP,
    arcade.key.W: Command.UP,
    arcade.key.DOWN: Command.DOWN,
    arcade.key.S: Command.DOWN,
    arcade.key.LEFT: Command.LEFT,
    arcade.key.A: Command.LEFT,
    arcade.key.RIGHT: Command.RIGHT,
    arcade.key.D: Command.RIGHT,
    arcade.key.Z: Command.UNDO,
    arcade.key.BACKSPACE: Command.UNDO,
    arcade.key.R: Command.RESET,
    arcade.key.F5: Command.RESET,
    arcade.key.ENTER: Command.ADVANCE,
    arcade.key.NUM_ENTER: Command.ADVANCE,
}


class GameWindow(arcade.Window):
    """Main game window using Arcade."""

    UPDATE_RATE = 1 / 60

    def __init__(self, levels: LevelSet, start_index: int = 0):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, "Sokoban")

        self.set_update_rate(self.UPDATE_RATE)

        self.controller = GameController(levels, start_index)
        self.renderer = ArcadeRenderer()
        self.animation_frame = 0

        arcade.set_background_color(arcade.color.BLACK)

    def on_update(self, delta_time: float):
        """Called every frame: win check without input."""
        self.animation_frame += 1

        was_playing = self.controller.phase == GamePhase.PLAYING
        self.controller.tick()
        if was_playing and self.controller.phase == GamePhase.SOLVED:
            print(f"\n=== VICTORY ===")
            print(f"Moves: {self.controller.move_count}  Pushes: {self.controller.push_count}")
            print(f"Solution: {self.controller.solution_string()}")
            print(f"===============\n")

    def on_key_press(self, key: int, modifiers: int):
        """Handle key press events."""
        if key == arcade.key.ESCAPE:
            self.close()
            return

        command = KEY_COMMANDS.get(key)
        if command is not None:
            self.controller.tick(command)

    def on_draw(self):
        """Render the game."""
        self.clear()
        frame_spec = ViewModelBuilder.build(self.controller, self.animation_frame)
        self.renderer.draw_frame(frame_spec)


def run_game(levels: LevelSet, start_index: int = 0):
    """Main entry point - creates window and runs game loop."""
    GameWindow(levels, start_index)
    arcade.run()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Sokoban (arcade front end)")
    parser.add_argument("levels", nargs="?", default=str(DEFAULT_LEVELS),
                        help="Level file (canonical !LEVEL format or legacy ';'-separated)")
    parser.add_argument("--level", type=int, default=1,
                        help="Level number to start on (1-based)")
    parser.add_argument("--verbose", action="store_true",
                        help="Log every move resolution")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        levels = load_level_file(args.levels)
    except LoadError as e:
        logger.error("Could not load levels: %s", e)
        return 1

    run_game(levels, max(args.level - 1, 0))
    return 0


if __name__ == "__main__":
    sys.exit(main())
