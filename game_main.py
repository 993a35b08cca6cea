# game_main.py - Main Loop

import argparse
import logging
import sys
from pathlib import Path

import pygame

from game_controller import Command, GameController, GamePhase
from map_parser import LevelSet, LoadError, load_level_file
from presentation_model import ViewModelBuilder
from renderer import Renderer, WINDOW_WIDTH, WINDOW_HEIGHT

logger = logging.getLogger(__name__)

DEFAULT_LEVELS = Path(__file__).resolve().parent / "levels" / "levels.txt"

KEY_COMMANDS = {
    pygame.K_UP: Command.UP,
    pygame.K_w: Command.UP,
    pygame.K_DOWN: Command.DOWN,
    pygame.K_s: Command.DOWN,
    pygame.K_LEFT: Command.LEFT,
    pygame.K_a: Command.LEFT,
    pygame.K_RIGHT: Command.RIGHT,
    pygame.K_d: Command.RIGHT,
    pygame.K_z: Command.UNDO,
    pygame.K_BACKSPACE: Command.UNDO,
    pygame.K_r: Command.RESET,
    pygame.K_F5: Command.RESET,
    pygame.K_RETURN: Command.ADVANCE,
    pygame.K_KP_ENTER: Command.ADVANCE,
}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sokoban - push every box onto a target")
    parser.add_argument("levels", nargs="?", default=str(DEFAULT_LEVELS),
                        help="Level file (canonical !LEVEL format or legacy ';'-separated)")
    parser.add_argument("--level", type=int, default=1,
                        help="Level number to start on (1-based)")
    parser.add_argument("--verbose", action="store_true",
                        help="Log every move resolution")
    return parser


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def print_victory(controller: GameController):
    print(f"\n=== VICTORY ===")
    print(f"Level: {controller.level_index + 1}")
    print(f"Moves: {controller.move_count}  Pushes: {controller.push_count}")
    print(f"Solution: {controller.solution_string()}")
    print(f"===============\n")


def run_game(levels: LevelSet, start_index: int = 0):
    pygame.init()
    screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
    pygame.display.set_caption("Sokoban")

    controller = GameController(levels, start_index)
    renderer = Renderer(screen)

    clock = pygame.time.Clock()
    animation_frame = 0

    running = True
    while running:
        clock.tick(60)
        animation_frame += 1

        # Event handling: one abstract command per key press
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                    continue
                command = KEY_COMMANDS.get(event.key)
                if command is not None:
                    controller.tick(command)

        # Win check runs every frame, even without input
        was_playing = controller.phase == GamePhase.PLAYING
        controller.tick()
        if was_playing and controller.phase == GamePhase.SOLVED:
            print_victory(controller)

        frame_spec = ViewModelBuilder.build(controller, animation_frame)
        renderer.draw_frame(frame_spec)

        pygame.display.flip()

    pygame.quit()


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        levels = load_level_file(args.levels)
    except LoadError as e:
        logger.error("Could not load levels: %s", e)
        return 1

    run_game(levels, max(args.level - 1, 0))
    return 0


if __name__ == "__main__":
    sys.exit(main())
