from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional

import pygame

from falling_blocks.game import Command, FallingBlocksGame, GameConfig
from .renderer import Renderer


KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_UP: Command.ROTATE,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_r: Command.RESET,
}


def run(config: Optional[GameConfig] = None, fps: int = 60) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = FallingBlocksGame(config)
        renderer = Renderer(cell_size=28)

        screen = pygame.display.set_mode(renderer.window_size(game.grid.width, game.grid.height))
        pygame.display.set_caption("Falling Blocks")

        last_fall = pygame.time.get_ticks()

        running = True
        while running:
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        command = KEY_TO_COMMAND.get(event.key)
                        if command is not None:
                            game.on_command(command)
                            if command == Command.RESET:
                                last_fall = pygame.time.get_ticks()

            # Gravity; the timer stops while the game is over
            now = pygame.time.get_ticks()
            if game.game_over:
                last_fall = now
            elif now - last_fall >= game.tick_interval_ms:
                game.on_tick()
                last_fall = now

            renderer.draw(screen, game.get_snapshot())
            clock.tick(fps)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks with the keyboard")
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--tick-ms", type=int, default=1000, help="Gravity interval in milliseconds")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--verbose", action="store_true")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    config = GameConfig(
        width=args.width,
        height=args.height,
        tick_interval_ms=args.tick_ms,
        random_seed=args.seed,
    )
    run(config, fps=args.fps)


if __name__ == "__main__":  # pragma: no cover
    main()
