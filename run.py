"""
Fogwalk — run.py
Main entry point for the Fogwalk terminal game.
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure we can import fogwalk packages
project_root = Path(__file__).parent.resolve()
sys.path.insert(0, str(project_root))

from engine.data_loader import get_game_config, load_game_config
from ui.renderer import Renderer
from ui.states import Engine
from ui.screens import StartScreenState, SCREEN_WIDTH, SCREEN_HEIGHT


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Explore a fog-covered procedural world.")
    parser.add_argument("--seed", type=int, default=None, help="world seed (random if omitted)")
    parser.add_argument("--config", type=Path, default=None, help="game config TOML (defaults to data/game.toml)")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = load_game_config(args.config) if args.config else get_game_config()
    renderer = Renderer(width=SCREEN_WIDTH, height=SCREEN_HEIGHT, title="Fogwalk")
    engine = Engine(renderer=renderer, initial_state_cls=StartScreenState, config=config, seed=args.seed)
    engine.run()

if __name__ == "__main__":
    main()
