# main.py
"""Terminal front end: prints the map as ASCII and reads one key name per line."""
import logging
import sys
from pathlib import Path
from typing import List, TextIO

import structlog
import yaml

from engine.action_handler import TurnOutcome
from engine.input_handler import InputHandler
from engine.main_loop import MainLoop, RenderSnapshot
from game.config import load_game_config, load_keybindings
from game.game_state import GameState
from game.world.game_map import TILE_ID_FLOOR
from utils.logging_utils import setup_logging

# --- Paths relative to this script's location ---
SCRIPT_DIR = Path(__file__).parent.resolve()
CONFIG_DIR = SCRIPT_DIR / "config"

CONFIG_FILE = CONFIG_DIR / "config.yaml"
KEYBINDINGS_FILE = CONFIG_DIR / "keybindings.toml"
# --- End Paths ---

log = structlog.get_logger()  # module-level logger


def render_ascii(snapshot: RenderSnapshot) -> List[str]:
    """Draws explored tiles, visible entities, an HP line and the messages.

    Walls and floors are ``#``/``.`` when visible and ``+``/``,`` when only
    remembered.
    """
    height, width = snapshot.tiles.shape
    grid = [[" "] * width for _ in range(height)]
    for y in range(height):
        for x in range(width):
            if not snapshot.explored[y, x]:
                continue
            floor = snapshot.tiles[y, x] == TILE_ID_FLOOR
            if snapshot.visible[y, x]:
                grid[y][x] = "." if floor else "#"
            else:
                grid[y][x] = "," if floor else "+"
    # Later rows draw over earlier ones, so living entities cover corpses.
    for x, y, glyph, _color in snapshot.entities:
        grid[y][x] = chr(glyph)

    lines = ["".join(row).rstrip() for row in grid]
    lines.append(
        f"HP: {snapshot.player_hp}/{snapshot.player_max_hp}  Turn: {snapshot.turn_count}"
    )
    lines.extend(text for text, _color in snapshot.messages)
    return lines


def run(main_loop: MainLoop, input_handler: InputHandler, stdin: TextIO, stdout: TextIO) -> None:
    stdout.write("\n".join(render_ascii(main_loop.render_state())) + "\n")
    for line in stdin:
        key = line.strip()
        if not key:
            continue
        action = input_handler.get_action(key)
        if action is not None and action.get("type") == "toggle_fullscreen":
            log.info("Fullscreen is not available in the terminal front end")
        outcome = main_loop.submit_intent(action)
        if outcome is TurnOutcome.EXIT:
            log.info("Exiting", turn_count=main_loop.turn_count)
            return
        stdout.write("\n".join(render_ascii(main_loop.render_state())) + "\n")


def main() -> None:
    """Main entry point for the application."""
    setup_logging(logging.INFO)
    log.info("Application starting...")
    log.info(f"Config directory: {CONFIG_DIR}")

    try:
        config = load_game_config(CONFIG_FILE)
        keybindings_config = load_keybindings(KEYBINDINGS_FILE)
        game_state = GameState.new_game(config)
    except FileNotFoundError as e:
        log.critical("Required file not found during init", error=str(e), exc_info=True)
        sys.exit(f"Initialization failed: File not found - {e}")
    except ValueError as e:
        log.critical("Invalid configuration", error=str(e), exc_info=True)
        sys.exit(f"Configuration failed: {e}")
    except yaml.YAMLError as e:
        log.critical("Config file is not valid YAML", error=str(e), exc_info=True)
        sys.exit(f"Configuration failed: {e}")

    main_loop = MainLoop(game_state)
    input_handler = InputHandler(keybindings_config)
    run(main_loop, input_handler, sys.stdin, sys.stdout)


if __name__ == "__main__":
    main()
