"""
Zombie Chickens CLI - Command-line interface for the engine.

Usage:
    zombiechickens play <name> [<name> ...]   Hot-seat game in the terminal
    zombiechickens serve                      Run the HTTP API

SERVER_PORT sets the default port for `serve` (8080).
"""

import argparse
import logging
import os
import sys

from .engine_core import PlayChoices, Prompt, create_new_game
from .engine_core.errors import InvalidPlayerCountError
from .render import RenderConfig, TextRenderer

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080


class TerminalInput:
    """Reads a choice for a prompt from a text stream, re-asking until valid."""

    def __init__(self, renderer: TextRenderer, stdin=None, stdout=None):
        self.renderer = renderer
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def read_choice(self, prompt: Prompt) -> int:
        while True:
            self.stdout.write(self.renderer.render_prompt(prompt) + "\n> ")
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                raise EOFError("input closed")
            try:
                choice = int(line.strip())
            except ValueError:
                self.stdout.write("Please enter a number.\n")
                continue
            if prompt.accepts(choice):
                return choice
            valid = ", ".join(str(c) for c in prompt.valid_choices)
            self.stdout.write(f"Invalid choice, expected one of: {valid}\n")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Zombie Chickens - defend your farm through the night",
        prog="zombiechickens",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a hot-seat game in the terminal")
    play_parser.add_argument("names", nargs="+", help="Player names (1-4)")
    play_parser.add_argument("--seed", type=int, help="Shuffle seed for a reproducible game")
    play_parser.add_argument(
        "--debug-events", action="store_true", help="Put every event at the top of the night deck"
    )
    play_parser.add_argument("--no-color", action="store_true", help="Plain text output")
    play_parser.add_argument(
        "--manual-placement",
        action="store_true",
        help="Ask where to put ammo and hay instead of placing them automatically",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument(
        "--port", type=int, default=int(os.getenv("SERVER_PORT", DEFAULT_PORT))
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_play(args, stdin=None, stdout=None):
    """Run a game in the terminal until every player is eliminated."""
    out = stdout or sys.stdout
    renderer = TextRenderer(RenderConfig(color=not args.no_color))
    reader = TerminalInput(renderer, stdin=stdin, stdout=out)
    choices = PlayChoices(
        autoload_shotgun=not args.manual_placement,
        auto_build_hay_wall=not args.manual_placement,
    )

    try:
        game = create_new_game(
            *args.names,
            seed=args.seed,
            debug_events=args.debug_events,
            play_choices=choices,
        )
    except InvalidPlayerCountError as e:
        out.write(f"Error: {e}\n")
        sys.exit(1)

    result = game.advance()
    while result.continues:
        if result.prompt is None:
            out.write(renderer.render(game.snapshot()) + "\n")
            out.write("The sun rises on a new day.\n\n")
            result = game.advance()
            continue

        out.write(renderer.render(game.snapshot()) + "\n")
        try:
            choice = reader.read_choice(result.prompt)
        except EOFError:
            out.write("\nInput closed, quitting.\n")
            sys.exit(1)
        result = game.provide_input(choice)
        if not result.success:
            logger.warning("Choice rejected: %s", result.error)

    snap = game.snapshot()
    out.write("GAME OVER\n")
    out.write(f"The farms held out for {snap.night_num - 1} night(s).\n")
    out.write(renderer.render_stats(snap) + "\n")


def cmd_serve(args):
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    from .api import create_app

    logger.info("Serving on %s:%d", args.host, args.port)
    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
