"""
Sidequests CLI - Command-line interface for the engine.

Usage:
    sidequests list                      List the sidequests
    sidequests leaderboard <game_id>     Show a leaderboard
    sidequests novelty <kind>            Run a novelty generator
    sidequests simulate <game_id>        Play a seeded session with a random player
    sidequests serve                     Run the API server
"""

import argparse
import json
import sys

from .config import (
    LEADERBOARD_DEFAULT_LIMIT,
    SIDEQUESTS_HOST,
    SIDEQUESTS_PORT,
    configure_logging,
)
from .errors import SidequestError


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Heinous Sidequests - Mini-game engine",
        prog="sidequests",
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING...")
    parser.add_argument("--data-dir", default=None, help="JSON store directory")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("list", help="List the sidequests")

    leaderboard_parser = subparsers.add_parser("leaderboard", help="Show a leaderboard")
    leaderboard_parser.add_argument("game_id", help="Sidequest id")
    leaderboard_parser.add_argument("--limit", type=int, default=LEADERBOARD_DEFAULT_LIMIT)
    leaderboard_parser.add_argument("--haunt", help="Only this haunt's players")

    novelty_parser = subparsers.add_parser("novelty", help="Run a novelty generator")
    novelty_parser.add_argument("kind", help="cryptic-compliments, monster-name-generator, ...")
    novelty_parser.add_argument("--seed", type=int, default=None)
    novelty_parser.add_argument("--ingredients", help="Comma-separated ingredient ids (curse-crafting)")

    simulate_parser = subparsers.add_parser("simulate", help="Play a seeded session with a random player")
    simulate_parser.add_argument("game_id", help="Sidequest id")
    simulate_parser.add_argument("--seed", type=int, default=None)
    simulate_parser.add_argument("--player", default="Simulator", help="Leaderboard name")
    simulate_parser.add_argument("--save", action="store_true", help="Submit the result to the JSON store")
    simulate_parser.add_argument("--verbose", "-v", action="store_true", help="Print every accepted action")

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default=SIDEQUESTS_HOST)
    serve_parser.add_argument("--port", type=int, default=SIDEQUESTS_PORT)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    commands = {
        "list": cmd_list,
        "leaderboard": cmd_leaderboard,
        "novelty": cmd_novelty,
        "simulate": cmd_simulate,
        "serve": cmd_serve,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)

    try:
        command(args)
    except SidequestError as e:
        print(f"Error: {e}")
        sys.exit(1)


def _store(args):
    from .persistence import JsonFileStore
    return JsonFileStore(args.data_dir)


def cmd_list(args):
    """List the sidequests."""
    from .games import catalog

    for info in catalog():
        clock = f"{info['session_clock_seconds']}s clock" if info["session_clock_seconds"] else "no clock"
        print(f"{info['game_id']:<22} {info['title']:<22} [{info['difficulty']}, {clock}]")
        print(f"{'':<22} {info['description']}")


def cmd_leaderboard(args):
    """Show a leaderboard."""
    from .games import get_game_class

    get_game_class(args.game_id)
    entries = _store(args).get_leaderboard(args.game_id, limit=args.limit, haunt=args.haunt)
    if not entries:
        print(f"No scores yet for {args.game_id}")
        return

    for rank, entry in enumerate(entries, start=1):
        haunt = f" ({entry.haunt})" if entry.haunt else ""
        print(f"{rank:>3}. {entry.name:<20} {entry.score:>6}{haunt}  {entry.date:%Y-%m-%d}")


def cmd_novelty(args):
    """Run a novelty generator."""
    from .engine_core import RandomContentProvider
    from .games.novelty import craft_curse, generate_novelty

    provider = RandomContentProvider(seed=args.seed)
    if args.kind == "curse-crafting" and args.ingredients:
        try:
            result = craft_curse(provider, [i.strip() for i in args.ingredients.split(",")])
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        result = generate_novelty(args.kind, provider)
    print(json.dumps(result, indent=2, ensure_ascii=False))


def cmd_simulate(args):
    """Play a seeded session with a random player."""
    from .simulator import simulate

    report = simulate(
        args.game_id,
        seed=args.seed,
        player_name=args.player,
        store=_store(args) if args.save else None,
    )

    if args.verbose:
        for line in report.log:
            print(line)
        print()

    print(f"Game:     {report.game_id}")
    print(f"Seed:     {report.seed}")
    print(f"Actions:  {report.actions_accepted}/{report.actions_sent} accepted")
    if not report.finished:
        print(f"Unfinished after {report.elapsed_ms / 1000:.1f}s of game time")
        sys.exit(1)

    result = report.result
    print(f"Outcome:  {result.outcome.value.upper()}")
    print(f"Score:    {result.final_score}")
    print(f"Attempts: {result.attempts} ({result.successes} won, {result.failures} lost)")
    print(f"Time:     {result.elapsed_ms / 1000:.1f}s")


def cmd_serve(args):
    """Run the API server."""
    import uvicorn

    from .api import APIService, create_app

    if args.reload:
        # Reload needs an import string; the module-level app uses an in-memory store
        uvicorn.run("sidequests.api.app:app", host=args.host, port=args.port, reload=True)
        return

    app = create_app(APIService(store=_store(args)))
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
