#!/usr/bin/env python3
"""
Play battle arenas in the terminal and inspect leaderboards.

Usage:
    python scripts/battle.py create --arena arena.json
    python scripts/battle.py play --arena-id ID --player NAME
    python scripts/battle.py leaderboard --arena-id ID

Examples:
    # Store an arena definition and play it
    python scripts/battle.py create --arena sample_arenas/snacks.json
    python scripts/battle.py play --arena-id 3f2a9c1b7e40 --player alice

    # Play straight from a file (never saved)
    python scripts/battle.py play --arena sample_arenas/snacks.json --player bob

    # Play a stored arena without saving
    python scripts/battle.py play --arena-id 3f2a9c1b7e40 --player bob --no-save

    # Reproducible schedule
    python scripts/battle.py play --arena-id 3f2a9c1b7e40 --player carol --seed 7
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from arena import config
from arena.tournament.aggregation import aggregate_results
from arena.tournament.display import format_leaderboard
from arena.tournament.exceptions import ArenaClosedError, EmptyScheduleError
from arena.tournament.models import Arena, Competitor, validate_roster
from arena.tournament.runner import SessionConfig, SessionRunner
from arena.tournament.storage import ArenaStorage


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Head-to-head battle arenas in the terminal.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Arena file format (JSON):
  {"title": "...", "description": "...",
   "items": [{"id": "a", "title": "...", "description": "..."}, ...]}
'''
    )
    parser.add_argument(
        '--data-dir',
        type=str, default=config.DATA_DIR,
        help=f'Directory for storing arenas and results (default: {config.DATA_DIR})'
    )
    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Minimal output'
    )

    sub = parser.add_subparsers(dest='command', required=True)

    create = sub.add_parser('create', help='Store an arena definition')
    create.add_argument('--arena', type=str, required=True, help='Arena JSON file')
    create.add_argument('--closed', action='store_true', help='Create the arena closed')

    play = sub.add_parser('play', help='Play one session')
    source = play.add_mutually_exclusive_group(required=True)
    source.add_argument('--arena', type=str, help='Arena JSON file')
    source.add_argument('--arena-id', type=str, help='Stored arena ID')
    play.add_argument('--player', '-p', type=str, required=True, help='Player name')
    play.add_argument('--seed', type=int, default=None, help='Seed for a reproducible schedule')
    play.add_argument('--no-save', action='store_true',
                      help='Do not store the finished session (file arenas are never stored)')

    board = sub.add_parser('leaderboard', help='Print the aggregated leaderboard')
    board.add_argument('--arena-id', type=str, required=True, help='Stored arena ID')
    board.add_argument('--include-unknown', action='store_true',
                       help='Also rank items referenced by old sessions but missing from the roster')

    return parser.parse_args(argv)


def load_arena_file(path: str) -> Arena:
    """Load an arena definition from JSON."""
    with open(path) as f:
        data = json.load(f)
    items = [Competitor.from_dict(item) for item in data['items']]
    validate_roster(items)
    return Arena(
        arena_id=data.get('arena_id') or Path(path).stem,
        title=data['title'],
        description=data.get('description', ''),
        items=items,
        is_open=data.get('is_open', True)
    )


def cmd_create(args, storage: ArenaStorage) -> int:
    try:
        arena = load_arena_file(args.arena)
        stored = storage.create_arena(
            title=arena.title,
            description=arena.description,
            items=arena.items,
            is_open=not args.closed
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    print(f"Arena ID: {stored.arena_id}")
    return 0


def cmd_play(args, storage: ArenaStorage) -> int:
    if args.arena_id:
        arena = storage.load_arena(args.arena_id)
        if arena is None:
            print(f"Error: arena '{args.arena_id}' not found")
            return 1
        save = not args.no_save
    else:
        try:
            arena = load_arena_file(args.arena)
        except ValueError as e:
            print(f"Error: {e}")
            return 1
        # File arenas are not in the store, so there is nothing to attach results to
        save = False

    runner = SessionRunner(
        SessionConfig(
            player_name=args.player,
            seed=args.seed,
            save_results=save,
            data_dir=args.data_dir
        ),
        storage=storage,
        verbose=not args.quiet
    )

    try:
        artifact = runner.run(arena)
    except (ArenaClosedError, EmptyScheduleError) as e:
        print(f"Error: {e}")
        return 1

    if artifact and artifact.result_id and not args.quiet:
        print(f"\nSaved result: {artifact.result_id}")
    return 0


def cmd_leaderboard(args, storage: ArenaStorage) -> int:
    arena = storage.load_arena(args.arena_id)
    if arena is None:
        print(f"Error: arena '{args.arena_id}' not found")
        return 1

    sessions = storage.load_results(arena.arena_id)
    items = aggregate_results(sessions, arena.items, include_unknown=args.include_unknown)

    if not args.quiet:
        print(f"Arena: {arena.title}")
        print(f"Sessions: {len(sessions)}\n")
    print(format_leaderboard(items))
    return 0


COMMANDS = {
    'create': cmd_create,
    'play': cmd_play,
    'leaderboard': cmd_leaderboard,
}


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING if args.quiet else config.LOG_LEVEL)

    storage = ArenaStorage(args.data_dir)
    return COMMANDS[args.command](args, storage)


if __name__ == "__main__":
    sys.exit(main())
