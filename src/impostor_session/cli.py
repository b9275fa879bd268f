# Area: Shared
"""
impostor_session.cli — Command-line interface
=============================================

Administrative entry point for the session database.

Usage:
    python -m impostor_session init-db                 # Create the schema
    python -m impostor_session seed-packs              # Load bundled word packs
    python -m impostor_session packs --creator U1      # List visible packs
    python -m impostor_session show ABC123             # Print a session snapshot
    python -m impostor_session simulate --players 5    # Play a scripted game

Settings come from --config, a .env file, or IMPOSTOR_* environment
variables (see ``impostor_session._config``).
"""

import argparse
import json
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from ._config import load_config, validate_config
from ._core.enums import SessionStatus, VotingOutcome
from ._core.orchestrator import SessionOrchestrator
from ._core.random_source import SeededRandom
from ._shared import log_session_error, setup_logging
from ._store import SQLiteSessionStore, init_database
from .errors import ImpostorSessionError
from .word_packs import SQLiteWordPackProvider


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="impostor-session",
        description="Impostor game session engine - administrative commands",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  impostor-session init-db
  impostor-session --db games.db seed-packs
  impostor-session show K7P2QX --viewer player-2
  impostor-session simulate --players 6 --seed 42
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--db", type=str, help="SQLite database path (overrides config)")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create the database schema")
    commands.add_parser("seed-packs", help="Load the bundled default word packs")

    packs = commands.add_parser("packs", help="List word packs visible to a creator")
    packs.add_argument("--creator", type=str, default=None, help="Creator id")

    show = commands.add_parser("show", help="Print the snapshot of a session")
    show.add_argument("room_code", type=str, help="Room code")
    show.add_argument("--viewer", type=str, default=None, help="Reveal this participant's word")

    simulate = commands.add_parser("simulate", help="Play a scripted game and print the outcome")
    simulate.add_argument("--players", type=int, default=4, help="Number of players (default: 4)")
    simulate.add_argument("--seed", type=int, default=None, help="Random seed")

    return parser.parse_args(argv)


def build_services(config: Dict[str, Any], notifier=None) -> SessionOrchestrator:
    """Wire store, word packs and orchestrator from a config dict."""
    store = SQLiteSessionStore(
        config["db_path"], busy_timeout=config.get("busy_timeout_seconds", 5.0)
    )
    return SessionOrchestrator(
        store=store,
        word_packs=SQLiteWordPackProvider(store),
        config=config,
        notifier=notifier,
    )


def cmd_init_db(config: Dict[str, Any]) -> int:
    init_database(config["db_path"])
    print(f"Database ready: {config['db_path']}")
    return 0


def cmd_seed_packs(config: Dict[str, Any]) -> int:
    provider = SQLiteWordPackProvider(SQLiteSessionStore(config["db_path"]))
    inserted = provider.seed_defaults()
    print(f"Seeded {inserted} default word pack(s)")
    return 0


def cmd_packs(config: Dict[str, Any], creator: Optional[str]) -> int:
    provider = SQLiteWordPackProvider(SQLiteSessionStore(config["db_path"]))
    for pack in provider.list_visible(creator):
        tag = "default" if pack.is_default else ("public" if pack.is_public else "own")
        print(f"{pack.id:<24} {tag:<8} {len(pack.words):>3} pairs  {pack.name}")
    return 0


def cmd_show(config: Dict[str, Any], room_code: str, viewer: Optional[str]) -> int:
    orchestrator = build_services(config)
    session = orchestrator.find_session(room_code)
    snapshot = orchestrator.snapshot(session.id, viewer_id=viewer)
    print(json.dumps(snapshot, indent=2, ensure_ascii=False))
    return 0


def run_simulation(orchestrator: SessionOrchestrator, players: int,
                   rng: SeededRandom) -> VotingOutcome:
    """
    Play one scripted game.

    Everyone skips in round 1; from round 2 on, innocents vote for a
    player drawn at random (the impostor included) and the impostor votes
    for the first innocent. Ends when the session finishes.
    """
    packs = orchestrator.word_packs.list_visible()
    host = "player-1"
    session = orchestrator.create_session(host, packs[0].id)
    for n in range(2, players + 1):
        orchestrator.join(session.room_code, f"player-{n}")
    orchestrator.start_round(session.id, host)

    while True:
        session = orchestrator.get_session(session.id)
        if session.status == SessionStatus.FINISHED:
            return session.outcome

        while session.status == SessionStatus.PLAYING:
            speaker = session.current_turn_player_id
            session = orchestrator.advance_turn(session.id, speaker, expected_current=speaker)

        active = [p for p in orchestrator.players(session.id) if p.is_active]
        innocents = [p.participant_id for p in active if not p.is_impostor]
        for voter in active:
            if session.current_round == 1:
                orchestrator.submit_vote(session.id, voter.participant_id, skip=True)
                continue
            if voter.is_impostor:
                target = innocents[0]
            else:
                others = [p.participant_id for p in active if p.participant_id != voter.participant_id]
                target = rng.choice(others)
            orchestrator.submit_vote(session.id, voter.participant_id, target_id=target)

        result = orchestrator.resolve(session.id, expected_round=session.current_round)
        print(f"Round {result.round_number}: {result.outcome.value}"
              + (f" ({result.voted_out_id} voted out)" if result.voted_out_id else ""))


def cmd_simulate(config: Dict[str, Any], players: int, seed: Optional[int]) -> int:
    with tempfile.TemporaryDirectory() as tmp:
        sim_config = dict(config)
        sim_config["db_path"] = str(Path(tmp) / "simulation.db")
        if seed is not None:
            sim_config["random_seed"] = seed
        validate_config(sim_config)

        orchestrator = build_services(sim_config)
        orchestrator.word_packs.seed_defaults()

        outcome = run_simulation(orchestrator, players, SeededRandom(seed))
        print(f"Game over: {outcome.value}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    try:
        config = load_config(args.config)
        if args.db:
            config["db_path"] = args.db
        validate_config(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(log_file_path=config["log_file"], level=config["log_level"])

    try:
        if args.command == "init-db":
            return cmd_init_db(config)
        if args.command == "seed-packs":
            return cmd_seed_packs(config)
        if args.command == "packs":
            return cmd_packs(config, args.creator)
        if args.command == "show":
            return cmd_show(config, args.room_code, args.viewer)
        if args.command == "simulate":
            return cmd_simulate(config, args.players, args.seed)
    except ImpostorSessionError as e:
        log_session_error(e)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 1
