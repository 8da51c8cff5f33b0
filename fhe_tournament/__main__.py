"""
CLI entry point for the FHE tournament core.

Simulates clients submitting encrypted matches to a local deployment,
drives them through oracle verification and prints the resulting ranking.
"""

import argparse
import random
import sys
from argparse import Namespace
from pathlib import Path
from typing import TypedDict

from prettytable import PrettyTable

from .codec import decode_strings, encode_cleartext
from .config import CoreConfig
from .core import LocalDeployment, create_local_deployment
from .exceptions import CleartextDecodeError, ConfigurationError
from .interfaces import EventSink, ScoringFunction
from .logging_config import get_logger, setup_logging
from .rankers.scoring import ConstantScore, PlayerStatsScore
from .storage.jsonl_journal import JSONLEventJournal

PLAYER_NAMES = ["alice", "bob", "carol", "dave", "erin", "frank", "grace", "heidi"]
CHEAT_PATTERNS = ["aimbot:snap-180;snap-180;snap-180", "speedhack:x4"]


class CLIArgs(TypedDict):
    """Typed representation of parsed CLI arguments."""
    players: int
    matches: int
    forge_every: int
    cheat_every: int
    claimed_winner: str | None
    scoring: str
    seed: int
    key_length: int
    committee_size: int
    threshold: int
    workers: int
    journal: str | None
    debug: bool
    log_level: str


def parse_args(argv: list[str] | None = None) -> Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="FHE Tournament - encrypted match verification and ranking"
    )

    _ = parser.add_argument(
        "--players", type=int, default=4, help="Number of simulated players (default: 4)"
    )
    _ = parser.add_argument(
        "--matches", type=int, default=12, help="Number of matches to submit (default: 12)"
    )
    _ = parser.add_argument(
        "--forge-every",
        type=int,
        default=0,
        help="Forge the oracle cleartext of every Nth request (default: 0, never)",
    )
    _ = parser.add_argument(
        "--cheat-every",
        type=int,
        default=5,
        help="Submit a known cheating game log every Nth match (default: 5, 0 disables)",
    )
    _ = parser.add_argument(
        "--claimed-winner", help="Winner to validate (default: the computed winner)"
    )
    _ = parser.add_argument(
        "--scoring",
        choices=["constant", "stats"],
        default="constant",
        help="Per-match scoring function (default: constant)",
    )
    _ = parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    _ = parser.add_argument(
        "--key-length", type=int, default=1024, help="Paillier key length in bits (default: 1024)"
    )
    _ = parser.add_argument(
        "--committee-size", type=int, default=3, help="Oracle committee members (default: 3)"
    )
    _ = parser.add_argument(
        "--threshold", type=int, default=2, help="Signatures required per proof (default: 2)"
    )
    _ = parser.add_argument(
        "--workers", type=int, default=4, help="Oracle worker threads (default: 4)"
    )
    _ = parser.add_argument("--journal", help="Append committed events to this JSONL file")
    _ = parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def args_to_typed(ns: Namespace) -> CLIArgs:
    """Convert argparse Namespace to typed CLIArgs."""
    return CLIArgs(
        players=ns.players,
        matches=ns.matches,
        forge_every=ns.forge_every,
        cheat_every=ns.cheat_every,
        claimed_winner=ns.claimed_winner,
        scoring=ns.scoring,
        seed=ns.seed,
        key_length=ns.key_length,
        committee_size=ns.committee_size,
        threshold=ns.threshold,
        workers=ns.workers,
        journal=ns.journal,
        debug=ns.debug,
        log_level=ns.log_level,
    )


def validate_config(args: CLIArgs) -> CoreConfig:
    """Validate simulation parameters and build the core configuration."""
    if not (1 <= args["players"] <= len(PLAYER_NAMES)):
        raise ConfigurationError(
            f"players must be between 1 and {len(PLAYER_NAMES)}, got {args['players']}"
        )
    if args["matches"] <= 0:
        raise ConfigurationError(f"matches must be positive, got {args['matches']}")
    if args["forge_every"] < 0 or args["cheat_every"] < 0:
        raise ConfigurationError("forge-every and cheat-every must not be negative")

    return CoreConfig(
        key_length=args["key_length"],
        committee_size=args["committee_size"],
        threshold=args["threshold"],
        oracle_workers=args["workers"],
    )


def forge_player(request_id: int, cleartext: bytes) -> bytes:
    """Swap the player id of a match cleartext for an impostor."""
    try:
        stats, log, _ = decode_strings(cleartext, 3)
    except CleartextDecodeError:
        return cleartext + b" "
    return encode_cleartext([stats, log, "mallory"])


def submit_matches(deployment: LocalDeployment, args: CLIArgs, rng: random.Random) -> list[int]:
    """Encrypt and submit simulated matches client-side."""
    backend = deployment.backend
    players = PLAYER_NAMES[: args["players"]]
    match_ids = list[int]()

    for i in range(1, args["matches"] + 1):
        player = rng.choice(players)
        stats = f"kills={rng.randint(0, 20)};score={rng.randint(0, 100)}"
        if args["cheat_every"] and i % args["cheat_every"] == 0:
            log = rng.choice(CHEAT_PATTERNS)
        else:
            log = ";".join(f"t{t}:{rng.choice(['move', 'shoot', 'hide'])}" for t in range(6))

        match_id = deployment.core.submit_match(
            backend.encrypt_text(stats),
            backend.encrypt_text(log),
            backend.encrypt_text(player),
        )
        match_ids.append(match_id)

    return match_ids


def verify_matches(deployment: LocalDeployment, match_ids: list[int], forge_every: int) -> None:
    """Request verification of every match, retrying those that were rejected."""
    logger = get_logger("verify_matches")
    core = deployment.core

    if forge_every:
        deployment.oracle.tamper = lambda rid, ct: forge_player(rid, ct) if rid % forge_every == 0 else ct

    for match_id in match_ids:
        _ = core.request_verification(match_id)
    report = deployment.settle()
    print(f"First pass: {len(report.applied)} verified, {len(report.failures)} rejected")

    deployment.oracle.tamper = None
    retry = [m for m in match_ids if not core.get_decrypted_match_data(m)[3]]
    if retry:
        logger.info(f"Re-requesting verification for {len(retry)} match(es)")
        for match_id in retry:
            _ = core.request_verification(match_id)
        report = deployment.settle()
        print(f"Retry pass: {len(report.applied)} verified, {len(report.failures)} rejected")


def print_rankings(deployment: LocalDeployment, match_ids: list[int]) -> str | None:
    """Reveal per-player counters and print the ranking table."""
    core = deployment.core
    rankings = core.calculate_rankings(match_ids)

    for player_id in rankings.player_ids:
        _ = core.request_player_stats_decryption(player_id)
    _ = deployment.settle()

    table = PrettyTable()
    table.field_names = ["Rank", "Player", "Score", "Verified matches"]
    table.align["Rank"] = "r"
    table.align["Score"] = "r"
    table.align["Verified matches"] = "r"

    order = sorted(zip(rankings.player_ids, rankings.scores), key=lambda x: x[1], reverse=True)
    for i, (player_id, score) in enumerate(order, 1):
        table.add_row([i, player_id, score, core.get_revealed_player_stats(player_id)])

    print(table)
    print(f"Unique players seen: {rankings.unique_players}")
    return core.validator.expected_winner(match_ids)


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    raw_args = parse_args(argv)
    args = args_to_typed(raw_args)

    setup_logging(level=args["log_level"], debug=args["debug"])
    logger = get_logger("main")

    try:
        config = validate_config(args)
    except ConfigurationError as e:
        logger.error(str(e))
        print(f"Error: {e}")
        sys.exit(1)

    scoring: ScoringFunction = (
        PlayerStatsScore() if args["scoring"] == "stats" else ConstantScore(config.match_score)
    )
    sinks = list[EventSink]()
    if args["journal"]:
        sinks.append(JSONLEventJournal(Path(args["journal"])))

    print("FHE Tournament - encrypted match verification")
    print("=" * 60)
    print(f"Players: {args['players']}  Matches: {args['matches']}")
    print(f"Committee: {config.threshold}-of-{config.committee_size}  Key: {config.key_length} bits")
    print("=" * 60)

    deployment = create_local_deployment(config, sinks=sinks, scoring=scoring)
    try:
        rng = random.Random(args["seed"])
        match_ids = submit_matches(deployment, args, rng)
        verify_matches(deployment, match_ids, args["forge_every"])

        flagged = [
            m
            for m in match_ids
            if deployment.core.get_decrypted_match_data(m)[3]
            and deployment.core.detect_cheating_patterns(m, CHEAT_PATTERNS)
        ]
        print(f"Matches matching known cheat patterns: {flagged or 'none'}")

        print("\nFinal Rankings:")
        expected = print_rankings(deployment, match_ids)

        claimed = args["claimed_winner"] or expected
        if claimed is None:
            print("No verified matches; nothing to validate")
        else:
            valid = deployment.core.validate_tournament_result(match_ids, claimed)
            print(f"Claimed winner {claimed!r}: {'VALID' if valid else 'INVALID'}")
    except KeyboardInterrupt:
        logger.warning("Run interrupted by user")
        print("\nRun interrupted by user")
        sys.exit(1)
    finally:
        deployment.close()


if __name__ == "__main__":
    main()
