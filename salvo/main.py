"""Application entry point: play simulated matches with the targeting engine."""

from __future__ import annotations

import argparse
import logging
import random
import statistics
from collections import Counter

from salvo.core.models import WeaponKind
from salvo.infra.config import load_default_env_files, load_targeting_config
from salvo.infra.logging import setup_logging, shutdown_logging
from salvo.sim.match import MatchResult, play_match

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play simulated Battleship matches.")
    parser.add_argument("--games", type=int, default=1, help="Number of matches to play.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs.")
    parser.add_argument("--max-turns", type=int, default=100, help="Turn cap per match.")
    parser.add_argument("--bonus", type=int, default=3, help="Bonus markers per board.")
    parser.add_argument(
        "--no-weapons",
        action="store_true",
        help="Play with single shots only.",
    )
    return parser


def summarize(results: list[MatchResult]) -> dict[str, object]:
    """Aggregate match statistics."""
    turns = [result.turns for result in results if result.won]
    shots: Counter[WeaponKind] = Counter()
    for result in results:
        shots.update(result.shots)
    return {
        "games": len(results),
        "wins": sum(1 for result in results if result.won),
        "mean_turns": statistics.fmean(turns) if turns else None,
        "best_turns": min(turns) if turns else None,
        "worst_turns": max(turns) if turns else None,
        "shots": {weapon.value: count for weapon, count in sorted(shots.items())},
        "inconsistencies": sum(result.inconsistencies for result in results),
    }


def main(argv: list[str] | None = None) -> int:
    """Run the salvo simulator."""
    args = build_parser().parse_args(argv)
    load_default_env_files()
    setup_logging()
    config = load_targeting_config()
    rng = random.Random(args.seed)
    inventory = {} if args.no_weapons else None

    results: list[MatchResult] = []
    try:
        for game in range(args.games):
            result = play_match(
                rng,
                config=config,
                inventory=inventory,
                bonus_count=args.bonus,
                max_turns=args.max_turns,
            )
            logger.info("game=%d won=%s turns=%d", game + 1, result.won, result.turns)
            results.append(result)
        summary = summarize(results)
        logger.info("summary", extra={"summary": summary})
        print(summary)
    finally:
        shutdown_logging()
    return 0 if all(result.won for result in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
