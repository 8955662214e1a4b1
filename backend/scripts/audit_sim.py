#!/usr/bin/env python3
"""
Headless audit simulation of the outcome draw and payout.

Drives the selector, bet book and payout calculator for many rounds with a
seeded RNG (no timers) and writes a one-row summary CSV.

Usage:
    python -m scripts.audit_sim --rounds 100000 --seed AUDIT_2025 --out out/audit_spread.csv
    python -m scripts.audit_sim --rounds 50000 --seed AUDIT_2025 --strategy 8 --out out/audit_lion.csv
"""
import argparse
import csv
import hashlib
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from diamond_hunt.config import settings
from diamond_hunt.config_hash import get_config_hash
from diamond_hunt.logic.bet_book import BetBook
from diamond_hunt.logic.ledger import Ledger
from diamond_hunt.logic.models import DEFAULT_ROSTER, Phase, Round
from diamond_hunt.logic.outcome import OutcomeSelector
from diamond_hunt.logic.payout import PayoutCalculator
from diamond_hunt.logic.rng import SeededRNG


SPREAD = "spread"


@dataclass
class SimulationStats:
    """Statistics accumulated during simulation."""
    total_wagered: float = 0.0
    total_won: float = 0.0
    rounds: int = 0
    wins: int = 0
    multiplier_hits: int = 0
    luck_sum: float = 0.0
    max_win: float = 0.0
    winner_counts: dict[int, int] = field(default_factory=dict)


def get_timestamp_iso() -> str:
    """Get ISO 8601 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def seed_to_int(seed_str: str) -> int:
    """Convert string seed to integer deterministically."""
    return int(hashlib.sha256(seed_str.encode()).hexdigest(), 16) % (2**31)


def parse_strategy(value: str) -> str | int:
    """'spread' bets on every competitor; a competitor id bets on that one only."""
    if value == SPREAD:
        return SPREAD
    try:
        competitor_id = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"strategy must be '{SPREAD}' or a competitor id, got {value!r}")
    if competitor_id not in {c.id for c in DEFAULT_ROSTER}:
        raise argparse.ArgumentTypeError(f"unknown competitor id {competitor_id}")
    return competitor_id


def run_simulation(
    rounds: int,
    seed_str: str,
    stake: float = 50.0,
    strategy: str | int = SPREAD,
    verbose: bool = False,
) -> SimulationStats:
    """
    Run headless simulation.

    Args:
        rounds: Number of rounds to simulate
        seed_str: Seed string for reproducibility
        stake: Amount wagered per chosen competitor per round
        strategy: 'spread' or a single competitor id
        verbose: Print progress

    Returns:
        SimulationStats with aggregated results
    """
    roster = DEFAULT_ROSTER
    targets = [c.id for c in roster] if strategy == SPREAD else [strategy]

    # Fund every wager up front so the ledger never rejects a bet
    ledger = Ledger(stake * len(targets) * rounds)
    bet_book = BetBook(ledger, roster)
    selector = OutcomeSelector(roster, SeededRNG(seed=seed_to_int(seed_str)))
    payout = PayoutCalculator(ledger, roster)

    stats = SimulationStats(winner_counts={c.id: 0 for c in roster})
    progress_interval = max(1, rounds // 100)

    for round_number in range(1, rounds + 1):
        if verbose and round_number % progress_interval == 0:
            pct = (round_number / rounds) * 100
            print(f"\rProgress: {pct:.1f}%", end="", flush=True)

        round_ = Round(round_number=round_number)
        for competitor_id in targets:
            bet_book.place_wager(round_, competitor_id, stake)
        stats.total_wagered += bet_book.total_wagered(round_)

        round_.phase = Phase.DRAWING
        luck = selector.draw_luck_factor()
        outcome = selector.select(luck)
        winnings = payout.compute_payout(round_, outcome.winner_id, outcome.multiplier)

        stats.rounds += 1
        stats.luck_sum += luck
        stats.total_won += winnings
        stats.winner_counts[outcome.winner_id] += 1
        if winnings > 0:
            stats.wins += 1
            stats.max_win = max(stats.max_win, winnings)
        if outcome.multiplier > 1:
            stats.multiplier_hits += 1

    if verbose:
        print("\rProgress: 100.0%")

    return stats


def generate_csv(
    rounds: int,
    seed_str: str,
    stake: float,
    strategy: str | int,
    stats: SimulationStats,
    output_path: str,
) -> None:
    """Write the one-row audit summary."""
    rtp = (stats.total_won / stats.total_wagered * 100) if stats.total_wagered > 0 else 0
    hit_freq = (stats.wins / stats.rounds * 100) if stats.rounds > 0 else 0
    multiplier_rate = (stats.multiplier_hits / stats.rounds * 100) if stats.rounds > 0 else 0
    avg_luck = stats.luck_sum / stats.rounds if stats.rounds > 0 else 0

    row = {
        "timestamp": get_timestamp_iso(),
        "config_hash": get_config_hash(),
        "rounds": rounds,
        "seed": seed_str,
        "strategy": strategy,
        "stake": f"{stake:.2f}",
        "total_wagered": f"{stats.total_wagered:.2f}",
        "total_won": f"{stats.total_won:.2f}",
        "rtp": f"{rtp:.4f}",
        "hit_freq": f"{hit_freq:.4f}",
        "multiplier_rate": f"{multiplier_rate:.4f}",
        "avg_luck": f"{avg_luck:.4f}",
        "max_win": f"{stats.max_win:.2f}",
    }
    for competitor in DEFAULT_ROSTER:
        count = stats.winner_counts.get(competitor.id, 0)
        share = (count / stats.rounds * 100) if stats.rounds > 0 else 0
        row[f"win_share_{competitor.name.lower()}"] = f"{share:.4f}"

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=row.keys())
        writer.writeheader()
        writer.writerow(row)

    print(f"CSV written to: {output_path}")


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Diamond Hunt outcome audit simulation")
    parser.add_argument("--rounds", type=int, required=True, help="Number of rounds to simulate")
    parser.add_argument("--seed", type=str, required=True, help="Seed string for reproducibility")
    parser.add_argument("--out", type=str, required=True, help="Output CSV path")
    parser.add_argument(
        "--stake",
        type=float,
        default=50.0,
        help="Wager per chosen competitor per round",
    )
    parser.add_argument(
        "--strategy",
        type=parse_strategy,
        default=SPREAD,
        help=f"'{SPREAD}' (bet on every competitor) or a competitor id",
    )
    parser.add_argument("--verbose", action="store_true", help="Show progress")

    args = parser.parse_args()

    if args.rounds < 1:
        parser.error("--rounds must be >= 1")
    if args.stake <= 0:
        parser.error("--stake must be > 0")

    print(f"Running simulation: rounds={args.rounds}, seed={args.seed}, strategy={args.strategy}")
    print(f"Config hash: {get_config_hash()}")
    print(f"Bonus multiplier: {settings.bonus_multiplier}x")

    stats = run_simulation(
        rounds=args.rounds,
        seed_str=args.seed,
        stake=args.stake,
        strategy=args.strategy,
        verbose=args.verbose,
    )

    generate_csv(
        rounds=args.rounds,
        seed_str=args.seed,
        stake=args.stake,
        strategy=args.strategy,
        stats=stats,
        output_path=args.out,
    )

    rtp = (stats.total_won / stats.total_wagered * 100) if stats.total_wagered > 0 else 0
    print("\nSummary:")
    print(f"  Rounds: {stats.rounds}")
    print(f"  Total wagered: {stats.total_wagered:.2f}")
    print(f"  Total won: {stats.total_won:.2f}")
    print(f"  RTP: {rtp:.4f}%")
    print(f"  Hit frequency: {(stats.wins / stats.rounds * 100):.4f}%")
    print(f"  Multiplier hits: {stats.multiplier_hits} ({(stats.multiplier_hits / stats.rounds * 100):.4f}%)")
    for competitor in DEFAULT_ROSTER:
        count = stats.winner_counts[competitor.id]
        print(f"  {competitor.display_tag} {competitor.name:<8} wins: {count} ({count / stats.rounds * 100:.2f}%)")

    return 0


if __name__ == "__main__":
    sys.exit(main())
