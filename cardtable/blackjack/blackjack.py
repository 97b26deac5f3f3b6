"""
This module is used to run automated games of Blackjack.

Bot players are created once, so their bankrolls carry over from round to
round. Every round gets a freshly shuffled deck and a new `GameEngine`.
Players who can no longer cover the minimum bet sit out, and the simulation
stops early when nobody can.

Run it from the command line, for example:

    cardtable-sim --num_games 1000 --players 3 --strat standard --seed 42

`--verbose` logs every dealt card and decision through `LoggingGameObserver`.
"""

import argparse
import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from cardtable.blackjack.action import Action
from cardtable.blackjack.actor import Player
from cardtable.blackjack.bankroll import Bankroll, Bet
from cardtable.blackjack.decision_logger import decision_logger
from cardtable.blackjack.engine import GameEngine, PlayerHandKey, RoundResults
from cardtable.blackjack.observer import GameObserver, LoggingGameObserver
from cardtable.blackjack.payout import PayoutCalculator, StandardPayoutCalculator
from cardtable.blackjack.rules import Rules
from cardtable.blackjack.stats import SimulationStats
from cardtable.blackjack.strategy import (
    BasicBotStrategy,
    BotSettings,
    FixedActionStrategy,
    Strategy,
)
from cardtable.common.deck import Deck

logger = logging.getLogger("cardtable.simulation")

STRATEGY_CHOICES = ["conservative", "standard", "aggressive", "stand"]


@dataclass
class RoundOutcome:
    engine: GameEngine
    results: RoundResults
    payouts: Dict[PlayerHandKey, int]


def generate_player_names(num_players: int) -> List[str]:
    """A lone player is just "Player"; otherwise Player1..PlayerN."""
    if num_players < 1:
        raise ValueError("At least one player is required.")
    if num_players == 1:
        return ["Player"]
    return [f"Player{i}" for i in range(1, num_players + 1)]


def create_strategy(name: str) -> Strategy:
    if name == "stand":
        return FixedActionStrategy(Action.STAND)
    return BasicBotStrategy(BotSettings.from_name(name))


def create_players(
    names: Sequence[str], strategy_name: str = "standard", bankroll: int = 100
) -> List[Player]:
    strategy = create_strategy(strategy_name)
    return [Player(name, Bankroll(bankroll), strategy) for name in names]


def choose_bot_bet(player: Player, rules: Rules) -> int:
    """Bet a tenth of the bankroll, never less than the table minimum."""
    return max(rules.min_bet, player.bankroll.balance // 10)


def play_round(
    players: Sequence[Player],
    deck: Deck,
    payout_calculator: PayoutCalculator,
    rules: Rules,
    observer: Optional[GameObserver] = None,
) -> Optional[RoundOutcome]:
    """
    Place bets for everyone who can cover the minimum and play one round.

    Returns None, without dealing, when no player can bet.
    """
    for player in players:
        player.reset_for_new_round()

    active = [p for p in players if p.bankroll.balance >= rules.min_bet]
    if not active:
        return None

    for player in active:
        player.start_new_round_with_bet(Bet(choose_bot_bet(player, rules)))

    engine = GameEngine(deck, payout_calculator, active, observer=observer, rules=rules)
    engine.start_round()
    engine.play_players()
    engine.dealer_play()
    results = engine.resolve_results()
    payouts = engine.apply_payouts(results)
    return RoundOutcome(engine, results, payouts)


def run_simulation(
    players: Sequence[Player],
    num_games: int,
    seed: Optional[int] = None,
    rules: Optional[Rules] = None,
    observer: Optional[GameObserver] = None,
    payout_calculator: Optional[PayoutCalculator] = None,
) -> SimulationStats:
    """
    Play up to `num_games` rounds and collect statistics.

    With a seed, round `i` uses a deck seeded with `seed + i`, so the whole run
    is reproducible.
    """
    rules = rules or Rules()
    payout_calculator = payout_calculator or StandardPayoutCalculator()
    stats = SimulationStats()

    for game_number in range(num_games):
        deck_seed = None if seed is None else seed + game_number
        outcome = play_round(
            players, Deck(seed=deck_seed), payout_calculator, rules, observer
        )
        if outcome is None:
            logger.info(
                "No player can cover the minimum bet; stopping after %d game(s)",
                game_number,
            )
            break
        stats.update(outcome.results, outcome.payouts, outcome.engine.players)

    return stats


def main(argv: Optional[Sequence[str]] = None):
    """
    Main function to run a simulation.

    It parses the command line, creates the bot players, plays the requested
    number of games and prints the statistics.
    """
    parser = argparse.ArgumentParser(description="Simulate Blackjack rounds with bot players.")
    parser.add_argument(
        "--num_games", type=int, default=100, help="Number of rounds to simulate"
    )
    parser.add_argument(
        "--players", type=int, default=1, help="Number of bot players at the table"
    )
    parser.add_argument(
        "--strat",
        type=str,
        choices=STRATEGY_CHOICES,
        default="standard",
        help="Bot preset: 'conservative' hits to 15 and never doubles, 'standard' hits to 16, "
        "'aggressive' hits to 17, 'stand' never draws",
    )
    parser.add_argument(
        "--bankroll", type=int, default=100, help="Starting bankroll for each player"
    )
    parser.add_argument("--min_bet", type=int, default=1, help="Minimum bet amount")
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for reproducible deck order"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Log every card and decision.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Records from this logger reach the root handler regardless of the root level
    decision_logger.set_level(logging.INFO if args.verbose else logging.WARNING)
    decision_logger.clear_history()

    rules = Rules(min_bet=args.min_bet)
    players = create_players(
        generate_player_names(args.players), args.strat, args.bankroll
    )
    observer = LoggingGameObserver() if args.verbose else None

    start_time = time.time()
    stats = run_simulation(players, args.num_games, seed=args.seed, rules=rules, observer=observer)
    duration = time.time() - start_time

    report = stats.report()
    print("Simulation completed.")
    print(f"Rounds played: {report['games_played']:,}")
    print(f"Hands played: {report['hands_played']:,}")
    print(f"Player wins: {report['player_wins']:,}")
    print(f"Dealer wins: {report['dealer_wins']:,}")
    print(f"Draws: {report['draws']:,}")
    print(f"Net Earnings: {report['net_earnings']:,}")
    print(f"Total Wagered: {report['total_wagered']:,}")
    print(f"House Edge: {report['house_edge']:.2f}%")
    print(
        f"Net per player-round: mean {report['mean_net_per_round']:.2f}, "
        f"std {report['std_net_per_round']:.2f}"
    )
    summary = decision_logger.get_decision_summary()
    by_action = ", ".join(
        f"{action} {count:,}" for action, count in sorted(summary["by_action"].items())
    )
    print(f"Decisions: {summary['total_decisions']:,} ({by_action or 'none'})")
    print(f"Strategy fallbacks: {summary['fallback_count']:,}")
    for player in players:
        print(f"{player.name}: final balance {player.bankroll.balance}")
    print(f"\nDuration of simulation: {duration:.2f} seconds")
    return stats


if __name__ == "__main__":
    main()
