"""
This module contains the SimulationStats class which is responsible for
tracking and updating the statistics of a blackjack simulation.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Mapping

import numpy as np

from cardtable.blackjack.actor import Player
from cardtable.blackjack.engine import PlayerHandKey, RoundResults
from cardtable.blackjack.payout import RoundResult


class SimulationStats:
    """
    A class that holds the statistics of the simulation.
    """

    def __init__(self):
        """
        Initializes the SimulationStats with default values.
        """
        self.games_played = 0
        self.hands_played = 0
        self.player_wins = 0
        self.dealer_wins = 0
        self.draws = 0
        self.total_wagered = 0
        self.net_by_player: Dict[str, List[int]] = defaultdict(list)

    def update(
        self,
        results: RoundResults,
        payouts: Mapping[PlayerHandKey, int],
        players: Iterable[Player],
    ):
        """Updates the statistics with one settled round."""
        self.games_played += 1

        for _, result in results:
            self.hands_played += 1
            if result == RoundResult.PLAYER_WIN:
                self.player_wins += 1
            elif result == RoundResult.DEALER_WIN:
                self.dealer_wins += 1
            else:
                self.draws += 1

        for player in players:
            net = 0
            for player_hand in player.hands:
                key = PlayerHandKey.for_hand(player, player_hand)
                if key in payouts:
                    net += payouts[key]
                    self.total_wagered += player_hand.stake
            self.net_by_player[player.name].append(net)

    @property
    def net_earnings(self) -> int:
        return int(sum(sum(values) for values in self.net_by_player.values()))

    def report(self) -> dict:
        """
        Returns a dictionary containing the current statistics.
        """
        per_round = [net for values in self.net_by_player.values() for net in values]
        if per_round:
            returns = np.array(per_round, dtype=float)
            mean_net = float(np.mean(returns))
            std_net = float(np.std(returns))
        else:
            mean_net = 0.0
            std_net = 0.0

        if self.total_wagered > 0:
            house_edge = -self.net_earnings / self.total_wagered * 100
        else:
            house_edge = 0.0

        return {
            "games_played": self.games_played,
            "hands_played": self.hands_played,
            "player_wins": self.player_wins,
            "dealer_wins": self.dealer_wins,
            "draws": self.draws,
            "net_earnings": self.net_earnings,
            "total_wagered": self.total_wagered,
            "house_edge": house_edge,
            "mean_net_per_round": mean_net,
            "std_net_per_round": std_net,
        }
