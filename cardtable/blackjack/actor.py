"""
This module provides the `PlayerHand` and `Player` classes for a game of Blackjack.

A `Player` is created once per session and keeps its `Bankroll` across rounds.
Each round it holds one or two `PlayerHand`s: one after betting, two after a
split. A `PlayerHand` ties the cards of one hand to the bet riding on it and to
the per-hand flags (`PlayerHandState`) the engine sets while playing it.

Hands and players carry synthetic identifiers, so round results can name the
exact hand they belong to even when two split hands hold the same bet.

Exceptions:
    - `InsufficientFundsError`: Raised when a player cannot cover a bet.

This module is part of the `cardtable` package.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, List, Optional

from cardtable.blackjack.bankroll import Bankroll, Bet, InsufficientFundsError
from cardtable.blackjack.hand import BlackjackHand

if TYPE_CHECKING:
    from cardtable.blackjack.strategy import Strategy


def _new_id() -> str:
    return uuid.uuid4().hex


class PlayerHandState:
    """Per-hand flags, kept apart from the cards themselves."""

    __slots__ = ("has_stood", "has_doubled_down")

    def __init__(self):
        self.has_stood = False
        self.has_doubled_down = False

    def stand(self) -> None:
        self.has_stood = True

    def mark_doubled_down(self) -> None:
        self.has_doubled_down = True

    def reset(self) -> None:
        self.has_stood = False
        self.has_doubled_down = False

    def __eq__(self, other):
        if isinstance(other, PlayerHandState):
            return (self.has_stood, self.has_doubled_down) == (
                other.has_stood,
                other.has_doubled_down,
            )
        return NotImplemented

    def __repr__(self) -> str:
        return (
            f"PlayerHandState(has_stood={self.has_stood}, "
            f"has_doubled_down={self.has_doubled_down})"
        )


class PlayerHand:
    """One playable hand: its cards, its bet and its state flags."""

    def __init__(self, bet: Bet):
        if not isinstance(bet, Bet):
            raise TypeError(f"PlayerHand requires a Bet, got {bet!r}")
        self.hand_id = _new_id()
        self.bet = bet
        self.hand = BlackjackHand()
        self.state = PlayerHandState()

    def reset(self, bet: Bet) -> None:
        """
        Prepare this instance for a new round.

        Replaces the bet, clears the cards and state flags, and assigns a new
        identifier, leaving the hand equivalent to a freshly built one.
        """
        if not isinstance(bet, Bet):
            raise TypeError(f"PlayerHand requires a Bet, got {bet!r}")
        self.hand_id = _new_id()
        self.bet = bet
        self.hand.clear()
        self.state.reset()

    @property
    def stake(self) -> int:
        """Amount at risk on this hand, doubled after a double down."""
        if self.state.has_doubled_down:
            return self.bet.amount * 2
        return self.bet.amount

    def __repr__(self) -> str:
        return f"PlayerHand({self.hand!r}, bet={self.bet.amount}, {self.state!r})"


class Player:
    """A participant in a game of Blackjack."""

    def __init__(
        self,
        name: str,
        bankroll: Bankroll,
        strategy: Strategy,
        player_id: Optional[str] = None,
    ):
        """Creates a new player with the given parameters."""
        if not name or not name.strip():
            raise ValueError("A name is required.")
        if bankroll is None:
            raise ValueError(f"{name} needs a bankroll.")
        if strategy is None:
            raise ValueError(f"{name} needs a strategy.")
        self.name = name
        self.player_id = player_id or _new_id()
        self.bankroll = bankroll
        self.strategy = strategy
        self.hands: List[PlayerHand] = []

    @property
    def has_bet(self) -> bool:
        return bool(self.hands)

    def start_new_round_with_bet(self, bet: Bet) -> PlayerHand:
        """
        Place `bet` and set up a single empty hand for the coming round.

        The first hand instance is reused and any split hand from the previous
        round is dropped.

        Raises:
            InsufficientFundsError: If the bankroll cannot cover the bet.
        """
        if not self.bankroll.can_place_bet(bet.amount):
            raise InsufficientFundsError(
                f"{self.name} does not have enough money to bet {bet.amount}."
            )
        if self.hands:
            first = self.hands[0]
            first.reset(bet)
            self.hands = [first]
        else:
            self.hands = [PlayerHand(bet)]
        return self.hands[0]

    def add_hand(self, player_hand: PlayerHand) -> None:
        self.hands.append(player_hand)

    def find_hand(self, hand_id: str) -> PlayerHand:
        """
        Raises:
            KeyError: If none of this player's hands has `hand_id`.
        """
        for player_hand in self.hands:
            if player_hand.hand_id == hand_id:
                return player_hand
        raise KeyError(f"{self.name} has no hand {hand_id}")

    def reset_for_new_round(self) -> None:
        """Drop every hand; the player has no bet until the next one is placed."""
        self.hands = []

    def __repr__(self) -> str:
        return f"Player({self.name!r}, balance={self.bankroll.balance}, hands={len(self.hands)})"
