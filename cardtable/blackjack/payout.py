"""
Settlement rules.

A payout calculator turns the outcome of one hand into a signed change to
the player's bankroll: positive when the player wins, negative when the
dealer wins and zero on a push.
"""

from abc import ABC, abstractmethod
from enum import Enum

from cardtable.blackjack.bankroll import InvalidBetError


class RoundResult(Enum):
    """Outcome of one player hand against the dealer."""

    PLAYER_WIN = "player_win"
    DEALER_WIN = "dealer_win"
    PUSH = "push"


class PayoutCalculator(ABC):
    @abstractmethod
    def calculate_net_change(
        self, base_bet: int, result: RoundResult, doubled_down: bool
    ) -> int:
        """
        Args:
            base_bet: The bet originally placed on the hand (positive).
            result: The resolved outcome of the hand.
            doubled_down: Whether the hand was doubled down.

        Returns:
            Signed amount to apply to the player's bankroll.
        """


class StandardPayoutCalculator(PayoutCalculator):
    """
    Even money on a win, the stake lost on a loss, nothing on a push.
    A doubled hand settles twice the base bet. Naturals pay even money too.

    >>> StandardPayoutCalculator().calculate_net_change(10, RoundResult.PLAYER_WIN, True)
    20
    """

    def calculate_net_change(
        self, base_bet: int, result: RoundResult, doubled_down: bool
    ) -> int:
        if base_bet <= 0:
            raise InvalidBetError("Base bet must be greater than zero.")

        stake = base_bet * 2 if doubled_down else base_bet

        if result == RoundResult.PLAYER_WIN:
            return stake
        if result == RoundResult.DEALER_WIN:
            return -stake
        return 0
