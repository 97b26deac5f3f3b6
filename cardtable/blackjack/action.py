"""Defines the Action enum for the possible actions a player can take in a game of blackjack."""
from enum import Enum


class Action(Enum):
    """Enum for the possible actions a player can take in a game of blackjack."""

    HIT = "hit"
    STAND = "stand"
    DOUBLE = "double"
    SPLIT = "split"

    @property
    def label(self) -> str:
        """Text reported to observers when a strategy picks this action."""
        return _LABELS[self]


_LABELS = {
    Action.HIT: "Hit",
    Action.STAND: "Stand",
    Action.DOUBLE: "Double Down",
    Action.SPLIT: "Split",
}
