"""
This module defines the `Suit`, `Rank`, and `Card` classes, which are used to represent playing cards.

- `Suit`: An enum representing the four suits of a standard deck of playing
cards: Hearts, Diamonds, Clubs, and Spades.

- `Rank`: An enum representing the thirteen ranks of a standard deck of playing
cards: Two through Ten, Jack, Queen, King, and Ace. Every rank is its own
member, so a Ten and a King compare unequal even though both score 10.

- `Card`: An immutable playing card. A card has a suit and a rank, and knows
its nominal Blackjack value (Aces count 11 here and are adjusted by the hand).

This module is part of the `cardtable` package.
"""

from dataclasses import dataclass
from enum import Enum, unique


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"
    SPADES = "♠"

    def __str__(self) -> str:
        return self.value


_RANK_VALUES = {
    2: 2,
    3: 3,
    4: 4,
    5: 5,
    6: 6,
    7: 7,
    8: 8,
    9: 9,
    10: 10,
    11: 10,
    12: 10,
    13: 10,
    14: 11,
}


@unique
class Rank(Enum):
    """
    Enum for ranks in a card deck.
    """

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def rank_value(self) -> int:
        """The value of the rank, used for scoring."""
        return _RANK_VALUES[self.value]

    @property
    def rank_str(self) -> str:
        """A string representation of the rank."""
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE):
            return self.name[0]
        return str(self.value)

    def __str__(self) -> str:
        return self.rank_str


@dataclass(frozen=True, repr=False)
class Card:
    """
    Class representing a playing card. Cards are immutable.

    >>> card = Card(Suit.HEARTS, Rank.TWO)
    >>> print(card)
    2 of ♥
    >>> card.value
    2
    """

    suit: Suit
    rank: Rank

    def __post_init__(self):
        if not isinstance(self.suit, Suit):
            raise TypeError(f"Invalid suit: {self.suit}")
        if not isinstance(self.rank, Rank):
            raise TypeError(f"Invalid rank: {self.rank}")

    @property
    def value(self) -> int:
        """Nominal Blackjack value; an Ace is 11 until a hand demotes it."""
        return self.rank.rank_value

    @property
    def is_ace(self) -> bool:
        return self.rank == Rank.ACE

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"Card(Suit.{self.suit.name}, Rank.{self.rank.name})"

    def __str__(self) -> str:
        """
        Provide a human-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"{self.rank.rank_str} of {self.suit}"
