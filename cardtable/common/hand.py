"""
This module contains classes to represent a hand of cards in a card game.

It includes an abstract base class `AbstractHand`, and a concrete implementation `Hand`.
A hand is an ordered sequence of cards. Cards are appended as they are dealt and the
same hand instance is cleared, not reallocated, between rounds.

Classes:

AbstractHand: An abstract base class for a hand of cards.
Hand: A concrete implementation of a hand of cards.
"""
from abc import ABC
from typing import List

from cardtable.common.card import Card


class AbstractHand(ABC):
    """
    An abstract base class for a hand of cards.

    This class provides a basic structure for a hand of cards, including methods to add and remove cards.
    Subclasses should override the __repr__ and __str__ methods to provide a string representation of the hand.
    """

    def __init__(self):
        self._cards: List[Card] = []

    @property
    def cards(self) -> List[Card]:
        """Returns a copy of the cards in the hand, in the order they were received."""
        return list(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def add_card(self, card: Card) -> None:
        """
        Adds a card to the hand.

        Args:
            card: The card to add.

        Raises:
            TypeError: If `card` is not a Card.
        """
        if not isinstance(card, Card):
            raise TypeError(f"Expected a Card, got {card!r}")
        self._cards.append(card)

    def pop_card(self) -> Card:
        """
        Removes and returns the last card of the hand.

        Raises:
            IndexError: If the hand is empty.
        """
        if not self._cards:
            raise IndexError("Cannot take a card from an empty hand.")
        return self._cards.pop()

    def clear(self) -> None:
        """Removes every card, keeping the same hand instance."""
        self._cards.clear()


class Hand(AbstractHand):
    """
    A concrete implementation of a hand of cards.

    This class provides a string representation of a hand of cards for both debugging and display purposes.
    """

    def __repr__(self) -> str:
        """
        Returns a string representation of the hand for debugging.

        Returns:
            A string in the form "Hand([Card(...), ...])".
        """
        return f"{self.__class__.__name__}({self._cards!r})"

    def __str__(self) -> str:
        """
        Returns a string representation of the hand for display.

        Returns:
            A string in the form "Card(...), ...".
        """
        return ", ".join(str(card) for card in self._cards)
