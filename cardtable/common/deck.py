"""
This module contains the Deck class, which represents a single 52-card deck,
and the CardSource base class the game engine draws from.

>>> deck = Deck(seed=7)
>>> deck.count
52
>>> card = deck.draw()
>>> deck.count
51
"""

import random
from abc import ABC, abstractmethod
from typing import List, Optional

from cardtable.common.card import Card, Rank, Suit


class EmptyDeckError(IndexError):
    """Raised when a card is drawn from a source that has none left."""

    pass


class CardSource(ABC):
    """
    A finite supply of cards.

    Implementations remove each card they hand out, so a card is never drawn twice.
    """

    @abstractmethod
    def draw(self) -> Card:
        """Remove and return the next card. Raises EmptyDeckError when empty."""

    @property
    @abstractmethod
    def count(self) -> int:
        """Number of cards remaining."""

    def is_empty(self) -> bool:
        return self.count == 0

    def __len__(self) -> int:
        return self.count


class Deck(CardSource):
    """
    A standard deck of 52 unique cards (no jokers).

    A new deck is shuffled on construction. Passing a seed makes the order
    reproducible; without one the order is unpredictable.
    """

    # Precompute the default deck
    _default_deck = [Card(suit, rank) for suit in Suit for rank in Rank]

    def __init__(self, seed: Optional[int] = None, cards: Optional[List[Card]] = None):
        """
        Initialize a Deck instance.

        :param seed: Seed for the deck's private random generator (optional).
        :param cards: Explicit cards in draw order (optional). When given, the deck
                      is not shuffled, which is how tests stack a deck.
        >>> Deck().count
        52
        """
        self._random = random.Random(seed)
        if cards is None:
            self._cards: List[Card] = self.initialize_default_deck()
            self.shuffle()
        else:
            self._cards = list(cards)

    def initialize_default_deck(self) -> List[Card]:
        """
        Construct a default deck with all possible combinations of suits and ranks.

        :return: A list of Card instances representing the default deck.
        """
        return self._default_deck.copy()

    def shuffle(self) -> "Deck":
        """
        Shuffle the remaining cards in place with a Fisher-Yates pass.

        Walks the list backwards and swaps each position with a random position
        at or before it, which yields a uniform permutation.
        """
        cards = self._cards
        for i in range(len(cards) - 1, 0, -1):
            j = self._random.randint(0, i)
            cards[i], cards[j] = cards[j], cards[i]
        return self

    def draw(self) -> Card:
        """
        Remove and return the top card (index 0).

        :raises EmptyDeckError: if no cards remain.
        """
        if not self._cards:
            raise EmptyDeckError("Cannot draw from an empty deck.")
        return self._cards.pop(0)

    @property
    def count(self) -> int:
        """
        Return the number of remaining cards in the deck.
        """
        return len(self._cards)

    @property
    def cards(self) -> List[Card]:
        """A copy of the remaining cards, top first."""
        return list(self._cards)

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the deck.
        """
        return f"Deck({[repr(card) for card in self._cards]})"

    def __str__(self) -> str:
        """
        Provide a human-readable representation of the deck.
        """
        return f"Deck of {len(self._cards)} cards"
