"""
This module contains the GameObserver abstract base class and its implementations.

The engine calls an observer at each step of a round so a presentation layer can
follow along. Observers are fire-and-forget: the engine ignores anything they
return. `NullGameObserver` is the default.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Tuple

from cardtable.blackjack.actor import Player, PlayerHand
from cardtable.common.card import Card

logger = logging.getLogger("cardtable.game")


class GameObserver(ABC):
    """
    Abstract base class for an event sink that follows a round.
    """

    @abstractmethod
    def on_round_started(self) -> None:
        """A new round is starting."""

    @abstractmethod
    def on_dealer_dealt(self, up_card: Card, hole_card: Card) -> None:
        """The dealer received the up card and the hole card."""

    @abstractmethod
    def on_player_dealt(self, player: Player, hand: PlayerHand, card: Card) -> None:
        """A card of the initial deal went to `hand`."""

    @abstractmethod
    def on_player_decision(self, player: Player, hand: PlayerHand, decision: str) -> None:
        """The player's strategy chose `decision` for `hand`."""

    @abstractmethod
    def on_player_card_drawn(self, player: Player, hand: PlayerHand, card: Card) -> None:
        """`hand` drew a card after the initial deal (hit, double down or split)."""

    @abstractmethod
    def on_dealer_card_drawn(self, card: Card, dealer_value: int) -> None:
        """The dealer drew `card`, bringing the dealer hand to `dealer_value`."""


class NullGameObserver(GameObserver):
    """
    An observer that does nothing.
    """

    def on_round_started(self) -> None:
        pass

    def on_dealer_dealt(self, up_card: Card, hole_card: Card) -> None:
        pass

    def on_player_dealt(self, player: Player, hand: PlayerHand, card: Card) -> None:
        pass

    def on_player_decision(self, player: Player, hand: PlayerHand, decision: str) -> None:
        pass

    def on_player_card_drawn(self, player: Player, hand: PlayerHand, card: Card) -> None:
        pass

    def on_dealer_card_drawn(self, card: Card, dealer_value: int) -> None:
        pass


def _hand_label(player: Player, hand: PlayerHand) -> str:
    for index, candidate in enumerate(player.hands):
        if candidate is hand:
            return f"hand #{index + 1}"
    return "hand"


class LoggingGameObserver(GameObserver):
    """
    Writes every event to the `cardtable.game` logger. The hole card is not revealed.
    """

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def on_round_started(self) -> None:
        logger.log(self.level, "New round starting")

    def on_dealer_dealt(self, up_card: Card, hole_card: Card) -> None:
        logger.log(self.level, "Dealer shows %s (hole card hidden)", up_card)

    def on_player_dealt(self, player: Player, hand: PlayerHand, card: Card) -> None:
        logger.log(
            self.level, "Dealt %s to %s (%s)", card, player.name, _hand_label(player, hand)
        )

    def on_player_decision(self, player: Player, hand: PlayerHand, decision: str) -> None:
        logger.log(
            self.level,
            "%s (%s, value %d) chooses %s",
            player.name,
            _hand_label(player, hand),
            hand.hand.value(),
            decision,
        )

    def on_player_card_drawn(self, player: Player, hand: PlayerHand, card: Card) -> None:
        logger.log(
            self.level,
            "%s draws %s (%s, value now %d)",
            player.name,
            card,
            _hand_label(player, hand),
            hand.hand.value(),
        )

    def on_dealer_card_drawn(self, card: Card, dealer_value: int) -> None:
        logger.log(self.level, "Dealer draws %s (value now %d)", card, dealer_value)


class RecordingGameObserver(GameObserver):
    """
    Collects events as `(event_name, payload)` tuples, in the order they arrive.
    """

    __test__ = False

    def __init__(self):
        self.events: List[Tuple[str, Tuple[Any, ...]]] = []

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def on_round_started(self) -> None:
        self.events.append(("round_started", ()))

    def on_dealer_dealt(self, up_card: Card, hole_card: Card) -> None:
        self.events.append(("dealer_dealt", (up_card, hole_card)))

    def on_player_dealt(self, player: Player, hand: PlayerHand, card: Card) -> None:
        self.events.append(("player_dealt", (player, hand, card)))

    def on_player_decision(self, player: Player, hand: PlayerHand, decision: str) -> None:
        self.events.append(("player_decision", (player, hand, decision)))

    def on_player_card_drawn(self, player: Player, hand: PlayerHand, card: Card) -> None:
        self.events.append(("player_card_drawn", (player, hand, card)))

    def on_dealer_card_drawn(self, card: Card, dealer_value: int) -> None:
        self.events.append(("dealer_card_drawn", (card, dealer_value)))
