from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from cardtable.blackjack.action import Action
from cardtable.blackjack.actor import PlayerHand
from cardtable.blackjack.hand import BlackjackHand
from cardtable.common.card import Card


@dataclass(frozen=True)
class DecisionContext:
    """What a strategy may look at when deciding how to play a hand."""

    player_hand: PlayerHand
    dealer_up_card: Card
    can_double_down: bool
    can_split: bool

    @property
    def hand(self) -> BlackjackHand:
        return self.player_hand.hand

    @property
    def hand_value(self) -> int:
        return self.player_hand.hand.value()


class Strategy(ABC):
    @abstractmethod
    def decide_action(self, context: DecisionContext) -> Action:
        """Return the action to take for the hand in `context`.

        The engine validates the answer: a double down or split that the
        context marks as illegal is played as a stand.
        """
        pass


@dataclass(frozen=True)
class BotSettings:
    """
    Tunable knobs for `BasicBotStrategy`.

    Attributes:
        hit_until_value: The bot hits while its hand value is at or below this.
        allow_double_down: Whether the bot may double down at all.
    """

    hit_until_value: int = 16
    allow_double_down: bool = True

    def __post_init__(self):
        if not 0 <= self.hit_until_value <= 21:
            raise ValueError(
                f"hit_until_value must be between 0 and 21, got {self.hit_until_value}"
            )

    @classmethod
    def conservative(cls) -> "BotSettings":
        return cls(hit_until_value=15, allow_double_down=False)

    @classmethod
    def standard(cls) -> "BotSettings":
        return cls(hit_until_value=16, allow_double_down=True)

    @classmethod
    def aggressive(cls) -> "BotSettings":
        return cls(hit_until_value=17, allow_double_down=True)

    @classmethod
    def from_name(cls, name: str) -> "BotSettings":
        presets = {
            "conservative": cls.conservative,
            "standard": cls.standard,
            "aggressive": cls.aggressive,
        }
        try:
            return presets[name.lower()]()
        except KeyError:
            raise ValueError(
                f"Unknown bot preset {name!r}; expected one of {sorted(presets)}"
            ) from None


class BasicBotStrategy(Strategy):
    """
    Deterministic bot: the same context always yields the same action.

    Doubles on 10 or 11 when its settings and the context both allow it, hits
    up to its threshold and stands otherwise. It never splits.
    """

    def __init__(self, settings: Optional[BotSettings] = None):
        self.settings = settings or BotSettings.standard()

    def decide_action(self, context: DecisionContext) -> Action:
        value = context.hand_value

        if self.settings.allow_double_down and context.can_double_down:
            if value in (10, 11):
                return Action.DOUBLE

        if value <= self.settings.hit_until_value:
            return Action.HIT

        return Action.STAND

    def __repr__(self) -> str:
        return f"BasicBotStrategy({self.settings!r})"


class FixedActionStrategy(Strategy):
    """Always answers with the same action."""

    def __init__(self, action: Action = Action.STAND):
        self.action = action

    def decide_action(self, context: DecisionContext) -> Action:
        return self.action

    def __repr__(self) -> str:
        return f"FixedActionStrategy({self.action})"
