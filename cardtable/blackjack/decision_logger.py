"""
Logging for blackjack decision paths.
Tracks strategy decisions, rule evaluations and the engine's fallbacks.

Decisions are buffered for the current round only. When the round ends they
are folded into running counts, so a long simulation keeps a fixed amount of
decision state.
"""

import logging
import os
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from cardtable.blackjack.action import Action
from cardtable.common.card import Card


@dataclass
class DecisionRecord:
    """One strategy decision as the engine saw it."""

    timestamp: datetime
    player_name: str
    hand_index: int
    hand_cards: List[Card]
    hand_value: int
    dealer_upcard: Card
    can_double_down: bool
    can_split: bool
    requested: Any = None
    applied: Optional[Action] = None

    @property
    def is_fallback(self) -> bool:
        """True when the engine did not play the action the strategy asked for."""
        return self.requested is not self.applied


class DecisionLogger:
    """Logs all decision-making processes in blackjack."""

    def __init__(self, log_level=logging.DEBUG):
        self.logger = logging.getLogger("cardtable.decisions")
        # Simulations can silence decision logging through the environment
        self.disabled = os.environ.get("CARDTABLE_DISABLE_LOGGING", "").lower() in (
            "1",
            "true",
            "yes",
        )
        self.set_level(log_level)

        # Add console handler if none exists
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
            handler.setFormatter(formatter)
            handler.setLevel(logging.WARNING)
            self.logger.addHandler(handler)

        self.current_round_decisions: List[DecisionRecord] = []
        self._by_action: Counter = Counter()
        self._by_player: Counter = Counter()
        self._fallback_count = 0
        self._rounds = 0

    def set_level(self, level):
        """Set the logging level. The environment switch keeps it at ERROR or above."""
        if self.disabled:
            level = max(level, logging.ERROR)
        self.logger.setLevel(level)

    def log_round_start(self):
        """Start buffering decisions for a new round."""
        self.current_round_decisions = []

    def log_decision(self, record: DecisionRecord):
        """Log a decision point with full context."""
        self.current_round_decisions.append(record)

        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                f"Decision for {record.player_name} hand {record.hand_index}: "
                f"{[str(c) for c in record.hand_cards]} (value={record.hand_value}) "
                f"vs dealer {record.dealer_upcard}, "
                f"double={record.can_double_down} split={record.can_split}"
            )

        if record.applied and self.logger.isEnabledFor(logging.INFO):
            self.logger.info(
                f"{record.player_name} hand {record.hand_index} plays {record.applied.value}"
            )

    def log_round_end(self):
        """Fold the round's decisions into the running counts and empty the buffer."""
        for record in self.current_round_decisions:
            applied = record.applied.value if record.applied else "none"
            self._by_action[applied] += 1
            self._by_player[record.player_name] += 1
            if record.is_fallback:
                self._fallback_count += 1
        self._rounds += 1

        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(
                f"Round ended after {len(self.current_round_decisions)} decision(s)"
            )
        self.current_round_decisions = []

    def log_rule_evaluation(self, rule_name: str, result: bool, reason: str = ""):
        """Log a rule evaluation."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"Rule '{rule_name}': {result} {reason}")

    def log_fallback(self, player_name: str, requested, applied: Action, reason: str):
        """Log a strategy answer the engine refused to play as given."""
        self.logger.warning(
            f"{player_name} asked for {getattr(requested, 'value', requested)!r}; "
            f"playing {applied.value} instead ({reason})"
        )

    def log_split(self, player_name: str, performed: bool, reason: str = ""):
        """Log the outcome of a split request."""
        if self.logger.isEnabledFor(logging.INFO):
            outcome = "split" if performed else "split declined"
            self.logger.info(f"{player_name}: {outcome} {reason}".rstrip())

    def get_decision_summary(self) -> Dict[str, Any]:
        """Get a summary of all decisions made in completed rounds."""
        return {
            "rounds": self._rounds,
            "total_decisions": sum(self._by_action.values()),
            "by_action": dict(self._by_action),
            "by_player": dict(self._by_player),
            "fallback_count": self._fallback_count,
        }

    def clear_history(self):
        self.current_round_decisions = []
        self._by_action.clear()
        self._by_player.clear()
        self._fallback_count = 0
        self._rounds = 0


# Global decision logger instance
decision_logger = DecisionLogger()
