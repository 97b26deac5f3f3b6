from cardtable.blackjack.actor import Player, PlayerHand
from cardtable.blackjack.constants import (
    DEALER_STAND_VALUE,
    MAX_HANDS_PER_PLAYER,
    STAKE_COVERAGE_MULTIPLIER,
)
from cardtable.blackjack.decision_logger import decision_logger
from cardtable.blackjack.hand import BlackjackHand
from cardtable.blackjack.payout import RoundResult


class Rules:
    def __init__(
        self,
        dealer_stand_value: int = DEALER_STAND_VALUE,
        allow_double_down: bool = True,
        allow_split: bool = True,
        min_bet: int = 1,
    ):
        if not 1 <= dealer_stand_value <= 21:
            raise ValueError(
                f"dealer_stand_value must be between 1 and 21, got {dealer_stand_value}"
            )
        if min_bet < 1:
            raise ValueError("min_bet must be at least 1.")
        self.dealer_stand_value = dealer_stand_value
        self.allow_double_down = allow_double_down
        self.allow_split = allow_split
        self.min_bet = min_bet

    def to_dict(self) -> dict:
        """Convert rules to a dictionary for serialization."""
        return {
            "dealer_stand_value": self.dealer_stand_value,
            "allow_double_down": self.allow_double_down,
            "allow_split": self.allow_split,
            "min_bet": self.min_bet,
        }

    def should_dealer_hit(self, hand: BlackjackHand) -> bool:
        """The dealer draws below the stand value; soft totals are not special."""
        return hand.value() < self.dealer_stand_value

    def can_double_down(self, player: Player, player_hand: PlayerHand) -> bool:
        """
        Check if the hand can be doubled down.

        The hand must hold exactly two cards and not be doubled already, and the
        bankroll must cover the doubled stake being lost.
        """
        if not self.allow_double_down:
            decision_logger.log_rule_evaluation("double_down", False, "disabled by rules")
            return False

        if len(player_hand.hand) != 2 or player_hand.state.has_doubled_down:
            return False

        required = player_hand.bet.amount * STAKE_COVERAGE_MULTIPLIER
        allowed = player.bankroll.can_cover(required)
        decision_logger.log_rule_evaluation(
            "double_down",
            allowed,
            f"(balance {player.bankroll.balance}, needs {required})",
        )
        return allowed

    def can_split(self, player: Player, player_hand: PlayerHand) -> bool:
        """
        Check if the hand can be split.

        The hand must be a two-card pair, the player must not have split
        already this round, and the bankroll must cover both hands' bets.
        """
        if not self.allow_split:
            return False

        if not player_hand.hand.is_pair:
            return False

        if len(player.hands) >= MAX_HANDS_PER_PLAYER:
            decision_logger.log_rule_evaluation(
                "split", False, f"({player.name} already holds {len(player.hands)} hands)"
            )
            return False

        required = player_hand.bet.amount * STAKE_COVERAGE_MULTIPLIER
        allowed = player.bankroll.can_cover(required)
        decision_logger.log_rule_evaluation(
            "split",
            allowed,
            f"(balance {player.bankroll.balance}, needs {required})",
        )
        return allowed


def determine_winner(player_hand: BlackjackHand, dealer_hand: BlackjackHand) -> RoundResult:
    """
    Settle one player hand against the dealer.

    A player bust loses even when the dealer also busts.
    """
    if player_hand.is_bust:
        return RoundResult.DEALER_WIN
    if dealer_hand.is_bust:
        return RoundResult.PLAYER_WIN

    player_value = player_hand.value()
    dealer_value = dealer_hand.value()

    if player_value > dealer_value:
        return RoundResult.PLAYER_WIN
    if dealer_value > player_value:
        return RoundResult.DEALER_WIN
    return RoundResult.PUSH
