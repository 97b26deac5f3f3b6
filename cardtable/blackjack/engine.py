"""
Round engine for multi-player Blackjack.

`GameEngine` runs exactly one round against one dealer. The caller places each
player's bet (`Player.start_new_round_with_bet`), builds a fresh deck and an
engine, and then calls, in this order and once each:

    start_round -> play_players -> dealer_play -> resolve_results -> apply_payouts

`play_round` does all five. The engine tracks its `RoundPhase` and raises
`RoundStateError` when an operation is called out of order.

Strategies are not trusted: any answer other than a legal hit, stand, double
down or split is played as a stand. Deck exhaustion, a player without a bet and
a bankroll underflow are fatal and propagate to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Dict, List, Optional, Sequence, Tuple

from cardtable.blackjack.action import Action
from cardtable.blackjack.actor import Player, PlayerHand
from cardtable.blackjack.bankroll import InsufficientFundsError
from cardtable.blackjack.constants import STAKE_COVERAGE_MULTIPLIER
from cardtable.blackjack.decision_logger import DecisionRecord, decision_logger
from cardtable.blackjack.hand import BlackjackHand
from cardtable.blackjack.observer import GameObserver, NullGameObserver
from cardtable.blackjack.payout import PayoutCalculator, RoundResult
from cardtable.blackjack.rules import Rules, determine_winner
from cardtable.blackjack.strategy import DecisionContext
from cardtable.common.card import Card
from cardtable.common.deck import CardSource

logger = logging.getLogger("cardtable.engine")


class RoundStateError(Exception):
    """Raised when a round operation is called out of sequence."""

    pass


class NoBetPlacedError(RoundStateError):
    """Raised when a player enters a round without a hand to play."""

    pass


class RoundPhase(Enum):
    NOT_STARTED = auto()
    INITIAL_DEAL = auto()
    PLAYERS_ACTING = auto()
    DEALER_ACTING = auto()
    RESOLVED = auto()
    PAYOUTS_APPLIED = auto()


@dataclass(frozen=True)
class PlayerHandKey:
    """Names one hand of one player in the round results."""

    player_id: str
    hand_id: str

    @classmethod
    def for_hand(cls, player: Player, player_hand: PlayerHand) -> "PlayerHandKey":
        return cls(player.player_id, player_hand.hand_id)


RoundResults = List[Tuple[PlayerHandKey, RoundResult]]


class GameEngine:
    """Deals, plays and settles one round of Blackjack."""

    def __init__(
        self,
        deck: CardSource,
        payout_calculator: PayoutCalculator,
        players: Sequence[Player],
        observer: Optional[GameObserver] = None,
        rules: Optional[Rules] = None,
    ):
        if deck is None:
            raise ValueError("GameEngine requires a deck.")
        if payout_calculator is None:
            raise ValueError("GameEngine requires a payout calculator.")

        self._players: List[Player] = list(players)
        if not self._players:
            raise ValueError("At least one player is required.")

        self._players_by_id: Dict[str, Player] = {}
        for player in self._players:
            if player.player_id in self._players_by_id:
                raise ValueError(f"Player {player.name} is registered twice.")
            self._players_by_id[player.player_id] = player

        self._deck = deck
        self._payout_calculator = payout_calculator
        self.observer = observer or NullGameObserver()
        self.rules = rules or Rules()
        self.dealer_hand = BlackjackHand()
        self._phase = RoundPhase.NOT_STARTED

    @property
    def phase(self) -> RoundPhase:
        return self._phase

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    @property
    def dealer_up_card(self) -> Optional[Card]:
        cards = self.dealer_hand.cards
        return cards[0] if cards else None

    def _advance(self, expected: RoundPhase, new_phase: RoundPhase, operation: str) -> None:
        if self._phase is not expected:
            raise RoundStateError(
                f"{operation}() requires phase {expected.name}, "
                f"but the round is in {self._phase.name}."
            )
        self._phase = new_phase

    def start_round(self) -> None:
        """
        Deal the opening cards: up card and hole card to the dealer, then two
        cards to each player's first hand in registration order.

        Raises:
            NoBetPlacedError: If a player has no hand for this round.
            RoundStateError: If a player still holds cards or a split hand
                from an earlier round.
            EmptyDeckError: If the deck runs out.
        """
        if self._phase is not RoundPhase.NOT_STARTED:
            raise RoundStateError("start_round() may only be called once per engine.")

        self.dealer_hand.clear()
        self.observer.on_round_started()

        for player in self._players:
            if not player.hands:
                raise NoBetPlacedError(
                    f"{player.name} has not placed a bet for this round."
                )
            if len(player.hands) > 1 or len(player.hands[0].hand) > 0:
                raise RoundStateError(
                    f"{player.name} still holds cards from a previous round."
                )

        self._advance(RoundPhase.NOT_STARTED, RoundPhase.INITIAL_DEAL, "start_round")
        decision_logger.log_round_start()

        up_card = self._deck.draw()
        self.dealer_hand.add_card(up_card)
        hole_card = self._deck.draw()
        self.dealer_hand.add_card(hole_card)
        self.observer.on_dealer_dealt(up_card, hole_card)

        for player in self._players:
            player_hand = player.hands[0]
            for _ in range(2):
                card = self._deck.draw()
                player_hand.hand.add_card(card)
                self.observer.on_player_dealt(player, player_hand, card)

        logger.debug(
            "Round started: dealer shows %s, %d player(s), %d card(s) left",
            up_card,
            len(self._players),
            self._deck.count,
        )

    def play_players(self) -> None:
        """
        Let every player act on every hand, in registration order.

        A hand created by a split is appended to the player's hands and played
        later in this same pass.
        """
        self._advance(RoundPhase.INITIAL_DEAL, RoundPhase.PLAYERS_ACTING, "play_players")

        for player in self._players:
            index = 0
            # len() is re-read on purpose: a split appends a hand mid-loop
            while index < len(player.hands):
                self._play_hand(player, player.hands[index], index)
                index += 1

    def _play_hand(self, player: Player, player_hand: PlayerHand, index: int) -> None:
        hand = player_hand.hand

        while not hand.is_bust:
            can_double = self.rules.can_double_down(player, player_hand)
            can_split = self.rules.can_split(player, player_hand)
            context = DecisionContext(
                player_hand=player_hand,
                dealer_up_card=self.dealer_up_card,
                can_double_down=can_double,
                can_split=can_split,
            )

            requested = player.strategy.decide_action(context)
            self.observer.on_player_decision(player, player_hand, _describe(requested))

            action = self._validate_action(player, requested, can_double, can_split)
            decision_logger.log_decision(
                DecisionRecord(
                    timestamp=datetime.now(),
                    player_name=player.name,
                    hand_index=index,
                    hand_cards=hand.cards,
                    hand_value=hand.value(),
                    dealer_upcard=context.dealer_up_card,
                    can_double_down=can_double,
                    can_split=can_split,
                    requested=requested,
                    applied=action,
                )
            )

            if action is Action.HIT:
                self._deal_to(player, player_hand)
                continue

            if action is Action.DOUBLE:
                self._deal_to(player, player_hand)
                player_hand.state.mark_doubled_down()
                return

            if action is Action.SPLIT:
                if self._split(player, player_hand):
                    continue
                decision_logger.log_fallback(
                    player.name, requested, Action.STAND, "split declined"
                )

            player_hand.state.stand()
            return

    def _validate_action(
        self, player: Player, requested, can_double: bool, can_split: bool
    ) -> Action:
        if requested is Action.HIT or requested is Action.STAND:
            return requested
        if requested is Action.DOUBLE and can_double:
            return requested
        if requested is Action.SPLIT and can_split:
            return requested

        if isinstance(requested, Action):
            reason = f"{requested.value} is not allowed now"
        else:
            reason = "not a blackjack action"
        decision_logger.log_fallback(player.name, requested, Action.STAND, reason)
        return Action.STAND

    def _deal_to(self, player: Player, player_hand: PlayerHand) -> Card:
        card = self._deck.draw()
        player_hand.hand.add_card(card)
        self.observer.on_player_card_drawn(player, player_hand, card)
        return card

    def _split(self, player: Player, player_hand: PlayerHand) -> bool:
        """
        Split `player_hand` into two hands carrying the same bet.

        Returns False, changing nothing, if the bankroll no longer covers both
        bets.
        """
        required = player_hand.bet.amount * STAKE_COVERAGE_MULTIPLIER
        if not player.bankroll.can_cover(required):
            decision_logger.log_split(
                player.name, False, f"(balance {player.bankroll.balance}, needs {required})"
            )
            return False

        new_hand = PlayerHand(player_hand.bet)
        new_hand.hand.add_card(player_hand.hand.pop_card())

        self._deal_to(player, player_hand)
        self._deal_to(player, new_hand)
        player.add_hand(new_hand)

        decision_logger.log_split(player.name, True)
        return True

    def dealer_play(self) -> None:
        """Dealer draws until reaching the stand value (hard 17 by default)."""
        self._advance(RoundPhase.PLAYERS_ACTING, RoundPhase.DEALER_ACTING, "dealer_play")

        while self.rules.should_dealer_hit(self.dealer_hand):
            card = self._deck.draw()
            self.dealer_hand.add_card(card)
            self.observer.on_dealer_card_drawn(card, self.dealer_hand.value())

        logger.debug("Dealer stands on %d", self.dealer_hand.value())

    def resolve_results(self) -> RoundResults:
        """
        Compare every player hand with the dealer.

        Returns:
            `(PlayerHandKey, RoundResult)` pairs in player order, then hand order.
        """
        self._advance(RoundPhase.DEALER_ACTING, RoundPhase.RESOLVED, "resolve_results")

        results: RoundResults = []
        for player in self._players:
            for player_hand in player.hands:
                result = determine_winner(player_hand.hand, self.dealer_hand)
                results.append((PlayerHandKey.for_hand(player, player_hand), result))
        return results

    def apply_payouts(self, results: RoundResults) -> Dict[PlayerHandKey, int]:
        """
        Settle each result against its player's bankroll.

        Settlement is all-or-nothing. Every key is looked up and every
        player's running balance is checked before any bankroll changes, so
        when an error is raised no bankroll has been touched and the round
        stays RESOLVED.

        Returns:
            The net change applied for each hand.

        Raises:
            KeyError: If a key names a player or hand outside this round.
            InsufficientFundsError: If a loss exceeds the player's balance.
        """
        if self._phase is not RoundPhase.RESOLVED:
            raise RoundStateError(
                "apply_payouts() requires phase RESOLVED, "
                f"but the round is in {self._phase.name}."
            )

        settlements = []
        running: Dict[str, int] = {}
        for key, result in results:
            player = self._players_by_id[key.player_id]
            player_hand = player.find_hand(key.hand_id)
            net_change = self._payout_calculator.calculate_net_change(
                player_hand.bet.amount, result, player_hand.state.has_doubled_down
            )
            balance = running.get(player.player_id, player.bankroll.balance) + net_change
            if balance < 0:
                raise InsufficientFundsError(
                    f"{player.name} cannot cover a net change of {net_change} "
                    f"(balance {player.bankroll.balance})."
                )
            running[player.player_id] = balance
            settlements.append((key, result, player, player_hand, net_change))

        self._phase = RoundPhase.PAYOUTS_APPLIED

        applied: Dict[PlayerHandKey, int] = {}
        for key, result, player, player_hand, net_change in settlements:
            player.bankroll.apply_net_change(net_change)
            applied[key] = net_change
            logger.info(
                "%s: %s on %s, net %+d, balance %d",
                player.name,
                result.value,
                player_hand.hand,
                net_change,
                player.bankroll.balance,
            )
        decision_logger.log_round_end()
        return applied

    def play_round(self) -> RoundResults:
        """Run all five round operations in order and return the results."""
        self.start_round()
        self.play_players()
        self.dealer_play()
        results = self.resolve_results()
        self.apply_payouts(results)
        return results


def _describe(requested) -> str:
    if isinstance(requested, Action):
        return requested.label
    return str(requested)
