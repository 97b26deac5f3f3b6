import pytest

from cardtable.blackjack.actor import Player, PlayerHand, PlayerHandState
from cardtable.blackjack.bankroll import Bankroll, Bet, InsufficientFundsError
from cardtable.blackjack.strategy import FixedActionStrategy
from cardtable.common.card import Rank

from blackjack_support import card, make_player_hand


def test_player_hand_state_defaults_and_reset():
    state = PlayerHandState()
    assert not state.has_stood
    assert not state.has_doubled_down
    state.stand()
    state.mark_doubled_down()
    assert state.has_stood and state.has_doubled_down
    state.reset()
    assert state == PlayerHandState()


def test_player_hand_requires_bet():
    with pytest.raises(TypeError):
        PlayerHand(10)


def test_player_hand_reset_matches_fresh_hand():
    player_hand = make_player_hand(10, card(Rank.TEN), card(Rank.SIX))
    player_hand.state.mark_doubled_down()
    old_id = player_hand.hand_id

    player_hand.reset(Bet(25))
    fresh = PlayerHand(Bet(25))

    assert player_hand.hand.cards == fresh.hand.cards == []
    assert player_hand.state == fresh.state
    assert player_hand.bet == fresh.bet
    assert player_hand.hand_id != old_id


def test_stake_doubles_after_double_down():
    player_hand = PlayerHand(Bet(10))
    assert player_hand.stake == 10
    player_hand.state.mark_doubled_down()
    assert player_hand.stake == 20


def test_hand_ids_are_unique():
    assert PlayerHand(Bet(10)).hand_id != PlayerHand(Bet(10)).hand_id


def test_player_requires_name():
    with pytest.raises(ValueError):
        Player("  ", Bankroll(10), FixedActionStrategy())


def test_new_player_has_no_bet():
    player = Player("Alice", Bankroll(100), FixedActionStrategy())
    assert player.hands == []
    assert not player.has_bet


def test_start_new_round_with_bet():
    player = Player("Alice", Bankroll(100), FixedActionStrategy())
    player_hand = player.start_new_round_with_bet(Bet(10))
    assert player.hands == [player_hand]
    assert player_hand.bet.amount == 10
    # the bet is settled at payout time, not taken up front
    assert player.bankroll.balance == 100


def test_start_new_round_reuses_first_hand_and_drops_split_hand():
    player = Player("Alice", Bankroll(100), FixedActionStrategy())
    first = player.start_new_round_with_bet(Bet(10))
    first.hand.add_card(card(Rank.EIGHT))
    first.state.stand()
    player.add_hand(PlayerHand(Bet(10)))

    again = player.start_new_round_with_bet(Bet(20))

    assert again is first
    assert player.hands == [first]
    assert first.hand.cards == []
    assert first.state == PlayerHandState()
    assert first.bet == Bet(20)


def test_start_new_round_rejects_unaffordable_bet():
    player = Player("Alice", Bankroll(5), FixedActionStrategy())
    with pytest.raises(InsufficientFundsError):
        player.start_new_round_with_bet(Bet(10))
    assert player.hands == []


def test_find_hand():
    player = Player("Alice", Bankroll(100), FixedActionStrategy())
    player_hand = player.start_new_round_with_bet(Bet(10))
    assert player.find_hand(player_hand.hand_id) is player_hand
    with pytest.raises(KeyError):
        player.find_hand("missing")


def test_reset_for_new_round_removes_bet():
    player = Player("Alice", Bankroll(100), FixedActionStrategy())
    player.start_new_round_with_bet(Bet(10))
    player.reset_for_new_round()
    assert not player.has_bet


def test_explicit_player_id():
    player = Player("Alice", Bankroll(100), FixedActionStrategy(), player_id="alice")
    assert player.player_id == "alice"
