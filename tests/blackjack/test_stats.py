import pytest

from cardtable.blackjack.actor import PlayerHand
from cardtable.blackjack.bankroll import Bet
from cardtable.blackjack.engine import PlayerHandKey
from cardtable.blackjack.payout import RoundResult
from cardtable.blackjack.stats import SimulationStats

from blackjack_support import make_player


def settle(player, result, net):
    key = PlayerHandKey.for_hand(player, player.hands[0])
    return [(key, result)], {key: net}


# Test initializing SimulationStats
def test_simulation_stats_init():
    stats = SimulationStats()

    assert stats.games_played == 0
    assert stats.hands_played == 0
    assert stats.player_wins == 0
    assert stats.dealer_wins == 0
    assert stats.draws == 0
    assert stats.net_earnings == 0


# Test updating SimulationStats
def test_simulation_stats_update():
    stats = SimulationStats()
    player = make_player("Alice")

    results, payouts = settle(player, RoundResult.PLAYER_WIN, 10)
    stats.update(results, payouts, [player])
    assert stats.games_played == 1
    assert stats.player_wins == 1

    results, payouts = settle(player, RoundResult.DEALER_WIN, -10)
    stats.update(results, payouts, [player])
    assert stats.dealer_wins == 1

    results, payouts = settle(player, RoundResult.PUSH, 0)
    stats.update(results, payouts, [player])
    assert stats.draws == 1

    assert stats.games_played == 3
    assert stats.hands_played == 3
    assert stats.total_wagered == 30
    assert stats.net_by_player["Alice"] == [10, -10, 0]


# Test that split hands count separately but net into one round
def test_simulation_stats_update_with_split_hand():
    stats = SimulationStats()
    player = make_player("Alice")
    second = PlayerHand(Bet(10))
    player.add_hand(second)
    first_key = PlayerHandKey.for_hand(player, player.hands[0])
    second_key = PlayerHandKey.for_hand(player, second)

    stats.update(
        [(first_key, RoundResult.PLAYER_WIN), (second_key, RoundResult.DEALER_WIN)],
        {first_key: 10, second_key: -10},
        [player],
    )

    assert stats.hands_played == 2
    assert stats.player_wins == 1
    assert stats.dealer_wins == 1
    assert stats.net_by_player["Alice"] == [0]
    assert stats.total_wagered == 20


# Test that a doubled hand counts its full stake as wagered
def test_simulation_stats_doubled_stake():
    stats = SimulationStats()
    player = make_player("Alice")
    player.hands[0].state.mark_doubled_down()

    results, payouts = settle(player, RoundResult.PLAYER_WIN, 20)
    stats.update(results, payouts, [player])

    assert stats.total_wagered == 20
    assert stats.net_earnings == 20


# Test report method
def test_simulation_stats_report():
    stats = SimulationStats()
    alice = make_player("Alice")
    bob = make_player("Bob")

    for net in (10, -10, 10):
        results, payouts = settle(alice, RoundResult.PLAYER_WIN, net)
        more_results, more_payouts = settle(bob, RoundResult.DEALER_WIN, -10)
        payouts.update(more_payouts)
        stats.update(results + more_results, payouts, [alice, bob])

    report = stats.report()

    assert report["games_played"] == 3
    assert report["hands_played"] == 6
    assert report["net_earnings"] == -20
    assert report["total_wagered"] == 60
    assert report["house_edge"] == pytest.approx(20 / 60 * 100)
    assert report["mean_net_per_round"] == pytest.approx(-20 / 6)
    per_round = [10, -10, 10, -10, -10, -10]
    mean = sum(per_round) / 6
    std = (sum((x - mean) ** 2 for x in per_round) / 6) ** 0.5
    assert report["std_net_per_round"] == pytest.approx(std)


# Test report with nothing played
def test_simulation_stats_empty_report():
    report = SimulationStats().report()

    assert report["games_played"] == 0
    assert report["house_edge"] == 0.0
    assert report["mean_net_per_round"] == 0.0
    assert report["std_net_per_round"] == 0.0
