import pytest

from cardtable.blackjack.bankroll import InvalidBetError
from cardtable.blackjack.payout import RoundResult, StandardPayoutCalculator


@pytest.mark.parametrize(
    "result, doubled_down, expected",
    [
        (RoundResult.PLAYER_WIN, False, 10),
        (RoundResult.PLAYER_WIN, True, 20),
        (RoundResult.DEALER_WIN, False, -10),
        (RoundResult.DEALER_WIN, True, -20),
        (RoundResult.PUSH, False, 0),
        (RoundResult.PUSH, True, 0),
    ],
)
def test_net_change(payout_calculator, result, doubled_down, expected):
    assert payout_calculator.calculate_net_change(10, result, doubled_down) == expected


@pytest.mark.parametrize("base_bet", [0, -10])
def test_base_bet_must_be_positive(payout_calculator, base_bet):
    with pytest.raises(InvalidBetError):
        payout_calculator.calculate_net_change(base_bet, RoundResult.PUSH, False)


def test_calculator_keeps_no_state():
    calculator = StandardPayoutCalculator()
    first = calculator.calculate_net_change(7, RoundResult.PLAYER_WIN, False)
    calculator.calculate_net_change(50, RoundResult.DEALER_WIN, True)
    assert calculator.calculate_net_change(7, RoundResult.PLAYER_WIN, False) == first
