import pytest

from cardtable.blackjack.action import Action
from cardtable.blackjack.strategy import (
    BasicBotStrategy,
    BotSettings,
    DecisionContext,
    FixedActionStrategy,
)
from cardtable.common.card import Rank, Suit

from blackjack_support import card, make_player_hand


def context_for(*ranks, can_double_down=False, can_split=False, up=Rank.SIX):
    return DecisionContext(
        player_hand=make_player_hand(10, *(card(r) for r in ranks)),
        dealer_up_card=card(up, Suit.SPADES),
        can_double_down=can_double_down,
        can_split=can_split,
    )


def test_value_at_threshold_hits():
    strategy = BasicBotStrategy(BotSettings.standard())
    assert strategy.decide_action(context_for(Rank.TEN, Rank.SIX)) == Action.HIT


def test_value_above_threshold_stands():
    strategy = BasicBotStrategy(BotSettings.standard())
    assert strategy.decide_action(context_for(Rank.TEN, Rank.SEVEN)) == Action.STAND


@pytest.mark.parametrize("ranks", [(Rank.FIVE, Rank.SIX), (Rank.FOUR, Rank.SIX)])
def test_doubles_on_ten_or_eleven_when_allowed(ranks):
    strategy = BasicBotStrategy(BotSettings.standard())
    context = context_for(*ranks, can_double_down=True)
    assert strategy.decide_action(context) == Action.DOUBLE


def test_does_not_double_when_context_forbids():
    strategy = BasicBotStrategy(BotSettings.standard())
    context = context_for(Rank.FIVE, Rank.SIX, can_double_down=False)
    assert strategy.decide_action(context) == Action.HIT


def test_conservative_never_doubles():
    strategy = BasicBotStrategy(BotSettings.conservative())
    context = context_for(Rank.FIVE, Rank.SIX, can_double_down=True)
    assert strategy.decide_action(context) != Action.DOUBLE


def test_does_not_double_on_other_values():
    strategy = BasicBotStrategy(BotSettings.aggressive())
    context = context_for(Rank.FIVE, Rank.FOUR, can_double_down=True)
    assert strategy.decide_action(context) == Action.HIT


def test_bot_never_splits():
    strategy = BasicBotStrategy(BotSettings.standard())
    context = context_for(Rank.EIGHT, Rank.EIGHT, can_split=True)
    assert strategy.decide_action(context) == Action.HIT


@pytest.mark.parametrize(
    "settings, ranks, expected",
    [
        (BotSettings.conservative(), (Rank.TEN, Rank.FIVE), Action.HIT),
        (BotSettings.conservative(), (Rank.TEN, Rank.SIX), Action.STAND),
        (BotSettings.standard(), (Rank.TEN, Rank.SIX), Action.HIT),
        (BotSettings.standard(), (Rank.TEN, Rank.SEVEN), Action.STAND),
        (BotSettings.aggressive(), (Rank.TEN, Rank.SEVEN), Action.HIT),
        (BotSettings.aggressive(), (Rank.TEN, Rank.EIGHT), Action.STAND),
    ],
)
def test_preset_thresholds(settings, ranks, expected):
    assert BasicBotStrategy(settings).decide_action(context_for(*ranks)) == expected


def test_presets():
    assert BotSettings.conservative() == BotSettings(15, False)
    assert BotSettings.standard() == BotSettings(16, True)
    assert BotSettings.aggressive() == BotSettings(17, True)


def test_from_name():
    assert BotSettings.from_name("Aggressive") == BotSettings.aggressive()
    with pytest.raises(ValueError):
        BotSettings.from_name("reckless")


@pytest.mark.parametrize("threshold", [-1, 22])
def test_threshold_out_of_range(threshold):
    with pytest.raises(ValueError):
        BotSettings(hit_until_value=threshold)


def test_bot_is_deterministic():
    strategy = BasicBotStrategy(BotSettings.standard())
    context = context_for(Rank.ACE, Rank.FIVE, can_double_down=True)
    answers = {strategy.decide_action(context) for _ in range(5)}
    assert len(answers) == 1


def test_fixed_action_strategy():
    assert FixedActionStrategy().decide_action(context_for(Rank.TWO)) == Action.STAND
    assert FixedActionStrategy(Action.HIT).decide_action(context_for(Rank.TWO)) == Action.HIT


def test_context_exposes_hand_value():
    context = context_for(Rank.ACE, Rank.KING)
    assert context.hand_value == 21
    assert context.hand is context.player_hand.hand


def test_bot_without_settings_uses_standard_preset():
    assert BasicBotStrategy().settings == BotSettings.standard()
    assert BasicBotStrategy(None).settings == BotSettings.standard()
