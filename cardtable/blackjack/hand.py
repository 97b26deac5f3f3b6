"""
BlackjackHand: a hand that knows its Blackjack value.
"""

from cardtable.blackjack.constants import ACE_ADJUSTMENT, BLACKJACK_LIMIT
from cardtable.common.hand import Hand


class BlackjackHand(Hand):
    """A hand in the game of Blackjack.

    The value is recomputed from the current cards on every call, so it can
    never go stale after cards are added, removed or cleared.
    """

    def value(self) -> int:
        """Calculate the value of the hand with ace handling.

        Aces start at 11. While the total is over 21 and an Ace is still
        counted as 11, one Ace is demoted to 1.
        """
        total = 0
        soft_aces = 0
        for card in self._cards:
            total += card.value
            if card.is_ace:
                soft_aces += 1

        while total > BLACKJACK_LIMIT and soft_aces > 0:
            total -= ACE_ADJUSTMENT
            soft_aces -= 1

        return total

    @property
    def is_bust(self) -> bool:
        return self.value() > BLACKJACK_LIMIT

    @property
    def is_soft(self) -> bool:
        """Determine if the hand is soft (contains an ace counted as 11)."""
        hard_total = sum(
            1 if card.is_ace else card.value for card in self._cards
        )
        return self.value() != hard_total

    @property
    def is_pair(self) -> bool:
        """Two cards of the same rank."""
        return len(self._cards) == 2 and self._cards[0].rank == self._cards[1].rank
