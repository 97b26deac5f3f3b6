"""
Wagers and bankrolls.

`Bet` is a value object for one stake. `Bankroll` holds a player's balance
across rounds and refuses any change that would take it below zero.
"""


class InvalidBetError(ValueError):
    """Raised when a bet amount is not a positive integer."""

    pass


class InsufficientFundsError(Exception):
    """Raised when a player does not have enough money to perform an action."""

    pass


class Bet:
    """
    An immutable, positive wager amount.

    >>> Bet(10).amount
    10
    """

    __slots__ = ("_amount",)

    def __init__(self, amount: int):
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidBetError(f"Bet amount must be an integer, got {amount!r}")
        if amount <= 0:
            raise InvalidBetError("Bet amount must be greater than zero.")
        self._amount = amount

    @property
    def amount(self) -> int:
        return self._amount

    def __eq__(self, other):
        if isinstance(other, Bet):
            return self._amount == other._amount
        return NotImplemented

    def __hash__(self):
        return hash(self._amount)

    def __repr__(self) -> str:
        return f"Bet({self._amount})"


class Bankroll:
    """
    A player's available money.

    Invariant: the balance is never negative.
    """

    def __init__(self, starting_balance: int):
        """
        Args:
            starting_balance: Initial balance, must be zero or more.

        Raises:
            ValueError: If the starting balance is negative.
        """
        if starting_balance < 0:
            raise ValueError("Starting balance cannot be negative.")
        self._balance = starting_balance

    @property
    def balance(self) -> int:
        return self._balance

    def can_place_bet(self, amount: int) -> bool:
        """True when `amount` is positive and covered by the balance."""
        return 0 < amount <= self._balance

    def can_cover(self, amount: int) -> bool:
        """True when the balance is at least `amount`."""
        return self._balance >= amount

    def apply_net_change(self, net_change: int) -> None:
        """
        Credit (positive) or debit (negative) the balance.

        Raises:
            InsufficientFundsError: If the change would leave a negative balance.
                The balance is left untouched.
        """
        new_balance = self._balance + net_change
        if new_balance < 0:
            raise InsufficientFundsError(
                f"Net change of {net_change} would leave a negative balance "
                f"(current balance {self._balance})."
            )
        self._balance = new_balance

    def reset(self, amount: int) -> None:
        """Replace the balance, e.g. at the start of a new session."""
        if amount < 0:
            raise ValueError("Balance cannot be reset to a negative amount.")
        self._balance = amount

    def __repr__(self) -> str:
        return f"Bankroll({self._balance})"
