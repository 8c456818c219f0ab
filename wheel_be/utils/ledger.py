# wheel_be/utils/ledger.py
from wheel_be.exceptions import ValidationException, InsufficientFundsException
from wheel_be.error_codes import ErrorCodes

NUMERIC_BET_LABELS = ("1", "2", "5", "10")
BET_LABELS = NUMERIC_BET_LABELS + ("Logo1", "Logo2", "BONUS")

DEFAULT_STARTING_BALANCE = 2000


def empty_bets():
    """The canonical zero-valued wager mapping. Every bet reset goes through here."""
    return {label: 0 for label in BET_LABELS}


class BettingLedger:
    """
    Player balance plus the wagers currently on the table.

    Wagers are debited from the balance when placed, so
    balance + total_staked() only changes on settlement (credit) or forfeit.
    """

    def __init__(self, balance=DEFAULT_STARTING_BALANCE):
        if balance < 0:
            raise ValueError("Starting balance cannot be negative")
        self.balance = int(balance)
        self.bets = empty_bets()

    def place_bet(self, label, amount):
        if label not in self.bets:
            raise ValidationException(
                status_message=f"Invalid bet label '{label}'. Valid labels are: {list(BET_LABELS)}",
                error_code=ErrorCodes.INVALID_BET,
                details={'label': label},
            )
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationException(
                status_message="Bet amount must be a positive whole number.",
                error_code=ErrorCodes.INVALID_AMOUNT,
                details={'amount': amount},
            )
        if amount > self.balance:
            raise InsufficientFundsException(
                status_message="Insufficient balance!",
                details={'balance': self.balance, 'amount': amount, 'label': label},
            )
        self.balance -= amount
        self.bets[label] += amount
        return self.bets[label]

    def clear_bets(self):
        """Refunds every wager. Returns the refunded amount (0 when nothing was staked)."""
        refunded = self.total_staked()
        self.balance += refunded
        self.bets = empty_bets()
        return refunded

    def forfeit_bets(self):
        """Drops every wager without a refund. Returns the forfeited amount."""
        forfeited = self.total_staked()
        self.bets = empty_bets()
        return forfeited

    def credit(self, amount):
        if amount < 0:
            raise ValueError("Cannot credit a negative amount")
        self.balance += amount
        return self.balance

    def total_staked(self):
        return sum(self.bets.values())

    def snapshot(self):
        return {'balance': self.balance, 'bets': dict(self.bets)}
