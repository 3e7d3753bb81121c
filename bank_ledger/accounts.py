"""
Account Ledger Module

One account's identity, balance, credential hash and append-only transaction
log. Deposits and withdrawals are validated and applied atomically under an
account-scoped lock; expected validation failures come back as a
TransactionResult instead of an exception.
"""

from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
from enum import Enum
import hmac
import threading

from .currency import Money, ZERO, TRANSACTION_CEILING, to_decimal
from .authentication import hash_pin
from .config import get_config
from .logging_config import get_logger, log_action


class TransactionOutcome(Enum):
    """Result of a deposit or withdrawal"""
    SUCCESS = "success"
    INVALID_AMOUNT = "invalid_amount"              # Missing, unparsable or non-positive
    AMOUNT_EXCEEDS_LIMIT = "amount_exceeds_limit"  # Above the per-transaction ceiling
    INSUFFICIENT_FUNDS = "insufficient_funds"      # Withdrawal above balance


class DepositMode(Enum):
    """Whether the presentation layer should announce a deposit"""
    VERBOSE = "verbose"  # Caller-invoked deposit
    SILENT = "silent"    # Initial deposit applied during account creation


@dataclass(frozen=True)
class TransactionRecord:
    """Single timestamped entry in an account's transaction log"""
    timestamp: datetime
    message: str

    def to_line(self, timestamp_format: str = "%Y-%m-%d %H:%M:%S") -> str:
        return f"[{self.timestamp.strftime(timestamp_format)}] {self.message}"

    def __str__(self) -> str:
        return self.to_line()


@dataclass(frozen=True)
class TransactionResult:
    """Outcome of a balance-affecting operation"""
    outcome: TransactionOutcome
    balance: Decimal
    amount: Optional[Decimal] = None  # Normalized amount, None if unusable
    announce: bool = True

    @property
    def success(self) -> bool:
        return self.outcome == TransactionOutcome.SUCCESS


class Account:
    """
    In-memory ledger for a single account

    The balance is kept at scale 2 and never goes negative. Every successful
    deposit or withdrawal, and every withdrawal refused for insufficient
    funds, appends one record to the log. The PIN is hashed on construction
    and the plaintext is discarded.
    """

    def __init__(
        self,
        identifier: str,
        holder_name: str,
        pin: str,
        initial_deposit=None,
        clock: Optional[Callable[[], datetime]] = None,
        timestamp_format: Optional[str] = None
    ):
        """
        Create an account

        Args:
            identifier: Unique account number (uniqueness is the directory's job)
            holder_name: Account holder display name
            pin: Plaintext PIN, already format-checked by the caller
            initial_deposit: Optional opening deposit; an amount that is absent
                or rounds to 0.00 opens the account empty
            clock: Timestamp source for log records (local wall clock by default)
            timestamp_format: strftime format for rendered log lines

        Raises:
            ValueError: If identifier or holder name is empty, the initial
                deposit is not a number, or the initial deposit is rejected
        """
        if not identifier or not identifier.strip():
            raise ValueError("Account identifier cannot be empty")
        if not holder_name or not holder_name.strip():
            raise ValueError("Account holder name cannot be empty")

        config = get_config()
        self._identifier = identifier
        self._holder_name = holder_name
        self._clock = clock or datetime.now
        self._timestamp_format = timestamp_format or config.timestamp_format
        self._lock = threading.RLock()
        self._balance = Money.zero()
        self._transactions: List[TransactionRecord] = []
        self._pin_hash = hash_pin(pin)
        self.logger = get_logger("bank_ledger.accounts")

        opening = Money(initial_deposit) if initial_deposit is not None else Money.zero()
        if opening.is_positive():
            result = self.deposit(opening.amount, mode=DepositMode.SILENT)
            if not result.success:
                raise ValueError(f"Initial deposit rejected: {result.outcome.value}")
            self._add_transaction(
                f"Account created with initial deposit: {opening.to_string()}"
            )
        else:
            self._add_transaction("Account created with no initial deposit.")

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def holder_name(self) -> str:
        return self._holder_name

    def __repr__(self) -> str:
        return f"Account(identifier={self._identifier!r}, holder_name={self._holder_name!r})"

    # Credentials

    def credential_matches(self, candidate_hash: str) -> bool:
        """Constant-time comparison of a PIN digest against the stored one"""
        return hmac.compare_digest(candidate_hash, self._pin_hash)

    # Balance-affecting operations

    def deposit(self, amount, mode: DepositMode = DepositMode.VERBOSE) -> TransactionResult:
        """
        Deposit money into the account

        Failed validation leaves the balance untouched and writes no record.

        Args:
            amount: Decimal, int or numeric string; rounded half-up to cents
            mode: SILENT for the opening deposit, VERBOSE otherwise

        Returns:
            TransactionResult with SUCCESS, INVALID_AMOUNT or AMOUNT_EXCEEDS_LIMIT
        """
        announce = mode == DepositMode.VERBOSE
        with self._lock:
            outcome, money = self._check_amount(amount)
            if outcome is None:
                self._balance = self._balance + money
                self._add_transaction(
                    f"Deposited: {money.to_string()} | Balance: {self._balance.to_string()}"
                )
                outcome = TransactionOutcome.SUCCESS
            balance = self._balance.amount

        return self._finish("deposit", outcome, money, balance, announce)

    def withdraw(self, amount) -> TransactionResult:
        """
        Withdraw money from the account

        A withdrawal above the balance is recorded as a failed attempt;
        missing, non-positive or oversized amounts are rejected without a record.

        Returns:
            TransactionResult with SUCCESS, INVALID_AMOUNT,
            AMOUNT_EXCEEDS_LIMIT or INSUFFICIENT_FUNDS
        """
        with self._lock:
            outcome, money = self._check_amount(amount)
            if outcome is None:
                if money > self._balance:
                    self._add_transaction(
                        f"Failed withdrawal attempt: {money.to_string()} "
                        f"| Balance: {self._balance.to_string()}"
                    )
                    outcome = TransactionOutcome.INSUFFICIENT_FUNDS
                else:
                    self._balance = self._balance - money
                    self._add_transaction(
                        f"Withdrew: {money.to_string()} | Balance: {self._balance.to_string()}"
                    )
                    outcome = TransactionOutcome.SUCCESS
            balance = self._balance.amount

        return self._finish("withdraw", outcome, money, balance)

    # Queries

    def balance(self) -> Decimal:
        """Current balance at scale 2"""
        with self._lock:
            return self._balance.amount

    def history(self) -> Tuple[TransactionRecord, ...]:
        """Snapshot of the transaction log in insertion order"""
        with self._lock:
            return tuple(self._transactions)

    def history_lines(self) -> Tuple[str, ...]:
        """Transaction log rendered as "[yyyy-MM-dd HH:mm:ss] message" lines"""
        return tuple(record.to_line(self._timestamp_format) for record in self.history())

    # Internals

    def _check_amount(self, amount) -> Tuple[Optional[TransactionOutcome], Optional[Money]]:
        """Return (failure outcome or None, normalized amount)"""
        if amount is None:
            return TransactionOutcome.INVALID_AMOUNT, None
        try:
            raw = to_decimal(amount)
        except ValueError:
            return TransactionOutcome.INVALID_AMOUNT, None
        try:
            money = Money(raw)
        except ValueError:
            # Too many integer digits to carry cents
            if raw > ZERO:
                return TransactionOutcome.AMOUNT_EXCEEDS_LIMIT, None
            return TransactionOutcome.INVALID_AMOUNT, None

        if not money.is_positive():
            return TransactionOutcome.INVALID_AMOUNT, money
        if money.exceeds(TRANSACTION_CEILING):
            return TransactionOutcome.AMOUNT_EXCEEDS_LIMIT, money
        return None, money

    def _add_transaction(self, message: str) -> None:
        with self._lock:
            self._transactions.append(TransactionRecord(self._clock(), message))

    def _finish(self, action: str, outcome: TransactionOutcome, money: Optional[Money],
                balance: Decimal, announce: bool = True) -> TransactionResult:
        amount = money.amount if money is not None else None
        level = "info" if outcome == TransactionOutcome.SUCCESS else "warning"
        log_action(
            self.logger, level, f"{action} {outcome.value}",
            action=action, resource=f"account:{self._identifier}",
            extra={
                "outcome": outcome.value,
                "amount": str(amount) if amount is not None else None,
                "balance": str(balance)
            }
        )
        return TransactionResult(outcome, balance, amount, announce)
