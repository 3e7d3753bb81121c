"""
Money Module

Fixed-point money for the ledger: every amount is a Decimal with exactly two
fractional digits, rounded half-up. NEVER uses float for monetary values.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, getcontext
from dataclasses import dataclass
from typing import Any, Optional, Union
import re

# Set global decimal context for financial precision
getcontext().prec = 28  # High precision for financial calculations

CENTS = Decimal('0.01')
ZERO = Decimal('0.00')

# Largest amount accepted by a single deposit or withdrawal
TRANSACTION_CEILING = Decimal('1000000000.00')

AmountLike = Union[Decimal, int, str]


def to_decimal(value: Any) -> Decimal:
    """
    Convert a caller-supplied amount to Decimal without losing precision

    Args:
        value: Decimal, int or numeric string (floats go through str())

    Returns:
        Decimal value

    Raises:
        ValueError: If value is None, not numeric, or not finite
    """
    if value is None:
        raise ValueError("Amount is required")
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert {value!r} to Decimal")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Cannot convert '{value}' to Decimal")
    if not result.is_finite():
        raise ValueError(f"Amount must be a finite number, got '{value}'")
    return result


def normalize_amount(value: Any) -> Decimal:
    """
    Normalize an amount to scale 2 using ROUND_HALF_UP

    Raises:
        ValueError: If the amount cannot be converted or is too large to
            be represented at scale 2
    """
    amount = to_decimal(value)
    try:
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount '{value}' is out of range")


@dataclass(frozen=True)
class Money:
    """
    Immutable scale-2 money value.
    Ledger balances and transaction amounts MUST use this class.
    """
    amount: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'amount', normalize_amount(self.amount))

    @classmethod
    def zero(cls) -> 'Money':
        return cls(ZERO)

    def __add__(self, other: 'Money') -> 'Money':
        return Money(self.amount + other.amount)

    def __sub__(self, other: 'Money') -> 'Money':
        return Money(self.amount - other.amount)

    def __gt__(self, other: 'Money') -> bool:
        return self.amount > other.amount

    def is_positive(self) -> bool:
        """Check if amount is positive"""
        return self.amount > ZERO

    def exceeds(self, ceiling: Decimal) -> bool:
        return self.amount > ceiling

    def to_string(self) -> str:
        """Format for display and for transaction records, e.g. $1234.50"""
        return format_money(self.amount)


def format_money(amount: Decimal) -> str:
    """Render an amount as a dollar string with two decimals and no grouping"""
    return "$" + format(normalize_amount(amount), 'f')


def decimal_from_string(value: Optional[str]) -> Decimal:
    """
    Safely convert user-entered text to Decimal, handling common formats

    Args:
        value: String representation of number, e.g. "1,000.50" or "$25"

    Returns:
        Decimal value

    Raises:
        ValueError: If string cannot be converted to valid Decimal
    """
    if not value or not isinstance(value, str) or not value.strip():
        raise ValueError("Value must be a non-empty string")

    # Remove currency symbols and whitespace
    clean_value = re.sub(r'[\s$]', '', value.strip())

    # Thousands separators are only accepted with a dot decimal point
    if ',' in clean_value:
        if re.fullmatch(r'[+-]?\d{1,3}(,\d{3})+(\.\d*)?', clean_value):
            clean_value = clean_value.replace(',', '')
        else:
            raise ValueError(f"Cannot convert '{value}' to Decimal")

    if not re.fullmatch(r'[+-]?(\d+(\.\d*)?|\.\d+)', clean_value):
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    return Decimal(clean_value)


def parse_amount(value: Optional[str], allow_zero: bool = False) -> Decimal:
    """
    Parse a user-entered amount and normalize it to scale 2

    Args:
        value: Text typed by the user
        allow_zero: Accept 0 (used for optional initial deposits)

    Raises:
        ValueError: If the text is not numeric, negative, or zero when
            zero is not allowed
    """
    amount = normalize_amount(decimal_from_string(value))
    if amount < ZERO:
        raise ValueError("Amount cannot be negative")
    if amount == ZERO and not allow_zero:
        raise ValueError("Amount must be greater than zero")
    return amount
