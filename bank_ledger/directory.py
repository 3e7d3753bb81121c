"""
Account Directory Module

Maps account identifiers to Account instances and enforces identifier
uniqueness. Pass one directory explicitly to whatever needs lookups; there is
no module-level registry.
"""

from typing import Dict, Optional
import threading

from .accounts import Account
from .authentication import validate_pin_format
from .currency import AmountLike
from .logging_config import get_logger, log_action


class DuplicateAccountError(ValueError):
    """Raised when an account identifier is already registered"""

    def __init__(self, identifier: str):
        super().__init__(f"Account {identifier} already exists")
        self.identifier = identifier


class AccountDirectory:
    """In-memory set of accounts keyed by identifier"""

    def __init__(self):
        self._accounts: Dict[str, Account] = {}
        self._lock = threading.RLock()
        self.logger = get_logger("bank_ledger.directory")

    def create_account(
        self,
        identifier: str,
        holder_name: str,
        pin: str,
        initial_deposit: Optional[AmountLike] = None,
        **account_options
    ) -> Account:
        """
        Create and register a new account

        Args:
            identifier: Account number; surrounding whitespace is stripped and
                inner whitespace is rejected
            holder_name: Account holder name
            pin: Plaintext PIN (4-6 digits)
            initial_deposit: Optional opening deposit
            account_options: Passed through to Account (clock, etc.)

        Returns:
            Created Account

        Raises:
            DuplicateAccountError: If the identifier is taken
            ValueError: If the identifier, name, PIN or initial deposit is invalid
        """
        identifier = (identifier or "").strip()
        if not identifier:
            raise ValueError("Account identifier cannot be empty")
        if any(ch.isspace() for ch in identifier):
            raise ValueError("Account identifier cannot contain spaces")

        is_valid, errors = validate_pin_format(pin)
        if not is_valid:
            raise ValueError("; ".join(errors))

        with self._lock:
            if identifier in self._accounts:
                raise DuplicateAccountError(identifier)

            account = Account(
                identifier, (holder_name or "").strip(), pin,
                initial_deposit=initial_deposit, **account_options
            )
            self._accounts[identifier] = account

        log_action(
            self.logger, "info", "Account created",
            action="create_account", resource=f"account:{identifier}",
            extra={"opening_balance": str(account.balance())}
        )
        return account

    def get(self, identifier: Optional[str]) -> Optional[Account]:
        """Get account by identifier"""
        if identifier is None:
            return None
        with self._lock:
            return self._accounts.get(identifier.strip())

    def is_empty(self) -> bool:
        return len(self) == 0

    def __contains__(self, identifier: str) -> bool:
        return self.get(identifier) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
