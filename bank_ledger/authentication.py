"""
PIN Authentication Module

One-way PIN hashing, PIN format validation, and the bounded-attempt
authentication flow. The verifier itself is stateless; attempt counting
belongs to an AuthenticationSession, never to the account.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple
from enum import Enum
import hashlib
import threading

from .config import get_config
from .logging_config import get_logger, log_action

if TYPE_CHECKING:
    from .accounts import Account
    from .directory import AccountDirectory


logger = get_logger("bank_ledger.authentication")


def hash_pin(pin: str) -> str:
    """SHA-256 hex digest of a PIN"""
    return hashlib.sha256(pin.encode('utf-8')).hexdigest()


def validate_pin_format(pin: Optional[str]) -> Tuple[bool, List[str]]:
    """
    Check that a PIN is 4-6 ASCII digits (bounds from configuration)

    Returns:
        (is_valid, list of problems)
    """
    config = get_config()
    errors = []

    if not pin:
        errors.append("PIN cannot be empty")
        return False, errors

    if not (pin.isascii() and pin.isdigit()):
        errors.append("PIN must contain only digits")

    if not config.pin_min_length <= len(pin) <= config.pin_max_length:
        errors.append(
            f"PIN must be {config.pin_min_length} to {config.pin_max_length} digits"
        )

    return len(errors) == 0, errors


def validate_pin_setup(pin: Optional[str], confirmation: Optional[str]) -> Tuple[bool, List[str]]:
    """Validate a new PIN and its confirmation entry"""
    is_valid, errors = validate_pin_format(pin)
    if is_valid and pin != confirmation:
        errors.append("PINs do not match")
    return len(errors) == 0, errors


class AccountAuthenticator:
    """Stateless PIN verifier"""

    def verify(self, account: 'Account', claimed_pin: Optional[str]) -> bool:
        """
        Check a claimed PIN against the account's stored hash

        An absent claim is rejected without hashing. The stored hash is never
        read out of the account; the account compares digests itself.
        """
        if claimed_pin is None:
            return False
        return account.credential_matches(hash_pin(claimed_pin))


class AuthenticationSession:
    """
    Bounded PIN entry for one account

    Allows up to max_attempts verifications. Once authenticated or exhausted,
    further attempts are refused without checking the PIN.
    """

    def __init__(self, account: 'Account', authenticator: Optional[AccountAuthenticator] = None,
                 max_attempts: Optional[int] = None):
        self.account = account
        self.authenticator = authenticator or AccountAuthenticator()
        self.max_attempts = max_attempts if max_attempts is not None else get_config().max_pin_attempts
        self.attempts_made = 0
        self.authenticated = False

    @property
    def attempts_remaining(self) -> int:
        return max(self.max_attempts - self.attempts_made, 0)

    @property
    def exhausted(self) -> bool:
        return not self.authenticated and self.attempts_remaining == 0

    def attempt(self, pin: Optional[str]) -> bool:
        """Verify one PIN entry; returns True once the PIN matches"""
        if self.authenticated or self.exhausted:
            return False

        self.attempts_made += 1
        if self.authenticator.verify(self.account, pin):
            self.authenticated = True
            log_action(
                logger, "info", "PIN accepted",
                action="authenticate", resource=f"account:{self.account.identifier}",
                extra={"attempt": self.attempts_made}
            )
            return True

        log_action(
            logger, "warning", "PIN rejected",
            action="authenticate", resource=f"account:{self.account.identifier}",
            extra={"attempt": self.attempts_made, "remaining": self.attempts_remaining}
        )
        if self.exhausted:
            log_action(
                logger, "warning", "Maximum PIN attempts exceeded",
                action="authenticate", resource=f"account:{self.account.identifier}"
            )
        return False


class AuthenticationStatus(Enum):
    """Authentication flow outcomes"""
    AUTHENTICATED = "authenticated"
    NOT_FOUND = "not_found"
    AUTH_FAILED = "auth_failed"
    LOCKED_OUT = "locked_out"  # Attempt budget used up across requests


@dataclass(frozen=True)
class AuthenticationResult:
    status: AuthenticationStatus
    account: Optional['Account'] = None
    attempts_made: int = 0

    @property
    def success(self) -> bool:
        return self.status == AuthenticationStatus.AUTHENTICATED


def authenticate(
    directory: 'AccountDirectory',
    identifier: str,
    pin_attempts: Iterable[Optional[str]],
    max_attempts: Optional[int] = None,
    authenticator: Optional[AccountAuthenticator] = None
) -> AuthenticationResult:
    """
    Locate an account and verify up to max_attempts PINs against it

    Args:
        directory: Directory to look the account up in
        identifier: Account number
        pin_attempts: PIN entries in the order they were made; entries past
            max_attempts are ignored
        max_attempts: Attempt bound (config default is 3)
        authenticator: Verifier to use

    Returns:
        AuthenticationResult carrying the account only when AUTHENTICATED
    """
    account = directory.get(identifier)
    if account is None:
        log_action(
            logger, "warning", "Account not found",
            action="authenticate", resource=f"account:{identifier}"
        )
        return AuthenticationResult(AuthenticationStatus.NOT_FOUND)

    session = AuthenticationSession(account, authenticator, max_attempts)
    for pin in pin_attempts:
        if session.attempt(pin):
            return AuthenticationResult(
                AuthenticationStatus.AUTHENTICATED, account, session.attempts_made
            )
        if session.exhausted:
            break

    return AuthenticationResult(AuthenticationStatus.AUTH_FAILED, attempts_made=session.attempts_made)


class AttemptTracker:
    """
    Bounded PIN attempts carried across separate requests

    Each request supplies a single PIN, so the attempt count for an
    identifier lives here instead of in one AuthenticationSession call. A
    correct PIN resets the count; once max_attempts wrong PINs have been
    entered the identifier stays locked out.
    """

    def __init__(self, max_attempts: Optional[int] = None,
                 authenticator: Optional[AccountAuthenticator] = None):
        self.max_attempts = max_attempts if max_attempts is not None else get_config().max_pin_attempts
        self.authenticator = authenticator or AccountAuthenticator()
        self._sessions: Dict[str, AuthenticationSession] = {}
        self._lock = threading.Lock()

    def authenticate(self, directory: 'AccountDirectory', identifier: str,
                     pin: Optional[str]) -> AuthenticationResult:
        """Verify one PIN entry against the identifier's running attempt count"""
        account = directory.get(identifier)
        if account is None:
            return AuthenticationResult(AuthenticationStatus.NOT_FOUND)

        with self._lock:
            session = self._sessions.get(account.identifier)
            if session is None:
                session = AuthenticationSession(account, self.authenticator, self.max_attempts)
                self._sessions[account.identifier] = session

            if session.exhausted:
                log_action(
                    logger, "warning", "PIN entry refused, account locked out",
                    action="authenticate", resource=f"account:{account.identifier}"
                )
                return AuthenticationResult(AuthenticationStatus.LOCKED_OUT,
                                            attempts_made=session.attempts_made)

            if session.attempt(pin):
                del self._sessions[account.identifier]
                return AuthenticationResult(AuthenticationStatus.AUTHENTICATED, account,
                                            session.attempts_made)

            status = (AuthenticationStatus.LOCKED_OUT if session.exhausted
                      else AuthenticationStatus.AUTH_FAILED)
            return AuthenticationResult(status, attempts_made=session.attempts_made)
