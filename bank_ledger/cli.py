"""
Console Teller Module

Menu-driven front end over an AccountDirectory: create accounts, deposit,
withdraw, check balances and view transaction history. Every operation on an
existing account asks for the PIN first, with a bounded number of attempts.
"""

import time
from decimal import Decimal
from typing import Callable, Optional

from .accounts import Account, TransactionOutcome, TransactionResult
from .authentication import AuthenticationSession, validate_pin_setup
from .config import BankLedgerConfig, get_config
from .currency import ZERO, format_money, parse_amount
from .directory import AccountDirectory
from .logging_config import get_logger, setup_logging


MENU = """
===== Python Bank =====
1. Create Account
2. Deposit Money
3. Withdraw Money
4. Check Balance
5. View Transaction History
6. Exit"""

DEPOSIT_ERRORS = {
    TransactionOutcome.INVALID_AMOUNT: "ERROR: Deposit failed: amount must be greater than zero.",
    TransactionOutcome.AMOUNT_EXCEEDS_LIMIT: "ERROR: Deposit exceeds allowed single-transaction limit.",
}

WITHDRAW_ERRORS = {
    TransactionOutcome.INVALID_AMOUNT: "ERROR: Withdrawal failed: amount must be greater than zero.",
    TransactionOutcome.AMOUNT_EXCEEDS_LIMIT: "ERROR: Withdrawal exceeds allowed single-transaction limit.",
    TransactionOutcome.INSUFFICIENT_FUNDS: "ERROR: Withdrawal failed: insufficient funds.",
}


class InputClosed(Exception):
    """Raised when the input stream ends"""


class BankTeller:
    """Interactive teller loop"""

    def __init__(
        self,
        directory: Optional[AccountDirectory] = None,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
        delay: Optional[Callable[[], None]] = None,
        config: Optional[BankLedgerConfig] = None
    ):
        self.directory = directory if directory is not None else AccountDirectory()
        self.config = config or get_config()
        self._input = input_func
        self._output = output_func
        self._delay = delay or (lambda: time.sleep(self.config.ui_delay_seconds))
        self.logger = get_logger("bank_ledger.cli")

    def run(self) -> None:
        """Show the menu until the user exits or input ends"""
        actions = {
            1: self.create_account_flow,
            2: self.deposit_flow,
            3: self.withdraw_flow,
            4: self.balance_flow,
            5: self.history_flow,
        }
        try:
            while True:
                self._delay()
                self._output(MENU)
                choice = self._read_int("Enter your choice: ")
                if choice == 6:
                    self._delay()
                    self._output("Goodbye, thank you for using Python Bank.")
                    return
                action = actions.get(choice)
                if action is None:
                    self._error("ERROR: Invalid choice. Please select a valid menu option.")
                elif choice == 1 or self._ensure_accounts():
                    action()
        except InputClosed:
            self.logger.info("Input closed, leaving teller loop")
            self._output("\nShutting down bank application...")

    # Flows

    def create_account_flow(self) -> Optional[Account]:
        self._output("\n--- Create Account ---")
        self._delay()
        while True:
            identifier = self._read_non_empty(
                "Enter Account Number (alphanumeric, no spaces): ").strip()
            if any(ch.isspace() for ch in identifier):
                self._error("ERROR: Account number cannot contain spaces.")
            elif identifier in self.directory:
                self._error("ERROR: Account number already exists. Choose a different one.")
            else:
                break

        name = self._read_non_empty("Enter Account Holder Name: ").strip()
        initial_deposit = self._read_initial_deposit("Enter Initial Deposit (0 allowed): ")

        while True:
            pin = self._read_non_empty(
                f"Set a {self.config.pin_min_length}-{self.config.pin_max_length} digit numeric PIN: ").strip()
            confirmation = self._read_non_empty("Confirm PIN: ").strip()
            is_valid, errors = validate_pin_setup(pin, confirmation)
            if is_valid:
                break
            self._error(f"ERROR: {errors[0]}. Try again.")

        try:
            account = self.directory.create_account(identifier, name, pin, initial_deposit)
        except ValueError as e:
            self._error(f"ERROR: {e}")
            return None

        self._delay()
        self._output(f"SUCCESS: Account created for '{name}' with Account Number: {identifier}")
        return account

    def deposit_flow(self) -> Optional[TransactionResult]:
        self._output("\n--- Deposit ---")
        self._delay()
        account = self.authenticate_account()
        if account is None:
            return None

        amount = self._read_amount("Enter deposit amount (greater than 0): ")
        self._delay()
        result = account.deposit(amount)
        if result.success:
            if result.announce:
                self._output(f"SUCCESS: Deposited {format_money(result.amount)}")
        else:
            self._output(DEPOSIT_ERRORS[result.outcome])
        return result

    def withdraw_flow(self) -> Optional[TransactionResult]:
        self._output("\n--- Withdraw ---")
        self._delay()
        account = self.authenticate_account()
        if account is None:
            return None

        amount = self._read_amount("Enter withdrawal amount (greater than 0): ")
        self._delay()
        result = account.withdraw(amount)
        if result.success:
            self._output(f"SUCCESS: Withdrew {format_money(result.amount)}")
        else:
            self._output(WITHDRAW_ERRORS[result.outcome])
        return result

    def balance_flow(self) -> None:
        self._output("\n--- Check Balance ---")
        self._delay()
        account = self.authenticate_account()
        if account is None:
            return

        self._delay()
        self._output("\n--- Account Summary ---")
        self._output(f"Account Number : {account.identifier}")
        self._output(f"Account Holder : {account.holder_name}")
        self._output(f"Current Balance: {format_money(account.balance())}")

    def history_flow(self) -> None:
        self._output("\n--- Transaction History ---")
        self._delay()
        account = self.authenticate_account()
        if account is None:
            return

        self._delay()
        self._output(
            f"\n--- Transaction History for Account {account.identifier} ({account.holder_name}) ---")
        lines = account.history_lines()
        if not lines:
            self._output("No transactions found.")
        for line in lines:
            self._output(line)

    def authenticate_account(self) -> Optional[Account]:
        """Look up an account and ask for its PIN, up to the attempt limit"""
        identifier = self._read_non_empty("Enter Account Number: ").strip()
        account = self.directory.get(identifier)
        if account is None:
            self._error("ERROR: Account not found. Please check the account number.")
            return None

        session = AuthenticationSession(account, max_attempts=self.config.max_pin_attempts)
        while not session.exhausted:
            attempt = session.attempts_made + 1
            pin = self._read_non_empty(
                f"Enter PIN (attempt {attempt}/{session.max_attempts}): ").strip()
            if session.attempt(pin):
                self._delay()
                return account
            self._error("ERROR: Incorrect PIN.")

        self._error("ERROR: Maximum PIN attempts exceeded. Operation aborted.")
        return None

    # Input helpers

    def _ensure_accounts(self) -> bool:
        if self.directory.is_empty():
            self._error("INFO: No accounts found. Please create an account first (Option 1).")
            return False
        return True

    def _error(self, message: str) -> None:
        self._delay()
        self._output(message)

    def _read_line(self, prompt: str) -> str:
        try:
            return self._input(prompt)
        except EOFError:
            raise InputClosed()

    def _read_non_empty(self, prompt: str) -> str:
        while True:
            line = self._read_line(prompt)
            if line and line.strip():
                return line
            self._error("ERROR: Input cannot be empty. Try again.")

    def _read_int(self, prompt: str) -> int:
        while True:
            line = self._read_line(prompt)
            try:
                return int(line.strip())
            except ValueError:
                self._error("ERROR: Invalid number. Please enter a valid integer.")

    def _read_initial_deposit(self, prompt: str) -> Decimal:
        while True:
            line = self._read_line(prompt).strip()
            if not line:
                return ZERO
            try:
                return parse_amount(line, allow_zero=True)
            except ValueError as e:
                self._error(f"ERROR: Invalid amount ({e}). Use numeric format (e.g., 1000.00).")

    def _read_amount(self, prompt: str) -> Decimal:
        while True:
            line = self._read_line(prompt).strip()
            if not line:
                self._error("ERROR: Amount cannot be empty. Try again.")
                continue
            try:
                return parse_amount(line)
            except ValueError as e:
                self._error(f"ERROR: Invalid amount ({e}). Use numeric format (e.g., 50.25).")


def configure_console_logging(config: BankLedgerConfig) -> None:
    """
    Set up logging for the interactive teller

    JSON log lines would interleave with the prompts on stderr, so without a
    log_file only records at console_log_level and above reach the console.
    """
    level = config.log_level if config.log_file else config.console_log_level
    setup_logging(level, config.log_format, log_file=config.log_file)


def main() -> None:
    """Console entry point"""
    config = get_config()
    configure_console_logging(config)
    BankTeller(config=config).run()


if __name__ == "__main__":
    main()
