"""
Test suite for configuration and logging modules
"""

import json
import logging

from bank_ledger.accounts import Account, TransactionOutcome
from bank_ledger.config import BankLedgerConfig, get_config, reload_config
from bank_ledger.currency import TRANSACTION_CEILING
from bank_ledger.logging_config import JSONFormatter, setup_logging, get_logger, log_action


class TestConfig:
    """Test environment-based configuration"""

    def test_defaults(self):
        config = BankLedgerConfig()
        assert config.max_pin_attempts == 3
        assert config.pin_min_length == 4
        assert config.pin_max_length == 6
        assert config.timestamp_format == "%Y-%m-%d %H:%M:%S"
        assert config.console_log_level == "ERROR"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("BANK_LEDGER_MAX_PIN_ATTEMPTS", "5")
        try:
            config = reload_config()
            assert config.max_pin_attempts == 5
            assert get_config() is config
        finally:
            monkeypatch.delenv("BANK_LEDGER_MAX_PIN_ATTEMPTS")
            reload_config()

        assert get_config().max_pin_attempts == 3

    def test_ceiling_ignores_environment(self, monkeypatch):
        """The transaction ceiling is a fixed constant, not a setting"""
        monkeypatch.setenv("BANK_LEDGER_TRANSACTION_CEILING", "not-a-number")
        try:
            config = reload_config()
            assert not hasattr(config, "transaction_ceiling")

            account = Account("ACC001", "Alice", "1234")
            assert account.deposit("1000000000.00").success
            result = account.deposit("1000000000.01")
            assert result.outcome == TransactionOutcome.AMOUNT_EXCEEDS_LIMIT
            assert account.balance() == TRANSACTION_CEILING
        finally:
            monkeypatch.delenv("BANK_LEDGER_TRANSACTION_CEILING")
            reload_config()


class TestLogging:
    """Test structured logging helpers"""

    def test_json_formatter(self):
        record = logging.LogRecord("bank_ledger.accounts", logging.INFO, __file__, 1,
                                   "deposit success", (), None)
        record.action = "deposit"
        record.resource = "account:ACC001"
        record.extra = {"amount": "10.00"}

        entry = json.loads(JSONFormatter().format(record))
        assert entry["level"] == "INFO"
        assert entry["module"] == "bank_ledger.accounts"
        assert entry["message"] == "deposit success"
        assert entry["action"] == "deposit"
        assert entry["resource"] == "account:ACC001"
        assert entry["extra"] == {"amount": "10.00"}

    def test_json_formatter_drops_missing_fields(self):
        record = logging.LogRecord("bank_ledger", logging.WARNING, __file__, 1, "plain", (), None)
        entry = json.loads(JSONFormatter().format(record))
        assert "action" not in entry
        assert "resource" not in entry

    def test_setup_logging(self):
        logger = setup_logging("DEBUG", "text", logger_name="bank_ledger.test_setup")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert not logger.propagate

        # Calling again replaces rather than duplicates handlers
        logger = setup_logging("INFO", "json", logger_name="bank_ledger.test_setup")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_log_action_attaches_fields(self, caplog):
        logger = get_logger("bank_ledger.test_log_action")
        with caplog.at_level(logging.INFO, logger="bank_ledger.test_log_action"):
            log_action(logger, "info", "Account created", action="create_account",
                       resource="account:ACC001", extra={"opening_balance": "0.00"})

        record = caplog.records[-1]
        assert record.getMessage() == "Account created"
        assert record.action == "create_account"
        assert record.resource == "account:ACC001"
        assert record.extra == {"opening_balance": "0.00"}
