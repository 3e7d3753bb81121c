"""
Test suite for directory module

Tests account registration, identifier uniqueness and lookups.
"""

import pytest
from decimal import Decimal

from bank_ledger.accounts import Account
from bank_ledger.directory import AccountDirectory, DuplicateAccountError


@pytest.fixture
def directory():
    """Fresh directory per test"""
    return AccountDirectory()


class TestCreateAccount:
    """Test account creation through the directory"""

    def test_create_account(self, directory):
        account = directory.create_account("ACC001", "Alice Smith", "1234", Decimal("100.00"))

        assert isinstance(account, Account)
        assert account.identifier == "ACC001"
        assert account.balance() == Decimal("100.00")
        assert directory.get("ACC001") is account
        assert len(directory) == 1

    def test_identifier_is_stripped(self, directory):
        account = directory.create_account("  ACC002  ", "Bob", "1234")
        assert account.identifier == "ACC002"
        assert "ACC002" in directory
        assert directory.get(" ACC002 ") is account

    def test_duplicate_identifier(self, directory):
        directory.create_account("ACC001", "Alice", "1234")

        with pytest.raises(DuplicateAccountError, match="ACC001 already exists") as exc_info:
            directory.create_account("ACC001", "Someone Else", "5678")

        assert exc_info.value.identifier == "ACC001"
        assert isinstance(exc_info.value, ValueError)
        assert directory.get("ACC001").holder_name == "Alice"
        assert len(directory) == 1

    @pytest.mark.parametrize("identifier", ["", "   ", None])
    def test_empty_identifier(self, directory, identifier):
        with pytest.raises(ValueError, match="cannot be empty"):
            directory.create_account(identifier, "Alice", "1234")

    @pytest.mark.parametrize("identifier", ["ACC 001", "ACC\t001"])
    def test_identifier_with_spaces(self, directory, identifier):
        with pytest.raises(ValueError, match="cannot contain spaces"):
            directory.create_account(identifier, "Alice", "1234")

    @pytest.mark.parametrize("pin", ["12", "abcd", "1234567", ""])
    def test_invalid_pin(self, directory, pin):
        with pytest.raises(ValueError):
            directory.create_account("ACC001", "Alice", pin)
        assert directory.is_empty()

    def test_empty_holder_name(self, directory):
        with pytest.raises(ValueError, match="holder name"):
            directory.create_account("ACC001", "  ", "1234")
        assert "ACC001" not in directory

    def test_rejected_initial_deposit_not_registered(self, directory):
        with pytest.raises(ValueError, match="Initial deposit rejected"):
            directory.create_account("ACC001", "Alice", "1234", "5000000000")
        assert directory.is_empty()


class TestLookup:
    """Test directory queries"""

    def test_get_missing(self, directory):
        assert directory.get("NOPE") is None
        assert directory.get(None) is None
        assert "NOPE" not in directory

    def test_size(self, directory):
        assert directory.is_empty()
        directory.create_account("A1", "Alice", "1234")
        directory.create_account("B2", "Bob", "1234")
        assert len(directory) == 2
        assert "A1" in directory and "B2" in directory
        assert not directory.is_empty()

    def test_directories_are_isolated(self):
        first = AccountDirectory()
        second = AccountDirectory()
        first.create_account("ACC001", "Alice", "1234")
        assert "ACC001" not in second
