"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class BankLedgerConfig(BaseSettings):
    """Bank ledger configuration"""

    # Business rules configuration
    max_pin_attempts: int = 3
    pin_min_length: int = 4
    pin_max_length: int = 6

    # Transaction record configuration
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr
    console_log_level: str = "ERROR"  # Console teller without log_file

    # Console teller configuration
    ui_delay_seconds: float = 0.45  # ATM-like pause between screens

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8090

    class Config:
        env_prefix = "BANK_LEDGER_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = BankLedgerConfig()


def get_config() -> BankLedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> BankLedgerConfig:
    """Reload configuration from environment"""
    global config
    config = BankLedgerConfig()
    return config
