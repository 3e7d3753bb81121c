"""
Bank Ledger

In-memory account ledger with fixed-point Decimal money, an append-only
transaction log per account, and PIN authentication with bounded retries.
"""

__version__ = "1.0.0"
