"""Points ledger: per-payer balances and oldest-first spending."""

__version__ = "0.1.0"
