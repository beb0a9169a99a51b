"""pcorder: in-memory order ledger for preset and custom PC builds."""

__version__ = "0.1.0"
