"""Group expense splitting: balances, settlements and a small JSON HTTP API."""

__version__ = "0.1.0"