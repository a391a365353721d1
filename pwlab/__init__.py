"""pwlab - offline password-cracking practice lab."""

__version__ = "0.1.0"
