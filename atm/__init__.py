"""atm — topic subscription manager for APT-based hosts."""

__version__ = "0.3.0"
