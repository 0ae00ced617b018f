"""LegatePro: estate administration backend."""

__version__ = "0.4.0"
