"""Event-driven credit scoring for newly registered customers."""

__version__ = "0.1.0"
