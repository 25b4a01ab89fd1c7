"""A small object-relational mapper for SQLite with dataclass models."""

__version__ = "0.1.0"