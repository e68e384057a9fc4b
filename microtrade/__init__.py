"""A TCP shop client and server whose user accounts are kept in SQLite."""

__version__ = "1.0.0"

__all__ = ["client", "controllers", "models", "protocol", "server", "transport"]