"""litedesk: SQLite session and statement-processing toolkit."""

__version__ = "0.1.0"
