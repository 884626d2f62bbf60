"""Adapters that connect the spamscope core to HTTP, SMTP and SQLite."""
