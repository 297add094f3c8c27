"""Ledger events: pydantic schema plus a log/Redis Streams publisher."""
