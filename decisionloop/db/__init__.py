"""Persistence: async SQLAlchemy engine, ORM tables and repositories."""
