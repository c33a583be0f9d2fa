"""Infrastructure layer — SQLite persistence for availability state.

This layer depends on stdlib and SQLAlchemy, plus the domain value types
it stores. It must never import from services, commands, or output.
"""
