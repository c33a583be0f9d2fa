"""Domain layer — identifiers, locks, events, and the availability entity.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
