"""Repositories translating between SQL rows and domain entities."""
