"""Tuiter Stage: users, tuits, likes and their attached media."""

__version__ = "0.1.0"
