"""Async client for the Artemis freelance marketplace."""

__version__ = "0.1.0"
