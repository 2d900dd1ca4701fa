"""Shared helpers: PRNG creation and logging setup."""
