"""Storage layer for the artisan record store."""

from artisan_rank.storage.database import Database

__all__ = ["Database"]
