"""Storage layer for plans, rates and enrollment history."""

from benefitsengine.storage.base import RateStore
from benefitsengine.storage.repository import SQLiteRateStore

__all__ = ["RateStore", "SQLiteRateStore"]
