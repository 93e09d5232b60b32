"""Historical-commit locator."""

from reroller.locate.base import HistoryOracle, LocateStrategy
from reroller.locate.bisect import BisectStrategy
from reroller.locate.locator import Locator, locate
from reroller.locate.timestamp import TimestampStrategy

__all__ = [
    "HistoryOracle",
    "LocateStrategy",
    "BisectStrategy",
    "TimestampStrategy",
    "Locator",
    "locate",
]
