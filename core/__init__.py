"""
Simulator Core Module
Contains coins, execution results and the bank ledger.
"""

from .coins import Coin, coins, parse_amount, parse_coins, format_coins
from .result import (
    AppResponse,
    Event,
    Ok,
    Err,
    Result,
    ResultError,
    to_binary,
    from_binary,
)
from .bank import Bank

__all__ = [
    'Coin',
    'coins',
    'parse_amount',
    'parse_coins',
    'format_coins',
    'AppResponse',
    'Event',
    'Ok',
    'Err',
    'Result',
    'ResultError',
    'to_binary',
    'from_binary',
    'Bank',
]
