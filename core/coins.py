"""
Coin amounts for the simulated bank.
"""

from typing import Dict, List, Any
from dataclasses import dataclass

import config


def parse_amount(value: Any) -> int:
    """
    Parse a Uint128 amount.

    Accepts an int or a string of decimal digits (the JSON encoding used
    on the wire).

    Args:
        value: Amount to parse

    Returns:
        Amount as int

    Raises:
        ValueError: If the amount is not a valid Uint128
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid amount: {value!r}")

    if isinstance(value, int):
        amount = value
    elif isinstance(value, str) and value.isdigit() and value.isascii():
        amount = int(value)
    else:
        raise ValueError(f"invalid amount: {value!r}")

    if amount < 0:
        raise ValueError(f"invalid amount: {value!r}")
    if amount > config.UINT128_MAX:
        raise ValueError(f"amount exceeds Uint128: {value!r}")

    return amount


@dataclass(frozen=True)
class Coin:
    """A single denom/amount pair."""

    denom: str
    amount: int

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"

    def to_dict(self) -> Dict[str, str]:
        return {
            'denom': self.denom,
            'amount': str(self.amount),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Coin':
        denom = data.get('denom')
        if not isinstance(denom, str) or not denom:
            raise ValueError(f"invalid denom: {denom!r}")
        return cls(denom=denom, amount=parse_amount(data.get('amount')))


def coins(amount: Any, denom: str) -> List[Coin]:
    """Build a one-coin list, the shape bank messages expect."""
    return [Coin(denom=denom, amount=parse_amount(amount))]


def parse_coins(data: Any) -> List[Coin]:
    """Parse a list of coin dicts (or Coin objects)."""
    if not isinstance(data, list):
        raise ValueError("amount must be a list of coins")

    result = []
    for item in data:
        if isinstance(item, Coin):
            result.append(item)
        elif isinstance(item, dict):
            result.append(Coin.from_dict(item))
        else:
            raise ValueError(f"invalid coin: {item!r}")
    return result


def format_coins(items: List[Coin]) -> str:
    """Render coins the way bank events do: 100denom,5other."""
    return ','.join(str(c) for c in items)
