"""
Token Factory Module
Creator-scoped denoms with admin-gated minting.
"""

from .errors import TokenFactoryError, InvalidMessage
from .registry import TokenRegistry
from .handler import TokenFactoryHandler
from .messages import (
    CreateDenom,
    MintTokens,
    BurnTokens,
    ForceTransfer,
    build_denom,
    parse_token_msg,
    parse_token_query,
    wrap_custom,
)

__all__ = [
    'TokenFactoryError',
    'InvalidMessage',
    'TokenRegistry',
    'TokenFactoryHandler',
    'CreateDenom',
    'MintTokens',
    'BurnTokens',
    'ForceTransfer',
    'build_denom',
    'parse_token_msg',
    'parse_token_query',
    'wrap_custom',
]
