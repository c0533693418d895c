"""
Token Factory Messages
Typed execute messages and queries, decoded once from their JSON shape.

Wire shape of an execute message:
    {'custom': {'token': {'mint_tokens': {'denom': ..., 'amount': '100', ...}}}}
"""

import copy
from typing import Dict, Optional, Any, Union
from dataclasses import dataclass

from core.coins import parse_amount
from .errors import InvalidMessage
import config


def build_denom(creator: str, subdenom: str) -> str:
    """Build the full denom owned by creator."""
    return config.DENOM_SEPARATOR.join([config.DENOM_PREFIX, creator, subdenom])


def _fields(data: Any, tag: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise InvalidMessage(f"{tag}: expected an object")
    return data


def _string(data: Dict[str, Any], key: str, tag: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise InvalidMessage(f"{tag}: {key} must be a string")
    return value


def _amount(data: Dict[str, Any], tag: str) -> int:
    try:
        return parse_amount(data.get('amount'))
    except ValueError as e:
        raise InvalidMessage(f"{tag}: {e}")


# ============================================================================
# EXECUTE MESSAGES
# ============================================================================

@dataclass(frozen=True)
class CreateDenom:
    """Create factory/<sender>/<subdenom> with sender as admin."""

    TAG = 'create_denom'

    subdenom: str
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'CreateDenom':
        data = _fields(data, cls.TAG)
        metadata = data.get('metadata')
        if metadata is not None and not isinstance(metadata, dict):
            raise InvalidMessage(f"{cls.TAG}: metadata must be an object")
        return cls(
            subdenom=_string(data, 'subdenom', cls.TAG),
            metadata=copy.deepcopy(metadata),
        )

    def to_dict(self) -> Dict[str, Any]:
        body = {'subdenom': self.subdenom}
        if self.metadata is not None:
            body['metadata'] = copy.deepcopy(self.metadata)
        return {self.TAG: body}


@dataclass(frozen=True)
class MintTokens:
    """Mint new units of denom to an address. Admin only."""

    TAG = 'mint_tokens'

    denom: str
    amount: int
    mint_to_address: str

    @classmethod
    def from_dict(cls, data: Any) -> 'MintTokens':
        data = _fields(data, cls.TAG)
        return cls(
            denom=_string(data, 'denom', cls.TAG),
            amount=_amount(data, cls.TAG),
            mint_to_address=_string(data, 'mint_to_address', cls.TAG),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {self.TAG: {
            'denom': self.denom,
            'amount': str(self.amount),
            'mint_to_address': self.mint_to_address,
        }}


@dataclass(frozen=True)
class BurnTokens:
    """Burn units of denom held by an address."""

    TAG = 'burn_tokens'

    denom: str
    amount: int
    burn_from_address: str

    @classmethod
    def from_dict(cls, data: Any) -> 'BurnTokens':
        data = _fields(data, cls.TAG)
        return cls(
            denom=_string(data, 'denom', cls.TAG),
            amount=_amount(data, cls.TAG),
            burn_from_address=_string(data, 'burn_from_address', cls.TAG),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {self.TAG: {
            'denom': self.denom,
            'amount': str(self.amount),
            'burn_from_address': self.burn_from_address,
        }}


@dataclass(frozen=True)
class ForceTransfer:
    """Move units of denom between two addresses."""

    TAG = 'force_transfer'

    denom: str
    amount: int
    from_address: str
    to_address: str

    @classmethod
    def from_dict(cls, data: Any) -> 'ForceTransfer':
        data = _fields(data, cls.TAG)
        return cls(
            denom=_string(data, 'denom', cls.TAG),
            amount=_amount(data, cls.TAG),
            from_address=_string(data, 'from_address', cls.TAG),
            to_address=_string(data, 'to_address', cls.TAG),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {self.TAG: {
            'denom': self.denom,
            'amount': str(self.amount),
            'from_address': self.from_address,
            'to_address': self.to_address,
        }}


TokenMsg = Union[CreateDenom, MintTokens, BurnTokens, ForceTransfer]

MESSAGE_TYPES = {
    cls.TAG: cls for cls in (CreateDenom, MintTokens, BurnTokens, ForceTransfer)
}


# ============================================================================
# QUERIES
# ============================================================================

@dataclass(frozen=True)
class FullDenom:
    TAG = 'full_denom'

    creator_addr: str
    subdenom: str

    @classmethod
    def from_dict(cls, data: Any) -> 'FullDenom':
        data = _fields(data, cls.TAG)
        return cls(
            creator_addr=_string(data, 'creator_addr', cls.TAG),
            subdenom=_string(data, 'subdenom', cls.TAG),
        )


@dataclass(frozen=True)
class DenomMetadata:
    TAG = 'metadata'

    denom: str

    @classmethod
    def from_dict(cls, data: Any) -> 'DenomMetadata':
        return cls(denom=_string(_fields(data, cls.TAG), 'denom', cls.TAG))


@dataclass(frozen=True)
class DenomAdmin:
    TAG = 'admin'

    denom: str

    @classmethod
    def from_dict(cls, data: Any) -> 'DenomAdmin':
        return cls(denom=_string(_fields(data, cls.TAG), 'denom', cls.TAG))


@dataclass(frozen=True)
class DenomsByCreator:
    TAG = 'denoms_by_creator'

    creator: str

    @classmethod
    def from_dict(cls, data: Any) -> 'DenomsByCreator':
        return cls(creator=_string(_fields(data, cls.TAG), 'creator', cls.TAG))


@dataclass(frozen=True)
class Params:
    TAG = 'params'

    @classmethod
    def from_dict(cls, data: Any) -> 'Params':
        _fields(data, cls.TAG)
        return cls()


TokenQuery = Union[FullDenom, DenomMetadata, DenomAdmin, DenomsByCreator, Params]

QUERY_TYPES = {
    cls.TAG: cls for cls in (FullDenom, DenomMetadata, DenomAdmin, DenomsByCreator, Params)
}


# ============================================================================
# DECODING
# ============================================================================

def token_body(msg: Any) -> Optional[Dict[str, Any]]:
    """Return the {'<tag>': {...}} body of a token custom message, if any."""
    if not isinstance(msg, dict):
        return None
    custom = msg.get('custom')
    if not isinstance(custom, dict):
        return None
    body = custom.get(config.CUSTOM_ROUTE)
    if not isinstance(body, dict):
        return None
    return body


def _decode(msg: Any, types: Dict[str, type]):
    body = token_body(msg)
    if body is None or len(body) != 1:
        return None

    tag, fields = next(iter(body.items()))
    cls = types.get(tag)
    if cls is None:
        return None
    return cls.from_dict(fields)


def parse_token_msg(msg: Any) -> Optional[TokenMsg]:
    """
    Decode a token factory execute message.

    Returns:
        The typed message, or None if msg is not a token factory message

    Raises:
        InvalidMessage: If the tag is known but its fields are malformed
    """
    return _decode(msg, MESSAGE_TYPES)


def parse_token_query(request: Any) -> Optional[TokenQuery]:
    """Decode a token factory query, like parse_token_msg."""
    return _decode(request, QUERY_TYPES)


def wrap_custom(body: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap a tagged body into the custom message envelope."""
    return {'custom': {config.CUSTOM_ROUTE: body}}