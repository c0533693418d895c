"""
Execution results returned by simulated chain modules.

Modules never raise for expected failures: they return Err with a
human-readable message, and Ok wrapping an AppResponse otherwise.
"""

import json
import base64
from typing import Dict, List, Any, Optional, Union
from dataclasses import dataclass, field
from enum import Enum


class ResultError(Exception):
    """Raised when unwrapping an Err."""
    pass


def to_binary(value: Any) -> str:
    """Encode a value as base64 of compact JSON."""
    raw = json.dumps(value, separators=(',', ':'))
    return base64.b64encode(raw.encode('utf-8')).decode('ascii')


def from_binary(data: str) -> Any:
    """Decode a value produced by to_binary."""
    return json.loads(base64.b64decode(data).decode('utf-8'))


@dataclass
class Event:
    """Chain event with ordered key/value attributes."""

    type: str
    attributes: List[Dict[str, str]] = field(default_factory=list)

    def add_attribute(self, key: str, value: Any) -> 'Event':
        self.attributes.append({'key': key, 'value': str(value)})
        return self

    def get_attribute(self, key: str) -> Optional[str]:
        for attr in self.attributes:
            if attr['key'] == key:
                return attr['value']
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'attributes': [dict(a) for a in self.attributes],
        }


@dataclass
class AppResponse:
    """Successful execution payload."""

    events: List[Event] = field(default_factory=list)
    data: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'events': [e.to_dict() for e in self.events],
            'data': self.data,
        }


@dataclass
class Ok:
    """Successful result."""

    response: AppResponse = field(default_factory=AppResponse)

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> AppResponse:
        return self.response


@dataclass
class Err:
    """Failed result carrying an error message and optional kind."""

    error: str
    kind: Optional[Enum] = None

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> AppResponse:
        raise ResultError(self.error)


Result = Union[Ok, Err]
