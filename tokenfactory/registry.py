"""
Token Factory Registry
Which denoms exist, who administers them, and their metadata.
"""

import copy
from typing import Dict, List, Optional, Any


class TokenRegistry:
    """
    Denom registry.

    A denom is registered exactly once and never removed; its admin is the
    creator and never changes. Metadata is kept verbatim and only for denoms
    created with it.
    """

    def __init__(self):
        self.admin: Dict[str, str] = {}  # denom -> admin address
        self.denoms_by_creator: Dict[str, List[str]] = {}  # creator -> denoms, creation order
        self.metadata: Dict[str, Dict[str, Any]] = {}  # denom -> metadata

    def exists(self, denom: str) -> bool:
        return denom in self.admin

    def register(self, denom: str, creator: str, metadata: Optional[Dict[str, Any]] = None) -> bool:
        """
        Register a new denom with creator as admin.

        Args:
            denom: Full denom
            creator: Creator (and admin) address
            metadata: Optional metadata, stored as given

        Returns:
            False if the denom already exists (nothing is changed)
        """
        if denom in self.admin:
            return False

        self.admin[denom] = creator
        self.denoms_by_creator.setdefault(creator, []).append(denom)
        if metadata is not None:
            self.metadata[denom] = copy.deepcopy(metadata)
        return True

    def get_admin(self, denom: str) -> Optional[str]:
        return self.admin.get(denom)

    def get_metadata(self, denom: str) -> Optional[Dict[str, Any]]:
        """Get a copy of a denom's metadata (None if none was supplied)."""
        metadata = self.metadata.get(denom)
        return copy.deepcopy(metadata) if metadata is not None else None

    def get_denoms(self, creator: str) -> List[str]:
        """Get denoms created by an address, oldest first."""
        return list(self.denoms_by_creator.get(creator, []))

    def size(self) -> int:
        return len(self.admin)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'admin': dict(self.admin),
            'denoms_by_creator': {k: list(v) for k, v in self.denoms_by_creator.items()},
            'metadata': copy.deepcopy(self.metadata),
        }
