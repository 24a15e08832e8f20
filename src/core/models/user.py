#!/usr/bin/env python3
"""
User location profile model.

Owned by the external user-profile store; read-only here.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional


@dataclass(frozen=True)
class UserLocationProfile:
    """A user and the free-text location they registered."""
    user_id: str
    raw_location: str = ""
    fcm_token: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserLocationProfile':
        """Create profile from a ``profiles`` row."""
        return cls(
            user_id=str(data.get('id', '')),
            raw_location=data.get('location') or "",
            fcm_token=data.get('fcm_token')
        )
