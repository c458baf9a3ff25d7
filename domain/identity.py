"""
Domain: Caller identity.

Represents the authenticated campaign owner resolved for a request. The
platform does not manage sessions itself; an identity is either resolved by
the authentication collaborator or absent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated campaign owner.

    Only the owner of a campaign writes its proof events and reads the
    click-derived live visitor counts for their own affiliate links.
    """

    user_id: str
    email: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("user_id must be a non-empty string")
