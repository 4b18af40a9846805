from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class AuthState(str, Enum):
    SIGNED_OUT = "signed_out"
    SIGNED_IN = "signed_in"


@dataclass(frozen=True)
class UserProfile:
    """
    Row of the profiles table, keyed by the auth user id.
    """

    id: str
    email: str
    first_name: str = ""
    last_name: str = ""

    def to_row(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any], fallback_email: Optional[str] = None) -> "UserProfile":
        return cls(
            id=str(row.get("id", "")),
            email=str(row.get("email") or fallback_email or ""),
            first_name=str(row.get("first_name") or ""),
            last_name=str(row.get("last_name") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.to_row()
