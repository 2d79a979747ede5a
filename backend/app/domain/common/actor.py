"""The authenticated caller of an operation."""
from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Actor:
    id: str
    role: str = "viewer"
    username: str = ""

    @classmethod
    def from_claims(cls, claims: dict) -> "Actor":
        return cls(id=claims["sub"], role=claims.get("role", "viewer"), username=claims.get("username", ""))

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
