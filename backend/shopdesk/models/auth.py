from __future__ import annotations

from dataclasses import dataclass


class Role:
    """Staff roles. ADMIN is granted every permission."""
    ADMIN = "ADMIN"
    TECHNICIAN = "TECHNICIAN"
    SALES = "SALES"

    @classmethod
    def all(cls) -> list[str]:
        return [cls.ADMIN, cls.TECHNICIAN, cls.SALES]


@dataclass(frozen=True)
class Employee:
    """A staff member who can log in and act on records."""
    id: str
    name: str
    role: str
    username: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "username": self.username,
        }
