"""
Authenticated principal handed to the marketplace services.

Services never read request state. Views resolve the authenticated user into a
``Principal`` once and pass it (or its id) explicitly to every operation.
"""

import uuid
from dataclasses import dataclass

from utils.rbac import ROLE_ADMIN, ROLE_CUSTOMER


@dataclass(frozen=True)
class Principal:
    id: uuid.UUID
    role: str = ROLE_CUSTOMER

    @classmethod
    def from_user(cls, user) -> "Principal":
        role = getattr(user, "role", ROLE_CUSTOMER)
        if getattr(user, "is_superuser", False):
            role = ROLE_ADMIN
        return cls(id=user.pk, role=role)
