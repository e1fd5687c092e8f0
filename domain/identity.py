"""Authenticated caller as resolved by the credential layer."""

from dataclasses import dataclass
from typing import Any

from bson import ObjectId

from domain.enums import UserRole


@dataclass(frozen=True)
class Identity:
    user_id: ObjectId
    role: str = UserRole.USER.value
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def can_manage(self, owner_id: Any) -> bool:
        """Owners and administrators may modify a resource"""
        return self.is_admin or str(owner_id) == str(self.user_id)
