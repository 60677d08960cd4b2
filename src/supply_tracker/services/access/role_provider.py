# -*- coding: utf-8 -*-
"""Role lookup and per-role tracker quotas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from supply_tracker.models.tracker import Role
from supply_tracker.utils.validation import normalize_owner

if TYPE_CHECKING:
    from supply_tracker.config import Settings


class IRoleProvider(Protocol):
    """Resolves an owner's role."""

    def get_role(self, owner: str) -> Role: ...


class SettingsRoleProvider:
    """Role membership from settings.access (admin_users / vip_users)."""

    def __init__(self, settings: "Settings") -> None:
        access = settings.access
        self._admins = frozenset(normalize_owner(u) for u in access.admin_users)
        self._vips = frozenset(normalize_owner(u) for u in access.vip_users)

    def get_role(self, owner: str) -> Role:
        key = normalize_owner(owner)
        if key in self._admins:
            return Role.ADMIN
        if key in self._vips:
            return Role.VIP
        return Role.DEFAULT


def quota_for_role(role: Role, settings: "Settings") -> int | None:
    """Max simultaneous trackers for role; None means unlimited (admin)."""
    if role is Role.ADMIN:
        return None
    if role is Role.VIP:
        return settings.tracker.vip_quota
    return settings.tracker.default_quota
