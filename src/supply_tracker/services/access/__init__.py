"""Owner roles and quotas."""

from supply_tracker.services.access.role_provider import (
    IRoleProvider,
    SettingsRoleProvider,
    quota_for_role,
)

__all__ = ["IRoleProvider", "SettingsRoleProvider", "quota_for_role"]
