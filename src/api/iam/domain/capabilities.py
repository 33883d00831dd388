"""Static capability table for workspace roles.

The mapping from role to authorized actions is fixed and not user
configurable. The resolver consults it for the workspace-role layer of the
decision cascade, translating a required permission level into the
capabilities that level needs.
"""

from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType

from iam.domain.value_objects import Capability, PermissionLevel, WorkspaceRole

_RESOURCE_CAPABILITIES = frozenset(
    {
        Capability.CREATE_RESOURCE,
        Capability.EDIT_RESOURCE,
        Capability.DELETE_RESOURCE,
        Capability.VIEW_RESOURCE,
        Capability.SHARE_RESOURCE,
    }
)

ROLE_CAPABILITIES: MappingProxyType[WorkspaceRole, frozenset[Capability]] = (
    MappingProxyType(
        {
            WorkspaceRole.OWNER: frozenset(Capability),
            WorkspaceRole.ADMIN: frozenset(Capability) - {Capability.DELETE_WORKSPACE},
            WorkspaceRole.EDITOR: _RESOURCE_CAPABILITIES,
            WorkspaceRole.VIEWER: frozenset({Capability.VIEW_RESOURCE}),
            WorkspaceRole.GUEST: frozenset({Capability.VIEW_SHARED_ONLY}),
        }
    )
)

# OWNER level needs more than DELETE_RESOURCE alone: EDITOR holds that, but
# only OWNER and ADMIN roles may stand in for resource ownership.
LEVEL_CAPABILITIES: MappingProxyType[PermissionLevel, frozenset[Capability]] = (
    MappingProxyType(
        {
            PermissionLevel.READ: frozenset({Capability.VIEW_RESOURCE}),
            PermissionLevel.WRITE: frozenset({Capability.EDIT_RESOURCE}),
            PermissionLevel.OWNER: frozenset(
                {Capability.DELETE_RESOURCE, Capability.MANAGE_MEMBERS}
            ),
        }
    )
)


def capabilities_for(role: WorkspaceRole) -> frozenset[Capability]:
    """Return the capabilities a role authorizes."""
    return ROLE_CAPABILITIES[role]


def role_has_capability(role: WorkspaceRole, capability: Capability) -> bool:
    """Check a single cell of the capability table."""
    return capability in ROLE_CAPABILITIES[role]


def role_has_any(role: WorkspaceRole, capabilities: Iterable[Capability]) -> bool:
    """True if the role authorizes at least one of ``capabilities``."""
    return not ROLE_CAPABILITIES[role].isdisjoint(capabilities)


def role_has_all(role: WorkspaceRole, capabilities: Iterable[Capability]) -> bool:
    """True if the role authorizes every one of ``capabilities``."""
    return ROLE_CAPABILITIES[role].issuperset(capabilities)


def role_satisfies_level(role: WorkspaceRole, level: PermissionLevel) -> bool:
    """True if the role covers the action implied by a permission level."""
    return role_has_all(role, LEVEL_CAPABILITIES[level])
