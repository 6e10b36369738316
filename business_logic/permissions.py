from dataclasses import dataclass
from enum import Enum
from typing import Optional

from models.user import UserRole
from exceptions import InsufficientPermissionsException

class Capability(str, Enum):
    MANAGE_INVENTORY = "manage_inventory"
    RECORD_SALES = "record_sales"
    RECORD_MOVEMENTS = "record_movements"
    CONFIGURE_PARTNERS = "configure_partners"
    VIEW_LEDGER = "view_ledger"
    VIEW_OWN_ENTITLEMENT = "view_own_entitlement"
    MANAGE_CATALOG = "manage_catalog"
    MANAGE_USERS = "manage_users"
    VIEW_REPORTS = "view_reports"

ROLE_CAPABILITIES = {
    UserRole.DIRECTOR: frozenset(Capability),
    UserRole.OPERATOR: frozenset({
        Capability.MANAGE_INVENTORY,
        Capability.RECORD_SALES,
        Capability.RECORD_MOVEMENTS,
        Capability.MANAGE_CATALOG,
        Capability.VIEW_LEDGER,
    }),
    UserRole.INVESTOR: frozenset({Capability.VIEW_OWN_ENTITLEMENT}),
    UserRole.PENDING: frozenset(),
}

@dataclass(frozen=True)
class Actor:
    """Who is calling a ledger operation."""
    user_id: str
    role: UserRole
    active: bool = True
    partner_id: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(
            user_id=user.id,
            role=UserRole(user.role),
            active=bool(user.active),
            partner_id=user.partner_id,
            name=user.name or user.email,
        )

def has_capability(actor: Actor, capability: Capability) -> bool:
    if not actor.active:
        return False
    return capability in ROLE_CAPABILITIES.get(actor.role, frozenset())

def require_capability(actor: Actor, capability: Capability) -> Actor:
    if not has_capability(actor, capability):
        raise InsufficientPermissionsException(
            f"Insufficient permissions. Required: {capability.value}"
        )
    return actor

def require_partner_access(actor: Actor, partner_id: str) -> Actor:
    """Ledger viewers see every partner; investors only their own."""
    if has_capability(actor, Capability.VIEW_LEDGER):
        return actor
    if has_capability(actor, Capability.VIEW_OWN_ENTITLEMENT) and actor.partner_id == partner_id:
        return actor
    raise InsufficientPermissionsException("Not authorized to view this partner")
