import pytest

from business_logic.permissions import (
    Actor,
    Capability,
    has_capability,
    require_capability,
    require_partner_access,
)
from exceptions import InsufficientPermissionsException
from models.user import UserRole


def actor(role, active=True, partner_id=None):
    return Actor(user_id="U-1", role=role, active=active, partner_id=partner_id, name="Someone")


def test_director_holds_every_capability():
    director = actor(UserRole.DIRECTOR)
    assert all(has_capability(director, c) for c in Capability)


@pytest.mark.parametrize("capability, allowed", [
    (Capability.MANAGE_INVENTORY, True),
    (Capability.RECORD_SALES, True),
    (Capability.RECORD_MOVEMENTS, True),
    (Capability.MANAGE_CATALOG, True),
    (Capability.VIEW_LEDGER, True),
    (Capability.CONFIGURE_PARTNERS, False),
    (Capability.MANAGE_USERS, False),
    (Capability.VIEW_REPORTS, False),
    (Capability.VIEW_OWN_ENTITLEMENT, False),
])
def test_operator_capabilities(capability, allowed):
    assert has_capability(actor(UserRole.OPERATOR), capability) is allowed


def test_investor_only_reads_own_entitlement():
    investor = actor(UserRole.INVESTOR, partner_id="P-A")
    assert [c for c in Capability if has_capability(investor, c)] == [Capability.VIEW_OWN_ENTITLEMENT]


def test_pending_holds_nothing():
    pending = actor(UserRole.PENDING)
    assert not any(has_capability(pending, c) for c in Capability)


def test_inactive_user_holds_nothing():
    director = actor(UserRole.DIRECTOR, active=False)
    with pytest.raises(InsufficientPermissionsException):
        require_capability(director, Capability.VIEW_LEDGER)


def test_require_capability_names_the_missing_capability():
    with pytest.raises(InsufficientPermissionsException) as excinfo:
        require_capability(actor(UserRole.OPERATOR), Capability.CONFIGURE_PARTNERS)
    assert excinfo.value.status_code == 403
    assert "configure_partners" in excinfo.value.detail


def test_partner_access():
    investor = actor(UserRole.INVESTOR, partner_id="P-A")

    assert require_partner_access(investor, "P-A") is investor
    with pytest.raises(InsufficientPermissionsException):
        require_partner_access(investor, "P-B")
    assert require_partner_access(actor(UserRole.OPERATOR), "P-B")
    with pytest.raises(InsufficientPermissionsException):
        require_partner_access(actor(UserRole.INVESTOR), "P-A")
