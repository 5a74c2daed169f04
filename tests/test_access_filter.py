import pytest

from fleet_reports.models import UserPlantAccess
from fleet_reports.schemas.common.enums import UserRole
from fleet_reports.services.access import AccessContext, AccessFilter
from fleet_reports.services.common.errors import BadRequestError, ForbiddenError, NotFoundError

from tests.conftest import ADMIN_ID, GRANTED_VIEWER_ID, OWNER_ID, STRANGER_ID


@pytest.fixture
def access(fleet, settings):
    return AccessFilter(fleet, settings)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_admin_without_scope_sees_every_plant(access):
    assert access.resolve_scope(ADMIN_ID, UserRole.ADMIN) == frozenset({1, 2, 3})


def test_admin_named_plant_and_device(access):
    assert access.resolve_scope(ADMIN_ID, "ADMIN", plant_id=3) == frozenset({3})
    assert access.resolve_scope(ADMIN_ID, UserRole.ADMIN, device_id=4) == frozenset({2})


def test_admin_missing_entities_are_not_found(access):
    with pytest.raises(NotFoundError):
        access.resolve_scope(ADMIN_ID, UserRole.ADMIN, plant_id=99)
    with pytest.raises(NotFoundError):
        access.resolve_scope(ADMIN_ID, UserRole.ADMIN, device_id=99)


def test_viewer_without_grant_is_forbidden(access):
    with pytest.raises(ForbiddenError):
        access.resolve_scope(STRANGER_ID, UserRole.VIEWER, plant_id=1)


def test_viewer_with_grant_gets_exactly_that_plant(access):
    assert access.resolve_scope(GRANTED_VIEWER_ID, UserRole.VIEWER, plant_id=2) == frozenset({2})


def test_owner_reaches_plant_through_device(access):
    assert access.resolve_scope(OWNER_ID, UserRole.OPERATOR, device_id=2) == frozenset({1})
    with pytest.raises(ForbiddenError):
        access.resolve_scope(OWNER_ID, UserRole.OPERATOR, device_id=4)


def test_missing_entity_looks_the_same_as_inaccessible_for_non_admin(access):
    with pytest.raises(ForbiddenError) as missing:
        access.resolve_scope(STRANGER_ID, UserRole.VIEWER, plant_id=99)
    with pytest.raises(ForbiddenError) as existing:
        access.resolve_scope(STRANGER_ID, UserRole.VIEWER, plant_id=1)

    assert missing.value.message == existing.value.message

    with pytest.raises(ForbiddenError):
        access.resolve_scope(STRANGER_ID, UserRole.VIEWER, device_id=99)


def test_no_scope_returns_owned_and_granted_plants(access):
    assert access.resolve_scope(OWNER_ID, UserRole.OPERATOR) == frozenset({1})
    assert access.resolve_scope(GRANTED_VIEWER_ID, UserRole.VIEWER) == frozenset({2})
    assert access.resolve_scope(STRANGER_ID, UserRole.VIEWER) == frozenset()


def test_device_outside_named_plant_is_bad_request(access):
    with pytest.raises(BadRequestError):
        access.resolve_scope(ADMIN_ID, UserRole.ADMIN, plant_id=2, device_id=1)


def test_context_caches_accessible_set(access):
    context = access.new_context(GRANTED_VIEWER_ID)

    assert access.resolve_scope(GRANTED_VIEWER_ID, UserRole.VIEWER, context=context) == frozenset({2})
    assert context.get() == frozenset({2})


def test_cached_negative_is_rechecked_against_store(access, fleet):
    context = access.new_context(STRANGER_ID)
    assert access.resolve_scope(STRANGER_ID, UserRole.VIEWER, context=context) == frozenset()

    session = fleet()
    session.add(UserPlantAccess(user_id=STRANGER_ID, plant_id=3))
    session.commit()
    session.close()

    # the cached set is still empty but the grant must be found
    assert access.resolve_scope(STRANGER_ID, UserRole.VIEWER, plant_id=3, context=context) == frozenset({3})
    assert context.get() == frozenset({3})


def test_expired_context_is_reloaded(access, fleet):
    clock = FakeClock()
    context = AccessContext(GRANTED_VIEWER_ID, ttl_seconds=30, clock=clock)
    access.resolve_scope(GRANTED_VIEWER_ID, UserRole.VIEWER, context=context)

    session = fleet()
    session.add(UserPlantAccess(user_id=GRANTED_VIEWER_ID, plant_id=3))
    session.commit()
    session.close()

    clock.now += 10
    assert access.resolve_scope(GRANTED_VIEWER_ID, UserRole.VIEWER, context=context) == frozenset({2})

    clock.now += 31
    assert context.get() is None
    assert access.resolve_scope(GRANTED_VIEWER_ID, UserRole.VIEWER, context=context) == frozenset({2, 3})


def test_context_of_other_requester_is_rejected(access):
    with pytest.raises(ValueError):
        access.resolve_scope(OWNER_ID, UserRole.OPERATOR, context=AccessContext(STRANGER_ID, ttl_seconds=30))


def test_invalidated_context_reloads_immediately(access, fleet):
    context = access.new_context(GRANTED_VIEWER_ID)
    access.resolve_scope(GRANTED_VIEWER_ID, UserRole.VIEWER, context=context)

    session = fleet()
    session.add(UserPlantAccess(user_id=GRANTED_VIEWER_ID, plant_id=1))
    session.commit()
    session.close()

    context.invalidate()
    assert not context.is_fresh
    assert access.resolve_scope(GRANTED_VIEWER_ID, UserRole.VIEWER, context=context) == frozenset({1, 2})


def test_revoked_grant_holds_until_context_expires(access, fleet):
    clock = FakeClock()
    context = AccessContext(GRANTED_VIEWER_ID, ttl_seconds=30, clock=clock)
    access.resolve_scope(GRANTED_VIEWER_ID, UserRole.VIEWER, context=context)

    session = fleet()
    session.query(UserPlantAccess).filter_by(user_id=GRANTED_VIEWER_ID, plant_id=2).delete()
    session.commit()
    session.close()

    clock.now += 10
    assert access.resolve_scope(GRANTED_VIEWER_ID, UserRole.VIEWER, plant_id=2, context=context) == frozenset({2})

    clock.now += 31
    with pytest.raises(ForbiddenError):
        access.resolve_scope(GRANTED_VIEWER_ID, UserRole.VIEWER, plant_id=2, context=context)
