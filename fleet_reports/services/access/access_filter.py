"""
Plant-level access resolution.

Turns a requester and an optional plant/device scope into the set of plant
ids the requester may see. Admins bypass ownership checks; everyone else is
limited to plants they own or were granted.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, FrozenSet, Optional, Union

from sqlalchemy.orm import Session

from fleet_reports.config.settings import Settings, get_settings
from fleet_reports.repositories import DeviceRepository, PlantRepository
from fleet_reports.schemas.common.enums import UserRole
from fleet_reports.services.common.errors import BadRequestError, ForbiddenError, NotFoundError
from fleet_reports.services.common.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AccessContext:
    """
    Per-request cache of one requester's accessible plant ids.

    The caller creates it and passes it to every ``resolve_scope`` call of
    the same request. Entries older than ``ttl_seconds`` are discarded.
    A plant missing from the cached set is never denied from cache alone.
    A plant present in a fresh cached set is granted without asking the
    store again, so a grant revoked within the TTL keeps working until the
    entry expires.
    """

    def __init__(
        self,
        requester_id: int,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.requester_id = requester_id
        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None else get_settings().ACCESS_CACHE_TTL_SECONDS
        )
        self._clock = clock
        self._plant_ids: Optional[FrozenSet[int]] = None
        self._loaded_at: Optional[float] = None

    @property
    def is_fresh(self) -> bool:
        if self._plant_ids is None or self._loaded_at is None:
            return False
        return (self._clock() - self._loaded_at) < self.ttl_seconds

    def get(self) -> Optional[FrozenSet[int]]:
        """Cached ids, or None when empty or expired."""
        return self._plant_ids if self.is_fresh else None

    def store(self, plant_ids: FrozenSet[int]) -> None:
        self._plant_ids = frozenset(plant_ids)
        self._loaded_at = self._clock()

    def invalidate(self) -> None:
        self._plant_ids = None
        self._loaded_at = None


class AccessFilter:
    """
    Resolves the plants a requester may include in a report.

    Side-effect free apart from filling the optional AccessContext.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        settings: Optional[Settings] = None,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings or get_settings()

    def new_context(self, requester_id: int) -> AccessContext:
        return AccessContext(requester_id, ttl_seconds=self._settings.ACCESS_CACHE_TTL_SECONDS)

    def resolve_scope(
        self,
        requester_id: int,
        requester_role: Union[UserRole, str],
        plant_id: Optional[int] = None,
        device_id: Optional[int] = None,
        context: Optional[AccessContext] = None,
    ) -> FrozenSet[int]:
        """
        Resolve accessible plant ids for a scope.

        Args:
            requester_id: Requesting user id
            requester_role: Requesting user role
            plant_id: Optional plant the report is limited to
            device_id: Optional device the report is limited to
            context: Optional per-request grant cache

        Returns:
            Exactly the scoped plant when one is named, else every
            accessible plant (possibly empty)

        Raises:
            NotFoundError: Admin named a plant or device that does not exist
            ForbiddenError: Non-admin named a plant or device outside its set
            BadRequestError: Named device does not belong to the named plant
        """
        role = UserRole(requester_role)
        if context is not None and context.requester_id != requester_id:
            raise ValueError("AccessContext belongs to a different requester")

        with UnitOfWork(self._session_factory, auto_commit=False) as uow:
            plants = uow.get_repo(PlantRepository)
            devices = uow.get_repo(DeviceRepository)

            if role == UserRole.ADMIN:
                return self._resolve_admin(plants, devices, plant_id, device_id)
            return self._resolve_member(plants, devices, requester_id, plant_id, device_id, context)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _resolve_admin(
        self,
        plants: PlantRepository,
        devices: DeviceRepository,
        plant_id: Optional[int],
        device_id: Optional[int],
    ) -> FrozenSet[int]:
        if device_id is not None:
            device_plant_id = devices.plant_id_of(device_id)
            if device_plant_id is None:
                raise NotFoundError("Device", device_id)
            self._check_device_in_plant(device_plant_id, plant_id)
            return frozenset({device_plant_id})

        if plant_id is not None:
            if plants.find_by_id(plant_id) is None:
                raise NotFoundError("Plant", plant_id)
            return frozenset({plant_id})

        return plants.all_ids()

    def _resolve_member(
        self,
        plants: PlantRepository,
        devices: DeviceRepository,
        requester_id: int,
        plant_id: Optional[int],
        device_id: Optional[int],
        context: Optional[AccessContext],
    ) -> FrozenSet[int]:
        target_plant_id = plant_id
        if device_id is not None:
            device_plant_id = devices.plant_id_of(device_id)
            if device_plant_id is None:
                logger.info(
                    "Access denied to unknown device",
                    extra={"requester_id": requester_id, "device_id": device_id},
                )
                raise ForbiddenError("Access to this device is denied")
            target_plant_id = device_plant_id

        if target_plant_id is None:
            cached = context.get() if context is not None else None
            if cached is not None:
                return cached
            accessible = plants.accessible_ids(requester_id)
            if context is not None:
                context.store(accessible)
            return accessible

        cached = context.get() if context is not None else None
        if cached is not None and target_plant_id in cached:
            self._check_device_in_plant(target_plant_id, plant_id)
            return frozenset({target_plant_id})

        # Cache miss or cached negative: ask the store
        if not plants.is_accessible(requester_id, target_plant_id):
            logger.info(
                "Access denied to plant",
                extra={"requester_id": requester_id, "plant_id": target_plant_id},
            )
            raise ForbiddenError(
                "Access to this device is denied" if device_id is not None
                else "Access to this plant is denied"
            )

        if context is not None:
            context.store(plants.accessible_ids(requester_id))
        self._check_device_in_plant(target_plant_id, plant_id)
        return frozenset({target_plant_id})

    @staticmethod
    def _check_device_in_plant(device_plant_id: int, plant_id: Optional[int]) -> None:
        if plant_id is not None and device_plant_id != plant_id:
            raise BadRequestError(
                "Device does not belong to the requested plant",
                field="device_id",
                details={"plant_id": plant_id},
            )
