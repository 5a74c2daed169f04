"""
Plant and device lookups used for access resolution and report
headers.
"""

from typing import Dict, FrozenSet, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from fleet_reports.models import Device, Plant, UserPlantAccess
from fleet_reports.repositories.base import BaseRepository


class PlantRepository(BaseRepository[Plant]):
    """Repository for plants and their access grants."""

    def __init__(self, db: Session):
        super().__init__(Plant, db)

    def all_ids(self) -> FrozenSet[int]:
        return frozenset(row[0] for row in self.db.query(Plant.id).all())

    def ids_owned_by(self, user_id: int) -> FrozenSet[int]:
        rows = self.db.query(Plant.id).filter(Plant.owner_id == user_id).all()
        return frozenset(row[0] for row in rows)

    def ids_granted_to(self, user_id: int) -> FrozenSet[int]:
        rows = (
            self.db.query(UserPlantAccess.plant_id)
            .filter(UserPlantAccess.user_id == user_id)
            .all()
        )
        return frozenset(row[0] for row in rows)

    def accessible_ids(self, user_id: int) -> FrozenSet[int]:
        """Plants owned by or granted to the user."""
        return self.ids_owned_by(user_id) | self.ids_granted_to(user_id)

    def is_accessible(self, user_id: int, plant_id: int) -> bool:
        """Single-plant ownership or grant check straight against the store."""
        owned = (
            self.db.query(Plant.id)
            .filter(Plant.id == plant_id, Plant.owner_id == user_id)
            .first()
        )
        if owned is not None:
            return True
        granted = (
            self.db.query(func.count(UserPlantAccess.id))
            .filter(UserPlantAccess.user_id == user_id, UserPlantAccess.plant_id == plant_id)
            .scalar()
        )
        return bool(granted)


class DeviceRepository(BaseRepository[Device]):
    """Repository for devices."""

    def __init__(self, db: Session):
        super().__init__(Device, db)

    def plant_id_of(self, device_id: int) -> Optional[int]:
        row = self.db.query(Device.plant_id).filter(Device.id == device_id).first()
        return row[0] if row else None

    def find_by_plants(self, plant_ids: Sequence[int]) -> List[Device]:
        if not plant_ids:
            return []
        return (
            self.query()
            .filter(Device.plant_id.in_(list(plant_ids)))
            .order_by(Device.id)
            .all()
        )

    def types_by_id(self, device_ids: Sequence[int]) -> Dict[int, str]:
        if not device_ids:
            return {}
        rows = (
            self.db.query(Device.id, Device.device_type)
            .filter(Device.id.in_(list(device_ids)))
            .all()
        )
        return {device_id: device_type for device_id, device_type in rows}
