"""
Alarm event queries.
"""

from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from fleet_reports.models import Alarm
from fleet_reports.repositories.base import BaseRepository
from fleet_reports.schemas.common.enums import AlarmSeverity, AlarmStatus


class AlarmRepository(BaseRepository[Alarm]):
    """Repository for alarm events."""

    def __init__(self, db: Session):
        super().__init__(Alarm, db)

    def find_alarms(
        self,
        lower: datetime,
        upper: datetime,
        plant_ids: Optional[Sequence[int]] = None,
        device_id: Optional[int] = None,
        severity: Optional[AlarmSeverity] = None,
        status: Optional[AlarmStatus] = None,
        newest_first: bool = False,
        limit: Optional[int] = None,
    ) -> List[Alarm]:
        """
        Alarms triggered in ``[lower, upper)``.

        Args:
            lower: Inclusive lower bound on ``triggered_at``
            upper: Exclusive upper bound on ``triggered_at``
            plant_ids: Restrict to these plants (empty means no rows)
            device_id: Restrict to one device
            severity: Exact severity filter
            status: Exact status filter
            newest_first: Order by ``triggered_at`` descending
            limit: Maximum rows

        Returns:
            Matching alarms
        """
        query = self.query().filter(Alarm.triggered_at >= lower, Alarm.triggered_at < upper)

        if plant_ids is not None:
            if not plant_ids:
                return []
            query = query.filter(Alarm.plant_id.in_(list(plant_ids)))
        if device_id is not None:
            query = query.filter(Alarm.device_id == device_id)
        if severity is not None:
            query = query.filter(Alarm.severity == severity)
        if status is not None:
            query = query.filter(Alarm.status == status)

        if newest_first:
            query = query.order_by(Alarm.triggered_at.desc(), Alarm.id.desc())
        else:
            query = query.order_by(Alarm.triggered_at, Alarm.id)

        if limit is not None:
            query = query.limit(limit)
        return query.all()
