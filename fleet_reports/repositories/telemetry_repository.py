"""
Processed metric sample queries.
"""

from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, contains_eager

from fleet_reports.models import MetricSample, Tag
from fleet_reports.repositories.base import BaseRepository


class TelemetryRepository(BaseRepository[MetricSample]):
    """Repository for ``processed_data`` rows."""

    def __init__(self, db: Session):
        super().__init__(MetricSample, db)

    def find_samples(
        self,
        lower: datetime,
        upper: datetime,
        plant_ids: Optional[Sequence[int]] = None,
        device_id: Optional[int] = None,
        tag_names: Optional[Sequence[str]] = None,
        tag_id: Optional[int] = None,
    ) -> List[MetricSample]:
        """
        Samples with ``lower <= timestamp < upper``, oldest first.

        Args:
            lower: Inclusive lower bound (naive UTC)
            upper: Exclusive upper bound (naive UTC)
            plant_ids: Restrict to these plants (empty means no rows)
            device_id: Restrict to one device
            tag_names: Restrict to tags with these names
            tag_id: Restrict to one tag

        Returns:
            Samples ordered by timestamp then id
        """
        query = (
            self.db.query(MetricSample)
            .join(Tag, MetricSample.tag_id == Tag.id)
            .options(contains_eager(MetricSample.tag))
            .filter(MetricSample.timestamp >= lower, MetricSample.timestamp < upper)
        )

        if plant_ids is not None:
            if not plant_ids:
                return []
            query = query.filter(MetricSample.plant_id.in_(list(plant_ids)))
        if device_id is not None:
            query = query.filter(MetricSample.device_id == device_id)
        if tag_names is not None:
            query = query.filter(Tag.name.in_(list(tag_names)))
        if tag_id is not None:
            query = query.filter(MetricSample.tag_id == tag_id)

        return query.order_by(MetricSample.timestamp, MetricSample.id).all()

    def tags_for_device(self, device_id: int, lower: datetime, upper: datetime) -> List[Tag]:
        """Tags that have at least one sample for the device in the window."""
        tag_ids = (
            select(MetricSample.tag_id)
            .where(
                MetricSample.device_id == device_id,
                MetricSample.timestamp >= lower,
                MetricSample.timestamp < upper,
            )
            .distinct()
        )
        return self.db.query(Tag).filter(Tag.id.in_(tag_ids)).order_by(Tag.name, Tag.id).all()
