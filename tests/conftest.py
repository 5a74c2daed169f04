"""
Shared fixtures: in-memory SQLite database seeded with a small fleet.

Fleet layout (reporting window 2024-01-01 .. 2024-01-03):

    users    1 admin, 2 operator (owns plant 1), 3 viewer (granted plant 2),
             4 viewer (no plants)
    plants   1 Solar Alpha, 2 Wind Beta, 3 Hydro Gamma (no devices)
    devices  1 inverter ONLINE, 2 inverter OFFLINE, 3 meter ONLINE (plant 1)
             4 turbine ERROR (plant 2)
"""

from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from fleet_reports.config.settings import Settings
from fleet_reports.db.session import get_session_factory
from fleet_reports.models import (
    Alarm,
    AuditLog,
    Base,
    Device,
    MetricSample,
    Plant,
    Tag,
    User,
    UserPlantAccess,
)
from fleet_reports.schemas.common.enums import (
    AlarmSeverity,
    AlarmStatus,
    AuditAction,
    DeviceStatus,
    UserRole,
)

START = date(2024, 1, 1)
END = date(2024, 1, 3)
NOW = datetime(2024, 6, 1, 12, 0, 0)

ADMIN_ID = 1
OWNER_ID = 2
GRANTED_VIEWER_ID = 3
STRANGER_ID = 4


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        ENERGY_TAG_NAMES=["Energy", "TotalEnergy"],
        DEFAULT_ENERGY_UNIT="kWh",
        ACCESS_CACHE_TTL_SECONDS=30,
        EXPORT_MAX_WORKERS=2,
        EXPORT_TIMEOUT_SECONDS=30,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return get_session_factory(engine)


def _ts(day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2024, 1, day, hour, minute, second)


@pytest.fixture
def fleet(session_factory):
    """Users, plants, devices, tags, samples and alarms."""
    session = session_factory()

    session.add_all([
        User(id=ADMIN_ID, name="Ada Admin", email="ada@example.com", role=UserRole.ADMIN),
        User(id=OWNER_ID, name="Otto Owner", email="otto@example.com", role=UserRole.OPERATOR),
        User(id=GRANTED_VIEWER_ID, name="Vera Viewer", email="vera@example.com", role=UserRole.VIEWER),
        User(id=STRANGER_ID, name="Sam Stranger", email="sam@example.com", role=UserRole.VIEWER),
    ])
    session.flush()

    session.add_all([
        Plant(id=1, name="Solar Alpha", capacity=500.0, status="ACTIVE",
              location={"city": "Seville"}, installation_date=date(2020, 5, 1), owner_id=OWNER_ID),
        Plant(id=2, name="Wind Beta", capacity=1200.0, status="ACTIVE"),
        Plant(id=3, name="Hydro Gamma", capacity=800.0, status="PLANNED"),
    ])
    session.flush()

    session.add(UserPlantAccess(user_id=GRANTED_VIEWER_ID, plant_id=2))
    session.add_all([
        Device(id=1, name="INV-01", plant_id=1, device_type="inverter",
               status=DeviceStatus.ONLINE, serial_number="SN-001"),
        Device(id=2, name="INV-02", plant_id=1, device_type="inverter", status=DeviceStatus.OFFLINE),
        Device(id=3, name="MTR-01", plant_id=1, device_type="meter", status=DeviceStatus.ONLINE),
        Device(id=4, name="TRB-01", plant_id=2, device_type="turbine", status=DeviceStatus.ERROR),
    ])
    session.add_all([
        Tag(id=1, name="Energy", unit="kWh"),
        Tag(id=2, name="Power", unit="kW"),
    ])
    session.flush()

    def sample(device_id, plant_id, tag_id, ts, value):
        return MetricSample(device_id=device_id, plant_id=plant_id, tag_id=tag_id, timestamp=ts, value=value)

    session.add_all([
        # outside the window on both sides
        sample(1, 1, 1, datetime(2023, 12, 31, 23, 59, 59), 100.0),
        sample(1, 1, 1, datetime(2024, 1, 4, 0, 0, 0), 100.0),
        # plant 1 energy: day 1 = 20.0 (duplicate kept), day 2 = 2.5, day 3 = 7.5
        sample(1, 1, 1, _ts(1, 0, 0), 10.0),
        sample(1, 1, 1, _ts(1, 12, 0), 5.0),
        sample(1, 1, 1, _ts(1, 12, 0), 5.0),
        sample(2, 1, 1, _ts(2, 6, 0), 2.5),
        sample(1, 1, 1, _ts(3, 23, 59, 59), 7.5),
        # plant 1 power, not an energy tag
        sample(1, 1, 2, _ts(1, 10, 0), 3.0),
        sample(1, 1, 2, _ts(2, 10, 0), 4.0),
        # plant 2 energy
        sample(4, 2, 1, _ts(2, 8, 0), 20.0),
    ])

    session.add_all([
        Alarm(id=1, plant_id=1, device_id=1, severity=AlarmSeverity.CRITICAL, status=AlarmStatus.RESOLVED,
              message="Inverter fault", triggered_at=_ts(1, 8), resolved_at=_ts(1, 9)),
        Alarm(id=2, plant_id=1, device_id=1, severity=AlarmSeverity.HIGH, status=AlarmStatus.RESOLVED,
              message="Grid voltage high", triggered_at=_ts(2, 10), resolved_at=_ts(2, 10, 30)),
        Alarm(id=3, plant_id=1, device_id=2, severity=AlarmSeverity.LOW, status=AlarmStatus.ACTIVE,
              message="Communication lost", triggered_at=_ts(2, 12)),
        Alarm(id=4, plant_id=1, device_id=1, severity=AlarmSeverity.MEDIUM, status=AlarmStatus.ACKNOWLEDGED,
              message="Grid voltage high", triggered_at=_ts(3, 9), acknowledged_at=_ts(3, 9, 10)),
        Alarm(id=5, plant_id=1, device_id=None, severity=AlarmSeverity.INFO, status=AlarmStatus.ACTIVE,
              message="Daily summary", triggered_at=_ts(5, 0)),
        Alarm(id=6, plant_id=2, device_id=4, severity=AlarmSeverity.CRITICAL, status=AlarmStatus.ACTIVE,
              message="Turbine overspeed", triggered_at=_ts(2, 14)),
    ])

    session.commit()
    session.close()
    return session_factory


@pytest.fixture
def audit_entries(fleet):
    """
    Audit trail relative to NOW: users 1 and 2 with five entries each,
    user 3 with three, and one entry of user 4 older than 90 days.
    """
    session = fleet()
    entries = []
    minute = 0
    for user_id, count in ((2, 5), (1, 5), (3, 3)):
        for _ in range(count):
            minute += 1
            entries.append(AuditLog(
                user_id=user_id,
                action=AuditAction.UPDATE if minute % 2 else AuditAction.CREATE,
                resource="plant" if user_id != 3 else "device",
                resource_id=1,
                changes={"before": {"capacity": minute}, "after": {"capacity": minute + 1}},
                ip_address="10.0.0.%d" % user_id,
                user_agent="pytest",
                timestamp=NOW - timedelta(days=1, minutes=minute),
            ))
    entries.append(AuditLog(
        user_id=STRANGER_ID,
        action=AuditAction.DELETE,
        resource="tag",
        resource_id=9,
        changes={"before": {"name": "Old"}, "after": None},
        timestamp=NOW - timedelta(days=100),
    ))
    session.add_all(entries)
    session.commit()
    session.close()
    return fleet
