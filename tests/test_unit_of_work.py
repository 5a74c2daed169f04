import pytest

from fleet_reports.models import Tag, UserPlantAccess
from fleet_reports.repositories import PlantRepository
from fleet_reports.services.common import TransactionError, UnitOfWork

from tests.conftest import GRANTED_VIEWER_ID


def tag_names(session_factory):
    session = session_factory()
    try:
        return sorted(tag.name for tag in session.query(Tag).all())
    finally:
        session.close()


def test_commits_on_clean_exit(fleet):
    with UnitOfWork(fleet) as uow:
        uow.session.add(Tag(name="Irradiance", unit="W/m2"))

    assert "Irradiance" in tag_names(fleet)


def test_rolls_back_on_error(fleet):
    with pytest.raises(RuntimeError):
        with UnitOfWork(fleet) as uow:
            uow.session.add(Tag(name="Irradiance", unit="W/m2"))
            raise RuntimeError("abort")

    assert tag_names(fleet) == ["Energy", "Power"]


def test_read_only_unit_does_not_commit(fleet):
    with UnitOfWork(fleet, auto_commit=False) as uow:
        uow.session.add(Tag(name="Irradiance", unit="W/m2"))

    assert tag_names(fleet) == ["Energy", "Power"]


def test_commit_failure_is_transaction_error(fleet):
    with pytest.raises(TransactionError) as excinfo:
        with UnitOfWork(fleet) as uow:
            uow.session.add(UserPlantAccess(user_id=GRANTED_VIEWER_ID, plant_id=2))

    assert excinfo.value.details["error_type"] == "IntegrityError"


def test_repositories_are_cached_per_unit(fleet):
    with UnitOfWork(fleet, auto_commit=False) as uow:
        assert uow.get_repo(PlantRepository) is uow.get_repo(PlantRepository)

    with pytest.raises(RuntimeError):
        uow.get_repo(PlantRepository)
