from __future__ import annotations

import pytest

from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.geo_attendance.geo_attendance.parties.service import PartyService


@pytest.fixture
def service(parties_repo):
    return PartyService(parties_repo)


def test_active_list_hides_soft_deleted(service):
    assert [p.name for p in service.list_active()] == ["Acme", "Globex"]
    assert [p.name for p in service.list_all(current_role=Role.ADMIN)] == ["Acme", "Globex", "Old Co"]


def test_only_admin_can_manage_parties(service):
    with pytest.raises(AuthorizationError):
        service.list_all(current_role=Role.USER)
    with pytest.raises(AuthorizationError):
        service.create(current_role=Role.USER, created_by=2, name="Initech")
    with pytest.raises(AuthorizationError):
        service.update(current_role=Role.USER, party_id=1, name="Acme 2")
    with pytest.raises(AuthorizationError):
        service.delete(current_role=Role.USER, party_id=1)


def test_create_trims_and_requires_name(service):
    party = service.create(current_role=Role.ADMIN, created_by=1, name="  Initech ", description=" Software ")

    assert party.name == "Initech"
    assert party.description == "Software"
    assert party.is_active is True
    assert party.created_by == 1

    with pytest.raises(ValidationError, match="Party name is required"):
        service.create(current_role=Role.ADMIN, created_by=1, name="   ")


def test_active_names_are_unique(service):
    with pytest.raises(ValidationError, match="already exists"):
        service.create(current_role=Role.ADMIN, created_by=1, name="acme")
    with pytest.raises(ValidationError, match="already exists"):
        service.update(current_role=Role.ADMIN, party_id=2, name="Acme")

    # an inactive party's name can be reused
    assert service.create(current_role=Role.ADMIN, created_by=1, name="Old Co").is_active


def test_update_keeps_its_own_name_and_defaults_to_active(service):
    party = service.update(current_role=Role.ADMIN, party_id=3, name="Old Co", description="Back again")

    assert party.is_active is True
    assert party.description == "Back again"

    party = service.update(current_role=Role.ADMIN, party_id=1, name="Acme", is_active=False)
    assert party.is_active is False


def test_delete_is_soft(service, parties_repo):
    service.delete(current_role=Role.ADMIN, party_id=1)

    assert parties_repo.get_by_id(1).is_active is False
    assert [p.name for p in service.list_active()] == ["Globex"]
    with pytest.raises(ValidationError, match="Invalid party selected"):
        service.get_active(1)


def test_unknown_party(service):
    with pytest.raises(NotFoundError):
        service.delete(current_role=Role.ADMIN, party_id=42)
    with pytest.raises(NotFoundError):
        service.update(current_role=Role.ADMIN, party_id=42, name="Nope")


def test_get_active_for_check_in(service):
    assert service.get_active("2").name == "Globex"

    with pytest.raises(ValidationError, match="Party selection is required"):
        service.get_active(None)
    with pytest.raises(ValidationError, match="Invalid party selected"):
        service.get_active("abc")
    with pytest.raises(ValidationError, match="Invalid party selected"):
        service.get_active(3)


@pytest.mark.parametrize("flag,expected", [(False, False), ("false", False), ("False", False), (True, True), ("true", True)])
def test_update_reads_is_active_flag(service, flag, expected):
    party = service.update(current_role=Role.ADMIN, party_id=1, name="Acme", is_active=flag)

    assert party.is_active is expected


@pytest.mark.parametrize("flag", ["no", "0", 1, [], {}])
def test_update_rejects_non_boolean_flag(service, parties_repo, flag):
    with pytest.raises(ValidationError, match="isActive must be true or false"):
        service.update(current_role=Role.ADMIN, party_id=1, name="Acme", is_active=flag)

    assert parties_repo.get_by_id(1).is_active is True


@pytest.mark.parametrize("party_id", [True, False])
def test_boolean_party_id_is_not_a_party(service, party_id):
    with pytest.raises(ValidationError, match="Invalid party selected"):
        service.get_active(party_id)
