"""CompanionAdminService tests"""

from unittest.mock import patch

import pytest

from src.core.companion.models import Actor, CompanionKind, Role
from src.core.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StorageTimeoutError,
    ValidationError,
)
from src.core.event_types import EventTypes
from src.services.companion_admin_service import CompanionAdminService

OWNER = Actor("u1")
STRANGER = Actor("u2")
ADMIN = Actor("admin1", Role.ADMIN)


@pytest.fixture()
def service(repo, bus) -> CompanionAdminService:
    return CompanionAdminService(repo, bus)


@pytest.fixture()
def companion(repo):
    return repo.create("u1", "Nemo", "fish")


# === reads ===


class TestReads:
    def test_get_for_owner(self, service, companion) -> None:
        assert service.get_for_owner("u1") == companion

    def test_get_for_owner_missing(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.get_for_owner("u1")

    def test_list_requires_admin(self, service, companion) -> None:
        with pytest.raises(PermissionDeniedError):
            service.list_companions(OWNER)

    def test_list_for_admin(self, service, repo, companion) -> None:
        repo.create("u2", "Kermit", "frog")
        assert len(service.list_companions(ADMIN)) == 2


# === rename ===


class TestRename:
    def test_owner_renames(self, service, companion) -> None:
        updated = service.rename(OWNER, companion.id, name="Dory")
        assert updated.name == "Dory"

    def test_owner_changes_kind(self, service, companion) -> None:
        updated = service.rename(OWNER, companion.id, kind="frog")
        assert updated.kind is CompanionKind.FROG

    def test_admin_renames(self, service, companion) -> None:
        assert service.rename(ADMIN, companion.id, name="Bubbles").name == "Bubbles"

    def test_stranger_denied(self, service, repo, companion) -> None:
        with pytest.raises(PermissionDeniedError):
            service.rename(STRANGER, companion.id, name="Mine now")
        assert repo.get(companion.id).name == "Nemo"

    def test_empty_name_rejected(self, service, companion) -> None:
        with pytest.raises(ValidationError):
            service.rename(OWNER, companion.id, name="  ")

    def test_nothing_to_update(self, service, companion) -> None:
        with pytest.raises(ValidationError):
            service.rename(OWNER, companion.id)

    def test_missing(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.rename(OWNER, "missing", name="Dory")

    def test_updated_event(self, service, companion, recorded_events) -> None:
        service.rename(OWNER, companion.id, name="Dory")
        assert recorded_events[0].event_type == EventTypes.COMPANION_UPDATED
        assert recorded_events[0].data["fields"] == ["name"]
        assert recorded_events[0].data["actor_id"] == "u1"


# === stats ===


class TestEditStats:
    def test_admin_edits_stats(self, service, companion) -> None:
        updated = service.edit_stats(
            ADMIN, companion.id, health=70, level=3, experience=250
        )
        assert (updated.health, updated.level, updated.experience) == (70, 3, 250)

    def test_owner_cannot_edit_stats(self, service, companion) -> None:
        with pytest.raises(PermissionDeniedError):
            service.edit_stats(OWNER, companion.id, health=100)

    @pytest.mark.parametrize(
        "fields",
        [{"health": 101}, {"health": -1}, {"level": 0}, {"experience": 500}],
    )
    def test_out_of_range_rejected(self, service, repo, companion, fields) -> None:
        with pytest.raises(ValidationError):
            service.edit_stats(ADMIN, companion.id, **fields)
        assert repo.get(companion.id) == companion

    def test_stale_expected_version(self, service, repo, companion) -> None:
        repo.update(companion.id, {"health": 10})
        with pytest.raises(ConflictError):
            service.edit_stats(ADMIN, companion.id, health=50, expected_version=1)

    def test_nothing_to_update(self, service, companion) -> None:
        with pytest.raises(ValidationError):
            service.edit_stats(ADMIN, companion.id)


# === combined edit ===


class TestEdit:
    def test_profile_and_stats_in_one_write(self, service, companion) -> None:
        updated = service.edit(
            ADMIN, companion.id, name="Kermit", kind="frog", health=30
        )
        assert (updated.name, updated.kind, updated.health) == (
            "Kermit",
            CompanionKind.FROG,
            30,
        )
        assert updated.version == companion.version + 1

    def test_single_updated_event(self, service, companion, recorded_events) -> None:
        service.edit(ADMIN, companion.id, name="Kermit", level=2)
        assert len(recorded_events) == 1
        assert recorded_events[0].data["fields"] == ["level", "name"]

    @pytest.mark.parametrize(
        "fields",
        [
            {"health": 50, "name": "ab"},
            {"name": "Kermit", "experience": 500},
            {"kind": "shark", "level": 3},
        ],
    )
    def test_rejected_edit_writes_nothing(
        self, service, repo, companion, recorded_events, fields
    ) -> None:
        with pytest.raises(ValidationError):
            service.edit(ADMIN, companion.id, **fields)
        assert repo.get(companion.id) == companion
        assert recorded_events == []

    def test_owner_cannot_mix_in_stats(self, service, repo, companion) -> None:
        with pytest.raises(PermissionDeniedError):
            service.edit(OWNER, companion.id, name="Dory", health=100)
        assert repo.get(companion.id) == companion

    def test_stale_version_on_profile_edit(self, service, repo, companion) -> None:
        repo.update(companion.id, {"health": 10})
        with pytest.raises(ConflictError):
            service.edit(ADMIN, companion.id, name="Kermit", expected_version=1)
        assert repo.get(companion.id).name == "Nemo"

    def test_rename_honours_expected_version(self, service, repo, companion) -> None:
        repo.update(companion.id, {"health": 10})
        with pytest.raises(ConflictError):
            service.rename(OWNER, companion.id, name="Dory", expected_version=1)

    def test_timeout_covers_initial_read(self, service, repo, companion) -> None:
        clock = {"now": 100.0}
        real_get = repo.get

        def slow_get(companion_id):
            clock["now"] += 10.0
            return real_get(companion_id)

        with patch("src.core.deadline.time.monotonic", side_effect=lambda: clock["now"]):
            with patch.object(repo, "get", side_effect=slow_get):
                with pytest.raises(StorageTimeoutError):
                    service.edit(ADMIN, companion.id, health=50, timeout=1.0)
        assert repo.get(companion.id) == companion


# === health adjustment ===


class TestAdjustHealth:
    def test_add(self, service, companion) -> None:
        assert service.adjust_health(ADMIN, companion.id, 10).health == 10

    def test_clamped_low(self, service, companion) -> None:
        assert service.adjust_health(ADMIN, companion.id, -10).health == 0

    def test_clamped_high(self, service, repo, companion) -> None:
        repo.update(companion.id, {"health": 95})
        assert service.adjust_health(ADMIN, companion.id, 10).health == 100

    def test_admin_only(self, service, companion) -> None:
        with pytest.raises(PermissionDeniedError):
            service.adjust_health(OWNER, companion.id, 10)


# === delete ===


class TestDelete:
    def test_admin_deletes(self, service, repo, companion, recorded_events) -> None:
        service.delete(ADMIN, companion.id)
        assert repo.find_by_owner("u1") is None
        assert recorded_events[0].event_type == EventTypes.COMPANION_DELETED

    def test_owner_cannot_delete(self, service, repo, companion) -> None:
        with pytest.raises(PermissionDeniedError):
            service.delete(OWNER, companion.id)
        assert repo.get(companion.id) is not None

    def test_delete_missing(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.delete(ADMIN, "missing")
