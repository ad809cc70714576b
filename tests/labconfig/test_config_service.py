import threading
from datetime import datetime

import pytest

from lab_attendance.core.exceptions import ValidationError
from lab_attendance.labconfig.model import LabConfiguration
from lab_attendance.labconfig.service import LabConfigService
from lab_attendance.labconfig.store import LabConfigStore

NOW = datetime(2026, 2, 4, 12, 0, 0)


@pytest.fixture
def service():
    store = LabConfigStore(None, defaults=LabConfiguration(inicial_hour="08:30", final_hour="17:30", max_capacity=30))
    return LabConfigService(store)


def test_partial_update_keeps_other_fields(service):
    updated = service.update({"maxCapacity": 25}, updated_by="admin@example.edu", now=NOW)

    assert updated.max_capacity == 25
    assert updated.inicial_hour == "08:30"
    assert updated.final_hour == "17:30"
    assert updated.last_updated == "2026-02-04T12:00:00"
    assert updated.updated_by == "admin@example.edu"
    assert service.current() == updated


def test_payload_updated_by_wins_over_token_subject(service):
    updated = service.update({"maxCapacity": 20, "updatedBy": "kiosk"}, updated_by="admin@example.edu", now=NOW)
    assert updated.updated_by == "kiosk"


def test_all_errors_are_reported_together(service):
    with pytest.raises(ValidationError) as exc:
        service.update({"inicialHour": "25:00", "finalHour": "5pm", "maxCapacity": 0}, now=NOW)

    assert exc.value.errors == [
        "inicialHour must use the HH:MM format (e.g. 08:30)",
        "finalHour must use the HH:MM format (e.g. 17:30)",
        "maxCapacity must be a whole number greater than or equal to 1",
    ]
    assert service.current().max_capacity == 30


@pytest.mark.parametrize("capacity", ["ten", 2.5, True, -3])
def test_capacity_must_be_a_positive_whole_number(service, capacity):
    with pytest.raises(ValidationError):
        service.update({"maxCapacity": capacity}, now=NOW)


def test_opening_must_precede_closing_after_merge(service):
    with pytest.raises(ValidationError) as exc:
        service.update({"inicialHour": "18:00"}, now=NOW)

    assert exc.value.errors == ["The opening hour must be earlier than the closing hour"]

    with pytest.raises(ValidationError):
        service.update({"inicialHour": "10:00", "finalHour": "10:00"}, now=NOW)


def test_single_digit_hour_is_accepted(service):
    updated = service.update({"inicialHour": "7:45"}, now=NOW)
    assert updated.inicial_hour == "7:45"


def test_non_object_payload_is_rejected(service):
    with pytest.raises(ValidationError):
        service.update(["inicialHour", "09:00"], now=NOW)


class PausingStore(LabConfigStore):
    """Holds the first write until ``resume`` is set."""

    def __init__(self, *args, **kwargs):
        self.writing = threading.Event()
        self.resume = threading.Event()
        self._held = False
        super().__init__(*args, **kwargs)

    def _write(self, config):
        if not self._held:
            self._held = True
            self.writing.set()
            self.resume.wait(5)
        super()._write(config)


def test_interleaved_partial_updates_cannot_invert_the_window():
    store = PausingStore(None, defaults=LabConfiguration(inicial_hour="08:30", final_hour="17:30", max_capacity=30))
    service = LabConfigService(store)
    outcome = {}

    def run(name, payload):
        try:
            outcome[name] = service.update(payload, now=NOW)
        except ValidationError as e:
            outcome[name] = e

    first = threading.Thread(target=run, args=("open_later", {"inicialHour": "16:00"}))
    first.start()
    assert store.writing.wait(5)

    second = threading.Thread(target=run, args=("close_earlier", {"finalHour": "10:00"}))
    second.start()
    second.join(0.2)
    assert second.is_alive()

    store.resume.set()
    first.join(5)
    second.join(5)

    assert outcome["open_later"].inicial_hour == "16:00"
    assert isinstance(outcome["close_earlier"], ValidationError)
    assert outcome["close_earlier"].errors == ["The opening hour must be earlier than the closing hour"]
    assert (store.get().inicial_hour, store.get().final_hour) == ("16:00", "17:30")
