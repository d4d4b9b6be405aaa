from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.timeclock.timeclock.core.enums import CaptureMethod, PunchKind, WorkStatus
from src.timeclock.timeclock.core.exceptions import ValidationError
from src.timeclock.timeclock.punches.service import NewPunch, PunchService
from tests.fakes import make_user


@pytest.fixture
def service(punches_repo, users_repo, tz):
    return PunchService(punches_repo, users_repo, tz=tz)


def test_first_punch_of_day_is_in(service, fixed_now):
    punch = service.record_punch(1, NewPunch(), now=fixed_now)

    assert punch.kind is PunchKind.IN
    assert punch.method is CaptureMethod.APP
    assert punch.instant == fixed_now
    assert service.current_status(1, now=fixed_now) is WorkStatus.WORKING


def test_punches_alternate(service, fixed_now):
    service.record_punch(1, NewPunch(), now=fixed_now)
    out = service.record_punch(1, NewPunch(), now=fixed_now + timedelta(hours=4))

    assert out.kind is PunchKind.OUT
    assert service.next_kind(1, now=fixed_now + timedelta(hours=5)) is PunchKind.IN
    assert service.current_status(1, now=fixed_now + timedelta(hours=5)) is WorkStatus.OFF_DUTY


def test_explicit_kind_must_follow_alternation(service, fixed_now):
    with pytest.raises(ValidationError):
        service.record_punch(1, NewPunch(kind=PunchKind.OUT), now=fixed_now)


def test_new_local_day_starts_with_in(service, fixed_now, tz):
    service.record_punch(1, NewPunch(), now=fixed_now)

    next_morning = datetime(2024, 3, 2, 8, 0, tzinfo=tz)
    assert service.next_kind(1, now=next_morning) is PunchKind.IN


def test_location_is_validated(service, fixed_now):
    with pytest.raises(ValidationError):
        service.record_punch(1, NewPunch(latitude=-23.5), now=fixed_now)
    with pytest.raises(ValidationError):
        service.record_punch(1, NewPunch(latitude=95.0, longitude=10.0), now=fixed_now)

    punch = service.record_punch(
        1,
        NewPunch(latitude=-23.55, longitude=-46.63, address="  Av. Paulista  ", method=CaptureMethod.QR),
        now=fixed_now,
    )
    assert punch.location.address == "Av. Paulista"
    assert punch.method is CaptureMethod.QR


def test_naive_now_is_rejected(service):
    with pytest.raises(ValidationError):
        service.record_punch(1, NewPunch(), now=datetime(2024, 3, 1, 9, 0))


def test_inactive_or_unknown_user(service, users_repo, fixed_now):
    users_repo.add(make_user(7, is_active=False))

    with pytest.raises(ValidationError):
        service.record_punch(7, NewPunch(), now=fixed_now)
    with pytest.raises(ValidationError):
        service.record_punch(99, NewPunch(), now=fixed_now)


def test_history_newest_first_and_filtered(service, fixed_now):
    for i in range(4):
        service.record_punch(1, NewPunch(), now=fixed_now + timedelta(hours=i))

    history = service.history(1)
    assert [p.instant for p in history] == sorted((p.instant for p in history), reverse=True)
    assert len(history) == 4

    ins = service.history(1, kind=PunchKind.IN, limit=1)
    assert len(ins) == 1
    assert ins[0].instant == fixed_now + timedelta(hours=2)

    with pytest.raises(ValidationError):
        service.history(1, limit=0)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_location_is_rejected(service, punches_repo, fixed_now, value):
    with pytest.raises(ValidationError):
        service.record_punch(1, NewPunch(latitude=value, longitude=value), now=fixed_now)
    with pytest.raises(ValidationError):
        service.record_punch(1, NewPunch(latitude=-23.55, longitude=value), now=fixed_now)

    assert punches_repo.punches == {}


def test_non_text_fields_are_rejected(service, punches_repo, fixed_now):
    with pytest.raises(ValidationError):
        service.record_punch(1, NewPunch(note=5), now=fixed_now)
    with pytest.raises(ValidationError):
        service.record_punch(1, NewPunch(photo_ref=["a"]), now=fixed_now)
    with pytest.raises(ValidationError):
        service.record_punch(1, NewPunch(latitude=-23.55, longitude=-46.63, address=12), now=fixed_now)

    assert punches_repo.punches == {}
