from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from congest.app.services.timing import MAX_INTERVAL_MS, OneShot, Repeating, to_firing_rule

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_one_shot_is_offset_from_now():
    rule = to_firing_rule(1500, recurring=False, now=NOW)
    assert rule == OneShot(at=NOW + timedelta(milliseconds=1500))


def test_zero_delay_one_shot_fires_now():
    rule = to_firing_rule(0, recurring=False, now=NOW)
    assert isinstance(rule, OneShot)
    assert rule.at == NOW


def test_one_shot_defaults_to_current_utc_time():
    before = datetime.now(timezone.utc)
    rule = to_firing_rule(100, recurring=False)
    after = datetime.now(timezone.utc)
    assert before + timedelta(milliseconds=100) <= rule.at <= after + timedelta(milliseconds=100)
    assert rule.at.tzinfo is not None


def test_recurring_period_in_seconds():
    assert to_firing_rule(5000, recurring=True) == Repeating(period=timedelta(seconds=5))


def test_recurring_truncates_to_whole_seconds():
    assert to_firing_rule(2999, recurring=True) == Repeating(period=timedelta(seconds=2))


@pytest.mark.parametrize("interval", [0, 1, 999])
def test_sub_second_recurring_is_clamped(interval):
    assert to_firing_rule(interval, recurring=True) == Repeating(period=timedelta(seconds=1))


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        to_firing_rule(-1, recurring=False)


@pytest.mark.parametrize("recurring", [False, True])
def test_longest_interval_is_accepted(recurring):
    rule = to_firing_rule(MAX_INTERVAL_MS, recurring=recurring, now=NOW)
    if recurring:
        assert rule == Repeating(period=timedelta(milliseconds=MAX_INTERVAL_MS))
    else:
        assert rule == OneShot(at=NOW + timedelta(milliseconds=MAX_INTERVAL_MS))


@pytest.mark.parametrize("recurring", [False, True])
def test_interval_above_limit_rejected(recurring):
    with pytest.raises(ValueError):
        to_firing_rule(MAX_INTERVAL_MS + 1, recurring=recurring)
