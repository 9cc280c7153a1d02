"""Tests for domain models."""

import time as time_module
from datetime import UTC, date, datetime, time, timedelta

import pytest

from commute_coffee.domain.models import (
    CacheEntry,
    Deadline,
    DecisionThresholds,
    DepartureSet,
    FetchError,
    FetchErrorKind,
    JourneyBudget,
    JourneyConfiguration,
    OpeningHours,
    OperatingPolicy,
    ServiceAlert,
    SourceTier,
    StopConfiguration,
    TransportMode,
    UpcomingDeparture,
    minutes_until,
)


class TestDepartureSet:
    """Tests for DepartureSet."""

    def test_when_built_from_unordered_departures_then_sorted_and_truncated(
        self, make_departure
    ) -> None:
        """Given unordered departures, when building a set, then it is sorted and truncated."""
        departures = [make_departure(m) for m in (12, 3, 30, 7)]

        departure_set = DepartureSet.from_departures(
            TransportMode.TRAIN, departures, SourceTier.LIVE_AUTHENTICATED, "ptv", max_departures=3
        )

        times = [d.departure_time for d in departure_set.departures]
        assert times == sorted(times)
        assert len(departure_set) == 3
        assert departure_set.departures[0] is departures[1]

    def test_when_empty_then_reports_empty(self) -> None:
        """Given no departures, when building an empty set, then is_empty is True."""
        departure_set = DepartureSet.empty(TransportMode.TRAM, SourceTier.REALTIME_FEED, "gtfs")

        assert departure_set.is_empty
        assert len(departure_set) == 0


class TestMinutesUntil:
    """Tests for minutes remaining rounding."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, 0),
            (29, 0),
            (30, 1),
            (89, 1),
            (90, 2),
            (600, 10),
            (-29, 0),
            (-31, -1),
            (-150, -2),
        ],
    )
    def test_when_computing_minutes_then_rounds_half_up(
        self, now: datetime, seconds: int, expected: int
    ) -> None:
        """Given an offset in seconds, when computing minutes, then rounds half up."""
        assert minutes_until(now + timedelta(seconds=seconds), now) == expected

    def test_when_viewing_departure_at_instant_then_minutes_are_derived(
        self, now: datetime, make_departure
    ) -> None:
        """Given a departure, when viewed at a later instant, then minutes shrink."""
        departure = make_departure(10)

        upcoming = UpcomingDeparture.at(departure, now + timedelta(minutes=4))

        assert upcoming.minutes_remaining == 6
        assert upcoming.departure is departure


class TestDeadline:
    """Tests for Deadline."""

    def test_when_created_then_remaining_is_bounded(self) -> None:
        """Given a deadline in 5 seconds, when checked, then remaining is at most 5."""
        deadline = Deadline.after(5)

        assert 0 < deadline.remaining() <= 5
        assert not deadline.expired

    def test_when_in_the_past_then_expired_with_zero_remaining(self) -> None:
        """Given a deadline in the past, when checked, then it is expired."""
        deadline = Deadline(expires_at=time_module.monotonic() - 1)

        assert deadline.expired
        assert deadline.remaining() == 0.0

    def test_when_comparing_then_earliest_wins(self) -> None:
        """Given two deadlines, when taking the earliest, then the sooner one is returned."""
        soon = Deadline.after(1)
        later = Deadline.after(10)

        assert later.earliest(soon) is soon
        assert soon.earliest(later) is soon
        assert soon.earliest(None) is soon


class TestJourneyBudget:
    """Tests for JourneyBudget."""

    def test_when_summing_then_total_includes_every_leg(self) -> None:
        """Given itemized legs, when reading total, then it is their sum."""
        budget = JourneyBudget(
            walk_minutes=8, queue_minutes=10, make_minutes=1, transfer_minutes=2, ride_minutes=5
        )

        assert budget.total == 26

    def test_when_leg_negative_then_raises(self) -> None:
        """Given a negative leg, when building a budget, then ValueError is raised."""
        with pytest.raises(ValueError, match="walk_minutes"):
            JourneyBudget(walk_minutes=-1)


class TestOperatingPolicy:
    """Tests for OperatingPolicy validation and day classes."""

    @pytest.fixture
    def policy(self) -> OperatingPolicy:
        return OperatingPolicy(
            shop_name="Norman",
            weekday_hours=OpeningHours(time(7, 0), time(16, 0)),
            weekend_hours=OpeningHours(time(8, 0), time(16, 0)),
            holidays=frozenset({date(2025, 3, 10)}),
        )

    def test_when_opening_after_closing_then_raises(self) -> None:
        """Given opens after closes, when building hours, then ValueError is raised."""
        with pytest.raises(ValueError, match="must be before"):
            OpeningHours(time(16, 0), time(7, 0))

    def test_when_buffer_swallows_opening_hours_then_raises(self) -> None:
        """Given a buffer longer than the day, when building a policy, then ValueError is raised."""
        with pytest.raises(ValueError, match="no serving time"):
            OperatingPolicy(
                shop_name="Tiny",
                weekday_hours=OpeningHours(time(7, 0), time(7, 30)),
                weekend_hours=OpeningHours(time(8, 0), time(16, 0)),
                closing_buffer_minutes=30,
            )

    def test_when_timezone_unknown_then_raises(self) -> None:
        """Given an unknown timezone, when building a policy, then ValueError is raised."""
        with pytest.raises(ValueError, match="Unknown timezone"):
            OperatingPolicy(
                shop_name="Norman",
                weekday_hours=OpeningHours(time(7, 0), time(16, 0)),
                weekend_hours=OpeningHours(time(8, 0), time(16, 0)),
                timezone="Mars/Olympus_Mons",
            )

    def test_when_date_is_holiday_then_weekend_hours_apply(self, policy: OperatingPolicy) -> None:
        """Given a Monday holiday at 07:30 local, when checking, then the shop is still closed."""
        holiday_morning = datetime(2025, 3, 10, 7, 30, tzinfo=policy.zone)

        assert policy.day_class(holiday_morning).value == "weekend_or_holiday"
        assert not policy.is_open(holiday_morning)

    def test_when_naive_datetime_then_treated_as_utc(self, policy: OperatingPolicy) -> None:
        """Given a naive UTC datetime, when converting, then it is read as UTC."""
        naive = datetime(2025, 3, 2, 21, 15)  # 08:15 on Monday in Melbourne

        local = policy.local_time(naive)

        assert local.hour == 8
        assert local.minute == 15
        assert local.utcoffset() == timedelta(hours=11)

    def test_when_reading_last_order_time_then_buffer_is_subtracted(
        self, policy: OperatingPolicy
    ) -> None:
        """Given a 15 minute buffer, when reading the last order time, then it is 15:45."""
        local = datetime(2025, 3, 3, 12, 0, tzinfo=policy.zone)

        assert policy.last_order_time(policy.day_class(local)) == time(15, 45)


class TestStopConfiguration:
    """Tests for StopConfiguration filtering."""

    def test_when_no_stop_ids_then_raises(self) -> None:
        """Given an empty stop id list, when building, then ValueError is raised."""
        with pytest.raises(ValueError, match="at least one stop id"):
            StopConfiguration(mode=TransportMode.TRAIN, stop_ids=())

    def test_when_route_filter_set_then_other_routes_rejected(self, make_departure) -> None:
        """Given a route filter, when checking departures, then only listed routes pass."""
        stop = StopConfiguration(mode=TransportMode.TRAM, stop_ids=("2189",), route_filter=("58",))

        assert stop.accepts(make_departure(3, mode=TransportMode.TRAM, line="58"))
        assert not stop.accepts(make_departure(3, mode=TransportMode.TRAM, line="6"))

    def test_when_destination_excluded_then_rejected_case_insensitively(
        self, make_departure
    ) -> None:
        """Given an excluded destination, when checking, then matching departures are rejected."""
        stop = StopConfiguration(
            mode=TransportMode.TRAIN, stop_ids=("19842",), exclude_destinations=("pakenham",)
        )

        assert not stop.accepts(make_departure(3, destination="Pakenham"))
        assert stop.accepts(make_departure(3, destination="Flinders Street"))

    def test_when_platform_filter_set_then_other_platforms_rejected(self, make_departure) -> None:
        """Given a platform filter, when checking, then only listed platforms pass."""
        stop = StopConfiguration(
            mode=TransportMode.TRAIN, stop_ids=("19842",), platform_filter=("1",)
        )

        assert stop.accepts(make_departure(3, platform="1"))
        assert not stop.accepts(make_departure(3, platform="2"))
        assert not stop.accepts(make_departure(3, platform=None))

    def test_when_mode_differs_then_rejected(self, make_departure) -> None:
        """Given a tram departure, when checked against a train stop, then rejected."""
        stop = StopConfiguration(mode=TransportMode.TRAIN, stop_ids=("19842",))

        assert not stop.accepts(make_departure(3, mode=TransportMode.TRAM))


class TestSmallModels:
    """Tests for the remaining value objects."""

    def test_when_formatting_fetch_error_then_includes_source_and_kind(self) -> None:
        """Given a fetch error, when formatting, then source and kind are shown."""
        error = FetchError(FetchErrorKind.UPSTREAM_REJECTED, "HTTP 403", "ptv", status_code=403)

        assert str(error) == "ptv: upstream_rejected: HTTP 403"
        assert error.status_code == 403

    def test_when_rush_threshold_above_get_threshold_then_raises(self) -> None:
        """Given inverted thresholds, when building, then ValueError is raised."""
        with pytest.raises(ValueError, match="rush_min_slack"):
            DecisionThresholds(get_coffee_min_slack=2, rush_min_slack=3)

    def test_when_journey_leg_negative_then_raises(self) -> None:
        """Given a negative leg, when building a journey configuration, then ValueError is raised."""
        with pytest.raises(ValueError, match="tram_ride_minutes"):
            JourneyConfiguration(tram_ride_minutes=-5)

    def test_when_touching_entry_then_only_fetch_time_changes(self) -> None:
        """Given an entry, when touched, then a copy with the new fetch time is returned."""
        entry = CacheEntry(alerts=(ServiceAlert(header="Works"),))
        fetched_at = datetime(2025, 3, 3, tzinfo=UTC)

        touched = entry.touched(fetched_at)

        assert touched.last_fetch_at == fetched_at
        assert touched.alerts == entry.alerts
        assert entry.last_fetch_at is None

    def test_when_alert_has_description_then_text_joins_both(self) -> None:
        """Given header and description, when reading text, then both are joined."""
        alert = ServiceAlert(header="Route 58", description="Buses replace trams")

        assert alert.text == "Route 58\nBuses replace trams"
        assert ServiceAlert(header="Only").text == "Only"

    def test_when_tier_compared_then_live_tiers_flagged(self) -> None:
        """Given the tiers, when checking liveness, then only the first three are live."""
        assert SourceTier.REALTIME_FEED.is_live
        assert not SourceTier.STATIC_SCHEDULE.is_live
        assert SourceTier.LIVE_AUTHENTICATED < SourceTier.SYNTHETIC
