"""Tests for the smaller application services."""

from datetime import UTC, datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from commute_coffee.application.services import DisruptionClassifier
from commute_coffee.application.services.busyness import BusynessWindow, estimate_busyness
from commute_coffee.domain.models.synthetic_timetable import synthetic_departures
from commute_coffee.domain.models import (
    BUSY,
    QUIET,
    VERY_BUSY,
    DayClass,
    ServiceAlert,
    SourceTier,
    StopConfiguration,
    TransportMode,
)

MELBOURNE = ZoneInfo("Australia/Melbourne")


class TestDisruptionClassifier:
    """Tests for keyword classification of alert text."""

    @pytest.mark.parametrize(
        "text",
        [
            "Major Delays on the Frankston line",
            "Route 58: buses replace trams between Toorak Rd and Domain Rd",
            "SERVICES SUSPENDED due to police activity",
            "Trains not running between Richmond and Caulfield",
        ],
    )
    def test_when_text_mentions_keyword_then_disrupted(self, text: str) -> None:
        """Given alert text with a keyword in any case, when classifying, then disrupted."""
        signal = DisruptionClassifier().classify(text)

        assert signal.is_disrupted
        assert signal.headline == text

    def test_when_text_has_no_keyword_then_not_disrupted(self) -> None:
        """Given harmless text, when classifying, then not disrupted."""
        signal = DisruptionClassifier().classify("Lift at Richmond out of service")

        assert not signal.is_disrupted
        assert signal.headline == ""

    def test_when_text_spans_lines_then_headline_is_first_line(self) -> None:
        """Given multi-line text, when classifying, then the headline is the first non-empty line."""
        signal = DisruptionClassifier().classify("\nSandringham line\nMajor Delays expected")

        assert signal.headline == "Sandringham line"

    def test_when_custom_keywords_then_only_they_match(self) -> None:
        """Given custom keywords, when classifying, then defaults no longer apply."""
        classifier = DisruptionClassifier(["Strike"])

        assert classifier.classify("Tram strike today").is_disrupted
        assert not classifier.classify("Major Delays").is_disrupted
        assert classifier.keywords == ("strike",)

    def test_when_alerts_classified_then_first_disrupting_header_is_used(self) -> None:
        """Given several alerts, when classifying, then the first disrupting alert's header wins."""
        alerts = [
            ServiceAlert(header="Lift out of service"),
            ServiceAlert(header="Route 58 disruption", description="Buses replace trams"),
            ServiceAlert(header="Major Delays"),
        ]

        signal = DisruptionClassifier().classify_alerts(alerts)

        assert signal.is_disrupted
        assert signal.headline == "Route 58 disruption"

    def test_when_no_alerts_then_not_disrupted(self) -> None:
        """Given no alerts, when classifying, then not disrupted."""
        assert not DisruptionClassifier().classify_alerts([]).is_disrupted


class TestBusyness:
    """Tests for the busyness lookup."""

    @pytest.mark.parametrize(
        ("local_time", "day_class", "expected"),
        [
            (time(8, 0), DayClass.WEEKDAY, BUSY),
            (time(9, 29), DayClass.WEEKDAY, BUSY),
            (time(9, 30), DayClass.WEEKDAY, QUIET),
            (time(7, 59), DayClass.WEEKDAY, QUIET),
            (time(9, 0), DayClass.WEEKEND_OR_HOLIDAY, VERY_BUSY),
            (time(11, 59), DayClass.WEEKEND_OR_HOLIDAY, VERY_BUSY),
            (time(12, 0), DayClass.WEEKEND_OR_HOLIDAY, QUIET),
            (time(8, 30), DayClass.WEEKEND_OR_HOLIDAY, QUIET),
        ],
    )
    def test_when_looking_up_time_then_window_busyness_applies(
        self, local_time: time, day_class: DayClass, expected
    ) -> None:
        """Given a local time and day class, when estimating, then the matching window applies."""
        local_now = datetime.combine(datetime(2025, 3, 3).date(), local_time, tzinfo=MELBOURNE)

        assert estimate_busyness(local_now, day_class) == expected

    def test_when_custom_windows_then_they_replace_defaults(self) -> None:
        """Given custom windows, when estimating, then only they are consulted."""
        windows = (BusynessWindow(DayClass.WEEKDAY, time(12, 0), time(13, 0), VERY_BUSY),)
        lunch = datetime(2025, 3, 3, 12, 30, tzinfo=MELBOURNE)
        rush = datetime(2025, 3, 3, 8, 30, tzinfo=MELBOURNE)

        assert estimate_busyness(lunch, DayClass.WEEKDAY, windows) == VERY_BUSY
        assert estimate_busyness(rush, DayClass.WEEKDAY, windows) == QUIET


class TestSyntheticTimetable:
    """Tests for generated departures."""

    def test_when_generating_then_departures_follow_headway_after_now(self) -> None:
        """Given a 10 minute headway, when generating at 08:03, then slots are 08:10, 08:20, ..."""
        stop = StopConfiguration(
            mode=TransportMode.TRAIN,
            stop_ids=("19842",),
            max_departures=3,
            route_filter=("Sandringham",),
        )
        now = datetime(2025, 3, 3, 8, 3, 20, tzinfo=UTC)

        departures = synthetic_departures(stop, now)

        assert [d.departure_time for d in departures] == [
            datetime(2025, 3, 3, 8, 10, tzinfo=UTC),
            datetime(2025, 3, 3, 8, 20, tzinfo=UTC),
            datetime(2025, 3, 3, 8, 30, tzinfo=UTC),
        ]
        assert all(d.is_scheduled_estimate for d in departures)
        assert all(d.source_tier is SourceTier.SYNTHETIC for d in departures)
        assert departures[0].line == "Sandringham"
        assert departures[0].stop_id == "19842"

    def test_when_now_on_slot_then_first_departure_is_next_slot(self) -> None:
        """Given now exactly on a slot, when generating, then that slot is skipped."""
        stop = StopConfiguration(
            mode=TransportMode.TRAM, stop_ids=("2189",), synthetic_headway_minutes=5
        )
        now = datetime(2025, 3, 3, 8, 10, tzinfo=UTC)

        departures = synthetic_departures(stop, now, count=1)

        assert departures[0].departure_time == now + timedelta(minutes=5)
        assert departures[0].mode is TransportMode.TRAM

    @pytest.mark.parametrize("second", [0, 30, 59])
    def test_when_slot_is_under_a_minute_away_then_it_is_skipped(self, second: int) -> None:
        """Given a slot less than a minute away, when generating, then the following slot comes first."""
        stop = StopConfiguration(mode=TransportMode.TRAIN, stop_ids=("1071",))
        now = datetime(2025, 3, 3, 8, 9, second, tzinfo=UTC)

        departures = synthetic_departures(stop, now, count=2)

        assert departures[0].departure_time == datetime(2025, 3, 3, 8, 20, tzinfo=UTC)
        assert (departures[0].departure_time - now).total_seconds() > 60
        assert departures[1].departure_time == datetime(2025, 3, 3, 8, 30, tzinfo=UTC)
