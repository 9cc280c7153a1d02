"""Tests for the GTFS static and realtime adapters."""

import zipfile
from datetime import date, datetime, timedelta
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo

import pytest
from google.transit import gtfs_realtime_pb2

from commute_coffee.adapters.gtfs import (
    GtfsRealtimeAlertProvider,
    GtfsRealtimeDepartureSource,
    GtfsSchedule,
    StaticScheduleDepartureSource,
)
from commute_coffee.adapters.gtfs.feed_decoder import decode_feed, translated_text
from commute_coffee.adapters.gtfs.gtfs_schedule import (
    ScheduledStopTime,
    ServiceCalendar,
    TripInfo,
    parse_gtfs_time,
)
from commute_coffee.domain.models import (
    Deadline,
    FetchError,
    FetchErrorKind,
    SourceTier,
    StopConfiguration,
    TransportMode,
)

MELBOURNE = ZoneInfo("Australia/Melbourne")

GTFS_FILES = {
    "stops.txt": (
        "stop_id,stop_code,stop_name,parent_station,platform_code\n"
        "19842,1071,South Yarra Station,,\n"
        "19843,,South Yarra Platform 1,19842,1\n"
        "19844,,South Yarra Platform 2,19842,2\n"
        "2189,2189,Tivoli Rd,,\n"
    ),
    "routes.txt": (
        "route_id,route_short_name,route_long_name\n"
        "SDM,,Sandringham\n"
        "R58,58,West Coburg - Toorak\n"
    ),
    "trips.txt": (
        "route_id,service_id,trip_id,trip_headsign\n"
        "SDM,WD,T1,Flinders Street\n"
        "SDM,WD,T2,Flinders Street\n"
        "SDM,WE,T3,Flinders Street\n"
        "SDM,WD,T4,Flinders Street\n"
        "SDM,WD,T5,Flinders Street\n"
        "R58,WD,M1,West Coburg\n"
    ),
    "stop_times.txt": (
        "trip_id,arrival_time,departure_time,stop_id,stop_sequence\n"
        "T1,08:25:00,08:25:00,19843,5\n"
        "T2,08:40:00,08:40:00,19843,5\n"
        "T3,08:30:00,08:30:00,19843,5\n"
        "T4,08:10:00,08:10:00,19843,5\n"
        "T5,12:00:00,12:00:00,19844,5\n"
        "M1,08:20:00,08:20:00,2189,12\n"
    ),
    "calendar.txt": (
        "service_id,monday,tuesday,wednesday,thursday,friday,saturday,sunday,start_date,end_date\n"
        "WD,1,1,1,1,1,0,0,20250101,20251231\n"
        "WE,0,0,0,0,0,1,1,20250101,20251231\n"
    ),
}


def write_gtfs(directory: Path, files: dict[str, str] = GTFS_FILES) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        (directory / name).write_text(content, encoding="utf-8")
    return directory


def build_feed(*entities: gtfs_realtime_pb2.FeedEntity) -> bytes:
    feed = gtfs_realtime_pb2.FeedMessage()
    feed.header.gtfs_realtime_version = "2.0"
    for entity in entities:
        feed.entity.add().CopyFrom(entity)
    return feed.SerializeToString()


def trip_update_entity(
    entity_id: str,
    trip_id: str,
    stop_id: str,
    departure: datetime,
    delay: int | None = None,
    canceled: bool = False,
    skipped: bool = False,
    route_id: str = "",
) -> gtfs_realtime_pb2.FeedEntity:
    entity = gtfs_realtime_pb2.FeedEntity(id=entity_id)
    entity.trip_update.trip.trip_id = trip_id
    if route_id:
        entity.trip_update.trip.route_id = route_id
    if canceled:
        entity.trip_update.trip.schedule_relationship = gtfs_realtime_pb2.TripDescriptor.CANCELED
    update = entity.trip_update.stop_time_update.add()
    update.stop_id = stop_id
    update.departure.time = int(departure.timestamp())
    if delay is not None:
        update.departure.delay = delay
    if skipped:
        update.schedule_relationship = gtfs_realtime_pb2.TripUpdate.StopTimeUpdate.SKIPPED
    return entity


def alert_entity(
    entity_id: str, header: str, start: int = 0, end: int = 0, description: str = ""
) -> gtfs_realtime_pb2.FeedEntity:
    entity = gtfs_realtime_pb2.FeedEntity(id=entity_id)
    entity.alert.header_text.translation.add(text=header, language="en")
    if description:
        entity.alert.description_text.translation.add(text=description, language="en")
    if start or end:
        period = entity.alert.active_period.add()
        if start:
            period.start = start
        if end:
            period.end = end
    return entity


def mock_http(payload: bytes) -> MagicMock:
    http = MagicMock()
    http.get_bytes = AsyncMock(return_value=payload)
    return http


class TestGtfsSchedule:
    """Tests for loading and querying the static schedule."""

    def test_when_parsing_time_past_midnight_then_hours_exceed_a_day(self) -> None:
        """Given 25:10:00, when parsing, then the seconds count past 24 hours."""
        assert parse_gtfs_time("25:10:00") == 25 * 3600 + 600

    def test_when_loading_station_code_then_platform_stop_times_are_kept(self, tmp_path: Path) -> None:
        """Given a station code, when loading, then stop times at its platforms are indexed."""
        schedule = GtfsSchedule.load(write_gtfs(tmp_path / "gtfs"), stop_codes=["1071"])

        assert schedule.resolve_stop_ids(["1071"]) == ["19842", "19843", "19844"]
        assert set(schedule.stop_times_by_stop) == {"19843", "19844"}
        assert "M1" not in schedule.trips
        assert schedule.route_name("SDM") == "Sandringham"
        assert schedule.platform_for("19843") == "1"

    def test_when_loading_zip_then_same_schedule_is_read(self, tmp_path: Path) -> None:
        """Given a zipped feed, when loading, then its files are read like a directory."""
        archive = tmp_path / "gtfs.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            for name, content in GTFS_FILES.items():
                zf.writestr(name, content)

        schedule = GtfsSchedule.load(archive, stop_codes=["2189"])

        assert list(schedule.stop_times_by_stop) == ["2189"]
        assert schedule.trip("M1") == TripInfo(route_id="R58", service_id="WD", headsign="West Coburg")

    def test_when_required_file_missing_then_file_not_found(self, tmp_path: Path) -> None:
        """Given a feed without stop_times.txt, when loading, then FileNotFoundError is raised."""
        files = {k: v for k, v in GTFS_FILES.items() if k != "stop_times.txt"}

        with pytest.raises(FileNotFoundError, match="stop_times.txt"):
            GtfsSchedule.load(write_gtfs(tmp_path / "gtfs", files))

    def test_when_path_missing_then_file_not_found(self, tmp_path: Path) -> None:
        """Given a path that does not exist, when loading, then FileNotFoundError is raised."""
        with pytest.raises(FileNotFoundError):
            GtfsSchedule.load(tmp_path / "nowhere")

    def test_when_calendar_exception_removes_service_then_it_does_not_run(self) -> None:
        """Given a removal exception on a weekday, when checking, then the service does not run."""
        schedule = GtfsSchedule(
            calendars={
                "WD": ServiceCalendar(
                    weekdays=(True, True, True, True, True, False, False),
                    start_date=date(2025, 1, 1),
                    end_date=date(2025, 12, 31),
                )
            },
            calendar_exceptions={("WD", date(2025, 3, 10)): False},
        )

        assert schedule.runs_on("WD", date(2025, 3, 3))
        assert not schedule.runs_on("WD", date(2025, 3, 10))
        assert not schedule.runs_on("WD", date(2025, 3, 8))
        assert not schedule.runs_on("UNKNOWN", date(2025, 3, 3))

    def test_when_service_day_crosses_dst_change_then_local_time_is_kept(self) -> None:
        """Given a stop time on the day daylight saving ends, when expanding, then it is 08:00 local."""
        schedule = GtfsSchedule(
            stop_times_by_stop={"19843": [ScheduledStopTime("T1", "19843", 8 * 3600)]}
        )
        start = datetime(2025, 4, 6, 7, 0, tzinfo=MELBOURNE)

        calls = schedule.departures_between(["19843"], start, start + timedelta(hours=2))

        assert [instant for _, instant in calls] == [datetime(2025, 4, 6, 8, 0, tzinfo=MELBOURNE)]


class TestStaticScheduleDepartureSource:
    """Tests for timetabled departures."""

    @pytest.mark.asyncio
    async def test_when_fetching_then_running_trips_within_horizon_are_returned(
        self, clock, tmp_path: Path
    ) -> None:
        """Given a Monday 08:15 clock, when fetching, then weekday trips at 08:25 and 08:40 are returned."""
        schedule = GtfsSchedule.load(write_gtfs(tmp_path / "gtfs"), stop_codes=["1071"])
        source = StaticScheduleDepartureSource(clock, schedule)
        stop = StopConfiguration(mode=TransportMode.TRAIN, stop_ids=("1071",))

        result = await source.fetch(TransportMode.TRAIN, stop, Deadline.after(5))

        assert result.source_tier is SourceTier.STATIC_SCHEDULE
        assert [d.trip_id for d in result.departures] == ["T1", "T2"]
        first = result.departures[0]
        assert first.departure_time == datetime(2025, 3, 3, 8, 25, tzinfo=MELBOURNE)
        assert first.destination == "Flinders Street"
        assert first.line == "Sandringham"
        assert first.platform == "1"
        assert first.is_scheduled_estimate


class TestGtfsRealtimeDepartureSource:
    """Tests for GTFS-Realtime trip updates."""

    @pytest.fixture
    def schedule(self) -> GtfsSchedule:
        return GtfsSchedule(
            trips={"M1": TripInfo(route_id="R58", service_id="WD", headsign="West Coburg")},
            route_names={"R58": "58"},
        )

    @pytest.mark.asyncio
    async def test_when_feed_has_updates_then_only_running_calls_at_stop_are_used(
        self, clock, tram_stop, schedule
    ) -> None:
        """Given cancelled, skipped and foreign-stop updates, when fetching, then only the valid call remains."""
        now = clock.now()
        payload = build_feed(
            trip_update_entity("1", "M1", "2189", now + timedelta(minutes=6), delay=120),
            trip_update_entity("2", "M2", "2189", now + timedelta(minutes=9), canceled=True),
            trip_update_entity("3", "M3", "2189", now + timedelta(minutes=12), skipped=True),
            trip_update_entity("4", "M4", "3001", now + timedelta(minutes=4)),
        )
        source = GtfsRealtimeDepartureSource(
            clock, None, {TransportMode.TRAM: "https://feed.example/tram"}, api_key="k", schedule=schedule
        )
        source._http = mock_http(payload)

        result = await source.fetch(TransportMode.TRAM, tram_stop, Deadline.after(5))

        assert len(result) == 1
        departure = result.departures[0]
        assert departure.destination == "West Coburg"
        assert departure.line == "58"
        assert departure.departure_time == now + timedelta(minutes=6)
        assert departure.planned_time == now + timedelta(minutes=4)
        assert not departure.is_scheduled_estimate
        assert departure.source_tier is SourceTier.REALTIME_FEED
        source._http.get_bytes.assert_awaited_once()
        assert source._http.get_bytes.await_args.kwargs["headers"] == {"KeyId": "k"}

    @pytest.mark.asyncio
    async def test_when_no_schedule_then_route_id_labels_departure(self, clock, tram_stop) -> None:
        """Given no static schedule, when fetching, then the route id is used as line and destination."""
        now = clock.now()
        payload = build_feed(
            trip_update_entity("1", "M1", "2189", now + timedelta(minutes=3), route_id="R58")
        )
        source = GtfsRealtimeDepartureSource(clock, None, {TransportMode.TRAM: "https://feed.example"})
        source._http = mock_http(payload)

        result = await source.fetch(TransportMode.TRAM, tram_stop, Deadline.after(5))

        assert result.departures[0].line == "R58"
        assert result.departures[0].destination == "R58"

    @pytest.mark.asyncio
    async def test_when_mode_has_no_feed_then_no_request_is_made(self, clock, train_stop) -> None:
        """Given only a tram feed, when fetching trains, then an empty set is returned without a request."""
        source = GtfsRealtimeDepartureSource(clock, None, {TransportMode.TRAM: "https://feed.example"})
        source._http = mock_http(b"")

        result = await source.fetch(TransportMode.TRAIN, train_stop, Deadline.after(5))

        assert not source.serves(TransportMode.TRAIN)
        assert result.is_empty
        source._http.get_bytes.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_when_payload_is_not_protobuf_then_parse_error(self, clock, tram_stop) -> None:
        """Given a truncated payload, when fetching, then FetchError PARSE is raised."""
        source = GtfsRealtimeDepartureSource(clock, None, {TransportMode.TRAM: "https://feed.example"})
        source._http = mock_http(b"\x0a\x05abc")

        with pytest.raises(FetchError) as exc_info:
            await source.fetch(TransportMode.TRAM, tram_stop, Deadline.after(5))

        assert exc_info.value.kind is FetchErrorKind.PARSE
        assert exc_info.value.source_name == "gtfs-realtime"


class TestGtfsRealtimeAlertProvider:
    """Tests for service alerts."""

    @pytest.mark.asyncio
    async def test_when_fetching_then_only_active_alerts_are_returned(self, clock) -> None:
        """Given current, expired and open-ended alerts, when fetching, then expired ones are dropped."""
        now = int(clock.now().timestamp())
        payload = build_feed(
            alert_entity("1", "Major Delays", start=now - 600, end=now + 600, description="Frankston line"),
            alert_entity("2", "Works finished", start=now - 7200, end=now - 3600),
            alert_entity("3", "Lift out of service"),
            alert_entity("4", "Planned works tomorrow", start=now + 86400),
        )
        provider = GtfsRealtimeAlertProvider(clock, None, "https://feed.example/alerts")
        provider._http = mock_http(payload)

        alerts = await provider.current_alerts(Deadline.after(5))

        assert [a.header for a in alerts] == ["Major Delays", "Lift out of service"]
        assert alerts[0].description == "Frankston line"


class TestFeedDecoder:
    """Tests for protobuf helpers."""

    def test_when_decoding_valid_feed_then_entities_are_read(self) -> None:
        """Given a serialized feed, when decoding, then its entities are available."""
        payload = build_feed(alert_entity("1", "Major Delays"))

        assert len(decode_feed(payload).entity) == 1

    def test_when_language_missing_then_first_translation_is_used(self) -> None:
        """Given only a German translation, when picking English, then the German text is used."""
        text = gtfs_realtime_pb2.TranslatedString()
        text.translation.add(text=" Verspätung ", language="de")

        assert translated_text(text, "en") == "Verspätung"
        assert translated_text(gtfs_realtime_pb2.TranslatedString()) == ""
