"""GTFS static schedule loader."""

from __future__ import annotations

import csv
import io
import logging
import zipfile
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

REQUIRED_FILES = ("stops.txt", "trips.txt", "stop_times.txt")

# calendar_dates.txt exception types
_SERVICE_ADDED = "1"
_SERVICE_REMOVED = "2"


def parse_gtfs_time(value: str) -> int:
    """Parse a GTFS HH:MM:SS time into seconds after service-day start.

    Hours may exceed 23 for trips running past midnight.
    """
    hours, minutes, *rest = value.strip().split(":")
    seconds = int(rest[0]) if rest else 0
    return int(hours) * 3600 + int(minutes) * 60 + seconds


def parse_gtfs_date(value: str) -> date:
    """Parse a GTFS YYYYMMDD date."""
    return datetime.strptime(value.strip(), "%Y%m%d").date()


@dataclass(frozen=True)
class ScheduledStopTime:
    """One scheduled call of a trip at a stop."""

    trip_id: str
    stop_id: str
    departure_seconds: int


@dataclass(frozen=True)
class TripInfo:
    """The parts of trips.txt needed to label a departure."""

    route_id: str
    service_id: str
    headsign: str = ""


@dataclass(frozen=True)
class ServiceCalendar:
    """Weekly pattern of a service from calendar.txt."""

    weekdays: tuple[bool, bool, bool, bool, bool, bool, bool]  # Monday first
    start_date: date
    end_date: date

    def runs_on(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date and self.weekdays[day.weekday()]


@dataclass
class GtfsSchedule:
    """Indexed subset of a GTFS static feed.

    Only stop times for the stops of interest are kept, since a full metropolitan
    stop_times.txt holds millions of rows.
    """

    stop_code_to_id: dict[str, str] = field(default_factory=dict)
    platform_by_stop: dict[str, str] = field(default_factory=dict)
    platforms_by_station: dict[str, list[str]] = field(default_factory=dict)
    stop_times_by_stop: dict[str, list[ScheduledStopTime]] = field(default_factory=dict)
    trips: dict[str, TripInfo] = field(default_factory=dict)
    route_names: dict[str, str] = field(default_factory=dict)
    calendars: dict[str, ServiceCalendar] = field(default_factory=dict)
    calendar_exceptions: dict[tuple[str, date], bool] = field(default_factory=dict)
    timezone: str = "Australia/Melbourne"

    @classmethod
    def load(
        cls,
        path: Path,
        stop_codes: Iterable[str] | None = None,
        timezone: str = "Australia/Melbourne",
    ) -> GtfsSchedule:
        """Load a GTFS feed from a directory or a zip archive.

        Args:
            path: Directory holding the .txt files, or a .zip file.
            stop_codes: Public stop codes or stop ids to keep stop times for. All stops
                are kept when omitted.
            timezone: Timezone the schedule's times are expressed in.

        Raises:
            FileNotFoundError: If the path or a required file is missing.
        """
        if not path.exists():
            raise FileNotFoundError(f"GTFS schedule not found: {path}")

        with _GtfsFiles(path) as files:
            missing = [name for name in REQUIRED_FILES if not files.has(name)]
            if missing:
                raise FileNotFoundError(f"GTFS files missing in {path}: {', '.join(missing)}")

            schedule = cls(timezone=timezone)
            schedule._load_stops(files.rows("stops.txt"))
            wanted = set(schedule.resolve_stop_ids(stop_codes)) if stop_codes is not None else None
            schedule._load_stop_times(files.rows("stop_times.txt"), wanted)
            trip_ids = {st.trip_id for times in schedule.stop_times_by_stop.values() for st in times}
            schedule._load_trips(files.rows("trips.txt"), trip_ids)
            if files.has("routes.txt"):
                schedule._load_routes(files.rows("routes.txt"))
            if files.has("calendar.txt"):
                schedule._load_calendar(files.rows("calendar.txt"))
            if files.has("calendar_dates.txt"):
                schedule._load_calendar_dates(files.rows("calendar_dates.txt"))

        logger.info(
            f"Loaded GTFS schedule from {path}: {len(schedule.stop_times_by_stop)} stop(s), "
            f"{len(schedule.trips)} trip(s), {len(schedule.route_names)} route(s)"
        )
        return schedule

    def _load_stops(self, rows: Iterator[dict[str, str]]) -> None:
        for row in rows:
            stop_id = (row.get("stop_id") or "").strip()
            if not stop_id:
                continue
            stop_code = (row.get("stop_code") or "").strip()
            if stop_code:
                self.stop_code_to_id[stop_code] = stop_id
            platform = (row.get("platform_code") or "").strip()
            if platform:
                self.platform_by_stop[stop_id] = platform
            parent = (row.get("parent_station") or "").strip()
            if parent:
                self.platforms_by_station.setdefault(parent, []).append(stop_id)

    def _load_stop_times(self, rows: Iterator[dict[str, str]], wanted: set[str] | None) -> None:
        for row in rows:
            stop_id = (row.get("stop_id") or "").strip()
            if wanted is not None and stop_id not in wanted:
                continue
            raw_time = (row.get("departure_time") or row.get("arrival_time") or "").strip()
            if not raw_time:
                continue  # Untimed stop
            try:
                seconds = parse_gtfs_time(raw_time)
            except ValueError:
                logger.debug(f"Skipping stop time with invalid time {raw_time!r}")
                continue
            self.stop_times_by_stop.setdefault(stop_id, []).append(
                ScheduledStopTime(
                    trip_id=(row.get("trip_id") or "").strip(),
                    stop_id=stop_id,
                    departure_seconds=seconds,
                )
            )

    def _load_trips(self, rows: Iterator[dict[str, str]], trip_ids: set[str]) -> None:
        for row in rows:
            trip_id = (row.get("trip_id") or "").strip()
            if trip_id not in trip_ids:
                continue
            self.trips[trip_id] = TripInfo(
                route_id=(row.get("route_id") or "").strip(),
                service_id=(row.get("service_id") or "").strip(),
                headsign=(row.get("trip_headsign") or "").strip(),
            )

    def _load_routes(self, rows: Iterator[dict[str, str]]) -> None:
        for row in rows:
            route_id = (row.get("route_id") or "").strip()
            name = (row.get("route_short_name") or "").strip() or (
                row.get("route_long_name") or ""
            ).strip()
            if route_id and name:
                self.route_names[route_id] = name

    def _load_calendar(self, rows: Iterator[dict[str, str]]) -> None:
        days = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
        for row in rows:
            service_id = (row.get("service_id") or "").strip()
            if not service_id:
                continue
            try:
                self.calendars[service_id] = ServiceCalendar(
                    weekdays=tuple((row.get(day) or "0").strip() == "1" for day in days),  # type: ignore[arg-type]
                    start_date=parse_gtfs_date(row["start_date"]),
                    end_date=parse_gtfs_date(row["end_date"]),
                )
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping malformed calendar row for service {service_id}: {e}")

    def _load_calendar_dates(self, rows: Iterator[dict[str, str]]) -> None:
        for row in rows:
            service_id = (row.get("service_id") or "").strip()
            exception_type = (row.get("exception_type") or "").strip()
            if not service_id or exception_type not in (_SERVICE_ADDED, _SERVICE_REMOVED):
                continue
            try:
                day = parse_gtfs_date(row["date"])
            except (KeyError, ValueError):
                continue
            self.calendar_exceptions[(service_id, day)] = exception_type == _SERVICE_ADDED

    def resolve_stop_ids(self, stop_codes: Iterable[str]) -> list[str]:
        """Translate public stop codes to GTFS stop ids, adding the platforms of stations.

        Unknown codes are used as ids.
        """
        resolved: list[str] = []
        for code in stop_codes:
            stop_id = self.stop_code_to_id.get(str(code).strip(), str(code).strip())
            for candidate in (stop_id, *self.platforms_by_station.get(stop_id, ())):
                if candidate not in resolved:
                    resolved.append(candidate)
        return resolved

    def route_name(self, route_id: str) -> str | None:
        return self.route_names.get(route_id)

    def trip(self, trip_id: str) -> TripInfo | None:
        return self.trips.get(trip_id)

    def platform_for(self, stop_id: str) -> str | None:
        return self.platform_by_stop.get(stop_id)

    def runs_on(self, service_id: str, day: date) -> bool:
        """Whether a service operates on a service day.

        Services without any calendar information are assumed to run every day.
        """
        exception = self.calendar_exceptions.get((service_id, day))
        if exception is not None:
            return exception
        calendar = self.calendars.get(service_id)
        if calendar is None:
            return not self.calendars
        return calendar.runs_on(day)

    def departures_between(
        self, stop_ids: Iterable[str], start: datetime, end: datetime
    ) -> list[tuple[ScheduledStopTime, datetime]]:
        """Scheduled calls at the stops with an absolute time in [start, end], sorted."""
        zone = ZoneInfo(self.timezone)
        wanted = set(stop_ids)
        first_day = start.astimezone(zone).date() - timedelta(days=1)  # Trips past midnight
        last_day = end.astimezone(zone).date()

        results: list[tuple[ScheduledStopTime, datetime]] = []
        day = first_day
        while day <= last_day:
            # GTFS times count from noon minus twelve hours, which differs from midnight on DST days
            day_origin = datetime.combine(day, time(12), tzinfo=zone).astimezone(UTC) - timedelta(
                hours=12
            )
            for stop_id in wanted:
                for stop_time in self.stop_times_by_stop.get(stop_id, []):
                    trip = self.trips.get(stop_time.trip_id)
                    if trip is not None and not self.runs_on(trip.service_id, day):
                        continue
                    instant = day_origin + timedelta(seconds=stop_time.departure_seconds)
                    if start <= instant <= end:
                        results.append((stop_time, instant))
            day += timedelta(days=1)

        results.sort(key=lambda item: item[1])
        return results


class _GtfsFiles:
    """Uniform CSV access to a GTFS directory or zip archive."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._zip: zipfile.ZipFile | None = None

    def __enter__(self) -> _GtfsFiles:
        if self._path.is_file():
            self._zip = zipfile.ZipFile(self._path)
        return self

    def __exit__(self, *_exc: object) -> None:
        if self._zip is not None:
            self._zip.close()

    def has(self, name: str) -> bool:
        if self._zip is not None:
            return name in self._zip.namelist()
        return (self._path / name).exists()

    def rows(self, name: str) -> Iterator[dict[str, str]]:
        if self._zip is not None:
            with self._zip.open(name) as raw:
                yield from csv.DictReader(io.TextIOWrapper(raw, encoding="utf-8-sig"))
        else:
            with open(self._path / name, encoding="utf-8-sig", newline="") as f:
                yield from csv.DictReader(f)
