"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# DataVic open data feeds for Yarra Trams
YARRA_TRAMS_TRIP_UPDATES_URL = "https://data.ptv.vic.gov.au/yarratrams/tripupdates.pb"
YARRA_TRAMS_SERVICE_ALERTS_URL = "https://data.ptv.vic.gov.au/yarratrams/servicealerts.pb"


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles.

    Scalar settings come from environment variables or .env. Stops, the shop's
    operating policy and the journey are read from the TOML file; its [sources],
    [weather], [alerts] and [refresh] sections override the matching settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # TOML config file path
    config_file: str | None = Field(
        default="config.example.toml",
        description="Path to TOML configuration file for stops, policy and journey",
    )
    timezone: str = Field(
        default="Australia/Melbourne",
        description="Timezone of the shop and the static schedule (IANA timezone name)",
    )

    # Refresh configuration
    refresh_ttl_seconds: float = Field(
        default=60.0, description="How long fetched data counts as fresh"
    )
    refresh_timeout_seconds: float = Field(
        default=20.0, description="Overall time budget of one refresh cycle"
    )
    per_source_timeout_seconds: float = Field(
        default=8.0, description="Time budget of one upstream source call"
    )
    poll_interval_seconds: float = Field(
        default=30.0, description="Interval of the background poller keeping the cache warm"
    )

    # Display configuration
    departure_grace_minutes: int = Field(
        default=2, description="Minutes a departed service stays visible"
    )
    max_departures_shown: int = Field(
        default=6, description="Maximum departures shown per transport mode"
    )

    # Decision thresholds
    get_coffee_min_slack: int = Field(
        default=5, description="Minimum spare minutes for a relaxed coffee run"
    )
    rush_min_slack: int = Field(default=0, description="Minimum spare minutes for a rushed run")

    # PTV Timetable API
    ptv_enabled: bool = Field(default=True, description="Use the PTV API when credentials exist")
    ptv_dev_id: str | None = Field(default=None, description="PTV developer id")
    ptv_api_key: str | None = Field(default=None, description="PTV developer key")
    ptv_min_request_interval_seconds: float = Field(
        default=0.5, description="Minimum delay between PTV requests"
    )

    # TramTracker
    tramtracker_enabled: bool = Field(
        default=False, description="Use TramTracker predictions for trams"
    )
    tramtracker_min_request_interval_seconds: float = Field(
        default=1.0, description="Minimum delay between TramTracker requests"
    )

    # GTFS-Realtime
    gtfs_realtime_enabled: bool = Field(default=True, description="Use GTFS-Realtime feeds")
    gtfs_realtime_api_key: str | None = Field(
        default=None, description="Open data key sent as KeyId header"
    )
    gtfs_realtime_train_trip_updates_url: str | None = Field(
        default=None, description="TripUpdates feed for trains"
    )
    gtfs_realtime_tram_trip_updates_url: str | None = Field(
        default=YARRA_TRAMS_TRIP_UPDATES_URL, description="TripUpdates feed for trams"
    )

    # GTFS static schedule
    gtfs_static_enabled: bool = Field(default=True, description="Use the static timetable")
    gtfs_static_path: str | None = Field(
        default="gtfs", description="Directory or zip file holding the GTFS static feed"
    )

    # Weather
    weather_enabled: bool = Field(default=True, description="Fetch current weather")
    weather_latitude: float = Field(default=-37.8136, description="Latitude for the weather")
    weather_longitude: float = Field(default=144.9631, description="Longitude for the weather")

    # Service alerts
    alerts_enabled: bool = Field(default=True, description="Fetch service alerts")
    service_alerts_url: str | None = Field(
        default=YARRA_TRAMS_SERVICE_ALERTS_URL, description="GTFS-Realtime ServiceAlerts feed"
    )
    disruption_keywords: list[str] | None = Field(
        default=None, description="Keywords marking an alert as a disruption"
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate the timezone is a known IANA name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"timezone must be an IANA timezone name, got {v!r}") from e
        return v

    @field_validator(
        "refresh_ttl_seconds",
        "refresh_timeout_seconds",
        "per_source_timeout_seconds",
        "poll_interval_seconds",
    )
    @classmethod
    def validate_positive_seconds(cls, v: float) -> float:
        """Validate durations are positive."""
        if v <= 0:
            raise ValueError("durations must be positive")
        return v

    @field_validator("departure_grace_minutes")
    @classmethod
    def validate_grace(cls, v: int) -> int:
        if v < 0:
            raise ValueError("departure_grace_minutes must not be negative")
        return v

    @field_validator("max_departures_shown")
    @classmethod
    def validate_max_departures_shown(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_departures_shown must be at least 1")
        return v

    @model_validator(mode="after")
    def validate_thresholds(self) -> "AppConfig":
        """Validate the rush threshold does not exceed the relaxed threshold."""
        if self.rush_min_slack > self.get_coffee_min_slack:
            raise ValueError("rush_min_slack must not exceed get_coffee_min_slack")
        return self

    @classmethod
    def for_testing(cls, **overrides: Any) -> "AppConfig":
        """Build a config that ignores .env, for tests."""
        return cls(_env_file=None, **overrides)  # type: ignore[call-arg]

    @property
    def has_ptv_credentials(self) -> bool:
        return bool(self.ptv_dev_id and self.ptv_api_key)

    def _load_toml_data(self) -> dict[str, Any]:
        """Load and parse TOML file, updating source, weather, alert and refresh settings."""
        if not self.config_file:
            raise ValueError("config_file must be set to load stops configuration")

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        sources = toml_data.get("sources", {})
        for key in (
            "ptv_enabled",
            "tramtracker_enabled",
            "gtfs_realtime_enabled",
            "gtfs_realtime_train_trip_updates_url",
            "gtfs_realtime_tram_trip_updates_url",
            "gtfs_static_enabled",
            "gtfs_static_path",
        ):
            if key in sources:
                setattr(self, key, sources[key])

        weather = toml_data.get("weather", {})
        if "enabled" in weather:
            self.weather_enabled = bool(weather["enabled"])
        if "latitude" in weather:
            self.weather_latitude = float(weather["latitude"])
        if "longitude" in weather:
            self.weather_longitude = float(weather["longitude"])

        alerts = toml_data.get("alerts", {})
        if "enabled" in alerts:
            self.alerts_enabled = bool(alerts["enabled"])
        if "service_alerts_url" in alerts:
            self.service_alerts_url = alerts["service_alerts_url"]
        if "disruption_keywords" in alerts:
            keywords = alerts["disruption_keywords"]
            if not isinstance(keywords, list):
                raise ValueError("TOML config 'alerts.disruption_keywords' must be a list")
            self.disruption_keywords = [str(k) for k in keywords]

        refresh = toml_data.get("refresh", {})
        for key in (
            "refresh_ttl_seconds",
            "refresh_timeout_seconds",
            "per_source_timeout_seconds",
            "poll_interval_seconds",
        ):
            if key in refresh:
                value = float(refresh[key])
                if value <= 0:
                    raise ValueError(f"TOML config 'refresh.{key}' must be positive")
                setattr(self, key, value)

        return toml_data

    def get_stops_config(self) -> dict[str, dict[str, Any]]:
        """Parse and return the [stops.<mode>] tables from the TOML file."""
        stops = self._load_toml_data().get("stops", {})
        if not isinstance(stops, dict):
            raise ValueError("TOML config 'stops' must be a table of modes, e.g. [stops.train]")
        return stops

    def get_policy_config(self) -> dict[str, Any]:
        """Parse and return the [policy] table from the TOML file."""
        policy = self._load_toml_data().get("policy", {})
        if not isinstance(policy, dict):
            raise ValueError("TOML config 'policy' must be a table")
        return policy

    def get_journey_config(self) -> dict[str, Any]:
        """Parse and return the [journey] table from the TOML file."""
        journey = self._load_toml_data().get("journey", {})
        if not isinstance(journey, dict):
            raise ValueError("TOML config 'journey' must be a table")
        return journey
