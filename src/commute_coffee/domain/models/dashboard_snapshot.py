"""Dashboard snapshot handed to the renderer."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from commute_coffee.domain.models.decision import Decision
from commute_coffee.domain.models.service_alert import ServiceAlert
from commute_coffee.domain.models.upcoming_departure import UpcomingDeparture
from commute_coffee.domain.models.weather_report import WeatherReport


class DashboardSnapshot(BaseModel):
    """Read-only view of the current departures, weather and decision."""

    model_config = ConfigDict(frozen=True)

    generated_at: datetime
    trains: list[UpcomingDeparture] = Field(default_factory=list)
    trams: list[UpcomingDeparture] = Field(default_factory=list)
    weather: WeatherReport | None = None
    alerts: list[ServiceAlert] = Field(default_factory=list)
    decision: Decision
    last_fetch_at: datetime | None = None
    is_live: bool = False
