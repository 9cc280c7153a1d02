"""Weather report domain model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class WeatherReport(BaseModel):
    """Current conditions shown next to the departures."""

    model_config = ConfigDict(frozen=True)

    temperature_celsius: float
    condition_label: str
    icon_key: str
    observed_at: datetime | None = None
