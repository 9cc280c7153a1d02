"""Operating policy loader."""

from datetime import date, datetime, time
from typing import Any

from commute_coffee.adapters.config.app_config import AppConfig
from commute_coffee.domain.models.operating_policy import OpeningHours, OperatingPolicy

DEFAULT_SHOP_NAME = "Norman"
DEFAULT_WEEKDAY_HOURS = {"opens": "07:00", "closes": "16:00"}
DEFAULT_WEEKEND_HOURS = {"opens": "08:00", "closes": "16:00"}


def parse_clock_time(value: Any, setting: str) -> time:
    """Parse an "HH:MM" string or a TOML local time.

    Raises:
        ValueError: If the value is not a time of day.
    """
    if isinstance(value, time):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%H:%M").time()
    except ValueError as e:
        raise ValueError(f"Policy setting '{setting}' must be HH:MM, got {value!r}") from e


def parse_holiday(value: Any) -> date:
    """Parse a holiday given as a TOML date or an ISO date string."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise ValueError(f"Holiday must be an ISO date, got {value!r}") from e


class OperatingPolicyLoader:
    """Loads the coffee shop's operating policy from app config."""

    @staticmethod
    def load(config: AppConfig) -> OperatingPolicy:
        """Load the operating policy. Missing settings use the defaults.

        Raises:
            ValueError: If hours, buffer, timezone or holidays are malformed.
        """
        return OperatingPolicyLoader.parse(config.get_policy_config(), config.timezone)

    @staticmethod
    def parse(policy_data: dict[str, Any], default_timezone: str) -> OperatingPolicy:
        """Parse a [policy] table."""
        weekday = policy_data.get("weekday", DEFAULT_WEEKDAY_HOURS)
        weekend = policy_data.get("weekend", DEFAULT_WEEKEND_HOURS)
        holidays = policy_data.get("holidays", [])
        if not isinstance(holidays, list):
            raise ValueError("Policy setting 'holidays' must be a list")
        try:
            buffer = int(policy_data.get("closing_buffer_minutes", 15))
        except (TypeError, ValueError) as e:
            raise ValueError("Policy setting 'closing_buffer_minutes' must be a number") from e

        return OperatingPolicy(
            shop_name=str(policy_data.get("shop_name", DEFAULT_SHOP_NAME)),
            weekday_hours=OperatingPolicyLoader._hours(weekday, "weekday"),
            weekend_hours=OperatingPolicyLoader._hours(weekend, "weekend"),
            closing_buffer_minutes=buffer,
            timezone=str(policy_data.get("timezone", default_timezone)),
            holidays=frozenset(parse_holiday(h) for h in holidays),
        )

    @staticmethod
    def _hours(hours_data: Any, day_class: str) -> OpeningHours:
        if not isinstance(hours_data, dict) or "opens" not in hours_data or "closes" not in hours_data:
            raise ValueError(f"[policy.{day_class}] needs 'opens' and 'closes'")
        return OpeningHours(
            opens=parse_clock_time(hours_data["opens"], f"{day_class}.opens"),
            closes=parse_clock_time(hours_data["closes"], f"{day_class}.closes"),
        )
