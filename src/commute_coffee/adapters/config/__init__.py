"""Configuration adapters."""

from commute_coffee.adapters.config.app_config import AppConfig
from commute_coffee.adapters.config.journey_configuration_loader import JourneyConfigurationLoader
from commute_coffee.adapters.config.operating_policy_loader import OperatingPolicyLoader
from commute_coffee.adapters.config.stop_configuration_loader import StopConfigurationLoader

__all__ = [
    "AppConfig",
    "JourneyConfigurationLoader",
    "OperatingPolicyLoader",
    "StopConfigurationLoader",
]
