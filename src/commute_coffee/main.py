"""Main entry point for the commute coffee dashboard core."""

import asyncio
import logging
import sys
from dataclasses import dataclass

import aiohttp

from commute_coffee.adapters.cache import InterpolatingDepartureCache
from commute_coffee.adapters.clock import SystemClock
from commute_coffee.adapters.config import (
    AppConfig,
    JourneyConfigurationLoader,
    OperatingPolicyLoader,
    StopConfigurationLoader,
)
from commute_coffee.adapters.pollers import RefreshPoller
from commute_coffee.adapters.source_factory import DepartureSourceFactory
from commute_coffee.application.services import (
    DashboardService,
    DecisionEngine,
    DepartureAggregator,
    DisruptionClassifier,
    FallbackResolver,
    RefreshScheduler,
)
from commute_coffee.application.services.disruption_classifier import (
    DEFAULT_DISRUPTION_KEYWORDS,
)
from commute_coffee.domain.models.decision import DecisionThresholds
from commute_coffee.domain.models.journey_configuration import JourneyConfiguration
from commute_coffee.domain.models.operating_policy import OperatingPolicy
from commute_coffee.domain.models.stop_configuration import StopConfiguration
from commute_coffee.domain.models.transport_mode import TransportMode
from commute_coffee.domain.ports.clock import Clock

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure process-wide logging."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


@dataclass(frozen=True)
class LoadedConfiguration:
    """Domain configuration read from the TOML file."""

    stops: dict[TransportMode, StopConfiguration]
    policy: OperatingPolicy
    journey: JourneyConfiguration


@dataclass(frozen=True)
class Dashboard:
    """The wired core: the read service plus what keeps its cache fresh."""

    service: DashboardService
    scheduler: RefreshScheduler
    cache: InterpolatingDepartureCache
    poller: RefreshPoller


def load_configuration(config: AppConfig) -> LoadedConfiguration:
    """Load stops, policy and journey.

    Raises:
        ValueError: If the configuration is malformed.
        FileNotFoundError: If the configuration file does not exist.
    """
    return LoadedConfiguration(
        stops=StopConfigurationLoader.load(config),
        policy=OperatingPolicyLoader.load(config),
        journey=JourneyConfigurationLoader.load(config),
    )


def build_dashboard(
    config: AppConfig,
    loaded: LoadedConfiguration,
    session: aiohttp.ClientSession | None,
    clock: Clock | None = None,
) -> Dashboard:
    """Wire adapters and services into a dashboard."""
    clock = clock or SystemClock()

    timezone = loaded.policy.timezone
    schedule = DepartureSourceFactory.load_schedule(config, loaded.stops.values(), timezone)
    factory = DepartureSourceFactory(
        config, clock, session=session, schedule=schedule, timezone=timezone
    )

    resolver = FallbackResolver(
        factory.build(loaded.stops),
        clock,
        per_source_timeout_seconds=config.per_source_timeout_seconds,
    )
    aggregator = DepartureAggregator(
        resolver,
        loaded.stops,
        weather_provider=factory.build_weather_provider(),
        alert_provider=factory.build_alert_provider(),
    )
    cache = InterpolatingDepartureCache(
        clock,
        grace_minutes=config.departure_grace_minutes,
        max_shown=config.max_departures_shown,
    )
    scheduler = RefreshScheduler(
        cache,
        aggregator,
        clock,
        ttl_seconds=config.refresh_ttl_seconds,
        timeout_seconds=config.refresh_timeout_seconds,
    )
    decision_engine = DecisionEngine(
        loaded.policy,
        loaded.journey,
        DecisionThresholds(
            get_coffee_min_slack=config.get_coffee_min_slack,
            rush_min_slack=config.rush_min_slack,
        ),
    )
    classifier = DisruptionClassifier(config.disruption_keywords or DEFAULT_DISRUPTION_KEYWORDS)
    service = DashboardService(scheduler, cache, decision_engine, classifier, clock)
    poller = RefreshPoller(scheduler, config.poll_interval_seconds)
    return Dashboard(service=service, scheduler=scheduler, cache=cache, poller=poller)


async def main() -> None:
    """Main application entry point."""
    configure_logging()

    try:
        config = AppConfig()
        loaded = load_configuration(config)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        logger.error("Copy config.example.toml to config.toml and set CONFIG_FILE=config.toml.")
        sys.exit(1)

    tracked = ", ".join(
        f"{mode.value} {cfg.label or ','.join(cfg.stop_ids)}" for mode, cfg in loaded.stops.items()
    )
    logger.info(
        f"Tracking {tracked} for {loaded.policy.shop_name} ({loaded.journey.strategy.value})"
    )

    # One session for every upstream
    async with aiohttp.ClientSession() as session:
        clock = SystemClock()
        dashboard = build_dashboard(config, loaded, session, clock)
        await dashboard.poller.start()
        try:
            while True:
                await asyncio.sleep(config.poll_interval_seconds)
                snapshot = dashboard.service.build_snapshot(clock.now())
                logger.info(
                    f"{snapshot.decision.headline}: {snapshot.decision.rationale} "
                    f"({'live' if snapshot.is_live else 'scheduled'})"
                )
        finally:
            await dashboard.poller.stop()
            await dashboard.scheduler.close()


def run() -> None:
    """Synchronous entry point for the console script."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    run()
