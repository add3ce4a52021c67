"""Main coordinator that ties all components together."""

from datetime import datetime
from typing import Any, Callable, Dict, Optional
import logging

from .core.mode import Mode
from .engine import SchedulerError, SchedulerSupervisor, ThemeDispatcher
from .platforms import (
    CommandThemePlatform,
    IPLocationProvider,
    MemoryThemePlatform,
    StaticLocationProvider,
)
from .runtime import AppContext
from .settings import AppConfig

logger = logging.getLogger(__name__)


def build_platform(config: AppConfig, dry_run: bool = False):
    if dry_run or config.platform.kind == "memory":
        return MemoryThemePlatform(theme=config.platform.initial, animate=config.scheduler.transition)
    return CommandThemePlatform(config.platform)


def build_provider(config: AppConfig):
    if config.location.provider == "ip":
        return IPLocationProvider(url=config.location.url, timeout=config.location.timeout)
    return StaticLocationProvider(config.location.coordinate())


class AutoThemeApp:
    """Owns the context, platform adapters, dispatcher and supervisor."""

    def __init__(
        self,
        config: AppConfig,
        start_time: Optional[datetime] = None,
        speed: float = 1.0,
        dry_run: bool = False,
        error_handler: Optional[Callable[[SchedulerError], None]] = None,
    ):
        """Initialize the app.

        Args:
            config: Validated configuration
            start_time: Initial clock time (default: current UTC time)
            speed: Time acceleration factor (default: 1.0 = real-time)
            dry_run: Keep the theme in memory instead of touching the host
            error_handler: Receives scheduler errors instead of ending the unit
        """
        self.config = config

        self.context = AppContext.create(
            location=config.location.coordinate(),
            mode=config.mode,
            start_time=start_time,
            speed=speed,
        )
        self.platform = build_platform(config, dry_run=dry_run)
        self.provider = build_provider(config)

        self.dispatcher = ThemeDispatcher(
            self.context,
            self.platform,
            transition=config.scheduler.transition,
        )
        self.supervisor = SchedulerSupervisor(
            self.context,
            self.dispatcher,
            self.provider,
            scheduler_config=config.scheduler,
            location_config=config.location,
            error_handler=error_handler,
            debug=config.debug,
        )

        self._running = False

        logger.info(f"Initialized with {self.platform.name} platform and {self.provider.name} location")

    def start(self) -> None:
        """Start the UI context and the supervisor."""
        if self._running:
            logger.warning("Already running")
            return

        self.context.ui.start()
        if self.config.scheduler.transition:
            self.dispatcher.warm_capability_probe()
        self.supervisor.start()
        self._running = True

    def stop(self) -> None:
        """Stop the supervisor, then drain the UI context."""
        if not self._running:
            return

        self.supervisor.stop()
        self.context.ui.stop()
        self._running = False

    def set_mode(self, mode: Mode) -> None:
        self.supervisor.set_mode(mode)

    def get_stats(self) -> Dict[str, Any]:
        """Summary of the current state for display."""
        stats = self.context.get_stats()
        stats.update({
            "running": self.supervisor.is_running(),
            "units_started": self.supervisor.units_started,
            "theme": self.platform.current_theme().value,
            "last_error": str(self.supervisor.last_error) if self.supervisor.last_error else None,
        })
        return stats
