"""Mode supervisor: owns the automatic-mode unit and swaps it on mode changes."""

from functools import partial
from threading import Event, RLock, Thread, current_thread
from typing import Callable, Optional
import logging

from ..core.mode import Mode
from ..runtime.context import AppContext
from ..runtime.state import CellSnapshot
from ..settings import LocationConfig, SchedulerConfig
from .dispatcher import ThemeDispatcher
from .errors import ScriptError, SchedulerError
from .resolver import LocationResolver
from .scheduler import DeadlineScheduler

logger = logging.getLogger(__name__)


class AutoUnit:
    """Handle to one running resolver + scheduler pair."""

    def __init__(self, generation: int):
        self.generation = generation
        self.stop_event = Event()
        self.thread: Optional[Thread] = None
        self.refresh_thread: Optional[Thread] = None
        self.resolver: Optional[LocationResolver] = None
        self.scheduler: Optional[DeadlineScheduler] = None

    def is_alive(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def cancel(self, timeout: float, join: bool = True) -> None:
        self.stop_event.set()
        if not join:
            return
        for thread in (self.thread, self.refresh_thread):
            if thread is not None and thread is not current_thread():
                thread.join(timeout=timeout)
                if thread.is_alive():
                    logger.warning(f"{thread.name} did not stop within {timeout}s")


class SchedulerSupervisor:
    """Keeps at most one automatic unit alive for the current mode."""

    def __init__(
        self,
        context: AppContext,
        dispatcher: ThemeDispatcher,
        provider,
        scheduler_config: Optional[SchedulerConfig] = None,
        location_config: Optional[LocationConfig] = None,
        error_handler: Optional[Callable[[SchedulerError], None]] = None,
        debug: bool = False,
        join_timeout: float = 5.0,
    ):
        """Initialize supervisor.

        Args:
            context: Shared context; its mode cell drives the supervisor
            dispatcher: Theme dispatcher used in every mode
            provider: LocationProvider for the resolver
            scheduler_config: Rate/interval/intensity settings
            location_config: Authorization level and retry policy
            error_handler: Receives scheduler errors; without one they end
                the unit and are logged as failures
            debug: Re-raise failures on the unit thread after logging
            join_timeout: How long to wait for a cancelled unit to exit
        """
        self.context = context
        self.dispatcher = dispatcher
        self.provider = provider
        self.scheduler_config = scheduler_config or SchedulerConfig()
        self.location_config = location_config or LocationConfig()
        self.error_handler = error_handler
        self.debug = debug
        self.join_timeout = join_timeout
        self.last_error: Optional[Exception] = None
        self.units_started = 0
        self._unit: Optional[AutoUnit] = None
        self._applied: Optional[Mode] = None
        self._lock = RLock()
        self._started = False

    @property
    def mode(self) -> Mode:
        return self.context.mode.get()

    def start(self) -> None:
        """Bind to the mode cell and enter the current mode."""
        with self._lock:
            if self._started:
                logger.warning("Supervisor already started")
                return
            self._started = True
            self.context.mode.add_listener(self._on_mode_change)
            logger.info(f"Supervisor started in {self.mode.value} mode")
            self._apply(self.mode)

    def stop(self) -> None:
        """Cancel the automatic unit and unbind from the mode cell."""
        with self._lock:
            if not self._started:
                return
            self.context.mode.remove_listener(self._on_mode_change)
            self._stop_unit()
            self._started = False
            self._applied = None
            logger.info("Supervisor stopped")

    def set_mode(self, mode: Mode) -> None:
        """Switch mode; a value equal to the current one is ignored."""
        self.context.mode.set(Mode(mode))

    def set_transition(self, transition: bool) -> None:
        """Enable or disable animated transitions."""
        changed = self.dispatcher.transition != transition
        self.dispatcher.transition = transition
        if changed and transition:
            self.dispatcher.warm_capability_probe()

    def recompute(self) -> None:
        """Restart the automatic unit, e.g. after a reported scheduler error."""
        with self._lock:
            if not self._started or self.mode is not Mode.AUTO:
                return
            logger.info("Recomputing schedule")
            self._stop_unit()
            self._start_unit()

    def is_running(self) -> bool:
        """True while an automatic unit is alive."""
        with self._lock:
            return self._unit is not None and self._unit.is_alive()

    def _on_mode_change(self, new: CellSnapshot, old: CellSnapshot) -> None:
        logger.info(f"Mode changed from {old.value.value} to {new.value.value}")
        with self._lock:
            # Listeners of concurrent writers may arrive out of order.
            mode = self.mode
            if self._started and mode is not self._applied:
                self._apply(mode)

    def _apply(self, mode: Mode) -> None:
        self._applied = mode
        self._stop_unit()
        if mode is Mode.AUTO:
            self._start_unit()
        else:
            try:
                self.dispatcher.apply(mode)
            except ScriptError as e:
                self.last_error = e

    def _start_unit(self) -> None:
        self.units_started += 1
        unit = AutoUnit(self.units_started)
        unit.thread = Thread(
            target=self._run_unit,
            args=(unit,),
            name=f"autotheme-auto-{unit.generation}",
            daemon=True,
        )
        self._unit = unit
        unit.thread.start()
        logger.debug(f"Automatic unit {unit.generation} started")

    def _stop_unit(self) -> None:
        unit, self._unit = self._unit, None
        if unit is not None:
            # The unit may be waiting on the UI thread; joining from it would stall both.
            unit.cancel(self.join_timeout, join=not self.context.ui.on_ui_thread())
            logger.debug(f"Automatic unit {unit.generation} stopped")

    def _on_scheduler_error(self, error: SchedulerError) -> None:
        self.last_error = error
        logger.error(f"{error} (location {self.context.location.get()}, time {self.context.clock.now().isoformat()})")
        if self.error_handler is not None:
            self.error_handler(error)

    def _run_unit(self, unit: AutoUnit) -> None:
        cfg = self.location_config
        unit.resolver = LocationResolver(
            self.context,
            self.provider,
            authorization_level=cfg.authorization,
            unknown_retry=cfg.unknown_retry,
            denied_retry=cfg.denied_retry,
            interval=cfg.refresh_interval,
            always_ask=cfg.always_ask,
        )
        unit.scheduler = DeadlineScheduler(
            self.context,
            partial(self.dispatcher.auto_action, stop_event=unit.stop_event),
            config=self.scheduler_config,
            error_handler=self._on_scheduler_error if self.error_handler is not None else None,
        )
        try:
            if self.context.location.get().is_invalid:
                unit.resolver.resolve(unit.stop_event)
            if unit.stop_event.is_set():
                return
            if self.context.location.get().is_valid:
                unit.refresh_thread = unit.resolver.start_refresh(unit.stop_event)
            unit.scheduler.run(unit.stop_event)
        except Exception as e:
            self.last_error = e
            logger.exception(f"Automatic mode failed at {self.context.clock.now().isoformat()} "
                             f"with location {self.context.location.get()}")
            if self.debug:
                raise
