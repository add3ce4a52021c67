"""Location resolution with per-outcome retry policy."""

from datetime import timedelta
from enum import Enum
from threading import Event, Thread
from typing import Optional
import logging

from ..core.location import AuthorizationLevel, Coordinate
from ..runtime.context import AppContext

logger = logging.getLogger(__name__)


class ResolverState(Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    UNKNOWN = "unknown"
    DENIED = "denied"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


class LocationResolver:
    """Requests a coordinate until it is usable or the policy gives up.

    The resolver is the only writer of ``context.location``; every request
    outcome is published there, including the ``unknown``/``denied``
    sentinels it terminates with.
    """

    def __init__(
        self,
        context: AppContext,
        provider,
        authorization_level: Optional[AuthorizationLevel] = None,
        unknown_retry: Optional[timedelta] = None,
        denied_retry: Optional[timedelta] = None,
        interval: Optional[timedelta] = None,
        always_ask: bool = False,
    ):
        """Initialize resolver.

        Args:
            context: Shared context (clock and location cell)
            provider: LocationProvider answering requests
            authorization_level: Scope to request; None disables requests
            unknown_retry: Wait before re-requesting after ``unknown``
            denied_retry: Wait before re-requesting after ``denied``
            interval: Cadence of background refreshes after resolution
            always_ask: Check authorization before the first request
        """
        self.context = context
        self.provider = provider
        self.authorization_level = authorization_level
        self.unknown_retry = unknown_retry
        self.denied_retry = denied_retry
        self.interval = interval
        self.always_ask = always_ask
        self.state = ResolverState.IDLE
        self.requests = 0

    def _request(self) -> Coordinate:
        self.state = ResolverState.REQUESTING
        coordinate = self.provider.request(self.authorization_level)
        self.requests += 1
        self.context.location.set(coordinate)
        return coordinate

    def resolve(self, stop_event: Optional[Event] = None) -> Coordinate:
        """Request until a terminal outcome and return it.

        Args:
            stop_event: Cancels pending retry waits

        Returns:
            A valid coordinate, ``Coordinate.UNKNOWN`` or ``Coordinate.DENIED``;
            the caller's coordinate unchanged if no authorization level is set
        """
        if self.authorization_level is None:
            return self.context.location.get()

        stop_event = stop_event or Event()
        if self.always_ask:
            self.provider.check_authorization(self.authorization_level)

        while not stop_event.is_set():
            coordinate = self._request()

            if coordinate.is_valid:
                self.state = ResolverState.RESOLVED
                logger.info(f"Location resolved to {coordinate} after {self.requests} requests")
                return coordinate

            if coordinate.is_denied:
                retry, terminal = self.denied_retry, ResolverState.DENIED
            else:
                # unknown, or an out-of-range reading treated the same way
                retry, terminal = self.unknown_retry, ResolverState.UNKNOWN

            if retry is None:
                self.state = terminal
                logger.warning(f"Location {coordinate}, giving up after {self.requests} requests")
                return coordinate

            logger.info(f"Location {coordinate}, retrying in {retry.total_seconds():g}s")
            if not self.context.clock.wait(retry, stop_event):
                break

        self.state = ResolverState.CANCELLED
        return self.context.location.get()

    def refresh(self, stop_event: Event) -> None:
        """Re-request on the configured interval until cancelled."""
        if self.authorization_level is None or self.interval is None:
            return

        while self.context.clock.wait(self.interval, stop_event):
            coordinate = self._request()
            if coordinate.is_invalid:
                self.state = ResolverState.DENIED if coordinate.is_denied else ResolverState.UNKNOWN
                logger.warning(f"Location refresh returned {coordinate}")
            else:
                self.state = ResolverState.RESOLVED
                logger.debug(f"Location refreshed to {coordinate}")

    def start_refresh(self, stop_event: Event) -> Optional[Thread]:
        """Run :meth:`refresh` on a daemon thread, if an interval is set."""
        if self.authorization_level is None or self.interval is None:
            return None

        thread = Thread(target=self._refresh_safely, args=(stop_event,), name="autotheme-location", daemon=True)
        thread.start()
        return thread

    def _refresh_safely(self, stop_event: Event) -> None:
        try:
            self.refresh(stop_event)
        except Exception:
            logger.exception("Location refresh failed")
