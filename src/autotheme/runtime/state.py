"""Observable state cells shared between the scheduler and its observers.

Each cell owns one value, replaces it atomically and bumps a version
counter on every change, then notifies its listeners outside the lock.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import RLock
from typing import Any, Callable, Generic, List, Optional, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CellSnapshot(Generic[T]):
    """A value together with the version it was published under."""
    name: str
    value: T
    version: int
    last_changed: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        value = self.value
        if hasattr(value, "to_dict"):
            value = value.to_dict()
        elif hasattr(value, "value"):
            value = value.value
        return {
            "name": self.name,
            "value": value,
            "version": self.version,
            "last_changed": self.last_changed.isoformat(),
        }


class ObservableCell(Generic[T]):
    """Last-writer-wins value with change notification."""

    def __init__(self, name: str, initial: T):
        """Initialize cell.

        Args:
            name: Name used in logs and snapshots
            initial: Initial value (version 0)
        """
        self.name = name
        self._lock = RLock()
        self._snapshot: CellSnapshot[T] = CellSnapshot(name, initial, 0)
        self._listeners: List[Callable[[CellSnapshot, CellSnapshot], Any]] = []

    def get(self) -> T:
        """Get the current value."""
        with self._lock:
            return self._snapshot.value

    @property
    def version(self) -> int:
        with self._lock:
            return self._snapshot.version

    def snapshot(self) -> CellSnapshot[T]:
        """Get the current value with its version."""
        with self._lock:
            return self._snapshot

    def set(self, value: T, force_update: bool = False) -> bool:
        """Replace the value.

        Args:
            value: The new value
            force_update: If True, notify even when the value is unchanged

        Returns:
            True if the value changed
        """
        with self._lock:
            old = self._snapshot
            changed = old.value != value
            if not changed and not force_update:
                return False
            new = CellSnapshot(self.name, value, old.version + 1)
            self._snapshot = new
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(new, old)
            except Exception as e:
                # Log but don't fail on listener errors
                logger.error(f"Error in {self.name} listener: {e}")

        return changed

    def add_listener(self, callback: Callable[[CellSnapshot, CellSnapshot], Any]) -> None:
        """Add a change listener.

        Args:
            callback: Function to call on changes, signature:
                     callback(new: CellSnapshot, old: CellSnapshot)
        """
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def remove_listener(self, callback: Callable) -> bool:
        """Remove a change listener.

        Returns:
            True if removed, False if not found
        """
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)
                return True
            return False

    def __repr__(self) -> str:
        snap = self.snapshot()
        return f"ObservableCell({self.name}={snap.value!r}, v{snap.version})"


def optional_cell(name: str) -> "ObservableCell[Optional[Any]]":
    return ObservableCell(name, None)
