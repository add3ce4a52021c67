"""Theme platform driven by configured shell commands (osascript, gsettings, ...)."""

from typing import Optional
import logging
import shlex
import subprocess

from ..core.mode import Mode
from ..engine.errors import ScriptError
from ..settings import PlatformConfig
from .base import ThemePlatform

logger = logging.getLogger(__name__)


class CommandThemePlatform(ThemePlatform):
    """Runs one command per primitive; failures surface the command's stderr."""

    name = "command"

    def __init__(self, config: PlatformConfig):
        self.config = config

    def _run(self, command: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            shlex.split(command),
            capture_output=True,
            text=True,
            timeout=self.config.timeout,
        )

    def current_theme(self) -> Mode:
        if not self.config.query:
            return Mode.LIGHT
        try:
            result = self._run(self.config.query)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Theme query failed, assuming light: {e}")
            return Mode.LIGHT
        # `defaults read` exits non-zero when no dark style is set.
        if result.returncode != 0:
            return Mode.LIGHT
        value = result.stdout.strip().strip("\"'").lower()
        return Mode.DARK if value == self.config.dark_output.lower() else Mode.LIGHT

    def _animate_command(self, theme: Mode) -> Optional[str]:
        return self.config.animate_dark if theme is Mode.DARK else self.config.animate_light

    def can_animate(self) -> bool:
        if not (self.config.animate_light and self.config.animate_dark):
            return False
        if not self.config.probe:
            return True
        try:
            return self._run(self.config.probe).returncode == 0
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"Capability probe failed: {e}")
            return False

    def _execute(self, command: Optional[str], what: str) -> None:
        if not command:
            raise ScriptError(f"no {what} configured")
        try:
            result = self._run(command)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ScriptError(str(e)) from e
        if result.returncode != 0:
            raise ScriptError(result.stderr.strip() or f"{what} exited with status {result.returncode}")

    def set_animated(self, theme: Mode) -> None:
        self._execute(self._animate_command(theme), f"animated {theme.value} command")

    def run_script(self, theme: Mode) -> None:
        command = self.config.set_dark if theme is Mode.DARK else self.config.set_light
        self._execute(command, f"{theme.value} script")
