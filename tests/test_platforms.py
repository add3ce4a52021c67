import sys
from threading import Event

import pytest
import requests

from autotheme.core.location import AuthorizationLevel, Coordinate
from autotheme.core.mode import Mode
from autotheme.engine.dispatcher import DispatchResult, ThemeDispatcher
from autotheme.engine.errors import ScriptError
from autotheme.engine.scheduler import DeadlineScheduler
from autotheme.platforms.command import CommandThemePlatform
from autotheme.platforms.location import IPLocationProvider, StaticLocationProvider
from autotheme.settings import PlatformConfig

from conftest import make_context, utc

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX shell commands")


def test_query_reads_dark_theme():
  platform = CommandThemePlatform(PlatformConfig(query="echo \"'prefer-dark'\"", dark_output="prefer-dark"))
  assert platform.current_theme() is Mode.DARK
  assert CommandThemePlatform(PlatformConfig(query="echo Dark")).current_theme() is Mode.DARK


@pytest.mark.parametrize("output", ["'default'", "'prefer-light'", "'prefer-dark-high-contrast'"])
def test_query_needs_the_exact_dark_value(output):
  config = PlatformConfig(query=f"echo \"{output}\"", dark_output="prefer-dark")
  assert CommandThemePlatform(config).current_theme() is Mode.LIGHT


def test_failing_query_means_light():
  platform = CommandThemePlatform(PlatformConfig(query="sh -c 'exit 1'"))
  assert platform.current_theme() is Mode.LIGHT


def test_script_failure_surfaces_stderr():
  platform = CommandThemePlatform(PlatformConfig(set_dark="sh -c 'echo not allowed >&2; exit 3'"))
  with pytest.raises(ScriptError) as exc:
    platform.run_script(Mode.DARK)
  assert exc.value.message == "not allowed"


def test_missing_command_is_a_script_error():
  platform = CommandThemePlatform(PlatformConfig(set_light="autotheme-no-such-command"))
  with pytest.raises(ScriptError):
    platform.run_script(Mode.LIGHT)


def test_animated_failures_are_script_errors():
  failing = CommandThemePlatform(PlatformConfig(animate_dark="sh -c 'echo no cross-fade >&2; exit 4'"))
  with pytest.raises(ScriptError) as exc:
    failing.set_animated(Mode.DARK)
  assert exc.value.message == "no cross-fade"

  with pytest.raises(ScriptError):
    CommandThemePlatform(PlatformConfig(animate_light="sleep 5", timeout=0.2)).set_animated(Mode.LIGHT)
  with pytest.raises(ScriptError):
    CommandThemePlatform(PlatformConfig(animate_light="autotheme-no-such-command")).set_animated(Mode.LIGHT)


def test_hung_animation_does_not_end_the_loop():
  config = PlatformConfig(query="echo dark", animate_light="sleep 5", animate_dark="true", set_light="true", timeout=0.2)
  ctx = make_context(utc(2025, 3, 1, 12))
  dispatcher = ThemeDispatcher(ctx, CommandThemePlatform(config), transition=True)
  stop = Event()
  ctx.clock.on_wait = lambda target: stop.set()

  DeadlineScheduler(ctx, dispatcher.auto_action).run(stop)

  assert dispatcher.last_result is DispatchResult.SCRIPTED
  assert dispatcher.last_error is None
  assert len(ctx.clock.waits) == 1


def test_animation_needs_commands_and_probe():
  assert not CommandThemePlatform(PlatformConfig()).can_animate()
  cfg = PlatformConfig(animate_light="true", animate_dark="true", probe="sh -c 'exit 1'")
  assert not CommandThemePlatform(cfg).can_animate()
  assert CommandThemePlatform(cfg.model_copy(update={"probe": "true"})).can_animate()


def test_static_provider():
  provider = StaticLocationProvider(Coordinate(1.0, 2.0))
  assert provider.request(AuthorizationLevel.ALWAYS) == Coordinate(1.0, 2.0)


class FakeResponse:
  def __init__(self, status_code, payload):
    self.status_code = status_code
    self.payload = payload

  def raise_for_status(self):
    if self.status_code >= 400:
      raise requests.HTTPError(f"HTTP {self.status_code}")

  def json(self):
    return self.payload


@pytest.mark.parametrize("status, payload, expected", [
  (200, {"loc": "51.5074,-0.1278"}, Coordinate(51.5074, -0.1278)),
  (403, {}, Coordinate.DENIED),
  (500, {}, Coordinate.UNKNOWN),
  (200, {"city": "nowhere"}, Coordinate.UNKNOWN),
])
def test_ip_provider_maps_responses(monkeypatch, status, payload, expected):
  monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse(status, payload))
  assert IPLocationProvider().request(AuthorizationLevel.ALWAYS) == expected


def test_ip_provider_network_error_is_unknown(monkeypatch):
  def fail(url, timeout):
    raise requests.ConnectionError("offline")

  monkeypatch.setattr(requests, "get", fail)
  assert IPLocationProvider().request(AuthorizationLevel.ALWAYS) == Coordinate.UNKNOWN
