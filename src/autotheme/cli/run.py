"""CLI command to run the automatic theme scheduler."""

from datetime import datetime
from threading import Event
import logging

import click

from ..app import AutoThemeApp
from ..core.mode import Mode
from ..settings import load_config

logger = logging.getLogger(__name__)


def _echo_predictions(new, old):
    predictions = new.value
    if predictions is None:
        click.echo("🌫  Predictions unavailable")
        return
    sunrise = predictions.sunrise.astimezone().strftime("%H:%M")
    sunset = predictions.sunset.astimezone().strftime("%H:%M")
    phase = "day" if predictions.is_daytime else "night"
    click.echo(f"☀️  sunrise {sunrise} / sunset {sunset} ({phase})")


def _echo_intensity(new, old):
    if new.value is None:
        click.echo("🌗 Intensity: undetermined")
    else:
        click.echo(f"🌗 Intensity: {new.value:.2f}")


@click.command()
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Configuration file path (default: $AUTOTHEME_CONFIG or packaged default)",
)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in Mode]),
    help="Override the configured mode",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Keep the theme in memory instead of changing the system theme",
)
@click.option(
    "--speed",
    default=1.0,
    type=float,
    help="Time acceleration factor (default: 1.0 = real-time)",
)
@click.option(
    "--start-time",
    type=str,
    help="Initial clock time (ISO format, default: current time)",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: INFO)",
)
def main(config, mode, dry_run, speed, start_time, log_level):
    """Switch the system theme at sunrise and sunset.

    Runs until interrupted. In auto mode the location is resolved first,
    then the theme follows the sun; in light or dark mode the theme is set
    once.

    Examples:
        # Follow the sun with the packaged defaults
        autotheme-run

        # Watch a day go by in about 15 minutes without touching the system
        autotheme-run --dry-run --speed 96 --log-level debug
    """
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        cfg = load_config(config)
    except Exception as e:
        click.echo(f"❌ Error loading configuration: {e}", err=True)
        logger.exception("Configuration error")
        raise SystemExit(1)

    if mode:
        cfg.mode = Mode(mode)

    start_dt = None
    if start_time:
        try:
            start_dt = datetime.fromisoformat(start_time.replace("Z", "+00:00"))
        except ValueError as e:
            click.echo(f"❌ Error parsing start time: {e}", err=True)
            raise SystemExit(1)
        click.echo(f"📅 Start time: {start_dt.isoformat()}")

    def report(error):
        click.echo(f"⚠️  {error}", err=True)

    app = AutoThemeApp(cfg, start_time=start_dt, speed=speed, dry_run=dry_run, error_handler=report)
    app.context.predictions.add_listener(_echo_predictions)
    app.context.intensity.add_listener(_echo_intensity)

    click.echo(f"🎨 Mode: {cfg.mode.value}")
    click.echo(f"⚡ Speed: {speed}x")
    click.echo(f"📍 Location: {app.context.location.get()} ({app.provider.name})")
    if dry_run:
        click.echo("🧪 Dry run: system theme is left untouched")
    click.echo()
    click.echo("Press Ctrl+C to stop...")

    app.start()
    try:
        Event().wait()
    except KeyboardInterrupt:
        click.echo("\n🛑 Shutting down...")
    finally:
        app.stop()
        click.echo("✅ Scheduler stopped")


if __name__ == "__main__":
    main()
