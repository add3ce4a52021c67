import sys
from datetime import datetime, timedelta, timezone

import click

from ..core.location import Coordinate
from ..core.mode import Mode
from ..core.solar import SolarPredictor
from ..engine.errors import InvalidDeadline
from ..engine.scheduler import intensity_at, next_deadline


@click.command()
@click.option("--lat", required=True, type=float)
@click.option("--lon", required=True, type=float)
@click.option("--at", "at", type=str, help="ISO timestamp (default: now)")
@click.option("--rate", type=click.IntRange(min=1))
@click.option("--interval", type=click.FloatRange(min=0, min_open=True), help="Seconds")
def main(lat, lon, at, rate, interval):
  coordinate = Coordinate(lat, lon)
  if coordinate.is_invalid:
    click.echo(f"ERROR: invalid coordinate {lat}, {lon}", err=True)
    sys.exit(2)
  now = datetime.fromisoformat(at.replace("Z", "+00:00")) if at else datetime.now(timezone.utc)
  if now.tzinfo is None:
    now = now.astimezone()
  predictions = SolarPredictor().predict(now, coordinate)
  if not predictions.is_usable:
    click.echo(f"ERROR: no sunrise/sunset at {coordinate} around {now.isoformat()}", err=True)
    sys.exit(1)
  tz = now.tzinfo
  deadline = next_deadline(now, predictions, rate, timedelta(seconds=interval) if interval else None)
  click.echo(f"Sunrise:   {predictions.sunrise.astimezone(tz).isoformat()}")
  click.echo(f"Sunset:    {predictions.sunset.astimezone(tz).isoformat()}")
  click.echo(f"Phase:     {'day' if predictions.is_daytime else 'night'} -> {Mode.for_daytime(predictions.is_daytime).value}")
  click.echo(f"Next wake: {deadline.astimezone(tz).isoformat()} (in {deadline - now})")
  click.echo(f"Intensity: {intensity_at(now, predictions):.3f}")
  error = InvalidDeadline.check(deadline, now)
  if error is not None:
    click.echo(f"WARNING: {error}")


if __name__ == "__main__":
  main()
