from click.testing import CliRunner

from autotheme.cli.predict import main


def test_predict_prints_phase_and_deadline():
  result = CliRunner().invoke(main, ["--lat", "51.5074", "--lon", "-0.1278", "--at", "2025-06-21T12:00:00Z"])
  assert result.exit_code == 0, result.output
  assert "Phase:     day -> light" in result.output
  assert "Next wake: 2025-06-21T20:" in result.output


def test_predict_with_rate():
  result = CliRunner().invoke(main, ["--lat", "51.5074", "--lon", "-0.1278", "--at", "2025-06-21T23:00:00Z", "--rate", "2"])
  assert result.exit_code == 0, result.output
  assert "night -> dark" in result.output


def test_predict_polar_day_fails():
  result = CliRunner().invoke(main, ["--lat", "69.6492", "--lon", "18.9553", "--at", "2025-06-21T12:00:00Z"])
  assert result.exit_code == 1


def test_predict_rejects_invalid_coordinate():
  result = CliRunner().invoke(main, ["--lat", "95", "--lon", "0"])
  assert result.exit_code == 2
