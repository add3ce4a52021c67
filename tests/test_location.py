import math

import pytest

from autotheme.core.location import AuthorizationLevel, Coordinate


def test_sentinels_are_invalid():
  assert Coordinate.UNKNOWN.is_unknown and Coordinate.UNKNOWN.is_invalid
  assert Coordinate.DENIED.is_denied and Coordinate.DENIED.is_invalid
  assert not Coordinate.UNKNOWN.is_denied
  assert str(Coordinate.DENIED) == "denied"


@pytest.mark.parametrize("x, y", [(91.0, 0.0), (-90.5, 10.0), (0.0, 180.5), (math.nan, 0.0), (0.0, math.inf)])
def test_out_of_domain_coordinates_are_invalid(x, y):
  assert Coordinate(x, y).is_invalid


def test_ordinary_coordinate_is_valid():
  c = Coordinate(-33.8688, 151.2093)
  assert c.is_valid
  assert not c.is_unknown and not c.is_denied
  assert (c.latitude, c.longitude) == (-33.8688, 151.2093)
  assert c.to_dict() == {"latitude": -33.8688, "longitude": 151.2093}


def test_authorization_levels_are_ordered():
  assert AuthorizationLevel.WHEN_IN_USE < AuthorizationLevel.ALWAYS
  assert AuthorizationLevel.parse("when-in-use") is AuthorizationLevel.WHEN_IN_USE
  assert AuthorizationLevel.parse("Always") is AuthorizationLevel.ALWAYS
  assert AuthorizationLevel.parse(2) is AuthorizationLevel.ALWAYS
