"""Matcher Module - Location matching (geo distance, region lookup, fuzzy fallback)."""
from kindmatch.matcher.geo import haversine_km, EARTH_RADIUS_KM
from kindmatch.matcher.regions import RegionLookup
from kindmatch.matcher.location import OUTSIDE_RADIUS, LocationMatcher

__all__ = ['LocationMatcher', 'OUTSIDE_RADIUS', 'RegionLookup', 'haversine_km', 'EARTH_RADIUS_KM']
