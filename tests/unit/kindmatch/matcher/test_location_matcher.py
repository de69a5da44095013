#!/usr/bin/env python3
"""
Unit tests for LocationMatcher.

Covers the priority order: exact → geo radius → region → fuzzy → default.
"""

import unittest

from kindmatch.config_loader import LocationConfig
from kindmatch.matcher import LocationMatcher, haversine_km
from kindmatch.models import Coordinates
from tests import CEBU_CITY, MANDAUE, make_job, make_worker


class TestHaversine(unittest.TestCase):

    def test_01_zero_distance(self):
        self.assertEqual(haversine_km(CEBU_CITY, CEBU_CITY), 0.0)

    def test_02_cebu_to_mandaue(self):
        """Cebu City and Mandaue are roughly 4km apart."""
        distance = haversine_km(CEBU_CITY, MANDAUE)
        self.assertGreater(distance, 3.5)
        self.assertLess(distance, 5.0)

    def test_03_symmetric(self):
        manila = Coordinates(lat=14.5995, lng=120.9842)
        self.assertAlmostEqual(haversine_km(CEBU_CITY, manila), haversine_km(manila, CEBU_CITY))


class TestLocationMatcher(unittest.TestCase):

    def setUp(self):
        self.matcher = LocationMatcher(LocationConfig())

    def test_01_exact_match_is_case_insensitive(self):
        print("\n📍 UNIT Test 1: Exact location match")
        worker = make_worker(desired_locations=("cebu city",))
        job = make_job(location="  Cebu   City ")

        self.assertEqual(self.matcher.match(worker, job), 100)

    def test_02_exact_match_wins_over_distance(self):
        far_away = Coordinates(lat=7.1907, lng=125.4553)  # Davao
        worker = make_worker(coordinates=far_away, preferred_work_radius_km=5)
        job = make_job(location="Cebu City", coordinates=CEBU_CITY)

        self.assertEqual(self.matcher.match(worker, job), 100)

    def test_03_within_radius_scores_between_floor_and_max(self):
        print("\n📍 UNIT Test 3: Within radius")
        worker = make_worker(desired_locations=("Talamban",), coordinates=CEBU_CITY,
                             preferred_work_radius_km=10)
        job = make_job(location="Mandaue City", coordinates=MANDAUE)

        score = self.matcher.match(worker, job)

        self.assertGreaterEqual(score, 60)
        self.assertLess(score, 100)
        print(f"  ✓ Score at {haversine_km(CEBU_CITY, MANDAUE):.2f}km: {score}")

    def test_04_same_point_scores_max(self):
        worker = make_worker(desired_locations=(), coordinates=CEBU_CITY)
        job = make_job(location="Somewhere", coordinates=CEBU_CITY)

        self.assertEqual(self.matcher.match(worker, job), 100)

    def test_05_radius_boundary(self):
        """At exactly the radius the score is the floor; just beyond it is the flat penalty."""
        print("\n📍 UNIT Test 5: Radius boundary")
        distance = haversine_km(CEBU_CITY, MANDAUE)
        job = make_job(location="Mandaue City", coordinates=MANDAUE)

        at_boundary = make_worker(desired_locations=(), coordinates=CEBU_CITY,
                                  preferred_work_radius_km=distance)
        beyond = make_worker(desired_locations=(), coordinates=CEBU_CITY,
                             preferred_work_radius_km=distance / 1.01)

        self.assertEqual(self.matcher.match(at_boundary, job), 60)
        self.assertEqual(self.matcher.match(beyond, job), 30)

    def test_06_closer_is_never_worse(self):
        job = make_job(location="Mandaue City", coordinates=MANDAUE)
        scores = []
        for radius in (5, 10, 20, 40):
            worker = make_worker(desired_locations=(), coordinates=CEBU_CITY,
                                 preferred_work_radius_km=radius)
            scores.append(self.matcher.match(worker, job))

        self.assertEqual(scores, sorted(scores))

    def test_07_zero_radius_skips_distance(self):
        worker = make_worker(desired_locations=(), coordinates=CEBU_CITY, preferred_work_radius_km=0)
        job = make_job(location="Mandaue City", coordinates=MANDAUE)

        self.assertEqual(self.matcher.match(worker, job), 50)

    def test_08_region_field_match(self):
        print("\n📍 UNIT Test 8: Region fallback")
        worker = make_worker(desired_locations=("Cebu",))
        job = make_job(location="Tagbilaran City", region="Central Visayas (Region VII)")

        self.assertEqual(self.matcher.match(worker, job), 80)

    def test_09_same_region_through_province(self):
        worker = make_worker(desired_locations=("Cebu",))
        job = make_job(location="Tagbilaran City", province="Bohol")

        self.assertEqual(self.matcher.match(worker, job), 85)

    def test_10_same_region_through_location_parts(self):
        """Without a province the location's comma-separated parts are looked up."""
        worker = make_worker(desired_locations=("Mandaue City",))
        job = make_job(location="Poblacion, Dumaguete")

        self.assertEqual(self.matcher.match(worker, job), 85)

    def test_11_fuzzy_containment(self):
        print("\n📍 UNIT Test 11: Fuzzy fallback")
        worker = make_worker(desired_locations=("Barangay Lahug",))

        self.assertEqual(self.matcher.match(worker, make_job(location="Lahug")), 90)
        self.assertEqual(self.matcher.match(worker, make_job(location="Barangay Lahug Proper")), 90)

    def test_12_default_when_nothing_matches(self):
        worker = make_worker(desired_locations=("Cebu",))
        job = make_job(location="Davao City", province="Davao del Sur")

        self.assertEqual(self.matcher.match(worker, job), 50)

    def test_13_no_preferences_at_all(self):
        worker = make_worker(desired_locations=())
        job = make_job(location="")

        self.assertEqual(self.matcher.match(worker, job), 50)

    def test_14_configured_scores(self):
        matcher = LocationMatcher(LocationConfig(default_score=40, fuzzy_score=75))
        worker = make_worker(desired_locations=("Barangay Lahug",))

        self.assertEqual(matcher.match(worker, make_job(location="Lahug")), 75)
        self.assertEqual(matcher.match(worker, make_job(location="Somewhere Else")), 40)

    def test_15_outside_radius_flag(self):
        worker = make_worker(coordinates=CEBU_CITY, preferred_work_radius_km=1)

        self.assertTrue(self.matcher.is_outside_radius(worker, make_job(coordinates=MANDAUE)))
        self.assertFalse(self.matcher.is_outside_radius(worker, make_job(coordinates=CEBU_CITY)))
        self.assertFalse(self.matcher.is_outside_radius(worker, make_job(coordinates=None)))
        self.assertFalse(self.matcher.is_outside_radius(make_worker(), make_job(coordinates=MANDAUE)))


if __name__ == '__main__':
    unittest.main()
