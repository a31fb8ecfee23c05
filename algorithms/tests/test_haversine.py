from django.test import SimpleTestCase

from algorithms.haversine import distance_between, haversine_distance


class HaversineTests(SimpleTestCase):
    def test_same_point_is_zero(self):
        self.assertEqual(haversine_distance(27.7172, 85.3240, 27.7172, 85.3240), 0)

    def test_one_degree_of_latitude(self):
        self.assertAlmostEqual(haversine_distance(0, 0, 1, 0), 111.19, places=2)

    def test_missing_coordinates(self):
        self.assertIsNone(distance_between(27.7, 85.3, None, 85.3))
        self.assertIsNone(distance_between(None, None, 27.7, 85.3))
