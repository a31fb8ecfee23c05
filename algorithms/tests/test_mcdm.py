from datetime import date, timedelta
from types import SimpleNamespace

import numpy as np
from django.test import SimpleTestCase

from algorithms.mcdm import normalize_matrix, rank_donors_mcdm

TODAY = date(2024, 6, 1)


def donor(donor_id, blood_type, donation_count=0, last_donation_date=None):
    return SimpleNamespace(
        id=donor_id,
        blood_type=blood_type,
        donation_count=donation_count,
        last_donation_date=last_donation_date,
    )


class RankDonorsTests(SimpleTestCase):
    def test_empty_and_single(self):
        self.assertEqual(rank_donors_mcdm([], {}, 'A+'), [])

        only = donor(1, 'A+')
        self.assertEqual(rank_donors_mcdm([only], {1: 3.0}, 'A+'), [(only, 1.0)])

    def test_dominant_donor_ranks_first(self):
        near = donor(1, 'A+', donation_count=5)
        far = donor(2, 'O-', donation_count=0, last_donation_date=TODAY - timedelta(days=10))

        ranked = rank_donors_mcdm([far, near], {1: 2.0, 2: 40.0}, 'A+', today=TODAY)

        self.assertIs(ranked[0][0], near)
        self.assertAlmostEqual(ranked[0][1], 1.0)
        self.assertAlmostEqual(ranked[1][1], 0.0)

    def test_identical_donors_keep_input_order(self):
        first = donor(1, 'A+')
        second = donor(2, 'A+')

        ranked = rank_donors_mcdm([first, second], {1: 5.0, 2: 5.0}, 'A+', today=TODAY)

        self.assertEqual([item[0] for item in ranked], [first, second])
        self.assertEqual([item[1] for item in ranked], [0.5, 0.5])

    def test_unknown_distance_ranks_behind_nearby_donor(self):
        located = donor(1, 'A+')
        unlocated = donor(2, 'A+')

        ranked = rank_donors_mcdm([unlocated, located], {1: 1.0}, 'A+', today=TODAY)

        self.assertIs(ranked[0][0], located)


class NormalizeMatrixTests(SimpleTestCase):
    def test_columns_have_unit_norm_and_zero_columns_stay_zero(self):
        matrix = np.array([[3.0, 0.0], [4.0, 0.0]])

        normalized = normalize_matrix(matrix)

        np.testing.assert_allclose(normalized[:, 0], [0.6, 0.8])
        np.testing.assert_array_equal(normalized[:, 1], [0.0, 0.0])
