# algorithms/mcdm.py
import logging
from datetime import date

import numpy as np

from algorithms.blood_compatibility import get_blood_compatibility_score

logger = logging.getLogger(__name__)

# distance, compatibility, donation count, recency (must sum to 1)
CRITERIA_WEIGHTS = np.array([0.3, 0.3, 0.2, 0.2])

# True = larger is better
CRITERIA_BENEFIT = np.array([False, True, True, True])

# Used when a donor has no coordinates
UNKNOWN_DISTANCE_KM = 50.0
RECENCY_CAP_DAYS = 90


def rank_donors_mcdm(donors, distances, required_blood_type, today=None):
    """
    Rank donors using the TOPSIS multi-criteria method

    Criteria:
    1. Distance (minimize)
    2. Blood compatibility (maximize)
    3. Donation count (maximize)
    4. Days since last donation, capped at 90 (maximize)

    Args:
        donors: iterable of DonorProfile-like objects
        distances: dict donor_id -> km (None or missing = unknown)
        required_blood_type: blood type of the request
        today: reference date for recency (defaults to date.today())

    Returns:
        List of (donor, score) tuples, best first. Scores are in [0, 1].
    """
    donor_list = list(donors) if donors is not None else []
    if not donor_list:
        return []
    if len(donor_list) == 1:
        return [(donor_list[0], 1.0)]

    today = today or date.today()
    matrix = np.array(
        [_criteria_row(donor, distances, required_blood_type, today) for donor in donor_list],
        dtype=float,
    )

    weighted = normalize_matrix(matrix) * CRITERIA_WEIGHTS

    column_max = weighted.max(axis=0)
    column_min = weighted.min(axis=0)
    ideal = np.where(CRITERIA_BENEFIT, column_max, column_min)
    negative_ideal = np.where(CRITERIA_BENEFIT, column_min, column_max)

    d_positive = np.sqrt(((weighted - ideal) ** 2).sum(axis=1))
    d_negative = np.sqrt(((weighted - negative_ideal) ** 2).sum(axis=1))
    separation = d_positive + d_negative

    # Every donor identical on every criterion -> no preference
    scores = np.divide(
        d_negative, separation,
        out=np.full(len(donor_list), 0.5),
        where=separation > 0,
    )

    ranked = [(donor, float(score)) for donor, score in zip(donor_list, scores)]
    # Stable: ties keep the input order
    ranked.sort(key=lambda item: item[1], reverse=True)

    logger.debug(f"TOPSIS ranked {len(ranked)} donors for {required_blood_type}")
    return ranked


def _criteria_row(donor, distances, required_blood_type, today):
    distance = distances.get(donor.id)
    if distance is None:
        distance = UNKNOWN_DISTANCE_KM

    if donor.last_donation_date:
        days_since = min((today - donor.last_donation_date).days, RECENCY_CAP_DAYS)
    else:
        days_since = RECENCY_CAP_DAYS  # Never donated = best recency

    return [
        distance,
        get_blood_compatibility_score(donor.blood_type, required_blood_type),
        donor.donation_count or 0,
        days_since,
    ]


def normalize_matrix(matrix):
    """
    Vector-normalize each column; all-zero columns stay zero
    """
    if matrix.size == 0:
        return matrix

    norms = np.sqrt((matrix ** 2).sum(axis=0))
    return np.divide(matrix, norms, out=np.zeros_like(matrix, dtype=float), where=norms > 0)
