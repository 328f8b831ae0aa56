import numpy as np

from cutpursuit.utils.selection import (
    ranked_median,
    ranked_weighted_median,
    sort_median,
    sort_weighted_median,
    weighted_median,
)


def test_weighted_median_first_value_reaching_half_weight():
    values = np.array([3.0, 1.0, 2.0])
    assert weighted_median(values, [1.0, 1.0, 1.0]) == 2.0
    assert weighted_median(values, [10.0, 1.0, 1.0]) == 3.0
    assert weighted_median(values, [1.0, 1.0, 0.0]) == 1.0


def test_unweighted_median_is_upper_median():
    assert weighted_median([4.0, 1.0, 3.0, 2.0]) == 3.0
    assert weighted_median([5.0]) == 5.0


def test_sort_then_ranked_agree_and_sort_in_place():
    values = np.array([0.5, -1.0, 2.0, 7.0, 0.0])
    weights = np.array([1.0, 2.0, 1.0, 0.5, 1.0])
    comp_list = np.array([9, 4, 0, 1, 2, 3], dtype=np.int64)
    segment = comp_list[2:]
    threshold = 0.5 * weights[segment].sum()

    first = sort_weighted_median(segment, values, weights, threshold)
    assert list(comp_list[:2]) == [9, 4]
    assert np.all(np.diff(values[comp_list[2:]]) >= 0.0)
    assert ranked_weighted_median(segment, values, weights, threshold) == first

    # upper median of [-1, 0.5, 2, 7]
    assert sort_median(segment, values) == ranked_median(segment, values) == 2.0
