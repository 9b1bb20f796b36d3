import math

import pytest

from mbsubtype.subtypes import candidate_subtypes, is_match, normalize_pathology_subtype


@pytest.mark.parametrize(
    "label, expected",
    [
        ("non-WNT", "SHH,Group3,Group4"),
        ("Group 3 or 4", "Group3,Group4"),
        ("SHH", "SHH"),
        ("Group 3", "Group3"),
        ("to be classified", "tobeclassified"),
    ],
)
def test_normalize_pathology_subtype(label, expected):
    assert normalize_pathology_subtype(label) == expected


@pytest.mark.parametrize("label", ["non-WNT", "Group 3 or 4", " WNT ", "some free text"])
def test_normalized_labels_never_contain_spaces(label):
    assert " " not in normalize_pathology_subtype(label)


@pytest.mark.parametrize("missing", [None, math.nan])
def test_missing_label_stays_missing(missing):
    assert normalize_pathology_subtype(missing) is None


def test_candidate_subtypes_splits_on_commas():
    assert candidate_subtypes("SHH,Group3,Group4") == {"SHH", "Group3", "Group4"}
    assert candidate_subtypes("SHH") == {"SHH"}
    assert candidate_subtypes(None) == frozenset()


def test_is_match_uses_membership_not_substrings():
    assert is_match("SHH,Group3,Group4", "Group3") is True
    assert is_match("SHH", "Group3") is False
    # a substring test would wrongly accept this
    assert is_match("Group34", "Group3") is False


def test_is_match_without_pathology_is_undefined():
    assert is_match(None, "SHH") is None


@pytest.mark.parametrize("prediction", ["", None])
def test_empty_prediction_never_matches(prediction):
    assert is_match("SHH,Group3,Group4", prediction) is False
