"""
Pathology subtype normalization.

Ambiguous pathology calls are rewritten into a comma-delimited list of
candidate subtypes, e.g. "non-WNT" -> "SHH,Group3,Group4". A prediction
agrees with pathology when it is one of those candidates.
"""

import typing

import pandas as pd

# Fixed rewrite table; anything else passes through unchanged
AMBIGUOUS_SUBTYPE_MAP = {
    "non-WNT": "SHH, Group3, Group4",
    "Group 3 or 4": "Group3, Group4",
}

CANDIDATE_SEPARATOR = ","


def normalize_pathology_subtype(label: typing.Any) -> typing.Optional[str]:
    """
    Expand ambiguous labels via AMBIGUOUS_SUBTYPE_MAP, then drop every space.
    Missing values (None / NaN) return None; unrecognized text is kept verbatim.
    """
    if label is None or pd.isna(label):
        return None
    text = str(label)
    text = AMBIGUOUS_SUBTYPE_MAP.get(text, text)
    return text.replace(" ", "")


def candidate_subtypes(pathology_subtype: typing.Optional[str]) -> frozenset[str]:
    if not pathology_subtype:
        return frozenset()
    return frozenset(token for token in pathology_subtype.split(CANDIDATE_SEPARATOR) if token)


def is_match(pathology_subtype: typing.Optional[str], predicted_subtype: typing.Optional[str]) -> typing.Optional[bool]:
    """
    True when the prediction is one of the pathology candidates.
    - None when there is no pathology subtype (row is not assessable)
    - empty or missing predictions never match
    """
    if pathology_subtype is None:
        return None
    if not predicted_subtype:
        return False
    return predicted_subtype in candidate_subtypes(pathology_subtype)
