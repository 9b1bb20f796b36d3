"""
Per-classifier agreement between pathology and predicted subtypes.

Observed calls are left-joined with the expected table on biospecimen ID.
Rows without a pathology subtype stay in the merged view with match=None
and do not count towards accuracy.
"""

import logging
import typing

from dataclasses import dataclass

import pandas as pd

from .records import (
    AccuracyResult,
    ExpectedRecord,
    MatchRecord,
    ObservedRecord,
    frame_to_records,
    records_to_frame,
)
from .subtypes import is_match


@dataclass(frozen=True)
class MatchSummary:
    """
    Row counts behind one accuracy figure.

    Attributes:
        samples: every observed call.
        assessed: calls with a pathology subtype (the accuracy denominator).
        matched: assessed calls agreeing with pathology.
        mismatched: assessed calls disagreeing with pathology.
        unassessed: calls without a pathology subtype.
    """
    samples: int
    assessed: int
    matched: int
    mismatched: int
    unassessed: int


def format_accuracy(fraction: float) -> str:
    """
    0.725 → '72.5%'; percentages are rounded to 2 decimals, trailing zeros trimmed.
    """
    percent = round(fraction * 100, 2)
    return f"{percent:g}%"


def compute_accuracy(
    expected: typing.Sequence[ExpectedRecord],
    observed: typing.Sequence[ObservedRecord],
) -> AccuracyResult:
    expected_df = records_to_frame(expected, ExpectedRecord)
    observed_df = records_to_frame(observed, ObservedRecord)

    merged = observed_df.merge(
        expected_df,
        how="left",
        left_on="sample_biospecimen_id",
        right_on="biospecimen_id",
    )
    # keep the observed ID; the expected one is NaN for unmatched rows
    merged = merged.drop(columns=["biospecimen_id"]).rename(
        columns={"sample_biospecimen_id": "biospecimen_id"}
    )
    merged["match"] = pd.Series(
        [
            is_match(
                None if pd.isna(pathology) else pathology,
                None if pd.isna(predicted) else predicted,
            )
            for pathology, predicted in zip(merged["pathology_subtype"], merged["predicted_subtype"])
        ],
        index=merged.index,
        dtype=object,
    )

    assessed = merged["match"].dropna()
    accuracy_pct = None
    if len(assessed):
        accuracy_pct = format_accuracy(sum(bool(m) for m in assessed) / len(assessed))
    else:
        logging.warning("No observed samples have a pathology subtype; accuracy is undefined")

    return AccuracyResult(merged=frame_to_records(merged, MatchRecord), accuracy_pct=accuracy_pct)


def compute_all(
    expected: typing.Sequence[ExpectedRecord],
    observed_by_classifier: dict[str, typing.Sequence[ObservedRecord]],
) -> dict[str, AccuracyResult]:
    """Run compute_accuracy once per classifier, keeping classifier order."""
    results: dict[str, AccuracyResult] = {}
    for classifier, observed in observed_by_classifier.items():
        results[classifier] = compute_accuracy(expected, observed)
        logging.info(f"{classifier}: accuracy {results[classifier].accuracy_pct}")
    return results


def summarize_matches(result: AccuracyResult) -> MatchSummary:
    flags = [record.match for record in result.merged]
    matched = sum(1 for m in flags if m is True)
    mismatched = sum(1 for m in flags if m is False)
    return MatchSummary(
        samples=len(flags),
        assessed=matched + mismatched,
        matched=matched,
        mismatched=mismatched,
        unassessed=sum(1 for m in flags if m is None),
    )
