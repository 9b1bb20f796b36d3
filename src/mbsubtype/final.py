import logging
import typing

import pandas as pd

from .records import (
    FinalExportRecord,
    FinalOutput,
    FinalRecord,
    MatchRecord,
    MergedClinicalRecord,
    column_names,
    frame_to_records,
    records_to_frame,
)

EXPORT_PREFIX = "MB, "
UNCLASSIFIED_LABEL = "To be classified"

JOIN_COLUMNS = ["sample_id", "rna_biospecimen_id"]


def export_label(molecular_subtype: typing.Optional[str]) -> str:
    """
    'Group3' → 'MB, Group3'; a missing subtype → 'MB, To be classified'.
    """
    if molecular_subtype is None or pd.isna(molecular_subtype) or not str(molecular_subtype).strip():
        return EXPORT_PREFIX + UNCLASSIFIED_LABEL
    return EXPORT_PREFIX + str(molecular_subtype)


def create_final_output(
    classifier_merged: typing.Sequence[MatchRecord],
    clinical: typing.Sequence[MergedClinicalRecord],
) -> FinalOutput:
    """
    Attach clinical identifiers to the chosen classifier's calls.
    Only samples present in both inputs (by sample_id and RNA biospecimen ID)
    survive. Returns the display projection sorted by biospecimen ID and the
    export projection sorted by RNA biospecimen ID.
    """
    calls = records_to_frame(classifier_merged, MatchRecord).rename(
        columns={"predicted_subtype": "molecular_subtype", "biospecimen_id": "rna_biospecimen_id"}
    )
    calls = calls[["rna_biospecimen_id", "sample_id", "pathology_subtype", "molecular_subtype", "match"]]
    clinical_df = records_to_frame(clinical, MergedClinicalRecord)

    joined = calls.merge(clinical_df, on=JOIN_COLUMNS, how="inner")
    dropped = len(calls) - joined["rna_biospecimen_id"].nunique()
    if dropped:
        logging.info(f"{dropped} classifier calls have no clinical match and are left out of the final table")

    display = (
        joined.rename(columns={"rna_biospecimen_id": "biospecimen_id"})
        .sort_values("biospecimen_id", kind="stable")
        .reset_index(drop=True)
    )

    export = joined.sort_values("rna_biospecimen_id", kind="stable").reset_index(drop=True)
    export["molecular_subtype"] = [export_label(m) for m in export["molecular_subtype"]]
    export = export[column_names(FinalExportRecord)]

    return FinalOutput(
        display=frame_to_records(display, FinalRecord),
        export=frame_to_records(export, FinalExportRecord),
    )
