"""
Pair RNA-Seq and WGS aliquots of the same tumor sample.
"""

import logging
import typing

import pandas as pd

from .records import ClinicalRecord, MergedClinicalRecord, frame_to_records, records_to_frame

RNA_ASSAY = "RNA-Seq"
DNA_ASSAY = "WGS"

SAMPLE_KEY_COLUMNS = ["sample_id", "participant_id", "tumor_descriptor"]


def _assay_view(clinical: pd.DataFrame, assay_type: str, id_column: str) -> pd.DataFrame:
    view = clinical.loc[clinical["assay_type"] == assay_type]
    view = view.rename(columns={"biospecimen_id": id_column})
    return view[["participant_id", "sample_id", "tumor_descriptor", id_column]].reset_index(drop=True)


def split_by_assay(records: typing.Sequence[ClinicalRecord]) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Partition clinical rows into (rna_view, dna_view). Other assay types are dropped.
    """
    clinical = records_to_frame(records, ClinicalRecord)
    rna_view = _assay_view(clinical, RNA_ASSAY, "rna_biospecimen_id")
    dna_view = _assay_view(clinical, DNA_ASSAY, "dna_biospecimen_id")
    logging.debug(f"Clinical split: {len(rna_view)} RNA rows, {len(dna_view)} DNA rows")
    return rna_view, dna_view


def merge_clinical(records: typing.Sequence[ClinicalRecord]) -> list[MergedClinicalRecord]:
    """
    Right join of the DNA view onto the RNA view on sample, participant and
    tumor descriptor. Every RNA row survives; dna_biospecimen_id is None
    where no WGS aliquot exists.
    """
    rna_view, dna_view = split_by_assay(records)
    merged = dna_view.merge(rna_view, on=SAMPLE_KEY_COLUMNS, how="right")
    unpaired = merged["dna_biospecimen_id"].isna().sum()
    if unpaired:
        logging.info(f"{unpaired} RNA samples have no matching WGS sample")
    return frame_to_records(merged, MergedClinicalRecord)
