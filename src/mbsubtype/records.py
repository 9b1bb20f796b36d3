"""
Subtype concordance domain models.

Defines the record dataclasses flowing through the report pipeline, plus
helpers for moving between record lists and pandas DataFrames.
"""

import typing
from dataclasses import asdict, dataclass, fields

import pandas as pd

R = typing.TypeVar("R")


def _require_id(value: typing.Any, field_name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string, got {value!r}")


@dataclass(frozen=True)
class ExpectedRecord:
    """
    Pathology-derived subtype for one biospecimen.

    Attributes:
        biospecimen_id: RNA biospecimen identifier (e.g. 'BS_ABC123').
        sample_id: Sample identifier shared by the RNA and DNA aliquots.
        pathology_subtype: Normalized candidate string (e.g. 'SHH,Group3,Group4'),
            or None when pathology did not assign one.
    """

    biospecimen_id: str
    sample_id: str
    pathology_subtype: typing.Optional[str]

    def __post_init__(self):
        _require_id(self.biospecimen_id, "biospecimen_id")
        _require_id(self.sample_id, "sample_id")
        if self.pathology_subtype is not None and " " in self.pathology_subtype:
            raise ValueError(f"pathology_subtype must be normalized, got {self.pathology_subtype!r}")


@dataclass(frozen=True)
class ObservedRecord:
    """
    One classifier call. `predicted_subtype` is None when the classifier made no call.
    """

    sample_biospecimen_id: str
    predicted_subtype: typing.Optional[str]

    def __post_init__(self):
        _require_id(self.sample_biospecimen_id, "sample_biospecimen_id")


@dataclass(frozen=True)
class ClinicalRecord:
    """
    Represents a clinical manifest row for one sequenced aliquot.

    Attributes:
        participant_id: Subject identifier.
        sample_id: Sample identifier.
        tumor_descriptor: e.g. 'Initial CNS Tumor', 'Progressive'.
        assay_type: Experimental strategy ('RNA-Seq', 'WGS', ...).
        biospecimen_id: Aliquot identifier, unique within one assay type.
    """

    participant_id: str
    sample_id: str
    tumor_descriptor: str
    assay_type: str
    biospecimen_id: str

    def __post_init__(self):
        _require_id(self.participant_id, "participant_id")
        _require_id(self.sample_id, "sample_id")
        _require_id(self.biospecimen_id, "biospecimen_id")


@dataclass(frozen=True)
class MergedClinicalRecord:
    participant_id: str
    sample_id: str
    tumor_descriptor: str
    rna_biospecimen_id: str
    dna_biospecimen_id: typing.Optional[str] = None


@dataclass(frozen=True)
class MatchRecord:
    """
    An observed call joined with its expected subtype.
    `match` is None when there is no pathology subtype to compare against.
    """

    biospecimen_id: str
    sample_id: typing.Optional[str]
    pathology_subtype: typing.Optional[str]
    predicted_subtype: typing.Optional[str]
    match: typing.Optional[bool]


@dataclass(frozen=True)
class FinalRecord:
    biospecimen_id: str
    sample_id: str
    pathology_subtype: typing.Optional[str]
    molecular_subtype: typing.Optional[str]
    match: typing.Optional[bool]


@dataclass(frozen=True)
class FinalExportRecord:
    participant_id: str
    sample_id: str
    dna_biospecimen_id: typing.Optional[str]
    rna_biospecimen_id: str
    molecular_subtype: str


@dataclass(frozen=True)
class AccuracyResult:
    merged: list[MatchRecord]
    accuracy_pct: typing.Optional[str]


@dataclass(frozen=True)
class FinalOutput:
    display: list[FinalRecord]
    export: list[FinalExportRecord]


def column_names(record_type: type) -> list[str]:
    return [f.name for f in fields(record_type)]


def records_to_frame(records: typing.Iterable[typing.Any], record_type: type) -> pd.DataFrame:
    """
    Build a DataFrame with one column per dataclass field.
    An empty input still yields the full set of columns so merges keep working.
    """
    return pd.DataFrame([asdict(r) for r in records], columns=column_names(record_type))


def frame_to_records(df: pd.DataFrame, record_type: typing.Type[R]) -> list[R]:
    """
    Convert DataFrame rows back into records; NaN / NA / NaT become None.
    Extra columns are dropped.
    """
    names = column_names(record_type)
    working = df[names].astype(object)
    working = working.where(working.notna(), None)
    return [record_type(**row) for row in working.to_dict("records")]
