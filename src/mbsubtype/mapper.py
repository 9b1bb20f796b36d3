import abc
import logging
import typing

from collections import Counter
from dataclasses import dataclass

import pandas as pd
from stairval.notepad import Notepad

from .records import ClinicalRecord, ExpectedRecord, ObservedRecord
from .subtypes import normalize_pathology_subtype

# Minimal required columns (after renaming) to identify each table type
EXPECTED_KEY_COLUMNS = {"biospecimen_id", "sample_id", "pathology_subtype"}
OBSERVED_KEY_COLUMNS = {"sample_biospecimen_id", "predicted_subtype"}
CLINICAL_KEY_COLUMNS = {
    "participant_id",
    "sample_id",
    "assay_type",
    "tumor_descriptor",
    "biospecimen_id",
}


@dataclass
class MappedInputs:
    """
    Typed records for one report run.
    `observed` keeps the classifier order of the input collection.
    """
    expected: list[ExpectedRecord]
    observed: dict[str, list[ObservedRecord]]
    clinical: list[ClinicalRecord]


class TableMapper(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def apply_mapping(
            self,
            expected: pd.DataFrame,
            observed: dict[str, pd.DataFrame],
            clinical: pd.DataFrame,
            notepad: Notepad,
    ) -> MappedInputs:
        raise NotImplementedError


class DefaultMapper(TableMapper):

    def apply_mapping(
            self,
            expected: pd.DataFrame,
            observed: dict[str, pd.DataFrame],
            clinical: pd.DataFrame,
            notepad: Notepad,
    ) -> MappedInputs:
        """
        Map every input table to records. Row-level problems are recorded on
        the notepad and the offending row is skipped.
        """
        return MappedInputs(
            expected=self.map_expected_table(expected, notepad),
            observed=self.map_observed_tables(observed, notepad),
            clinical=self.map_clinical_table(clinical, notepad),
        )

    @staticmethod
    def _cell(value: typing.Any) -> typing.Optional[str]:
        """Trimmed string, or None for NaN / blank cells."""
        if value is None or pd.isna(value):
            return None
        s = str(value).strip()
        return s or None

    @staticmethod
    def _check_columns(df: pd.DataFrame, required: set[str], table_name: str, notepad: Notepad) -> bool:
        missing = required - set(df.columns)
        if missing:
            notepad.add_error(f"Table {table_name!r}: missing required columns: {sorted(missing)}")
            return False
        return True

    @staticmethod
    def _warn_duplicates(ids: typing.Iterable[str], table_name: str, notepad: Notepad) -> None:
        duplicated = sorted(key for key, count in Counter(ids).items() if count > 1)
        if duplicated:
            notepad.add_warning(f"Table {table_name!r}: duplicated biospecimen IDs {duplicated}")

    @staticmethod
    def parse_expected_row(row: pd.Series, notepad: Notepad) -> list[ExpectedRecord]:
        try:
            return [
                ExpectedRecord(
                    biospecimen_id=DefaultMapper._cell(row.get("biospecimen_id")),
                    sample_id=DefaultMapper._cell(row.get("sample_id")),
                    pathology_subtype=normalize_pathology_subtype(DefaultMapper._cell(row.get("pathology_subtype"))),
                )
            ]
        except (ValueError, TypeError) as e:
            notepad.add_error(f"Table 'expected', row {row.name}: {e}")
            return []

    @staticmethod
    def parse_observed_row(row: pd.Series, classifier: str, notepad: Notepad) -> list[ObservedRecord]:
        try:
            return [
                ObservedRecord(
                    sample_biospecimen_id=DefaultMapper._cell(row.get("sample_biospecimen_id")),
                    predicted_subtype=DefaultMapper._cell(row.get("predicted_subtype")),
                )
            ]
        except (ValueError, TypeError) as e:
            notepad.add_error(f"Table {classifier!r}, row {row.name}: {e}")
            return []

    @staticmethod
    def parse_clinical_row(row: pd.Series, notepad: Notepad) -> list[ClinicalRecord]:
        try:
            return [
                ClinicalRecord(
                    participant_id=DefaultMapper._cell(row.get("participant_id")),
                    sample_id=DefaultMapper._cell(row.get("sample_id")),
                    tumor_descriptor=DefaultMapper._cell(row.get("tumor_descriptor")) or "",
                    assay_type=DefaultMapper._cell(row.get("assay_type")) or "",
                    biospecimen_id=DefaultMapper._cell(row.get("biospecimen_id")),
                )
            ]
        except (ValueError, TypeError) as e:
            notepad.add_error(f"Table 'clinical', row {row.name}: {e}")
            return []

    def map_expected_table(self, df: pd.DataFrame, notepad: Notepad) -> list[ExpectedRecord]:
        if not self._check_columns(df, EXPECTED_KEY_COLUMNS, "expected", notepad):
            return []
        records: list[ExpectedRecord] = []
        for _, row in df.iterrows():
            records.extend(self.parse_expected_row(row, notepad))
        self._warn_duplicates((r.biospecimen_id for r in records), "expected", notepad)
        logging.debug(f"Mapped {len(records)} expected records")
        return records

    def map_observed_tables(self, tables: dict[str, pd.DataFrame], notepad: Notepad) -> dict[str, list[ObservedRecord]]:
        observed: dict[str, list[ObservedRecord]] = {}
        for classifier, df in tables.items():
            if not self._check_columns(df, OBSERVED_KEY_COLUMNS, classifier, notepad):
                continue
            records: list[ObservedRecord] = []
            for _, row in df.iterrows():
                records.extend(self.parse_observed_row(row, classifier, notepad))
            self._warn_duplicates((r.sample_biospecimen_id for r in records), classifier, notepad)
            logging.debug(f"Mapped {len(records)} observed records for {classifier!r}")
            observed[classifier] = records
        return observed

    def map_clinical_table(self, df: pd.DataFrame, notepad: Notepad) -> list[ClinicalRecord]:
        if not self._check_columns(df, CLINICAL_KEY_COLUMNS, "clinical", notepad):
            return []
        records: list[ClinicalRecord] = []
        for _, row in df.iterrows():
            records.extend(self.parse_clinical_row(row, notepad))
        # biospecimen IDs only need to be unique within one assay type
        for assay_type in sorted({r.assay_type for r in records}):
            self._warn_duplicates(
                (r.biospecimen_id for r in records if r.assay_type == assay_type),
                f"clinical/{assay_type}",
                notepad,
            )
        logging.debug(f"Mapped {len(records)} clinical records")
        return records
