import pathlib

import pandas as pd
import pytest

from mbsubtype.records import ClinicalRecord, ExpectedRecord, ObservedRecord


@pytest.fixture
def expected_records() -> list[ExpectedRecord]:
    return [
        ExpectedRecord("BS_R1", "S1", "SHH,Group3,Group4"),
        ExpectedRecord("BS_R2", "S2", "SHH"),
        ExpectedRecord("BS_R3", "S3", "Group3,Group4"),
        ExpectedRecord("BS_R4", "S4", "WNT"),
    ]


@pytest.fixture
def observed_records() -> list[ObservedRecord]:
    # BS_R2 disagrees, BS_R5 has no pathology subtype
    return [
        ObservedRecord("BS_R1", "Group3"),
        ObservedRecord("BS_R2", "Group3"),
        ObservedRecord("BS_R3", "Group4"),
        ObservedRecord("BS_R4", "WNT"),
        ObservedRecord("BS_R5", "SHH"),
    ]


@pytest.fixture
def clinical_records() -> list[ClinicalRecord]:
    return [
        ClinicalRecord("PT_1", "S1", "Initial CNS Tumor", "RNA-Seq", "BS_R1"),
        ClinicalRecord("PT_1", "S1", "Initial CNS Tumor", "WGS", "BS_D1"),
        ClinicalRecord("PT_2", "S2", "Initial CNS Tumor", "RNA-Seq", "BS_R2"),
        ClinicalRecord("PT_3", "S3", "Progressive", "RNA-Seq", "BS_R3"),
        ClinicalRecord("PT_3", "S3", "Progressive", "WGS", "BS_D3"),
        ClinicalRecord("PT_4", "S4", "Initial CNS Tumor", "Methylation", "BS_M4"),
    ]


@pytest.fixture
def input_files(tmp_path: pathlib.Path) -> dict[str, pathlib.Path]:
    """
    Writes a small but complete set of input tables in the on-disk formats:
    expected TSV, a directory of classifier TSVs and a clinical TSV.
    """
    expected = pd.DataFrame({
        "Kids_First_Biospecimen_ID": ["BS_R1", "BS_R2", "BS_R3"],
        "sample_id": ["S1", "S2", "S3"],
        "pathology_subtype": ["non-WNT", "SHH", "Group 3 or 4"],
    })
    expected_path = tmp_path / "expected.tsv"
    expected.to_csv(expected_path, sep="\t", index=False)

    observed_dir = tmp_path / "observed"
    observed_dir.mkdir()
    pd.DataFrame({
        "sample": ["BS_R1", "BS_R2", "BS_R3", "BS_R4"],
        "best.fit": ["Group3", "SHH", "Group4", "WNT"],
        "p.value": ["0.01", "0.02", "0.01", "0.2"],
    }).to_csv(observed_dir / "medulloPackage.tsv", sep="\t", index=False)
    pd.DataFrame({
        "sample": ["BS_R1", "BS_R2", "BS_R3"],
        "best.fit": ["WNT", "SHH", "Group3"],
    }).to_csv(observed_dir / "MM2S.tsv", sep="\t", index=False)

    clinical = pd.DataFrame({
        "Kids_First_Participant_ID": ["PT_1", "PT_1", "PT_2", "PT_3", "PT_4"],
        "sample_id": ["S1", "S1", "S2", "S3", "S4"],
        "experimental_strategy": ["RNA-Seq", "WGS", "RNA-Seq", "RNA-Seq", "RNA-Seq"],
        "tumor_descriptor": ["Initial CNS Tumor"] * 5,
        "Kids_First_Biospecimen_ID": ["BS_R1", "BS_D1", "BS_R2", "BS_R3", "BS_R4"],
    })
    clinical_path = tmp_path / "clinical.tsv"
    clinical.to_csv(clinical_path, sep="\t", index=False)

    return {
        "expected": expected_path,
        "observed": observed_dir,
        "clinical": clinical_path,
        "output_dir": tmp_path / "results",
    }
