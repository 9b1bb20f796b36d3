import pandas as pd
import pytest

from mbsubtype.loader import TableLoadError, load_sheets_as_tables, load_table, normalize_headers


def test_normalize_headers_applies_renames():
    df = pd.DataFrame(columns=["Kids_First_Biospecimen_ID", "sample", "best.fit", "Experimental Strategy"])
    out = normalize_headers(df)
    assert list(out.columns) == ["biospecimen_id", "sample_biospecimen_id", "predicted_subtype", "assay_type"]


def test_load_table_reads_tsv_as_text(tmp_path):
    path = tmp_path / "expected.tsv"
    path.write_text("Kids_First_Biospecimen_ID\tsample_id\tpathology_subtype\nBS_1\t0001\tSHH\n")
    df = load_table(path)
    assert df.loc[0, "biospecimen_id"] == "BS_1"
    # identifiers keep leading zeros
    assert df.loc[0, "sample_id"] == "0001"


def test_load_table_missing_file_raises(tmp_path):
    with pytest.raises(TableLoadError):
        load_table(tmp_path / "nope.tsv")


def test_load_table_unsupported_format_raises(tmp_path):
    path = tmp_path / "expected.rds"
    path.write_bytes(b"\x00\x01")
    with pytest.raises(TableLoadError):
        load_table(path)


def test_load_sheets_from_workbook_keeps_sheet_order(tmp_path):
    path = tmp_path / "observed.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame({"sample": ["BS_1"], "best.fit": ["SHH"]}).to_excel(writer, sheet_name="medulloPackage", index=False)
        pd.DataFrame({"sample": ["BS_1"], "best.fit": ["WNT"]}).to_excel(writer, sheet_name="MM2S", index=False)

    tables = load_sheets_as_tables(path)
    assert list(tables) == ["medulloPackage", "MM2S"]
    assert tables["MM2S"].loc[0, "predicted_subtype"] == "WNT"


def test_load_sheets_from_directory(input_files):
    tables = load_sheets_as_tables(input_files["observed"])
    assert set(tables) == {"medulloPackage", "MM2S"}
    assert {"sample_biospecimen_id", "predicted_subtype"} <= set(tables["MM2S"].columns)


def test_load_sheets_empty_directory_raises(tmp_path):
    with pytest.raises(TableLoadError):
        load_sheets_as_tables(tmp_path)
