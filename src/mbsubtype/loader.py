import logging
import pathlib

import pandas as pd

# Source column names → canonical record fields
RENAME_MAP = {
    # expected / clinical tables
    "kids_first_biospecimen_id": "biospecimen_id",
    "kids_first_participant_id": "participant_id",
    "experimental_strategy": "assay_type",
    # observed tables
    "sample": "sample_biospecimen_id",
    "best_fit": "predicted_subtype",
    "pathology_subtype_label": "pathology_subtype",
}

DELIMITERS = {".tsv": "\t", ".txt": "\t", ".csv": ","}
EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


class TableLoadError(RuntimeError):
    """Raised when an input table cannot be located or deserialized."""


def normalize_headers(df: pd.DataFrame) -> pd.DataFrame:
    """
    - normalize all headers to snake_case lowercase ("best.fit" → "best_fit")
    - apply renames from RENAME_MAP
    """
    df = df.copy()
    df.columns = (
        df.columns.astype(str)
        .str.strip()
        .str.replace(r"\s*\(.*?\)", "", regex=True)  # drop any "(…)"
        .str.replace(r"[\s.\-]+", "_", regex=True)  # spaces, dots, dashes → underscore
        .str.replace(":", "", regex=False)
        .str.lower()
    )
    return df.rename(
        columns={orig: target for orig, target in RENAME_MAP.items() if orig in df.columns}
    )


def load_table(table_path: str | pathlib.Path) -> pd.DataFrame:
    """
    Read one delimited or Excel table (first sheet) with every cell kept as text.
    """
    path = pathlib.Path(table_path)
    if not path.is_file():
        raise TableLoadError(f"Input table not found: {path}")
    suffix = path.suffix.lower()
    try:
        if suffix in EXCEL_SUFFIXES:
            df = pd.read_excel(path, sheet_name=0, header=0, dtype=str, engine="openpyxl")
        elif suffix in DELIMITERS:
            df = pd.read_csv(path, sep=DELIMITERS[suffix], header=0, dtype=str)
        else:
            raise TableLoadError(f"Unsupported table format {suffix!r} for {path}")
    except (ValueError, OSError, pd.errors.ParserError) as e:
        raise TableLoadError(f"Failed to read {path}: {e}") from e

    logging.debug(f"Loaded {path.name}: {len(df)} rows, {len(df.columns)} cols")
    return normalize_headers(df)


def load_sheets_as_tables(source_path: str | pathlib.Path) -> dict[str, pd.DataFrame]:
    """
    Read a named collection of tables, one per classifier:
      - an Excel workbook → one table per worksheet, keyed by sheet name
      - a directory → one table per *.tsv / *.csv / *.txt file, keyed by file stem
    Order follows the workbook's sheet order or the sorted file names.
    """
    path = pathlib.Path(source_path)
    tables: dict[str, pd.DataFrame] = {}

    if path.is_dir():
        for table_file in sorted(path.iterdir()):
            if table_file.suffix.lower() in DELIMITERS:
                tables[table_file.stem] = load_table(table_file)
    elif path.is_file() and path.suffix.lower() in EXCEL_SUFFIXES:
        try:
            excel = pd.ExcelFile(path, engine="openpyxl")
            for sheet_name in excel.sheet_names:
                df = pd.read_excel(excel, sheet_name=sheet_name, header=0, dtype=str)
                tables[sheet_name] = normalize_headers(df)
        except (ValueError, OSError) as e:
            raise TableLoadError(f"Failed to read workbook {path}: {e}") from e
    else:
        raise TableLoadError(f"Expected an Excel workbook or a directory of tables, got {path}")

    if not tables:
        raise TableLoadError(f"No classifier tables found in {path}")
    logging.info(f"Loaded classifier tables from {path}: {list(tables)}")
    return tables
