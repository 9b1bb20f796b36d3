"""
Command-line interface for the medulloblastoma subtype concordance report.
Loads pathology and classifier subtype tables, reports per-classifier
accuracy and writes the clinical-annotated consensus table.
"""

import json
import logging
import pathlib
import sys
import typing

from collections import namedtuple
from dataclasses import asdict

import click
import pandas as pd
from stairval.notepad import create_notepad

from .accuracy import compute_all, summarize_matches
from .clinical import merge_clinical
from .config import DEFAULT_CONSENSUS_CLASSIFIER, DEFAULT_OUTPUT_DIR, ReportConfig
from .final import create_final_output
from .loader import TableLoadError, load_sheets_as_tables, load_table
from .mapper import (
    CLINICAL_KEY_COLUMNS,
    EXPECTED_KEY_COLUMNS,
    OBSERVED_KEY_COLUMNS,
    DefaultMapper,
    MappedInputs,
)
from .report import accuracy_line, write_export, write_html_report

AuditEntry = namedtuple("AuditEntry", ["step", "table", "message", "level"])

_existing_file = click.Path(exists=True, dir_okay=False, path_type=pathlib.Path)
_existing_path = click.Path(exists=True, path_type=pathlib.Path)


def _configure_logging(verbose_logging: bool, log_file_path: typing.Optional[str]) -> None:
    handlers: list[logging.Handler] = []
    if log_file_path:
        handlers.append(logging.FileHandler(log_file_path, mode="a", encoding="utf-8"))
    if verbose_logging:
        handlers.append(logging.StreamHandler(sys.stderr))
    if handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose_logging else logging.INFO,
            format="%(asctime)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=handlers,
            force=True,
        )


def _report_issues(notepad):
    # if there were errors, show them
    if notepad.has_errors(include_subsections=True):
        click.echo("Errors found in input tables:")
        for err in notepad.errors():
            click.echo(f"- {err}")
    # show any warnings but keep going
    if notepad.has_warnings(include_subsections=True):
        click.echo("Warnings found in input tables:")
        for w in notepad.warnings():
            click.echo(f"- {w}")


def _load_or_exit(loader: typing.Callable, path: pathlib.Path):
    try:
        return loader(path)
    except TableLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _map_inputs(expected_path, observed_path, clinical_path) -> MappedInputs:
    expected = _load_or_exit(load_table, expected_path)
    observed = _load_or_exit(load_sheets_as_tables, observed_path)
    clinical = (
        _load_or_exit(load_table, clinical_path)
        if clinical_path is not None
        else pd.DataFrame(columns=sorted(CLINICAL_KEY_COLUMNS))
    )

    notepad = create_notepad("inputs")
    mapped = DefaultMapper().apply_mapping(expected, observed, clinical, notepad)
    _report_issues(notepad)
    if notepad.has_errors(include_subsections=True):
        sys.exit(1)
    return mapped


@click.group()
def main():
    """mbsubtype: pathology vs. classifier medulloblastoma subtype concordance."""
    pass


@main.command(name="report")
@click.option("-e", "--expected", "expected_path", required=True, type=_existing_file, help="pathology subtype table")
@click.option("-o", "--observed", "observed_path", required=True, type=_existing_path,
              help="workbook (one sheet per classifier) or directory of classifier tables")
@click.option("-c", "--clinical", "clinical_path", required=True, type=_existing_file, help="clinical manifest (TSV)")
@click.option("--consensus", "consensus_classifier", default=DEFAULT_CONSENSUS_CLASSIFIER, show_default=True,
              help="classifier used for the final table")
@click.option("-d", "--output-dir", default=DEFAULT_OUTPUT_DIR, show_default=True,
              type=click.Path(file_okay=False, path_type=pathlib.Path), help="where to write the export and report")
@click.option("--html/--no-html", "write_html", default=True, help="also render the HTML report")
@click.option("--verbose-logging", is_flag=True, help="Also emit debug logs to stderr")
@click.option("--log-file-path", type=click.Path(dir_okay=False, writable=True), help="Append timestamped logs to this file")
def report(expected_path, observed_path, clinical_path, consensus_classifier, output_dir, write_html,
           verbose_logging: bool, log_file_path: typing.Optional[str]):
    """
    Run the whole pipeline:
      - accuracy of every classifier against pathology
      - final table for the consensus classifier, joined with clinical IDs
      - TSV export (and HTML report)
    """
    _configure_logging(verbose_logging, log_file_path)
    config = ReportConfig(
        expected_path=expected_path,
        observed_path=observed_path,
        clinical_path=clinical_path,
        output_dir=output_dir,
        consensus_classifier=consensus_classifier,
        write_html=write_html,
    )
    logging.info(f"Beginning report with {config}")

    mapped = _map_inputs(config.expected_path, config.observed_path, config.clinical_path)
    if config.consensus_classifier not in mapped.observed:
        click.echo(
            f"Error: consensus classifier {config.consensus_classifier!r} not among {list(mapped.observed)}",
            err=True,
        )
        sys.exit(1)

    results = compute_all(mapped.expected, mapped.observed)
    for classifier, result in results.items():
        click.echo(f"{classifier}: {accuracy_line(result.accuracy_pct)}")

    clinical = merge_clinical(mapped.clinical)
    final = create_final_output(results[config.consensus_classifier].merged, clinical)

    export_path = write_export(final.export, config.export_path)
    click.echo(f"Wrote {len(final.export)} rows to {export_path}")
    if config.write_html:
        html_path = write_html_report(config.html_path, results, final.display, config.consensus_classifier)
        click.echo(f"Wrote HTML report to {html_path}")


@main.command(name="accuracy")
@click.option("-e", "--expected", "expected_path", required=True, type=_existing_file, help="pathology subtype table")
@click.option("-o", "--observed", "observed_path", required=True, type=_existing_path,
              help="workbook (one sheet per classifier) or directory of classifier tables")
@click.option("-r", "--raw", is_flag=True, help="print JSON instead of text")
def accuracy(expected_path, observed_path, raw: bool):
    """
    Print the accuracy of each classifier against pathology.
    """
    mapped = _map_inputs(expected_path, observed_path, None)
    results = compute_all(mapped.expected, mapped.observed)
    if raw:
        payload = [
            {"classifier": classifier, "accuracy": result.accuracy_pct, **asdict(summarize_matches(result))}
            for classifier, result in results.items()
        ]
        click.echo(json.dumps(payload, indent=2))
        return
    for classifier, result in results.items():
        click.echo(f"{classifier}: {accuracy_line(result.accuracy_pct)}")


@main.command(name="audit")
@click.option("-e", "--expected", "expected_path", required=True, type=_existing_file, help="pathology subtype table")
@click.option("-o", "--observed", "observed_path", required=True, type=_existing_path,
              help="workbook (one sheet per classifier) or directory of classifier tables")
@click.option("-c", "--clinical", "clinical_path", required=True, type=_existing_file, help="clinical manifest (TSV)")
@click.option("-r", "--raw", is_flag=True, help="print JSON instead of a table")
def audit(expected_path, observed_path, clinical_path, raw: bool):
    """
    Check the input tables before running a report.
    """
    tables = {"expected": _load_or_exit(load_table, expected_path)}
    for classifier, df in _load_or_exit(load_sheets_as_tables, observed_path).items():
        tables[classifier] = df
    tables["clinical"] = _load_or_exit(load_table, clinical_path)

    entries = preprocess(tables)
    if raw:
        click.echo(json.dumps([entry._asdict() for entry in entries], indent=2))
        return
    click.echo(f"{'TABLE':20}  {'STEP':18}  {'LEVEL':7}  MESSAGE")
    for entry in entries:
        click.echo(f"{entry.table:20}  {entry.step:18}  {entry.level:7}  {entry.message}")


def preprocess(tables: dict[str, pd.DataFrame]) -> list[AuditEntry]:
    """
    Run lightweight audits on each table:
      - header and row counts
      - table classification by key columns
      - missing key columns for tables named 'expected' / 'clinical'
    """
    entries: list[AuditEntry] = []

    # Step 1: shape
    for name, df in tables.items():
        entries.append(AuditEntry(
            step="shape",
            table=name,
            message=f"{len(df)} rows, {len(df.columns)} cols",
            level="info",
        ))

    # Step 2: classify
    for name, df in tables.items():
        cols = set(df.columns)
        if CLINICAL_KEY_COLUMNS.issubset(cols):
            kind = "clinical"
        elif EXPECTED_KEY_COLUMNS.issubset(cols):
            kind = "expected"
        elif OBSERVED_KEY_COLUMNS.issubset(cols):
            kind = "observed"
        else:
            kind = "unknown"
        entries.append(AuditEntry(
            step="classify-table",
            table=name,
            message=kind,
            level="warn" if kind == "unknown" else "info",
        ))

    # Step 3: key columns
    for name, df in tables.items():
        required = {
            "expected": EXPECTED_KEY_COLUMNS,
            "clinical": CLINICAL_KEY_COLUMNS,
        }.get(name, OBSERVED_KEY_COLUMNS)
        missing = required - set(df.columns)
        if missing:
            entries.append(AuditEntry(
                step="key-columns",
                table=name,
                message=f"missing {sorted(missing)}",
                level="error",
            ))
    return entries


if __name__ == "__main__":
    main()
