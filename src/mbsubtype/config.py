"""
Report configuration.

Environment
-----------
MBSUBTYPE_OUTPUT_DIR : default output directory (default "results")
MBSUBTYPE_CONSENSUS  : default consensus classifier (default "medulloPackage")
"""

import os
import pathlib
from dataclasses import dataclass

DEFAULT_OUTPUT_DIR = os.getenv("MBSUBTYPE_OUTPUT_DIR", "results")
DEFAULT_CONSENSUS_CLASSIFIER = os.getenv("MBSUBTYPE_CONSENSUS", "medulloPackage")
EXPORT_FILENAME = "MB_molecular_subtype.tsv"
HTML_FILENAME = "MB_molecular_subtype_report.html"


@dataclass(frozen=True)
class ReportConfig:
    """
    Input and output locations for one report run.

    Attributes:
        expected_path: pathology subtype table.
        observed_path: workbook or directory holding one table per classifier.
        clinical_path: clinical manifest (TSV).
        output_dir: where the export and HTML report are written.
        consensus_classifier: classifier whose calls go into the final table.
        write_html: whether to render the HTML report.
    """
    expected_path: pathlib.Path
    observed_path: pathlib.Path
    clinical_path: pathlib.Path
    output_dir: pathlib.Path = pathlib.Path(DEFAULT_OUTPUT_DIR)
    consensus_classifier: str = DEFAULT_CONSENSUS_CLASSIFIER
    write_html: bool = True

    @property
    def export_path(self) -> pathlib.Path:
        return self.output_dir / EXPORT_FILENAME

    @property
    def html_path(self) -> pathlib.Path:
        return self.output_dir / HTML_FILENAME
