"""
Presentation: accuracy strings, the TSV export and a static HTML report.

The HTML report holds one tab per classifier plus the final table. Every
table gets a filter box on top of each column, horizontal scrolling and
pages of PAGE_SIZE rows, driven by a small inline script.
"""

import csv
import logging
import pathlib
import typing
from html import escape

import pandas as pd

from .accuracy import summarize_matches
from .records import AccuracyResult, FinalExportRecord, FinalRecord, MatchRecord, records_to_frame

PAGE_SIZE = 5
NA_VALUE = "NA"


def accuracy_line(accuracy_pct: typing.Optional[str]) -> str:
    return f"Accuracy: {accuracy_pct if accuracy_pct is not None else NA_VALUE}"


def write_export(records: typing.Sequence[FinalExportRecord], path: str | pathlib.Path) -> pathlib.Path:
    """
    Tab-separated, header row, no index, no quoting; missing values as 'NA'.
    """
    out = pathlib.Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df = records_to_frame(records, FinalExportRecord)
    df.to_csv(out, sep="\t", index=False, quoting=csv.QUOTE_NONE, escapechar="\\", na_rep=NA_VALUE)
    logging.info(f"Wrote {len(df)} rows to {out}")
    return out


def _fmt(value: typing.Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return NA_VALUE
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return escape(str(value))


def _table_html(table_id: str, df: pd.DataFrame) -> str:
    parts = [f'<div class="scroll"><table id="{escape(table_id)}" class="paged"><thead><tr>']
    for column in df.columns:
        parts.append(f"<th>{escape(str(column))}</th>")
    parts.append("</tr><tr class=\"filters\">")
    for column in df.columns:
        parts.append(f'<th><input type="search" placeholder="filter {escape(str(column))}"></th>')
    parts.append("</tr></thead><tbody>")
    for row in df.itertuples(index=False):
        parts.append("<tr>" + "".join(f"<td>{_fmt(v)}</td>" for v in row) + "</tr>")
    parts.append('</tbody></table></div><div class="pager"></div>')
    return "".join(parts)


_STYLE = """
body { font-family: sans-serif; margin: 1.5em; }
.tabs button { padding: .4em 1em; border: 1px solid #999; background: #eee; cursor: pointer; }
.tabs button.active { background: #2c3e50; color: #fff; }
.tab { display: none; } .tab.active { display: block; }
.scroll { overflow-x: auto; }
table { border-collapse: collapse; white-space: nowrap; }
th, td { border: 1px solid #ccc; padding: .3em .6em; }
thead tr:first-child th { background: #2c3e50; color: #fff; }
.filters input { width: 100%; box-sizing: border-box; }
.accuracy { font-weight: bold; }
"""

_SCRIPT = """
const PAGE_SIZE = %d;
function showTab(name) {
  document.querySelectorAll('.tab').forEach(t => t.classList.toggle('active', t.id === name));
  document.querySelectorAll('.tabs button').forEach(b => b.classList.toggle('active', b.dataset.tab === name));
}
document.querySelectorAll('table.paged').forEach(table => {
  const rows = Array.from(table.tBodies[0].rows);
  const inputs = Array.from(table.querySelectorAll('.filters input'));
  const pager = table.parentElement.nextElementSibling;
  let page = 0;
  function visible() {
    const terms = inputs.map(i => i.value.toLowerCase());
    return rows.filter(r => terms.every((t, c) => !t || r.cells[c].textContent.toLowerCase().includes(t)));
  }
  function render() {
    const shown = visible();
    const pages = Math.max(1, Math.ceil(shown.length / PAGE_SIZE));
    page = Math.min(page, pages - 1);
    rows.forEach(r => r.style.display = 'none');
    shown.slice(page * PAGE_SIZE, (page + 1) * PAGE_SIZE).forEach(r => r.style.display = '');
    pager.innerHTML = '';
    const prev = document.createElement('button'); prev.textContent = 'Previous'; prev.disabled = page === 0;
    const next = document.createElement('button'); next.textContent = 'Next'; next.disabled = page >= pages - 1;
    prev.onclick = () => { page--; render(); }; next.onclick = () => { page++; render(); };
    pager.append(prev, ` Page ${page + 1} of ${pages} (${shown.length} rows) `, next);
  }
  inputs.forEach(i => i.addEventListener('input', () => { page = 0; render(); }));
  render();
});
"""


def render_html_report(
    classifier_results: dict[str, AccuracyResult],
    final_display: typing.Sequence[FinalRecord],
    consensus_classifier: str,
) -> str:
    tab_names = list(classifier_results) + ["final"]
    html_parts = [
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">",
        "<title>Medulloblastoma subtype concordance</title>",
        f"<style>{_STYLE}</style></head><body>",
        "<h1>Medulloblastoma subtype concordance</h1>",
        '<div class="tabs">',
    ]
    for name in tab_names:
        label = f"Final ({consensus_classifier})" if name == "final" else name
        html_parts.append(f'<button data-tab="tab-{escape(name)}" onclick="showTab(this.dataset.tab)">{escape(label)}</button>')
    html_parts.append("</div>")

    for name, result in classifier_results.items():
        summary = summarize_matches(result)
        html_parts.append(f'<div class="tab" id="tab-{escape(name)}"><h2>{escape(name)}</h2>')
        html_parts.append(f'<p class="accuracy">{escape(accuracy_line(result.accuracy_pct))}</p>')
        html_parts.append(
            f"<p>{summary.samples} samples: {summary.matched} matched, "
            f"{summary.mismatched} mismatched, {summary.unassessed} without pathology subtype</p>"
        )
        html_parts.append(_table_html(f"table-{name}", records_to_frame(result.merged, MatchRecord)))
        html_parts.append("</div>")

    html_parts.append('<div class="tab" id="tab-final">')
    html_parts.append(f"<h2>Final table ({escape(consensus_classifier)})</h2>")
    html_parts.append(_table_html("table-final", records_to_frame(final_display, FinalRecord)))
    html_parts.append("</div>")

    html_parts.append(f"<script>{_SCRIPT % PAGE_SIZE}showTab('tab-{escape(tab_names[0])}');</script>")
    html_parts.append("</body></html>")
    return "\n".join(html_parts)


def write_html_report(
    path: str | pathlib.Path,
    classifier_results: dict[str, AccuracyResult],
    final_display: typing.Sequence[FinalRecord],
    consensus_classifier: str,
) -> pathlib.Path:
    out = pathlib.Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(render_html_report(classifier_results, final_display, consensus_classifier), encoding="utf-8")
    logging.info(f"Wrote HTML report to {out}")
    return out
