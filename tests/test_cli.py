import json

from click.testing import CliRunner

from mbsubtype.__main__ import main


def _report_args(input_files, *extra):
    return [
        "report",
        "-e", str(input_files["expected"]),
        "-o", str(input_files["observed"]),
        "-c", str(input_files["clinical"]),
        "-d", str(input_files["output_dir"]),
        *extra,
    ]


def test_report_prints_accuracy_and_writes_outputs(input_files):
    runner = CliRunner()
    result = runner.invoke(main, _report_args(input_files))
    assert result.exit_code == 0, result.output

    assert "medulloPackage: Accuracy: 100%" in result.output
    assert "MM2S: Accuracy: 66.67%" in result.output

    export = (input_files["output_dir"] / "MB_molecular_subtype.tsv").read_text().splitlines()
    assert export[0] == "participant_id\tsample_id\tdna_biospecimen_id\trna_biospecimen_id\tmolecular_subtype"
    assert export[1:] == [
        "PT_1\tS1\tBS_D1\tBS_R1\tMB, Group3",
        "PT_2\tS2\tNA\tBS_R2\tMB, SHH",
        "PT_3\tS3\tNA\tBS_R3\tMB, Group4",
    ]
    assert (input_files["output_dir"] / "MB_molecular_subtype_report.html").exists()


def test_report_uses_requested_consensus_without_html(input_files):
    runner = CliRunner()
    result = runner.invoke(main, _report_args(input_files, "--consensus", "MM2S", "--no-html"))
    assert result.exit_code == 0, result.output
    export = (input_files["output_dir"] / "MB_molecular_subtype.tsv").read_text()
    assert "MB, WNT" in export
    assert not (input_files["output_dir"] / "MB_molecular_subtype_report.html").exists()


def test_report_unknown_consensus_fails(input_files):
    runner = CliRunner()
    result = runner.invoke(main, _report_args(input_files, "--consensus", "nope"))
    assert result.exit_code == 1


def test_report_missing_columns_fails(input_files):
    input_files["expected"].write_text("biospecimen_id\nBS_R1\n")
    runner = CliRunner()
    result = runner.invoke(main, _report_args(input_files))
    assert result.exit_code == 1
    assert "Errors found in input tables" in result.output


def test_accuracy_raw_json(input_files):
    runner = CliRunner()
    result = runner.invoke(main, ["accuracy", "-e", str(input_files["expected"]), "-o", str(input_files["observed"]), "-r"])
    assert result.exit_code == 0, result.output
    payload = {entry["classifier"]: entry for entry in json.loads(result.output)}
    assert payload["medulloPackage"]["accuracy"] == "100%"
    assert payload["medulloPackage"]["unassessed"] == 1
    assert payload["MM2S"]["mismatched"] == 1


def test_audit_table_output(input_files):
    runner = CliRunner()
    result = runner.invoke(main, [
        "audit",
        "-e", str(input_files["expected"]),
        "-o", str(input_files["observed"]),
        "-c", str(input_files["clinical"]),
    ])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].startswith("TABLE")
    assert any("classify-table" in line and "clinical" in line for line in lines[1:])
