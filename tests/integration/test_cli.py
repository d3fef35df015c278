from pathlib import Path

import pytest

from gha_mermaid.cli import main

FIXTURE_DIR = Path(__file__).resolve().parents[1] / "fixtures" / "workflows"


@pytest.mark.integration
def test_cli_prints_mermaid_to_stdout(capsys):
    main([str(FIXTURE_DIR / "release.yml")])

    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[0] == "flowchart TD"
    assert '    trigger_push["push<br/>tags: v*"]' in lines
    assert '  subgraph job_test ["test (ubuntu-latest, macos-latest)"]' in lines
    assert '    job_publish_uses["uses: ./.github/workflows/publish.yml"]' in lines
    assert "  job_build --> cond_job_publish_p0" in lines
    assert "  job_test --> cond_job_publish_p0" in lines
    assert "  cond_job_publish_p1 -->|Yes| job_publish" in lines
    assert "  job_publish --> cond_job_notify" in lines
    assert "  cond_job_notify --> job_notify" in lines


@pytest.mark.integration
def test_cli_orders_jobs_by_needs(capsys):
    main([str(FIXTURE_DIR / "release.yml")])

    lines = capsys.readouterr().out.splitlines()
    subgraphs = [line.split()[1] for line in lines if line.startswith("  subgraph job_")]
    assert subgraphs == ["job_build", "job_test", "job_publish", "job_notify"]


@pytest.mark.integration
def test_cli_writes_markdown(tmp_path):
    out = tmp_path / "docs" / "release.md"
    main([str(FIXTURE_DIR / "release.yml"), "--format", "markdown", "--out", str(out)])

    content = out.read_text(encoding="utf-8")
    assert content.startswith("# Release\n\n```mermaid\nflowchart TD\n")
    assert content.endswith("```\n")


@pytest.mark.integration
def test_cli_writes_raw_mermaid_with_direction(tmp_path):
    out = tmp_path / "release.mmd"
    main([str(FIXTURE_DIR / "release.yml"), "--direction", "LR", "--out", str(out)])

    assert out.read_text(encoding="utf-8").startswith("flowchart LR\n")


@pytest.mark.integration
def test_cli_warnings_and_strict(capsys):
    workflow = str(FIXTURE_DIR / "broken_needs.yml")

    main([workflow])
    captured = capsys.readouterr()
    assert "warning: [W_NEEDS_UNKNOWN_JOB]" in captured.err
    assert "  job_missing_job --> job_deploy" in captured.out.splitlines()

    with pytest.raises(SystemExit) as exc_info:
        main([workflow, "--strict"])
    assert exc_info.value.code == 2


@pytest.mark.integration
def test_cli_escalate(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([str(FIXTURE_DIR / "broken_needs.yml"), "--escalate", "W_NEEDS_UNKNOWN_JOB"])
    assert exc_info.value.code == 2
    assert "error: [W_NEEDS_UNKNOWN_JOB]" in capsys.readouterr().err


@pytest.mark.integration
def test_cli_reports_conversion_errors(tmp_path, capsys):
    path = tmp_path / "empty.yml"
    path.write_text("name: nothing here\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        main([str(path)])
    assert exc_info.value.code == 1
    assert "error: No jobs section found." in capsys.readouterr().err


@pytest.mark.integration
def test_cli_reports_yaml_errors(tmp_path, capsys):
    path = tmp_path / "bad.yml"
    path.write_text("jobs: [\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        main([str(path)])
    assert exc_info.value.code == 1
    assert "error: Parse error: " in capsys.readouterr().err


@pytest.mark.integration
def test_cli_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([str(tmp_path / "nope.yml")])
    assert exc_info.value.code == 1
    assert "cannot read workflow" in capsys.readouterr().err


@pytest.mark.integration
def test_cli_reports_undecodable_input(tmp_path, capsys):
    path = tmp_path / "latin.yml"
    path.write_bytes(b"on: push\njobs:\n  a:\n    name: \xff\xfe\n")

    with pytest.raises(SystemExit) as exc_info:
        main([str(path)])
    assert exc_info.value.code == 1
    assert "error: Parse error: workflow is not valid UTF-8" in capsys.readouterr().err


@pytest.mark.integration
def test_cli_quoted_parens_pass_strict(tmp_path, capsys):
    path = tmp_path / "quoted.yml"
    path.write_text(
        "on: push\n"
        "jobs:\n"
        "  a:\n"
        "    if: contains(github.ref, '(')\n"
        "    steps:\n"
        "      - run: make\n",
        encoding="utf-8",
    )

    main([str(path), "--strict"])
    captured = capsys.readouterr()
    assert captured.err == ""
    assert captured.out.startswith("flowchart TD\n")
