from __future__ import annotations

import json

import pytest

import cli
from conftest import CREDENTIALS
from models import ClassificationVerdict, ProfileData


class _FakeFetcher:
    def __init__(self, *args, **kwargs):
        pass

    def fetch(self, url):
        return {"organic": [{"link": "https://x.com/founder"}]}


class _FakePoller:
    def __init__(self, *args, **kwargs):
        pass

    def resolve_profiles(self, handles):
        return [ProfileData.found("Co-founder & CEO") for _ in handles]


class _FakeClassifier:
    def __init__(self, *args, **kwargs):
        pass

    def classify(self, handle, description, company):
        return ClassificationVerdict(role="Co-Founder", rank=8, confidence_reason=description)


@pytest.fixture
def cli_env(tmp_path, monkeypatch, credentials_env):
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "output"))
    monkeypatch.setenv("PROGRESS_FILE", str(tmp_path / "progress.json"))
    monkeypatch.setenv("INPUT_CSV", str(tmp_path / "founders.csv"))
    monkeypatch.setenv("RUN_ID", "cli-test-run")
    for name in ("RETRY_INITIAL_DELAY", "PROFILE_LOOKUP_DELAY", "SNAPSHOT_POLL_INTERVAL"):
        monkeypatch.setenv(name, "0")
    monkeypatch.setattr("pipelines.process_founders.RetryingFetcher", _FakeFetcher)
    monkeypatch.setattr("pipelines.process_founders.SnapshotPoller", _FakePoller)
    monkeypatch.setattr("pipelines.process_founders.FounderClassifier", _FakeClassifier)
    monkeypatch.setattr("pipelines.process_founders.LLMClient", lambda *a, **k: None)
    return tmp_path


def test_run_requires_credentials(cli_env, monkeypatch, capsys):
    for name in CREDENTIALS:
        monkeypatch.delenv(name, raising=False)

    assert cli.main(["run"]) == 1


def test_run_writes_batch_outputs_and_summary(cli_env, write_csv, capsys):
    write_csv([("Jane", "Doe", "Acme", "jane@acme.com"), ("John", "Roe", "Beta", "")])

    assert cli.main(["run", "--batch-size", "1"]) == 0

    out = capsys.readouterr().out
    assert "FOUNDER DM FINDER - SUMMARY" in out
    assert "Batch 1 - Records 1 to 2" in out
    data = json.loads((cli_env / "output" / "batch1_output.json").read_text(encoding="utf-8"))
    assert data["metadata"]["successful_matches"] == 2
    assert json.loads((cli_env / "progress.json").read_text(encoding="utf-8")) == {"lastProcessedIndex": 2}


def test_run_after_last_record_resets(cli_env, write_csv, capsys):
    write_csv([("Jane", "Doe", "Acme", "")])
    (cli_env / "progress.json").write_text(json.dumps({"lastProcessedIndex": 1}), encoding="utf-8")

    assert cli.main(["run"]) == 0

    assert "Progress reset" in capsys.readouterr().out
    assert json.loads((cli_env / "progress.json").read_text(encoding="utf-8")) == {"lastProcessedIndex": 0}


def test_progress_and_reset(cli_env, capsys):
    (cli_env / "progress.json").write_text(json.dumps({"lastProcessedIndex": 40}), encoding="utf-8")

    assert cli.main(["progress"]) == 0
    assert '"lastProcessedIndex": 40' in capsys.readouterr().out

    assert cli.main(["reset-progress"]) == 0
    assert json.loads((cli_env / "progress.json").read_text(encoding="utf-8")) == {"lastProcessedIndex": 0}


def test_filter_writes_founder_profiles(cli_env, capsys):
    source = cli_env / "batch1_output.json"
    source.write_text(json.dumps({
        "results": [
            {"name": "Jane Doe", "company": "Acme", "status": "processed", "profile_url": "https://x.com/jane", "role": "Founder", "rank": 9},
            {"name": "John Roe", "company": "Beta", "status": "failed", "reason": "No profile found"},
        ],
        "metadata": {"total_processed": 2},
    }), encoding="utf-8")
    out_dir = cli_env / "filtered"

    assert cli.main(["filter", "--input", str(source), "--output-dir", str(out_dir)]) == 0

    filtered = json.loads((out_dir / "founder_profiles.json").read_text(encoding="utf-8"))
    assert [f["name"] for f in filtered["founders"]] == ["Jane Doe"]
    assert (out_dir / "founder_profiles.txt").exists()


def test_filter_missing_input_fails(cli_env):
    assert cli.main(["filter", "--input", str(cli_env / "nope.json")]) == 1
