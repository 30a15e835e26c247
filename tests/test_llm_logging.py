from __future__ import annotations

import dataclasses
import json
from types import SimpleNamespace

import pytest

from services.llm_client import LLMClient
from utils.llm_logger import log_call


def test_llm_trace_writes_jsonl(tmp_path, monkeypatch):
    log_file = tmp_path / "llm_calls.jsonl"
    monkeypatch.setenv("LLM_TRACE", "true")
    monkeypatch.setenv("LLM_LOG_PATH", str(log_file))
    monkeypatch.setenv("RUN_ID", "test-run-123")

    log_call(
        caller="unit.test",
        provider="openai",
        model="gpt-x",
        operation="chat.completions.create",
        prompt_name="founder_classification",
        prompt_hash="abc",
        duration_ms=42,
        status="ok",
        usage={"total_tokens": 10},
        extras={"handle": "janedoe"},
    )

    assert log_file.exists()
    lines = log_file.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) >= 1
    rec = json.loads(lines[-1])
    assert rec["caller"] == "unit.test"
    assert rec["provider"] == "openai"
    assert rec["operation"] == "chat.completions.create"
    assert rec["run_id"] == "test-run-123"
    assert rec.get("usage", {}).get("total_tokens") == 10
    assert rec["extras"] == {"handle": "janedoe"}


def test_trace_disabled_writes_nothing(tmp_path, monkeypatch):
    log_file = tmp_path / "llm_calls.jsonl"
    monkeypatch.setenv("LLM_TRACE", "false")
    monkeypatch.setenv("LLM_LOG_PATH", str(log_file))

    log_call(caller="unit.test", provider="openai", model="gpt-x", operation="chat")

    assert not log_file.exists()


def _fake_openai(create):
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def test_client_traces_with_its_own_settings(tmp_path, settings):
    log_file = tmp_path / "trace.jsonl"
    traced = dataclasses.replace(settings, llm_trace=True, llm_log_path=str(log_file))
    completion = SimpleNamespace(
        choices=[], usage=SimpleNamespace(prompt_tokens=3, completion_tokens=2, total_tokens=5)
    )
    client = LLMClient(traced, client=_fake_openai(lambda **kwargs: completion))

    client.chat(
        use_case="founder_classification",
        messages=[{"role": "user", "content": "hi"}],
        extras={"handle": "janedoe", "company": "Acme"},
    )

    rec = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
    assert rec["status"] == "ok"
    assert rec["usage"]["total_tokens"] == 5
    assert rec["extras"] == {"handle": "janedoe", "company": "Acme"}


def test_failed_completion_is_traced(tmp_path, settings):
    log_file = tmp_path / "llm_calls.jsonl"
    traced = dataclasses.replace(settings, llm_trace=True, llm_log_path=str(log_file))

    def _create(**kwargs):
        raise RuntimeError("quota exceeded")

    client = LLMClient(traced, client=_fake_openai(_create))

    with pytest.raises(RuntimeError):
        client.chat(use_case="founder_classification", messages=[{"role": "user", "content": "hi"}], prompt_text="hi")

    rec = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
    assert rec["caller"] == "llm_client.chat:founder_classification"
    assert rec["status"] == "error"
    assert rec["error"] == "quota exceeded"
    assert rec["prompt_hash"]
