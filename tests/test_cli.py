"""
Tests for the Typer CLI.

Transcription and duration probing are patched so commands run offline.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

import prompt_separator.main as main_mod
from prompt_separator.core.speech import TranscriptionProxy
from prompt_separator.main import app

runner = CliRunner()


class StubTranscriber:
    def __init__(self, text: str):
        self.text = text

    def transcribe_bytes(self, payload: bytes, filename: str) -> str:
        return self.text


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run every command from an empty directory with no credential configured."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    monkeypatch.delenv("PS_ENV_FILE", raising=False)
    monkeypatch.setenv("PS_DEBUG", "0")


def test_classify_json_output():
    result = runner.invoke(app, ["classify", "--text", "PROMPT 001 hello Char1 world PROMPT 002 hello world", "--format", "json"])

    assert result.exit_code == 0, result.stdout
    data = json.loads(result.stdout)
    assert data == {
        "with_characters": ["PROMPT 001 hello Char1 world"],
        "without_characters": ["PROMPT 002 hello world"],
    }


def test_classify_from_file_rich_output(tmp_path: Path):
    prompts = tmp_path / "prompts.txt"
    prompts.write_text("PROMPT 1\nChar2 [close-up]\n\nPROMPT 2\nEmpty road\n", encoding="utf-8")

    result = runner.invoke(app, ["classify", "--file", str(prompts)])

    assert result.exit_code == 0, result.stdout
    assert "With characters (1)" in result.stdout
    assert "Without characters (1)" in result.stdout
    assert "[close-up]" in result.stdout


def test_classify_copies_selected_bucket(monkeypatch: pytest.MonkeyPatch):
    copied = []
    monkeypatch.setattr(main_mod.pyperclip, "copy", copied.append)

    result = runner.invoke(app, ["classify", "--text", "PROMPT 1 a PROMPT 2 Char1 b PROMPT 3 c", "--copy", "without", "--format", "markdown"])

    assert result.exit_code == 0, result.stdout
    assert copied == ["PROMPT 1 a\n\nPROMPT 3 c"]


def test_classify_rejects_both_inputs(tmp_path: Path):
    prompts = tmp_path / "prompts.txt"
    prompts.write_text("PROMPT 1 a", encoding="utf-8")

    result = runner.invoke(app, ["classify", "--text", "PROMPT 1 a", "--file", str(prompts)])

    assert result.exit_code == 1
    assert "Cannot specify both" in result.stdout


def test_classify_rejects_blank_input():
    result = runner.invoke(app, ["classify", "--text", "   "])
    assert result.exit_code == 1


def test_sync_writes_report(tmp_path: Path):
    out_dir = tmp_path / "scripts"

    result = runner.invoke(
        app,
        ["sync", "episode.mp3", "--duration", "8", "--text", "One. Two. Three.", "--output-dir", str(out_dir)],
    )

    assert result.exit_code == 0, result.stdout
    saved = out_dir / "episode_sync.txt"
    assert saved.exists()
    content = saved.read_text(encoding="utf-8")
    assert content.startswith("SYNC SCRIPT\nSource: episode.mp3\nTotal duration: 00:08\nBlocks: 1\n")
    assert "PROMPT 001 | 00:00 - 00:08\nOne. Two. Three.\n" in content


def test_sync_probes_duration_and_transcribes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    audio = tmp_path / "talk.wav"
    audio.write_bytes(b"RIFF")
    monkeypatch.setenv("GROQ_API_KEY", "test-key")
    monkeypatch.setattr(main_mod, "probe_duration", lambda path: 16.0)
    monkeypatch.setattr(main_mod, "TranscriptionProxy", lambda: TranscriptionProxy(StubTranscriber("A b. C d. E f.")))

    result = runner.invoke(app, ["sync", str(audio), "--output-dir", str(tmp_path)])

    assert result.exit_code == 0, result.stdout
    content = (tmp_path / "talk_sync.txt").read_text(encoding="utf-8")
    assert "Blocks: 2" in content
    assert "PROMPT 002 | 00:08 - 00:16\nC d. E f." in content


def test_sync_missing_audio_without_duration():
    result = runner.invoke(app, ["sync", "nowhere.mp3", "--text", "Hello."])
    assert result.exit_code == 1
    assert "Audio file not found" in result.stdout


def test_sync_without_credential_reports_configuration_error(tmp_path: Path):
    audio = tmp_path / "talk.wav"
    audio.write_bytes(b"RIFF")

    result = runner.invoke(app, ["sync", str(audio), "--duration", "10"])

    assert result.exit_code == 1
    assert "Configuration Error" in result.stdout


def test_sync_empty_transcript():
    result = runner.invoke(app, ["sync", "a.mp3", "--duration", "10", "--text", "   "])
    assert result.exit_code == 0
    assert "No sentences found" in result.stdout


def test_transcribe_prints_text(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    audio = tmp_path / "memo.m4a"
    audio.write_bytes(b"\x00\x01")
    monkeypatch.setenv("GROQ_API_KEY", "test-key")
    monkeypatch.setattr(main_mod, "TranscriptionProxy", lambda: TranscriptionProxy(StubTranscriber("Olá, tudo bem?")))

    result = runner.invoke(app, ["transcribe", str(audio)])

    assert result.exit_code == 0, result.stdout
    assert "Olá, tudo bem?" in result.stdout


def test_transcribe_without_credential(tmp_path: Path):
    audio = tmp_path / "memo.m4a"
    audio.write_bytes(b"\x00\x01")

    result = runner.invoke(app, ["transcribe", str(audio)])

    assert result.exit_code == 1
    assert "Configuration Error" in result.stdout
