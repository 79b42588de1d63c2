"""
Main CLI interface for the Prompt Separator.

This module provides the Typer-based command-line interface with commands for:
- Splitting prompts into lists with and without characters
- Generating sync scripts that align a transcript to 8-second blocks
- Transcribing audio through the remote Whisper service
- Serving the HTTP endpoints
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import pyperclip
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.classify import PromptClassifier
from .core.config import ConfigError, load_env, validate_config
from .core.debug_log import get_debug_logger
from .core.media import MediaProbeError, probe_duration
from .core.progress import reporter
from .core.speech import SpeechError, TranscriptionProxy, validate_audio_format
from .core.sync_blocks import SyncBlockError, SyncBlockGenerator, render_report, report_filename
from .core.types import ClassificationResult

app = typer.Typer(
    name="prompt-separator",
    help="Prompt Separator CLI - Split prompts by character presence and build transcript sync scripts",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Write JSON debug logs and timings (same as PS_DEBUG=1)"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
):
    """Configure logging and environment before any command runs."""
    load_env()

    # CLI flag always overrides .env
    if debug:
        os.environ["PS_DEBUG"] = "1"
        log_level = "DEBUG"

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _read_text_input(text: Optional[str], file: Optional[str], what: str) -> str:
    """Resolve exactly one of --text / --file into a string, exiting on misuse."""
    if text and file:
        console.print("[bold red]Error:[/bold red] Cannot specify both --text and --file options")
        sys.exit(1)

    if not text and not file:
        console.print(f"[bold red]Error:[/bold red] Must specify either --text or --file option for the {what}")
        sys.exit(1)

    if file:
        file_path = Path(file)
        if not file_path.exists():
            console.print(f"[bold red]Error:[/bold red] File not found: {file}")
            sys.exit(1)

        try:
            return file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            console.print(f"[bold red]Error:[/bold red] Failed to read file '{file}': {e}")
            sys.exit(1)

    assert text is not None, "Text should not be None after validation"
    return text


def _copy_to_clipboard(content: str, what: str) -> None:
    try:
        pyperclip.copy(content)
        console.print(f"[dim]Copied {what} to clipboard.[/dim]")
    except pyperclip.PyperclipException as e:
        console.print(f"[yellow]Clipboard unavailable:[/yellow] {e}")


@app.command()
def classify(
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Prompt text to classify"),
    file: Optional[str] = typer.Option(None, "--file", help="Path to a .txt file with prompts"),
    output_format: str = typer.Option("rich", "--format", "-f", help="Output format (rich, markdown, json)"),
    copy: Optional[str] = typer.Option(None, "--copy", "-c", help="Copy one list to the clipboard (with|without)"),
):
    """
    Split prompts into two lists: with characters (Char1, Char2, Char3) and without.

    Examples:
        prompt-separator classify --file prompts.txt
        prompt-separator classify --text "PROMPT 1 Char1 waves PROMPT 2 empty street" --format json
        prompt-separator classify --file prompts.txt --copy without
    """
    if copy is not None and copy not in ("with", "without"):
        console.print(f"[bold red]Error:[/bold red] --copy must be 'with' or 'without', got '{copy}'")
        sys.exit(1)

    content = _read_text_input(text, file, "prompts")
    if not content.strip():
        console.print("[bold red]Error:[/bold red] Input text is empty")
        sys.exit(1)

    result = PromptClassifier().classify(content)
    get_debug_logger().log_classification(result)

    _display_classification(result, output_format)

    if copy is not None:
        _copy_to_clipboard(result.joined(copy), f"prompts {copy} characters")


@app.command()
def sync(
    audio: str = typer.Argument(..., help="Audio file the transcript belongs to"),
    transcript: Optional[str] = typer.Option(None, "--transcript", help="Path to a transcript text file"),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Transcript text"),
    duration: Optional[float] = typer.Option(None, "--duration", "-d", help="Audio duration in seconds (probed with ffprobe if omitted)"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", "-o", help="Directory to save <audio name>_sync.txt"),
    copy: bool = typer.Option(False, "--copy", help="Copy the report to the clipboard"),
):
    """
    Align a transcript to 8-second blocks and print the sync script.

    Without --transcript or --text the audio is transcribed first.

    Examples:
        prompt-separator sync episode.mp3 --transcript episode.txt
        prompt-separator sync episode.mp3 --duration 312.5 --text "First line. Second line."
        prompt-separator sync episode.mp3 --output-dir scripts
    """
    try:
        with reporter.initialize(console, "Checking audio file…"):
            audio_path = Path(audio)
            if duration is None and not audio_path.is_file():
                console.print(f"[bold red]Error:[/bold red] Audio file not found: {audio}")
                sys.exit(1)

            if duration is None:
                reporter.step("Reading audio duration…")
                duration = probe_duration(audio_path)

            if transcript or text:
                transcript_text = _read_text_input(text, transcript, "transcript")
            else:
                reporter.step("Transcribing audio…")
                validate_config()
                transcript_text = TranscriptionProxy().transcribe_file(audio_path).text

            reporter.step("Building sync blocks…")
            report = SyncBlockGenerator().generate(transcript_text, duration, audio_path.name)
            get_debug_logger().log_sync_report(report)
            reporter.complete_step()

    except ConfigError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        sys.exit(1)
    except (SpeechError, MediaProbeError, SyncBlockError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    if report.is_empty:
        console.print("[yellow]No sentences found in the transcript; nothing to sync.[/yellow]")
        return

    rendered = render_report(report)
    console.print(rendered, markup=False, highlight=False)

    if output_dir:
        target_dir = Path(output_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / report_filename(audio_path.name)
        target.write_text(rendered, encoding="utf-8")
        console.print(f"[bold green]Saved:[/bold green] {target}")

    if copy:
        _copy_to_clipboard(rendered, "sync script")


@app.command()
def transcribe(
    audio: str = typer.Argument(..., help="Path to audio file (max 25MB)"),
    copy: bool = typer.Option(False, "--copy", help="Copy the transcription to the clipboard"),
):
    """
    Transcribe an audio file with the remote Whisper service.

    Examples:
        prompt-separator transcribe interview.m4a
        prompt-separator transcribe interview.m4a --copy
    """
    try:
        with reporter.initialize(console, "Validating input…"):
            validate_config()

            reporter.step("Checking audio file…")
            audio_path = Path(audio)
            if not audio_path.exists():
                console.print(f"[bold red]Error:[/bold red] Audio file not found: {audio}")
                sys.exit(1)

            if not validate_audio_format(audio_path):
                console.print(f"[yellow]Warning:[/yellow] Unusual audio extension '{audio_path.suffix}', sending anyway")

            reporter.step("Transcribing audio…")
            result = TranscriptionProxy().transcribe_file(audio_path)
            reporter.complete_step()

    except ConfigError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        sys.exit(1)
    except (SpeechError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    console.print(f"[dim]Transcript ({len(result.text.split())} words):[/dim]")
    console.print(result.text, markup=False, highlight=False)

    if copy:
        _copy_to_clipboard(result.text, "transcript")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", help="Port to listen on"),
):
    """
    Run the HTTP endpoints (/api/transcribe, /api/key, /health).
    """
    import uvicorn

    console.print(f"[bold green]Serving on http://{host}:{port}[/bold green]")
    uvicorn.run("prompt_separator.api:app", host=host, port=port)


def _display_classification(result: ClassificationResult, output_format: str) -> None:
    """Display classification results in the specified format."""

    if output_format == "json":
        console.print_json(json.dumps(result.model_dump(), ensure_ascii=False))
        return

    if output_format == "markdown":
        sections = [
            f"## Without characters ({len(result.without_characters)})\n\n{result.joined('without')}",
            f"## With characters ({len(result.with_characters)})\n\n{result.joined('with')}",
        ]
        console.print("\n\n".join(sections), markup=False, highlight=False)
        return

    # Rich format (default)
    buckets = [
        ("Without characters", result.without_characters, "green", "No prompts without characters"),
        ("With characters", result.with_characters, "dark_orange", "No prompts with characters"),
    ]
    for title, prompts, color, empty_note in buckets:
        body = Text("\n\n".join(prompts)) if prompts else Text(empty_note, style="italic dim")
        console.print(Panel(body, title=f"[bold {color}]{title} ({len(prompts)})[/bold {color}]", border_style=color))

    stats_table = Table(show_header=False, box=None)
    stats_table.add_column("Metric", style="cyan")
    stats_table.add_column("Value", style="white")
    stats_table.add_row("Prompts found", str(result.total))
    stats_table.add_row("With characters", str(len(result.with_characters)))
    stats_table.add_row("Without characters", str(len(result.without_characters)))
    console.print(stats_table)


if __name__ == "__main__":
    app()
