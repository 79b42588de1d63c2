"""
Sync block generation for the Prompt Separator.

This module aligns a transcript to fixed 8-second windows derived from the
audio duration and renders the result as a plain-text sync script. Sentences
are packed greedily by word count; each new block repeats the last sentence of
the previous one so consecutive prompts overlap by one sentence.
"""

import math
import re
from pathlib import Path
from typing import List

from .timing import timer
from .types import SentenceBlock, SyncReport

BLOCK_SECONDS = 8
REPORT_SUFFIX = "_sync.txt"
HEADER_RULE = "=" * 40
BLOCK_DELIMITER = "-" * 40

SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


class SyncBlockError(Exception):
    """Raised when sync blocks cannot be generated from the given input."""

    pass


def split_sentences(transcript: str) -> List[str]:
    """Split a transcript at ``.``, ``!`` or ``?`` followed by whitespace, keeping the punctuation."""
    sentences = (part.strip() for part in SENTENCE_BOUNDARY.split(transcript))
    return [sentence for sentence in sentences if sentence]


def count_words(text: str) -> int:
    return len(text.split())


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def target_words_per_block(total_words: int, duration_seconds: float) -> int:
    """
    Number of words one block should hold at the transcript's speaking rate.

    Never less than 1.
    """
    words_per_second = total_words / duration_seconds
    return max(1, _round_half_up(words_per_second * BLOCK_SECONDS))


def group_sentences(sentences: List[str], target: int) -> List[List[str]]:
    """
    Pack sentences into blocks of roughly ``target`` words.

    A block closes as soon as its word count reaches the target. The next block
    starts with a copy of the closed block's last sentence; that carried sentence
    does not count against the new block's target.

    Leftover sentences form a final block only when they add at least one
    sentence past the carried one and differ from the previous block. A
    trailing block holding just the carried sentence is dropped.
    """
    groups: List[List[str]] = []
    current: List[str] = []
    carried = 0
    word_count = 0

    for sentence in sentences:
        current.append(sentence)
        word_count += count_words(sentence)
        if word_count >= target:
            groups.append(current)
            current = [current[-1]]
            carried = 1
            word_count = 0

    # The trailing block only counts if it adds something past the carried sentence.
    if len(current) > carried:
        previous = " ".join(groups[-1]) if groups else None
        if " ".join(current) != previous:
            groups.append(current)

    return groups


def format_clock(seconds: float) -> str:
    """Format seconds as MM:SS, dropping fractions. Minutes are not wrapped into hours."""
    total = max(0, int(math.floor(seconds)))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


def report_filename(source_name: str) -> str:
    """File name for a saved report: the audio base name plus ``_sync.txt``."""
    return f"{Path(source_name).stem}{REPORT_SUFFIX}"


def render_block(block: SentenceBlock) -> str:
    return "\n".join(
        [
            f"PROMPT {block.label} | {format_clock(block.start_seconds)} - {format_clock(block.end_seconds)}",
            block.text,
            BLOCK_DELIMITER,
        ]
    )


def render_report(report: SyncReport) -> str:
    """
    Render a SyncReport as plain text.

    The header rounds the total duration up, matching the end of the last
    block. An empty report renders as an empty string.
    """
    if report.is_empty:
        return ""

    header = "\n".join(
        [
            "SYNC SCRIPT",
            f"Source: {report.source_label}",
            f"Total duration: {format_clock(math.ceil(report.duration_seconds))}",
            f"Blocks: {report.block_count}",
            HEADER_RULE,
        ]
    )
    body = "\n\n".join(render_block(block) for block in report.blocks)
    return f"{header}\n\n{body}"


class SyncBlockGenerator:
    """
    Builds SyncReports from a transcript and the length of its audio.
    """

    @timer
    def generate(self, transcript: str, duration_seconds: float, source_label: str) -> SyncReport:
        """
        Align a transcript to fixed-width time blocks.

        Args:
            transcript: Free text; sentences end with ``.``, ``!`` or ``?``
            duration_seconds: Length of the audio, must be positive
            source_label: Name shown in the report header

        Returns:
            SyncReport; it has no blocks when the transcript has no sentences

        Raises:
            SyncBlockError: If duration_seconds is not positive
        """
        if not (duration_seconds > 0 and math.isfinite(duration_seconds)):
            raise SyncBlockError(f"Audio duration must be a positive number of seconds, got {duration_seconds}")

        sentences = split_sentences(transcript)
        if not sentences:
            return SyncReport(source_label=source_label, duration_seconds=duration_seconds)

        target = target_words_per_block(count_words(transcript), duration_seconds)
        groups = group_sentences(sentences, target)

        last_start = math.floor(duration_seconds)
        last_end = math.ceil(duration_seconds)
        blocks = [
            SentenceBlock(
                index=i,
                start_seconds=min(i * BLOCK_SECONDS, last_start),
                end_seconds=min((i + 1) * BLOCK_SECONDS, last_end),
                sentences=list(group),
            )
            for i, group in enumerate(groups)
        ]
        # The final block always runs to the end of the audio.
        blocks[-1].end_seconds = last_end

        return SyncReport(source_label=source_label, duration_seconds=duration_seconds, blocks=blocks)


# Convenience function for simple use cases
def generate(transcript: str, duration_seconds: float, source_label: str) -> SyncReport:
    """Generate a SyncReport with a default generator."""
    return SyncBlockGenerator().generate(transcript, duration_seconds, source_label)
