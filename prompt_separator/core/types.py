"""
Type definitions for the Prompt Separator.

This module defines the data structures produced by prompt classification,
sync block generation and transcription.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Bucket = Literal["with", "without"]


class PromptSegment(BaseModel):
    """
    A single prompt taken from the input text.

    Starts at a ``PROMPT <number>`` marker and runs up to the next marker
    or the end of the input.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Raw segment text including the marker line")


class ClassificationResult(BaseModel):
    """
    Prompts bucketed by presence of character markers.

    Both lists keep the order in which the prompts appeared in the input.
    """

    with_characters: List[str] = Field(default_factory=list, description="Prompts mentioning Char1, Char2 or Char3")
    without_characters: List[str] = Field(default_factory=list, description="Prompts with no character marker")

    @property
    def total(self) -> int:
        return len(self.with_characters) + len(self.without_characters)

    def joined(self, bucket: Bucket) -> str:
        """Return one bucket as a single text block, prompts separated by a blank line."""
        items = self.with_characters if bucket == "with" else self.without_characters
        return "\n\n".join(items)


class SentenceBlock(BaseModel):
    """
    A group of sentences assigned to one fixed-width time window.
    """

    index: int = Field(..., ge=0, description="0-based block position")
    start_seconds: int = Field(..., ge=0, description="Window start in whole seconds")
    end_seconds: int = Field(..., ge=0, description="Window end in whole seconds")
    sentences: List[str] = Field(default_factory=list, description="Sentences in this block, in transcript order")

    @property
    def text(self) -> str:
        return " ".join(self.sentences)

    @property
    def label(self) -> str:
        """1-based index padded to three digits."""
        return f"{self.index + 1:03d}"


class SyncReport(BaseModel):
    """
    Transcript aligned to time blocks, ready to be rendered as a sync script.
    """

    source_label: str = Field(..., description="Name of the source audio file")
    duration_seconds: float = Field(..., description="Total audio duration in seconds")
    blocks: List[SentenceBlock] = Field(default_factory=list, description="Ordered sentence blocks")

    @property
    def block_count(self) -> int:
        return len(self.blocks)

    @property
    def is_empty(self) -> bool:
        return not self.blocks


class Transcript(BaseModel):
    """
    Result of remote speech recognition.
    """

    text: str = Field(..., description="Transcribed text, as returned by the service")
    source_name: Optional[str] = Field(default=None, description="File name of the transcribed audio")
