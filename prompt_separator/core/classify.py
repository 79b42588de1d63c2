"""
Prompt classification for the Prompt Separator.

Splits a block of text into ``PROMPT <number>`` segments and sorts each one
into the prompts that mention a character (Char1, Char2, Char3) and the
prompts that do not.
"""

import re
from typing import List

from .timing import timer
from .types import ClassificationResult, PromptSegment

CHARACTER_MARKERS = ("Char1", "Char2", "Char3")

# A prompt runs from its marker up to the next marker or the very end of input.
PROMPT_PATTERN = re.compile(r"PROMPT\s+\d+.*?(?=PROMPT\s+\d+|\Z)", re.DOTALL | re.ASCII)
CHARACTER_PATTERN = re.compile(r"\b(" + "|".join(CHARACTER_MARKERS) + r")\b", re.IGNORECASE | re.ASCII)


def split_prompts(text: str) -> List[PromptSegment]:
    """
    Split text into raw prompt segments.

    Args:
        text: Input text containing ``PROMPT <number>`` markers

    Returns:
        Segments in input order, untrimmed; empty if no marker is present
    """
    return [PromptSegment(text=match) for match in PROMPT_PATTERN.findall(text)]


def has_characters(prompt: str) -> bool:
    """Return True if the prompt mentions any character marker as a whole word."""
    return CHARACTER_PATTERN.search(prompt) is not None


class PromptClassifier:
    """
    Buckets prompts by character presence.

    Stateless: the same instance can classify any number of inputs.
    """

    @timer
    def classify(self, text: str) -> ClassificationResult:
        """
        Classify every prompt in the text.

        Segments that are empty after trimming are dropped. Malformed or
        markerless input gives two empty lists.

        Args:
            text: Raw text with one or more prompts

        Returns:
            ClassificationResult with both buckets in input order
        """
        with_characters: List[str] = []
        without_characters: List[str] = []

        for segment in split_prompts(text):
            prompt = segment.text.strip()
            if not prompt:
                continue
            if has_characters(prompt):
                with_characters.append(prompt)
            else:
                without_characters.append(prompt)

        return ClassificationResult(with_characters=with_characters, without_characters=without_characters)


# Convenience function for simple use cases
def classify(text: str) -> ClassificationResult:
    """Classify prompts in text with a default classifier."""
    return PromptClassifier().classify(text)
