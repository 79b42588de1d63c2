"""Prompt Separator: split prompts by character presence and build transcript sync scripts."""

__version__ = "0.1.0"
