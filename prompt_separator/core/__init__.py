"""
Core functionality for the Prompt Separator.

This package contains the main logic for:
- Splitting prompts and classifying them by character presence
- Aligning transcripts to fixed-width sync blocks
- Proxying audio to the remote speech-to-text service
- Configuration management
"""
