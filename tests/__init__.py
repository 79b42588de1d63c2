"""
Test suite for the Prompt Separator.

This package contains tests for:
- Type definitions and data structures
- Prompt splitting and character classification
- Sync block generation and report rendering
- Transcription proxying and audio probing
- Configuration management
- The CLI and HTTP endpoints
"""
