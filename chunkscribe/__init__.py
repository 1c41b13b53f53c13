"""Chunked speech-to-text transcription with overlap-aware merging."""
