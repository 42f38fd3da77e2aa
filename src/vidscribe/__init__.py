"""
vidscribe - turn video files into transcripts with VLC and Whisper.

A small orchestration layer for:
- Loading shell-style configuration files
- Checking that VLC and Whisper are installed
- Extracting a WAV track from a video with VLC
- Transcribing it with the Whisper CLI (or local faster-whisper)
- Cleaning up intermediate audio
"""

__version__ = "0.1.0"
