"""Dictation Practice — English listening drills built from YouTube captions.

WHY: Auto-generated YouTube captions are noisy: cues are repeated, split
into sub-second fragments, and re-emitted word by word as a sentence
grows. Typing along to that raw stream is useless for dictation practice.
This package turns a video's English caption track into a clean, indexed
list of practice segments and scores the learner's attempts against them.

HOW: Four-stage flow — fetch (yt-dlp adapter + WebVTT parser), normalize
(core pipeline), practise/score (practice session + scoring), and deliver
(HTTP API, CLI, export formatters). Each stage is independently testable.

RULES:
- The core pipeline and scoring are pure functions — no I/O
- The caption adapter is the only code that touches processes or disk
- Every surface (API, CLI, formatters) consumes the same Segment IR
"""

__version__ = "0.1.0"
