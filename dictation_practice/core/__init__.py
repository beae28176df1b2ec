"""Core normalization, scoring, and intermediate representation modules.

WHY: The core package contains the stable heart of the tool — the cue and
segment records, the caption cleanup pipeline, and accuracy scoring.
These are consumed by the API, the CLI, the practice session, and all
export formatters.

HOW: ir.py defines the data structures, pipeline.py turns raw cues into
indexed segments, scoring.py grades attempts, video_id.py validates input.

RULES:
- IR dataclasses are the contract — change with care
- Everything here is pure: no network, no subprocesses, no files
"""
