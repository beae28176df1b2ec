"""Shared test fixtures for the dictation_practice test suite.

WHY: Several test modules need the same noisy auto-caption sample: a
realistic WebVTT track with karaoke markup and the raw cues it should
parse into. Centralizing them keeps every module testing the same case.

HOW: Pytest fixtures provide the WebVTT text, the expected raw cues, and
the normalized segments built from them.

RULES:
- SAMPLE_VTT mirrors the layout yt-dlp writes for auto-generated tracks
- Expected values are written out by hand, not computed by the code
"""

from typing import List

import pytest

from dictation_practice.core.ir import RawCue, Segment


SAMPLE_VTT = """WEBVTT
Kind: captions
Language: en

00:00:00.160 --> 00:00:02.869 align:start position:0%
 
so<00:00:00.480><c> today</c><00:00:00.880><c> we're</c><00:00:01.120><c> going</c>

00:00:02.869 --> 00:00:02.879 align:start position:0%
so today we're going
 

00:00:02.879 --> 00:00:05.190 align:start position:0%
so today we're going
to<00:00:03.199><c> talk</c><00:00:03.520><c> about</c><00:00:03.919><c> coffee</c>

00:00:05.190 --> 00:00:05.200 align:start position:0%
to talk about coffee
 

00:00:05.200 --> 00:00:08.000 align:start position:0%
to talk about coffee
and<00:00:05.600><c> why</c><00:00:06.000><c> it</c><00:00:06.400><c> matters</c>
"""

SAMPLE_RAW_CUES: List[RawCue] = [
    RawCue(text="so today we're going", start=0.160, duration=2.709),
    RawCue(text="so today we're going", start=2.869, duration=0.010),
    RawCue(text="to talk about coffee", start=2.879, duration=2.311),
    RawCue(text="to talk about coffee", start=5.190, duration=0.010),
    RawCue(text="and why it matters", start=5.200, duration=2.800),
]


@pytest.fixture
def sample_vtt():
    """Auto-caption WebVTT track as written by yt-dlp."""
    return SAMPLE_VTT


@pytest.fixture
def sample_raw_cues():
    """The cues SAMPLE_VTT parses into."""
    return list(SAMPLE_RAW_CUES)


@pytest.fixture
def sample_segments():
    """Normalized, indexed segments for SAMPLE_RAW_CUES."""
    return [
        Segment(text="so today we're going", start=0.160, duration=2.719, index=0),
        Segment(text="to talk about coffee", start=2.879, duration=2.321, index=1),
        Segment(text="and why it matters", start=5.200, duration=2.800, index=2),
    ]
