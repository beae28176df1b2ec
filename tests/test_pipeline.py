"""Unit tests for the caption normalization pipeline.

WHY: The pipeline decides what the learner actually hears and types.
A wrong merge produces segments that cut words in half; a missed
progressive reveal makes the learner type the same phrase twice; a
wrong duration makes the player loop the wrong span.

HOW: Tests cover each pass in isolation, then the full normalize_cues()
chain, organized by class:
  - TestDeduplicate: consecutive collapse, gap absorption, case sensitivity
  - TestMergeShortSegments: threshold, join rule, chains, no re-check
  - TestRemoveProgressiveReveals: prefix rule, chains, untouched timing
  - TestIndexSegments / TestNormalizeCues: indices, invariants, empty input

RULES:
- Floating-point comparisons use pytest.approx
- Known characteristics (no re-check, untouched survivor timing) are
  pinned so a change in behavior is deliberate
"""

import pytest

from dictation_practice.core.ir import RawCue, Segment
from dictation_practice.core.pipeline import (
    NoSubtitlesError,
    deduplicate,
    index_segments,
    merge_short_segments,
    normalize_cues,
    remove_progressive_reveals,
)


def _cue(text, start, duration):
    return RawCue(text=text, start=start, duration=duration)


class TestDeduplicate:
    """deduplicate() collapses consecutive identical texts."""

    def test_identical_consecutive_cues_collapse(self):
        result = deduplicate([_cue("hi", 0.0, 1.0), _cue("hi", 1.0, 1.0)])
        assert len(result) == 1
        assert result[0].text == "hi"
        assert result[0].start == pytest.approx(0.0)
        assert result[0].duration == pytest.approx(2.0)

    def test_gap_between_duplicates_is_absorbed(self):
        result = deduplicate([_cue("hi", 1.0, 0.5), _cue("hi", 3.0, 1.0)])
        assert len(result) == 1
        assert result[0].end == pytest.approx(4.0)
        assert result[0].duration == pytest.approx(3.0)

    def test_run_of_three_ends_at_last_cue(self):
        cues = [_cue("a", 0.0, 1.0), _cue("a", 1.0, 1.0), _cue("a", 2.5, 0.5)]
        result = deduplicate(cues)
        assert len(result) == 1
        assert result[0].end == pytest.approx(3.0)

    def test_non_consecutive_repeats_are_kept(self):
        cues = [_cue("a", 0.0, 1.0), _cue("b", 1.0, 1.0), _cue("a", 2.0, 1.0)]
        result = deduplicate(cues)
        assert [c.text for c in result] == ["a", "b", "a"]

    def test_comparison_is_case_sensitive(self):
        result = deduplicate([_cue("Hi", 0.0, 1.0), _cue("hi", 1.0, 1.0)])
        assert len(result) == 2

    def test_comparison_is_untrimmed(self):
        result = deduplicate([_cue("hi", 0.0, 1.0), _cue("hi ", 1.0, 1.0)])
        assert len(result) == 2

    def test_empty_input(self):
        assert deduplicate([]) == []

    def test_input_records_are_not_reused(self):
        cues = [_cue("a", 0.0, 1.0), _cue("b", 1.0, 1.0)]
        result = deduplicate(cues)
        assert result == cues
        assert all(out is not src for out, src in zip(result, cues))

    def test_no_consecutive_equal_texts_in_output(self):
        cues = [
            _cue("a", 0, 1), _cue("a", 1, 1), _cue("b", 2, 1),
            _cue("b", 3, 1), _cue("a", 4, 1), _cue("c", 5, 1), _cue("c", 6, 1),
        ]
        result = deduplicate(cues)
        for prev, cur in zip(result, result[1:]):
            assert prev.text != cur.text


class TestMergeShortSegments:
    """merge_short_segments() folds sub-0.8s entries into the previous one."""

    def test_short_entry_merges_into_previous(self):
        cues = [_cue("hello", 0.0, 1.0), _cue("world", 1.0, 0.5)]
        result = merge_short_segments(cues)
        assert len(result) == 1
        assert result[0].text == "hello world"
        assert result[0].start == pytest.approx(0.0)
        assert result[0].duration == pytest.approx(1.5)

    def test_duration_is_recomputed_not_summed(self):
        cues = [_cue("hello", 0.0, 1.0), _cue("world", 3.0, 0.5)]
        result = merge_short_segments(cues)
        assert result[0].duration == pytest.approx(3.5)

    def test_leading_short_entry_has_no_merge_target(self):
        cues = [_cue("uh", 0.0, 0.3), _cue("hello there", 0.3, 2.0)]
        result = merge_short_segments(cues)
        assert [c.text for c in result] == ["uh", "hello there"]
        assert result[0].duration == pytest.approx(0.3)

    def test_threshold_is_strict(self):
        cues = [_cue("a", 0.0, 1.0), _cue("b", 1.0, 0.8)]
        result = merge_short_segments(cues)
        assert len(result) == 2

    def test_chain_of_short_entries_grows_one_entry(self):
        cues = [
            _cue("one", 0.0, 1.0),
            _cue("two", 1.0, 0.2),
            _cue("three", 1.2, 0.3),
            _cue("four", 1.5, 0.1),
        ]
        result = merge_short_segments(cues)
        assert len(result) == 1
        assert result[0].text == "one two three four"
        assert result[0].duration == pytest.approx(1.6)

    def test_join_always_inserts_one_space(self):
        cues = [_cue("trailing ", 0.0, 1.0), _cue(" leading", 1.0, 0.2)]
        result = merge_short_segments(cues)
        assert result[0].text == "trailing   leading"

    def test_merged_result_is_not_rechecked(self):
        # Two short entries: the first has no target, the second merges
        # into it, and the result is still under the threshold.
        cues = [_cue("a", 0.0, 0.2), _cue("b", 0.2, 0.3), _cue("c", 2.0, 1.0)]
        result = merge_short_segments(cues)
        assert [c.text for c in result] == ["a b", "c"]
        assert result[0].duration == pytest.approx(0.5)
        assert result[0].duration < 0.8

    def test_long_entries_after_merged_entry_are_appended(self):
        cues = [_cue("a", 0.0, 1.0), _cue("b", 1.0, 0.1), _cue("c", 1.1, 2.0)]
        result = merge_short_segments(cues)
        assert [c.text for c in result] == ["a b", "c"]

    def test_custom_threshold(self):
        cues = [_cue("a", 0.0, 2.0), _cue("b", 2.0, 1.5)]
        result = merge_short_segments(cues, min_duration=2.0)
        assert [c.text for c in result] == ["a b"]

    def test_every_entry_after_the_first_meets_threshold_when_no_merge_chain(self):
        cues = [
            _cue("a", 0.0, 1.2), _cue("b", 1.2, 0.4), _cue("c", 1.6, 0.9),
            _cue("d", 2.5, 0.1), _cue("e", 2.6, 3.0),
        ]
        result = merge_short_segments(cues)
        for entry in result[1:]:
            assert entry.duration >= 0.8


class TestRemoveProgressiveReveals:
    """remove_progressive_reveals() drops entries the next one extends."""

    def test_prefix_entry_is_dropped(self):
        cues = [_cue("hello", 0.0, 1.0), _cue("hello world", 1.0, 2.0)]
        result = remove_progressive_reveals(cues)
        assert [c.text for c in result] == ["hello world"]

    def test_survivor_timing_is_untouched(self):
        cues = [_cue("hello", 0.0, 1.0), _cue("hello world", 1.0, 2.0)]
        result = remove_progressive_reveals(cues)
        assert result[0].start == pytest.approx(1.0)
        assert result[0].duration == pytest.approx(2.0)

    def test_chain_collapses_to_longest(self):
        cues = [_cue("a", 0, 1), _cue("a b", 1, 1), _cue("a b c", 2, 1)]
        result = remove_progressive_reveals(cues)
        assert [c.text for c in result] == ["a b c"]

    def test_prefix_without_space_boundary_is_kept(self):
        cues = [_cue("he", 0, 1), _cue("hello", 1, 1)]
        result = remove_progressive_reveals(cues)
        assert [c.text for c in result] == ["he", "hello"]

    def test_only_next_entry_is_checked(self):
        cues = [_cue("hello", 0, 1), _cue("other", 1, 1), _cue("hello world", 2, 1)]
        result = remove_progressive_reveals(cues)
        assert [c.text for c in result] == ["hello", "other", "hello world"]

    def test_match_is_case_sensitive(self):
        cues = [_cue("Hello", 0, 1), _cue("hello world", 1, 1)]
        result = remove_progressive_reveals(cues)
        assert len(result) == 2

    def test_last_entry_is_always_kept(self):
        cues = [_cue("x", 0, 1)]
        assert remove_progressive_reveals(cues) == cues

    def test_no_prefix_pairs_remain(self):
        cues = [
            _cue("we", 0, 1), _cue("we are", 1, 1), _cue("here", 2, 1),
            _cue("here now", 3, 1), _cue("done", 4, 1),
        ]
        result = remove_progressive_reveals(cues)
        for prev, cur in zip(result, result[1:]):
            assert not cur.text.startswith(prev.text + " ")


class TestIndexSegments:
    """index_segments() assigns 0-based positions."""

    def test_indices_match_positions(self):
        cues = [_cue("a", 0, 1), _cue("b", 1, 1), _cue("c", 2, 1)]
        segments = index_segments(cues)
        assert [s.index for s in segments] == [0, 1, 2]
        assert all(isinstance(s, Segment) for s in segments)

    def test_empty_input(self):
        assert index_segments([]) == []


class TestNormalizeCues:
    """normalize_cues() runs the full pipeline."""

    def test_progressive_reveal_example(self):
        cues = [_cue("hello", 0.0, 0.3), _cue("hello world", 0.3, 2.0)]
        result = normalize_cues(cues)
        assert len(result) == 1
        assert result[0].text == "hello world"
        assert result[0].index == 0
        assert result[0].duration == pytest.approx(2.0)
        # The survivor keeps its own start, not the dropped entry's.
        assert result[0].start == pytest.approx(0.3)

    def test_duplicate_example(self):
        cues = [_cue("hi", 0.0, 1.0), _cue("hi", 1.0, 1.0)]
        result = normalize_cues(cues)
        assert result == [Segment(text="hi", start=0.0, duration=2.0, index=0)]

    def test_sample_track(self, sample_raw_cues, sample_segments):
        result = normalize_cues(sample_raw_cues)
        assert [s.text for s in result] == [s.text for s in sample_segments]
        for got, expected in zip(result, sample_segments):
            assert got.index == expected.index
            assert got.start == pytest.approx(expected.start)
            assert got.duration == pytest.approx(expected.duration)

    def test_short_fragments_then_reveal(self):
        cues = [
            _cue("I think", 0.0, 1.0),
            _cue("so", 1.0, 0.4),
            _cue("I think so too", 1.4, 2.0),
        ]
        result = normalize_cues(cues)
        # "I think" + "so" merge, then "I think so" is a prefix of the next.
        assert [s.text for s in result] == ["I think so too"]

    def test_empty_input_raises(self):
        with pytest.raises(NoSubtitlesError):
            normalize_cues([])

    def test_invariants_hold(self):
        cues = [
            _cue("a", 0.0, 0.5), _cue("a", 0.5, 0.5), _cue("a b", 1.0, 1.0),
            _cue("c", 2.0, 0.2), _cue("d", 2.2, 1.5), _cue("d e", 3.7, 1.0),
            _cue("f", 4.7, 2.0), _cue("f", 6.7, 1.0),
        ]
        result = normalize_cues(cues)
        assert [s.index for s in result] == list(range(len(result)))
        for prev, cur in zip(result, result[1:]):
            assert prev.start <= cur.start
            assert prev.text != cur.text
            assert not cur.text.startswith(prev.text + " ")
