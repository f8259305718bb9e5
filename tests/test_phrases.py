"""
Tests for melodic phrase generation.

Run with: pytest tests/test_phrases.py -v
"""

import random

import pytest

from tabgen.data.schema import (
    ChordProgressionEntry,
    GenerationOptions,
    PatternType,
    ProgressionChord,
    TabPhrase,
)
from tabgen.errors import InvalidTuningError
from tabgen.rules import library
from tabgen.rules.fretboard import STANDARD_TUNING, TUNING_PRESETS, Position
from tabgen.rules.notes import note_at
from tabgen.rules.phrases import (
    PhraseGenerator,
    connecting_sequence,
    generate_phrase,
    resolve_options,
    score_position,
)
from tabgen.rules.progressions import generate_progression, progression_chords


C_MAJOR = ["C", "E", "G"]
C_MAJOR_SCALE = ["C", "D", "E", "F", "G", "A", "B"]
A_MINOR = ["A", "C", "E"]
A_MINOR_SCALE = ["A", "B", "C", "D", "E", "F", "G"]


class FirstChoice:
    """Random source that always picks the first candidate."""

    def randrange(self, stop):
        return 0


def sounded(phrase: TabPhrase, tuning=STANDARD_TUNING):
    return [note_at(tuning[n.string_index], n.fret) for n in phrase.notes]


# =============================================================================
# OPTIONS
# =============================================================================

class TestOptions:
    """Test option defaults and merging."""

    def test_defaults(self):
        opts = resolve_options()
        assert opts.phrase_length == 6
        assert opts.preferred_position == 5
        assert opts.emphasize_chord_tones is True
        assert opts.position_range == 4
        assert opts.resolved_pattern == PatternType.ARPEGGIATED

    def test_dict_overrides(self):
        opts = resolve_options({"phrase_length": 8, "pattern_type": "mixed"})
        assert opts.phrase_length == 8
        assert opts.resolved_pattern == PatternType.MIXED
        assert opts.preferred_position == 5

    def test_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            resolve_options({"phrase_length": 3})

    def test_generator_defaults_apply(self):
        generator = PhraseGenerator(rng=FirstChoice(), default_options={"phrase_length": 4})
        phrase = generator.generate_phrase("C Major", C_MAJOR, C_MAJOR_SCALE)
        assert len(phrase.notes) == 4


# =============================================================================
# SCORING
# =============================================================================

class TestScoring:
    """Test the position scoring heuristic."""

    def test_full_score(self):
        # chord tone, on the anchor, inner string, comfortable fret
        assert score_position(Position(2, 5), "C", C_MAJOR, True, 5) == 20

    def test_open_outer_string(self):
        assert score_position(Position(0, 0), "E", C_MAJOR, True, 5) == 8

    def test_chord_tone_bonus_only_when_emphasizing(self):
        with_bonus = score_position(Position(2, 5), "C", C_MAJOR, True, 5)
        without = score_position(Position(2, 5), "C", C_MAJOR, False, 5)
        assert with_bonus - without == 10

    def test_non_chord_tone(self):
        assert score_position(Position(2, 7), "D", C_MAJOR, True, 5) == 3 + 3 + 2

    @pytest.mark.parametrize("anchor", range(3, 10))
    def test_anchor_fret_scores_highest(self, anchor):
        for string_index in range(6):
            best = score_position(Position(string_index, anchor), "C", C_MAJOR, True, anchor)
            for fret in range(13):
                other = score_position(Position(string_index, fret), "C", C_MAJOR, True, anchor)
                assert best >= other


# =============================================================================
# POSITION SELECTION
# =============================================================================

class TestSelectBestPosition:
    """Test position choice for single notes."""

    def test_top_scored_in_window(self):
        generator = PhraseGenerator(rng=FirstChoice())
        pos = generator.select_best_position("C", STANDARD_TUNING, C_MAJOR)
        assert pos == Position(2, 5)

    def test_chosen_from_window(self):
        generator = PhraseGenerator(rng=random.Random(4))
        for _ in range(20):
            pos = generator.select_best_position("E", STANDARD_TUNING, C_MAJOR)
            assert 3 <= pos.fret <= 7

    def test_falls_back_to_whole_neck(self):
        generator = PhraseGenerator(rng=FirstChoice())
        opts = {"preferred_position": 0, "position_range": 0}
        pos = generator.select_best_position("C", STANDARD_TUNING, C_MAJOR, opts)
        assert pos is not None
        assert note_at(STANDARD_TUNING[pos.string_index], pos.fret) == "C"


# =============================================================================
# NOTE SEQUENCES
# =============================================================================

class TestSequences:
    """Test the note-sequence strategies."""

    def test_arpeggiated_cycles_chord(self):
        generator = PhraseGenerator(rng=FirstChoice())
        sequence = generator.build_note_sequence(C_MAJOR, C_MAJOR_SCALE)
        assert sequence == ["C", "E", "G", "C", "E", "G"]

    def test_arpeggio_falls_back_to_scale(self):
        generator = PhraseGenerator(rng=FirstChoice())
        sequence = generator.build_note_sequence([], ["A", "C", "D", "E", "G"], {"phrase_length": 4})
        assert sequence == ["A", "C", "D", "E"]

    def test_ascending_run(self):
        generator = PhraseGenerator(rng=FirstChoice())
        opts = {"pattern_type": "ascending-run", "phrase_length": 8, "emphasize_chord_tones": False}
        assert generator.build_note_sequence(C_MAJOR, C_MAJOR_SCALE, opts) == [
            "C", "D", "E", "F", "G", "A", "B", "C",
        ]

    def test_descending_run(self):
        generator = PhraseGenerator(rng=FirstChoice())
        opts = {"pattern_type": "descending-run", "phrase_length": 8, "emphasize_chord_tones": False}
        assert generator.build_note_sequence(C_MAJOR, C_MAJOR_SCALE, opts) == [
            "C", "B", "A", "G", "F", "E", "D", "C",
        ]

    def test_run_lands_chord_tones_on_even_steps(self):
        generator = PhraseGenerator(rng=FirstChoice())
        opts = {"pattern_type": "ascending-run", "phrase_length": 8}
        sequence = generator.build_note_sequence(C_MAJOR, C_MAJOR_SCALE, opts)
        assert sequence == ["C", "D", "E", "F", "G", "A", "C", "C"]
        assert all(sequence[i] in C_MAJOR for i in range(0, 8, 2))

    def test_mixed_mostly_chord_tones(self):
        generator = PhraseGenerator(rng=random.Random(3))
        opts = {"pattern_type": "mixed", "phrase_length": 9}
        sequence = generator.build_note_sequence(A_MINOR, A_MINOR_SCALE, opts)
        assert len(sequence) == 9
        assert all(note in A_MINOR_SCALE for note in sequence)
        chord_tones = sum(1 for note in sequence if note in A_MINOR)
        assert chord_tones >= 6

    def test_mixed_without_emphasis_stays_in_scale(self):
        generator = PhraseGenerator(rng=random.Random(8))
        opts = {"pattern_type": "mixed", "phrase_length": 12, "emphasize_chord_tones": False}
        sequence = generator.build_note_sequence(A_MINOR, A_MINOR_SCALE, opts)
        assert len(sequence) == 12
        assert all(note in A_MINOR_SCALE for note in sequence)

    def test_invalid_names_dropped(self):
        generator = PhraseGenerator(rng=FirstChoice())
        sequence = generator.build_note_sequence(["C", "Q", "G"], [], {"phrase_length": 4})
        assert sequence == ["C", "G", "C", "G"]


# =============================================================================
# SINGLE PHRASES
# =============================================================================

class TestGeneratePhrase:
    """Test phrase generation for one chord."""

    def test_empty_input_gives_empty_phrase(self):
        phrase = PhraseGenerator().generate_phrase("Nothing", [], [])
        assert phrase.chord_name == "Nothing"
        assert phrase.notes == []

    def test_phrase_sounds_the_sequence(self):
        phrase = PhraseGenerator(rng=random.Random(1)).generate_phrase("C Major", C_MAJOR, C_MAJOR_SCALE)
        assert phrase.chord_name == "C Major"
        assert phrase.pattern == PatternType.ARPEGGIATED
        assert sounded(phrase) == ["C", "E", "G", "C", "E", "G"]

    @pytest.mark.parametrize("pattern", [p.value for p in PatternType])
    @pytest.mark.parametrize("length", [4, 7, 12])
    def test_length_and_ranges(self, pattern, length):
        generator = PhraseGenerator(rng=random.Random(length))
        opts = GenerationOptions(phrase_length=length, pattern_type=pattern)
        phrase = generator.generate_phrase("A Minor", A_MINOR, A_MINOR_SCALE, options=opts)
        assert len(phrase.notes) == length
        for note in phrase.notes:
            assert 0 <= note.string_index <= 5
            assert 0 <= note.fret <= 12
        assert all(n in A_MINOR_SCALE for n in sounded(phrase))

    def test_alternate_tuning(self):
        tuning = TUNING_PRESETS["dadgad"]
        phrase = PhraseGenerator(rng=random.Random(2)).generate_phrase("D Major", ["D", "F#", "A"], tuning=tuning)
        assert sounded(phrase, tuning) == ["D", "F#", "A", "D", "F#", "A"]

    def test_bad_tuning(self):
        with pytest.raises(InvalidTuningError):
            PhraseGenerator().generate_phrase("C Major", C_MAJOR, tuning=["E", "B", "G"])

    def test_seeded_output_is_repeatable(self):
        first = generate_phrase("C Major", C_MAJOR, C_MAJOR_SCALE, rng=random.Random(9))
        second = generate_phrase("C Major", C_MAJOR, C_MAJOR_SCALE, rng=random.Random(9))
        assert first == second


# =============================================================================
# CONNECTING PHRASES
# =============================================================================

class TestConnectingPhrase:
    """Test phrases that lead from one chord into the next."""

    def test_sequence_resolves_to_next_chord(self):
        assert connecting_sequence(C_MAJOR, ["G", "B", "D"], C_MAJOR_SCALE, 6) == [
            "C", "E", "G", "C", "C", "D",
        ]

    def test_long_walk_is_trimmed(self):
        sequence = connecting_sequence(["C"], ["F#"], ["C", "D", "E", "F#", "G#", "A#"], 4)
        assert len(sequence) == 4
        assert sequence[0] == "C"
        assert sequence[-1] == "F#"

    def test_phrase_starts_and_ends_on_chord_tones(self):
        generator = PhraseGenerator(rng=random.Random(5))
        phrase = generator.generate_connecting_phrase(
            A_MINOR, ["E", "G#", "B"], library.scale_notes("A Harmonic Minor"),
            from_chord_name="A Minor", to_chord_name="E Major",
        )
        notes = sounded(phrase)
        assert phrase.chord_name == "A Minor -> E Major"
        assert phrase.pattern == PatternType.MIXED
        assert len(notes) == 6
        assert notes[0] in A_MINOR
        assert notes[-1] in ["E", "G#", "B"]

    def test_default_name(self):
        phrase = PhraseGenerator().generate_connecting_phrase(C_MAJOR, A_MINOR, C_MAJOR_SCALE)
        assert phrase.chord_name == "Transition"

    def test_without_scale(self):
        phrase = PhraseGenerator(rng=FirstChoice()).generate_connecting_phrase(C_MAJOR, ["G", "B", "D"])
        notes = sounded(phrase)
        assert notes[0] in C_MAJOR
        assert notes[-1] in ["G", "B", "D"]

    def test_nothing_to_connect(self):
        phrase = PhraseGenerator().generate_connecting_phrase([], [], [])
        assert phrase.notes == []


# =============================================================================
# PROGRESSION PHRASES
# =============================================================================

class TestProgressionPhrases:
    """Test one phrase per chord of a progression."""

    def test_one_phrase_per_chord(self):
        entries = generate_progression("A", "Spanish Romantic", base_position_hint=7)
        generator = PhraseGenerator(rng=random.Random(6))
        phrases = generator.generate_progression_phrases(
            progression_chords(entries), library.scale_notes("A Harmonic Minor")
        )
        assert [p.chord_name for p in phrases] == ["A Minor", "G Major", "F Major", "E Major"]
        for phrase in phrases:
            assert 5 <= len(phrase.notes) <= 7

    def test_entries_are_looked_up(self):
        entries = generate_progression("C", "Folk", base_position_hint=5)
        phrases = PhraseGenerator(rng=random.Random(6)).generate_progression_phrases(entries)
        assert len(phrases) == 4
        assert set(sounded(phrases[0])) <= set(C_MAJOR)

    def test_empty_entries_skipped(self):
        progression = [
            ProgressionChord(name="A Minor", notes=A_MINOR),
            ProgressionChord(name="", notes=["C"]),
            ProgressionChord(name="G Major", notes=[]),
            ChordProgressionEntry(chord_name="Nonsense"),
        ]
        phrases = PhraseGenerator(rng=random.Random(6)).generate_progression_phrases(progression)
        assert [p.chord_name for p in phrases] == ["A Minor"]

    def test_length_bounds(self):
        chords = [ProgressionChord(name="A Minor", notes=A_MINOR)] * 6
        generator = PhraseGenerator(rng=random.Random(12))
        for opts in ({"phrase_length": 4}, {"phrase_length": 12}):
            for phrase in generator.generate_progression_phrases(chords, options=opts):
                assert 4 <= len(phrase.notes) <= 8

    def test_empty_progression(self):
        assert PhraseGenerator().generate_progression_phrases([]) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
