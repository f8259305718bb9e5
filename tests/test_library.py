"""
Tests for the chord and scale library.

Run with: pytest tests/test_library.py -v
"""

import pytest

from tabgen.data.schema import ChordQuality, ScaleQuality
from tabgen.rules import library
from tabgen.rules.notes import CHROMATIC_SCALE


class TestBuildAll:
    """Test the full chord and scale tables."""

    def test_counts(self):
        chords, scales = library.build_all()
        assert len(chords) == 84
        assert len(scales) == 108

    def test_root_comes_first(self):
        for root in CHROMATIC_SCALE:
            for quality in ChordQuality:
                assert library.get_chord(f"{root} {quality.value}").notes[0] == root
            for quality in ScaleQuality:
                assert library.get_scale(f"{root} {quality.value}").notes[0] == root

    def test_intervals_start_at_zero(self):
        chords, scales = library.build_all()
        for definition in list(chords.values()) + list(scales.values()):
            assert definition.intervals[0] == 0

    def test_note_count_matches_formula(self):
        chords, scales = library.build_all()
        for chord in chords.values():
            assert len(chord.notes) == len(library.CHORD_FORMULAS[chord.quality])
        for scale in scales.values():
            assert len(scale.notes) == len(library.SCALE_FORMULAS[scale.quality])

    def test_callers_get_their_own_dicts(self):
        chords, _ = library.build_all()
        chords.clear()
        again, _ = library.build_all()
        assert len(again) == 84


class TestChords:
    """Test specific chord spellings."""

    @pytest.mark.parametrize("name,notes", [
        ("C Major", ["C", "E", "G"]),
        ("A Minor", ["A", "C", "E"]),
        ("G 7", ["G", "B", "D", "F"]),
        ("A m7", ["A", "C", "E", "G"]),
        ("F Maj7", ["F", "A", "C", "E"]),
        ("D Sus4", ["D", "G", "A"]),
        ("C Add9", ["C", "E", "G", "D"]),
        ("A# Major", ["A#", "D", "F"]),
    ])
    def test_chord_notes(self, name, notes):
        assert library.chord_notes(name) == notes

    def test_lookup_accepts_flats_and_case(self):
        assert library.get_chord("Bb Minor").name == "A# Minor"
        assert library.get_chord("c major").name == "C Major"

    def test_get_is_a_chord_lookup(self):
        assert library.get("E Major") == library.get_chord("E Major")

    def test_unknown_chord(self):
        assert library.get_chord("H Major") is None
        assert library.get_chord("C Diminished") is None
        assert library.chord_notes("") == []

    def test_chord_names_for_one_root(self):
        names = library.chord_names("A")
        assert len(names) == len(ChordQuality)
        assert all(name.startswith("A ") for name in names)


class TestScales:
    """Test specific scale spellings."""

    @pytest.mark.parametrize("name,notes", [
        ("C Major", ["C", "D", "E", "F", "G", "A", "B"]),
        ("A Minor", ["A", "B", "C", "D", "E", "F", "G"]),
        ("A Pentatonic Minor", ["A", "C", "D", "E", "G"]),
        ("A Blues", ["A", "C", "D", "D#", "E", "G"]),
        ("A Harmonic Minor", ["A", "B", "C", "D", "E", "F", "G#"]),
        ("E Phrygian Dominant", ["E", "F", "G#", "A", "B", "C", "D"]),
    ])
    def test_scale_notes(self, name, notes):
        assert library.scale_notes(name) == notes

    def test_unknown_scale(self):
        assert library.get_scale("C Lydian") is None
        assert library.scale_notes("C Lydian") == []

    def test_scale_names_for_one_root(self):
        assert len(library.scale_names("E")) == len(ScaleQuality)


class TestDisplayLabel:
    """Test selection-list labels."""

    def test_chord_label(self):
        assert library.display_label(library.get_chord("C Major")) == "C Major [C, E, G]"

    def test_scale_label(self):
        label = library.display_label(library.get_scale("A Pentatonic Minor"))
        assert label == "A Pentatonic Minor [A, C, D, E, G]"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
