"""
Notes Module - Chromatic Note Arithmetic

The 12-note chromatic alphabet and modular arithmetic over it. Everything
else in the engine (chords, scales, fretboard positions) is built on the
functions here.

Notes are compared by index (0-11) into CHROMATIC_SCALE. Two spellings of the
same pitch class (e.g. "A#" and "Bb") compare equal because comparison is
done on the index, never on the string.
"""

from tabgen.errors import InvalidNoteError


# =============================================================================
# CONSTANTS
# =============================================================================

# Canonical names, sharps only, starting from A
CHROMATIC_SCALE = ["A", "A#", "B", "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#"]

# Enharmonic equivalents accepted on input
FLAT_TO_SHARP = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
}

SEMITONES_PER_OCTAVE = 12


# =============================================================================
# CORE FUNCTIONS
# =============================================================================

def normalize_note(note: str) -> str:
    """Convert a note name to its canonical sharp form."""
    if not isinstance(note, str):
        raise InvalidNoteError(f"Note must be a string. Got: {note!r}")

    note = note.strip()
    if len(note) == 1:
        note = note.upper()
    elif len(note) == 2:
        note = note[0].upper() + note[1].lower()
    else:
        raise InvalidNoteError(f"Invalid note format: '{note}'")

    if note in FLAT_TO_SHARP:
        note = FLAT_TO_SHARP[note]

    if note not in CHROMATIC_SCALE:
        raise InvalidNoteError(f"Unknown note: '{note}'. Valid notes are: {CHROMATIC_SCALE}")

    return note


def index_of(note: str) -> int:
    """Get the index of a note in the chromatic scale (0-11)."""
    return CHROMATIC_SCALE.index(normalize_note(note))


def name_of(index: int) -> str:
    """Get the canonical name for any integer index, wrapping modulo 12."""
    return CHROMATIC_SCALE[index % SEMITONES_PER_OCTAVE]


def note_at(open_string_note: str, fret: int) -> str:
    """
    Get the note sounded at a fret on a string tuned to open_string_note.

    Example:
        >>> note_at("E", 3)
        'G'
        >>> note_at("A", 14)
        'B'

    Raises:
        InvalidNoteError: If open_string_note is not a known note name
    """
    return name_of(index_of(open_string_note) + fret)


def transpose(note: str, semitones: int) -> str:
    """Move a note up (or down, for negative values) by some semitones."""
    return name_of(index_of(note) + semitones)


def interval_between(lower: str, upper: str) -> int:
    """Ascending semitone distance from lower to upper, in 0-11."""
    return (index_of(upper) - index_of(lower)) % SEMITONES_PER_OCTAVE
