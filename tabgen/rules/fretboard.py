"""
Fretboard Module - Where Can a Note Be Played?

Tunings are lists of six open-string notes with index 0 the highest-pitched
string and index 5 the lowest, e.g. standard tuning is
["E", "B", "G", "D", "A", "E"]. This is the order tablature is drawn in,
top line first, and every function in the engine uses it.

A position is a (string_index, fret) pair. Position search is an exhaustive
scan of 6 strings x 13 frets, so there is nothing to cache.
"""

from dataclasses import dataclass
import logging
from typing import Dict, Iterable, List, Sequence, Union

from tabgen.errors import InvalidNoteError, InvalidTuningError
from tabgen.rules.notes import index_of, name_of, normalize_note

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

STRING_COUNT = 6
MIN_FRET = 0
MAX_FRET = 12

STANDARD_TUNING = ["E", "B", "G", "D", "A", "E"]

# Highest-pitched string first
TUNING_PRESETS: Dict[str, List[str]] = {
    "standard": STANDARD_TUNING,
    "drop-d": ["E", "B", "G", "D", "A", "D"],
    "half-step-down": ["D#", "A#", "F#", "C#", "G#", "D#"],
    "dadgad": ["D", "A", "G", "D", "A", "D"],
    "open-g": ["D", "B", "G", "D", "G", "D"],
    "open-d": ["D", "A", "F#", "D", "A", "D"],
}


# =============================================================================
# POSITIONS
# =============================================================================

@dataclass(frozen=True, order=True)
class Position:
    """A playable location: string (0 = highest) and fret."""
    string_index: int
    fret: int


# =============================================================================
# TUNING
# =============================================================================

def validate_tuning(tuning: Union[str, Sequence[str]]) -> List[str]:
    """
    Check a tuning and return it with canonical note names.

    Accepts a preset name ("drop-d") or six note names, highest string first.
    Flat spellings are accepted and normalized ("Eb" -> "D#").

    Raises:
        InvalidTuningError: If the tuning is unknown, does not have six
                            strings, or contains an invalid note
    """
    if isinstance(tuning, str):
        preset = TUNING_PRESETS.get(tuning.strip().lower())
        if preset is None:
            raise InvalidTuningError(
                f"Unknown tuning preset: '{tuning}'. Valid presets are: {list(TUNING_PRESETS)}"
            )
        return list(preset)

    tuning = list(tuning)
    if len(tuning) != STRING_COUNT:
        raise InvalidTuningError(
            f"Tuning must have exactly {STRING_COUNT} strings. Got {len(tuning)}: {tuning}"
        )

    try:
        return [normalize_note(note) for note in tuning]
    except InvalidNoteError as e:
        raise InvalidTuningError(f"Invalid note in tuning {tuning}: {e}") from e


def parse_tuning(text: str) -> List[str]:
    """Parse "E,B,G,D,A,E" (or a preset name) into a validated tuning."""
    if "," not in text and " " not in text.strip():
        return validate_tuning(text)
    return validate_tuning([part for part in text.replace(",", " ").split() if part])


# =============================================================================
# POSITION SEARCH
# =============================================================================

def find_positions(
    note: str,
    tuning: Sequence[str],
    fret_min: int = MIN_FRET,
    fret_max: int = MAX_FRET,
) -> List[Position]:
    """
    Find every (string, fret) in [fret_min, fret_max] that sounds `note`.

    Positions come back in string order, then fret order. An empty list
    means the note is unreachable with this tuning and fret range. Strings
    whose open note is not a valid note name contribute no positions.

    Example:
        >>> find_positions("E", STANDARD_TUNING, 0, 0)
        [Position(string_index=0, fret=0), Position(string_index=5, fret=0)]
    """
    target = index_of(note)
    positions = []
    for string_index, open_note in enumerate(tuning):
        try:
            open_index = index_of(open_note)
        except InvalidNoteError:
            logger.debug("skipping string %d with invalid open note %r", string_index, open_note)
            continue
        for fret in range(max(fret_min, MIN_FRET), min(fret_max, MAX_FRET) + 1):
            if (open_index + fret) % 12 == target:
                positions.append(Position(string_index, fret))
    return positions


def filter_by_window(positions: Iterable[Position], center: int, width: int) -> List[Position]:
    """Keep positions with fret in [center - width//2, center + width//2], clipped to the neck."""
    low = max(MIN_FRET, center - width // 2)
    high = min(MAX_FRET, center + width // 2)
    return [pos for pos in positions if low <= pos.fret <= high]


def note_at_position(position: Position, tuning: Sequence[str]) -> str:
    """Note name sounded at a position."""
    return name_of(index_of(tuning[position.string_index]) + position.fret)


def fretboard_grid(tuning: Sequence[str], frets: int = MAX_FRET) -> List[List[str]]:
    """
    Note names for every string and fret 0..frets.

    grid[string_index][fret] is the note at that position.
    """
    tuning = validate_tuning(tuning)
    return [
        [name_of(index_of(open_note) + fret) for fret in range(frets + 1)]
        for open_note in tuning
    ]
