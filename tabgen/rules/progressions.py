"""
Progressions Module - Four-Chord Progressions from Roman-Numeral Formulas

Each formula lists four steps as (semitone offset from the tonic, quality).
The quality of every step is written out explicitly in the table below and
is never re-derived from the scale degree, so minor-key formulas such as
"i - VII - VI - V" come out exactly as labelled.

Example:
    >>> names = progression_chord_names(generate_progression("A", "Spanish Romantic"))
    >>> names
    ['A Minor', 'G Major', 'F Major', 'E Major']
"""

import logging
import random
from typing import List, Optional, Sequence, Union

from tabgen.data.schema import (
    ChordProgressionEntry,
    ProgressionChord,
    ProgressionFormula,
    RomanNumeral,
    RandomSource,
    StepQuality,
)
from tabgen.errors import InvalidFormulaError
from tabgen.rules import library
from tabgen.rules.notes import index_of, name_of

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

TOTAL_FRETS = 12
PROGRESSION_LENGTH = 4

# Frets descend by this much per chord, floored at 0
FRET_STEP = 2

_MAJ = StepQuality.MAJOR
_MIN = StepQuality.MINOR


def _formula(label: str, steps: Sequence[tuple], is_minor_key: bool) -> ProgressionFormula:
    return ProgressionFormula(
        label=label,
        roman_numerals=[RomanNumeral(offset=offset, quality=quality) for offset, quality in steps],
        is_minor_key=is_minor_key,
    )


PROGRESSION_FORMULAS: tuple = (
    _formula("Folk: I – V – vi – IV", [(0, _MAJ), (7, _MAJ), (9, _MIN), (5, _MAJ)], False),
    _formula("Pop: vi – IV – I – V", [(9, _MIN), (5, _MAJ), (0, _MAJ), (7, _MAJ)], False),
    _formula("Sad Pop: I – vi – iii – IV", [(0, _MAJ), (9, _MIN), (4, _MIN), (5, _MAJ)], False),
    _formula("Indie: I – iii – vi – V", [(0, _MAJ), (4, _MIN), (9, _MIN), (7, _MAJ)], False),
    _formula("Cinematic: i – VI – III – VII", [(0, _MIN), (8, _MAJ), (3, _MAJ), (10, _MAJ)], True),
    _formula("Classic Rock: I – IV – V – IV", [(0, _MAJ), (5, _MAJ), (7, _MAJ), (5, _MAJ)], False),
    _formula("Melancholy Minor: i – VII – VI – iv", [(0, _MIN), (10, _MAJ), (8, _MAJ), (5, _MIN)], True),
    # Step 2 is played Major despite the lower-case numeral in the label
    _formula("Dramatic Minor: i – v – VI – III", [(0, _MIN), (7, _MAJ), (8, _MAJ), (3, _MAJ)], True),
    _formula("Spanish: i – VII – VI – V", [(0, _MIN), (10, _MAJ), (8, _MAJ), (7, _MAJ)], True),
    _formula("Spanish Romantic: i – VII – VI – V", [(0, _MIN), (10, _MAJ), (8, _MAJ), (7, _MAJ)], True),
)


# =============================================================================
# FORMULA LOOKUP
# =============================================================================

def formula_name(formula: ProgressionFormula) -> str:
    """Short name of a formula: the label up to the colon, e.g. "Spanish Romantic"."""
    return formula.label.split(":", 1)[0].strip()


def get_formula(formula: Union[int, str, ProgressionFormula]) -> ProgressionFormula:
    """
    Resolve a formula given by table index, label or short name.

    Raises:
        InvalidFormulaError: If no formula matches
    """
    if isinstance(formula, ProgressionFormula):
        return formula

    if isinstance(formula, int):
        if not 0 <= formula < len(PROGRESSION_FORMULAS):
            raise InvalidFormulaError(
                f"Formula index must be 0-{len(PROGRESSION_FORMULAS) - 1}. Got: {formula}"
            )
        return PROGRESSION_FORMULAS[formula]

    wanted = formula.strip().lower()
    for candidate in PROGRESSION_FORMULAS:
        if wanted in (candidate.label.lower(), formula_name(candidate).lower()):
            return candidate

    raise InvalidFormulaError(
        f"Unknown progression formula: '{formula}'. "
        f"Valid formulas are: {[formula_name(f) for f in PROGRESSION_FORMULAS]}"
    )


# =============================================================================
# PROGRESSION GENERATION
# =============================================================================

def generate_progression(
    key: str,
    formula: Union[int, str, ProgressionFormula],
    base_position_hint: Optional[int] = None,
    rng: Optional[RandomSource] = None,
    total_frets: int = TOTAL_FRETS,
) -> List[ChordProgressionEntry]:
    """
    Build the four progression entries for a key and formula.

    Args:
        key: Tonic note, e.g. "A"
        formula: A ProgressionFormula, or the index/label of a built-in one
        base_position_hint: Fret for the first chord; each following chord
                            sits two frets lower (never below 0). When None,
                            a random base in [4, total_frets - 4] is used.
        rng: Random source for the base fret
        total_frets: Neck length used for the random base

    Returns:
        Four ChordProgressionEntry objects in formula order

    Raises:
        InvalidNoteError: If key is not a note name
        InvalidFormulaError: If the formula does not have exactly four steps
    """
    formula = get_formula(formula)
    if len(formula.roman_numerals) != PROGRESSION_LENGTH:
        raise InvalidFormulaError(
            f"Progression formula '{formula.label}' must have exactly {PROGRESSION_LENGTH} steps. "
            f"Got: {len(formula.roman_numerals)}"
        )

    tonic_index = index_of(key)

    if base_position_hint is None:
        rng = rng or random.Random()
        low, high = 4, total_frets - 4
        base_position_hint = low + rng.randrange(high - low + 1)

    entries = []
    for i, step in enumerate(formula.roman_numerals):
        chord_root = (tonic_index + step.offset) % 12
        entries.append(ChordProgressionEntry(
            chord_name=f"{name_of(chord_root)} {step.quality.value}",
            root_fret=max(base_position_hint - FRET_STEP * i, 0),
        ))

    logger.debug(
        "progression %s in %s: %s",
        formula_name(formula), name_of(tonic_index), [e.chord_name for e in entries],
    )
    return entries


def progression_chord_names(entries: Sequence[ChordProgressionEntry]) -> List[str]:
    """Just the chord names of a progression, in order."""
    return [entry.chord_name for entry in entries]


def progression_chords(entries: Sequence[ChordProgressionEntry]) -> List[ProgressionChord]:
    """
    Attach chord notes to progression entries for phrase generation.

    Unknown or empty names resolve to an empty note list; the phrase
    generator skips those entries.
    """
    return [
        ProgressionChord(name=entry.chord_name, notes=library.chord_notes(entry.chord_name))
        for entry in entries
    ]
