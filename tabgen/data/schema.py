"""
Schema definitions for the tab generator.

This module defines the Pydantic models shared by every part of the engine:
chord and scale definitions, progression formulas and entries, and the tab
notes and phrases that the phrase generator produces.

All models are immutable once built. A regenerated phrase is a new
TabPhrase, never an edited one.
"""

from enum import Enum
from typing import List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS (closed sets of qualities and patterns)
# =============================================================================

class ChordQuality(str, Enum):
    """Chord qualities. The value is the suffix used in display names."""
    MAJOR = "Major"
    MINOR = "Minor"
    MAJ7 = "Maj7"
    DOM7 = "7"
    MIN7 = "m7"
    SUS4 = "Sus4"
    ADD9 = "Add9"


class ScaleQuality(str, Enum):
    """Scale qualities. The value is the suffix used in display names."""
    MAJOR = "Major"
    MINOR = "Minor"
    PENTATONIC_MAJOR = "Pentatonic Major"
    PENTATONIC_MINOR = "Pentatonic Minor"
    BLUES = "Blues"
    HARMONIC_MINOR = "Harmonic Minor"
    MELODIC_MINOR = "Melodic Minor"
    PHRYGIAN = "Phrygian"
    PHRYGIAN_DOMINANT = "Phrygian Dominant"


class StepQuality(str, Enum):
    """Quality of a single Roman-numeral step in a progression formula."""
    MAJOR = "Major"
    MINOR = "Minor"


class PatternType(str, Enum):
    """How the abstract note sequence of a phrase is built."""
    ASCENDING_RUN = "ascending-run"
    DESCENDING_RUN = "descending-run"
    ARPEGGIATED = "arpeggiated"
    MIXED = "mixed"


# =============================================================================
# CHORDS AND SCALES
# =============================================================================

class ChordDefinition(BaseModel):
    """
    A chord built from a root and an interval formula.

    Example:
        >>> ChordDefinition(name="C Major", root_index=3,
        ...                 quality=ChordQuality.MAJOR,
        ...                 intervals=[0, 4, 7], notes=["C", "E", "G"])
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, examples=["C Major", "A m7"])
    root_index: int = Field(..., ge=0, le=11, description="Index into the chromatic scale")
    quality: ChordQuality
    intervals: List[int] = Field(..., min_length=1, description="Semitone offsets from the root")
    notes: List[str] = Field(..., min_length=1, description="Notes derived from the intervals")


class ScaleDefinition(BaseModel):
    """A scale built from a root and an interval formula."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, examples=["A Minor", "E Phrygian Dominant"])
    root_index: int = Field(..., ge=0, le=11)
    quality: ScaleQuality
    intervals: List[int] = Field(..., min_length=1)
    notes: List[str] = Field(..., min_length=1)


# =============================================================================
# PROGRESSIONS
# =============================================================================

class RomanNumeral(BaseModel):
    """One step of a progression formula: an offset from the tonic plus a quality."""
    model_config = ConfigDict(frozen=True)

    offset: int = Field(..., description="Signed semitone offset from the tonic")
    quality: StepQuality


class ProgressionFormula(BaseModel):
    """
    A named scale-degree formula, e.g. "Spanish Romantic: i – VII – VI – V".

    The step count is not constrained here; generate_progression() rejects
    anything but four steps with InvalidFormulaError.
    """
    model_config = ConfigDict(frozen=True)

    label: str = Field(..., min_length=1)
    roman_numerals: List[RomanNumeral]
    is_minor_key: bool = False


class ChordProgressionEntry(BaseModel):
    """One slot of a progression: a chord name and the fret its root is shown at."""
    chord_name: str = Field(default="", examples=["A Minor", "G Major"])
    root_fret: int = Field(default=0, ge=0)


class ProgressionChord(BaseModel):
    """A chord name with its notes, as fed to generate_progression_phrases()."""
    model_config = ConfigDict(frozen=True)

    name: str = ""
    notes: List[str] = Field(default_factory=list)


# =============================================================================
# TABLATURE
# =============================================================================

class TabNote(BaseModel):
    """
    A single note of tablature.

    string_index 0 is the highest-pitched string of the tuning, 5 the lowest.
    """
    model_config = ConfigDict(frozen=True)

    string_index: int = Field(..., ge=0, le=5)
    fret: int = Field(..., ge=0, le=12)
    timing: Optional[float] = Field(default=None, gt=0, description="Optional rhythmic weight")


class TabPhrase(BaseModel):
    """A short melodic phrase for one chord (or one chord change)."""
    model_config = ConfigDict(frozen=True)

    chord_name: str
    notes: List[TabNote] = Field(default_factory=list)
    pattern: PatternType = PatternType.ARPEGGIATED


# =============================================================================
# GENERATION OPTIONS
# =============================================================================

class GenerationOptions(BaseModel):
    """
    Options for phrase generation. Every field has a default.

    Attributes:
        phrase_length: Number of notes to generate (4-12)
        preferred_position: Anchor fret for the hand position (0-12)
        emphasize_chord_tones: Score chord tones higher when placing notes
        position_range: Width of the fret window around the anchor
        pattern_type: Note-sequence strategy; None means arpeggiated
    """
    model_config = ConfigDict(frozen=True)

    phrase_length: int = Field(default=6, ge=4, le=12)
    preferred_position: int = Field(default=5, ge=0, le=12)
    emphasize_chord_tones: bool = True
    position_range: int = Field(default=4, ge=0, le=12)
    pattern_type: Optional[PatternType] = None

    @property
    def resolved_pattern(self) -> PatternType:
        return self.pattern_type or PatternType.ARPEGGIATED


# =============================================================================
# RANDOMNESS
# =============================================================================

class RandomSource(Protocol):
    """The one method the engine needs from a random generator (random.Random has it)."""

    def randrange(self, stop: int) -> int:
        ...
