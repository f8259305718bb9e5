"""
Data Subpackage

    - schema.py: Pydantic models shared by the whole engine

The core data structures are ChordDefinition/ScaleDefinition (what a name
means), ChordProgressionEntry (a slot of a progression) and TabPhrase (what
the phrase generator produces).
"""

from tabgen.data.schema import (
    ChordDefinition,
    ChordProgressionEntry,
    ChordQuality,
    GenerationOptions,
    PatternType,
    ProgressionChord,
    ProgressionFormula,
    RomanNumeral,
    ScaleDefinition,
    ScaleQuality,
    StepQuality,
    TabNote,
    TabPhrase,
)
