"""
Rules Subpackage - the music-theory engine

    - notes.py: Chromatic note arithmetic
    - library.py: Chords and scales for every root
    - progressions.py: Four-chord progressions from Roman-numeral formulas
    - fretboard.py: Tunings and fretboard position search
    - phrases.py: Melodic phrase generation
    - tablature.py: Plain-text rendering

Usage:
    from tabgen.rules import generate_progression, progression_chords, PhraseGenerator

    entries = generate_progression("A", "Spanish Romantic", base_position_hint=7)
    phrases = PhraseGenerator().generate_progression_phrases(progression_chords(entries))
"""

"""
                    ┌─────────────────┐
                    │      notes      │ → note_at("E", 3) == "G"
                    └─────────────────┘
                              │
                              ▼
                    ┌─────────────────┐
                    │     library     │ → "A Minor" = [A, C, E]
                    └─────────────────┘
                         │          │
                         ▼          ▼
           ┌─────────────────┐   ┌─────────────────┐
           │  progressions   │   │     phrases     │ ← fretboard
           └─────────────────┘   └─────────────────┘
"""

from tabgen.rules.fretboard import STANDARD_TUNING, find_positions, filter_by_window, validate_tuning
from tabgen.rules.library import build_all, chord_notes, get, get_chord, get_scale, scale_notes
from tabgen.rules.notes import index_of, name_of, note_at
from tabgen.rules.phrases import PhraseGenerator, score_position
from tabgen.rules.progressions import PROGRESSION_FORMULAS, generate_progression, progression_chords
