"""
Guitar Tab Generator - Source Package

Music-theory computation and melodic phrase generation for a guitar
learning tool: chords and scales for every root, four-chord progressions
from Roman-numeral formulas, and short playable tab phrases over them.

Subpackages:
    - tabgen.data: Pydantic schemas (chords, scales, progressions, tabs)
    - tabgen.rules: The engine (notes, library, progressions, fretboard,
                    phrases, tablature)
    - tabgen.app: Command line interface

Example usage:
    from tabgen.rules import library, PhraseGenerator

    phrase = PhraseGenerator().generate_phrase(
        "A Minor", library.chord_notes("A Minor"), library.scale_notes("A Minor")
    )
    print(phrase.notes)   # [TabNote(string_index=2, fret=7), ...]
"""

__version__ = "0.1.0"
