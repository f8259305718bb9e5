"""
Tablature Module - Plain-Text Rendering of Phrases and the Fretboard

    C Major
    E|-----------|
    B|----5------|
    G|-5---------|
    D|-----------|
    A|-------3---|
    E|-----------|

Lines are drawn highest string first, matching tuning index order. Each note
of a phrase gets its own column, so the order of play reads left to right.
"""

from typing import List, Optional, Sequence

from tabgen.data.schema import TabPhrase
from tabgen.rules.fretboard import MAX_FRET, STANDARD_TUNING, fretboard_grid, validate_tuning
from tabgen.rules.notes import index_of


EMPTY_MESSAGE = "No tablature to display. Generate phrases to see guitar tabs here."

CHORD_TONE_MARK = "*"


def _column_width(phrase: TabPhrase) -> int:
    widest = max((len(str(note.fret)) for note in phrase.notes), default=1)
    return widest + 2


def render_phrase(phrase: TabPhrase, tuning: Sequence[str] = STANDARD_TUNING, show_header: bool = True) -> str:
    """Render one phrase as six lines of tab, optionally under its chord name."""
    tuning = validate_tuning(tuning)
    width = _column_width(phrase)
    label_width = max(len(note) for note in tuning)

    lines = []
    if show_header:
        lines.append(phrase.chord_name)

    for string_index, open_note in enumerate(tuning):
        cells = []
        for note in phrase.notes:
            if note.string_index == string_index:
                cells.append(str(note.fret).rjust(width - 1, "-") + "-")
            else:
                cells.append("-" * width)
        body = "".join(cells) + "--"
        lines.append(f"{open_note.ljust(label_width)}|{body}|")

    return "\n".join(lines)


def render_phrases(phrases: Sequence[TabPhrase], tuning: Sequence[str] = STANDARD_TUNING) -> str:
    """Render phrases one under the other, separated by a blank line."""
    if not phrases:
        return EMPTY_MESSAGE
    return "\n\n".join(render_phrase(phrase, tuning) for phrase in phrases)


def render_fretboard(
    tuning: Sequence[str] = STANDARD_TUNING,
    chord_notes: Optional[Sequence[str]] = None,
    scale_notes: Optional[Sequence[str]] = None,
    frets: int = MAX_FRET,
) -> str:
    """
    Draw the neck with chord and scale tones marked.

    Chord tones show as "C*", other scale tones as "D", everything else as
    "-". With neither chords nor scales given, every note is shown.
    """
    grid = fretboard_grid(tuning, frets)
    chord_set = {index_of(n) for n in chord_notes or []}
    scale_set = {index_of(n) for n in scale_notes or []}
    show_all = not chord_set and not scale_set

    def cell(name: str) -> str:
        pc = index_of(name)
        if pc in chord_set:
            return name + CHORD_TONE_MARK
        if pc in scale_set or show_all:
            return name
        return "-"

    label_width = max(len(row[0]) for row in grid)
    header = " " * (label_width + 1) + "".join(str(fret).center(5) for fret in range(frets + 1))
    lines: List[str] = [header]
    for row in grid:
        lines.append(row[0].ljust(label_width) + "|" + "".join(cell(name).center(5) for name in row))
    return "\n".join(lines)
