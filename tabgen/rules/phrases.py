"""
Phrases Module - Short Playable Melodic Phrases ("Tabs") over Chords

Generation happens in two stages:

    chord / scale notes
            │
            ▼
    ┌──────────────────┐
    │  note sequence   │ → ['C', 'E', 'G', 'C', 'E', 'G']
    └──────────────────┘   (arpeggiated, ascending/descending run, mixed)
            │
            ▼
    ┌──────────────────┐
    │ position scoring │ → one (string, fret) per note, biased toward the
    └──────────────────┘   anchor fret, inner strings and chord tones
            │
            ▼
    TabPhrase(chord_name='C Major', notes=[TabNote(...), ...])

Each call is independent. The only state a PhraseGenerator holds is its
random source, used for tie-breaking and variation. Pass a seeded
random.Random for repeatable output.
"""

import logging
import random
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Set, Union

from tabgen.data.schema import (
    ChordProgressionEntry,
    GenerationOptions,
    PatternType,
    ProgressionChord,
    RandomSource,
    TabNote,
    TabPhrase,
)
from tabgen.errors import InvalidNoteError
from tabgen.rules import library
from tabgen.rules.fretboard import (
    MAX_FRET,
    MIN_FRET,
    STANDARD_TUNING,
    Position,
    filter_by_window,
    find_positions,
    validate_tuning,
)
from tabgen.rules.notes import index_of, normalize_note

logger = logging.getLogger(__name__)

OptionsLike = Union[GenerationOptions, Mapping, None]
ProgressionItem = Union[ProgressionChord, ChordProgressionEntry]


# =============================================================================
# CONSTANTS: Scoring Weights
# =============================================================================

CHORD_TONE_BONUS = 10
CLOSENESS_MAX = 5           # bonus is max(0, CLOSENESS_MAX - distance to anchor)
INNER_STRING_BONUS = 3      # strings 1-4
OPEN_STRING_PENALTY = 2
COMFORT_BONUS = 2           # frets 3-9

INNER_STRINGS = range(1, 5)
COMFORT_FRETS = range(3, 10)

# Random choice among this many best-scoring positions
TOP_CANDIDATES = 3

# Progression phrases: length varies by ±1 within these bounds,
# anchors cycle -1, 0, +1 within these bounds
PROGRESSION_LENGTH_BOUNDS = (4, 8)
PROGRESSION_POSITION_BOUNDS = (3, 9)

DEFAULT_OPTIONS = GenerationOptions()


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _clean_notes(notes: Optional[Sequence[str]]) -> List[str]:
    """Canonical names for the valid entries; invalid names are dropped."""
    cleaned = []
    for note in notes or []:
        try:
            cleaned.append(normalize_note(note))
        except InvalidNoteError:
            logger.debug("ignoring invalid note %r", note)
    return cleaned


def _pitch_classes(notes: Sequence[str]) -> Set[int]:
    return {index_of(n) for n in notes}


def _circular_distance(a: int, b: int, size: int) -> int:
    diff = (a - b) % size
    return min(diff, size - diff)


def resolve_options(options: OptionsLike = None, **overrides) -> GenerationOptions:
    """
    Merge user options over the defaults.

    Accepts a GenerationOptions, a plain dict of option fields, or None.
    Keyword overrides are applied last and validated.
    """
    if options is None:
        base = {}
    elif isinstance(options, GenerationOptions):
        base = options.model_dump(exclude_unset=True)
    else:
        base = dict(options)
    merged = {**DEFAULT_OPTIONS.model_dump(), **base, **overrides}
    return GenerationOptions.model_validate(merged)


# =============================================================================
# NOTE SEQUENCE STRATEGIES
# =============================================================================

def arpeggiated_sequence(
    chord_notes: Sequence[str],
    scale_notes: Sequence[str],
    length: int,
    emphasize_chord_tones: bool,
    rng: RandomSource,
) -> List[str]:
    """Cycle through the chord tones (or the scale, when there is no chord)."""
    source = list(chord_notes) or list(scale_notes)
    if not source:
        return []
    return [source[i % len(source)] for i in range(length)]


def _nearest_chord_tone(note: str, chord_notes: Sequence[str], descending: bool) -> str:
    """Closest chord tone by semitones; ties go the way the run is moving."""
    target = index_of(note)

    def distance(tone: str):
        up = (index_of(tone) - target) % 12
        down = (target - index_of(tone)) % 12
        nearest = min(up, down)
        # Tie-break: for an ascending run prefer the tone above
        toward_run = down if descending else up
        return (nearest, toward_run)

    return min(chord_notes, key=distance)


def _run_sequence(
    chord_notes: Sequence[str],
    scale_notes: Sequence[str],
    length: int,
    emphasize_chord_tones: bool,
    descending: bool,
) -> List[str]:
    scale = list(scale_notes) or list(chord_notes)
    if not scale:
        return []

    chord_set = _pitch_classes(chord_notes)
    start = next((i for i, n in enumerate(scale) if index_of(n) in chord_set), 0)
    step = -1 if descending else 1

    sequence = []
    for i in range(length):
        note = scale[(start + step * i) % len(scale)]
        # Strong beats (even steps) land on a chord tone
        if emphasize_chord_tones and chord_notes and i % 2 == 0 and index_of(note) not in chord_set:
            note = _nearest_chord_tone(note, chord_notes, descending)
        sequence.append(note)
    return sequence


def ascending_run_sequence(
    chord_notes: Sequence[str],
    scale_notes: Sequence[str],
    length: int,
    emphasize_chord_tones: bool,
    rng: RandomSource,
) -> List[str]:
    """Walk up the scale from its first chord tone, wrapping at the octave."""
    return _run_sequence(chord_notes, scale_notes, length, emphasize_chord_tones, descending=False)


def descending_run_sequence(
    chord_notes: Sequence[str],
    scale_notes: Sequence[str],
    length: int,
    emphasize_chord_tones: bool,
    rng: RandomSource,
) -> List[str]:
    """Walk down the scale from its first chord tone, wrapping at the octave."""
    return _run_sequence(chord_notes, scale_notes, length, emphasize_chord_tones, descending=True)


def mixed_sequence(
    chord_notes: Sequence[str],
    scale_notes: Sequence[str],
    length: int,
    emphasize_chord_tones: bool,
    rng: RandomSource,
) -> List[str]:
    """
    A melodic line that stays inside the scale.

    With chord-tone emphasis, two notes out of every three are chord tones
    (steps 0, 2, 3, 5, ...) reached by the smallest move along the scale,
    and the remaining steps are passing tones one scale step away. Without
    emphasis, every step moves one or two scale degrees in a random
    direction.
    """
    scale = list(scale_notes) or list(chord_notes)
    if not scale:
        return []

    size = len(scale)
    chord_set = _pitch_classes(chord_notes)
    anchors = [i for i, n in enumerate(scale) if index_of(n) in chord_set]
    use_anchors = emphasize_chord_tones and bool(anchors)

    position = anchors[0] if anchors else 0
    sequence = [scale[position]]

    for i in range(1, length):
        if use_anchors and i % 3 != 1:
            others = [a for a in anchors if a != position] or anchors
            best = min(_circular_distance(a, position, size) for a in others)
            nearest = [a for a in others if _circular_distance(a, position, size) == best]
            position = nearest[rng.randrange(len(nearest))]
        else:
            direction = 1 if rng.randrange(2) else -1
            distance = 1 if use_anchors else rng.randrange(2) + 1
            position = (position + direction * distance) % size
        sequence.append(scale[position])

    return sequence


SequenceStrategy = Callable[[Sequence[str], Sequence[str], int, bool, RandomSource], List[str]]

SEQUENCE_STRATEGIES: Dict[PatternType, SequenceStrategy] = {
    PatternType.ARPEGGIATED: arpeggiated_sequence,
    PatternType.ASCENDING_RUN: ascending_run_sequence,
    PatternType.DESCENDING_RUN: descending_run_sequence,
    PatternType.MIXED: mixed_sequence,
}


def connecting_sequence(
    from_chord_notes: Sequence[str],
    to_chord_notes: Sequence[str],
    scale_notes: Sequence[str],
    length: int,
) -> List[str]:
    """
    A line that starts on a tone of the first chord and resolves to the next.

    The line walks the working scale by step, the shorter way round, from the
    first in-scale tone of from_chord_notes to the nearest in-scale tone of
    to_chord_notes. Short walks are preceded by an arpeggio of the first
    chord; long walks keep their first note and the last length - 1 notes.
    """
    scale = list(scale_notes)
    if not scale:
        for note in list(from_chord_notes) + list(to_chord_notes):
            if index_of(note) not in _pitch_classes(scale):
                scale.append(note)
        scale.sort(key=index_of)
    if not scale:
        return []

    size = len(scale)
    scale_classes = [index_of(n) for n in scale]
    from_set = _pitch_classes(from_chord_notes)
    to_set = _pitch_classes(to_chord_notes)

    start = next((i for i, pc in enumerate(scale_classes) if pc in from_set), 0)

    targets = [i for i, pc in enumerate(scale_classes) if pc in to_set]
    if not targets:
        # The next chord has no tone in this scale: land on the scale note
        # closest in pitch to its root
        root = index_of(to_chord_notes[0]) if to_chord_notes else scale_classes[start]
        targets = [min(range(size), key=lambda i: _circular_distance(scale_classes[i], root, 12))]

    def steps_to(target: int) -> int:
        return _circular_distance(target, start, size)

    target = min(targets, key=lambda t: (steps_to(t), t))
    up = (target - start) % size
    direction = 1 if up <= size - up else -1
    path = [scale[(start + direction * k) % size] for k in range(steps_to(target) + 1)]

    if len(path) >= length:
        return [path[0]] + path[len(path) - (length - 1):]

    lead_in = list(from_chord_notes) or [scale[start]]
    padding = length - len(path)
    return [lead_in[k % len(lead_in)] for k in range(padding)] + path


# =============================================================================
# SCORING
# =============================================================================

def score_position(
    position: Position,
    note: str,
    chord_notes: Sequence[str],
    emphasize_chord_tones: bool,
    preferred_position: int,
) -> int:
    """
    Score a candidate position for a note. Higher is better.

        +10  chord tone (when emphasizing chord tones)
        +0..5 closeness to the anchor fret
        +3   inner strings (1-4)
        -2   open string
        +2   comfortable frets (3-9)
    """
    score = 0

    if emphasize_chord_tones and index_of(note) in _pitch_classes(chord_notes):
        score += CHORD_TONE_BONUS

    score += max(0, CLOSENESS_MAX - abs(position.fret - preferred_position))

    if position.string_index in INNER_STRINGS:
        score += INNER_STRING_BONUS

    if position.fret == 0:
        score -= OPEN_STRING_PENALTY

    if position.fret in COMFORT_FRETS:
        score += COMFORT_BONUS

    return score


# =============================================================================
# PHRASE GENERATOR
# =============================================================================

class PhraseGenerator:
    """
    Generates tab phrases for chords, chord changes and whole progressions.

    Example:
        >>> generator = PhraseGenerator(rng=random.Random(7))
        >>> phrase = generator.generate_phrase("C Major", ["C", "E", "G"],
        ...                                    scale_notes=["C", "D", "E", "F", "G", "A", "B"])
        >>> len(phrase.notes)
        6
    """

    def __init__(self, rng: Optional[RandomSource] = None, default_options: OptionsLike = None):
        self.rng = rng if rng is not None else random.Random()
        self.default_options = resolve_options(default_options)

    def _options(self, options: OptionsLike, **overrides) -> GenerationOptions:
        if options is None:
            base = self.default_options.model_dump()
        elif isinstance(options, GenerationOptions):
            base = {**self.default_options.model_dump(), **options.model_dump(exclude_unset=True)}
        else:
            base = {**self.default_options.model_dump(), **dict(options)}
        return resolve_options(base, **overrides)

    # -------------------------------------------------------------------------
    # Position selection
    # -------------------------------------------------------------------------

    def select_best_position(
        self,
        note: str,
        tuning: Sequence[str],
        chord_notes: Sequence[str],
        options: OptionsLike = None,
    ) -> Optional[Position]:
        """
        Pick a fretboard position for one note.

        Positions inside the window around the anchor fret are preferred.
        If the window holds none, the whole neck is searched instead. The
        candidates are scored and one of the top three is chosen at random.
        Returns None only when the note cannot be played at all.
        """
        opts = self._options(options)
        all_positions = find_positions(note, tuning, MIN_FRET, MAX_FRET)
        candidates = filter_by_window(all_positions, opts.preferred_position, opts.position_range)

        if not candidates:
            if not all_positions:
                logger.debug("note %s is unreachable with tuning %s", note, list(tuning))
                return None
            logger.debug("no position for %s near fret %d, using whole neck", note, opts.preferred_position)
            candidates = all_positions

        scored = sorted(
            candidates,
            key=lambda pos: score_position(
                pos, note, chord_notes, opts.emphasize_chord_tones, opts.preferred_position
            ),
            reverse=True,
        )
        top = scored[:TOP_CANDIDATES]
        return top[self.rng.randrange(len(top))]

    # -------------------------------------------------------------------------
    # Note sequences
    # -------------------------------------------------------------------------

    def build_note_sequence(
        self,
        chord_notes: Sequence[str],
        scale_notes: Sequence[str],
        options: OptionsLike = None,
    ) -> List[str]:
        """The abstract notes of a phrase, before any positions are chosen."""
        opts = self._options(options)
        strategy = SEQUENCE_STRATEGIES[opts.resolved_pattern]
        return strategy(
            _clean_notes(chord_notes),
            _clean_notes(scale_notes),
            opts.phrase_length,
            opts.emphasize_chord_tones,
            self.rng,
        )

    def _place_notes(
        self,
        sequence: Sequence[str],
        tuning: Sequence[str],
        chord_notes: Sequence[str],
        opts: GenerationOptions,
    ) -> List[TabNote]:
        tab_notes = []
        for note in sequence:
            position = self.select_best_position(note, tuning, chord_notes, opts)
            if position is None:
                continue
            tab_notes.append(TabNote(string_index=position.string_index, fret=position.fret))
        return tab_notes

    # -------------------------------------------------------------------------
    # Public generation API
    # -------------------------------------------------------------------------

    def generate_phrase(
        self,
        chord_name: str,
        chord_notes: Optional[Sequence[str]] = None,
        scale_notes: Optional[Sequence[str]] = None,
        tuning: Sequence[str] = STANDARD_TUNING,
        options: OptionsLike = None,
    ) -> TabPhrase:
        """
        Generate a phrase for one chord.

        Args:
            chord_name: Name carried onto the phrase, e.g. "C Major"
            chord_notes: Tones of the chord
            scale_notes: Tones of the scale in use
            tuning: Six open-string notes, highest string first
            options: GenerationOptions or a dict of its fields

        Returns:
            A TabPhrase with at most phrase_length notes. With no chord and
            no scale notes the phrase is empty.

        Raises:
            InvalidTuningError: If the tuning is malformed
        """
        tuning = validate_tuning(tuning)
        opts = self._options(options)
        chord = _clean_notes(chord_notes)
        scale = _clean_notes(scale_notes)

        if not chord and not scale:
            logger.debug("no notes for %r, returning an empty phrase", chord_name)
            return TabPhrase(chord_name=chord_name, notes=[], pattern=opts.resolved_pattern)

        sequence = self.build_note_sequence(chord, scale, opts)
        notes = self._place_notes(sequence, tuning, chord, opts)

        logger.debug(
            "phrase for %s (%s, anchor %d): %s",
            chord_name, opts.resolved_pattern.value, opts.preferred_position, sequence,
        )
        return TabPhrase(chord_name=chord_name, notes=notes, pattern=opts.resolved_pattern)

    def generate_connecting_phrase(
        self,
        from_chord_notes: Sequence[str],
        to_chord_notes: Sequence[str],
        scale_notes: Optional[Sequence[str]] = None,
        tuning: Sequence[str] = STANDARD_TUNING,
        options: OptionsLike = None,
        from_chord_name: Optional[str] = None,
        to_chord_name: Optional[str] = None,
    ) -> TabPhrase:
        """
        Generate a transitional phrase from one chord into the next.

        The phrase starts on a tone of the first chord and its last note is a
        tone of the second chord whenever that chord has a tone in the scale.
        Tones of both chords count as chord tones when scoring positions.
        """
        tuning = validate_tuning(tuning)
        opts = self._options(options)
        from_notes = _clean_notes(from_chord_notes)
        to_notes = _clean_notes(to_chord_notes)
        scale = _clean_notes(scale_notes)

        if from_chord_name and to_chord_name:
            name = f"{from_chord_name} -> {to_chord_name}"
        else:
            name = "Transition"

        sequence = connecting_sequence(from_notes, to_notes, scale, opts.phrase_length)
        if not sequence:
            return TabPhrase(chord_name=name, notes=[], pattern=PatternType.MIXED)

        notes = self._place_notes(sequence, tuning, from_notes + to_notes, opts)
        logger.debug("connecting phrase %s: %s", name, sequence)
        return TabPhrase(chord_name=name, notes=notes, pattern=PatternType.MIXED)

    def generate_progression_phrases(
        self,
        chord_progression: Sequence[ProgressionItem],
        scale_notes: Optional[Sequence[str]] = None,
        tuning: Sequence[str] = STANDARD_TUNING,
        options: OptionsLike = None,
    ) -> List[TabPhrase]:
        """
        Generate one phrase per chord of a progression.

        Each chord gets a phrase length of base ±1 (kept within 4-8) and an
        anchor fret that cycles -1, 0, +1 around the base (kept within 3-9),
        so consecutive phrases sit in slightly different hand positions.
        Entries with no name or no notes are skipped, so the result can be
        shorter than the progression.

        Args:
            chord_progression: ProgressionChord items (name + notes), or
                               ChordProgressionEntry items whose notes are
                               looked up in the chord library
        """
        tuning = validate_tuning(tuning)
        opts = self._options(options)

        phrases = []
        for index, item in enumerate(chord_progression):
            if isinstance(item, ChordProgressionEntry):
                name, notes = item.chord_name, library.chord_notes(item.chord_name)
            else:
                name, notes = item.name, list(item.notes)

            if not name or not notes:
                logger.debug("skipping progression entry %d (%r)", index, name)
                continue

            variation = self.rng.randrange(3) - 1
            phrase_length = _clamp(opts.phrase_length + variation, *PROGRESSION_LENGTH_BOUNDS)
            preferred_position = _clamp(
                opts.preferred_position + (index % 3) - 1, *PROGRESSION_POSITION_BOUNDS
            )

            phrase_options = opts.model_copy(
                update={"phrase_length": phrase_length, "preferred_position": preferred_position}
            )
            phrases.append(self.generate_phrase(name, notes, scale_notes, tuning, phrase_options))

        return phrases


# =============================================================================
# MODULE-LEVEL SHORTCUTS
# =============================================================================

def generate_phrase(
    chord_name: str,
    chord_notes: Optional[Sequence[str]] = None,
    scale_notes: Optional[Sequence[str]] = None,
    tuning: Sequence[str] = STANDARD_TUNING,
    options: OptionsLike = None,
    rng: Optional[RandomSource] = None,
) -> TabPhrase:
    return PhraseGenerator(rng=rng).generate_phrase(chord_name, chord_notes, scale_notes, tuning, options)


def generate_connecting_phrase(
    from_chord_notes: Sequence[str],
    to_chord_notes: Sequence[str],
    scale_notes: Optional[Sequence[str]] = None,
    tuning: Sequence[str] = STANDARD_TUNING,
    options: OptionsLike = None,
    rng: Optional[RandomSource] = None,
) -> TabPhrase:
    return PhraseGenerator(rng=rng).generate_connecting_phrase(
        from_chord_notes, to_chord_notes, scale_notes, tuning, options
    )


def generate_progression_phrases(
    chord_progression: Sequence[ProgressionItem],
    scale_notes: Optional[Sequence[str]] = None,
    tuning: Sequence[str] = STANDARD_TUNING,
    options: OptionsLike = None,
    rng: Optional[RandomSource] = None,
) -> List[TabPhrase]:
    return PhraseGenerator(rng=rng).generate_progression_phrases(chord_progression, scale_notes, tuning, options)
