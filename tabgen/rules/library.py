"""
Library Module - Named Chords and Scales for Every Root

Builds every chord (12 roots x 7 qualities = 84) and every scale
(12 roots x 9 qualities = 108) from interval formulas, keyed by the display
name "{root} {quality}", e.g. "C Major", "A m7", "E Phrygian Dominant".

The tables are built once per process and only read afterwards.
"""

from functools import lru_cache
import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

from tabgen.data.schema import ChordDefinition, ChordQuality, ScaleDefinition, ScaleQuality
from tabgen.rules.notes import CHROMATIC_SCALE, index_of, name_of, normalize_note

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS: Interval Formulas
# =============================================================================

# Semitone offsets from the root. The root (0) always comes first.
CHORD_FORMULAS: Dict[ChordQuality, Tuple[int, ...]] = {
    ChordQuality.MAJOR: (0, 4, 7),
    ChordQuality.MINOR: (0, 3, 7),
    ChordQuality.MAJ7: (0, 4, 7, 11),
    ChordQuality.DOM7: (0, 4, 7, 10),
    ChordQuality.MIN7: (0, 3, 7, 10),
    ChordQuality.SUS4: (0, 5, 7),
    ChordQuality.ADD9: (0, 4, 7, 2),      # 9th listed last, as voiced
}

SCALE_FORMULAS: Dict[ScaleQuality, Tuple[int, ...]] = {
    ScaleQuality.MAJOR: (0, 2, 4, 5, 7, 9, 11),             # W-W-H-W-W-W-H
    ScaleQuality.MINOR: (0, 2, 3, 5, 7, 8, 10),             # natural minor
    ScaleQuality.PENTATONIC_MAJOR: (0, 2, 4, 7, 9),
    ScaleQuality.PENTATONIC_MINOR: (0, 3, 5, 7, 10),
    ScaleQuality.BLUES: (0, 3, 5, 6, 7, 10),
    ScaleQuality.HARMONIC_MINOR: (0, 2, 3, 5, 7, 8, 11),
    ScaleQuality.MELODIC_MINOR: (0, 2, 3, 5, 7, 9, 11),     # ascending form
    ScaleQuality.PHRYGIAN: (0, 1, 3, 5, 7, 8, 10),
    ScaleQuality.PHRYGIAN_DOMINANT: (0, 1, 4, 5, 7, 8, 10),
}

ChordLibrary = Dict[str, ChordDefinition]
ScaleLibrary = Dict[str, ScaleDefinition]


# =============================================================================
# CORE FUNCTIONS
# =============================================================================

def definition_name(root: str, quality: Union[ChordQuality, ScaleQuality]) -> str:
    """Display key for a chord or scale, e.g. ("A", ChordQuality.MIN7) -> "A m7"."""
    return f"{normalize_note(root)} {quality.value}"


def build_chord(root: str, quality: ChordQuality) -> ChordDefinition:
    """Build one chord from its root and quality."""
    root_index = index_of(root)
    intervals = CHORD_FORMULAS[quality]
    return ChordDefinition(
        name=definition_name(root, quality),
        root_index=root_index,
        quality=quality,
        intervals=list(intervals),
        notes=[name_of(root_index + offset) for offset in intervals],
    )


def build_scale(root: str, quality: ScaleQuality) -> ScaleDefinition:
    """Build one scale from its root and quality."""
    root_index = index_of(root)
    intervals = SCALE_FORMULAS[quality]
    return ScaleDefinition(
        name=definition_name(root, quality),
        root_index=root_index,
        quality=quality,
        intervals=list(intervals),
        notes=[name_of(root_index + offset) for offset in intervals],
    )


@lru_cache(maxsize=1)
def _build_tables() -> Tuple[Mapping[str, ChordDefinition], Mapping[str, ScaleDefinition]]:
    chords: ChordLibrary = {}
    scales: ScaleLibrary = {}
    for root in CHROMATIC_SCALE:
        for quality in ChordQuality:
            chord = build_chord(root, quality)
            chords[chord.name] = chord
        for quality in ScaleQuality:
            scale = build_scale(root, quality)
            scales[scale.name] = scale

    logger.debug("built chord/scale library: %d chords, %d scales", len(chords), len(scales))
    return MappingProxyType(chords), MappingProxyType(scales)


@lru_cache(maxsize=1)
def _lookup_index() -> Tuple[Mapping[str, str], Mapping[str, str]]:
    chords, scales = _build_tables()
    return (
        MappingProxyType({name.lower(): name for name in chords}),
        MappingProxyType({name.lower(): name for name in scales}),
    )


def build_all() -> Tuple[ChordLibrary, ScaleLibrary]:
    """
    Get every chord and scale, keyed by display name.

    The definitions are computed once and cached. Each call returns fresh
    dicts over the same immutable definitions, so callers cannot corrupt
    the shared tables.

    Returns:
        (chord name -> ChordDefinition, scale name -> ScaleDefinition)
    """
    chords, scales = _build_tables()
    return dict(chords), dict(scales)


def _lookup_key(name: str) -> str:
    # "bb minor" and "A# Minor" both map to "a# minor"
    name = " ".join(name.split())
    root, _, rest = name.partition(" ")
    try:
        root = normalize_note(root)
    except ValueError:
        return name.lower()
    return f"{root} {rest}".lower()


def get_chord(name: str) -> Optional[ChordDefinition]:
    """Look up a chord by name. Unknown names return None."""
    chords, _ = _build_tables()
    chord_index, _ = _lookup_index()
    key = chord_index.get(_lookup_key(name or ""))
    if key is None:
        logger.debug("unknown chord name: %r", name)
        return None
    return chords[key]


def get_scale(name: str) -> Optional[ScaleDefinition]:
    """Look up a scale by name. Unknown names return None."""
    _, scales = _build_tables()
    _, scale_index = _lookup_index()
    key = scale_index.get(_lookup_key(name or ""))
    if key is None:
        logger.debug("unknown scale name: %r", name)
        return None
    return scales[key]


def get(name: str) -> Optional[ChordDefinition]:
    """Look up a chord by name (the common case for the phrase generator)."""
    return get_chord(name)


def chord_notes(name: str) -> List[str]:
    """Notes of a chord, or an empty list when the name is unknown."""
    chord = get_chord(name)
    return list(chord.notes) if chord else []


def scale_notes(name: str) -> List[str]:
    """Notes of a scale, or an empty list when the name is unknown."""
    scale = get_scale(name)
    return list(scale.notes) if scale else []


def display_label(definition: Union[ChordDefinition, ScaleDefinition]) -> str:
    """Label for selection lists, e.g. "C Major [C, E, G]"."""
    return f"{definition.name} [{', '.join(definition.notes)}]"


def chord_names(root: Optional[str] = None) -> List[str]:
    """All chord names in table order, optionally only for one root."""
    chords, _ = _build_tables()
    return [name for name, chord in chords.items() if root is None or chord.root_index == index_of(root)]


def scale_names(root: Optional[str] = None) -> List[str]:
    """All scale names in table order, optionally only for one root."""
    _, scales = _build_tables()
    return [name for name, scale in scales.items() if root is None or scale.root_index == index_of(root)]
