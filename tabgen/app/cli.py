"""
Command Line Interface for the Guitar Tab Generator
===================================================

Usage Examples:
    # List chords (or scales) with their notes
    tab-gen chords --root A
    tab-gen scales --root E

    # A four-chord progression from a Roman-numeral formula
    tab-gen progression A --formula "Spanish Romantic"

    # Tab for one chord, walking up the A minor scale
    tab-gen phrase "A Minor" --scale "A Minor" --pattern ascending-run

    # Tab for every chord of a progression
    tab-gen progression-tab D --formula 9 --scale "D Harmonic Minor"

    # A phrase leading from one chord into the next
    tab-gen connect "C Major" "G Major" --scale "C Major"

    # The neck with chord and scale tones marked
    tab-gen fretboard --chord "E 7" --scale "E Phrygian Dominant" --tuning drop-d

Shared options: --tuning, --config, --seed, --json, --log-level, -v
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from tabgen.config import GeneratorConfig, load_config, make_rng, resolve_tuning
from tabgen.data.schema import GenerationOptions, PatternType
from tabgen.rules import library
from tabgen.rules.fretboard import TUNING_PRESETS, parse_tuning
from tabgen.rules.phrases import PhraseGenerator
from tabgen.rules.progressions import (
    PROGRESSION_FORMULAS,
    generate_progression,
    progression_chords,
)
from tabgen.rules.tablature import render_fretboard, render_phrase, render_phrases

logger = logging.getLogger(__name__)


# =============================================================================
# PART 1: ARGUMENT PARSER SETUP
# =============================================================================

def _formula_arg(value: str):
    """Formulas may be given by table index or by name."""
    return int(value) if value.isdigit() else value


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the command-line parser with one subcommand per operation.

    Shared options live on a parent parser so they can be written after the
    subcommand, e.g. `tab-gen phrase "C Major" --seed 3 --json`.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--tuning",
        help=f"Preset ({', '.join(TUNING_PRESETS)}) or six notes, highest string first, e.g. E,B,G,D,A,E",
    )
    common.add_argument("--config", help="YAML config file")
    common.add_argument("--seed", type=int, help="Seed for repeatable output")
    common.add_argument("--json", action="store_true", help="Output JSON instead of tablature")
    common.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    common.add_argument("-v", "--verbose", action="store_true", help="Shorthand for --log-level DEBUG")

    phrase_opts = argparse.ArgumentParser(add_help=False)
    phrase_opts.add_argument("--scale", help="Scale name, e.g. 'A Minor'")
    phrase_opts.add_argument("--length", type=int, help="Notes per phrase (4-12)")
    phrase_opts.add_argument("--position", type=int, help="Anchor fret (0-12)")
    phrase_opts.add_argument("--range", type=int, dest="position_range", help="Fret window width")
    phrase_opts.add_argument(
        "--no-emphasis",
        action="store_true",
        help="Do not favour chord tones when placing notes",
    )

    # connect always builds a mixed line
    pattern_opts = argparse.ArgumentParser(add_help=False)
    pattern_opts.add_argument(
        "--pattern",
        choices=[p.value for p in PatternType],
        help="How the note sequence is built",
    )

    parser = argparse.ArgumentParser(
        prog="tab-gen",
        description="Guitar tab generator - chords, scales, progressions and playable melodic phrases.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Formulas:\n" + "\n".join(
            f"  {i}: {formula.label}" for i, formula in enumerate(PROGRESSION_FORMULAS)
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    chords = subparsers.add_parser("chords", parents=[common], help="List chords")
    chords.add_argument("--root", help="Only chords on this root")

    scales = subparsers.add_parser("scales", parents=[common], help="List scales")
    scales.add_argument("--root", help="Only scales on this root")

    progression = subparsers.add_parser("progression", parents=[common], help="Build a progression")
    progression.add_argument("key", help="Tonic, e.g. A")
    progression.add_argument("--formula", type=_formula_arg, default=0, help="Formula index or name")
    progression.add_argument("--base-fret", type=int, help="Fret of the first chord")

    phrase = subparsers.add_parser("phrase", parents=[common, phrase_opts, pattern_opts], help="Tab for one chord")
    phrase.add_argument("chord", help="Chord name, e.g. 'C Major'")

    progression_tab = subparsers.add_parser(
        "progression-tab", parents=[common, phrase_opts, pattern_opts], help="Tab for every chord of a progression"
    )
    progression_tab.add_argument("key", help="Tonic, e.g. A")
    progression_tab.add_argument("--formula", type=_formula_arg, default=0, help="Formula index or name")
    progression_tab.add_argument("--base-fret", type=int, help="Fret of the first chord")

    connect = subparsers.add_parser("connect", parents=[common, phrase_opts], help="Phrase from one chord to another")
    connect.add_argument("from_chord", help="Chord to start from")
    connect.add_argument("to_chord", help="Chord to resolve into")

    fretboard = subparsers.add_parser("fretboard", parents=[common], help="Show the neck")
    fretboard.add_argument("--chord", help="Mark the tones of this chord")
    fretboard.add_argument("--scale", help="Mark the tones of this scale")
    fretboard.add_argument("--frets", type=int, default=12, help="Number of frets to draw")

    return parser


# =============================================================================
# PART 2: SETTINGS
# =============================================================================

def configure_logging(log_level: str) -> None:
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: '{log_level}'")
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(filename)s:%(lineno)d -- %(message)s",
        level=level,
    )


def resolve_settings(args: argparse.Namespace) -> GeneratorConfig:
    """Command-line flags win over the config file, which wins over defaults."""
    config = load_config(args.config)

    updates = {}
    if args.tuning:
        updates["tuning"] = parse_tuning(args.tuning)
    if args.seed is not None:
        updates["seed"] = args.seed

    option_updates = {}
    for flag, field in (
        ("length", "phrase_length"),
        ("position", "preferred_position"),
        ("position_range", "position_range"),
        ("pattern", "pattern_type"),
    ):
        value = getattr(args, flag, None)
        if value is not None:
            option_updates[field] = value
    if getattr(args, "no_emphasis", False):
        option_updates["emphasize_chord_tones"] = False

    if option_updates:
        merged = {**config.options.model_dump(exclude_unset=True), **option_updates}
        updates["options"] = GenerationOptions.model_validate(merged)

    if updates:
        config = GeneratorConfig.model_validate({**config.model_dump(exclude_unset=True), **updates})
    return config


# =============================================================================
# PART 3: COMMANDS
# =============================================================================

def _emit(data, text: str, output_json: bool) -> None:
    if output_json:
        print(json.dumps(data, indent=2))
    else:
        print(text)


def cmd_chords(args, config: GeneratorConfig) -> None:
    chords, _ = library.build_all()
    names = library.chord_names(args.root)
    _emit(
        {name: chords[name].notes for name in names},
        "\n".join(library.display_label(chords[name]) for name in names),
        args.json,
    )


def cmd_scales(args, config: GeneratorConfig) -> None:
    _, scales = library.build_all()
    names = library.scale_names(args.root)
    _emit(
        {name: scales[name].notes for name in names},
        "\n".join(library.display_label(scales[name]) for name in names),
        args.json,
    )


def cmd_progression(args, config: GeneratorConfig) -> None:
    rng = make_rng(config.seed)
    entries = generate_progression(args.key, args.formula, args.base_fret, rng=rng, total_frets=config.total_frets)
    lines = ["  →  ".join(entry.chord_name for entry in entries)]
    lines.extend(f"  {entry.chord_name:<12} fret {entry.root_fret}" for entry in entries)
    _emit([entry.model_dump() for entry in entries], "\n".join(lines), args.json)


def cmd_phrase(args, config: GeneratorConfig) -> None:
    tuning = resolve_tuning(config)
    generator = PhraseGenerator(rng=make_rng(config.seed), default_options=config.options)
    phrase = generator.generate_phrase(
        args.chord,
        library.chord_notes(args.chord),
        library.scale_notes(args.scale) if args.scale else [],
        tuning,
    )
    _emit(phrase.model_dump(mode="json"), render_phrase(phrase, tuning), args.json)


def cmd_progression_tab(args, config: GeneratorConfig) -> None:
    tuning = resolve_tuning(config)
    rng = make_rng(config.seed)
    entries = generate_progression(args.key, args.formula, args.base_fret, rng=rng, total_frets=config.total_frets)
    generator = PhraseGenerator(rng=rng, default_options=config.options)
    phrases = generator.generate_progression_phrases(
        progression_chords(entries),
        library.scale_notes(args.scale) if args.scale else [],
        tuning,
    )
    _emit([p.model_dump(mode="json") for p in phrases], render_phrases(phrases, tuning), args.json)


def cmd_connect(args, config: GeneratorConfig) -> None:
    tuning = resolve_tuning(config)
    generator = PhraseGenerator(rng=make_rng(config.seed), default_options=config.options)
    phrase = generator.generate_connecting_phrase(
        library.chord_notes(args.from_chord),
        library.chord_notes(args.to_chord),
        library.scale_notes(args.scale) if args.scale else [],
        tuning,
        from_chord_name=args.from_chord,
        to_chord_name=args.to_chord,
    )
    _emit(phrase.model_dump(mode="json"), render_phrase(phrase, tuning), args.json)


def cmd_fretboard(args, config: GeneratorConfig) -> None:
    tuning = resolve_tuning(config)
    chord = library.chord_notes(args.chord) if args.chord else []
    scale = library.scale_notes(args.scale) if args.scale else []
    text = render_fretboard(tuning, chord, scale, args.frets)
    _emit({"tuning": tuning, "chord": chord, "scale": scale}, text, args.json)


COMMANDS = {
    "chords": cmd_chords,
    "scales": cmd_scales,
    "progression": cmd_progression,
    "phrase": cmd_phrase,
    "progression-tab": cmd_progression_tab,
    "connect": cmd_connect,
    "fretboard": cmd_fretboard,
}


# =============================================================================
# PART 4: MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, apply the config and run one command.

    Returns:
        0 on success, 2 when the input is rejected (bad note, tuning,
        formula or option value)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging("DEBUG" if args.verbose else args.log_level)
        config = resolve_settings(args)
        logger.debug("running %s with %s", args.command, config)
        COMMANDS[args.command](args, config)
    except (ValueError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
