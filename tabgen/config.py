"""
Configuration for the tab generator.

A config file is YAML and every key is optional:

    tuning: drop-d            # preset name, or a list of six notes
    seed: 42                  # omit for fresh randomness on every run
    options:
      phrase_length: 8
      preferred_position: 7
      emphasize_chord_tones: true
      position_range: 4
      pattern_type: mixed

Usage:
    config = load_config("tabgen.yaml")
    tuning = resolve_tuning(config)
    rng = make_rng(config.seed)
"""

from pathlib import Path
import random
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator
import yaml

from tabgen.data.schema import GenerationOptions
from tabgen.rules.fretboard import validate_tuning


class GeneratorConfig(BaseModel):
    """Settings shared by every generation request."""
    tuning: Union[str, List[str]] = Field(default="standard", examples=["standard", ["D", "A", "G", "D", "A", "D"]])
    options: GenerationOptions = Field(default_factory=GenerationOptions)
    seed: Optional[int] = None
    total_frets: int = Field(default=12, ge=8, le=24)

    @field_validator("tuning")
    @classmethod
    def validate_tuning_field(cls, v: Union[str, List[str]]) -> Union[str, List[str]]:
        """Reject bad tunings when the config is loaded, not at first use."""
        validate_tuning(v)
        return v


def load_config(path: Union[str, Path, None] = None) -> GeneratorConfig:
    """
    Load a YAML config file. No path (or an empty file) gives the defaults.

    Raises:
        FileNotFoundError: If the path does not exist
        ValueError: If the file is not a mapping or fails validation
    """
    if path is None:
        return GeneratorConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return GeneratorConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping. Got: {type(data).__name__}")

    return GeneratorConfig.model_validate(data)


def resolve_tuning(config: GeneratorConfig) -> List[str]:
    return validate_tuning(config.tuning)


def make_rng(seed: Optional[int] = None) -> random.Random:
    """A private generator, seeded when a seed is given."""
    return random.Random(seed)
