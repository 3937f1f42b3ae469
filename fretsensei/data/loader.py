"""
Loader Module - Reads and validates the bundled YAML tables

Every table is parsed with yaml.safe_load, validated against its schema
and cached, so each file is read at most once per process. The returned
mappings are read-only views.

Usage:
    from fretsensei.data.loader import load_recordings, get_tuning

    recording = load_recordings()["gravity"]
    tuning = get_tuning("drop_d")
"""

import copy
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from fretsensei.data.schema import (
    ChordQualitySpec,
    ChordTable,
    CommentaryTable,
    EngineSettings,
    Recording,
    RecordingTable,
    ScaleTable,
    ScaleTypeSpec,
    TuningTable,
    VoicingSpec,
    VoicingTable,
    validate_segments,
)
from fretsensei.errors import ConfigError, NotFound
from fretsensei.theory.pitch import Tuning

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent

TUNINGS_FILE = DATA_DIR / "tunings.yaml"
CHORDS_FILE = DATA_DIR / "chords.yaml"
SCALES_FILE = DATA_DIR / "scales.yaml"
VOICINGS_FILE = DATA_DIR / "voicings.yaml"
RECORDINGS_FILE = DATA_DIR / "recordings.yaml"
COMMENTARY_FILE = DATA_DIR / "commentary.yaml"
SETTINGS_FILE = DATA_DIR / "settings.yaml"

M = TypeVar("M", bound=BaseModel)


# =============================================================================
# HELPERS
# =============================================================================

def read_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML mapping from disk. An empty file gives an empty dict."""
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(path.name, f"cannot read file ({e})") from e
    except yaml.YAMLError as e:
        raise ConfigError(path.name, f"invalid YAML ({e})") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(path.name, f"expected a mapping at the top level, got {type(data).__name__}")
    return data


def parse_table(model: Type[M], data: Dict[str, Any], source: str) -> M:
    """Validate raw YAML data against a schema model."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigError(source, str(e)) from e


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two nested dicts; values from override win."""
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


# =============================================================================
# TABLE LOADERS
# =============================================================================

@lru_cache(maxsize=None)
def load_tunings() -> Mapping[str, Tuning]:
    table = parse_table(TuningTable, read_yaml(TUNINGS_FILE), TUNINGS_FILE.name)
    tunings = {
        name.lower(): Tuning.from_names(name.lower(), notes)
        for name, notes in table.tunings.items()
    }
    logger.debug(f"Loaded {len(tunings)} tunings")
    return MappingProxyType(tunings)


def get_tuning(name: str) -> Tuning:
    """
    Look up a bundled tuning by name (case-insensitive, "-" and " " act as "_").

    Raises:
        NotFound: if no tuning has that name
    """
    key = name.strip().lower().replace("-", "_").replace(" ", "_")
    tunings = load_tunings()
    if key not in tunings:
        raise NotFound("tuning", name)
    return tunings[key]


@lru_cache(maxsize=None)
def load_chord_qualities() -> Mapping[str, ChordQualitySpec]:
    table = parse_table(ChordTable, read_yaml(CHORDS_FILE), CHORDS_FILE.name)
    return MappingProxyType(dict(table.qualities))


@lru_cache(maxsize=None)
def load_scale_types() -> Mapping[str, ScaleTypeSpec]:
    table = parse_table(ScaleTable, read_yaml(SCALES_FILE), SCALES_FILE.name)
    return MappingProxyType(dict(table.scales))


@lru_cache(maxsize=None)
def load_voicing_table() -> Mapping[str, Mapping[str, VoicingSpec]]:
    table = parse_table(VoicingTable, read_yaml(VOICINGS_FILE), VOICINGS_FILE.name)
    voicings = {
        symbol: MappingProxyType(dict(tiers))
        for symbol, tiers in table.voicings.items()
    }
    logger.debug(f"Loaded voicings for {len(voicings)} chords")
    return MappingProxyType(voicings)


def load_recordings_file(path: Union[str, Path]) -> Dict[str, Recording]:
    """
    Load and validate a recordings file.

    Raises:
        ConfigError: if a field is missing or has the wrong type
        MalformedTimeline: if any recording's segments overlap or are unsorted
    """
    path = Path(path)
    table = parse_table(RecordingTable, read_yaml(path), path.name)
    for recording in table.recordings:
        validate_segments(recording.segments, recording.duration)
    return {recording.id: recording for recording in table.recordings}


@lru_cache(maxsize=None)
def load_recordings() -> Mapping[str, Recording]:
    return MappingProxyType(load_recordings_file(RECORDINGS_FILE))


def get_recording(recording_id: str) -> Recording:
    """
    Raises:
        NotFound: if no bundled recording has that id
    """
    recordings = load_recordings()
    if recording_id not in recordings:
        raise NotFound("recording", recording_id)
    return recordings[recording_id]


@lru_cache(maxsize=None)
def load_commentary() -> CommentaryTable:
    return parse_table(CommentaryTable, read_yaml(COMMENTARY_FILE), COMMENTARY_FILE.name)


def load_settings(user_path: Optional[Union[str, Path]] = None) -> EngineSettings:
    """
    Load engine settings: bundled defaults, overridden by an optional user file.

    Unlike the tables above this is not cached, so the CLI can point it at a
    different file on each run.
    """
    defaults = read_yaml(SETTINGS_FILE)
    overrides = read_yaml(user_path) if user_path else {}
    merged = deep_merge(defaults, overrides)
    source = Path(user_path).name if user_path else SETTINGS_FILE.name
    return parse_table(EngineSettings, merged, source)
