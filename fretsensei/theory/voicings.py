"""
Voicings Module - Chord Shapes by Difficulty

get_voicing() always returns a playable shape. When the exact
(symbol, tier) entry is missing it walks a fixed fallback chain:

    1. EXACT                the requested symbol at the requested tier
    2. MEDIUM_TIER          the same symbol at the medium tier
    3. ANY_TIER             the same symbol at any other tier (nearest first)
    4. ENHARMONIC           steps 1-3 for the enharmonic spelling (Db <-> C#)
       ACCIDENTAL_STRIPPED  steps 1-3 with the root accidental removed (C#m -> Cm)
    5. DEFAULT              the reference chord (open E major)

Every step is a dictionary lookup, so resolution takes a bounded number of
steps. resolve() also tells the caller which step produced the voicing,
so a UI can show whether it is an exact match or a best guess.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Mapping, Optional, Tuple

from fretsensei.data.loader import load_settings, load_voicing_table
from fretsensei.data.schema import MUTED, VoicingSpec
from fretsensei.errors import NotFound
from fretsensei.theory.catalog import Catalog, default_catalog, normalize_symbol, split_root
from fretsensei.theory.pitch import (
    CHROMATIC_SCALE,
    CHROMATIC_SCALE_FLATS,
    STANDARD_TUNING,
    Tuning,
    note_to_pitch_class,
    pitch_class_at,
)

logger = logging.getLogger(__name__)


# =============================================================================
# DIFFICULTY TIERS
# =============================================================================

class DifficultyTier(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value) -> "DifficultyTier":
        """
        Accept a tier, its name, a skill level word, or the Korean level
        labels (하 / 중 / 상). Anything else falls back to MEDIUM.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        tier = TIER_ALIASES.get(key)
        if tier is None:
            logger.warning(f"Unknown difficulty '{value}'. Defaulting to medium.")
            return cls.MEDIUM
        return tier

    @property
    def rank(self) -> int:
        return TIER_ORDER.index(self)


TIER_ORDER = [DifficultyTier.EASY, DifficultyTier.MEDIUM, DifficultyTier.HARD]

TIER_ALIASES = {
    "easy": DifficultyTier.EASY,
    "beginner": DifficultyTier.EASY,
    "하": DifficultyTier.EASY,
    "medium": DifficultyTier.MEDIUM,
    "intermediate": DifficultyTier.MEDIUM,
    "중": DifficultyTier.MEDIUM,
    "hard": DifficultyTier.HARD,
    "advanced": DifficultyTier.HARD,
    "상": DifficultyTier.HARD,
}


# =============================================================================
# VOICING TYPES
# =============================================================================

@dataclass(frozen=True)
class Voicing:
    """
    A concrete shape. frets/fingers are listed lowest string first.

    frets:   -1 = muted, 0 = open, >0 = fretted (absolute fret number)
    fingers: 0 = none, 1 = index ... 4 = pinky
    """
    frets: Tuple[int, ...]
    fingers: Tuple[int, ...]
    base_fret: int = 1
    barres: Tuple[int, ...] = ()

    @classmethod
    def from_spec(cls, spec: VoicingSpec) -> "Voicing":
        return cls(
            frets=tuple(spec.frets),
            fingers=tuple(spec.fingers),
            base_fret=spec.base_fret,
            barres=tuple(spec.barres),
        )

    def sounding_strings(self) -> List[int]:
        """Indices (0 = lowest string) of strings that are played."""
        return [i for i, fret in enumerate(self.frets) if fret != MUTED]

    def string_numbers(self, tuning: Tuning = STANDARD_TUNING) -> List[int]:
        """Guitarist's numbers (1 = highest string) of the strings that are played."""
        return sorted(tuning.string_number(i) for i in self.sounding_strings())

    @property
    def note_count(self) -> int:
        return len(self.sounding_strings())

    @property
    def is_barre(self) -> bool:
        return bool(self.barres)

    def pitch_classes(self, tuning: Tuning = STANDARD_TUNING) -> List[int]:
        """Sounding pitch classes, lowest string first."""
        return [pitch_class_at(tuning, i, self.frets[i]) for i in self.sounding_strings()]


# Open E major, used when nothing else matches and the table has no E
REFERENCE_VOICING = Voicing(
    frets=(0, 2, 2, 1, 0, 0),
    fingers=(0, 2, 3, 1, 0, 0),
)


class Resolution(Enum):
    EXACT = "exact"
    MEDIUM_TIER = "medium_tier"
    ANY_TIER = "any_tier"
    ENHARMONIC = "enharmonic"
    ACCIDENTAL_STRIPPED = "accidental_stripped"
    DEFAULT = "default"


@dataclass(frozen=True)
class VoicingMatch:
    """
    Result of a voicing lookup.

    Attributes:
        voicing: The shape to display (never empty)
        requested_symbol / requested_tier: What the caller asked for
        symbol / tier: The table entry actually used
        resolution: Which fallback step produced it
    """
    voicing: Voicing
    requested_symbol: str
    requested_tier: DifficultyTier
    symbol: str
    tier: DifficultyTier
    resolution: Resolution

    @property
    def is_exact(self) -> bool:
        return self.resolution is Resolution.EXACT

    @property
    def is_fallback(self) -> bool:
        return not self.is_exact


# =============================================================================
# SYMBOL RESPELLING
# =============================================================================

def enharmonic_respelling(symbol: str) -> Optional[str]:
    """
    Swap the root between sharp and flat spelling: "Db" -> "C#", "A#m" -> "Bbm".
    Naturals (and E#, Cb, ...) return None.
    """
    try:
        root_name, rest = split_root(symbol)
    except ValueError:
        return None
    if len(root_name) < 2:
        return None

    pc = note_to_pitch_class(root_name)
    if root_name.endswith("#"):
        respelled = CHROMATIC_SCALE_FLATS[pc]
    else:
        respelled = CHROMATIC_SCALE[pc]
    if len(respelled) < 2:
        return None
    return respelled + rest


def strip_accidental(symbol: str) -> Optional[str]:
    """Drop the root accidental: "C#m" -> "Cm". Naturals return None."""
    try:
        root_name, rest = split_root(symbol)
    except ValueError:
        return None
    if len(root_name) < 2:
        return None
    return root_name[0] + rest


# =============================================================================
# LIBRARY
# =============================================================================

class VoicingLibrary:
    """
    Read-only symbol x tier -> Voicing table with graceful fallback.

    Example:
        >>> library = default_library()
        >>> match = library.resolve("C", "hard")
        >>> match.voicing.barres
        (8,)
        >>> library.resolve("Xyz", "easy").resolution
        <Resolution.DEFAULT: 'default'>
    """

    def __init__(
        self,
        entries: Mapping[str, Mapping[DifficultyTier, Voicing]],
        catalog: Optional[Catalog] = None,
        default_symbol: str = "E",
    ):
        self.catalog = catalog or default_catalog()
        self._entries: Dict[str, Dict[DifficultyTier, Voicing]] = {
            self.catalog.canonical_chord_symbol(symbol): dict(tiers)
            for symbol, tiers in entries.items()
            if tiers
        }
        self.default_symbol = self.catalog.canonical_chord_symbol(default_symbol)

        # Easiest stored tier of the default chord, else the built-in shape
        default_tiers = self._entries.get(self.default_symbol, {})
        self.default_tier = next((t for t in TIER_ORDER if t in default_tiers), DifficultyTier.EASY)
        self.default_voicing = default_tiers.get(self.default_tier, REFERENCE_VOICING)

    @classmethod
    def from_table(
        cls,
        table: Mapping[str, Mapping[str, VoicingSpec]],
        catalog: Optional[Catalog] = None,
        default_symbol: str = "E",
    ) -> "VoicingLibrary":
        entries = {
            symbol: {DifficultyTier(tier): Voicing.from_spec(spec) for tier, spec in tiers.items()}
            for symbol, tiers in table.items()
        }
        return cls(entries, catalog=catalog, default_symbol=default_symbol)

    def symbols(self) -> List[str]:
        return list(self._entries)

    def tiers_for(self, symbol: str) -> List[DifficultyTier]:
        tiers = self._entries.get(self.catalog.canonical_chord_symbol(symbol), {})
        return [t for t in TIER_ORDER if t in tiers]

    def lookup(self, symbol: str, tier: DifficultyTier) -> Voicing:
        """
        Exact table entry only, no fallback.

        Raises:
            NotFound: if there is no entry for (symbol, tier)
        """
        key = self.catalog.canonical_chord_symbol(symbol)
        try:
            return self._entries[key][tier]
        except KeyError:
            raise NotFound("voicing", f"{symbol} ({tier.value})")

    def _resolve_tiers(
        self, symbol: str, tier: DifficultyTier
    ) -> Optional[Tuple[DifficultyTier, Voicing, Resolution]]:
        """Steps 1-3 for one symbol."""
        tiers = self._entries.get(symbol)
        if not tiers:
            return None

        if tier in tiers:
            return tier, tiers[tier], Resolution.EXACT
        if DifficultyTier.MEDIUM in tiers:
            return DifficultyTier.MEDIUM, tiers[DifficultyTier.MEDIUM], Resolution.MEDIUM_TIER

        # Nearest tier first, easier first on a tie
        for other in sorted(TIER_ORDER, key=lambda t: (abs(t.rank - tier.rank), t.rank)):
            if other in tiers:
                return other, tiers[other], Resolution.ANY_TIER
        return None

    def resolve(self, symbol: str, tier=DifficultyTier.MEDIUM) -> VoicingMatch:
        """
        Find the best voicing for a chord at a difficulty tier. Never raises.

        Args:
            symbol: Chord symbol, e.g. "C", "F#m", "Bb7"
            tier: DifficultyTier or anything DifficultyTier.parse accepts

        Returns:
            VoicingMatch with the voicing and the fallback step used
        """
        tier = DifficultyTier.parse(tier)
        requested = normalize_symbol(symbol) if isinstance(symbol, str) else str(symbol)
        canonical = self.catalog.canonical_chord_symbol(requested)

        found = self._resolve_tiers(canonical, tier)
        if found:
            used_tier, voicing, resolution = found
            return VoicingMatch(voicing, requested, tier, canonical, used_tier, resolution)

        candidates = [
            (enharmonic_respelling(canonical), Resolution.ENHARMONIC),
            (strip_accidental(canonical), Resolution.ACCIDENTAL_STRIPPED),
        ]
        for alternative, resolution in candidates:
            if not alternative:
                continue
            alternative = self.catalog.canonical_chord_symbol(alternative)
            found = self._resolve_tiers(alternative, tier)
            if found:
                used_tier, voicing, _ = found
                logger.debug(f"Voicing for '{requested}' resolved via {resolution.value} as '{alternative}'")
                return VoicingMatch(voicing, requested, tier, alternative, used_tier, resolution)

        logger.warning(f"No voicing for '{requested}'. Using the {self.default_symbol} reference shape.")
        return VoicingMatch(
            self.default_voicing, requested, tier, self.default_symbol, self.default_tier, Resolution.DEFAULT
        )

    def get_voicing(self, symbol: str, tier=DifficultyTier.MEDIUM) -> Voicing:
        """The voicing from resolve(), without the match details."""
        return self.resolve(symbol, tier).voicing


@lru_cache(maxsize=None)
def default_library() -> VoicingLibrary:
    """The library built from the bundled voicings.yaml."""
    settings = load_settings()
    return VoicingLibrary.from_table(
        load_voicing_table(),
        catalog=default_catalog(),
        default_symbol=settings.default_voicing_symbol,
    )


def get_voicing(symbol: str, tier=DifficultyTier.MEDIUM) -> Voicing:
    return default_library().get_voicing(symbol, tier)
