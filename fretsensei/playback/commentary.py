"""
Commentary Module - Section Types and Rotating Content Pools

A segment's section label ("Verse Solo", "Introduction", ...) is mapped to
a section type by keyword. The type selects the commentary pool; technique
suggestions and practice tips are shared by every section.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from fretsensei.data.loader import load_commentary
from fretsensei.data.schema import CommentaryTable, Segment

logger = logging.getLogger(__name__)


class SectionType(Enum):
    INTRO = "intro"
    VERSE = "verse"
    CHORUS = "chorus"
    BRIDGE = "bridge"
    SOLO = "solo"
    OUTRO = "outro"


# Checked in order; "solo" goes last so "Outro Solo" is an outro
SECTION_KEYWORDS = [
    ("intro", SectionType.INTRO),
    ("verse", SectionType.VERSE),
    ("chorus", SectionType.CHORUS),
    ("bridge", SectionType.BRIDGE),
    ("outro", SectionType.OUTRO),
    ("solo", SectionType.SOLO),
]


def section_type_for(label: str, default: str = SectionType.SOLO.value) -> str:
    """
    Section type for a free-form label.

    >>> section_type_for("Introduction")
    'intro'
    >>> section_type_for("Interlude")
    'solo'
    """
    lowered = label.lower()
    for keyword, section in SECTION_KEYWORDS:
        if keyword in lowered:
            return section.value
    return default


@dataclass(frozen=True)
class CommentaryPools:
    """
    Read-only content pools used by PlaybackTimeline.

    Attributes:
        sections: section type -> commentary lines
        techniques: technique suggestions
        tips: practice tips
        default_section: pool used when a section type has no pool of its own
    """
    sections: Mapping[str, Tuple[str, ...]]
    techniques: Tuple[str, ...]
    tips: Tuple[str, ...]
    default_section: str = SectionType.SOLO.value

    def __post_init__(self):
        if not self.sections:
            raise ValueError("CommentaryPools needs at least one section pool")
        empty = [name for name, lines in self.sections.items() if not lines]
        if empty:
            raise ValueError(f"Commentary pools must not be empty: {empty}")
        if not self.techniques:
            raise ValueError("CommentaryPools needs at least one technique suggestion")
        if not self.tips:
            raise ValueError("CommentaryPools needs at least one practice tip")

    @classmethod
    def from_table(cls, table: CommentaryTable, default_section: str = SectionType.SOLO.value) -> "CommentaryPools":
        return cls(
            sections=MappingProxyType(dict(table.sections)),
            techniques=tuple(table.techniques),
            tips=tuple(table.tips),
            default_section=default_section.lower(),
        )

    def section_type(self, segment: Optional[Segment]) -> str:
        """The pool name for a segment: its explicit pool, else derived from the label."""
        if segment is None:
            return self.default_section
        if segment.commentary_pool:
            pool = segment.commentary_pool.lower()
            if pool in self.sections:
                return pool
            logger.warning(
                f"Segment '{segment.id}' names unknown commentary pool '{segment.commentary_pool}'. "
                f"Using '{self.default_section}'."
            )
            return self.default_section
        return section_type_for(segment.section, self.default_section)

    def commentary_for(self, section_type: str) -> Tuple[str, ...]:
        """Commentary lines for a section type; unknown types get the default pool."""
        lines = self.sections.get(section_type)
        if lines:
            return lines
        lines = self.sections.get(self.default_section)
        if lines:
            return lines
        # The default pool itself is missing, use whatever exists
        return next(iter(self.sections.values()))


def default_pools(default_section: str = SectionType.SOLO.value) -> CommentaryPools:
    """Pools from the bundled commentary.yaml."""
    return CommentaryPools.from_table(load_commentary(), default_section)
