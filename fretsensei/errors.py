"""
Error Types for the Fret Sensei Engine

Only two of these ever reach a caller in normal operation:
    - UnknownNote: a note name outside the A-G (+ accidental) grammar
    - MalformedTimeline: overlapping / unsorted segments at construction

NotFound is raised by the catalog and caught inside the engine, where it
degrades to omission (fretboard annotation) or a fallback voicing.
ConfigError is raised when one of the bundled or user YAML tables fails
validation.
"""


class FretSenseiError(Exception):
    """Base class for every error raised by this package."""


class UnknownNote(FretSenseiError, ValueError):
    """A note name could not be parsed (expected a letter A-G and an optional accidental)."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown note: '{name}'")


class NotFound(FretSenseiError, LookupError):
    """A chord or scale symbol is not in the catalog."""

    def __init__(self, kind: str, symbol: str):
        self.kind = kind
        self.symbol = symbol
        super().__init__(f"Unknown {kind}: '{symbol}'")


class MalformedTimeline(FretSenseiError, ValueError):
    """Segments overlap, are out of order, or fall outside the recording."""


class ConfigError(FretSenseiError):
    """A static configuration table failed to load or validate."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")
