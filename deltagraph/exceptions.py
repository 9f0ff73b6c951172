"""Errors raised while loading graphs and change files."""


class DeltaGraphError(Exception):
    pass


class SourceUnavailable(DeltaGraphError):
    """The byte stream behind a path could not be obtained."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Source '{path}' unavailable: {reason}")


class TripleParseError(DeltaGraphError):
    """rdflib could not parse a triple stream."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not parse triples from '{path}': {reason}")


class ChangeLoadError(DeltaGraphError, ValueError):
    """A change file deviates from the expected export shape."""
