from __future__ import annotations


class LinkedDataError(Exception):
    """Base class for failures while dereferencing or projecting a source."""

    def __init__(self, message: str, *, url: str | None = None):
        super().__init__(message)
        self.url = url


class DereferenceError(LinkedDataError):
    """Fetching or parsing the source document failed."""


class QueryFailure(LinkedDataError):
    """A graph-pattern or path query failed against the engine."""


class UnknownProperty(LinkedDataError):
    """A path names a property the vocabulary context does not define."""

    def __init__(self, name: str):
        super().__init__(f"unknown property {name!r}")
        self.name = name


class MissingParameter(LinkedDataError):
    def __init__(self, name: str):
        super().__init__(f"missing required parameter {name!r}")
        self.name = name
