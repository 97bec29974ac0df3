"""Exception hierarchy for tree parsing, building and writing."""


class GpxDocError(Exception):
    """Base class for every error raised by gpxdoc."""


class TreeParseError(GpxDocError):
    """The raw bytes could not be read into an element tree."""


class TreeWriteError(GpxDocError):
    """An element tree could not be written back to bytes."""


class BuildError(GpxDocError):
    """Building a Document from a tree failed; no Document is returned."""


class MalformedInputError(BuildError):
    """A required attribute or element is absent or unreadable."""


class AllocationFailureError(BuildError):
    """Resources ran out while the Document was being assembled."""
