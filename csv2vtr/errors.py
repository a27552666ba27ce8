"""Error kinds raised by the conversion pipeline."""


class Csv2VtrError(Exception):
    """Base class for every failure the CLI reports."""


class ParseError(Csv2VtrError):
    """Malformed CSV value or row."""


class LayoutError(Csv2VtrError):
    """Missing or conflicting coordinate/field columns."""


class GridError(Csv2VtrError):
    """The rows do not form a complete rectilinear grid."""


class FileIOError(Csv2VtrError):
    """Input could not be read or output could not be written."""
