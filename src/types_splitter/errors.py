class SplitterError(Exception):
    """Base class for all types-splitter errors."""


class ConfigurationError(SplitterError):
    """The routing configuration is missing or invalid.

    Raised before any buffer is edited, so a bad configuration never produces partially-edited output.
    """


class SchemaLoadError(SplitterError):
    """A schema document could not be read or parsed."""


class InternalConsistencyError(SplitterError):
    """A recorded span no longer matches the text it claims to represent.

    This points at a scanner or offset bug. It is never caught and retried.
    """
