"""Exception types shared by the assigner packages.

Per-video problems never raise; they surface as rejections. Everything here
aborts a run.
"""


class AssignerError(Exception):
    """Base class for run-aborting errors."""


class ConfigurationError(AssignerError):
    """Required settings are missing or malformed."""


class CatalogError(AssignerError):
    """The video catalog could not be read."""


class RecordStoreError(AssignerError):
    """The record file is missing, empty or could not be written."""


class RecordFormatError(AssignerError):
    """The record text does not follow the class section layout."""


class NotificationError(AssignerError):
    """A report could not be delivered."""
