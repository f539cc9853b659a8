class SaveError(Exception):
    """Base exception for save-file load/store errors."""


class LoadError(SaveError):
    """Raised when a save file cannot be loaded into a SaveDocument."""


class StoreError(SaveError):
    """Raised when edited sections cannot be written back to the save file."""


class RecordNotFoundError(SaveError):
    """Raised when a collection/record pair is not present in the save text."""


class RecordDecodeError(SaveError):
    """Raised when a record payload is not the expected JSON value."""


class ContractViolation(Exception):
    """Raised when a caller breaks a precondition (bad level, unknown item id).

    Not a SaveError: these indicate a programming error in the caller and are
    never meant to be handled as a recoverable condition.
    """


class ConfigError(Exception):
    """Raised when the experience tables / skill catalog file is invalid."""
