# tinymud/game/errors.py

from enum import Enum


class ErrorKind(Enum):
    INPUT = "input"
    PERMISSION = "permission"
    NAME = "name"
    WORLD = "world"


class MudError(Exception):
    """
    Base for everything a handler can refuse to do.

    The message is shown to the player as one line; `kind` says what sort
    of refusal it was.
    """

    kind = ErrorKind.INPUT


class InputError(MudError):
    kind = ErrorKind.INPUT


class PermissionDenied(MudError):
    kind = ErrorKind.PERMISSION

    def __init__(self, message: str = "You are not permitted to do that."):
        super().__init__(message)


class PlayerError(MudError):
    kind = ErrorKind.NAME


class WorldError(MudError):
    kind = ErrorKind.WORLD


class ConfigError(Exception):
    """Raised when the configuration file cannot be used."""
