"""Error and warning taxonomy.

Terminal conditions raise a ``TailError`` subclass. Recoverable ones are
reported through ``warnings.warn`` with a ``TailWarning`` category so the
caller decides what reaches the user.
"""
from __future__ import annotations

from .const import ERRORS, EXIT_CODES


class TailError(Exception):
    code = ""

    def __init__(self, detail: str = ""):
        self.detail = detail
        msg = ERRORS[self.code]
        super().__init__(f"{msg}: {detail}" if detail else msg)

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.code]


class ConfigurationError(TailError):
    code = "E_CONFIG"


class NotFoundError(TailError):
    code = "E_NOT_FOUND"


class FormatError(TailError):
    code = "E_FORMAT"


class TailWarning(UserWarning):
    pass


class TruncationWarning(TailWarning):
    """File shrank below the read cursor or was replaced."""


class DecodeFailureWarning(TailWarning):
    """A structurally complete block failed to decompress."""


class TailNotice(TailWarning):
    """Progress note, only shown in verbose mode."""
