"""
Error types raised by the weapon script and texture services.
"""


class CrosshairSwitcherError(Exception):
    """Base class for all recoverable per-item failures."""


class NotFoundError(CrosshairSwitcherError):
    """File or directory does not exist."""


class FileAccessError(CrosshairSwitcherError):
    """File exists but could not be read or written."""


class MalformedFieldError(CrosshairSwitcherError):
    """A recognized key line is present but its value cannot be extracted."""


class MissingRequiredFieldError(CrosshairSwitcherError):
    """A key the weapon must carry is absent from its script."""


class UnsupportedOperationError(CrosshairSwitcherError):
    """The requested change does not apply to this weapon."""


class DecodeError(CrosshairSwitcherError):
    """Texture data is malformed or uses an unsupported pixel format."""


class SelectionError(CrosshairSwitcherError):
    """An action needs a weapon or crosshair that is not selected."""
