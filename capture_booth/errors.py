"""
Capture Booth – Errors
"""


class BoothError(Exception):
    """Base class for booth failures."""


class KeypointSourceError(BoothError):
    """Camera or model could not be opened; the session cannot start."""


class PublishError(BoothError):
    """Rendering or publishing a capture failed."""
