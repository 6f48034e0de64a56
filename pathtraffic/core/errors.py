class PathTrafficError(Exception):
    """Base error for everything raised outside the aggregation core."""


class OptionsError(PathTrafficError):
    """Report options failed validation (bad zone tag, non-positive top, malformed date)."""


class InputDecodeError(PathTrafficError):
    """Input could not be read as text lines."""
