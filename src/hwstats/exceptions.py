"""
Typed exception hierarchy for hwstats.

Low-level primitives (file reads, line matching, integer parsing) raise these
so callers can tell "file not found" from "file found but malformed". Public
resolvers catch them and degrade to their documented zero/sentinel values.
"""
from typing import Optional


class HwstatsError(Exception):
    """
    Base exception for all hwstats errors.

    Carries structured metadata:
    - error_code: Machine-readable error identifier
    - path: Filesystem path involved in the failure (if any)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        path: Optional[str] = None
    ):
        super().__init__(message)
        self.error_code = error_code
        self.path = path

    def __str__(self) -> str:
        """Return clean message without metadata (keeps logs readable)."""
        return super().__str__()


class ConfigurationError(HwstatsError):
    """Environment configuration is invalid (bad numeric value, empty path)."""

    def __init__(self, message: str, variable: Optional[str] = None):
        super().__init__(message=message, error_code="CONFIG_ERROR")
        self.variable = variable


# ============================================================================
# Cgroup Resolution Errors
# ============================================================================

class CgroupError(HwstatsError):
    """Base class for failures while locating or parsing cgroup files."""


class CgroupNotFoundError(CgroupError):
    """No candidate location for a control file exists or is readable."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message=message, error_code="NOT_FOUND", path=path)


class CgroupParseError(CgroupError):
    """File content does not match the expected numeric or tabular grammar."""

    def __init__(self, message: str, path: Optional[str] = None, data: Optional[str] = None):
        super().__init__(message=message, error_code="PARSE_ERROR", path=path)
        self.data = data


class UnsupportedPlatformError(CgroupError):
    """The running platform has no cgroup support at all."""

    def __init__(self, message: str, platform: Optional[str] = None):
        super().__init__(message=message, error_code="UNSUPPORTED")
        self.platform = platform


# ============================================================================
# Convenience Tuples for Catch Blocks
# ============================================================================

# Everything a resolver absorbs before falling back to its sentinel
RESOLVER_ERRORS = (CgroupNotFoundError, CgroupParseError, UnsupportedPlatformError)
