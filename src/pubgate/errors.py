"""Fatal environment errors.

Content problems are never raised; they become validation issues.
These exceptions cover the environment a run depends on and stop the
invocation.  Services convert them into a failed ServiceResult whose
error code is the exception's ``code``.
"""

from __future__ import annotations


class PubgateError(Exception):
    """Base class for fatal pubgate errors."""

    code = "PUBGATE_ERROR"


class GuidelinesError(PubgateError):
    """The guidelines file is missing or malformed."""

    code = "GUIDELINES_ERROR"


class ContentStoreError(PubgateError):
    """The content directory is missing or unreadable."""

    code = "CONTENT_STORE_ERROR"
