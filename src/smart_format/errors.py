"""Exception types for the formatting pipeline and the user-facing status mapping.

Only three failure classes are ever surfaced to a user: quota / rate limiting,
missing credentials, and a generic formatting error.  Everything else is
recovered internally by falling back to a less capable classifier.
"""

QUOTA_STATUS = "API quota exceeded. Please wait a few minutes and try again."
CREDENTIALS_STATUS = "No API key configured. Set your Azure OpenAI credentials."
GENERIC_STATUS = "Error formatting text. Check the logs for details."

_QUOTA_MARKERS = ("429", "resource_exhausted", "quota", "rate limit", "ratelimit")
_CREDENTIAL_MARKERS = ("api key", "credentials")


class FormattingError(Exception):
    """Base class for all pipeline errors."""


class ClassificationError(FormattingError):
    """A classifier strategy could not produce a valid element list."""


class MissingCredentialsError(ClassificationError):
    """The remote classifier has no endpoint, key or deployment configured."""


class QuotaExceededError(ClassificationError):
    """The remote classifier rejected the call because of quota or rate limits."""


def describe_failure(exc: BaseException) -> str:
    """Map an exception onto one of the three user-visible status messages."""
    if isinstance(exc, QuotaExceededError):
        return QUOTA_STATUS
    if isinstance(exc, MissingCredentialsError):
        return CREDENTIALS_STATUS

    message = str(exc).lower()
    if any(marker in message for marker in _QUOTA_MARKERS):
        return QUOTA_STATUS
    if any(marker in message for marker in _CREDENTIAL_MARKERS):
        return CREDENTIALS_STATUS
    return GENERIC_STATUS
