"""
AnonBBS Errors

Every rejected operation raises one of these. A rejected call leaves
all stores exactly as they were.
"""


class BBSError(Exception):
    """Base class for AnonBBS failures."""

    code = "Error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)


class OwnerOnlyError(BBSError):
    """Caller is not the administrator."""
    code = "OwnerOnly"


class AlreadyInitializedError(BBSError):
    """Service was already initialized."""
    code = "AlreadyInitialized"


class NotInitializedError(BBSError):
    """Service is not accepting writes."""
    code = "NotInitialized"


class ServicePausedError(NotInitializedError):
    """Service was initialized but is paused by the administrator."""
    code = "ServicePaused"


class NoMessagesError(NotInitializedError):
    """No message has been posted yet."""
    code = "NoMessages"


class RateLimitExceededError(BBSError):
    """Caller used up the quota for the current window."""
    code = "RateLimitExceeded"


class InvalidLengthError(BBSError):
    """Content length outside the accepted bounds."""
    code = "InvalidLength"


class InvalidCategoryError(InvalidLengthError):
    """Category is too long, or a registry name is empty."""
    code = "InvalidCategory"


class MessageNotFoundError(BBSError):
    """Referenced message does not exist."""
    code = "MessageNotFound"


class InvalidReplyDepthError(BBSError):
    """Reply would exceed the maximum thread depth."""
    code = "InvalidReplyDepth"


class TooManyRepliesError(BBSError):
    """Parent message already holds the maximum number of replies."""
    code = "TooManyReplies"


class InvalidRangeError(BBSError):
    """Requested id range is not valid."""
    code = "InvalidRange"


class InvalidSettingError(BBSError):
    """Administrator supplied an unusable setting value."""
    code = "InvalidSetting"
