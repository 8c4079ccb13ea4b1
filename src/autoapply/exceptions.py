"""Custom exception hierarchy for AutoApply."""


class AutoApplyError(Exception):
    """Base exception for all AutoApply errors."""


class ValidationError(AutoApplyError):
    """Raised when caller input is malformed."""


class SessionNotFoundError(AutoApplyError):
    """Raised when a session does not exist or belongs to another owner."""


class SessionConflictError(AutoApplyError):
    """Raised when a control operation hits a session in a terminal state."""


class StoreError(AutoApplyError):
    """Raised when the underlying database rejects a read or write."""


class ConfigurationError(AutoApplyError):
    """Raised when settings are invalid or missing."""


class ProfileMissingError(AutoApplyError):
    """Raised when the session owner has no profile to apply with."""


class AdapterError(AutoApplyError):
    """Raised when a job board cannot be searched or navigated."""


class BrowserLaunchError(AdapterError):
    """Raised when the browser fails to start."""


class NavigationError(AdapterError):
    """Raised when a page fails to load or an expected element is missing."""
