"""
Errors raised by the matching core. All of them reach the caller
synchronously; nothing in this package retries.
"""


class MatchingError(Exception):
    code = 'matching_error'


class InvalidTransition(MatchingError):
    """Requested status change is not allowed from the current status"""
    code = 'invalid_transition'

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move match from {current} to {requested}")


class Forbidden(MatchingError):
    """Caller is not an authorized actor for the operation"""
    code = 'forbidden'


class Conflict(MatchingError):
    """The stored status changed between read and write; re-read and retry"""
    code = 'conflict'


class NotFound(MatchingError):
    code = 'not_found'


class MatchValidationError(MatchingError):
    """Attempt to create a match that must never exist (e.g. incompatible blood types)"""
    code = 'validation_error'
