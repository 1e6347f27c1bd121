"""Domain-specific error kinds layered on Protean's exception hierarchy.

Missing records surface as ``ObjectNotFoundError`` and malformed input as
``ValidationError`` straight from Protean. The two kinds below cover what
Protean has no name for.
"""

from protean.exceptions import InvalidOperationError


class InvalidTransitionError(InvalidOperationError):
    """A request lifecycle action was attempted from a state that does not allow it."""


class ForbiddenError(InvalidOperationError):
    """The acting staff member's role does not grant the capability."""
