"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist."""


class InvalidOrderAction(Exception):
    """The action is not offered for the order's current status."""


class InvalidOrderStatus(Exception):
    """A manual status change outside the allowed transitions."""


class ObservationRequired(Exception):
    """The transition must be justified with a non-blank observation."""


class CancellationReasonRequired(Exception):
    """A cancellation was requested without a reason."""
