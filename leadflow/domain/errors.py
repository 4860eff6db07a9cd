"""Domain error taxonomy."""


class LeadFlowError(Exception):
    """Base class for workflow errors."""


class ValidationError(LeadFlowError):
    """A mandatory field is missing or a value is malformed."""


class Forbidden(LeadFlowError):
    """The requester's role or ownership does not allow the operation."""


class NotFound(LeadFlowError):
    """A referenced lead or client does not exist."""


class AlreadyConverted(LeadFlowError):
    """The lead has already been converted into a client."""


class ConsistencyFault(LeadFlowError):
    """A lead/client conversion failed midway.

    The store must be left without a half-applied conversion. Callers retry the
    whole conversion or escalate; this error is never swallowed.
    """
