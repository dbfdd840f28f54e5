"""Exceptions raised by the registration workflow.

Caller mistakes stay ``ValueError`` subclasses so code that only catches
``ValueError`` keeps working; the server maps each type to its own status.
"""


class RegistrationNotFoundError(ValueError):
    """No registration (or notification) with the given id."""


class RegistrationNotPendingError(ValueError):
    """The registration already reached a terminal state."""


class CredentialIssuanceError(RuntimeError):
    """No free login identifier could be drawn within the attempt limit."""
