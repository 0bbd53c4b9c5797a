"""Custom exceptions for the card synchronizer."""

from trellolink.exceptions import TrellolinkError


class ReferenceCountError(TrellolinkError):
    """The description holds a number of card links the policy forbids."""


class VerificationMissingError(TrellolinkError):
    """The PR is ready for review but its card has no verification steps."""
