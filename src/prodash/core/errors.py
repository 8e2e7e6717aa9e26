# src/prodash/core/errors.py

from __future__ import annotations


class DashboardError(Exception):
    """Base class for errors the dashboard reports to the user."""


class ValidationError(DashboardError, ValueError):
    """A required field is missing or a value is out of its allowed set. Nothing was mutated."""


class AuthError(DashboardError):
    """Auth stub refused the request (e.g. password confirmation mismatch)."""


class MissingCredentialError(DashboardError):
    """Chat send blocked: no completion API credential has been supplied."""


class ChatBusyError(DashboardError):
    """A completion request is already in flight."""


class CompletionError(DashboardError, RuntimeError):
    """The remote completion endpoint failed or returned an unusable body."""
