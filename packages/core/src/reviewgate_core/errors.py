"""Exceptions raised by reviewgate_core."""

from __future__ import annotations


class ReviewGateError(Exception):
    """Base class for reviewgate errors."""


class ConfigurationError(ReviewGateError):
    """A required input is missing or blank.

    Raised before any GitHub API call is made.
    """
