"""Geometry and metadata validation module."""

from timeslider.validation.core import validate_collection
from timeslider.validation.reporter import ConsoleReporter, failure_message, summarize

__all__ = ["ConsoleReporter", "failure_message", "summarize", "validate_collection"]
