"""Core utilities: logging, exceptions, constants."""

from newsdesk.core.exceptions import NewsdeskError, PipelineError
from newsdesk.core.logging import get_logger, setup_logging

__all__ = [
    "NewsdeskError",
    "PipelineError",
    "get_logger",
    "setup_logging",
]
