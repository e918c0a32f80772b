"""Load pipeline collaborators from configuration.

Collaborators live outside this package. Settings name a factory with an
import string, the same form uvicorn uses for apps:

    NEWSDESK_COLLABORATORS="mychannel.vendors:build_collaborators"

The factory is called with the Settings instance and must return a
``Collaborators``.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

from newsdesk.core.exceptions import ConfigError
from newsdesk.core.logging import get_logger
from newsdesk.providers.base import Collaborators

if TYPE_CHECKING:
    from newsdesk.config import Settings

logger = get_logger(__name__)


def load_collaborators(settings: Settings) -> Collaborators:
    """Import and call the configured collaborator factory.

    Raises:
        ConfigError: If no factory is configured, it cannot be imported, or it
            returns something other than Collaborators
    """
    target = settings.collaborators
    if not target:
        raise ConfigError("NEWSDESK_COLLABORATORS is not set (expected 'module:function')")

    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"Invalid collaborator factory '{target}' (expected 'module:function')")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import collaborator module '{module_name}': {e}") from e

    factory = getattr(module, attr, None)
    if factory is None or not callable(factory):
        raise ConfigError(f"'{target}' is not a callable factory")

    collaborators = factory(settings)
    if not isinstance(collaborators, Collaborators):
        raise ConfigError(
            f"'{target}' returned {type(collaborators).__name__}, expected Collaborators"
        )

    logger.debug("Collaborators loaded", factory=target)
    return collaborators
