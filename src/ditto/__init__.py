""" Python client for Eclipse Ditto. This includes the Ditto protocol
    message model, fluent builders for commands, events, and live messages,
    and a client that exchanges those messages with Ditto over MQTT using
    the Eclipse Hono topic conventions.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Utility components.

from . import json
from . import sync

# Submodules used by multiple other components.

from . import model
from . import protocol
from . import hono
from . import transport

# Primary public-facing interfaces.

from .config import Configuration, Credentials, ConfigurationError
from .client import Client

from .transport import (
    TransportError,
    AcknowledgeTimeout,
    SubscribeTimeout,
    UnsubscribeTimeout,
)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
