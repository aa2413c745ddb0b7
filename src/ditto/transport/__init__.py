"""Transport layer implementations."""

from .base import (
    Token,
    Transport,
    TransportOptions,
    TransportError,
    TransportConnectionError,
    TransportNotConnected,
    TransportTimeout,
    AcknowledgeTimeout,
    SubscribeTimeout,
    UnsubscribeTimeout,
)
