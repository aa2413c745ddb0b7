"""Transport interface.

This is the (small) contract that the client requires of the publish/subscribe
transport that carries its messages. It lives outside :mod:`ditto.client` so
the client can be driven by any implementation, including an in-memory one.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class TransportNotConnected(TransportConnectionError):
    """An operation was issued while the transport is not connected."""


class TransportTimeout(TransportError):
    """An operation did not complete within its bounded wait."""


class AcknowledgeTimeout(TransportTimeout):
    """A publish was not acknowledged within the acknowledge timeout."""


class SubscribeTimeout(TransportTimeout):
    """A subscription was not acknowledged within the subscribe timeout."""


class UnsubscribeTimeout(TransportTimeout):
    """An unsubscription was not acknowledged within the unsubscribe timeout."""


MessageCallback = Callable[[str, bytes], None]


class Token:
    """ The pending result of an asynchronous transport operation. The
        transport calls :func:`_complete` exactly once, with an exception
        instance if the operation failed; callers block via :func:`wait`.
    """

    def __init__(self):
        self.error: Optional[BaseException] = None
        self.event = threading.Event()


    def __repr__(self):
        if self.event.is_set():
            state = 'error=' + repr(self.error) if self.error else 'complete'
        else:
            state = 'pending'
        return 'Token(' + state + ')'


    def _complete(self, error: Optional[BaseException] = None) -> None:
        """ Record the outcome of the operation, and signal any callers
            blocking via :func:`wait` to proceed.
        """

        self.error = error
        self.event.set()


    def done(self) -> bool:
        return self.event.is_set()


    def wait(self, timeout: Optional[float] = None) -> bool:
        """ Return True if the operation completed, successfully or not,
            within *timeout* seconds; False otherwise. A *timeout* of zero
            only checks the current state.
        """

        return self.event.wait(timeout)


    @classmethod
    def failed(cls, error: BaseException) -> 'Token':
        token = cls()
        token._complete(error)
        return token


    @classmethod
    def succeeded(cls) -> 'Token':
        token = cls()
        token._complete()
        return token


# end of class Token



class TransportOptions:
    """ Connection parameters for a transport the client owns. The
        *client_id* must be unique per connection; *keep_alive* and
        *connect_timeout* are in seconds.
    """

    def __init__(self, broker: str, client_id: str, keep_alive: float = 30,
                 connect_timeout: float = 30, username: Optional[str] = None,
                 password: Optional[str] = None, tls=None, auto_reconnect: bool = True):

        self.broker = broker
        self.client_id = client_id
        self.keep_alive = keep_alive
        self.connect_timeout = connect_timeout
        self.username = username
        self.password = password
        self.tls = tls
        self.auto_reconnect = auto_reconnect

        self.on_connect: Optional[Callable[[], None]] = None
        self.on_connection_lost: Optional[Callable[[Optional[BaseException]], None]] = None


# end of class TransportOptions



class Transport(ABC):
    """Minimal contract for a publish/subscribe transport."""

    @abstractmethod
    def connect(self) -> Token:
        """Open the connection; the token completes on success or failure."""

    @abstractmethod
    def disconnect(self, grace: float) -> None:
        """Close the connection, allowing *grace* seconds for pending work."""

    @abstractmethod
    def publish(self, topic: str, qos: int, retain: bool, payload: bytes) -> Token:
        """Publish *payload*; the token completes on acknowledgement."""

    @abstractmethod
    def subscribe(self, pattern: str, qos: int, callback: MessageCallback) -> Token:
        """Subscribe to *pattern*, delivering each message to *callback*."""

    @abstractmethod
    def unsubscribe(self, pattern: str) -> Token:
        """Remove the subscription to *pattern*."""

    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the transport is currently connected."""

    def close(self) -> None:
        """Release local resources without touching the connection."""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
