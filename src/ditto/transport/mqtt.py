"""MQTT publish/subscribe transport, backed by paho-mqtt."""

from __future__ import annotations

import logging
import queue
import ssl
import threading
import time
import urllib.parse
from typing import Dict, Optional

import paho.mqtt.client as mqtt

from .base import (
    Token,
    Transport,
    TransportOptions,
    TransportError,
    TransportConnectionError,
    TransportNotConnected,
)


default_ports = {
    'tcp': 1883,
    'mqtt': 1883,
    'ssl': 8883,
    'tls': 8883,
    'mqtts': 8883,
    'ws': 80,
    'wss': 443,
}

secure_schemes = set(('ssl', 'tls', 'mqtts', 'wss'))
websocket_schemes = set(('ws', 'wss'))


def parse_broker(broker: str):
    """ Split a broker URL into a (scheme, host, port, path) tuple, filling
        in the default port for the scheme if none is specified.
    """

    parsed = urllib.parse.urlsplit(broker)
    scheme = parsed.scheme.lower()

    try:
        default_port = default_ports[scheme]
    except KeyError:
        raise ValueError('unsupported broker URL scheme: ' + repr(broker))

    if not parsed.hostname:
        raise ValueError('broker URL has no host: ' + repr(broker))

    port = parsed.port
    if port is None:
        port = default_port

    path = parsed.path or '/mqtt'
    return scheme, parsed.hostname, port, path


def _error(rc: int) -> TransportError:
    text = mqtt.error_string(rc)

    if rc == mqtt.MQTT_ERR_NO_CONN:
        return TransportNotConnected(text)
    return TransportError(text)


def _failed(code) -> bool:
    if isinstance(code, int):
        return code >= 0x80
    return getattr(code, 'is_failure', False)



class Worker:
    """ Run callbacks one at a time, in the order they were queued, on a
        dedicated background thread. This keeps user code off the paho
        network thread, which must stay free to process acknowledgements.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.shutdown = False

        self._queue = queue.Queue()

        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()


    def put(self, method, *args) -> None:
        self._queue.put((method, args))


    def stop(self) -> None:
        self.shutdown = True
        self._queue.put(None)


    def run(self) -> None:
        while not self.shutdown:
            queued = self._queue.get()
            if queued is None:
                break

            method, args = queued

            try:
                method(*args)
            except Exception:
                self.logger.exception('unhandled exception in MQTT callback')


# end of class Worker



class MQTTTransport(Transport):
    """ A :class:`Transport` over a paho-mqtt client. Instantiate with
        :class:`TransportOptions` to have the transport create and own the
        paho client; use :func:`attach` to wrap a paho client that is
        connected and managed elsewhere.
    """

    qos = 1

    def __init__(self, options: Optional[TransportOptions] = None, logger=None):

        if logger is None:
            logger = logging.getLogger('ditto.transport.mqtt')

        self.logger = logger
        self.options = options
        self.client = None
        self.closing = False
        self.established = False

        self._connect_token: Optional[Token] = None
        self._pending: Dict[int, Token] = dict()
        self._early: Dict[int, Optional[BaseException]] = dict()
        self._issuing = 0
        self._lock = threading.Lock()
        self._worker = None
        self._worker_lock = threading.Lock()

        if options is not None:
            self.client = self._create_client(options)


    @classmethod
    def attach(cls, client: mqtt.Client, logger=None) -> 'MQTTTransport':
        """ Wrap an existing paho client. The acknowledgement callbacks
            already installed on the client keep being invoked; connection
            management remains the responsibility of the caller.
        """

        transport = cls(None, logger)
        transport.client = client
        transport._chain(client)
        return transport


    def _create_client(self, options: TransportOptions) -> mqtt.Client:

        scheme, host, port, path = parse_broker(options.broker)
        self._address = (host, port)

        if scheme in websocket_schemes:
            transport = 'websockets'
        else:
            transport = 'tcp'

        client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2,
                             client_id=options.client_id,
                             transport=transport,
                             reconnect_on_failure=options.auto_reconnect)

        if transport == 'websockets':
            client.ws_set_options(path=path)

        if options.username is not None:
            client.username_pw_set(options.username, options.password)

        context = options.tls
        if context is None and scheme in secure_schemes:
            context = ssl.create_default_context()
        if context is not None:
            client.tls_set_context(context)

        client.connect_timeout = options.connect_timeout

        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect
        client.on_publish = self._on_publish
        client.on_subscribe = self._on_subscribe
        client.on_unsubscribe = self._on_unsubscribe

        return client


    def _chain(self, client: mqtt.Client) -> None:
        """ Install the acknowledgement callbacks on an external client,
            invoking whichever callbacks were there before.
        """

        for name in ('on_publish', 'on_subscribe', 'on_unsubscribe'):
            previous = getattr(client, name)
            ours = getattr(self, '_' + name)
            setattr(client, name, _chained(ours, previous))


    def connect(self) -> Token:

        if self.options is None:
            raise TransportError('cannot connect an attached MQTT client')

        token = Token()
        self._connect_token = token
        self.closing = False
        self.established = False

        host, port = self._address

        try:
            self.client.connect(host, port, keepalive=int(self.options.keep_alive))
        except (OSError, ValueError) as e:
            self._connect_token = None
            token._complete(TransportConnectionError(str(e)))
            return token

        self.client.loop_start()
        return token


    def disconnect(self, grace: float) -> None:
        """ Wait up to *grace* seconds for outstanding acknowledgements,
            then close the connection and stop the network loop.
        """

        deadline = time.monotonic() + grace

        with self._lock:
            pending = list(self._pending.values())

        for token in pending:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            token.wait(remaining)

        self.closing = True
        self.client.disconnect()
        self.client.loop_stop()
        self.close()


    def close(self) -> None:
        """ Stop the callback worker. The worker is started again, if
            needed, by the next connect or subscribe.
        """

        with self._worker_lock:
            worker = self._worker
            self._worker = None

        if worker is not None:
            worker.stop()


    def _dispatch(self, method, *args) -> None:

        with self._worker_lock:
            if self._worker is None:
                self._worker = Worker(self.logger)
            worker = self._worker

        worker.put(method, *args)


    def publish(self, topic: str, qos: int, retain: bool, payload: bytes) -> Token:
        self._begin()
        info = self.client.publish(topic, payload, qos, retain)
        return self._track(info.rc, info.mid)


    def subscribe(self, pattern: str, qos: int, callback) -> Token:

        def deliver(client, userdata, message):
            self._dispatch(callback, message.topic, message.payload)

        self.client.message_callback_add(pattern, deliver)

        self._begin()
        rc, mid = self.client.subscribe(pattern, qos)
        return self._track(rc, mid)


    def unsubscribe(self, pattern: str) -> Token:
        self.client.message_callback_remove(pattern)

        self._begin()
        rc, mid = self.client.unsubscribe(pattern)
        return self._track(rc, mid)


    def is_connected(self) -> bool:
        return self.client is not None and self.client.is_connected()


    def _begin(self) -> None:
        with self._lock:
            self._issuing += 1


    def _track(self, rc: int, mid: Optional[int]) -> Token:
        """ Associate a new :class:`Token` with the message ID of a request
            just handed to paho. The acknowledgement may already have been
            processed by the network thread, in which case it was parked in
            the early completions until now.
        """

        token = Token()

        with self._lock:
            self._issuing -= 1

            if rc != mqtt.MQTT_ERR_SUCCESS:
                token._complete(_error(rc))
            elif mid in self._early:
                token._complete(self._early.pop(mid))
            else:
                self._pending[mid] = token

            if self._issuing == 0:
                self._early.clear()

        return token


    def _acknowledge(self, mid: int, error: Optional[BaseException] = None) -> None:

        with self._lock:
            try:
                token = self._pending.pop(mid)
            except KeyError:
                if self._issuing:
                    self._early[mid] = error
                return

        token._complete(error)


    def _on_connect(self, client, userdata, flags, reason_code, properties=None):

        token = self._connect_token
        self._connect_token = None

        if _failed(reason_code):
            error = TransportConnectionError('connection refused: ' + str(reason_code))
            if token is not None:
                self._abandon(token, error)
            return

        self.established = True

        if token is not None:
            token._complete()

        callback = self.options.on_connect
        if callback is not None:
            self._dispatch(callback)


    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):

        if self.closing:
            return

        error = TransportConnectionError('connection lost: ' + str(reason_code))

        token = self._connect_token
        if token is not None:
            self._connect_token = None
            self._abandon(token, error)
            return

        # Failed automatic reconnects also end up here.
        if not self.established:
            return

        self.established = False
        self.logger.warning('MQTT %s', error)

        callback = self.options.on_connection_lost
        if callback is not None:
            self._dispatch(callback, error)


    def _abandon(self, token: Token, error: BaseException) -> None:
        """ The initial connection attempt failed: stop paho from retrying
            in the background, then fail the connect token.
        """

        self.closing = True
        self.client.disconnect()
        token._complete(error)


    def _on_publish(self, client, userdata, mid, reason_code=None, properties=None):

        if _failed(reason_code):
            self._acknowledge(mid, TransportError('publish rejected: ' + str(reason_code)))
        else:
            self._acknowledge(mid)


    def _on_subscribe(self, client, userdata, mid, reason_codes=None, properties=None):

        for code in reason_codes or ():
            if _failed(code):
                self._acknowledge(mid, TransportError('subscription rejected: ' + str(code)))
                return

        self._acknowledge(mid)


    def _on_unsubscribe(self, client, userdata, mid, reason_codes=None, properties=None):

        if isinstance(reason_codes, (list, tuple)):
            for code in reason_codes:
                if _failed(code):
                    self._acknowledge(mid, TransportError('unsubscribe rejected: ' + str(code)))
                    return

        self._acknowledge(mid)


# end of class MQTTTransport



def _chained(ours, previous):

    if previous is None:
        return ours

    def chained(*args, **kwargs):
        ours(*args, **kwargs)
        previous(*args, **kwargs)

    return chained


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
