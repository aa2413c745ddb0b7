""" The connection client: connects to a Ditto endpoint over MQTT, delivers
    inbound Ditto protocol messages to subscribed handlers, and publishes
    outbound messages.
"""

import concurrent.futures
import logging
import threading
import uuid

from . import hono
from .config import Configuration, validate_external
from .protocol.envelope import Envelope
from .sync import InFlight, ReadWriteLock
from .transport.mqtt import MQTTTransport
from .transport.base import (
    TransportOptions,
    TransportNotConnected,
    AcknowledgeTimeout,
    SubscribeTimeout,
    UnsubscribeTimeout,
)


qos = 1


class Client:
    """ A :class:`Client` either owns its MQTT connection, in which case the
        connection is established by :func:`connect` using the broker and
        other settings in the :class:`ditto.config.Configuration`, or it is
        bound to an existing, already connected transport via
        :func:`from_transport`, in which case :func:`connect` and
        :func:`disconnect` only add and remove the subscription to inbound
        commands, and the connection itself is managed by the caller.

        Inbound messages are decoded into :class:`Envelope` instances and
        handed to every subscribed handler, each as its own task in a pool
        of at most :attr:`max_workers` threads. A handler is any callable
        accepting two arguments: the request ID (the empty string if the
        transport did not provide one) and the envelope.

        The *logger* is any object with the methods of a
        :class:`logging.Logger`; the default is the ``ditto.client`` logger.
        The *transport_factory* is invoked with a
        :class:`ditto.transport.TransportOptions` instance to create the
        transport for an owned connection; the default is
        :class:`ditto.transport.mqtt.MQTTTransport`.
    """

    notify_timeout = 60
    max_workers = 8

    def __init__(self, config=None, logger=None, transport_factory=None):

        if config is None:
            config = Configuration()

        if logger is None:
            logger = logging.getLogger('ditto.client')

        if transport_factory is None:
            transport_factory = MQTTTransport

        self.config = config
        self.logger = logger
        self.transport_factory = transport_factory
        self.transport = None
        self.external = False

        self.handlers = dict()
        self.handlers_lock = ReadWriteLock()
        self.notifications = InFlight()
        self.workers = self._workers()


    @classmethod
    def from_transport(cls, transport, config=None, logger=None):
        """ Return a new :class:`Client` bound to an existing *transport*,
            which must already be connected. Only the handlers and the
            acknowledge, subscribe, and unsubscribe timeouts of the *config*
            apply; setting anything else raises
            :class:`ditto.config.ConfigurationError`.
        """

        if not transport.is_connected():
            raise TransportNotConnected('MQTT client is not connected')

        if config is None:
            config = Configuration()

        validate_external(config)

        client = cls(config, logger)
        client.transport = transport
        client.external = True
        return client


    def connect(self):
        """ Establish the connection, blocking until it succeeds or fails.
            Any error reported by the transport is raised as-is. The
            connect handler, if any, is invoked in the background once the
            subscription to inbound commands is in place.

            For a client bound to an external transport only the
            subscription is made; :class:`SubscribeTimeout` is raised if it
            is not acknowledged within the subscribe timeout.
        """

        if self.external:
            self.notifications.add()

            token = self.transport.subscribe(hono.command_subscribe, qos, self._handle_message)

            if not token.wait(self.config.subscribe_timeout) or token.error is not None:
                self.notifications.done()
                if token.error is not None:
                    raise token.error
                raise SubscribeTimeout('subscribe timeout')

            self._spawn(self._notify_connected)
            return

        config = self.config

        options = TransportOptions(config.broker, str(uuid.uuid4()),
                                   keep_alive=config.keep_alive,
                                   connect_timeout=config.connect_timeout,
                                   tls=config.tls)

        if config.credentials is not None:
            options.username = config.credentials.username
            options.password = config.credentials.password

        options.on_connect = self._on_transport_connect
        options.on_connection_lost = self._on_transport_connection_lost

        self.transport = self.transport_factory(options)

        token = self.transport.connect()
        token.wait()

        if token.error is not None:
            transport = self.transport
            self.transport = None
            transport.disconnect(0)
            raise token.error


    def disconnect(self):
        """ Remove the subscription to inbound commands and, if this client
            owns its connection, close it. Errors are logged, not raised.
            For a client bound to an external transport the connection is
            left alone, and the connection lost handler is notified instead.
        """

        if self.transport is None:
            self.logger.warning('disconnect called on a client that was never connected')
            return

        error = None
        token = self.transport.unsubscribe(hono.command_subscribe)

        if token.wait(self.config.unsubscribe_timeout):
            error = token.error
            if self.external and isinstance(error, TransportNotConnected):
                # The external transport is already gone.
                self.transport.close()
                self._retire_workers()
                self._spawn(self._notify_connection_lost, error)
                return
        else:
            error = UnsubscribeTimeout('unsubscribe timeout')

        if error is not None:
            self.logger.error('error while disconnecting client: %s', error)

        if self.external:
            self.transport.close()
            self._spawn(self._notify_connection_lost, None)
        else:
            self.transport.disconnect(self.config.disconnect_timeout)

        self._retire_workers()


    def send(self, envelope):
        """ Publish the *envelope* on the event channel. """

        self._publish(hono.event_publish, envelope)


    def reply(self, request_id, envelope):
        """ Publish the *envelope* as the response to the request identified
            by *request_id*, which is the ID handed to a subscribed handler
            along with the request. The status of the *envelope* is part of
            the response topic.
        """

        self._publish(hono.response_topic(request_id, envelope.status), envelope)


    def subscribe(self, *handlers):
        """ Register *handlers* for inbound messages. Subscribing a handler
            that is already subscribed has no additional effect.
        """

        with self.handlers_lock.write():
            for handler in handlers:
                self.handlers[handler] = handler


    def unsubscribe(self, *handlers):
        """ Remove the specified *handlers*, or all handlers if none are
            specified.
        """

        with self.handlers_lock.write():
            if handlers:
                for handler in handlers:
                    self.handlers.pop(handler, None)
            else:
                self.handlers.clear()


    def _publish(self, topic, envelope):

        if self.transport is None:
            raise TransportNotConnected('client is not connected')

        payload = envelope.encode()
        token = self.transport.publish(topic, qos, False, payload)

        if not token.wait(self.config.acknowledge_timeout):
            raise AcknowledgeTimeout('acknowledge timeout')

        if token.error is not None:
            raise token.error


    def _handle_message(self, topic, payload):
        """ Decode an inbound message and dispatch it to every subscribed
            handler without waiting for any of them to complete. Messages
            that cannot be decoded are logged and dropped.
        """

        self.logger.debug('received message on %s', topic)

        try:
            envelope = Envelope.decode(payload)
        except ValueError as e:
            self.logger.error('error getting Ditto message: %s', e)
            return

        request_id = hono.request_id(topic)
        if request_id:
            self.logger.debug('received a command with request ID: %s', request_id)
        else:
            self.logger.debug('no request ID is available in the message with topic: %s', topic)

        self.notifications.wait()

        with self.handlers_lock.read():
            handlers = list(self.handlers.values())

        if len(handlers) == 0:
            self.logger.warning('no message handlers are subscribed, dropping message on %s', topic)
            return

        for handler in handlers:
            self.workers.submit(self._invoke, handler, request_id, envelope)


    def _invoke(self, handler, request_id, envelope):
        try:
            handler(request_id, envelope)
        except Exception:
            self.logger.exception('message handler %r failed', handler)


    def _on_transport_connect(self):
        """ Invoked by an owned transport each time the connection is
            established, including after an automatic reconnect.
        """

        self.notifications.add()

        token = self.transport.subscribe(hono.command_subscribe, qos, self._handle_message)

        if not token.wait(self.config.subscribe_timeout):
            self.logger.error('timed out subscribing to %s', hono.command_subscribe)
        elif token.error is not None:
            self.logger.error('error subscribing to %s: %s', hono.command_subscribe, token.error)

        self._spawn(self._notify_connected)


    def _on_transport_connection_lost(self, error):
        self._notify_connection_lost(error)


    def _notify_connected(self):

        try:
            handler = self.config.connect_handler
            if handler is not None:
                self._notify(handler, (self,), 'initialization')
        finally:
            self.notifications.done()


    def _notify_connection_lost(self, error):
        handler = self.config.connection_lost_handler
        if handler is not None:
            self._notify(handler, (self, error), 'connection lost')


    def _notify(self, handler, args, kind):
        """ Invoke the *handler* in the background, waiting a bounded amount
            of time for it to complete. A timeout is logged and otherwise
            ignored.
        """

        def run():
            try:
                handler(*args)
            except Exception:
                self.logger.exception('%s handler failed', kind)

        thread = self._spawn(run)
        thread.join(self.notify_timeout)

        if thread.is_alive():
            self.logger.error('timed out waiting for %s notification to be handled', kind)
        else:
            self.logger.debug('notified for client %s successfully', kind)


    def _workers(self):
        return concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers,
                                                     thread_name_prefix='ditto-handler')


    def _retire_workers(self):
        """ Swap in a fresh pool; handlers already running on the old one
            are left to finish on their own.
        """

        workers = self.workers
        self.workers = self._workers()
        workers.shutdown(wait=False)


    def _spawn(self, method, *args):
        thread = threading.Thread(target=method, args=args, daemon=True)
        thread.start()
        return thread


# end of class Client


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
