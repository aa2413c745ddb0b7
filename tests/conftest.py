import threading
import time

import pytest

import ditto
from ditto.transport import Token, Transport


class FakeTransport(Transport):
    """ In-memory stand-in for a connected MQTT transport. Publish,
        subscribe, and unsubscribe tokens complete immediately unless told
        otherwise; a value of False for the matching attribute leaves the
        token pending forever, an exception instance fails it.
    """

    def __init__(self, connected=True):
        self.connected = connected
        self.options = None

        self.connect_result = True
        self.publish_result = True
        self.subscribe_result = True
        self.unsubscribe_result = True

        self.published = list()
        self.subscriptions = dict()
        self.unsubscribed = list()
        self.disconnected = None
        self.closed = 0


    def bind(self, options):
        self.options = options
        return self


    def _token(self, result):
        if result is True:
            return Token.succeeded()
        if result is False:
            return Token()
        return Token.failed(result)


    def connect(self):
        token = self._token(self.connect_result)

        if self.connect_result is True:
            self.connected = True
            if self.options.on_connect is not None:
                self.options.on_connect()

        return token


    def disconnect(self, grace):
        self.connected = False
        self.disconnected = grace


    def publish(self, topic, qos, retain, payload):
        self.published.append((topic, qos, retain, payload))
        return self._token(self.publish_result)


    def subscribe(self, pattern, qos, callback):
        self.subscriptions[pattern] = callback
        return self._token(self.subscribe_result)


    def unsubscribe(self, pattern):
        self.subscriptions.pop(pattern, None)
        self.unsubscribed.append(pattern)
        return self._token(self.unsubscribe_result)


    def is_connected(self):
        return self.connected


    def close(self):
        self.closed += 1


    def deliver(self, topic, payload):
        """ Hand an inbound message to every subscribed callback, as the
            transport would on receipt from the broker.
        """

        for callback in list(self.subscriptions.values()):
            callback(topic, payload)


# end of class FakeTransport



class Recorder:
    """ A message handler that remembers every invocation. """

    def __init__(self):
        self.calls = list()
        self.condition = threading.Condition()


    def __call__(self, request_id, envelope):
        with self.condition:
            self.calls.append((request_id, envelope))
            self.condition.notify_all()


    def wait(self, count=1, timeout=2):
        with self.condition:
            return self.condition.wait_for(lambda: len(self.calls) >= count, timeout)


# end of class Recorder



def wait_for(predicate, timeout=2):
    """ Poll *predicate* until it returns True or *timeout* expires. """

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def external(transport):
    """ A client bound to the connected fake transport, not yet connected
        at the protocol level.
    """

    return ditto.Client.from_transport(transport)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
