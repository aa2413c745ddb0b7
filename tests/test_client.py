import logging
import threading
import time

import pytest

import ditto
from ditto import protocol
from ditto.config import Configuration, ConfigurationError, Credentials
from ditto.protocol import Envelope
from ditto.protocol.things import Command
from ditto.transport import AcknowledgeTimeout, SubscribeTimeout, TransportConnectionError, TransportError, TransportNotConnected

from conftest import FakeTransport, Recorder, wait_for


command_topic = 'command///req/abc123/modify'

inbound = Command('ns:thing1').feature('temp').modify(21.5).envelope(protocol.with_correlation_id('cid'))


def errors(caplog):
    return [record for record in caplog.records if record.levelno == logging.ERROR]


def test_send(external, transport):

    external.send(inbound)

    topic, qos, retain, payload = transport.published[0]
    assert topic == 'e'
    assert qos == 1
    assert retain == False
    assert Envelope.decode(payload) == inbound


def test_reply(external, transport):

    response = Envelope(inbound.topic, path='/features/temp').with_status(204)
    external.reply('abc123', response)

    topic, qos, retain, payload = transport.published[0]
    assert topic == 'command///res/abc123/204'
    assert Envelope.decode(payload).status == 204


def test_acknowledge_timeout(transport):

    transport.publish_result = False

    config = Configuration().with_acknowledge_timeout(0)
    client = ditto.Client.from_transport(transport, config)

    started = time.monotonic()

    with pytest.raises(AcknowledgeTimeout):
        client.send(inbound)

    assert time.monotonic() - started < 1


def test_publish_error(external, transport):

    transport.publish_result = TransportError('rejected')

    with pytest.raises(TransportError) as raised:
        external.send(inbound)

    assert str(raised.value) == 'rejected'
    assert not isinstance(raised.value, AcknowledgeTimeout)


def test_send_before_connect():

    client = ditto.Client(Configuration().with_broker('tcp://localhost:1883'))

    with pytest.raises(TransportNotConnected):
        client.send(inbound)


def test_dispatch(external, transport, recorder):

    external.connect()
    external.subscribe(recorder)

    transport.deliver(command_topic, inbound.encode())

    assert recorder.wait()
    request_id, envelope = recorder.calls[0]

    assert request_id == 'abc123'
    assert envelope == inbound
    assert envelope.headers.correlation_id() == 'cid'


def test_dispatch_without_request_id(external, transport, recorder):

    external.connect()
    external.subscribe(recorder)

    transport.deliver('command///req/', inbound.encode())

    assert recorder.wait()
    assert recorder.calls[0][0] == ''


def test_duplicate_subscribe(external, transport, recorder):

    external.connect()
    external.subscribe(recorder)
    external.subscribe(recorder)

    assert len(external.handlers) == 1

    transport.deliver(command_topic, inbound.encode())

    assert recorder.wait()
    time.sleep(0.1)
    assert len(recorder.calls) == 1


def test_subscribe_nothing(external):

    external.subscribe()
    assert len(external.handlers) == 0


def test_unsubscribe_all(external, transport, recorder, caplog):

    caplog.set_level(logging.DEBUG, logger='ditto')

    other = Recorder()

    external.connect()
    external.subscribe(recorder, other)
    external.unsubscribe()

    assert len(external.handlers) == 0

    transport.deliver(command_topic, inbound.encode())

    assert recorder.calls == []
    assert other.calls == []
    assert any('no message handlers' in record.getMessage() for record in caplog.records)


def test_unsubscribe_one(external, transport, recorder):

    other = Recorder()

    external.connect()
    external.subscribe(recorder, other)
    external.unsubscribe(other)

    transport.deliver(command_topic, inbound.encode())

    assert recorder.wait()
    time.sleep(0.1)
    assert other.calls == []


def test_bound_method_identity(external):

    class Device:
        def handle(self, request_id, envelope):
            pass

    device = Device()

    external.subscribe(device.handle)
    external.subscribe(device.handle)
    assert len(external.handlers) == 1

    external.unsubscribe(device.handle)
    assert len(external.handlers) == 0


def test_malformed_message(external, transport, recorder, caplog):

    caplog.set_level(logging.DEBUG, logger='ditto')

    external.connect()
    external.subscribe(recorder)

    transport.deliver(command_topic, b'{"t"}')

    time.sleep(0.1)
    assert recorder.calls == []
    assert len(errors(caplog)) == 1


def test_handler_failure_is_isolated(external, transport, recorder, caplog):

    caplog.set_level(logging.DEBUG, logger='ditto')

    def broken(request_id, envelope):
        raise RuntimeError('broken handler')

    external.connect()
    external.subscribe(broken, recorder)

    transport.deliver(command_topic, inbound.encode())

    assert recorder.wait()
    assert wait_for(lambda: len(errors(caplog)) == 1)
    assert errors(caplog)[0].exc_info[0] is RuntimeError


def test_handlers_run_concurrently(external, transport):

    release = threading.Event()
    finished = Recorder()

    def blocking(request_id, envelope):
        release.wait(2)

    external.connect()
    external.subscribe(blocking, finished)

    transport.deliver(command_topic, inbound.encode())

    assert finished.wait()
    release.set()


def test_handlers_run_on_worker_pool(external, transport):

    names = list()
    finished = Recorder()

    def named(request_id, envelope):
        names.append(threading.current_thread().name)
        finished(request_id, envelope)

    external.connect()
    external.subscribe(named)

    for count in range(3):
        transport.deliver(command_topic, inbound.encode())

    assert finished.wait(count=3)
    assert all(name.startswith('ditto-handler') for name in names)


def test_external_requires_connected_transport():

    with pytest.raises(TransportNotConnected):
        ditto.Client.from_transport(FakeTransport(connected=False))


def test_external_rejects_owned_settings(transport):

    config = Configuration().with_credentials(Credentials('ditto', 'secret')).with_keep_alive(10)

    with pytest.raises(ConfigurationError) as raised:
        ditto.Client.from_transport(transport, config)

    assert 'credentials' in str(raised.value)


def test_external_connect(transport):

    connected = Recorder()

    config = Configuration().with_connect_handler(lambda client: connected(None, client))
    client = ditto.Client.from_transport(transport, config)
    client.connect()

    assert 'command///req/#' in transport.subscriptions
    assert connected.wait()
    assert connected.calls[0][1] is client


def test_external_subscribe_timeout(transport):

    transport.subscribe_result = False

    config = Configuration().with_subscribe_timeout(0.05)
    client = ditto.Client.from_transport(transport, config)

    with pytest.raises(SubscribeTimeout):
        client.connect()

    # A failed connect does not leave dispatch waiting on a notification.

    assert client.notifications.wait(0)


def test_external_subscribe_error(external, transport):

    transport.subscribe_result = TransportError('not authorized')

    with pytest.raises(TransportError) as raised:
        external.connect()

    assert str(raised.value) == 'not authorized'


def test_connect_notification_barrier(transport, recorder):

    started = threading.Event()
    release = threading.Event()

    def on_connect(client):
        started.set()
        release.wait(2)
        client.subscribe(recorder)

    config = Configuration().with_connect_handler(on_connect)
    client = ditto.Client.from_transport(transport, config)
    client.connect()

    assert started.wait(2)

    delivery = threading.Thread(target=transport.deliver, args=(command_topic, inbound.encode()))
    delivery.start()

    time.sleep(0.1)
    assert recorder.calls == []

    release.set()
    delivery.join(2)

    assert recorder.wait()


def test_connect_notification_timeout(transport, recorder, caplog):

    caplog.set_level(logging.DEBUG, logger='ditto')

    release = threading.Event()

    config = Configuration().with_connect_handler(lambda client: release.wait(2))
    client = ditto.Client.from_transport(transport, config)
    client.notify_timeout = 0.05
    client.connect()

    assert wait_for(lambda: len(errors(caplog)) == 1)
    assert 'timed out waiting for initialization' in errors(caplog)[0].getMessage()

    # Dispatch proceeds once the grace period has elapsed.

    client.subscribe(recorder)
    transport.deliver(command_topic, inbound.encode())
    assert recorder.wait()

    release.set()


def test_external_disconnect(transport):

    lost = Recorder()

    config = Configuration().with_connection_lost_handler(lambda client, error: lost(client, error))
    client = ditto.Client.from_transport(transport, config)
    client.connect()
    client.disconnect()

    assert transport.unsubscribed == ['command///req/#']
    assert transport.disconnected is None
    assert transport.closed == 1

    assert lost.wait()
    assert lost.calls[0] == (client, None)


def test_external_disconnect_already_disconnected(transport, caplog):

    caplog.set_level(logging.DEBUG, logger='ditto')

    lost = Recorder()
    gone = TransportNotConnected('not connected')

    config = Configuration().with_connection_lost_handler(lambda client, error: lost(client, error))
    client = ditto.Client.from_transport(transport, config)
    client.connect()

    transport.unsubscribe_result = gone
    client.disconnect()

    assert lost.wait()
    assert lost.calls[0][1] is gone
    assert transport.closed == 1
    assert errors(caplog) == []


def owned(transport, config=None):

    if config is None:
        config = Configuration()

    config.with_broker('tcp://localhost:1883')
    return ditto.Client(config, transport_factory=transport.bind)


def test_owned_connect(recorder):

    transport = FakeTransport(connected=False)
    connected = threading.Event()

    config = Configuration().with_keep_alive(10).with_credentials(Credentials('ditto', 'secret'))
    config.with_connect_handler(lambda client: connected.set())

    client = owned(transport, config)
    client.connect()

    options = transport.options
    assert options.broker == 'tcp://localhost:1883'
    assert options.client_id != ''
    assert options.keep_alive == 10
    assert options.username == 'ditto'
    assert options.password == 'secret'
    assert options.auto_reconnect == True

    assert 'command///req/#' in transport.subscriptions
    assert connected.wait(2)

    client.subscribe(recorder)
    transport.deliver(command_topic, inbound.encode())
    assert recorder.wait()


def test_owned_unique_client_ids():

    first = FakeTransport(connected=False)
    second = FakeTransport(connected=False)

    owned(first).connect()
    owned(second).connect()

    assert first.options.client_id != second.options.client_id


def test_owned_connect_error():

    transport = FakeTransport(connected=False)
    transport.connect_result = TransportConnectionError('connection refused')

    client = owned(transport)

    with pytest.raises(TransportConnectionError):
        client.connect()

    assert transport.disconnected == 0
    assert client.transport is None

    with pytest.raises(TransportNotConnected):
        client.send(inbound)


def test_owned_disconnect(caplog):

    caplog.set_level(logging.DEBUG, logger='ditto')

    transport = FakeTransport(connected=False)
    client = owned(transport, Configuration().with_unsubscribe_timeout(0.05))
    client.connect()

    transport.unsubscribe_result = False
    client.disconnect()

    assert transport.disconnected == 0.25
    assert len(errors(caplog)) == 1
    assert 'unsubscribe timeout' in errors(caplog)[0].getMessage()


def test_owned_reconnect_after_disconnect(recorder):

    transport = FakeTransport(connected=False)
    client = owned(transport)
    client.connect()
    client.subscribe(recorder)

    retired = client.workers
    client.disconnect()

    assert client.workers is not retired
    with pytest.raises(RuntimeError):
        retired.submit(print)

    client.connect()
    transport.deliver(command_topic, inbound.encode())
    assert recorder.wait()


def test_owned_connection_lost():

    lost = Recorder()
    transport = FakeTransport(connected=False)

    config = Configuration().with_connection_lost_handler(lambda client, error: lost(client, error))
    client = owned(transport, config)
    client.connect()

    error = TransportConnectionError('connection lost')
    transport.options.on_connection_lost(error)

    assert lost.wait()
    assert lost.calls[0] == (client, error)


def test_disconnect_never_connected(caplog):

    caplog.set_level(logging.DEBUG, logger='ditto')

    ditto.Client().disconnect()
    assert errors(caplog) == []


def test_injected_logger(transport):

    messages = list()

    class Sink:
        def debug(self, *args):
            pass

        def info(self, *args):
            pass

        def warning(self, *args):
            pass

        def error(self, message, *args):
            messages.append(message % args)

        def exception(self, message, *args):
            messages.append(message % args)

    client = ditto.Client.from_transport(transport, logger=Sink())
    client.connect()

    transport.deliver(command_topic, b'not json')

    assert len(messages) == 1
    assert messages[0].startswith('error getting Ditto message')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
