import pytest

import ditto
from ditto import protocol
from ditto.model import NamespacedID, Thing
from ditto.protocol import Headers
from ditto.protocol.things import Command, Event, Message


thing_id = NamespacedID('ns', 'thing1')


def test_modify_feature():

    envelope = Command('ns:thing1').twin().feature('temp').modify(21.5) \
                    .envelope(protocol.with_response_required(False))

    assert str(envelope.topic) == 'ns/thing1/things/twin/commands/modify'
    assert envelope.path == '/features/temp'
    assert envelope.value == 21.5
    assert envelope.headers.values == {'response-required': False}

    encoded = ditto.json.loads(envelope.encode())
    assert encoded['headers'] == {'response-required': False}
    assert encoded['value'] == 21.5


def test_command_paths():

    cases = ((lambda command: command.thing(), '/'),
             (lambda command: command.definition(), '/definition'),
             (lambda command: command.policy_id(), '/policyId'),
             (lambda command: command.attributes(), '/attributes'),
             (lambda command: command.attribute('location'), '/attributes/location'),
             (lambda command: command.features(), '/features'),
             (lambda command: command.feature('temp'), '/features/temp'),
             (lambda command: command.feature_definition('temp'), '/features/temp/definition'),
             (lambda command: command.feature_properties('temp'), '/features/temp/properties'),
             (lambda command: command.feature_property('temp', 'value'), '/features/temp/properties/value'),
             (lambda command: command.feature_desired_properties('temp'), '/features/temp/desiredProperties'),
             (lambda command: command.feature_desired_property('temp', 'value'), '/features/temp/desiredProperties/value'))

    for select, path in cases:
        command = Command(thing_id)
        assert select(command) is command
        assert command.envelope().path == path

        event = Event(thing_id)
        assert select(event) is event
        assert event.envelope().path == path


def test_defaults():

    envelope = Command(thing_id).envelope()

    assert envelope.path == '/'
    assert envelope.headers is None
    assert envelope.value is None
    assert envelope.topic.to_json() == 'ns/thing1/things/twin/commands'


def test_last_call_wins():

    command = Command(thing_id).live().twin().attributes().feature('temp').delete().modify({'value': 1})
    envelope = command.envelope()

    assert str(envelope.topic) == 'ns/thing1/things/twin/commands/modify'
    assert envelope.path == '/features/temp'
    assert envelope.value == {'value': 1}


def test_create():

    thing = Thing(thing_id).with_attribute('location', 'lab')
    envelope = Command(thing_id).create(thing).envelope()

    assert str(envelope.topic) == 'ns/thing1/things/twin/commands/create'

    encoded = ditto.json.loads(envelope.encode())
    assert encoded['value'] == {'thingId': 'ns:thing1', 'attributes': {'location': 'lab'}}


def test_merge_and_delete():

    envelope = Command(thing_id).live().attribute('location').merge('lab').envelope()
    assert str(envelope.topic) == 'ns/thing1/things/live/commands/merge'
    assert envelope.value == 'lab'

    envelope = Command(thing_id).delete().envelope()
    assert str(envelope.topic) == 'ns/thing1/things/twin/commands/delete'
    assert 'value' not in envelope.to_json()


def test_retrieve():

    envelope = Command(thing_id).retrieve().envelope()
    assert str(envelope.topic) == 'ns/thing1/things/twin/commands/retrieve'
    assert envelope.value is None
    assert 'value' not in ditto.json.loads(envelope.encode())

    envelope = Command(NamespacedID('_', '_')).retrieve(thing_id, NamespacedID('ns', 'thing2')).envelope()
    assert str(envelope.topic) == '_/_/things/twin/commands/retrieve'
    assert envelope.value == {'thingIds': ['ns:thing1', 'ns:thing2']}


def test_envelope_snapshot():

    command = Command(thing_id).modify(1)
    first = command.envelope(protocol.with_correlation_id('one'))

    command.live().delete()
    second = command.envelope()

    assert str(first.topic) == 'ns/thing1/things/twin/commands/modify'
    assert str(second.topic) == 'ns/thing1/things/live/commands/delete'
    assert isinstance(first.headers, Headers)
    assert first.headers.correlation_id() == 'one'


def test_events():

    thing = Thing(thing_id)

    envelope = Event(thing_id).created(thing).envelope()
    assert str(envelope.topic) == 'ns/thing1/things/twin/events/created'
    assert envelope.value is thing

    envelope = Event(thing_id).live().feature_property('temp', 'value').modified(22).envelope()
    assert str(envelope.topic) == 'ns/thing1/things/live/events/modified'
    assert envelope.path == '/features/temp/properties/value'
    assert envelope.value == 22

    envelope = Event(thing_id).attributes().merged({'a': 1}).envelope()
    assert str(envelope.topic) == 'ns/thing1/things/twin/events/merged'

    envelope = Event(thing_id).deleted().envelope()
    assert str(envelope.topic) == 'ns/thing1/things/twin/events/deleted'


def test_messages():

    envelope = Message(thing_id).inbox('switch-on').with_payload({'level': 5}).envelope()

    assert str(envelope.topic) == 'ns/thing1/things/live/messages/switch-on'
    assert envelope.path == '/inbox/messages/switch-on'
    assert envelope.value == {'level': 5}

    envelope = Message(thing_id).feature('lamp').outbox('status').envelope(protocol.with_content_type('application/json'))

    assert str(envelope.topic) == 'ns/thing1/things/live/messages/status'
    assert envelope.path == '/features/lamp/outbox/messages/status'
    assert envelope.headers.content_type() == 'application/json'


def test_invalid_thing_id():

    with pytest.raises(ValueError):
        Command('not a thing id')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
