""" The Ditto protocol topic: a slash-delimited path that identifies the
    entity a message concerns and what kind of message it is. The string
    form depends on the group:

        namespace/entity/things/channel/criterion[/action]
        namespace/entity/policies/criterion/action
"""

import enum
import re

from ..model.ids import NamespacedID


class InvalidTopic(ValueError):
    pass


class TopicGroup(str, enum.Enum):
    THINGS = 'things'
    POLICIES = 'policies'


class TopicChannel(str, enum.Enum):
    TWIN = 'twin'
    LIVE = 'live'


class TopicCriterion(str, enum.Enum):
    COMMANDS = 'commands'
    EVENTS = 'events'
    SEARCH = 'search'
    MESSAGES = 'messages'
    ERRORS = 'errors'


class TopicAction(str, enum.Enum):
    """ Well-known topic actions. The action of a live message topic is the
        message subject, which is free-form; a :class:`Topic` therefore
        stores its action as a plain string.
    """

    CREATE = 'create'
    CREATED = 'created'
    MODIFY = 'modify'
    MODIFIED = 'modified'
    MERGE = 'merge'
    MERGED = 'merged'
    DELETE = 'delete'
    DELETED = 'deleted'
    RETRIEVE = 'retrieve'
    SUBSCRIBE = 'subscribe'
    REQUEST = 'request'
    CANCEL = 'cancel'
    NEXT = 'next'
    COMPLETE = 'complete'
    FAILED = 'failed'


# Used in place of the namespace and/or entity name to mean "any".

placeholder = '_'

segments_regex = re.compile(r'[^/]+(?:/[^/]+){4,5}')


class Topic:
    """ A structured Ditto topic. The *group*, *channel*, and *criterion*
        are stored as their enumerated types; *channel* is None for the
        policies group, and *action* is None for a things topic without a
        trailing action segment.
    """

    def __init__(self, namespace='', entity_name='', group=None, channel=None, criterion=None, action=None):
        self.namespace = namespace
        self.entity_name = entity_name
        self.group = group
        self.channel = channel
        self.criterion = criterion
        self.action = action


    def __eq__(self, other):
        if not isinstance(other, Topic):
            return NotImplemented
        return self._fields() == other._fields()


    def __repr__(self):
        return 'Topic(%r)' % (self._positional(),)


    def __str__(self):
        """ Return the validated string form of this topic; raises
            :class:`InvalidTopic` if any mandatory segment is missing.
        """

        positional = self._positional()
        parse(positional)
        return positional


    def _fields(self):

        action = self.action
        if isinstance(action, enum.Enum):
            action = action.value

        return (self.namespace, self.entity_name,
                _value(self.group), _value(self.channel),
                _value(self.criterion), action or None)


    def _positional(self):

        namespace, entity_name, group, channel, criterion, action = self._fields()

        if group == TopicGroup.POLICIES.value:
            elements = [namespace, entity_name, group, criterion, action]
        else:
            elements = [namespace, entity_name, group, channel, criterion]
            if action:
                elements.append(action)

        elements = ['' if element is None else element for element in elements]
        return '/'.join(elements)


    def copy(self):
        return Topic(self.namespace, self.entity_name, self.group,
                     self.channel, self.criterion, self.action)


    @classmethod
    def from_json(cls, value):
        return parse(value)


    def to_json(self):
        return str(self)


    def with_namespace(self, namespace):
        self.namespace = namespace
        return self


    def with_entity_name(self, entity_name):
        self.entity_name = entity_name
        return self


    def with_group(self, group):
        self.group = group
        return self


    def with_channel(self, channel):
        self.channel = channel
        return self


    def with_criterion(self, criterion):
        self.criterion = criterion
        return self


    def with_action(self, action):
        self.action = action
        return self


# end of class Topic



def parse(topic):
    """ Return a new :class:`Topic` from its string form. Raises
        :class:`InvalidTopic` if the string does not follow the topic
        grammar for its group, or if the namespace and entity name do not
        form a valid namespaced ID.
    """

    if not isinstance(topic, str) or segments_regex.fullmatch(topic) is None:
        raise InvalidTopic('invalid topic: ' + repr(topic))

    elements = topic.split('/')
    namespace, entity_name, group = elements[:3]
    remaining = elements[3:]

    validate_namespaced_id(namespace, entity_name)

    try:
        group = TopicGroup(group)
    except ValueError:
        raise InvalidTopic('invalid topic group: ' + topic)

    channel = None
    action = None

    if group == TopicGroup.THINGS:
        try:
            channel = TopicChannel(remaining.pop(0))
        except ValueError:
            raise InvalidTopic('invalid topic channel: ' + topic)
    elif len(remaining) != 2:
        raise InvalidTopic('invalid policies topic: ' + topic)

    try:
        criterion = TopicCriterion(remaining.pop(0))
    except ValueError:
        raise InvalidTopic('invalid topic criterion: ' + topic)

    if remaining:
        action = remaining.pop(0)

    return Topic(namespace, entity_name, group, channel, criterion, action)


def validate_namespaced_id(namespace, entity_name):
    """ Confirm the namespace and entity name of a topic form a valid
        :class:`NamespacedID`, allowing the placeholder in place of either
        one. Raises :class:`InvalidTopic` if they do not.
    """

    checked = namespace
    if namespace == placeholder:
        if entity_name == placeholder:
            return
        checked = 'ns'

    if NamespacedID.create(checked, entity_name) is None:
        raise InvalidTopic('invalid topic namespaced ID, namespace: ' + namespace + ', entity name: ' + entity_name)


def _value(member):
    if isinstance(member, enum.Enum):
        return member.value
    return member or None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
