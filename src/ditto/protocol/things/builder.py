""" Common machinery for the fluent builders of the things group. A builder
    accumulates a :class:`Topic`, a path, and a payload, and produces an
    :class:`Envelope` on request.

    Calls within the same category (action, channel, addressed path) are
    not mutually checked: the last call in each category wins.
"""

from __future__ import annotations

from typing import Any, Callable, Union

from ...model.ids import NamespacedID
from ..envelope import Envelope
from ..headers import Headers
from ..topic import Topic, TopicChannel, TopicCriterion, TopicGroup


# Entity-relative paths addressed by commands and events.

path_thing = '/'
path_definition = '/definition'
path_policy_id = '/policyId'
path_attributes = '/attributes'
path_attribute = path_attributes + '/%s'
path_features = '/features'
path_feature = path_features + '/%s'
path_feature_definition = path_feature + '/definition'
path_feature_properties = path_feature + '/properties'
path_feature_property = path_feature_properties + '/%s'
path_feature_desired_properties = path_feature + '/desiredProperties'
path_feature_desired_property = path_feature_desired_properties + '/%s'


HeaderOption = Callable[[Headers], None]


def thing_id(thing: Union[NamespacedID, str]) -> NamespacedID:
    """ Accept either a :class:`NamespacedID` or its string form. """

    if isinstance(thing, NamespacedID):
        return thing

    parsed = NamespacedID.parse(thing)
    if parsed is None:
        raise ValueError('invalid thing ID: ' + repr(thing))
    return parsed


class Builder:

    def __init__(self, thing: Union[NamespacedID, str], channel: TopicChannel, criterion: TopicCriterion):

        thing = thing_id(thing)

        self.topic = Topic(thing.namespace, thing.name, TopicGroup.THINGS, channel, criterion)
        self.path = path_thing
        self.payload: Any = None


    def _envelope(self, path: str, options: tuple) -> Envelope:
        """ Snapshot the current topic and payload into a new envelope,
            attaching headers only if header options were provided.
        """

        envelope = Envelope(self.topic.copy(), None, path, self.payload)

        if options:
            envelope.headers = Headers(*options)

        return envelope


    def envelope(self, *options: HeaderOption) -> Envelope:
        return self._envelope(self.path, options)


# end of class Builder



class Addressed(Builder):
    """ Path selection and channel selection shared by commands and events.
    """

    def thing(self):
        self.path = path_thing
        return self

    def definition(self):
        self.path = path_definition
        return self

    def policy_id(self):
        self.path = path_policy_id
        return self

    def attributes(self):
        self.path = path_attributes
        return self

    def attribute(self, attribute_id: str):
        self.path = path_attribute % (attribute_id,)
        return self

    def features(self):
        self.path = path_features
        return self

    def feature(self, feature_id: str):
        self.path = path_feature % (feature_id,)
        return self

    def feature_definition(self, feature_id: str):
        self.path = path_feature_definition % (feature_id,)
        return self

    def feature_properties(self, feature_id: str):
        self.path = path_feature_properties % (feature_id,)
        return self

    def feature_property(self, feature_id: str, property_id: str):
        self.path = path_feature_property % (feature_id, property_id)
        return self

    def feature_desired_properties(self, feature_id: str):
        self.path = path_feature_desired_properties % (feature_id,)
        return self

    def feature_desired_property(self, feature_id: str, property_id: str):
        self.path = path_feature_desired_property % (feature_id, property_id)
        return self

    def live(self):
        self.topic.with_channel(TopicChannel.LIVE)
        return self

    def twin(self):
        self.topic.with_channel(TopicChannel.TWIN)
        return self


# end of class Addressed


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
