""" The thing and feature entities of the Ditto things model. A
    :class:`Thing` is a handle for a set of :class:`Feature` instances, plus
    attributes describing the thing itself.
"""

from .ids import DefinitionID, NamespacedID


class Feature:
    """ A :class:`Feature` holds the data and functionality of one
        technical aspect of a thing: its *definition* (a list of
        :class:`DefinitionID`), its reported *properties*, and its
        *desired_properties*.
    """

    def __init__(self, definition=None, properties=None, desired_properties=None):
        self.definition = definition
        self.properties = properties
        self.desired_properties = desired_properties


    def __eq__(self, other):
        if not isinstance(other, Feature):
            return NotImplemented
        return self.to_json() == other.to_json()


    def __repr__(self):
        return 'Feature(%r)' % (self.to_json(),)


    @classmethod
    def from_json(cls, value):

        definition = value.get('definition')
        if definition is not None:
            definition = [DefinitionID.from_json(one) for one in definition]

        return cls(definition, value.get('properties'), value.get('desiredProperties'))


    def to_json(self):

        value = dict()

        if self.definition:
            value['definition'] = [one.to_json() for one in self.definition]
        if self.properties:
            value['properties'] = self.properties
        if self.desired_properties:
            value['desiredProperties'] = self.desired_properties

        return value


    def with_definition(self, *definition):
        self.definition = list(definition)
        return self


    def with_definition_from(self, *definition):
        """ Set the definition from strings of the form
            ``namespace:name:version``; strings that are not valid
            definition IDs are stored as None.
        """

        if definition:
            self.definition = [DefinitionID.parse(one) for one in definition]
        return self


    def with_properties(self, properties):
        self.properties = properties
        return self


    def with_property(self, id, value):
        if self.properties is None:
            self.properties = dict()
        self.properties[id] = value
        return self


    def with_desired_properties(self, properties):
        self.desired_properties = properties
        return self


    def with_desired_property(self, id, value):
        if self.desired_properties is None:
            self.desired_properties = dict()
        self.desired_properties[id] = value
        return self


# end of class Feature



class Thing:
    """ A :class:`Thing` is the digital twin itself. Only the *id* is
        mandatory; everything else is omitted from the JSON representation
        when it is empty.
    """

    def __init__(self, id=None):
        self.id = id
        self.policy_id = None
        self.definition = None
        self.attributes = None
        self.features = None
        self.revision = 0
        self.timestamp = ''


    def __eq__(self, other):
        if not isinstance(other, Thing):
            return NotImplemented
        return self.to_json() == other.to_json()


    def __repr__(self):
        return 'Thing(%r)' % (self.to_json(),)


    @classmethod
    def from_json(cls, value):

        thing = cls()

        thing_id = value.get('thingId')
        if thing_id is not None:
            thing.id = NamespacedID.from_json(thing_id)

        policy_id = value.get('policyId')
        if policy_id is not None:
            thing.policy_id = NamespacedID.from_json(policy_id)

        definition = value.get('definition')
        if definition is not None:
            thing.definition = DefinitionID.from_json(definition)

        thing.attributes = value.get('attributes')

        features = value.get('features')
        if features is not None:
            thing.features = dict()
            for feature_id, feature in features.items():
                thing.features[feature_id] = Feature.from_json(feature)

        thing.revision = value.get('revision', 0)
        thing.timestamp = value.get('timestamp', '')
        return thing


    def to_json(self):

        value = dict()
        value['thingId'] = None if self.id is None else self.id.to_json()

        if self.policy_id is not None:
            value['policyId'] = self.policy_id.to_json()
        if self.definition is not None:
            value['definition'] = self.definition.to_json()
        if self.attributes:
            value['attributes'] = self.attributes
        if self.features:
            features = dict()
            for feature_id, feature in self.features.items():
                features[feature_id] = feature.to_json()
            value['features'] = features
        if self.revision:
            value['revision'] = self.revision
        if self.timestamp:
            value['timestamp'] = self.timestamp

        return value


    def with_id(self, id):
        self.id = id
        return self


    def with_id_from(self, id):
        self.id = NamespacedID.parse(id)
        return self


    def with_policy_id(self, policy_id):
        self.policy_id = policy_id
        return self


    def with_policy_id_from(self, policy_id):
        self.policy_id = NamespacedID.parse(policy_id)
        return self


    def with_definition(self, definition):
        self.definition = definition
        return self


    def with_definition_from(self, definition):
        self.definition = DefinitionID.parse(definition)
        return self


    def with_attributes(self, attributes):
        self.attributes = attributes
        return self


    def with_attribute(self, id, value):
        if self.attributes is None:
            self.attributes = dict()
        self.attributes[id] = value
        return self


    def with_features(self, features):
        self.features = features
        return self


    def with_feature(self, id, feature):
        if self.features is None:
            self.features = dict()
        self.features[id] = feature
        return self


    def with_revision(self, revision):
        self.revision = revision
        return self


    def with_timestamp(self, timestamp):
        self.timestamp = timestamp
        return self


# end of class Thing


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
