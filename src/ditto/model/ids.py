""" Compact, colon-delimited identifiers used by the Ditto protocol: the
    :class:`NamespacedID` identifying a thing or policy, and the
    :class:`DefinitionID` identifying the model a thing or feature implements.
"""

import re


max_length = 256

# The namespace is either empty, or a sequence of identifier segments joined
# by dots or dashes. The name may contain anything except control characters
# and forward slashes.

namespaced_regex = re.compile(
    r'^(|(?:[a-zA-Z][a-zA-Z0-9_]*)(?:[.\-][a-zA-Z][a-zA-Z0-9_]*)*)'
    r':([^\x00-\x1F\x7F-\xFF/]+)$')

definition_regex = re.compile(
    r'^([a-zA-Z0-9_.\-]+):([a-zA-Z0-9_.\-]+):([a-zA-Z0-9_.\-]+)$')


class InvalidNamespacedID(ValueError):
    pass


class InvalidDefinitionID(ValueError):
    pass


class NamespacedID:
    """ A :class:`NamespacedID` is the unique identifier of a thing or a
        policy, in the form ``namespace:name``. The namespace is the text
        up to the first colon; the name may itself contain colons.

        The constructor performs no validation; use :func:`create` or
        :func:`parse` to obtain a validated instance.
    """

    def __init__(self, namespace='', name=''):
        self.namespace = namespace
        self.name = name


    def __eq__(self, other):
        if not isinstance(other, NamespacedID):
            return NotImplemented
        return self.namespace == other.namespace and self.name == other.name


    def __hash__(self):
        return hash((self.namespace, self.name))


    def __repr__(self):
        return 'NamespacedID(%r, %r)' % (self.namespace, self.name)


    def __str__(self):
        return '%s:%s' % (self.namespace, self.name)


    @classmethod
    def create(cls, namespace, name):
        """ Return a new :class:`NamespacedID` for the provided *namespace*
            and *name*, or None if the combination is not a valid ID.
        """

        if ':' in namespace:
            return None

        try:
            _match_namespaced(namespace + ':' + name)
        except InvalidNamespacedID:
            return None

        return cls(namespace, name)


    @classmethod
    def parse(cls, full):
        """ Return a new :class:`NamespacedID` from its string form, or None
            if *full* is not a valid ``namespace:name`` string. The empty
            string is not a valid ID.
        """

        if not isinstance(full, str):
            return None

        try:
            match = _match_namespaced(full)
        except InvalidNamespacedID:
            return None

        return cls(match.group(1), match.group(2))


    @classmethod
    def from_json(cls, value):
        if not isinstance(value, str):
            raise InvalidNamespacedID('invalid NamespacedID: ' + repr(value))

        match = _match_namespaced(value)
        return cls(match.group(1), match.group(2))


    def to_json(self):
        return str(self)


    def with_namespace(self, namespace):
        self.namespace = namespace
        return self


    def with_name(self, name):
        self.name = name
        return self


# end of class NamespacedID



class DefinitionID:
    """ A :class:`DefinitionID` declares the model a thing or feature
        conforms to, in the form ``namespace:name:version``. Each segment
        must be non-empty and consist solely of letters, digits,
        underscores, dashes, and dots.
    """

    def __init__(self, namespace='', name='', version=''):
        self.namespace = namespace
        self.name = name
        self.version = version


    def __eq__(self, other):
        if not isinstance(other, DefinitionID):
            return NotImplemented
        return (self.namespace, self.name, self.version) == \
               (other.namespace, other.name, other.version)


    def __hash__(self):
        return hash((self.namespace, self.name, self.version))


    def __repr__(self):
        return 'DefinitionID(%r, %r, %r)' % (self.namespace, self.name, self.version)


    def __str__(self):
        return '%s:%s:%s' % (self.namespace, self.name, self.version)


    @classmethod
    def create(cls, namespace, name, version):
        """ Return a new :class:`DefinitionID` with the provided segments,
            or None if any segment fails the identifier grammar.
        """

        return cls.parse('%s:%s:%s' % (namespace, name, version))


    @classmethod
    def parse(cls, full):
        """ Return a new :class:`DefinitionID` from its string form, or None
            if *full* does not match ``namespace:name:version``.
        """

        if not isinstance(full, str):
            return None

        match = definition_regex.fullmatch(full)
        if match is None:
            return None

        return cls(*match.groups())


    @classmethod
    def from_json(cls, value):
        parsed = cls.parse(value)
        if parsed is None:
            raise InvalidDefinitionID('invalid DefinitionID: ' + repr(value))
        return parsed


    def to_json(self):
        full = str(self)
        if definition_regex.fullmatch(full) is None:
            raise InvalidDefinitionID('invalid DefinitionID: ' + full)
        return full


    def with_namespace(self, namespace):
        self.namespace = namespace
        return self


    def with_name(self, name):
        self.name = name
        return self


    def with_version(self, version):
        self.version = version
        return self


# end of class DefinitionID



def _match_namespaced(full):

    if len(full) > max_length:
        raise InvalidNamespacedID('length exceeds %d, invalid NamespacedID: %s' % (max_length, full))

    match = namespaced_regex.fullmatch(full)
    if match is None:
        raise InvalidNamespacedID('invalid NamespacedID: ' + full)

    return match


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
