""" The Ditto protocol envelope, the outer wrapper of every message
    exchanged with Ditto. Encoding and decoding to the JSON wire form is
    handled here; no semantic validation is performed beyond the structure
    of the topic and headers.
"""

from .. import json
from .headers import Headers
from .topic import Topic


class InvalidEnvelope(ValueError):
    pass


class Envelope:
    """ A :class:`Envelope` combines a :class:`Topic`, :class:`Headers`, and
        the *path* and *value* the message refers to. The remaining fields
        (*fields*, *extra*, *status*, *revision*, *timestamp*) are optional
        and are omitted from the JSON representation when empty.

        All ``with_*`` setters modify this instance and return it, so that
        calls can be chained.
    """

    def __init__(self, topic=None, headers=None, path='', value=None):
        self.topic = topic
        self.headers = headers
        self.path = path
        self.value = value
        self.fields = ''
        self.extra = None
        self.status = 0
        self.revision = 0
        self.timestamp = ''


    def __eq__(self, other):
        if not isinstance(other, Envelope):
            return NotImplemented
        return vars(self) == vars(other)


    def __repr__(self):
        return 'Envelope(topic=%r, path=%r)' % (self.topic, self.path)


    @classmethod
    def from_json(cls, value):
        """ Return a new :class:`Envelope` from its decoded JSON form. The
            headers are always present on the result, even if the JSON had
            none, so that the header accessors report protocol defaults.
        """

        if not isinstance(value, dict):
            raise InvalidEnvelope('envelope must be a JSON object, not ' + type(value).__name__)

        topic = value.get('topic')
        if topic is not None:
            topic = Topic.from_json(topic)

        headers = Headers.from_json(value.get('headers'))

        envelope = cls(topic, headers, value.get('path', ''), value.get('value'))
        envelope.fields = value.get('fields', '')
        envelope.extra = value.get('extra')
        envelope.status = value.get('status', 0)
        envelope.revision = value.get('revision', 0)
        envelope.timestamp = value.get('timestamp', '')
        return envelope


    def to_json(self):

        value = dict()
        value['topic'] = None if self.topic is None else self.topic.to_json()

        if self.headers:
            value['headers'] = self.headers.to_json()

        value['path'] = self.path

        if self.value is not None:
            value['value'] = self.value
        if self.fields:
            value['fields'] = self.fields
        if self.extra is not None:
            value['extra'] = self.extra
        if self.status:
            value['status'] = self.status
        if self.revision:
            value['revision'] = self.revision
        if self.timestamp:
            value['timestamp'] = self.timestamp

        return value


    @classmethod
    def decode(cls, payload):
        """ Decode raw JSON bytes into a new :class:`Envelope`. Raises
            :class:`InvalidEnvelope` if the payload is not valid JSON or not
            a structurally valid envelope, or :class:`InvalidTopic` if the
            topic does not parse.
        """

        try:
            decoded = json.loads(payload)
        except (json.DecodeError, TypeError) as e:
            raise InvalidEnvelope(str(e)) from e

        try:
            return cls.from_json(decoded)
        except TypeError as e:
            raise InvalidEnvelope(str(e)) from e


    def encode(self):
        return json.dumps(self.to_json())


    def with_topic(self, topic):
        self.topic = topic
        return self


    def with_headers(self, headers):
        self.headers = headers
        return self


    def with_path(self, path):
        self.path = path
        return self


    def with_value(self, value):
        self.value = value
        return self


    def with_fields(self, fields):
        self.fields = fields
        return self


    def with_extra(self, extra):
        self.extra = extra
        return self


    def with_status(self, status):
        self.status = status
        return self


    def with_revision(self, revision):
        self.revision = revision
        return self


    def with_timestamp(self, timestamp):
        self.timestamp = timestamp
        return self


# end of class Envelope


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
