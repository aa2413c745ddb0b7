""" Ditto protocol headers. A :class:`Headers` instance is a plain mapping
    of header names to JSON-compatible values; the named accessors resolve
    header names case-insensitively and coerce the value to the expected
    type, falling back to the protocol default when the header is absent or
    of the wrong type.

    Headers are modified by applying option functions, such as those
    returned by :func:`with_correlation_id`, either at construction time or
    via :func:`Headers.with_options`, which never modifies the original.
"""

import re
import uuid

from . import fields


class InvalidTimeout(ValueError):
    pass


timeout_regex = re.compile(r'([+-]?[0-9]+)(ms|m|s)?')


def parse_timeout(timeout):
    """ Interpret the string form of the 'timeout' header and return the
        timeout in seconds. The string is an integer with an optional unit
        suffix: 'm' for minutes, 'ms' for milliseconds, and 's' (or no
        suffix at all) for seconds. Valid timeouts range from zero to sixty
        seconds, inclusive; anything else raises :class:`InvalidTimeout`.
    """

    match = None
    if isinstance(timeout, str):
        match = timeout_regex.fullmatch(timeout)

    if match is None:
        raise InvalidTimeout("invalid timeout '%s'" % (timeout,))

    number, unit = match.groups()

    try:
        number = int(number)
    except ValueError:
        # More digits than int() will convert.
        raise InvalidTimeout("invalid timeout '%s'" % (timeout,))

    if unit == 'm':
        seconds = number * 60.0
    elif unit == 'ms':
        seconds = number / 1000.0
    else:
        seconds = float(number)

    if seconds < 0 or seconds > fields.MAXIMUM_TIMEOUT:
        raise InvalidTimeout("invalid timeout '%s'" % (timeout,))

    return seconds



class Headers:
    """ The headers of a Ditto envelope. The optional *values* argument is
        an existing mapping (or :class:`Headers` instance) to copy; the
        copy is shallow. Any *options* are applied after the copy.

        Storage is case-sensitive, but every named accessor resolves its
        header in the same way: the canonical name if it is present exactly,
        otherwise the first key, in ascending sorted order, that matches the
        canonical name case-insensitively.
    """

    def __init__(self, *options, values=None):

        if values is None:
            self.values = dict()
        elif isinstance(values, Headers):
            self.values = dict(values.values)
        else:
            self.values = dict(values)

        for option in options:
            option(self)


    def __eq__(self, other):
        if not isinstance(other, Headers):
            return NotImplemented
        return self.values == other.values


    def __len__(self):
        return len(self.values)


    def __repr__(self):
        return 'Headers(%r)' % (self.values,)


    @classmethod
    def from_json(cls, value):
        if value is None:
            return cls()
        if not isinstance(value, dict):
            raise TypeError('headers must be a JSON object, not ' + type(value).__name__)
        return cls(values=value)


    def to_json(self):
        return self.values


    def with_options(self, *options):
        """ Return a new :class:`Headers` instance with the *options*
            applied to a shallow copy of these headers.
        """

        return Headers(*options, values=self.values)


    def key(self, name):
        """ Return the stored key that the header *name* resolves to, or
            None if there is no matching key.
        """

        if name in self.values:
            return name

        folded = name.lower()
        candidates = [key for key in self.values if isinstance(key, str)]

        for key in sorted(candidates):
            if key.lower() == folded:
                return key

        return None


    def get(self, name, default=None):
        """ Return the value of the header *name*, resolved case-insensitively,
            or *default* if no such header is present.
        """

        key = self.key(name)
        if key is None:
            return default

        return self.values[key]


    def set(self, name, value):
        """ Set the header *name*, overwriting whichever existing key the
            name resolves to; a new key is inserted with the name as given
            if there is no match.
        """

        key = self.key(name)
        if key is None:
            key = name

        self.values[key] = value


    def _string(self, name):
        value = self.get(name)
        if isinstance(value, str):
            return value
        return ''


    def _boolean(self, name, default):
        value = self.get(name)
        if isinstance(value, bool):
            return value
        return default


    def _integer(self, name, default):
        value = self.get(name)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return default


    def lookup_correlation_id(self):
        """ Return a (correlation_id, valid) tuple. If there is no
            correlation ID header at all a new unique ID is generated and
            stored, so that subsequent calls return the same value. If the
            header is present but is not a string, the returned ID is the
            empty string and *valid* is False.
        """

        key = self.key(fields.CORRELATION_ID)

        if key is None:
            correlation_id = str(uuid.uuid4())
            self.values[fields.CORRELATION_ID] = correlation_id
            return correlation_id, True

        value = self.values[key]
        if isinstance(value, str):
            return value, True

        return '', False


    def correlation_id(self):
        return self.lookup_correlation_id()[0]


    def timeout(self):
        """ Return the 'timeout' header in seconds; sixty seconds if the
            header is absent or is not a valid timeout string.
        """

        value = self.get(fields.TIMEOUT)

        try:
            return parse_timeout(value)
        except InvalidTimeout:
            return fields.DEFAULT_TIMEOUT


    def is_response_required(self):
        return self._boolean(fields.RESPONSE_REQUIRED, fields.DEFAULT_RESPONSE_REQUIRED)


    def channel(self):
        return self._string(fields.CHANNEL)


    def is_dry_run(self):
        return self._boolean(fields.DRY_RUN, False)


    def origin(self):
        return self._string(fields.ORIGIN)


    def originator(self):
        return self._string(fields.ORIGINATOR)


    def etag(self):
        return self._string(fields.ETAG)


    def if_match(self):
        return self._string(fields.IF_MATCH)


    def if_none_match(self):
        return self._string(fields.IF_NONE_MATCH)


    def reply_target(self):
        return self._integer(fields.REPLY_TARGET, fields.DEFAULT_REPLY_TARGET)


    def reply_to(self):
        return self._string(fields.REPLY_TO)


    def version(self):
        return self._integer(fields.VERSION, fields.DEFAULT_VERSION)


    def content_type(self):
        return self._string(fields.CONTENT_TYPE)


# end of class Headers



def _option(name, value):

    def option(headers):
        headers.set(name, value)

    return option


def with_correlation_id(correlation_id):
    return _option(fields.CORRELATION_ID, correlation_id)


def with_reply_to(reply_to):
    return _option(fields.REPLY_TO, reply_to)


def with_reply_target(reply_target):
    return _option(fields.REPLY_TARGET, reply_target)


def with_channel(channel):
    return _option(fields.CHANNEL, channel)


def with_response_required(response_required):
    return _option(fields.RESPONSE_REQUIRED, response_required)


def with_originator(originator):
    return _option(fields.ORIGINATOR, originator)


def with_origin(origin):
    return _option(fields.ORIGIN, origin)


def with_dry_run(dry_run):
    return _option(fields.DRY_RUN, dry_run)


def with_etag(etag):
    return _option(fields.ETAG, etag)


def with_if_match(if_match):
    return _option(fields.IF_MATCH, if_match)


def with_if_none_match(if_none_match):
    return _option(fields.IF_NONE_MATCH, if_none_match)


def with_timeout(timeout):
    """ Set the 'timeout' header. A string is used as-is; a number is taken
        to be seconds, and is expressed in milliseconds if it is not a
        whole number of seconds.
    """

    if not isinstance(timeout, str):
        if float(timeout).is_integer():
            timeout = '%ds' % (timeout,)
        else:
            timeout = '%dms' % (round(timeout * 1000),)

    return _option(fields.TIMEOUT, timeout)


def with_version(version):
    return _option(fields.VERSION, version)


def with_content_type(content_type):
    return _option(fields.CONTENT_TYPE, content_type)


def with_generic(name, value):
    """ Set the header *name* to *value* exactly as given, bypassing the
        case-insensitive resolution used by the named options.
    """

    def option(headers):
        headers.values[name] = value

    return option


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
