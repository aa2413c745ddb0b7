""" Wrapper module for the JSON encoding used throughout the package. The
    equivalent of :func:`json.dumps` and :func:`json.loads` are provided;
    as with orjson itself, :func:`dumps` always returns bytes.
"""

import orjson


def _default(thing):
    """ Fallback encoder for objects orjson does not natively understand.
        Any object providing a ``to_json()`` method is encoded as whatever
        that method returns.
    """

    try:
        to_json = thing.to_json
    except AttributeError:
        raise TypeError('type is not JSON serializable: ' + type(thing).__name__)

    return to_json()


def dumps(thing):
    return orjson.dumps(thing, default=_default)


def loads(encoded):
    return orjson.loads(encoded)


# orjson.JSONDecodeError is a subclass of ValueError; exposed here so that
# callers need not import orjson themselves.

DecodeError = orjson.JSONDecodeError


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
