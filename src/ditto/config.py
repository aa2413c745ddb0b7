""" Connection configuration for a :class:`ditto.client.Client`. A
    :class:`Configuration` can be assembled in code with its fluent ``with_*``
    setters, or built from plain data with :func:`Configuration.from_dict`
    and :func:`Configuration.load`.
"""

import ssl

from . import json


# Default values, in seconds.

default_disconnect_timeout = 0.25
default_keep_alive = 30
default_connect_timeout = 30
default_acknowledge_timeout = 15
default_subscribe_timeout = 15
default_unsubscribe_timeout = 5


class ConfigurationError(ValueError):
    pass


class Credentials:

    def __init__(self, username='', password=''):
        self.username = username
        self.password = password


    def __eq__(self, other):
        if not isinstance(other, Credentials):
            return NotImplemented
        return self.username == other.username and self.password == other.password


    def __repr__(self):
        return 'Credentials(username=%r)' % (self.username,)


# end of class Credentials



class Configuration:
    """ Settings for a client connection. The *broker* is a URL such as
        ``tcp://localhost:1883``; the timeouts are in seconds. The
        *connect_handler* is invoked with the client as its only argument
        once the client is connected and subscribed; the
        *connection_lost_handler* is invoked with the client and the
        exception (if any) that caused the loss of the connection.
    """

    def __init__(self):
        self.broker = ''
        self.keep_alive = default_keep_alive
        self.disconnect_timeout = default_disconnect_timeout
        self.connect_timeout = default_connect_timeout
        self.acknowledge_timeout = default_acknowledge_timeout
        self.subscribe_timeout = default_subscribe_timeout
        self.unsubscribe_timeout = default_unsubscribe_timeout
        self.connect_handler = None
        self.connection_lost_handler = None
        self.credentials = None
        self.tls = None


    def __repr__(self):
        return 'Configuration(broker=%r)' % (self.broker,)


    def with_broker(self, broker):
        self.broker = broker
        return self


    def with_keep_alive(self, keep_alive):
        self.keep_alive = keep_alive
        return self


    def with_disconnect_timeout(self, timeout):
        self.disconnect_timeout = timeout
        return self


    def with_connect_timeout(self, timeout):
        self.connect_timeout = timeout
        return self


    def with_acknowledge_timeout(self, timeout):
        self.acknowledge_timeout = timeout
        return self


    def with_subscribe_timeout(self, timeout):
        self.subscribe_timeout = timeout
        return self


    def with_unsubscribe_timeout(self, timeout):
        self.unsubscribe_timeout = timeout
        return self


    def with_connect_handler(self, handler):
        self.connect_handler = handler
        return self


    def with_connection_lost_handler(self, handler):
        self.connection_lost_handler = handler
        return self


    def with_credentials(self, credentials):
        self.credentials = credentials
        return self


    def with_tls(self, context):
        """ Use the provided :class:`ssl.SSLContext` for the connection.
            The minimum protocol version of the context is raised to TLS 1.2
            if it is set any lower.
        """

        if context is not None:
            minimum = context.minimum_version
            if minimum < ssl.TLSVersion.TLSv1_2:
                context.minimum_version = ssl.TLSVersion.TLSv1_2

        self.tls = context
        return self


    @classmethod
    def from_dict(cls, values):
        """ Build a :class:`Configuration` from a mapping whose keys match
            the attribute names, for example::

                {'broker': 'tcp://localhost:1883',
                 'acknowledge_timeout': 5,
                 'credentials': {'username': 'ditto', 'password': 'ditto'}}

            Handlers and TLS contexts cannot be expressed as plain data and
            must be set in code. Unknown keys raise
            :class:`ConfigurationError`.
        """

        config = cls()

        for key, value in values.items():
            if key == 'credentials':
                if not isinstance(value, dict):
                    raise ConfigurationError('credentials must be a mapping with username and password')
                config.credentials = Credentials(value.get('username', ''), value.get('password', ''))
            elif key in _plain_keys:
                setattr(config, key, value)
            else:
                raise ConfigurationError('unknown configuration key: ' + repr(key))

        return config


    @classmethod
    def load(cls, filename):
        """ Build a :class:`Configuration` from a JSON file containing a
            single object, as described for :func:`from_dict`.
        """

        raw_json = open(filename, 'rb').read()
        values = json.loads(raw_json)

        if not isinstance(values, dict):
            raise ConfigurationError('configuration file must contain a JSON object: ' + repr(filename))

        return cls.from_dict(values)


# end of class Configuration


_plain_keys = ('broker', 'keep_alive', 'disconnect_timeout', 'connect_timeout',
               'acknowledge_timeout', 'subscribe_timeout', 'unsubscribe_timeout')



def validate_external(config):
    """ Reject any setting that only applies when the client owns its
        connection. Checks are made in a fixed order and the first violation
        raises :class:`ConfigurationError`.
    """

    if config.broker:
        raise ConfigurationError('broker cannot be set when using an external MQTT client')

    if config.credentials is not None:
        raise ConfigurationError('credentials cannot be set when using an external MQTT client')

    if _customized(config.disconnect_timeout, default_disconnect_timeout):
        raise ConfigurationError('disconnect timeout cannot be set when using an external MQTT client')

    if _customized(config.keep_alive, default_keep_alive):
        raise ConfigurationError('keep alive cannot be set when using an external MQTT client')

    if _customized(config.connect_timeout, default_connect_timeout):
        raise ConfigurationError('connect timeout cannot be set when using an external MQTT client')

    if config.tls is not None:
        raise ConfigurationError('TLS configuration cannot be set when using an external MQTT client')


def _customized(value, default):
    return value != default and value != 0


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
