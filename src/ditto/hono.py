""" Topic conventions of the Eclipse Hono MQTT adapter, which is how a
    device exchanges Ditto protocol messages with a Ditto service: commands
    arrive as requests on the command topic, and anything the device sends
    on its own initiative is published as a telemetry event.
"""

import re


command_subscribe = 'command///req/#'
event_publish = 'e'
command_response = 'command///res/%s/%d'

request_regex = re.compile(r'command///req/([^/]+)/([^/]+)')


def request_id(topic):
    """ Return the request ID embedded in a command request *topic*, or the
        empty string if the topic does not carry one.
    """

    match = request_regex.fullmatch(topic)
    if match is None:
        return ''

    return match.group(1)


def response_topic(request_id, status):
    return command_response % (request_id, status)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
