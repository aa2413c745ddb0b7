from . import fields
from . import things

from .envelope import Envelope, InvalidEnvelope
from .headers import Headers, InvalidTimeout, parse_timeout
from .headers import (
    with_channel,
    with_content_type,
    with_correlation_id,
    with_dry_run,
    with_etag,
    with_generic,
    with_if_match,
    with_if_none_match,
    with_origin,
    with_originator,
    with_reply_target,
    with_reply_to,
    with_response_required,
    with_timeout,
    with_version,
)
from .topic import Topic, InvalidTopic
from .topic import TopicAction, TopicChannel, TopicCriterion, TopicGroup


"""
Ditto Protocol Layer
====================

This package defines the Ditto protocol messages exchanged with a Ditto
service, independent of how they are carried.

---------------------------------------------------------------------

Layer Overview
--------------

Builders (things/)
    Fluent construction of commands, events, and live messages
    - Command, Event, Message
    - Last call per category wins

    │
    ▼
Envelope (envelope.py)
    Topic + headers + path + value
    - JSON encode/decode

    │
    ▼
Topic (topic.py), Headers (headers.py)
    Structured topic with parse/serialize
    Case-insensitive header accessors with protocol defaults

    │
    ▼
Field Vocabulary (fields.py)
    Canonical header names and defaults

---------------------------------------------------------------------

The protocol layer does not depend on the transport; the MQTT topic
conventions live in :mod:`ditto.hono` and the connection handling in
:mod:`ditto.client`.

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
