"""Protocol constants.

Keep these in one place to avoid stringly-typed header handling.
"""

CONTENT_TYPE_DITTO = 'application/vnd.eclipse.ditto+json'

# Canonical header names.

CORRELATION_ID = 'correlation-id'
RESPONSE_REQUIRED = 'response-required'
CHANNEL = 'ditto-channel'
DRY_RUN = 'ditto-dry-run'
ORIGIN = 'origin'
ORIGINATOR = 'ditto-originator'
ETAG = 'etag'
IF_MATCH = 'if-match'
IF_NONE_MATCH = 'if-none-match'
REPLY_TARGET = 'ditto-reply-target'
REPLY_TO = 'reply-to'
TIMEOUT = 'timeout'
VERSION = 'version'
CONTENT_TYPE = 'content-type'

# Values assumed when a header is absent.

DEFAULT_TIMEOUT = 60.0
DEFAULT_RESPONSE_REQUIRED = True
DEFAULT_VERSION = 2
DEFAULT_REPLY_TARGET = 0

# Upper bound, in seconds, for a valid 'timeout' header.

MAXIMUM_TIMEOUT = 60.0
