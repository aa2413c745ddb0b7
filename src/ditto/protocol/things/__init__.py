""" Fluent builders for the commands, events, and live messages of the
    Ditto things group.
"""

from .commands import Command
from .events import Event
from .messages import Message


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
