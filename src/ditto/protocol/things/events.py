""" Events of the things group: notifications that a thing, or part of a
    thing, has been created, modified, merged, or deleted.
"""

from __future__ import annotations

from typing import Union

from ...model.ids import NamespacedID
from ...model.thing import Thing
from ..topic import TopicAction, TopicChannel, TopicCriterion
from .builder import Addressed


class Event(Addressed):
    """ Build an event for the thing identified by *thing*. As with
        :class:`Command`, the event defaults to the twin channel and the
        whole thing, and the last call of each kind applies.
    """

    def __init__(self, thing: Union[NamespacedID, str]):
        Addressed.__init__(self, thing, TopicChannel.TWIN, TopicCriterion.EVENTS)


    def created(self, thing: Thing):
        self.topic.with_action(TopicAction.CREATED)
        self.payload = thing
        return self


    def modified(self, payload):
        self.topic.with_action(TopicAction.MODIFIED)
        self.payload = payload
        return self


    def merged(self, payload):
        self.topic.with_action(TopicAction.MERGED)
        self.payload = payload
        return self


    def deleted(self):
        self.topic.with_action(TopicAction.DELETED)
        return self


# end of class Event


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
