""" Commands of the things group: requests to create, modify, merge,
    retrieve, or delete a thing or part of a thing.
"""

from __future__ import annotations

from typing import Union

from ...model.ids import NamespacedID
from ...model.thing import Thing
from ..topic import TopicAction, TopicChannel, TopicCriterion
from .builder import Addressed


class Command(Addressed):
    """ Build a command addressed to the thing identified by *thing*. The
        command defaults to the twin channel and addresses the whole thing;
        only one action, one channel, and one path can be configured, and
        the last call of each kind applies. Example::

            envelope = Command('org.example:lamp').twin() \\
                            .feature_property('light', 'on').modify(True) \\
                            .envelope(with_response_required(False))
    """

    def __init__(self, thing: Union[NamespacedID, str]):
        Addressed.__init__(self, thing, TopicChannel.TWIN, TopicCriterion.COMMANDS)


    def create(self, thing: Thing):
        self.topic.with_action(TopicAction.CREATE)
        self.payload = thing
        return self


    def modify(self, payload):
        """ The *payload* is the new value for the addressed part of the
            thing.
        """

        self.topic.with_action(TopicAction.MODIFY)
        self.payload = payload
        return self


    def merge(self, payload):
        """ The *payload* is a JSON merge patch applied to the addressed
            part of the thing.
        """

        self.topic.with_action(TopicAction.MERGE)
        self.payload = payload
        return self


    def retrieve(self, *thing_ids: NamespacedID):
        """ Retrieve the addressed part of the thing. If any *thing_ids* are
            provided the request is for those things instead; combine with
            the topic placeholder (for example ``_:_``) to retrieve multiple
            things at once. With no *thing_ids* the payload is left unset.
        """

        self.topic.with_action(TopicAction.RETRIEVE)

        if thing_ids:
            self.payload = {'thingIds': [str(one) for one in thing_ids]}

        return self


    def delete(self):
        self.topic.with_action(TopicAction.DELETE)
        return self


# end of class Command


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
