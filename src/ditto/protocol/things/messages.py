""" Live messages of the things group: instant communication with the
    device behind a thing, always exchanged via the live channel.
"""

from __future__ import annotations

from typing import Union

from ...model.ids import NamespacedID
from ..envelope import Envelope
from ..topic import TopicChannel, TopicCriterion
from .builder import Builder, HeaderOption, path_feature


inbox = 'inbox'
outbox = 'outbox'

path_messages = '%s/%s/messages/%s'


class Message(Builder):
    """ Build a live message for the thing identified by *thing*. The
        message subject doubles as the topic action. By default the message
        addresses the thing itself; :func:`feature` narrows it to a single
        feature.
    """

    def __init__(self, thing: Union[NamespacedID, str]):
        Builder.__init__(self, thing, TopicChannel.LIVE, TopicCriterion.MESSAGES)

        self.subject = ''
        self.mailbox = ''
        self.addressed = ''


    def inbox(self, subject: str):
        """ The message is sent to the inbox of the target, that is, it is
            an incoming communication for the given *subject*.
        """

        self.topic.with_action(subject)
        self.subject = subject
        self.mailbox = inbox
        return self


    def outbox(self, subject: str):
        """ The message is sent from the outbox of the target, that is, it
            is an outgoing communication for the given *subject*.
        """

        self.topic.with_action(subject)
        self.subject = subject
        self.mailbox = outbox
        return self


    def feature(self, feature_id: str):
        self.addressed = path_feature % (feature_id,)
        return self


    def with_payload(self, payload):
        self.payload = payload
        return self


    def envelope(self, *options: HeaderOption) -> Envelope:
        path = path_messages % (self.addressed, self.mailbox, self.subject)
        return self._envelope(path, options)


# end of class Message


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
