""" The Ditto things model: identifiers, and the thing and feature
    entities that commands and events carry as their payload.
"""

from .ids import DefinitionID, NamespacedID
from .ids import InvalidDefinitionID, InvalidNamespacedID
from .thing import Feature, Thing


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
