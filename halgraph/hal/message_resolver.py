"""
Message Resolution

Title lookup for link relations. Message sources are injected as a
``resolve(codes) -> Optional[str]`` function or object; lookups must be pure
and must not block on network I/O.
"""

from typing import Dict, List, Optional, Union, Callable, Sequence

from ..model.relation_model import HalLinkRelation


class MessageResolver:
    """Resolves the first available message for an ordered list of codes."""

    def resolve(self, codes: Sequence[str]) -> Optional[str]:
        return None


class NoOpMessageResolver(MessageResolver):
    """Message resolver that never resolves a message."""
    pass


DEFAULTS_ONLY = NoOpMessageResolver()


class DictMessageResolver(MessageResolver):
    """Message resolver backed by a mapping of code to message."""

    def __init__(self, messages: Optional[Dict[str, str]] = None):
        self.messages = dict(messages or {})

    def resolve(self, codes: Sequence[str]) -> Optional[str]:
        for code in codes:
            if code in self.messages:
                return self.messages[code]
        return None


class CallableMessageResolver(MessageResolver):
    """Adapts a plain ``resolve(codes)`` function to the MessageResolver interface."""

    def __init__(self, function: Callable[[List[str]], Optional[str]]):
        self.function = function

    def resolve(self, codes: Sequence[str]) -> Optional[str]:
        return self.function(list(codes))


class RelationTitleResolver:
    """
    Resolves link titles for relations.

    For a relation ``R`` the codes ``_links.<R>.title`` and, for curied
    relations, ``_links.<local part of R>.title`` are tried in that order.
    An empty message counts as unresolved.
    """

    def __init__(self, resolver: Union[MessageResolver, Callable[[List[str]], Optional[str]], None] = None):
        if resolver is None:
            resolver = DEFAULTS_ONLY
        elif not isinstance(resolver, MessageResolver):
            resolver = CallableMessageResolver(resolver)
        self.resolver = resolver

    def resolve(self, relation: Union[str, HalLinkRelation]) -> Optional[str]:
        codes = HalLinkRelation.of(relation).codes()

        for code in codes:
            message = self.resolver.resolve([code])
            if message:
                return message

        return None
