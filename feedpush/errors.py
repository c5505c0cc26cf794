"""Exception types shared by the ranking, preference and push layers.

Not-found conditions are returned as sentinels (None, False,
PushState.NOT_FOUND) and never raised; these exceptions are reserved for
failures the caller cannot branch around.
"""


class FeedpushError(Exception):
    """Base class for feedpush failures."""


class DataUnavailableError(FeedpushError):
    """The relational store failed to answer a query or accept a write."""


class PushProviderError(FeedpushError):
    """A subscribe/unsubscribe call against the push provider failed."""

    def __init__(self, topic: str, message: str):
        super().__init__(f"Push provider failed for topic '{topic}': {message}")
        self.topic = topic
