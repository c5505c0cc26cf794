"""Push provider capability: join device tokens to topics or remove them.

Calls are assumed idempotent on the provider side; nothing here retries or
deduplicates.
"""

import logging
from typing import Protocol

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError

from feedpush.errors import PushProviderError

logger = logging.getLogger(__name__)

# FCM topic management accepts at most 1000 tokens per request
MAX_TOKENS_PER_CALL = 1000


class PushProvider(Protocol):
    def subscribe_tokens_to_topic(self, topic: str, tokens: list[str]) -> None: ...

    def unsubscribe_tokens_from_topic(self, topic: str, tokens: list[str]) -> None: ...


class FirebasePushProvider:
    """PushProvider backed by Firebase Cloud Messaging topic management."""

    def __init__(self, credentials_path: str | None = None, app: firebase_admin.App | None = None):
        self._credentials_path = credentials_path
        self._app = app

    @property
    def app(self) -> firebase_admin.App:
        if self._app is None:
            try:
                self._app = firebase_admin.get_app()
            except ValueError:
                cred = credentials.Certificate(self._credentials_path) if self._credentials_path else None
                self._app = firebase_admin.initialize_app(cred)
        return self._app

    def subscribe_tokens_to_topic(self, topic: str, tokens: list[str]) -> None:
        self._manage(messaging.subscribe_to_topic, "subscribe", topic, tokens)

    def unsubscribe_tokens_from_topic(self, topic: str, tokens: list[str]) -> None:
        self._manage(messaging.unsubscribe_from_topic, "unsubscribe", topic, tokens)

    def _manage(self, call, action: str, topic: str, tokens: list[str]) -> None:
        for start in range(0, len(tokens), MAX_TOKENS_PER_CALL):
            batch = tokens[start : start + MAX_TOKENS_PER_CALL]
            try:
                response = call(batch, topic, app=self.app)
            except (FirebaseError, ValueError) as e:
                raise PushProviderError(topic, str(e)) from e

            # Per-token rejections (stale or malformed tokens) do not fail the call
            if response.failure_count:
                logger.warning(
                    "FCM %s to '%s': %d of %d tokens rejected (%s)",
                    action,
                    topic,
                    response.failure_count,
                    len(batch),
                    ", ".join(err.reason for err in response.errors),
                )
