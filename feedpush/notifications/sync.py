"""Keep a user's device tokens joined to the topics of their categories.

Provider calls are issued one category at a time, in stored category order,
and the first failure aborts the rest. Categories handled before the failure
keep their new state; there is no rollback. Fanning the calls out
concurrently would make that partial state non-deterministic, so the loop
stays sequential.
"""

import logging
from dataclasses import dataclass, field

from feedpush.errors import PushProviderError
from feedpush.notifications.provider import PushProvider
from feedpush.users.preferences import PreferenceAccessor, PushState

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    topics: list[str] = field(default_factory=list)
    skipped_reason: str | None = None


class TopicSubscriptionSynchronizer:
    def __init__(self, preferences: PreferenceAccessor, provider: PushProvider):
        self._preferences = preferences
        self._provider = provider

    def apply_subscriptions(self, user_idx: int, tokens: list[str]) -> SyncResult:
        """Subscribe tokens to every enabled category topic, if push is on."""
        if not tokens:
            return SyncResult(skipped_reason="no_tokens")

        push_state = self._preferences.get_push_on_off(user_idx)
        if push_state is not PushState.ON:
            logger.info("Skipping topic subscribe for user %s: push %s", user_idx, push_state.value)
            return SyncResult(skipped_reason=f"push_{push_state.value}")

        subscriptions = self._preferences.get_category_subscriptions(user_idx)
        return self._run(user_idx, subscriptions.enabled_topics(), tokens, self._provider.subscribe_tokens_to_topic)

    def remove_subscriptions(self, user_idx: int, tokens: list[str]) -> SyncResult:
        """Release tokens from every enabled category topic.

        Runs regardless of the push switch: a logged-out or invalidated token
        must leave topics it may have joined while push was on.
        """
        if not tokens:
            return SyncResult(skipped_reason="no_tokens")

        subscriptions = self._preferences.get_category_subscriptions(user_idx)
        return self._run(
            user_idx, subscriptions.enabled_topics(), tokens, self._provider.unsubscribe_tokens_from_topic
        )

    def _run(self, user_idx: int, topics: list[str], tokens: list[str], call) -> SyncResult:
        result = SyncResult()
        for topic in topics:
            try:
                call(topic, tokens)
            except PushProviderError:
                logger.warning(
                    "Topic sync for user %s aborted at '%s' after %d of %d topics",
                    user_idx,
                    topic,
                    len(result.topics),
                    len(topics),
                )
                raise
            result.topics.append(topic)

        logger.info("Topic sync for user %s: %d topics, %d tokens", user_idx, len(result.topics), len(tokens))
        return result
