"""Per-user push and marketing preferences.

"User not found" and "no rows affected" come back as values the caller can
branch on (PushState.NOT_FOUND, None, False). Storage failures surface as
DataUnavailableError from storage_session.
"""

import enum
import logging
from dataclasses import dataclass, field

from feedpush.db.models import (
    STATUS_VISIBLE,
    MarketingConsent,
    NewsCategory,
    User,
    UserCategorySubscription,
    UserCurrentPlan,
)
from feedpush.db.session import SessionLocal, storage_session

logger = logging.getLogger(__name__)


class PushState(enum.Enum):
    ON = "on"
    OFF = "off"
    NOT_FOUND = "not_found"


class ConsentWrite(enum.Enum):
    INSERTED = "inserted"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass
class CategorySubscriptions:
    """Parallel lists: index i of each list describes the same category."""

    categories: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    notification_options: list[int] = field(default_factory=list)

    def enabled_topics(self) -> list[str]:
        """Topics whose notification option is on, in stored order."""
        return [topic for topic, option in zip(self.topics, self.notification_options) if option != 0]


class PreferenceAccessor:
    def __init__(self, session_factory=SessionLocal):
        self._session_factory = session_factory

    def find_user_idx(self, uid: str) -> int | None:
        with storage_session(self._session_factory, "find_user_idx") as session:
            user = session.query(User).filter(User.uid == uid).first()
            return user.idx if user else None

    def get_push_on_off(self, user_idx: int) -> PushState:
        with storage_session(self._session_factory, "get_push_on_off") as session:
            user = session.query(User).filter(User.idx == user_idx).first()
            if user is None:
                logger.warning("No user found for idx=%s", user_idx)
                return PushState.NOT_FOUND
            return PushState.ON if user.push_on else PushState.OFF

    def set_push_on_off(self, user_idx: int, value: bool) -> bool:
        """Returns False when no user row was affected."""
        with storage_session(self._session_factory, "set_push_on_off") as session:
            affected = session.query(User).filter(User.idx == user_idx).update({User.push_on: 1 if value else 0})
            session.commit()
            return affected > 0

    def get_category_subscriptions(self, user_idx: int) -> CategorySubscriptions:
        """Visible categories the user has a subscription row for.

        Rows missing a category name, topic or option are dropped whole so
        the three lists stay aligned.
        """
        with storage_session(self._session_factory, "get_category_subscriptions") as session:
            rows = (
                session.query(
                    NewsCategory.category,
                    NewsCategory.fcm_topic,
                    UserCategorySubscription.notification_option,
                )
                .select_from(UserCategorySubscription)
                .join(NewsCategory, NewsCategory.idx == UserCategorySubscription.category_idx)
                .filter(
                    UserCategorySubscription.user_idx == user_idx,
                    NewsCategory.status == STATUS_VISIBLE,
                )
                .order_by(NewsCategory.idx)
                .all()
            )

        result = CategorySubscriptions()
        for category, topic, option in rows:
            if not category or not topic or option is None:
                continue
            result.categories.append(category)
            result.topics.append(topic)
            result.notification_options.append(option)
        return result

    def set_category_notification_option(self, user_idx: int, category_idx: int, option: int) -> bool:
        """Returns False when the user has no subscription row for the category."""
        with storage_session(self._session_factory, "set_category_notification_option") as session:
            affected = (
                session.query(UserCategorySubscription)
                .filter(
                    UserCategorySubscription.user_idx == user_idx,
                    UserCategorySubscription.category_idx == category_idx,
                )
                .update({UserCategorySubscription.notification_option: option})
            )
            session.commit()
            return affected > 0

    def get_current_plan(self, user_idx: int) -> int | None:
        """Active plan id, or None when the user has no active plan."""
        with storage_session(self._session_factory, "get_current_plan") as session:
            row = (
                session.query(UserCurrentPlan)
                .filter(UserCurrentPlan.user_idx == user_idx, UserCurrentPlan.status == STATUS_VISIBLE)
                .first()
            )
            return row.plan if row else None

    def set_marketing_consent(self, user_idx: int, consent: bool) -> ConsentWrite:
        """Upsert consent; an unchanged value issues no write at all."""
        consent_int = 1 if consent else 0
        with storage_session(self._session_factory, "set_marketing_consent") as session:
            row = session.query(MarketingConsent).filter(MarketingConsent.user_idx == user_idx).first()
            if row is None:
                session.add(MarketingConsent(user_idx=user_idx, consent=consent_int))
                session.commit()
                return ConsentWrite.INSERTED
            if row.consent == consent_int:
                return ConsentWrite.UNCHANGED
            row.consent = consent_int
            session.commit()
            return ConsentWrite.UPDATED
