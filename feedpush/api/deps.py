"""Wiring for route handlers. Tests swap these through app.dependency_overrides."""

from functools import lru_cache

from fastapi import Depends

from feedpush.articles.ranker import PopularityRanker
from feedpush.config import load_settings
from feedpush.db.session import SessionLocal
from feedpush.notifications.provider import FirebasePushProvider, PushProvider
from feedpush.notifications.sync import TopicSubscriptionSynchronizer
from feedpush.users.preferences import PreferenceAccessor


@lru_cache
def get_settings() -> dict:
    return load_settings()


def get_session_factory():
    return SessionLocal


@lru_cache
def _firebase_provider() -> FirebasePushProvider:
    return FirebasePushProvider(credentials_path=get_settings()["firebase_credentials"])


def get_push_provider() -> PushProvider:
    return _firebase_provider()


def get_preferences(session_factory=Depends(get_session_factory)) -> PreferenceAccessor:
    return PreferenceAccessor(session_factory)


def get_ranker(
    session_factory=Depends(get_session_factory),
    settings: dict = Depends(get_settings),
) -> PopularityRanker:
    return PopularityRanker(session_factory, window_days=settings["popular_window_days"])


def get_synchronizer(
    preferences: PreferenceAccessor = Depends(get_preferences),
    provider: PushProvider = Depends(get_push_provider),
) -> TopicSubscriptionSynchronizer:
    return TopicSubscriptionSynchronizer(preferences, provider)
