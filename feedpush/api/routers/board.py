from fastapi import APIRouter, Depends, HTTPException, Query

from feedpush.api.deps import get_preferences, get_ranker, get_session_factory, get_settings
from feedpush.api.routers.schemas import news_out, saved_out
from feedpush.articles.manager import list_saved_articles
from feedpush.articles.ranker import PopularityRanker
from feedpush.clock import datetime_string
from feedpush.users.preferences import PreferenceAccessor

router = APIRouter()

BOARD_SAVED_LIMIT = 3


def _require_user(preferences: PreferenceAccessor, uid: str) -> int:
    user_idx = preferences.find_user_idx(uid)
    if user_idx is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user_idx


@router.get("/meta")
def board_meta(
    uid: str,
    preferences: PreferenceAccessor = Depends(get_preferences),
    ranker: PopularityRanker = Depends(get_ranker),
    session_factory=Depends(get_session_factory),
    settings: dict = Depends(get_settings),
):
    """Everything the home board renders for one user, in one call."""
    user_idx = _require_user(preferences, uid)
    plan = preferences.get_current_plan(user_idx)
    popular = ranker.personalized_top(user_idx, limit=settings["popular_limit"])
    saved = list_saved_articles(user_idx, limit=BOARD_SAVED_LIMIT, session_factory=session_factory)
    return {
        "userPlan": plan,
        "popularNews": [news_out(item) for item in popular],
        "saved": [saved_out(s) for s in saved],
    }


@router.get("/popular")
def popular_news(
    uid: str,
    limit: int | None = Query(None, ge=1, le=100),
    preferences: PreferenceAccessor = Depends(get_preferences),
    ranker: PopularityRanker = Depends(get_ranker),
    settings: dict = Depends(get_settings),
):
    user_idx = _require_user(preferences, uid)
    items = ranker.personalized_top(user_idx, limit=limit or settings["popular_limit"])
    return {
        "since": datetime_string(ranker.window_start()),
        "popularNews": [news_out(item) for item in items],
    }


@router.get("/popular/global")
def popular_news_global(
    limit: int | None = Query(None, ge=1, le=100),
    ranker: PopularityRanker = Depends(get_ranker),
    settings: dict = Depends(get_settings),
):
    items = ranker.global_top(limit=limit or settings["popular_limit"])
    return {"popularNews": [news_out(item) for item in items]}
