from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from feedpush.api.deps import get_session_factory
from feedpush.api.routers.schemas import news_out, saved_out
from feedpush.articles import manager

router = APIRouter()

ArticleType = Literal["news", "insight", "summary"]


class ArticleRef(BaseModel):
    user_idx: int
    article_type: ArticleType
    article_idx: int


@router.post("/views", status_code=201)
def create_view(body: ArticleRef, session_factory=Depends(get_session_factory)):
    """Record that a user read an article."""
    idx = manager.record_view(body.user_idx, body.article_type, body.article_idx, session_factory=session_factory)
    return {"idx": idx}


@router.get("/news/{news_idx}")
def get_news(news_idx: int, session_factory=Depends(get_session_factory)):
    item = manager.get_news(news_idx, session_factory=session_factory)
    if item is None:
        raise HTTPException(status_code=404, detail="News not found")
    return news_out(item)


@router.get("/categories/{category_idx}/news")
def list_category_news(
    category_idx: int,
    limit: int = Query(20, ge=1, le=100),
    user_idx: int | None = Query(None, description="Annotate rows with this user's view count"),
    session_factory=Depends(get_session_factory),
):
    items = manager.news_in_category(category_idx, limit, user_idx, session_factory=session_factory)
    return [news_out(item) for item in items]


@router.get("/saved")
def list_saved(
    user_idx: int,
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session_factory=Depends(get_session_factory),
):
    saved = manager.list_saved_articles(user_idx, limit, offset, session_factory=session_factory)
    return [saved_out(s) for s in saved]


@router.get("/saved/check")
def check_saved(
    user_idx: int,
    article_type: ArticleType,
    article_idx: int,
    session_factory=Depends(get_session_factory),
):
    saved = manager.is_article_saved(user_idx, article_type, article_idx, session_factory=session_factory)
    return {"saved": saved}


@router.post("/saved", status_code=201)
def save(body: ArticleRef, session_factory=Depends(get_session_factory)):
    manager.save_article(body.user_idx, body.article_type, body.article_idx, session_factory=session_factory)
    return {"saved": True}


@router.delete("/saved", status_code=204)
def unsave(
    user_idx: int,
    article_type: ArticleType,
    article_idx: int,
    session_factory=Depends(get_session_factory),
):
    if not manager.unsave_article(user_idx, article_type, article_idx, session_factory=session_factory):
        raise HTTPException(status_code=404, detail="Saved article not found")
