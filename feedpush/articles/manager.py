"""Article catalog: categories, news lookup, read logs and saved articles."""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import and_, func, or_, select

from feedpush.articles.age import RelativeAge, age_of
from feedpush.clock import utcnow
from feedpush.db.models import (
    ARTICLE_TYPES,
    STATUS_HIDDEN,
    STATUS_VISIBLE,
    Insight,
    MediaSummary,
    News,
    NewsCategory,
    NewsCategoryMap,
    UserSavedArticle,
    UserViewLog,
)
from feedpush.db.session import SessionLocal, storage_session

logger = logging.getLogger(__name__)


@dataclass
class NewsItem:
    idx: int
    title: str
    source: str
    url: str
    created_time: datetime
    age: RelativeAge
    count: int | None = None
    my_views: int | None = None

    @classmethod
    def from_row(cls, news: News, now: datetime, **extra) -> "NewsItem":
        return cls(
            idx=news.idx,
            title=news.title or "",
            source=news.source or "",
            url=news.url or "",
            created_time=news.created_time,
            age=age_of(news.created_time, now),
            **extra,
        )


@dataclass
class CategoryListing:
    idxs: list[int] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)


@dataclass
class SavedArticle:
    saved_idx: int
    article_type: str
    article_idx: int
    title: str
    url: str
    viewed: bool


def _check_article_type(article_type: str) -> None:
    if article_type not in ARTICLE_TYPES:
        raise ValueError(f"article_type must be one of {ARTICLE_TYPES}, got '{article_type}'")


def my_views_column(user_idx: int):
    """Correlated count of the user's own views on the outer News row."""
    return (
        select(func.count(UserViewLog.idx))
        .where(
            UserViewLog.user_idx == user_idx,
            UserViewLog.article_type == "news",
            UserViewLog.article_idx == News.idx,
        )
        .correlate(News)
        .scalar_subquery()
    )


# --- Categories ---


def find_category_idx(name: str, *, session_factory=SessionLocal) -> int | None:
    with storage_session(session_factory, "find_category_idx") as session:
        category = session.query(NewsCategory).filter(NewsCategory.category == name).first()
        return category.idx if category else None


def ensure_category(name: str, fcm_topic: str = "", *, session_factory=SessionLocal) -> int:
    """Return the idx of the named category, creating it if absent."""
    with storage_session(session_factory, "ensure_category") as session:
        category = session.query(NewsCategory).filter(NewsCategory.category == name).first()
        if category:
            return category.idx
        category = NewsCategory(category=name, fcm_topic=fcm_topic)
        session.add(category)
        session.commit()
        logger.info("Created category '%s' (idx=%d)", name, category.idx)
        return category.idx


def list_categories(
    only_visible: bool = True, names: list[str] | tuple = (), *, session_factory=SessionLocal
) -> CategoryListing:
    with storage_session(session_factory, "list_categories") as session:
        query = session.query(NewsCategory)
        if only_visible:
            query = query.filter(NewsCategory.status == STATUS_VISIBLE)
        if names:
            query = query.filter(NewsCategory.category.in_(list(names)))
        categories = query.order_by(NewsCategory.idx).all()

        listing = CategoryListing()
        for c in categories:
            if not c.category:
                continue
            listing.idxs.append(c.idx)
            listing.categories.append(c.category)
            listing.topics.append(c.fcm_topic or "")
        return listing


# --- News ---


def get_news(news_idx: int, *, now: datetime | None = None, session_factory=SessionLocal) -> NewsItem | None:
    now = now or utcnow()
    with storage_session(session_factory, "get_news") as session:
        news = session.query(News).filter(News.idx == news_idx).first()
        if news is None:
            return None
        return NewsItem.from_row(news, now)


def map_news_to_category(category_idx: int, news_idx: int, *, session_factory=SessionLocal) -> None:
    with storage_session(session_factory, "map_news_to_category") as session:
        session.add(NewsCategoryMap(category_idx=category_idx, news_idx=news_idx))
        session.commit()


def news_in_category(
    category_idx: int,
    limit: int,
    user_idx: int | None = None,
    *,
    now: datetime | None = None,
    session_factory=SessionLocal,
) -> list[NewsItem]:
    """Newest news in a category; with a user, each row carries my_views."""
    now = now or utcnow()
    with storage_session(session_factory, "news_in_category") as session:
        columns = [News]
        if user_idx is not None:
            columns.append(my_views_column(user_idx).label("my_views"))
        rows = (
            session.query(*columns)
            .join(NewsCategoryMap, NewsCategoryMap.news_idx == News.idx)
            .filter(NewsCategoryMap.category_idx == category_idx)
            .order_by(News.idx.desc())
            .limit(limit)
            .all()
        )

        if user_idx is None:
            return [NewsItem.from_row(news, now) for news in rows]
        return [NewsItem.from_row(news, now, my_views=my_views or 0) for news, my_views in rows]


# --- Read log ---


def record_view(user_idx: int, article_type: str, article_idx: int, *, session_factory=SessionLocal) -> int:
    """Append a view-log entry and return its idx."""
    _check_article_type(article_type)
    with storage_session(session_factory, "record_view") as session:
        log = UserViewLog(user_idx=user_idx, article_type=article_type, article_idx=article_idx)
        session.add(log)
        session.commit()
        return log.idx


# --- Saved articles ---


def _saved_row(session, user_idx: int, article_type: str, article_idx: int) -> UserSavedArticle | None:
    return (
        session.query(UserSavedArticle)
        .filter(
            UserSavedArticle.user_idx == user_idx,
            UserSavedArticle.article_type == article_type,
            UserSavedArticle.article_idx == article_idx,
        )
        .first()
    )


def is_article_saved(user_idx: int, article_type: str, article_idx: int, *, session_factory=SessionLocal) -> bool:
    with storage_session(session_factory, "is_article_saved") as session:
        row = _saved_row(session, user_idx, article_type, article_idx)
        return row is not None and row.status == STATUS_VISIBLE


def save_article(user_idx: int, article_type: str, article_idx: int, *, session_factory=SessionLocal) -> None:
    _check_article_type(article_type)
    with storage_session(session_factory, "save_article") as session:
        row = _saved_row(session, user_idx, article_type, article_idx)
        if row is None:
            session.add(UserSavedArticle(user_idx=user_idx, article_type=article_type, article_idx=article_idx))
        elif row.status == STATUS_VISIBLE:
            return
        else:
            row.status = STATUS_VISIBLE
        session.commit()


def unsave_article(user_idx: int, article_type: str, article_idx: int, *, session_factory=SessionLocal) -> bool:
    """Returns False when the article was never saved."""
    _check_article_type(article_type)
    with storage_session(session_factory, "unsave_article") as session:
        row = _saved_row(session, user_idx, article_type, article_idx)
        if row is None:
            return False
        row.status = STATUS_HIDDEN
        session.commit()
        return True


def list_saved_articles(
    user_idx: int, limit: int | None = None, offset: int = 0, *, session_factory=SessionLocal
) -> list[SavedArticle]:
    """Saved news/insights/summaries whose target is still visible, most recently saved first."""
    viewed = (
        select(UserViewLog.idx)
        .where(
            UserViewLog.user_idx == UserSavedArticle.user_idx,
            UserViewLog.article_type == UserSavedArticle.article_type,
            UserViewLog.article_idx == UserSavedArticle.article_idx,
        )
        .exists()
    )

    with storage_session(session_factory, "list_saved_articles") as session:
        query = (
            session.query(
                UserSavedArticle,
                func.coalesce(News.title, Insight.title, MediaSummary.title).label("title"),
                func.coalesce(News.url, Insight.url, MediaSummary.url).label("url"),
                viewed.label("viewed"),
            )
            .outerjoin(
                News,
                and_(UserSavedArticle.article_type == "news", UserSavedArticle.article_idx == News.idx),
            )
            .outerjoin(
                Insight,
                and_(UserSavedArticle.article_type == "insight", UserSavedArticle.article_idx == Insight.idx),
            )
            .outerjoin(
                MediaSummary,
                and_(UserSavedArticle.article_type == "summary", UserSavedArticle.article_idx == MediaSummary.idx),
            )
            .filter(
                UserSavedArticle.user_idx == user_idx,
                UserSavedArticle.status == STATUS_VISIBLE,
                or_(
                    News.status == STATUS_VISIBLE,
                    Insight.status == STATUS_VISIBLE,
                    MediaSummary.status == STATUS_VISIBLE,
                ),
            )
            .order_by(UserSavedArticle.updated_time.desc(), UserSavedArticle.idx.desc())
        )
        if limit is not None and limit > 0:
            query = query.limit(limit)
        if offset > 0:
            query = query.offset(offset)

        return [
            SavedArticle(
                saved_idx=saved.idx,
                article_type=saved.article_type,
                article_idx=saved.article_idx,
                title=title or "",
                url=url or "",
                viewed=bool(was_viewed),
            )
            for saved, title, url, was_viewed in query.all()
        ]
