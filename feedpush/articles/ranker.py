"""Trending news from view logs.

global_top:        all-time raw view count, desc, then article idx desc.
personalized_top:  distinct viewers inside the trailing window [now - window, now),
                   desc, then article idx desc; each row also carries the
                   requester's own view count (my_views), which never affects rank.

Every row gets its age attached only after the whole batch is read, so a
storage failure anywhere fails the batch instead of returning a partial list.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy import distinct, func

from feedpush.articles.manager import NewsItem, my_views_column
from feedpush.clock import utcnow
from feedpush.db.models import News, UserViewLog
from feedpush.db.session import SessionLocal, storage_session
from feedpush.errors import DataUnavailableError

logger = logging.getLogger(__name__)


class PopularityRanker:
    def __init__(self, session_factory=SessionLocal, clock=utcnow, window_days: int = 1):
        self._session_factory = session_factory
        self._clock = clock
        self._window = timedelta(days=window_days)

    def global_top(self, limit: int = 5) -> list[NewsItem]:
        now = self._clock()
        view_count = func.count(UserViewLog.idx).label("count")
        with storage_session(self._session_factory, "global_top") as session:
            counts = (
                session.query(UserViewLog.article_idx, view_count)
                .filter(UserViewLog.article_type == "news")
                .group_by(UserViewLog.article_idx)
                .order_by(view_count.desc(), UserViewLog.article_idx.desc())
                .limit(limit)
                .all()
            )

            # One lookup at a time, in rank order
            fetched = []
            for article_idx, count in counts:
                news = session.query(News).filter(News.idx == article_idx).first()
                if news is None:
                    logger.error("Trending article %s has view logs but no news row", article_idx)
                    raise DataUnavailableError(f"news {article_idx} missing while ranking")
                fetched.append((news, count))

            return [NewsItem.from_row(news, now, count=count) for news, count in fetched]

    def window_start(self, now: datetime | None = None) -> datetime:
        """Inclusive lower bound of the personalized window."""
        return (now or self._clock()) - self._window

    def personalized_top(self, user_idx: int, limit: int = 5) -> list[NewsItem]:
        now = self._clock()
        since = self.window_start(now)
        with storage_session(self._session_factory, "personalized_top") as session:
            window = (
                session.query(
                    UserViewLog.article_idx.label("article_idx"),
                    func.count(distinct(UserViewLog.user_idx)).label("viewers"),
                )
                .filter(
                    UserViewLog.article_type == "news",
                    UserViewLog.viewed_time >= since,
                    UserViewLog.viewed_time < now,
                )
                .group_by(UserViewLog.article_idx)
                .subquery()
            )

            rows = (
                session.query(News, window.c.viewers, my_views_column(user_idx).label("my_views"))
                .join(window, window.c.article_idx == News.idx)
                .order_by(window.c.viewers.desc(), News.idx.desc())
                .limit(limit)
                .all()
            )

            return [NewsItem.from_row(news, now, count=viewers, my_views=my_views or 0) for news, viewers, my_views in rows]
