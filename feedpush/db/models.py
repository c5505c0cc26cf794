from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship

ARTICLE_TYPES = ("news", "insight", "summary")

STATUS_HIDDEN = 0
STATUS_VISIBLE = 1


def _utcnow():
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    idx = Column(Integer, primary_key=True)
    uid = Column(String, unique=True, nullable=False)
    push_on = Column(Integer, default=1, nullable=False)
    created_time = Column(DateTime, default=_utcnow)

    subscriptions = relationship("UserCategorySubscription", back_populates="user", cascade="all, delete-orphan")


class NewsCategory(Base):
    __tablename__ = "news_categories"

    idx = Column(Integer, primary_key=True)
    category = Column(String, unique=True, nullable=False)
    fcm_topic = Column(String, default="")
    status = Column(Integer, default=STATUS_VISIBLE, nullable=False)


class UserCategorySubscription(Base):
    __tablename__ = "user_category_subscriptions"
    __table_args__ = (UniqueConstraint("user_idx", "category_idx"),)

    idx = Column(Integer, primary_key=True)
    user_idx = Column(Integer, ForeignKey("users.idx"), nullable=False)
    category_idx = Column(Integer, ForeignKey("news_categories.idx"), nullable=False)
    notification_option = Column(Integer, default=1, nullable=False)  # 0 = off

    user = relationship("User", back_populates="subscriptions")
    category = relationship("NewsCategory")


class MarketingConsent(Base):
    __tablename__ = "marketing_consent"

    idx = Column(Integer, primary_key=True)
    user_idx = Column(Integer, ForeignKey("users.idx"), unique=True, nullable=False)
    consent = Column(Integer, nullable=False)
    updated_time = Column(DateTime, default=_utcnow, onupdate=_utcnow)


class UserCurrentPlan(Base):
    __tablename__ = "user_current_plan"

    idx = Column(Integer, primary_key=True)
    user_idx = Column(Integer, ForeignKey("users.idx"), nullable=False)
    plan = Column(Integer, nullable=False)
    status = Column(Integer, default=STATUS_VISIBLE, nullable=False)


class UserViewLog(Base):
    __tablename__ = "user_view_logs"

    idx = Column(Integer, primary_key=True)
    user_idx = Column(Integer, ForeignKey("users.idx"), nullable=False, index=True)
    article_type = Column(String, nullable=False)  # news, insight, summary
    article_idx = Column(Integer, nullable=False)
    viewed_time = Column(DateTime, default=_utcnow, nullable=False, index=True)


class UserSavedArticle(Base):
    __tablename__ = "user_saved_articles"

    idx = Column(Integer, primary_key=True)
    user_idx = Column(Integer, ForeignKey("users.idx"), nullable=False, index=True)
    article_type = Column(String, nullable=False)
    article_idx = Column(Integer, nullable=False)
    status = Column(Integer, default=STATUS_VISIBLE, nullable=False)
    updated_time = Column(DateTime, default=_utcnow, onupdate=_utcnow)


class News(Base):
    __tablename__ = "news"

    idx = Column(Integer, primary_key=True)
    title = Column(String, default="")
    source = Column("from", String, default="")
    url = Column(String, default="")
    created_time = Column(DateTime, default=_utcnow, nullable=False)
    status = Column(Integer, default=STATUS_VISIBLE, nullable=False)


class NewsCategoryMap(Base):
    __tablename__ = "news_categories_map"

    idx = Column(Integer, primary_key=True)
    category_idx = Column(Integer, ForeignKey("news_categories.idx"), nullable=False)
    news_idx = Column(Integer, ForeignKey("news.idx"), nullable=False)


class Insight(Base):
    __tablename__ = "insights"

    idx = Column(Integer, primary_key=True)
    title = Column(String, default="")
    url = Column(String, default="")
    created_time = Column(DateTime, default=_utcnow)
    status = Column(Integer, default=STATUS_VISIBLE, nullable=False)


class MediaSummary(Base):
    __tablename__ = "media_summaries"

    idx = Column(Integer, primary_key=True)
    title = Column(String, default="")
    url = Column(String, default="")
    created_time = Column(DateTime, default=_utcnow)
    status = Column(Integer, default=STATUS_VISIBLE, nullable=False)
