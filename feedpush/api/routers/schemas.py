from pydantic import BaseModel

from feedpush.articles.manager import NewsItem, SavedArticle


class NewsOut(BaseModel):
    idx: int
    title: str
    source: str
    url: str
    created_time: str
    diffMinutes: int
    diffHours: int | None = None
    diffDays: int | None = None
    count: int | None = None
    my_views: int | None = None


class SavedArticleOut(BaseModel):
    saved_idx: int
    article_type: str
    article_idx: int
    title: str
    url: str
    viewed: bool


def news_out(item: NewsItem) -> dict:
    """Serialized row; age units that were never reached are left out, not zeroed."""
    return NewsOut(
        idx=item.idx,
        title=item.title,
        source=item.source,
        url=item.url,
        created_time=item.created_time.isoformat(),
        count=item.count,
        my_views=item.my_views,
        **item.age.as_response_fields(),
    ).model_dump(exclude_none=True)


def saved_out(saved: SavedArticle) -> SavedArticleOut:
    return SavedArticleOut(
        saved_idx=saved.saved_idx,
        article_type=saved.article_type,
        article_idx=saved.article_idx,
        title=saved.title,
        url=saved.url,
        viewed=saved.viewed,
    )
