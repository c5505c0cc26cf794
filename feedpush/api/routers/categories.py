from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from feedpush.api.deps import get_session_factory
from feedpush.articles import manager

router = APIRouter()


class CategoryCreate(BaseModel):
    category: str
    fcm_topic: str = ""


@router.get("")
def list_categories(
    only_visible: bool = True,
    names: list[str] = Query([], description="Restrict to these category names"),
    session_factory=Depends(get_session_factory),
):
    listing = manager.list_categories(only_visible, names, session_factory=session_factory)
    return {"idxs": listing.idxs, "categories": listing.categories, "topics": listing.topics}


@router.post("", status_code=201)
def create_category(body: CategoryCreate, session_factory=Depends(get_session_factory)):
    """Find-or-create by name; an existing category keeps its topic."""
    idx = manager.ensure_category(body.category, body.fcm_topic, session_factory=session_factory)
    return {"idx": idx, "category": body.category}
