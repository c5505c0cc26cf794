from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from feedpush.api.deps import get_preferences, get_synchronizer
from feedpush.notifications.sync import TopicSubscriptionSynchronizer
from feedpush.users.preferences import PreferenceAccessor, PushState

router = APIRouter()


class PushOnOff(BaseModel):
    push_on: bool


class CategoryOption(BaseModel):
    notification_option: int


class Consent(BaseModel):
    consent: bool


class TokenList(BaseModel):
    tokens: list[str]


@router.get("/{user_idx}/push")
def get_push(user_idx: int, preferences: PreferenceAccessor = Depends(get_preferences)):
    state = preferences.get_push_on_off(user_idx)
    if state is PushState.NOT_FOUND:
        raise HTTPException(status_code=404, detail="User not found")
    return {"push_on": state is PushState.ON}


@router.put("/{user_idx}/push")
def put_push(user_idx: int, body: PushOnOff, preferences: PreferenceAccessor = Depends(get_preferences)):
    if not preferences.set_push_on_off(user_idx, body.push_on):
        raise HTTPException(status_code=404, detail="User not found")
    return {"push_on": body.push_on}


@router.get("/{user_idx}/categories")
def get_categories(user_idx: int, preferences: PreferenceAccessor = Depends(get_preferences)):
    subs = preferences.get_category_subscriptions(user_idx)
    return {
        "categories": subs.categories,
        "topics": subs.topics,
        "categoryNotifications": subs.notification_options,
    }


@router.put("/{user_idx}/categories/{category_idx}")
def put_category_option(
    user_idx: int,
    category_idx: int,
    body: CategoryOption,
    preferences: PreferenceAccessor = Depends(get_preferences),
):
    if not preferences.set_category_notification_option(user_idx, category_idx, body.notification_option):
        raise HTTPException(status_code=404, detail="Subscription not found")
    return {"category_idx": category_idx, "notification_option": body.notification_option}


@router.put("/{user_idx}/marketing-consent")
def put_marketing_consent(user_idx: int, body: Consent, preferences: PreferenceAccessor = Depends(get_preferences)):
    result = preferences.set_marketing_consent(user_idx, body.consent)
    return {"consent": body.consent, "result": result.value}


@router.get("/{user_idx}/plan")
def get_plan(user_idx: int, preferences: PreferenceAccessor = Depends(get_preferences)):
    return {"plan": preferences.get_current_plan(user_idx)}


@router.post("/{user_idx}/tokens")
def subscribe_tokens(
    user_idx: int,
    body: TokenList,
    synchronizer: TopicSubscriptionSynchronizer = Depends(get_synchronizer),
):
    """Join freshly issued device tokens to the user's category topics."""
    result = synchronizer.apply_subscriptions(user_idx, body.tokens)
    return {"topics": result.topics, "skipped": result.skipped_reason}


@router.post("/{user_idx}/tokens/remove")
def unsubscribe_tokens(
    user_idx: int,
    body: TokenList,
    synchronizer: TopicSubscriptionSynchronizer = Depends(get_synchronizer),
):
    """Release device tokens (logout, token rotation) from the user's category topics."""
    result = synchronizer.remove_subscriptions(user_idx, body.tokens)
    return {"topics": result.topics, "skipped": result.skipped_reason}
