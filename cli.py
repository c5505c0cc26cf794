import logging

import click

from feedpush.db.session import init_db


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log at DEBUG level")
def cli(verbose):
    """Content-feed backend: trending news and push topic sync."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()


# --- Categories ---


@cli.group()
def categories():
    """Manage news categories."""
    pass


@categories.command("add")
@click.argument("name")
@click.option("--topic", "-t", default="", help="FCM topic for this category")
def categories_add(name, topic):
    """Add a category (no-op if the name already exists)."""
    from feedpush.articles.manager import ensure_category

    idx = ensure_category(name, topic)
    click.echo(f"Category #{idx}: {name}")


@categories.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include hidden categories")
def categories_list(show_all):
    """List categories and their push topics."""
    from feedpush.articles.manager import list_categories

    listing = list_categories(only_visible=not show_all)
    if not listing.idxs:
        click.echo("No categories found. Add one with: python cli.py categories add <name>")
        return
    for idx, name, topic in zip(listing.idxs, listing.categories, listing.topics):
        click.echo(f"  #{idx} {name}  topic: {topic or '-'}")


# --- Trending ---


@cli.command()
@click.option("--user", "user_idx", type=int, default=None, help="Personalized 24h ranking for this user")
@click.option("--limit", "-l", type=int, default=5, help="Number of articles")
def popular(user_idx, limit):
    """Show trending news."""
    from feedpush.articles.ranker import PopularityRanker
    from feedpush.errors import DataUnavailableError

    ranker = PopularityRanker()
    try:
        items = ranker.global_top(limit) if user_idx is None else ranker.personalized_top(user_idx, limit)
    except DataUnavailableError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    if not items:
        click.echo("No views recorded yet.")
        return
    for rank, item in enumerate(items, start=1):
        age = " ".join(f"{value}{unit[0]}" for unit, value in reversed(item.age.as_dict().items()))
        mine = f"  (you: {item.my_views})" if item.my_views is not None else ""
        click.echo(f"  {rank}. #{item.idx} {item.title}  [{item.count} views, {age} ago]{mine}")


# --- Push ---


@cli.group()
def push():
    """Push preferences and topic subscriptions."""
    pass


@push.command("on")
@click.argument("user_idx", type=int)
def push_on(user_idx):
    """Turn push on for a user."""
    _set_push(user_idx, True)


@push.command("off")
@click.argument("user_idx", type=int)
def push_off(user_idx):
    """Turn push off for a user."""
    _set_push(user_idx, False)


def _set_push(user_idx, value):
    from feedpush.users.preferences import PreferenceAccessor

    if not PreferenceAccessor().set_push_on_off(user_idx, value):
        click.echo(f"User #{user_idx} not found", err=True)
        raise SystemExit(1)
    click.echo(f"Push {'on' if value else 'off'} for user #{user_idx}")


def _synchronizer():
    from feedpush.config import load_settings
    from feedpush.notifications.provider import FirebasePushProvider
    from feedpush.notifications.sync import TopicSubscriptionSynchronizer
    from feedpush.users.preferences import PreferenceAccessor

    provider = FirebasePushProvider(credentials_path=load_settings()["firebase_credentials"])
    return TopicSubscriptionSynchronizer(PreferenceAccessor(), provider)


@push.command("subscribe")
@click.argument("user_idx", type=int)
@click.argument("tokens", nargs=-1, required=True)
def push_subscribe(user_idx, tokens):
    """Join device tokens to the user's enabled category topics."""
    from feedpush.errors import FeedpushError

    try:
        result = _synchronizer().apply_subscriptions(user_idx, list(tokens))
    except FeedpushError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    if result.skipped_reason:
        click.echo(f"Skipped: {result.skipped_reason}")
    else:
        click.echo(f"Subscribed to {len(result.topics)} topics: {', '.join(result.topics) or '-'}")


@push.command("unsubscribe")
@click.argument("user_idx", type=int)
@click.argument("tokens", nargs=-1, required=True)
def push_unsubscribe(user_idx, tokens):
    """Release device tokens from the user's enabled category topics."""
    from feedpush.errors import FeedpushError

    try:
        result = _synchronizer().remove_subscriptions(user_idx, list(tokens))
    except FeedpushError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Unsubscribed from {len(result.topics)} topics: {', '.join(result.topics) or '-'}")


# --- API ---


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", "-p", type=int, default=8000, help="Port to bind to")
def api(host, port):
    """Start the FastAPI server."""
    import uvicorn

    from feedpush.api.main import app

    click.echo(f"Starting API server at http://{host}:{port}")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    cli()
