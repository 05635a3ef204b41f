"""API — pure JSON REST API.

CRUD for a simple "items" resource. Demonstrates switchyard for API-only
services: dict/list returns become JSON, ``:param`` path segments,
``ctx.req.payload()`` for POST/PUT bodies, a global handler that loads
shared state, a catch-all 404, and CORS for cross-origin consumers.

Run under any ASGI server:
    cd examples/api && uvicorn app:router
"""

import threading
from dataclasses import dataclass

from switchyard import Context, Router

router = Router().cors(allow_headers="Content-Type")


# ---------------------------------------------------------------------------
# In-memory storage
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Item:
    id: int
    title: str
    done: bool


_items: dict[int, Item] = {}
_next_id = 1
_lock = threading.Lock()


def _get_next_id() -> int:
    global _next_id
    with _lock:
        n = _next_id
        _next_id += 1
        return n


def _to_dict(item: Item) -> dict:
    return {"id": item.id, "title": item.title, "done": item.done}


def _not_found() -> tuple[dict, int]:
    return {"error": "Not found", "status": 404}, 404


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def load_item(ctx: Context):
    """Resolve ``:item_id`` into ``ctx.state["item"]`` or stop with a 404."""
    raw_id = ctx.params.get("item_id", "")
    if not raw_id.isdigit():
        return _not_found()
    with _lock:
        item = _items.get(int(raw_id))
    if item is None:
        return _not_found()
    ctx.state["item"] = item
    return None


async def list_items(ctx: Context):
    """List items with optional limit and offset."""
    limit = min(max(ctx.query.get_int("limit", default=50) or 50, 1), 100)
    offset = max(ctx.query.get_int("offset", default=0) or 0, 0)

    with _lock:
        all_items = sorted(_items.values(), key=lambda x: x.id)
    page = all_items[offset : offset + limit]

    return {
        "data": [_to_dict(i) for i in page],
        "meta": {"limit": limit, "offset": offset, "total": len(all_items)},
    }


def get_item(ctx: Context):
    return {"data": _to_dict(ctx.state["item"])}


async def create_item(ctx: Context):
    """Create a new item."""
    body = await ctx.req.payload()
    title = str(body.get("title", "")).strip() if isinstance(body, dict) else ""
    if not title:
        return {"error": "title is required", "status": 400}, 400

    item = Item(id=_get_next_id(), title=title, done=False)
    with _lock:
        _items[item.id] = item

    return {"data": _to_dict(item)}, 201


async def update_item(ctx: Context):
    """Update an existing item."""
    item = ctx.state["item"]
    body = await ctx.req.payload()
    if not isinstance(body, dict):
        body = {}

    raw_title = body.get("title")
    raw_done = body.get("done")
    title = str(raw_title).strip() if raw_title is not None else item.title
    done = bool(raw_done) if raw_done is not None else item.done

    updated = Item(id=item.id, title=title, done=done)
    with _lock:
        _items[item.id] = updated

    return {"data": _to_dict(updated)}


def delete_item(ctx: Context):
    item = ctx.state["item"]
    with _lock:
        _items.pop(item.id, None)
    return {"data": _to_dict(item)}


def fallback(ctx: Context):
    """Global 404 for anything unrouted."""
    return _not_found()


router.get("/api/items", list_items)
router.post("/api/items", create_item)
router.get("/api/items/:item_id", load_item, get_item)
router.put("/api/items/:item_id", load_item, update_item)
router.delete("/api/items/:item_id", load_item, delete_item)
router.any("*", fallback)
