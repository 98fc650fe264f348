"""
Music Vote Manager - In-Memory Store

Users and music items live in module-level lists for the lifetime of the
process.  The public functions mirror a small repository API (find, insert,
update, delete by id) and always return copies of the stored dicts so that
callers cannot change repository state behind its back.

Music ids come from a counter that only moves forward: deleting an item
never frees its id for a later insert.
"""

import copy
from typing import Any, Dict, List, Optional

from loguru import logger

# ---------------------------------------------------------------------------
# Demo data
# ---------------------------------------------------------------------------
DEMO_USERS: List[Dict[str, Any]] = [
    {"id": 1, "username": "user1", "password": "password123"},
    {"id": 2, "username": "user2", "password": "password123"},
]

DEMO_MUSIC: List[Dict[str, Any]] = [
    {"id": 1, "title": "Sample Song 1", "artist": "Artist A", "votes": 5},
    {"id": 2, "title": "Sample Song 2", "artist": "Artist B", "votes": 3},
    {"id": 3, "title": "Sample Song 3", "artist": "Artist C", "votes": 7},
]

_users: List[Dict[str, Any]] = []
_music: List[Dict[str, Any]] = []
_next_music_id = 1


def reset_demo_data() -> None:
    """Replace all users and music with a fresh copy of the demo data."""
    global _users, _music, _next_music_id

    _users = copy.deepcopy(DEMO_USERS)
    _music = copy.deepcopy(DEMO_MUSIC)
    _next_music_id = max((m["id"] for m in _music), default=0) + 1
    logger.info(
        "🔄 Demo data loaded ({} users, {} music items)", len(_users), len(_music)
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _find_music(music_id: int) -> Optional[Dict[str, Any]]:
    for item in _music:
        if item["id"] == music_id:
            return item
    return None


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
def get_user_by_username(username: str) -> Optional[Dict[str, Any]]:
    """Fetch a user by exact (case-sensitive) username."""
    for user in _users:
        if user["username"] == username:
            return dict(user)
    return None


def get_user_by_id(user_id: int) -> Optional[Dict[str, Any]]:
    """Fetch a user by id."""
    for user in _users:
        if user["id"] == user_id:
            return dict(user)
    return None


def list_usernames() -> List[str]:
    return [u["username"] for u in _users]


def count_users() -> int:
    return len(_users)


# ---------------------------------------------------------------------------
# Music
# ---------------------------------------------------------------------------
def get_music(sort_by_votes: bool = False) -> List[Dict[str, Any]]:
    """
    Return every music item.

    Items come back in insertion order, or by votes (highest first) when
    *sort_by_votes* is set.  The sort is stable, so ties keep insertion order.
    """
    items = [dict(m) for m in _music]
    if sort_by_votes:
        items.sort(key=lambda m: m["votes"], reverse=True)
    return items


def get_music_by_id(music_id: int) -> Optional[Dict[str, Any]]:
    """Fetch a single music item by its id."""
    item = _find_music(music_id)
    return dict(item) if item else None


def count_music() -> int:
    return len(_music)


def insert_music(title: str, artist: str) -> Dict[str, Any]:
    """Add a music item with zero votes and return it."""
    global _next_music_id

    item = {"id": _next_music_id, "title": title, "artist": artist, "votes": 0}
    _next_music_id += 1
    _music.append(item)
    logger.success("✅ Music added (id={}): {} - {}", item["id"], title, artist)
    return dict(item)


def update_music(music_id: int, title: str, artist: str) -> Optional[Dict[str, Any]]:
    """Replace the title and artist of an item. Returns None if not found."""
    item = _find_music(music_id)
    if item is None:
        logger.warning("⚠️ Music id={} not found for update", music_id)
        return None

    item["title"] = title
    item["artist"] = artist
    logger.info("✏️ Music id={} updated: {} - {}", music_id, title, artist)
    return dict(item)


def delete_music(music_id: int) -> bool:
    """Delete a music item by id. Returns True if an item was removed."""
    for index, item in enumerate(_music):
        if item["id"] == music_id:
            del _music[index]
            logger.info("🗑️ Music id={} deleted", music_id)
            return True

    logger.warning("⚠️ Music id={} not found for deletion", music_id)
    return False


def vote_for_music(music_id: int) -> Optional[Dict[str, Any]]:
    """Add one vote to a music item. Returns the updated item or None."""
    item = _find_music(music_id)
    if item is None:
        logger.warning("⚠️ Vote for unknown music id={}", music_id)
        return None

    item["votes"] += 1
    logger.info("👍 Vote recorded for id={} (now {})", music_id, item["votes"])
    return dict(item)


reset_demo_data()
