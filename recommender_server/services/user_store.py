"""
User store: profile fields and approved participations from a JSON file.

File shape: {"users": [{"id", "display_name", "interest_tags", "gender",
"women_only_mode", "settings_radius_km", "participations": [{"category",
"start_time", "status"}]}]}. Implements both UserProfileStore and
ParticipationStore for the engine.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from recommender.models import Participation, UserProfile

logger = logging.getLogger(__name__)

APPROVED = "approved"


class JsonUserStore:
    """User store backed by a JSON file (e.g. data/demo_users.json)."""

    def __init__(self, path: Union[Path, str]):
        self._path = Path(path)
        self._users: Dict[str, Dict] = {}
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            logger.warning("[users] %s not found; every user is anonymous", self._path)
            return
        try:
            with open(self._path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("[users] Failed to read %s: %s", self._path, e)
            return
        users = data.get("users", data) if isinstance(data, dict) else data
        if isinstance(users, dict):
            users = [dict(u, id=uid) for uid, u in users.items()]
        for u in users:
            uid = u.get("id") or u.get("user_id")
            if uid:
                self._users[uid] = u

    def add_user(self, user: Dict) -> None:
        self._users[user["id"]] = user

    def __len__(self) -> int:
        return len(self._users)

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        raw = self._users.get(user_id)
        if raw is None:
            return None
        try:
            return UserProfile.model_validate({**raw, "id": user_id})
        except ValidationError as e:
            logger.warning("[users] Invalid profile user_id=%s errors=%d", user_id, e.error_count())
            return None

    async def get_approved_participations(self, user_id: str) -> List[Participation]:
        raw = self._users.get(user_id) or {}
        out = []
        for p in raw.get("participations", []):
            if p.get("status", APPROVED) != APPROVED:
                continue
            try:
                out.append(Participation.model_validate(p))
            except ValidationError:
                logger.warning("[users] Skipping malformed participation user_id=%s", user_id)
        return out
