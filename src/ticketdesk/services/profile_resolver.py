"""
Profile Resolver

Turns a bag of user ids into display metadata with one batched read.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..models import ProfileFragment
from ..repositories import ProfileRepository, get_profile_repository

logger = logging.getLogger(__name__)


def distinct_ids(user_ids: Iterable[str]) -> List[str]:
    """Drop falsy ids and duplicates, keeping first-seen order."""
    return list(dict.fromkeys(uid for uid in user_ids if uid))


class ProfileResolver:
    """
    Resolve user ids to ``ProfileFragment`` objects.

    Every call issues at most one remote read, and none when the input
    holds no usable id. Remote failures propagate to the caller; there is
    no retry and no partial result.
    """

    def __init__(self, repository: Optional[ProfileRepository] = None):
        self._repo = repository or get_profile_repository()

    def resolve(self, user_ids: Iterable[str]) -> Dict[str, ProfileFragment]:
        """
        Args:
            user_ids: ids, possibly with duplicates, ``None`` or empty strings

        Returns:
            Mapping from each distinct non-empty id that has a profile row
            to its display name and role
        """
        unique_ids = distinct_ids(user_ids)
        if not unique_ids:
            return {}

        rows = self._repo.get_by_user_ids(unique_ids)

        profiles: Dict[str, ProfileFragment] = {}
        for row in rows:
            profiles[row["user_id"]] = ProfileFragment(
                display_name=row.get("display_name") or "",
                role=row.get("role") or "user",
            )

        missing = len(unique_ids) - len(profiles)
        if missing:
            logger.warning(f"⚠️ {missing} of {len(unique_ids)} user ids have no profile")
        return profiles
