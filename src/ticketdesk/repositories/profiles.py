"""
Profile Repository - Ports and Adapters

Port: ProfileRepository (abstract interface)
Adapters: SupabaseProfileRepository

Profiles are owned outside TicketDesk; this repository only reads them.
"""

from abc import abstractmethod
from typing import Any, Dict, List, Sequence

from .base import SupabaseRepository


class ProfileRepository(SupabaseRepository):
    """Profile Repository Port."""

    @abstractmethod
    def get_by_user_ids(self, user_ids: Sequence[str]) -> List[Dict[str, Any]]:
        """Fetch ``user_id, display_name, role`` for the given ids in one call."""
        pass


class SupabaseProfileRepository(ProfileRepository):
    """Supabase adapter for the profiles table."""

    TABLE = "profiles"
    COLUMNS = "user_id, display_name, role"

    def get_by_user_ids(self, user_ids: Sequence[str]) -> List[Dict[str, Any]]:
        result = self.client.table(self.TABLE).select(self.COLUMNS).in_(
            "user_id", list(user_ids)
        ).execute()
        return self._rows(result)
