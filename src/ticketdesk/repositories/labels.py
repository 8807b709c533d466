"""
Label Repository - Ports and Adapters

Port: LabelRepository (abstract interface)
Adapters: SupabaseLabelRepository

Name uniqueness is enforced by the database, not here.
"""

from abc import abstractmethod
from typing import Any, Dict, List, Optional

from .base import SupabaseRepository


class LabelRepository(SupabaseRepository):
    """Label Repository Port."""

    @abstractmethod
    def get_all(self) -> List[Dict[str, Any]]:
        """All labels ordered by name."""
        pass

    @abstractmethod
    def create(self, name: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def update(self, label_id: str, name: str) -> Optional[Dict[str, Any]]:
        """Rename a label. Returns None when no row was updated."""
        pass


class SupabaseLabelRepository(LabelRepository):
    """Supabase adapter for the labels table."""

    TABLE = "labels"

    def get_all(self) -> List[Dict[str, Any]]:
        result = self.client.table(self.TABLE).select("*").order("name").execute()
        return self._rows(result)

    def create(self, name: str) -> Optional[Dict[str, Any]]:
        result = self.client.table(self.TABLE).insert({"name": name}).execute()
        return self._first(result)

    def update(self, label_id: str, name: str) -> Optional[Dict[str, Any]]:
        result = self.client.table(self.TABLE).update({"name": name}).eq(
            "id", label_id
        ).execute()
        return self._first(result)
