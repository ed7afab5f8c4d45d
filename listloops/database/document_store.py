"""
Document-style access to Supabase tables.

Each collection is a table whose primary key column is ``id``. Nested objects
live in JSON columns, so a document maps one-to-one onto a row.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from supabase import Client


class DocumentStore:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a document by id; None when it does not exist"""
        result = self.supabase.table(collection)\
            .select("*")\
            .eq("id", doc_id)\
            .limit(1)\
            .execute()

        if not result.data:
            return None
        return result.data[0]

    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Write a whole document, replacing any existing one"""
        payload = serialize_document({**data, "id": doc_id})
        result = self.supabase.table(collection)\
            .upsert(payload)\
            .execute()

        if result.data:
            return result.data[0]
        return payload

    def update(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        """Overwrite the given top-level fields of an existing document"""
        self.supabase.table(collection)\
            .update(serialize_document(data))\
            .eq("id", doc_id)\
            .execute()


def serialize_document(data: Mapping[str, Any]) -> Dict[str, Any]:
    serialized: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, datetime):
            serialized[key] = value.isoformat()
        elif isinstance(value, Mapping):
            serialized[key] = serialize_document(value)
        else:
            serialized[key] = value
    return serialized
