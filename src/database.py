"""
Data access for RevisionHub.
Supabase-backed record store (material metadata table) and blob store (PDF bucket).

Both take an already-built client; db.py is the only place a client is created.
"""
import logging
from typing import Dict, List, Optional

from supabase import Client

from src.errors import ConcurrentUpdateError, MaterialNotFoundError, StoreError

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "materials"
DEFAULT_BUCKET = "pdfs"


class SupabaseRecordStore:
    """One row per uploaded material in a Supabase table."""

    def __init__(self, client: Client, table: str = DEFAULT_TABLE):
        self.client = client
        self.table = table

    def _query(self):
        return self.client.table(self.table)

    def list_all(self) -> List[Dict]:
        """All materials, newest first."""
        try:
            response = self._query().select("*").order("created_at", desc=True).execute()
        except Exception as e:
            logger.error(f"Error fetching materials: {e}")
            raise StoreError(f"Could not load materials: {e}") from e
        return response.data or []

    def get(self, material_id: str) -> Dict:
        try:
            response = self._query().select("*").eq("id", str(material_id)).limit(1).execute()
        except Exception as e:
            logger.error(f"Error fetching material {material_id}: {e}")
            raise StoreError(f"Could not load material {material_id}: {e}") from e
        if not response.data:
            raise MaterialNotFoundError(material_id)
        return response.data[0]

    def insert(self, fields: Dict) -> Dict:
        """Insert a new material row and return it as stored (with its id)."""
        try:
            response = self._query().insert(fields).execute()
        except Exception as e:
            logger.error(f"Error inserting material {fields.get('filename')}: {e}")
            raise StoreError(f"Could not save material metadata: {e}") from e
        if not response.data:
            raise StoreError("Insert returned no row")
        return response.data[0]

    def update(self, material_id: str, fields: Dict, expected_revision_count: Optional[int] = None) -> Dict:
        """
        Update a material row.

        Args:
            material_id: Row id
            fields: Columns to set
            expected_revision_count: If given, only update when the stored revision_count
                still equals this value (optimistic lock for ratings)

        Returns:
            The updated row
        """
        try:
            query = self._query().update(fields).eq("id", str(material_id))
            if expected_revision_count is not None:
                query = query.eq("revision_count", expected_revision_count)
            response = query.execute()
        except Exception as e:
            logger.error(f"Error updating material {material_id}: {e}")
            raise StoreError(f"Could not update material {material_id}: {e}") from e

        if response.data:
            return response.data[0]
        # Nothing matched: tell a vanished row apart from a lost race
        if expected_revision_count is not None:
            self.get(material_id)
            logger.warning(f"Concurrent update on material {material_id}")
            raise ConcurrentUpdateError(material_id, expected_revision_count)
        raise MaterialNotFoundError(material_id)

    def delete(self, material_id: str) -> None:
        try:
            response = self._query().delete().eq("id", str(material_id)).execute()
        except Exception as e:
            logger.error(f"Error deleting material {material_id}: {e}")
            raise StoreError(f"Could not delete material {material_id}: {e}") from e
        if not response.data:
            raise MaterialNotFoundError(material_id)


class SupabaseBlobStore:
    """Raw file bytes in a Supabase Storage bucket."""

    def __init__(self, client: Client, bucket: str = DEFAULT_BUCKET):
        self.client = client
        self.bucket = bucket

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self._bucket().upload(key, data, {"content-type": content_type})
        except Exception as e:
            logger.error(f"Error uploading {key} to bucket {self.bucket}: {e}")
            raise StoreError(f"Could not upload file: {e}") from e
        logger.debug(f"Uploaded {len(data)} bytes to {self.bucket}/{key}")

    def delete(self, key: str) -> None:
        try:
            self._bucket().remove([key])
        except Exception as e:
            logger.error(f"Error removing {key} from bucket {self.bucket}: {e}")
            raise StoreError(f"Could not delete file: {e}") from e

    def public_url(self, key: str) -> str:
        return self._bucket().get_public_url(key)
