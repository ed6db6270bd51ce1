"""
Revision workflow: upload, rate, delete and load-ranked, over injected stores.
Failures from the stores propagate unchanged; the caller shows one message per action.
"""
import logging
from datetime import datetime
from pathlib import PurePath
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from src.engine import DEFAULT_CONFIG, VALID_SCORES, PriorityConfig, parse_timestamp, rank_all, utc_now
from src.errors import ValidationError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


def make_storage_path(filename: str, now: datetime) -> str:
    """Collision-resistant blob key: <epoch ms>_<random8>_<original name>."""
    timestamp = int(now.timestamp() * 1000)
    name = PurePath(filename.replace("\\", "/")).name
    return f"{timestamp}_{uuid4().hex[:8]}_{name}"


class RevisionService:
    """Orchestrates user intents against a record store and a blob store."""

    def __init__(
        self,
        records,
        blobs,
        config: PriorityConfig = DEFAULT_CONFIG,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            records: Record store (list_all, get, insert, update, delete)
            blobs: Blob store (upload, delete, public_url)
            config: Priority formula settings
            clock: Returns the current aware datetime; defaults to UTC now
        """
        self.records = records
        self.blobs = blobs
        self.config = config
        self.clock = clock or utc_now

    def now(self) -> datetime:
        return parse_timestamp(self.clock())

    # ============= Reads =============

    def load_ranked(self, now: Optional[datetime] = None) -> List[Dict]:
        """All materials with a priority attached, most urgent first."""
        return rank_all(self.records.list_all(), now or self.now(), self.config)

    def public_url(self, storage_path: str) -> str:
        return self.blobs.public_url(storage_path)

    # ============= Writes =============

    def upload(self, filename: str, data: bytes, content_type: str) -> Dict:
        """
        Store a PDF and create its material row.

        If the row cannot be inserted the blob is removed again before the
        insert error is re-raised.

        Returns:
            The inserted material row
        """
        if content_type != PDF_CONTENT_TYPE:
            raise ValidationError(f"Only PDF files can be uploaded (got {content_type or 'unknown type'})")
        if not filename or not filename.strip():
            raise ValidationError("File name is required")

        now = self.now()
        storage_path = make_storage_path(filename, now)
        self.blobs.upload(storage_path, data, content_type)

        timestamp = now.isoformat()
        try:
            material = self.records.insert({
                "filename": filename,
                "storage_path": storage_path,
                "date_added": timestamp,
                "last_revised": timestamp,
                "revision_count": 0,
                "last_score": None,
                "revision_history": [],
            })
        except Exception:
            try:
                self.blobs.delete(storage_path)
            except Exception as cleanup_error:
                logger.error(f"Orphaned blob {storage_path} left after failed insert: {cleanup_error}")
            raise

        logger.info(f"Uploaded {filename} as {storage_path}")
        return material

    def rate(self, material_id: str, score: int) -> Dict:
        """
        Record a recall score for a material.

        Appends one history entry, bumps revision_count and sets last_score/last_revised.
        The write only applies if revision_count is unchanged since the read.

        Returns:
            The updated material row
        """
        if not isinstance(score, int) or isinstance(score, bool) or score not in VALID_SCORES:
            raise ValidationError(f"Score must be one of {VALID_SCORES}, got {score!r}")

        current = self.records.get(material_id)
        revision_count = current.get("revision_count") or 0
        timestamp = self.now().isoformat()
        history = list(current.get("revision_history") or [])
        history.append({"date": timestamp, "score": score})

        material = self.records.update(
            material_id,
            {
                "last_revised": timestamp,
                "revision_count": revision_count + 1,
                "last_score": score,
                "revision_history": history,
            },
            expected_revision_count=revision_count,
        )
        logger.info(f"Rated material {material_id}: score={score}, revisions={revision_count + 1}")
        return material

    def delete(self, material_id: str) -> None:
        """Remove the blob, then the row. A failure on the row leaves a dangling record."""
        material = self.records.get(material_id)
        self.blobs.delete(material["storage_path"])
        self.records.delete(material_id)
        logger.info(f"Deleted material {material_id} ({material.get('filename')})")
