"""
Shared remote activity log

Every quest completion is mirrored as one record in a shared remote log, and
the leaderboard is aggregated from that log. Two implementations of the same
capability are provided and one is chosen once, at construction:

- LocalOnlyActivityLog: remote sync not configured, every call is a no-op
- FirestoreActivityLog: Firestore REST API with anonymous sign-in

Remote failures never reach the caller. Writes degrade to no-ops and reads
to empty results; a warning in the log is the only trace. No retries.
"""

import re
import time
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

import httpx

from questboard.config import (
    remote_enabled,
    FIREBASE_API_KEY,
    FIREBASE_PROJECT_ID,
    FIRESTORE_COLLECTION,
    REMOTE_TIMEOUT_SECONDS,
)
from questboard.gamification.leaderboard import ANONYMOUS_NAME, aggregate_leaderboard
from questboard.models.activity import ActivityRecord, LeaderboardRow
from questboard.observability.metrics import (
    remote_operations_total,
    remote_operation_duration_seconds,
)

logger = logging.getLogger(__name__)

IDENTITY_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signUp"
FIRESTORE_URL = "https://firestore.googleapis.com/v1"


class RemoteActivityLog:
    """Capability interface for the shared activity log"""

    enabled: bool = False

    async def sign_in(self) -> None:
        """Obtain an anonymous identity for writes"""

    async def write(self, record: ActivityRecord) -> None:
        """Append one completion record"""

    async def query_since(self, start_date: str) -> List[ActivityRecord]:
        """Records dated on or after start_date (ISO), ordered by date"""
        return []

    async def leaderboard_since(self, start_date: str) -> List[LeaderboardRow]:
        """Points per name since start_date, highest first"""
        records = await self.query_since(start_date)
        return aggregate_leaderboard(records, start_date)

    async def close(self) -> None:
        """Release network resources"""


class LocalOnlyActivityLog(RemoteActivityLog):
    """Remote sync disabled: writes are dropped, reads are empty"""

    enabled = False

    async def write(self, record: ActivityRecord) -> None:
        remote_operations_total.labels(operation="write", status="skipped").inc()
        logger.debug(f"Local-only mode, not syncing '{record.title}' for {record.name}")


# =============================================================================
# Firestore value encoding
# =============================================================================

def _encode_value(value: Any) -> Dict[str, Any]:
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if value is None:
        return {"nullValue": None}
    return {"stringValue": str(value)}


_FRACTION = re.compile(r"\.(\d+)")


def _parse_timestamp(text: str) -> datetime:
    """RFC 3339 timestamp with any number of fractional digits (Firestore sends up to 9)"""
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text.replace("Z", "+00:00"))


def _decode_value(value: Dict[str, Any]) -> Any:
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return value["doubleValue"]
    if "stringValue" in value:
        return value["stringValue"]
    if "booleanValue" in value:
        return value["booleanValue"]
    if "timestampValue" in value:
        return _parse_timestamp(value["timestampValue"])
    return None


def record_to_fields(record: ActivityRecord) -> Dict[str, Any]:
    """Firestore document fields for a record (createdAt is set server-side)"""
    return {
        "name": _encode_value(record.name or ANONYMOUS_NAME),
        "title": _encode_value(record.title),
        "points": _encode_value(record.points),
        "category": _encode_value(record.category),
        "date": _encode_value(record.date),
    }


def fields_to_record(fields: Dict[str, Any]) -> Optional[ActivityRecord]:
    """
    Decode a Firestore document, or None if it has no date

    Text fields of another type are stringified. Raises ValueError (or
    TypeError) when points or createdAt can't be read.
    """
    data = {key: _decode_value(value) for key, value in fields.items()}
    if not data.get("date"):
        return None

    points = data.get("points") or 0
    return ActivityRecord(
        name=str(data.get("name") or ANONYMOUS_NAME),
        title=str(data.get("title") or ""),
        points=int(points),
        category=str(data.get("category") or ""),
        date=str(data["date"]),
        created_at=data.get("createdAt"),
    )


class FirestoreActivityLog(RemoteActivityLog):
    """
    Activity log stored in a Firestore collection

    Features:
    - Anonymous Identity Toolkit sign-in (token used for writes and reads)
    - One document per completion with a server-assigned createdAt
    - Range query on date with client-side aggregation
    """

    enabled = True

    def __init__(
        self,
        api_key: str,
        project_id: str,
        collection: str = FIRESTORE_COLLECTION,
        timeout: float = REMOTE_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize Firestore activity log.

        Args:
            api_key: Firebase web API key
            project_id: Firebase project ID
            collection: Collection holding activity records
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject a mock)
        """
        self.api_key = api_key
        self.project_id = project_id
        self.collection = collection
        self._id_token: Optional[str] = None
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            transport=transport,
        )

    @property
    def documents_path(self) -> str:
        return f"projects/{self.project_id}/databases/(default)/documents"

    def _headers(self) -> Dict[str, str]:
        if self._id_token:
            return {"Authorization": f"Bearer {self._id_token}"}
        return {}

    async def _post(self, operation: str, url: str, payload: Dict[str, Any]) -> Any:
        start = time.perf_counter()
        try:
            response = await self._client.post(
                url,
                params={"key": self.api_key},
                json=payload,
                headers=self._headers(),
            )
            response.raise_for_status()
            return response.json()
        finally:
            remote_operation_duration_seconds.labels(operation=operation).observe(
                time.perf_counter() - start
            )

    async def sign_in(self) -> None:
        """Anonymous sign-in; failure leaves the log usable without a token"""
        try:
            data = await self._post("sign_in", IDENTITY_URL, {"returnSecureToken": True})
        except (httpx.HTTPError, ValueError) as e:
            remote_operations_total.labels(operation="sign_in", status="error").inc()
            logger.warning(f"Anonymous sign-in failed: {e}")
            return

        self._id_token = data.get("idToken")
        remote_operations_total.labels(operation="sign_in", status="success").inc()
        logger.info(f"Signed in anonymously to Firebase project {self.project_id}")

    async def write(self, record: ActivityRecord) -> None:
        """Insert one record; errors are logged and dropped"""
        document_name = f"{self.documents_path}/{self.collection}/{uuid4().hex}"
        payload = {
            "writes": [{
                "update": {"name": document_name, "fields": record_to_fields(record)},
                "updateTransforms": [
                    {"fieldPath": "createdAt", "setToServerValue": "REQUEST_TIME"}
                ],
                "currentDocument": {"exists": False},
            }]
        }

        try:
            await self._post("write", f"{FIRESTORE_URL}/{self.documents_path}:commit", payload)
        except (httpx.HTTPError, ValueError) as e:
            remote_operations_total.labels(operation="write", status="error").inc()
            logger.warning(f"logActivity failed for {record.name}: {e}")
            return

        remote_operations_total.labels(operation="write", status="success").inc()
        logger.debug(f"Synced '{record.title}' for {record.name} to {self.collection}")

    async def query_since(self, start_date: str) -> List[ActivityRecord]:
        """Range query on date; errors yield an empty list"""
        payload = {
            "structuredQuery": {
                "from": [{"collectionId": self.collection}],
                "where": {
                    "fieldFilter": {
                        "field": {"fieldPath": "date"},
                        "op": "GREATER_THAN_OR_EQUAL",
                        "value": {"stringValue": start_date},
                    }
                },
                "orderBy": [{"field": {"fieldPath": "date"}, "direction": "ASCENDING"}],
            }
        }

        try:
            results = await self._post("query", f"{FIRESTORE_URL}/{self.documents_path}:runQuery", payload)
        except (httpx.HTTPError, ValueError) as e:
            remote_operations_total.labels(operation="query", status="error").inc()
            logger.warning(f"Leaderboard query since {start_date} failed: {e}")
            return []

        records = []
        for item in results or []:
            document = item.get("document") if isinstance(item, dict) else None
            if not isinstance(document, dict):
                continue  # runQuery also streams bare readTime entries
            try:
                record = fields_to_record(document.get("fields", {}))
            except (ValueError, TypeError, AttributeError, OverflowError) as e:
                # Collection is shared and anonymously writable
                logger.warning(f"Skipping undecodable activity record {document.get('name')}: {e}")
                continue
            if record is not None:
                records.append(record)

        remote_operations_total.labels(operation="query", status="success").inc()
        logger.debug(f"Fetched {len(records)} activity records since {start_date}")
        return records

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Remote activity log client closed")


def create_activity_log(
    api_key: str = FIREBASE_API_KEY,
    project_id: str = FIREBASE_PROJECT_ID,
    **kwargs: Any
) -> RemoteActivityLog:
    """
    Select the activity log implementation from configuration

    Remote sync is enabled only when both the API key and project ID are set.
    """
    if remote_enabled(api_key, project_id):
        logger.info(f"Remote activity log enabled (Firestore project {project_id})")
        return FirestoreActivityLog(api_key=api_key, project_id=project_id, **kwargs)

    logger.info("Remote activity log not configured - running local-only")
    return LocalOnlyActivityLog()
