"""Mock mobile API endpoints wrapped by the test scenario pipeline"""

import hashlib
import logging
import uuid
from datetime import timedelta
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Query, Request, status
from fastapi.responses import JSONResponse
from ....generators.catalog import SingleEventGenerator
from ....middleware.scenario_route import ScenarioRoute
from ....utils import timeutils

logger = logging.getLogger(__name__)

CATALOG_SEED = 1234
MOCK_BUCKET = "mock-bucket"
CHANGE_COLLECTIONS = ("events", "listings", "media")
ID_PREFIXES = {"events": "event", "listings": "listing", "media": "media"}

router = APIRouter(route_class=ScenarioRoute, tags=["mobile-api"])


def _catalog_snapshot() -> Dict[str, Any]:
    """Deterministic catalog so repeated hydrates return the same data"""
    return SingleEventGenerator(seed=CATALOG_SEED).generate({"event_count": 2, "listing_count": 3})


def _apply_change(collection: str, change: Dict[str, Any]) -> Dict[str, Any]:
    action = change.get("action")
    temp_id = change.get("temp_id")
    item_id = change.get("id")

    if action == "create":
        return {
            "temp_id": temp_id,
            "id": f"{ID_PREFIXES[collection]}_{uuid.uuid4().hex[:12]}",
            "status": "success",
            "errors": []
        }
    if action in ("update", "delete", "remove"):
        return {"id": item_id or temp_id, "status": "success", "errors": []}
    return {
        "temp_id": temp_id,
        "id": item_id,
        "status": "error",
        "errors": [f"Invalid action: {action}"]
    }


@router.get("/mobile-api/v1/catalog/hydrate", name="catalog.hydrate")
async def hydrate():
    """
    Full catalog snapshot.

    Returns events, listings and reference data with the catalog's
    `last_modified` marker.
    """
    catalog = _catalog_snapshot()
    last_modified = catalog.pop("last_modified")
    return {"data": catalog, "last_modified": last_modified}


@router.get("/mobile-api/v1/catalog/sync", name="catalog.sync")
async def sync(since: Optional[str] = Query(None)):
    """Incremental changes since a `last_modified` marker; the mock never has any"""
    if not since:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Missing required parameter: since"}
        )

    data = {collection: [] for collection in CHANGE_COLLECTIONS}
    return {
        "data": data,
        "deletions": {collection: [] for collection in CHANGE_COLLECTIONS},
        "last_modified": timeutils.now_iso(),
        "pagination": {
            "current_page": 1,
            "total_pages": 1,
            "total_records": 0,
            "per_page": 1000,
            "has_more": False
        }
    }


@router.post("/mobile-api/v1/catalog/changes", name="catalog.changes")
async def submit_changes(payload: Dict[str, Any] = Body(...)):
    """
    Apply create/update/delete operations submitted by the app.

    Every change is acknowledged; created items get a server id that the app
    maps back through `temp_id`.
    """
    changes = payload.get("changes")
    if not isinstance(changes, dict) or not changes:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "message": "The given data was invalid.",
                "errors": {"changes": ["The changes field is required."]}
            }
        )

    invalid = [
        collection for collection in CHANGE_COLLECTIONS
        if changes.get(collection) is not None and not isinstance(changes[collection], list)
    ]
    if invalid:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "message": "The given data was invalid.",
                "errors": {f"changes.{collection}": ["Must be an array."] for collection in invalid}
            }
        )

    result: Dict[str, List[Dict[str, Any]]] = {collection: [] for collection in CHANGE_COLLECTIONS}
    for collection in CHANGE_COLLECTIONS:
        for change in changes.get(collection) or []:
            if isinstance(change, dict):
                result[collection].append(_apply_change(collection, change))

    return {"data": result}


@router.post("/mobile-api/v1/catalog/request-upload", name="catalog.request-upload")
async def request_upload(request: Request, payload: Dict[str, Any] = Body(...)):
    """Presigned upload URLs for each announced media item"""
    media = payload.get("media")
    if not isinstance(media, list) or not media:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "message": "The given data was invalid.",
                "errors": {"media": ["The media field is required."]}
            }
        )

    expires_at = timeutils.isoformat(timeutils.utcnow() + timedelta(hours=1))
    base_url = str(request.base_url).rstrip("/")
    uploads = []
    for item in media:
        if not isinstance(item, dict):
            continue
        upload_id = str(uuid.uuid4())
        uploads.append({
            "identifier": item.get("identifier"),
            "storage_key": f"temp-{uuid.uuid4()}",
            "upload_url": f"{base_url}/mock-s3-upload/{upload_id}",
            "expires_at": expires_at
        })

    return {"data": uploads}


@router.put("/mock-s3-upload/{upload_id}", name="mock-s3.upload")
async def mock_s3_upload(upload_id: str, request: Request):
    """Accepts a raw object upload the way S3 does; the content is discarded"""
    content = await request.body()
    logger.debug(f"Mock S3 upload received - upload_id: {upload_id}, size: {len(content)}")
    return {
        "ETag": f"\"{hashlib.md5(upload_id.encode()).hexdigest()}\"",
        "Key": upload_id,
        "Bucket": MOCK_BUCKET,
        "Size": len(content)
    }
