# metadata.py
from datetime import datetime, timezone
from typing import Any, Dict

from .exceptions import InvalidMetadataError
from .storage.dto import ResourceMetadata


def prepare_size(resource: Dict[str, Any]) -> Dict[str, int]:
    if "bytes" not in resource:
        raise InvalidMetadataError("Resource is missing field 'bytes'")
    return {"size": resource["bytes"]}


def prepare_timestamp(resource: Dict[str, Any]) -> Dict[str, int]:
    """Parses the ISO-8601 `created_at` of a resource into epoch seconds."""
    created_at = resource.get("created_at")
    if not isinstance(created_at, str) or not created_at.strip():
        raise InvalidMetadataError(f"Resource has no creation time: {created_at!r}")
    value = created_at.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise InvalidMetadataError(
            f"Could not parse creation time {created_at!r}: {e}"
        ) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return {"timestamp": int(parsed.timestamp())}


def prepare_mimetype(resource: Dict[str, Any]) -> Dict[str, str]:
    """
    Cloudinary has no mimetypes, so one is built from the resource type and format.
    Every "jpg" in the result becomes "jpeg", wherever it occurs.
    """
    for field in ("resource_type", "format"):
        if field not in resource:
            raise InvalidMetadataError(f"Resource is missing field '{field}'")
    mimetype = f"{resource['resource_type']}/{resource['format']}"
    return {"mimetype": mimetype.replace("jpg", "jpeg")}


def prepare_resource_metadata(resource: Dict[str, Any]) -> ResourceMetadata:
    """Converts a raw Cloudinary resource into our standardized metadata DTO."""
    try:
        data = dict(resource)
        data["type"] = "file"
        data["path"] = resource["public_id"]
        data.update(prepare_size(resource))
        data.update(prepare_timestamp(resource))
        data.update(prepare_mimetype(resource))
    except KeyError as e:
        raise InvalidMetadataError(f"Resource is missing field {e}") from e
    return ResourceMetadata(**data)
