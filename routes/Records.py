from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from pydantic import ValidationError
from starlette.responses import JSONResponse

from models.Records import SaveRequest, collection_model
from services.database import ResourceAccessor, get_store
from services.errors import BadRequest, NotFound

router = APIRouter()


def describe(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


@router.post("/save", status_code=status.HTTP_201_CREATED)
def save_record(req: SaveRequest, store: ResourceAccessor = Depends(get_store)):
    if not req.path or req.data is None:
        raise BadRequest("path and data are required")

    model = collection_model(req.path)
    if model is None:
        raise BadRequest(f"Unknown collection: {req.path}")

    try:
        record = model.model_validate(req.data)
    except ValidationError as e:
        raise BadRequest(f"Invalid data: {describe(e)}") from e

    data = record.model_dump(mode="json")
    data["createdAt"] = datetime.now(timezone.utc).isoformat()
    record_id = store.push(req.path, data)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "success": True,
            "message": "Saved successfully",
            "data": {"id": record_id, **data},
        },
    )


@router.get("/load/{collection}")
def load_records(collection: str, store: ResourceAccessor = Depends(get_store)):
    if collection_model(collection) is None:
        raise NotFound(f"Unknown collection: {collection}")

    value = store.read(collection)
    if value is None:
        return []
    if not isinstance(value, dict):
        return value
    return [
        {"id": key, **item} if isinstance(item, dict) else item
        for key, item in value.items()
    ]
