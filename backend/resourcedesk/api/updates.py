from fastapi import HTTPException, status
from pydantic import BaseModel


def merged_update(record, data: dict, schema: type[BaseModel]) -> dict:
    """Overlay ``data`` on the stored row, re-validate the whole record and
    return the normalized values for the keys that were sent.

    An explicit ``null`` for a required field fails here with 422 instead of
    reaching a NOT NULL column.
    """
    if not data:
        return {}
    merged = {key: data.get(key, getattr(record, key)) for key in schema.model_fields}
    try:
        normalized = schema.model_validate(merged).model_dump()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return {key: normalized[key] for key in data}
