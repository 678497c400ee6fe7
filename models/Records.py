from pydantic import BaseModel
from typing import Any, Dict, Optional, Type


class SaveRequest(BaseModel):
    path: Optional[str] = None
    data: Optional[Any] = None


class TicketModel(BaseModel):
    title: str
    description: Optional[str] = None
    status: str = "open"
    priority: str = "normal"
    assignee: Optional[str] = None

    class Config:
        extra = "forbid"
        json_schema_extra = {
            "example": {
                "title": "Printer offline",
                "description": "Second floor printer does not respond",
                "priority": "high"
            }
        }


class NoteModel(BaseModel):
    text: str
    author: Optional[str] = None

    class Config:
        extra = "forbid"


# Collections that /api/save and /api/load may touch, with their record shape.
SAVE_COLLECTIONS: Dict[str, Type[BaseModel]] = {}


def register_collection(name: str, model: Type[BaseModel]):
    SAVE_COLLECTIONS[name] = model
    return model


def collection_model(name: str) -> Optional[Type[BaseModel]]:
    return SAVE_COLLECTIONS.get(name)


register_collection("tickets", TicketModel)
register_collection("notes", NoteModel)
