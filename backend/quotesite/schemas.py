"""Pydantic request/response schemas."""

from pydantic import BaseModel, ConfigDict


class Quote(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    text: str
    author: str
