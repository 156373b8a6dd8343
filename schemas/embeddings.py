"""Wire contract of the remote embedding service."""

from __future__ import annotations

from typing import Annotated

from pydantic import AllowInfNan, BaseModel, ConfigDict, Field, Strict

# Strict rejects strings and booleans; ints are still accepted as floats.
Component = Annotated[float, Strict(), AllowInfNan(False)]


class EmbeddingRequest(BaseModel):
    text: str


class EmbeddingResponse(BaseModel):
    """Reply of `POST /embedding`. Anything but a non-empty list of finite numbers fails validation."""

    model_config = ConfigDict(extra="ignore")

    embedding: list[Component] = Field(min_length=1)
