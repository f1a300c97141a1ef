"""Payload of GET /health."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness of the Scribe API and reachability of its post/user database."""

    status: Literal["ok"] = Field(default="ok", description="Always 'ok' while the API answers")
    service: Literal["scribe"] = Field(default="scribe", description="Name of the answering service")
    environment: Literal["dev", "prod"] = Field(description="APP_ENV the process was started with")
    database: Literal["connected", "disconnected"] = Field(
        description="Whether a trivial query against the blog database succeeded",
    )
