"""Pydantic schemas for ingest responses."""

from pydantic import BaseModel


class IngestErrorSchema(BaseModel):
    status: str
    failure_reason: str
    message: str | None = None
