"""Pydantic schemas for request/response validation."""

from .preview import CandidatesResponse, EntityPayload, PreviewCreate, PreviewResponse

__all__ = ["CandidatesResponse", "EntityPayload", "PreviewCreate", "PreviewResponse"]
