"""Preview endpoints.

The editor's form asks which plugins can preview the entity, submits the
entity to build a preview and opens the returned URL, which redirects to the
front-end application.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, RedirectResponse

from ..core.config import Settings
from ..exceptions import BuildError, PreviewUnsupportedError, RemoteError
from ..models.entity import Entity
from ..schemas.preview import CandidatesResponse, PreviewCreate, PreviewResponse
from ..services.preview_definition import CONTEXT_DEFAULT
from ..services.preview_service import PreviewService
from ..services.preview_store import PreviewStore
from .deps import get_preview_service, get_preview_store, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/previews", tags=["previews"])
redirect_router = APIRouter(tags=["previews"])

# Cache policy of every redirect to a preview.
NO_CACHE = "no-store, max-age=0"


@router.get("/candidates", response_model=CandidatesResponse)
def list_candidates(
    entity_type: str = Query(..., min_length=1),
    bundle: Optional[str] = Query(None),
    context: str = Query(CONTEXT_DEFAULT),
    service: PreviewService = Depends(get_preview_service),
):
    """Index plugins able to preview entities of this type and bundle."""
    # Candidate selection only looks at type and bundle.
    probe = Entity(entity_type=entity_type, uuid="", bundle=bundle)
    candidates = service.select_candidates(probe, context)
    return CandidatesResponse(context=context, plugin_ids=list(candidates))


@router.post("", response_model=PreviewResponse, status_code=201)
def create_preview(
    request: PreviewCreate,
    service: PreviewService = Depends(get_preview_service),
    store: PreviewStore = Depends(get_preview_store),
):
    """Build a preview of the submitted entity.

    The first candidate plugin in registry order is used.
    """
    entity = request.entity.to_entity()

    candidates = service.select_candidates(entity, request.context)
    if not candidates:
        raise PreviewUnsupportedError(entity.entity_type, entity.bundle, request.context)

    preview_definition = next(iter(candidates.values()))

    try:
        record = service.build(entity, preview_definition, request.context)
    except (BuildError, RemoteError) as e:
        logger.error(
            f"Preview of {entity.entity_type} {entity.uuid} failed: {e.message}",
            extra={"plugin_id": preview_definition.plugin_id, "error_code": e.error_code.value},
        )
        return JSONResponse(
            status_code=e.status_code,
            content={
                "error": e.error_code.value,
                "message": "Preview cannot be rendered.",
                "details": e.details,
            },
        )

    handle = store.save(record)

    return PreviewResponse(
        handle=handle,
        preview_url=f"/preview/{handle}",
        path=record.path.path,
        index_name=record.index_name,
        document_id=record.document_id,
        plugin_id=preview_definition.plugin_id,
    )


@redirect_router.get("/preview/{handle}")
def open_preview(
    handle: str,
    store: PreviewStore = Depends(get_preview_store),
    app_settings: Settings = Depends(get_settings),
):
    """Redirect to the preview in the front-end application. Never cached."""
    record = store.get(handle)
    return RedirectResponse(
        url=record.path.to_url(app_settings.frontend_base_url),
        status_code=307,
        headers={"Cache-Control": NO_CACHE},
    )
