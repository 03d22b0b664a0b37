"""Embeddings API endpoints.

Routes:
- POST /embeddings/rebuild - Rebuild every embedding from collaborator content
- POST /embeddings - Embed a piece of free text

Dependencies: taskdesk.application.services.embedding_service
System role: Embedding maintenance HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from taskdesk.api.deps import get_embedding_service
from taskdesk.application.services.embedding_service import EmbeddingService
from taskdesk.core.exceptions import RebuildInProgressError
from taskdesk.models.embedding import (
    AdHocEmbeddingRequest,
    AdHocEmbeddingResponse,
    RebuildResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/embeddings", tags=["embeddings"])


@router.post("/rebuild", response_model=RebuildResponse)
async def rebuild_embeddings(
    embedding_service: EmbeddingService = Depends(get_embedding_service),
) -> RebuildResponse:
    """
    Replace all embeddings with freshly generated ones.

    Returns:
        RebuildResponse: ok flag and rebuild counts

    Raises:
        HTTPException(409): A rebuild is already running
        HTTPException(500): Rebuild failed
    """
    try:
        report = await embedding_service.rebuild_all()
    except RebuildInProgressError:
        raise HTTPException(status_code=409, detail="Embeddings rebuild already in progress")
    except Exception as e:
        logger.exception(f"{__name__}:rebuild_embeddings - {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail="Failed to rebuild embeddings")
    return RebuildResponse(ok=True, report=report)


@router.post("", response_model=AdHocEmbeddingResponse, status_code=201)
async def add_embedding(
    request: AdHocEmbeddingRequest,
    embedding_service: EmbeddingService = Depends(get_embedding_service),
) -> AdHocEmbeddingResponse:
    """
    Embed free text under the ad-hoc entity type.

    Returns:
        AdHocEmbeddingResponse: Generated entityId

    Raises:
        HTTPException(503): Vector backend or embedding model unavailable
        HTTPException(500): Insert failed
    """
    try:
        entity_id = await embedding_service.add_adhoc(request.content)
    except Exception as e:
        logger.exception(f"{__name__}:add_embedding - {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail="Failed to store embedding")
    if entity_id is None:
        raise HTTPException(status_code=503, detail="Embeddings are unavailable")
    return AdHocEmbeddingResponse(entity_id=entity_id)
