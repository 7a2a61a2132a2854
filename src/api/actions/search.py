from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from api.dependencies import get_index_service
from preprocessing.loader import CorpusRootError
from retrieval.query import InvalidQueryError
from schemas.internal.documents import LoadWarning
from schemas.internal.index import IndexStats, SearchHit
from services.index_service import IndexNotLoadedError, IndexService

router = APIRouter()


class SearchResponse(BaseModel):
    query: str
    count: int
    results: List[SearchHit]


class StatsResponse(BaseModel):
    generation: int
    stats: IndexStats
    skipped: List[LoadWarning]


@router.get("/search", response_model=SearchResponse, tags=["Search"])
def search_sections(
    q: str = Query(..., description="Free-text query."),
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of results."),
    idf: Optional[bool] = Query(None, description="Weight terms by inverse document frequency."),
    service: IndexService = Depends(get_index_service),
):
    """Rank indexed sections for a query."""
    try:
        hits = service.search(q, limit=limit, use_idf=idf)
    except IndexNotLoadedError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except InvalidQueryError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SearchResponse(query=q, count=len(hits), results=hits)


@router.get("/stats", response_model=StatsResponse, tags=["Search"])
def index_stats(service: IndexService = Depends(get_index_service)):
    """Describe the active index."""
    try:
        index = service.snapshot()
    except IndexNotLoadedError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return StatsResponse(
        generation=service.generation,
        stats=index.stats(),
        skipped=service.last_warnings,
    )


@router.post("/reload", response_model=StatsResponse, tags=["Search"])
async def reload_index(
    corpus_dir: Optional[str] = Query(None, description="Corpus root; defaults to DOCINDEX_CORPUS_DIR."),
    service: IndexService = Depends(get_index_service),
):
    """
    Rebuild the index from the corpus directory and swap it in.

    Queries already running keep using the previous index.
    """
    try:
        index = await run_in_threadpool(service.rebuild, corpus_dir)
    except CorpusRootError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return StatsResponse(
        generation=service.generation,
        stats=index.stats(),
        skipped=service.last_warnings,
    )
