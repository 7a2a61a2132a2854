from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.config import Settings, get_settings

router = APIRouter()


class ResolvedConfig(BaseModel):
    corpus_dir: Optional[str]
    extensions: List[str]
    index_path: str
    index_exists: bool


class ConfigResponse(BaseModel):
    settings: Dict[str, Any]
    resolved: ResolvedConfig


@router.get("/config", response_model=ConfigResponse, tags=["System"])
async def get_configuration(settings: Settings = Depends(get_settings)) -> ConfigResponse:
    """Current settings and the paths/extensions they resolve to."""
    return ConfigResponse(
        settings=settings.model_dump(),
        resolved=ResolvedConfig(**settings.resolved()),
    )
