from fastapi import APIRouter
from pydantic import BaseModel

from docindex import __version__

router = APIRouter()

class HealthResponse(BaseModel):
    status: str
    version: str

@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check the health of the API."""
    return HealthResponse(status="ok", version=__version__)
