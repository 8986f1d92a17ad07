from datetime import datetime

from fastapi import APIRouter, Request

from .. import __version__

router = APIRouter()

@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "storage": type(request.app.state.repository).__name__,
        "timestamp": datetime.now().isoformat(),
        "version": __version__
    }
