from typing import List

from fastapi import APIRouter, Depends, Path, Request, Response, status

from ..schemas.ad import INT4_MAX, Ad, AdCreate, AdStats, AdUpdate, ClickCount, ImpressionCount
from ..dependencies import get_ad_service
from ..services.ad_service import AdService
from ..limiter import limiter

router = APIRouter(prefix="/api/ads", tags=["ads"])

@router.get("", response_model=List[Ad])
async def list_ads(service: AdService = Depends(get_ad_service)):
    return await service.list_ads()

@router.get("/user/{user_id}", response_model=List[Ad])
async def list_user_ads(user_id: int = Path(..., ge=1, le=INT4_MAX), service: AdService = Depends(get_ad_service)):
    """Ads owned by one user, in no particular order"""
    return await service.list_user_ads(user_id)

@router.get("/user/{user_id}/stats", response_model=AdStats)
async def user_stats(user_id: int = Path(..., ge=1, le=INT4_MAX), service: AdService = Depends(get_ad_service)):
    """Totals and click-through rate across a user's ads"""
    return await service.user_stats(user_id)

@router.post("", response_model=Ad, status_code=status.HTTP_201_CREATED)
async def create_ad(ad_data: AdCreate, service: AdService = Depends(get_ad_service)):
    return await service.create_ad(ad_data)

@router.get("/{ad_id}", response_model=Ad)
async def get_ad(ad_id: int = Path(..., ge=1, le=INT4_MAX), service: AdService = Depends(get_ad_service)):
    return await service.get_ad(ad_id)

@router.patch("/{ad_id}", response_model=Ad)
async def update_ad(ad_data: AdUpdate, ad_id: int = Path(..., ge=1, le=INT4_MAX), service: AdService = Depends(get_ad_service)):
    """
    Partial update. Status may move between any two values.
    """
    return await service.update_ad(ad_id, ad_data)

@router.delete("/{ad_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_ad(ad_id: int = Path(..., ge=1, le=INT4_MAX), service: AdService = Depends(get_ad_service)):
    await service.delete_ad(ad_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{ad_id}/impression", response_model=ImpressionCount)
@limiter.limit("300/minute")
async def record_impression(request: Request, ad_id: int = Path(..., ge=1, le=INT4_MAX), service: AdService = Depends(get_ad_service)):
    return ImpressionCount(impressions=await service.record_impression(ad_id))

@router.post("/{ad_id}/click", response_model=ClickCount)
@limiter.limit("300/minute")
async def record_click(request: Request, ad_id: int = Path(..., ge=1, le=INT4_MAX), service: AdService = Depends(get_ad_service)):
    return ClickCount(clicks=await service.record_click(ad_id))
