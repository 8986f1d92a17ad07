import logging
from typing import List

from fastapi import HTTPException, status

from ..repositories.base import Repository
from ..schemas.ad import Ad, AdCreate, AdStats, AdStatus, AdUpdate

logger = logging.getLogger(__name__)

AD_NOT_FOUND = "Ad not found"

class AdService:
    def __init__(self, repo: Repository):
        self.repo = repo

    async def list_ads(self) -> List[Ad]:
        return await self.repo.get_all_ads()

    async def list_user_ads(self, user_id: int) -> List[Ad]:
        return await self.repo.get_ads_by_user_id(user_id)

    async def create_ad(self, ad_data: AdCreate) -> Ad:
        # Owner is only checked here, never on update
        if ad_data.user_id is not None and not await self.repo.get_user(ad_data.user_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Referenced user does not exist")

        ad = await self.repo.create_ad(ad_data.model_dump(mode="json"))
        logger.info("Ad created", extra={"ad_id": ad.id, "user_id": ad.user_id})
        return ad

    async def get_ad(self, ad_id: int) -> Ad:
        ad = await self.repo.get_ad(ad_id)
        if ad is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AD_NOT_FOUND)
        return ad

    async def update_ad(self, ad_id: int, ad_data: AdUpdate) -> Ad:
        ad = await self.repo.update_ad(ad_id, ad_data.changes())
        if ad is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AD_NOT_FOUND)
        return ad

    async def delete_ad(self, ad_id: int) -> None:
        if not await self.repo.delete_ad(ad_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AD_NOT_FOUND)
        logger.info("Ad deleted", extra={"ad_id": ad_id})

    async def record_impression(self, ad_id: int) -> int:
        ad = await self.repo.increment_ad_impressions(ad_id)
        if ad is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AD_NOT_FOUND)
        return ad.impressions

    async def record_click(self, ad_id: int) -> int:
        ad = await self.repo.increment_ad_clicks(ad_id)
        if ad is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AD_NOT_FOUND)
        return ad.clicks

    async def user_stats(self, user_id: int) -> AdStats:
        ads = await self.repo.get_ads_by_user_id(user_id)

        total_impressions = sum(ad.impressions for ad in ads)
        total_clicks = sum(ad.clicks for ad in ads)
        ctr = round(total_clicks / total_impressions * 100) if total_impressions > 0 else 0

        return AdStats(
            total_ads=len(ads),
            active_ads=sum(1 for ad in ads if ad.status == AdStatus.ACTIVE),
            total_impressions=total_impressions,
            total_clicks=total_clicks,
            ctr=ctr,
        )
