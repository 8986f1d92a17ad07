
import pytest
from unittest.mock import AsyncMock
from fastapi import HTTPException

from adboard.repositories.base import Repository
from adboard.repositories.memory import InMemoryRepository
from adboard.schemas.ad import Ad, AdCreate, AdUpdate
from adboard.services.ad_service import AdService

@pytest.fixture
def mock_repo():
    return AsyncMock(spec=InMemoryRepository)

def _ad(**overrides):
    data = {"id": 1, "title": "X", "target_url": "http://x", "budget": 10000, "duration": 7}
    data.update(overrides)
    return Ad(**data)

@pytest.mark.asyncio
async def test_create_ad_with_unknown_owner(mock_repo):
    mock_repo.get_user.return_value = None
    service = AdService(mock_repo)

    with pytest.raises(HTTPException) as exc:
        await service.create_ad(AdCreate(title="X", target_url="http://x", budget=1, duration=1, user_id=5))
    assert exc.value.status_code == 400
    assert exc.value.detail == "Referenced user does not exist"
    mock_repo.create_ad.assert_not_called()

@pytest.mark.asyncio
async def test_create_ad_without_owner_skips_lookup(mock_repo):
    mock_repo.create_ad.return_value = _ad()
    service = AdService(mock_repo)

    await service.create_ad(AdCreate(title="X", target_url="http://x", budget=1, duration=1))

    mock_repo.get_user.assert_not_called()
    data = mock_repo.create_ad.call_args.args[0]
    assert data["status"] == "pending"
    assert "impressions" not in data

@pytest.mark.asyncio
async def test_missing_ad_maps_to_404(mock_repo):
    mock_repo.get_ad.return_value = None
    mock_repo.update_ad.return_value = None
    mock_repo.delete_ad.return_value = False
    mock_repo.increment_ad_clicks.return_value = None
    mock_repo.increment_ad_impressions.return_value = None
    service = AdService(mock_repo)

    for call in (
        service.get_ad(1),
        service.update_ad(1, AdUpdate(status="active")),
        service.delete_ad(1),
        service.record_click(1),
        service.record_impression(1),
    ):
        with pytest.raises(HTTPException) as exc:
            await call
        assert exc.value.status_code == 404
        assert exc.value.detail == "Ad not found"

@pytest.mark.asyncio
async def test_update_passes_only_sent_fields(mock_repo):
    mock_repo.update_ad.return_value = _ad(status="paused")
    service = AdService(mock_repo)

    await service.update_ad(1, AdUpdate(status="paused", title=None, tags=None))

    ad_id, fields = mock_repo.update_ad.call_args.args
    assert ad_id == 1
    # title is required so a null is dropped, tags may be cleared
    assert fields == {"status": "paused", "tags": None}

@pytest.mark.asyncio
async def test_user_stats(mock_repo):
    mock_repo.get_ads_by_user_id.return_value = [
        _ad(id=1, status="active", impressions=150, clicks=9),
        _ad(id=2, status="paused", impressions=50, clicks=3),
        _ad(id=3, status="active"),
    ]
    service = AdService(mock_repo)

    stats = await service.user_stats(1)

    assert stats.total_ads == 3
    assert stats.active_ads == 2
    assert stats.total_impressions == 200
    assert stats.total_clicks == 12
    assert stats.ctr == 6

@pytest.mark.asyncio
async def test_user_stats_without_impressions(mock_repo):
    mock_repo.get_ads_by_user_id.return_value = []
    stats = await AdService(mock_repo).user_stats(1)
    assert stats.ctr == 0
    assert stats.total_ads == 0

def test_memory_backend_satisfies_repository_protocol():
    # Structural check: every protocol method exists on the backend
    missing = [
        name for name in dir(Repository)
        if not name.startswith("_") and not hasattr(InMemoryRepository, name)
    ]
    assert missing == []
