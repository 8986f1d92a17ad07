
import pytest
from httpx import AsyncClient

async def _register(client, key_pair, username="advertiser"):
    response = await client.post("/api/auth/register", json={
        "username": username,
        "password": "hunter22",
        "npub": key_pair.npub,
    })
    assert response.status_code == 201
    return response.json()

@pytest.mark.asyncio
async def test_ad_lifecycle(client: AsyncClient, ad_payload):
    # Create
    create_response = await client.post("/api/ads", json=ad_payload)
    assert create_response.status_code == 201
    ad = create_response.json()
    assert ad["impressions"] == 0
    assert ad["clicks"] == 0
    assert ad["status"] == "pending"
    assert ad["targetUrl"] == "http://x"
    assert ad["description"] == ""
    assert "createdAt" in ad

    # Two clicks
    for expected in (1, 2):
        click_response = await client.post(f"/api/ads/{ad['id']}/click")
        assert click_response.status_code == 200
        assert click_response.json() == {"clicks": expected}

    # Delete, then it is gone
    delete_response = await client.delete(f"/api/ads/{ad['id']}")
    assert delete_response.status_code == 204
    assert delete_response.content == b""

    get_response = await client.get(f"/api/ads/{ad['id']}")
    assert get_response.status_code == 404
    assert get_response.json()["message"] == "Ad not found"

    second_delete = await client.delete(f"/api/ads/{ad['id']}")
    assert second_delete.status_code == 404

@pytest.mark.asyncio
async def test_impressions(client: AsyncClient, ad_payload):
    ad = (await client.post("/api/ads", json=ad_payload)).json()

    for _ in range(3):
        response = await client.post(f"/api/ads/{ad['id']}/impression")
    assert response.json() == {"impressions": 3}

    fetched = (await client.get(f"/api/ads/{ad['id']}")).json()
    assert fetched["impressions"] == 3
    assert fetched["clicks"] == 0

@pytest.mark.asyncio
async def test_patch_updates_fields(client: AsyncClient, ad_payload):
    ad = (await client.post("/api/ads", json={**ad_payload, "tags": "bitcoin,nostr"})).json()

    response = await client.patch(f"/api/ads/{ad['id']}", json={"status": "active", "budget": 500})
    assert response.status_code == 200
    updated = response.json()
    assert updated["status"] == "active"
    assert updated["budget"] == 500
    assert updated["tags"] == "bitcoin,nostr"
    assert updated["title"] == "X"

    # Any status can follow any other
    response = await client.patch(f"/api/ads/{ad['id']}", json={"status": "pending"})
    assert response.json()["status"] == "pending"

@pytest.mark.asyncio
async def test_patch_missing_ad(client: AsyncClient):
    response = await client.patch("/api/ads/999", json={"status": "active"})
    assert response.status_code == 404

@pytest.mark.asyncio
async def test_patch_rejects_unknown_status(client: AsyncClient, ad_payload):
    ad = (await client.post("/api/ads", json=ad_payload)).json()
    response = await client.patch(f"/api/ads/{ad['id']}", json={"status": "deleted"})
    assert response.status_code == 400

@pytest.mark.asyncio
@pytest.mark.parametrize("method, path", [
    ("GET", "/api/ads/abc"),
    ("PATCH", "/api/ads/abc"),
    ("DELETE", "/api/ads/abc"),
    ("POST", "/api/ads/abc/impression"),
    ("POST", "/api/ads/abc/click"),
    ("GET", "/api/ads/user/abc"),
    ("GET", "/api/ads/3000000000"),
    ("PATCH", "/api/ads/3000000000"),
    ("DELETE", "/api/ads/3000000000"),
    ("POST", "/api/ads/3000000000/impression"),
    ("POST", "/api/ads/3000000000/click"),
    ("GET", "/api/ads/user/3000000000"),
    ("GET", "/api/ads/user/3000000000/stats"),
    ("GET", "/api/ads/0"),
    ("GET", "/api/ads/user/-1"),
])
async def test_bad_ids_are_rejected(client: AsyncClient, method, path):
    response = await client.request(method, path, json={})
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid data"
    assert body["errors"]

@pytest.mark.asyncio
async def test_create_ad_validation_errors_are_returned(client: AsyncClient):
    response = await client.post("/api/ads", json={"title": "No url", "budget": "lots"})
    assert response.status_code == 400
    fields = {tuple(error["loc"]) for error in response.json()["errors"]}
    assert ("body", "targetUrl") in fields
    assert ("body", "budget") in fields

@pytest.mark.asyncio
@pytest.mark.parametrize("field, value", [
    ("budget", 5000000000),
    ("duration", 2**31),
    ("userId", 3000000000),
])
async def test_create_ad_rejects_out_of_range_numbers(client: AsyncClient, repository, ad_payload, field, value):
    response = await client.post("/api/ads", json={**ad_payload, field: value})
    assert response.status_code == 400
    assert [error["loc"] for error in response.json()["errors"]] == [["body", field]]
    assert await repository.get_all_ads() == []

@pytest.mark.asyncio
async def test_patch_rejects_out_of_range_budget(client: AsyncClient, ad_payload):
    ad = (await client.post("/api/ads", json=ad_payload)).json()
    response = await client.patch(f"/api/ads/{ad['id']}", json={"budget": 5000000000})
    assert response.status_code == 400

    unchanged = await client.get(f"/api/ads/{ad['id']}")
    assert unchanged.json()["budget"] == ad_payload["budget"]

@pytest.mark.asyncio
async def test_create_ad_with_unknown_owner(client: AsyncClient, ad_payload):
    response = await client.post("/api/ads", json={**ad_payload, "userId": 77})
    assert response.status_code == 400
    assert response.json()["message"] == "Referenced user does not exist"

@pytest.mark.asyncio
async def test_list_ads_by_owner(client: AsyncClient, ad_payload, key_pair):
    from adboard.identity.keys import generate_key_pair

    owner = await _register(client, key_pair, "owner")
    other = await _register(client, generate_key_pair(), "other")

    mine = [
        (await client.post("/api/ads", json={**ad_payload, "userId": owner["id"], "title": f"Mine {i}"})).json()
        for i in range(2)
    ]
    await client.post("/api/ads", json={**ad_payload, "userId": other["id"]})

    response = await client.get(f"/api/ads/user/{owner['id']}")
    assert response.status_code == 200
    assert {ad["id"] for ad in response.json()} == {ad["id"] for ad in mine}
    assert all(ad["userId"] == owner["id"] for ad in response.json())

    all_ads = (await client.get("/api/ads")).json()
    assert len(all_ads) == 3

@pytest.mark.asyncio
async def test_user_stats(client: AsyncClient, ad_payload, key_pair):
    owner = await _register(client, key_pair)
    ad = (await client.post("/api/ads", json={**ad_payload, "userId": owner["id"], "status": "active"})).json()

    for _ in range(4):
        await client.post(f"/api/ads/{ad['id']}/impression")
    await client.post(f"/api/ads/{ad['id']}/click")

    response = await client.get(f"/api/ads/user/{owner['id']}/stats")
    assert response.status_code == 200
    assert response.json() == {
        "totalAds": 1,
        "activeAds": 1,
        "totalImpressions": 4,
        "totalClicks": 1,
        "ctr": 25,
    }
