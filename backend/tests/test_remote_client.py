import json

import httpx
import pytest

from plansync.errors import NetworkError, PayloadError, RemoteStatusError
from plansync.remote import RemoteClient
from plansync.schemas import ExercisePlanPayload
from plansync.settings import Settings

def make_client(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://api.test")
    return RemoteClient(http)

def payload(plan_id="p1", order=1):
    return ExercisePlanPayload(id=plan_id, workout_id="w1", exercise_id="e1", order=order)

@pytest.mark.asyncio
async def test_upsert_puts_camel_case_list_and_returns_body():
    seen = []
    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[{"id": "p1", "workoutId": "w1", "exerciseId": "e1", "order": 1}])
    client = make_client(handler)
    body = await client.upsert([payload()], "/exercise-plans")
    assert body[0]["id"] == "p1"
    assert seen[0].method == "PUT"
    assert seen[0].url.path == "/exercise-plans"
    sent = json.loads(seen[0].content)
    assert sent == [{"id": "p1", "workoutId": "w1", "exerciseId": "e1", "order": 1, "updatedAt": None}]
    await client.aclose()

@pytest.mark.asyncio
async def test_delete_targets_item_url():
    seen = []
    def handler(request):
        seen.append(request)
        return httpx.Response(204)
    client = make_client(handler)
    await client.delete("p9", "/exercise-plans/")
    assert seen[0].method == "DELETE"
    assert seen[0].url.path == "/exercise-plans/p9"
    await client.aclose()

@pytest.mark.asyncio
async def test_error_status_maps_to_remote_status_error():
    client = make_client(lambda request: httpx.Response(503, text="maintenance"))
    with pytest.raises(RemoteStatusError) as exc:
        await client.delete("p1", "/exercise-plans")
    assert exc.value.status_code == 503
    assert exc.value.details["body"] == "maintenance"
    await client.aclose()

@pytest.mark.asyncio
async def test_transport_failure_maps_to_network_error():
    def handler(request):
        raise httpx.ConnectError("network unreachable", request=request)
    client = make_client(handler)
    with pytest.raises(NetworkError, match="network unreachable") as exc:
        await client.upsert([payload()], "/exercise-plans")
    assert isinstance(exc.value.cause, httpx.ConnectError)
    await client.aclose()

@pytest.mark.asyncio
async def test_timeout_maps_to_network_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)
    client = make_client(handler)
    with pytest.raises(NetworkError, match="timed out"):
        await client.delete("p1", "/exercise-plans")
    await client.aclose()

@pytest.mark.asyncio
async def test_non_json_body_is_payload_error():
    client = make_client(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(PayloadError):
        await client.upsert([payload()], "/exercise-plans")
    await client.aclose()

@pytest.mark.asyncio
async def test_default_http_client_uses_settings():
    client = RemoteClient(settings=Settings(API_BASE_URL="http://remote.test", API_TOKEN="tok"))
    assert client._http.base_url.host == "remote.test"
    assert client._http.headers["Authorization"] == "Bearer tok"
    await client.aclose()
