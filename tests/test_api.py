import uuid

from sqlalchemy.exc import SQLAlchemyError

from apps.moderation import resolution
from models import Report, Sanction, User


async def test_resolve_report_endpoint(world, api_client, auth_headers, fetch):
    response = await api_client.put(
        f"/admin/reports/{world.post_report_id}",
        json={"action": "resolve_ban", "resolution_notes": "spam"},
        headers=auth_headers(world.admin),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"] == {"report_id": str(world.post_report_id), "action": "resolve_ban", "status": "resolved"}
    assert "timestamp" in body
    assert (await fetch(User, world.author_id)).is_active is False


async def test_second_resolution_is_not_found(world, api_client, auth_headers):
    url = f"/admin/reports/{world.post_report_id}"
    first = await api_client.put(url, json={"action": "dismiss"}, headers=auth_headers(world.admin))
    second = await api_client.put(url, json={"action": "resolve_delete"}, headers=auth_headers(world.admin))

    assert first.json()["data"]["status"] == "dismissed"
    assert second.status_code == 404
    assert second.json()["error"]["code"] == "NOT_FOUND"


async def test_missing_or_forged_actor_headers(world, api_client, auth_headers):
    url = f"/admin/reports/{world.post_report_id}"
    missing = await api_client.put(url, json={"action": "dismiss"})
    forged = dict(auth_headers(world.member), **{"X-Actor-Role": "admin"})
    tampered = await api_client.put(url, json={"action": "dismiss"}, headers=forged)

    assert missing.status_code == 401
    assert missing.json()["error"]["code"] == "UNAUTHENTICATED"
    assert tampered.status_code == 401


async def test_member_is_unauthorized(world, api_client, auth_headers, fetch):
    response = await api_client.put(
        f"/admin/reports/{world.post_report_id}",
        json={"action": "dismiss"},
        headers=auth_headers(world.member),
    )

    assert response.status_code == 403
    assert response.json() == {"error": {"code": "UNAUTHORIZED", "message": "Admin access required"}}
    assert (await fetch(Report, world.post_report_id)).status == "pending"


async def test_invalid_action_envelope(world, api_client, auth_headers):
    response = await api_client.put(
        f"/admin/reports/{world.post_report_id}",
        json={"action": "ban_forever"},
        headers=auth_headers(world.admin),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ACTION"


async def test_database_failure_is_internal_error(world, api_client, auth_headers, fetch, monkeypatch):
    async def failing_apply_sanction(*args, **kwargs):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(resolution, "apply_sanction", failing_apply_sanction)

    response = await api_client.put(
        f"/admin/reports/{world.post_report_id}",
        json={"action": "resolve_warn"},
        headers=auth_headers(world.admin),
    )

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_ERROR"
    assert (await fetch(Report, world.post_report_id)).status == "pending"


async def test_moderation_queue_endpoint(world, api_client, auth_headers):
    response = await api_client.get("/admin/reports", params={"limit": 2}, headers=auth_headers(world.admin))

    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 2
    assert body["pagination"]["total"] == 3
    assert body["pagination"]["has_next"] is True
    assert body["data"][0]["id"] == str(world.admin_post_report_id)


async def test_report_detail_endpoint(world, api_client, auth_headers):
    response = await api_client.get(f"/admin/reports/{world.comment_report_id}", headers=auth_headers(world.admin))

    data = response.json()["data"]
    assert data["content_type"] == "comment"
    assert data["content"]["container_id"] == str(world.post_id)
    assert data["reporter_username"] == "reporter"

    missing = await api_client.get(f"/admin/reports/{uuid.uuid4()}", headers=auth_headers(world.admin))
    assert missing.status_code == 404


async def test_create_sanction_endpoint(world, api_client, auth_headers, count):
    url = f"/admin/users/{world.author_id}/sanctions"
    created = await api_client.post(
        url,
        json={"type": "temporary_ban", "reason": "spam", "duration": "24"},
        headers=auth_headers(world.admin),
    )
    bad_duration = await api_client.post(
        url,
        json={"type": "temporary_ban", "reason": "spam", "duration": "abc"},
        headers=auth_headers(world.admin),
    )
    too_long = await api_client.post(
        url,
        json={"type": "temporary_ban", "reason": "spam", "duration": "100000000"},
        headers=auth_headers(world.admin),
    )
    self_sanction = await api_client.post(
        f"/admin/users/{world.admin.id}/sanctions",
        json={"type": "warning", "reason": "test"},
        headers=auth_headers(world.admin),
    )

    assert created.status_code == 201
    assert created.json()["data"]["type"] == "temporary_ban"
    assert created.json()["data"]["expires_at"] is not None
    assert bad_duration.status_code == 400
    assert bad_duration.json()["error"]["code"] == "INVALID_DURATION"
    assert too_long.status_code == 400
    assert too_long.json()["error"]["code"] == "INVALID_DURATION"
    assert self_sanction.json()["error"]["code"] == "SELF_SANCTION"
    assert await count(Sanction) == 1


async def test_user_detail_and_update_endpoints(world, api_client, auth_headers):
    await api_client.post(
        f"/admin/users/{world.author_id}/sanctions",
        json={"type": "warning", "reason": "language"},
        headers=auth_headers(world.admin),
    )

    detail = await api_client.get(f"/admin/users/{world.author_id}", headers=auth_headers(world.admin))
    data = detail.json()["data"]
    assert data["progress"]["level"] == 3
    assert data["stats"] == {"post_count": 1, "comment_count": 1, "reports_made": 0, "reports_received": 2}
    assert [s["moderator_username"] for s in data["sanctions"]] == ["a1"]

    updated = await api_client.put(
        f"/admin/users/{world.author_id}", json={"xp": 420}, headers=auth_headers(world.admin)
    )
    assert updated.json()["data"]["level"] == 5

    demotion = await api_client.put(
        f"/admin/users/{world.admin.id}", json={"role": "member"}, headers=auth_headers(world.admin)
    )
    assert demotion.status_code == 400
    assert demotion.json()["error"]["code"] == "SELF_DEMOTION"

    history = await api_client.get(f"/admin/users/{world.author_id}/sanctions", headers=auth_headers(world.admin))
    assert [s["reason"] for s in history.json()["data"]] == ["language"]


async def test_level_endpoint(api_client):
    response = await api_client.get("/gamification/level", params={"xp": 250})
    invalid = await api_client.get("/gamification/level", params={"xp": -1})

    assert response.json()["data"]["level"] == 3
    assert invalid.status_code == 422
    assert invalid.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_health_and_metrics(api_client):
    assert (await api_client.get("/health/")).json() == {"status": "healthy"}
    metrics = await api_client.get("/metrics")
    assert metrics.status_code == 200
    assert "api_request_duration_seconds" in metrics.text


async def test_db_health_reports_queue_depth(world, api_client):
    response = await api_client.get("/health/db")

    assert response.json() == {"status": "healthy", "database": "connected", "pending_reports": 3}


async def test_openapi_schema_served_outside_production(api_client):
    response = await api_client.get("/openapi.json")

    assert response.status_code == 200
    assert "/admin/reports/{report_id}" in response.json()["paths"]


async def test_user_list_endpoint(world, api_client, auth_headers):
    response = await api_client.get(
        "/admin/users", params={"search": "u1", "is_active": "true"}, headers=auth_headers(world.admin)
    )
    sorted_page = await api_client.get(
        "/admin/users",
        params={"sort_by": "username", "sort_order": "ASC", "limit": 3},
        headers=auth_headers(world.admin),
    )
    bad_sort = await api_client.get("/admin/users", params={"sort_by": "email"}, headers=auth_headers(world.admin))

    body = response.json()
    assert [(u["username"], u["post_count"]) for u in body["data"]] == [("u1", 1)]
    assert body["pagination"]["total"] == 1
    assert [u["username"] for u in sorted_page.json()["data"]] == ["a1", "a2", "reporter"]
    assert sorted_page.json()["pagination"]["has_next"] is True
    assert bad_sort.status_code == 400
    assert bad_sort.json()["error"]["code"] == "VALIDATION_ERROR"
