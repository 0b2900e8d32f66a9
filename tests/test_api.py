"""
HTTP tests for the portal API, run in-process against a fresh database.
"""
import pytest

pytestmark = pytest.mark.asyncio

CONTACT = {"fullName": "A B", "mobileNumber": "+911234567890"}


async def submit(client, grievance_payload, **extra):
    resp = await client.post("/api/grievances", json={**grievance_payload, **CONTACT, **extra})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def register(client, username, role="citizen", password="s3cret-pass", **extra):
    resp = await client.post(
        "/api/users",
        json={
            "username": username,
            "password": password,
            "fullName": username.title(),
            "mobileNumber": "+919812345678",
            "role": role,
            **extra,
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def login(client, username, password="s3cret-pass"):
    resp = await client.post("/api/auth/login", data={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


class TestHealthCheck:
    async def test_health(self, client):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestGrievanceLifecycle:
    async def test_submit_accept_resolve_verify(self, client, grievance_payload):
        created = await submit(client, grievance_payload, category="Water Supply")
        assert created["status"] == "pending"
        assert created["grievanceNumber"].startswith("GRV-")
        grievance_id = created["id"]

        resp = await client.post(
            f"/api/grievances/{grievance_id}/accept", json={"resolutionTimeline": 7}
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == "in_progress"
        assert resp.json()["resolutionTimeline"] == 7
        assert resp.json()["dueDate"] is not None

        resp = await client.patch(
            f"/api/grievances/{grievance_id}/status",
            json={"status": "resolved", "resolutionNotes": "New pump installed"},
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == "pending_verification"
        assert resp.json()["resolutionNotes"] == "New pump installed"
        assert resp.json()["verificationDeadline"] is not None

        resp = await client.post(
            "/api/verifications",
            json={"grievanceId": grievance_id, "verificationType": "verify", "status": "verified"},
        )
        assert resp.status_code == 201, resp.text
        assert resp.json()["grievanceId"] == grievance_id

        resp = await client.get(f"/api/grievances/{grievance_id}")
        assert resp.status_code == 200
        assert resp.json()["status"] == "resolved"

        resp = await client.get(f"/api/verifications/{grievance_id}")
        assert [v["status"] for v in resp.json()] == ["verified"]

        resp = await client.get(f"/api/blockchain/{grievance_id}")
        assert resp.status_code == 200
        assert [r["eventType"] for r in resp.json()] == [
            "GRIEVANCE_SUBMITTED",
            "GRIEVANCE_ACCEPTED",
            "RESOLUTION_SUBMITTED",
            "VERIFICATION_RECORDED",
        ]
        assert [r["blockNumber"] for r in resp.json()] == ["1", "2", "3", "4"]

    async def test_dispute_reopens_grievance(self, client, grievance_payload):
        grievance_id = (await submit(client, grievance_payload))["id"]
        await client.post(f"/api/grievances/{grievance_id}/accept", json={"resolutionTimeline": 3})
        await client.patch(f"/api/grievances/{grievance_id}/status", json={"status": "resolved"})

        resp = await client.post(
            "/api/verifications",
            json={
                "grievanceId": grievance_id,
                "verificationType": "dispute",
                "status": "disputed",
                "comments": "Pump is still dry",
            },
        )
        assert resp.status_code == 201

        grievance = (await client.get(f"/api/grievances/{grievance_id}")).json()
        assert grievance["status"] == "in_progress"
        assert grievance["resolutionTimeline"] == 3
        assert grievance["assignedTo"] is not None

    async def test_anonymous_submitter_is_reused_by_mobile_number(self, client, grievance_payload):
        first = await submit(client, grievance_payload)
        second = await submit(client, grievance_payload)

        assert first["userId"] == second["userId"]
        assert first["grievanceNumber"] != second["grievanceNumber"]

    async def test_list_and_assigned_views(self, client, grievance_payload):
        pending = await submit(client, grievance_payload)
        awaiting = await submit(client, grievance_payload)
        await client.post(f"/api/grievances/{awaiting['id']}/accept", json={"resolutionTimeline": 2})
        await client.patch(f"/api/grievances/{awaiting['id']}/status", json={"status": "resolved"})

        everything = (await client.get("/api/grievances")).json()
        assigned = (await client.get("/api/grievances/assigned")).json()

        assert {g["id"] for g in everything} == {pending["id"], awaiting["id"]}
        assert [g["id"] for g in assigned] == [pending["id"]]


class TestGrievanceErrors:
    async def test_missing_contact_details(self, client, grievance_payload):
        resp = await client.post("/api/grievances", json={**grievance_payload, "fullName": "A B"})

        assert resp.status_code == 400
        assert resp.json()["details"][0]["field"] == "mobileNumber"

    async def test_mobile_number_must_be_a_phone_number(self, client, grievance_payload):
        accepted = await submit(client, grievance_payload)
        await client.post(f"/api/grievances/{accepted['id']}/accept", json={"resolutionTimeline": 2})

        resp = await client.post(
            "/api/grievances",
            json={**grievance_payload, "fullName": "A B", "mobileNumber": "panchayat-officer"},
        )

        assert resp.status_code == 400
        assert resp.json()["details"][0]["field"] == "mobileNumber"
        officer_id = (await client.get(f"/api/grievances/{accepted['id']}")).json()["assignedTo"]
        owners = {g["userId"] for g in (await client.get("/api/grievances")).json()}
        assert officer_id not in owners

    async def test_invalid_fields_are_listed(self, client, grievance_payload):
        resp = await client.post(
            "/api/grievances",
            json={**grievance_payload, **CONTACT, "title": "Short", "category": "Roads"},
        )

        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "Validation failed"
        assert {d["field"] for d in body["details"]} == {"title", "category"}

    async def test_unknown_grievance(self, client):
        resp = await client.get("/api/grievances/does-not-exist")

        assert resp.status_code == 404
        assert resp.json() == {"error": "Grievance not found"}

    async def test_accept_requires_timeline(self, client, grievance_payload):
        grievance_id = (await submit(client, grievance_payload))["id"]

        missing = await client.post(f"/api/grievances/{grievance_id}/accept", json={})
        zero = await client.post(
            f"/api/grievances/{grievance_id}/accept", json={"resolutionTimeline": 0}
        )

        assert missing.status_code == 400
        assert zero.status_code == 400
        grievance = (await client.get(f"/api/grievances/{grievance_id}")).json()
        assert grievance["status"] == "pending"

    async def test_accept_unknown_grievance(self, client):
        resp = await client.post("/api/grievances/does-not-exist/accept", json={"resolutionTimeline": 5})

        assert resp.status_code == 404

    async def test_accept_twice(self, client, grievance_payload):
        grievance_id = (await submit(client, grievance_payload))["id"]
        await client.post(f"/api/grievances/{grievance_id}/accept", json={"resolutionTimeline": 5})

        resp = await client.post(
            f"/api/grievances/{grievance_id}/accept", json={"resolutionTimeline": 9}
        )

        assert resp.status_code == 409

    async def test_status_is_required(self, client, grievance_payload):
        grievance_id = (await submit(client, grievance_payload))["id"]

        resp = await client.patch(f"/api/grievances/{grievance_id}/status", json={})

        assert resp.status_code == 400
        assert resp.json()["error"] == "Status is required"

    async def test_unknown_status(self, client, grievance_payload):
        grievance_id = (await submit(client, grievance_payload))["id"]

        resp = await client.patch(f"/api/grievances/{grievance_id}/status", json={"status": "closed"})

        assert resp.status_code == 400

    async def test_illegal_transition(self, client, grievance_payload):
        grievance_id = (await submit(client, grievance_payload))["id"]

        resp = await client.patch(f"/api/grievances/{grievance_id}/status", json={"status": "resolved"})

        assert resp.status_code == 409
        assert "pending" in resp.json()["error"]

    async def test_verification_window_requires_resolution(self, client, grievance_payload):
        grievance_id = (await submit(client, grievance_payload))["id"]
        await client.post(f"/api/grievances/{grievance_id}/accept", json={"resolutionTimeline": 4})

        resp = await client.patch(
            f"/api/grievances/{grievance_id}/status", json={"status": "pending_verification"}
        )
        verify = await client.post(
            "/api/verifications",
            json={"grievanceId": grievance_id, "verificationType": "verify", "status": "verified"},
        )

        assert resp.status_code == 409
        assert verify.status_code == 409
        grievance = (await client.get(f"/api/grievances/{grievance_id}")).json()
        assert grievance["status"] == "in_progress"
        assert grievance["resolvedAt"] is None
        assert grievance["verificationDeadline"] is None

    async def test_status_of_unknown_grievance(self, client):
        resp = await client.patch("/api/grievances/does-not-exist/status", json={"status": "resolved"})

        assert resp.status_code == 404

    async def test_verification_of_unknown_grievance(self, client):
        resp = await client.post(
            "/api/verifications",
            json={"grievanceId": "does-not-exist", "verificationType": "verify", "status": "verified"},
        )

        assert resp.status_code == 404

    async def test_verification_before_resolution(self, client, grievance_payload):
        grievance_id = (await submit(client, grievance_payload))["id"]

        resp = await client.post(
            "/api/verifications",
            json={"grievanceId": grievance_id, "verificationType": "verify", "status": "verified"},
        )

        assert resp.status_code == 409
        assert (await client.get(f"/api/verifications/{grievance_id}")).json() == []


class TestIdentity:
    async def test_default_officer_is_created_once(self, client, grievance_payload):
        first = (await submit(client, grievance_payload))["id"]
        second = (await submit(client, grievance_payload))["id"]

        a = await client.post(f"/api/grievances/{first}/accept", json={"resolutionTimeline": 5})
        b = await client.post(f"/api/grievances/{second}/accept", json={"resolutionTimeline": 5})

        assert a.json()["assignedTo"] == b.json()["assignedTo"]

    async def test_anonymous_access_disabled(self, client, grievance_payload, lifecycle_settings):
        grievance_id = (await submit(client, grievance_payload))["id"]
        lifecycle_settings.ALLOW_DEFAULT_IDENTITIES = False

        submit_resp = await client.post("/api/grievances", json={**grievance_payload, **CONTACT})
        accept_resp = await client.post(
            f"/api/grievances/{grievance_id}/accept", json={"resolutionTimeline": 5}
        )
        verify_resp = await client.post(
            "/api/verifications",
            json={"grievanceId": grievance_id, "verificationType": "verify", "status": "verified"},
        )

        assert submit_resp.status_code == 401
        assert accept_resp.status_code == 401
        assert verify_resp.status_code == 401
        assert accept_resp.headers["www-authenticate"] == "Bearer"

    async def test_official_token_accepts_as_that_user(
        self, client, grievance_payload, lifecycle_settings
    ):
        grievance_id = (await submit(client, grievance_payload))["id"]
        lifecycle_settings.ALLOW_DEFAULT_IDENTITIES = False
        officer = await register(client, "gram.sevak", role="official")
        headers = await login(client, "gram.sevak")

        resp = await client.post(
            f"/api/grievances/{grievance_id}/accept",
            json={"resolutionTimeline": 10},
            headers=headers,
        )

        assert resp.status_code == 200, resp.text
        assert resp.json()["assignedTo"] == officer["id"]

    async def test_citizen_token_cannot_accept(self, client, grievance_payload):
        grievance_id = (await submit(client, grievance_payload))["id"]
        await register(client, "kisan")
        headers = await login(client, "kisan")

        resp = await client.post(
            f"/api/grievances/{grievance_id}/accept",
            json={"resolutionTimeline": 10},
            headers=headers,
        )

        assert resp.status_code == 403

    async def test_citizen_token_owns_submission(self, client, grievance_payload, lifecycle_settings):
        lifecycle_settings.ALLOW_DEFAULT_IDENTITIES = False
        citizen = await register(client, "kisan")
        headers = await login(client, "kisan")

        resp = await client.post(
            "/api/grievances", json={**grievance_payload, **CONTACT}, headers=headers
        )

        assert resp.status_code == 201, resp.text
        assert resp.json()["userId"] == citizen["id"]

    async def test_invalid_token_is_rejected(self, client, grievance_payload):
        resp = await client.post(
            "/api/grievances",
            json={**grievance_payload, **CONTACT},
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert resp.status_code == 401


class TestUsers:
    async def test_register_hides_password(self, client):
        user = await register(client, "sarpanch", role="official", email="sarpanch.rampur@gmail.com")

        assert user["username"] == "sarpanch"
        assert user["role"] == "official"
        assert user["email"] == "sarpanch.rampur@gmail.com"
        assert "password" not in user
        assert "passwordHash" not in user

    async def test_duplicate_username(self, client):
        await register(client, "sarpanch")

        resp = await client.post(
            "/api/users",
            json={
                "username": "sarpanch",
                "password": "another-pass",
                "fullName": "Someone Else",
                "mobileNumber": "+919800000000",
            },
        )

        assert resp.status_code == 400
        assert resp.json()["error"] == "Username already registered"

    async def test_invalid_registration(self, client):
        resp = await client.post("/api/users", json={"username": "ab", "password": "x"})

        assert resp.status_code == 400
        fields = {d["field"] for d in resp.json()["details"]}
        assert {"username", "password", "fullName", "mobileNumber"} <= fields

    async def test_wrong_password(self, client):
        await register(client, "sarpanch")

        resp = await client.post(
            "/api/auth/login", data={"username": "sarpanch", "password": "wrong-pass"}
        )

        assert resp.status_code == 401
        assert resp.json() == {"error": "Incorrect username or password"}
