"""Tests for the formulation HTTP API: generate, failures, saved list, inquiries, options."""

import asyncio
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fastapi.testclient import TestClient

from formulab.api.server import create_app
from formulab.errors import SchemaViolationError, TransportError
from formulab.models.formulation import Formulation
from formulab.session import GENERATION_FAILED_MESSAGE
from formulab.store import SavedFormulationStore
from sample_data import SAMPLE_FORMULATION, SAMPLE_REQUEST


async def fake_generator(request):
    return Formulation.model_validate({**SAMPLE_FORMULATION, "productName": request.product_name})


class TestFormulationRoutes(unittest.TestCase):
    def setUp(self):
        self.store = SavedFormulationStore()
        self.app = create_app(generator=fake_generator, store=self.store)
        self.client = TestClient(self.app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def test_health(self):
        r = self.client.get("/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"status": "ok"})

    def test_options(self):
        r = self.client.get("/options")
        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertIn("美容液", data["productTypes"])
        self.assertEqual(len(data["skinTypes"]), 5)
        self.assertIn("UVカット", data["effects"])
        self.assertEqual(data["inquiryActions"], ["相談", "サンプル依頼", "詳細見積もり"])

    def test_generate_returns_camel_case_formulation(self):
        r = self.client.post("/formulations", json=SAMPLE_REQUEST)
        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertEqual(data["productName"], SAMPLE_REQUEST["productName"])
        self.assertEqual(data["phases"][0]["ingredients"][0]["percentage"], 85.5)
        state = self.client.get("/formulations/current").json()
        self.assertFalse(state["is_loading"])
        self.assertIsNone(state["error"])
        self.assertEqual(state["formulation"]["productName"], SAMPLE_REQUEST["productName"])

    def test_invalid_request_is_422(self):
        r = self.client.post("/formulations", json={**SAMPLE_REQUEST, "email": "nope"})
        self.assertEqual(r.status_code, 422)
        r = self.client.post("/formulations", json={**SAMPLE_REQUEST, "productType": "香水"})
        self.assertEqual(r.status_code, 422)

    def test_sessions_are_isolated(self):
        self.client.post("/formulations", json=SAMPLE_REQUEST, headers={"X-Session-Id": "a"})
        state_b = self.client.get("/formulations/current", headers={"X-Session-Id": "b"}).json()
        self.assertIsNone(state_b["formulation"])
        state_a = self.client.get("/formulations/current", headers={"X-Session-Id": "a"}).json()
        self.assertIsNotNone(state_a["formulation"])

    def test_save_list_select_delete(self):
        r = self.client.post("/formulations/saved")
        self.assertEqual(r.status_code, 409)

        self.client.post("/formulations", json=SAMPLE_REQUEST)
        r = self.client.post("/formulations/saved")
        self.assertEqual(r.status_code, 201)
        saved_id = r.json()["id"]
        self.assertIn("createdAt", r.json())

        listed = self.client.get("/formulations/saved").json()
        self.assertEqual([e["id"] for e in listed], [saved_id])

        r = self.client.get(f"/formulations/saved/{saved_id}", headers={"X-Session-Id": "other"})
        self.assertEqual(r.status_code, 200)
        state = self.client.get("/formulations/current", headers={"X-Session-Id": "other"}).json()
        self.assertEqual(state["current_saved_id"], saved_id)

        r = self.client.delete(f"/formulations/saved/{saved_id}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(self.client.get("/formulations/saved").json(), [])
        self.assertEqual(self.client.delete(f"/formulations/saved/{saved_id}").status_code, 404)
        self.assertEqual(self.client.get(f"/formulations/saved/{saved_id}").status_code, 404)

    def test_inquiry_requires_formulation(self):
        r = self.client.post(
            "/inquiries",
            json={"action": "相談", "companyName": "A社", "contactName": "山田"},
            headers={"X-Session-Id": "fresh"},
        )
        self.assertEqual(r.status_code, 409)

    def test_inquiry_logged_with_default_message(self):
        self.client.post("/formulations", json=SAMPLE_REQUEST)
        r = self.client.post(
            "/inquiries",
            json={"action": "詳細見積もり", "companyName": "A社", "contactName": "山田"},
        )
        self.assertEqual(r.status_code, 202)
        body = r.json()
        self.assertEqual(body["status"], "logged")
        self.assertEqual(body["title"], "詳細お見積もり依頼")
        self.assertEqual(
            body["message"],
            f"製品名「{SAMPLE_REQUEST['productName']}」について、詳細見積もりを希望します。",
        )

    def test_inquiry_missing_company_is_422(self):
        self.client.post("/formulations", json=SAMPLE_REQUEST)
        r = self.client.post("/inquiries", json={"action": "相談", "companyName": "", "contactName": "山田"})
        self.assertEqual(r.status_code, 422)


class TestGenerationFailures(unittest.TestCase):
    def _client(self, error: Exception) -> TestClient:
        async def failing_generator(request):
            raise error

        app = create_app(generator=failing_generator, store=SavedFormulationStore())
        return TestClient(app)

    def test_schema_violation_is_502_with_generic_message(self):
        client = self._client(SchemaViolationError("bad", violations=["phases: Field required"]))
        r = client.post("/formulations", json=SAMPLE_REQUEST)
        self.assertEqual(r.status_code, 502)
        self.assertEqual(r.json(), {"detail": GENERATION_FAILED_MESSAGE, "error_kind": "schema_violation"})
        state = client.get("/formulations/current").json()
        self.assertFalse(state["is_loading"])
        self.assertEqual(state["error"], GENERATION_FAILED_MESSAGE)

    def test_transport_error_is_502(self):
        client = self._client(TransportError("timeout"))
        r = client.post("/formulations", json=SAMPLE_REQUEST)
        self.assertEqual(r.status_code, 502)
        self.assertEqual(r.json()["error_kind"], "transport")


class TestInFlightGuard(unittest.TestCase):
    def test_concurrent_submit_rejected_with_409(self):
        async def run():
            import httpx

            release = asyncio.Event()
            started = asyncio.Event()

            async def slow_generator(request):
                started.set()
                await release.wait()
                return Formulation.model_validate(SAMPLE_FORMULATION)

            app = create_app(generator=slow_generator, store=SavedFormulationStore())
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                first = asyncio.create_task(client.post("/formulations", json=SAMPLE_REQUEST))
                await started.wait()
                second = await client.post("/formulations", json=SAMPLE_REQUEST)
                release.set()
                first_response = await first
            return first_response.status_code, second.status_code

        first_status, second_status = asyncio.run(run())
        self.assertEqual(first_status, 200)
        self.assertEqual(second_status, 409)


class TestSessionBound(unittest.TestCase):
    def test_idle_sessions_evicted_least_recent_first(self):
        app = create_app(generator=fake_generator, store=SavedFormulationStore(), max_sessions=2)
        client = TestClient(app)
        for sid in ("a", "b"):
            client.post("/formulations", json=SAMPLE_REQUEST, headers={"X-Session-Id": sid})
        # touch "a" so "b" becomes least recently used
        client.get("/formulations/current", headers={"X-Session-Id": "a"})
        client.get("/formulations/current", headers={"X-Session-Id": "c"})

        sessions = app.state.sessions
        self.assertEqual(len(sessions), 2)
        self.assertIn("a", sessions)
        self.assertIn("c", sessions)
        self.assertNotIn("b", sessions)
        state_b = client.get("/formulations/current", headers={"X-Session-Id": "b"}).json()
        self.assertIsNone(state_b["formulation"])

    def test_many_distinct_ids_stay_bounded(self):
        app = create_app(generator=fake_generator, store=SavedFormulationStore(), max_sessions=5)
        client = TestClient(app)
        for i in range(50):
            client.get("/formulations/current", headers={"X-Session-Id": f"client-{i}"})
        self.assertEqual(len(app.state.sessions), 5)

    def test_loading_session_never_evicted(self):
        async def run():
            import httpx

            release = asyncio.Event()
            started = asyncio.Event()

            async def slow_generator(request):
                started.set()
                await release.wait()
                return Formulation.model_validate(SAMPLE_FORMULATION)

            app = create_app(generator=slow_generator, store=SavedFormulationStore(), max_sessions=1)
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                busy = asyncio.create_task(
                    client.post("/formulations", json=SAMPLE_REQUEST, headers={"X-Session-Id": "busy"})
                )
                await started.wait()
                await client.get("/formulations/current", headers={"X-Session-Id": "other"})
                self.assertIn("busy", app.state.sessions)
                self.assertIn("other", app.state.sessions)
                release.set()
                response = await busy
            return response.status_code

        self.assertEqual(asyncio.run(run()), 200)


if __name__ == "__main__":
    unittest.main()
