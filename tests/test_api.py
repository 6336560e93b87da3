"""HTTP-level tests for the chat, calculate and health endpoints."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest
from fastapi.testclient import TestClient

from taxadvisor.api.deps import get_chat_orchestrator
from taxadvisor.app import app
from taxadvisor.configs.system import ChatConfig, LLMConfig
from taxadvisor.core.chat import ChatOrchestrator
from taxadvisor.infra.db import get_session_store

DISCLAIMER = ChatConfig().disclaimer


@pytest.fixture
def client():
    # Lifespan is not entered: no database engine is created.
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def use_model(scripted_model):
    """Serve chat requests with a scripted model and no session store."""

    def install(*responses, api_key="test-key"):
        llm = scripted_model(*responses) if responses else None
        orchestrator = ChatOrchestrator(
            None, ChatConfig(), LLMConfig(api_key=api_key), llm=llm
        )
        app.dependency_overrides[get_chat_orchestrator] = lambda: orchestrator
        return llm

    return install


def _openai_error(cls, status_code: int, message: str):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status_code, request=request)
    return cls(message, response=response, body=None)


class TestChatEndpoint:
    def test_reply_shape(self, client, use_model):
        use_model("You can deduct gifts to qualified charities.")

        response = client.post("/api/chat", json={"message": "Can I deduct gifts?"})

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"sessionId", "message"}
        assert set(body["message"]) == {"id", "role", "content", "timestamp"}
        assert body["message"]["role"] == "assistant"
        assert body["message"]["content"].endswith(DISCLAIMER)

    def test_session_id_is_forwarded(self, client):
        orchestrator = MagicMock()
        orchestrator.reply = AsyncMock(
            return_value={
                "sessionId": "sess_abc",
                "message": {
                    "id": "msg_1",
                    "role": "assistant",
                    "content": "ok",
                    "timestamp": "2024-04-15T12:00:00Z",
                },
            }
        )
        app.dependency_overrides[get_chat_orchestrator] = lambda: orchestrator

        response = client.post(
            "/api/chat", json={"message": "again", "sessionId": "sess_abc"}
        )

        assert response.status_code == 200
        orchestrator.reply.assert_awaited_once_with("again", "sess_abc")

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"message": ""},
            {"message": "   "},
            {"message": 7},
            {"message": "x" * 5000},
        ],
    )
    def test_invalid_message(self, client, use_model, payload):
        use_model("unused")

        response = client.post("/api/chat", json=payload)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    def test_malformed_body(self, client, use_model):
        use_model("unused")

        response = client.post(
            "/api/chat",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    def test_missing_credentials(self, client, use_model, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        use_model(api_key="")

        response = client.post("/api/chat", json={"message": "Hi"})

        assert response.status_code == 500
        assert response.json()["code"] == "CONFIGURATION_ERROR"

    def test_rejected_credentials(self, client, use_model):
        use_model(_openai_error(openai.AuthenticationError, 401, "Invalid API key"))

        response = client.post("/api/chat", json={"message": "Hi"})

        assert response.status_code == 500
        assert response.json()["code"] == "CONFIGURATION_ERROR"

    def test_quota_exhausted(self, client, use_model):
        use_model(_openai_error(openai.RateLimitError, 429, "insufficient_quota"))

        response = client.post("/api/chat", json={"message": "Hi"})

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "30"
        assert response.json()["code"] == "RATE_LIMITED"

    def test_other_model_failure(self, client, use_model):
        use_model(RuntimeError("socket closed"))

        response = client.post("/api/chat", json={"message": "Hi"})

        assert response.status_code == 500
        assert response.json() == {
            "detail": "Internal server error",
            "code": "UPSTREAM_ERROR",
        }


class TestCalculateEndpoint:
    def test_estimate(self, client):
        response = client.post(
            "/api/calculate",
            json={
                "type": "estimate_savings",
                "data": {
                    "annualIncome": "100000",
                    "currentTaxRate": "24",
                    "donationAmount": "5000",
                    "filingStatus": "single",
                },
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["estimatedTaxSavings"] == 1200.00
        assert body["netCostOfDonation"] == 3800.00
        assert body["marginalTaxRate"] == 24

    def test_evaluate(self, client):
        response = client.post(
            "/api/calculate",
            json={
                "type": "evaluate_donation",
                "data": {
                    "targetTaxSavings": "2200",
                    "annualIncome": "100000",
                    "filingStatus": "single",
                    "currentDeductions": "10000",
                },
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["recommendedDonationAmount"] == 10000.00
        assert body["netCostToYou"] == 7800.00
        assert "newTaxLiability" in body

    @pytest.mark.parametrize(
        "payload",
        [
            {"type": "estimate_savings", "data": {"annualIncome": "abc"}},
            {"type": "bogus", "data": {}},
            {
                "type": "estimate_savings",
                "data": {
                    "annualIncome": "100000",
                    "currentTaxRate": "24",
                    "donationAmount": "100000000000000000000000000",
                    "filingStatus": "single",
                },
            },
            {"data": {}},
        ],
    )
    def test_bad_requests(self, client, payload):
        response = client.post("/api/calculate", json=payload)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"


class TestHealthEndpoint:
    @pytest.mark.parametrize("healthy", [True, False])
    def test_reports_database_state(self, client, healthy):
        store = MagicMock()
        store.ensure_healthy = AsyncMock(return_value=healthy)
        app.dependency_overrides[get_session_store] = lambda: store

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": healthy}
