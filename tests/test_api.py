"""
API Endpoint Tests

Integration tests for the FastAPI endpoints using TestClient with a
dispatcher wired to fake adapters.

Test Categories:
1. TestInfoEndpoints - /, /health
2. TestProviderEndpoints - /providers, /providers/{provider}/models
3. TestCompletionEndpoints - /chat/completions, /chat/compare, /embeddings
4. TestCostEndpoint - /cost/estimate
5. TestErrorHandling - Error envelope and status mapping
"""


import httpx
import openai
import pytest

from archmen_llm.registry import ProviderId

CHAT_BODY = {
    "messages": [
        {"role": "system", "content": "You are a Jungian analyst."},
        {"role": "user", "content": "Which archetype fits a caregiver?"},
    ],
    "config": {"provider": "openai", "model": "gpt-4", "temperature": 0.5, "max_output_tokens": 100},
}


class TestInfoEndpoints:
    """Tests for informational endpoints."""

    def test_root(self, test_client):
        """Root returns service information."""
        response = test_client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "ArchMen LLM Gateway"

    def test_health(self, test_client):
        """Health is healthy when a hosted provider is configured."""
        response = test_client.get("/health")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert {c["name"] for c in data["components"]} == {"registry", "providers"}

    def test_health_degraded_with_local_only(self, test_client, fake_adapters):
        """Only the local provider configured means degraded."""
        fake_adapters[ProviderId.OPENAI]._configured = False
        fake_adapters[ProviderId.GROQ]._configured = False

        data = test_client.get("/health").json()

        assert data["status"] == "degraded"


class TestProviderEndpoints:
    """Tests for provider listing endpoints."""

    def test_providers(self, test_client):
        """Configured providers are listed with display names and models."""
        data = test_client.get("/providers").json()

        assert data["providers"] == ["openai", "groq", "local"]
        names = {p["id"]: p["name"] for p in data["providers_with_models"]}
        assert names["local"] == "Local (Ollama)"
        openai_entry = data["providers_with_models"][0]
        assert "gpt-4" in openai_entry["models"]

    def test_provider_models(self, test_client):
        """Per-provider listing includes pricing shapes."""
        data = test_client.get("/providers/kimi/models").json()

        assert data["provider"] == "kimi"
        assert data["configured"] is False
        first = data["models"][0]
        assert first["pricing"]["kind"] == "combined"

    def test_provider_models_embeddings(self, test_client):
        """OpenAI lists its embedding models."""
        data = test_client.get("/providers/openai/models").json()
        names = [m["name"] for m in data["embedding_models"]]
        assert "text-embedding-3-large" in names

    def test_provider_models_unknown(self, test_client):
        """Unknown providers return 404 in the error envelope."""
        response = test_client.get("/providers/bogus/models")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "UNKNOWN_PROVIDER"


class TestCompletionEndpoints:
    """Tests for completion and embedding endpoints."""

    def test_chat_completion(self, test_client, fake_adapters):
        """A completion is returned with usage and cost."""
        response = test_client.post("/chat/completions", json=CHAT_BODY)
        data = response.json()

        assert response.status_code == 200
        assert data["content"] == "fake reply"
        assert data["provider"] == "openai"
        assert data["model"] == "gpt-4"
        assert data["usage"] == {"input_tokens": 10, "output_tokens": 5, "total_tokens": 15}
        assert data["cost_estimate_usd"] == pytest.approx(0.0006)

        sent, _ = fake_adapters[ProviderId.OPENAI].calls[0]
        assert [m.role.value for m in sent] == ["system", "user"]

    def test_api_key_override_not_echoed(self, test_client):
        """Per-call keys are accepted but never appear in the response."""
        body = {**CHAT_BODY, "config": {**CHAT_BODY["config"], "api_key_override": "sk-secret"}}
        response = test_client.post("/chat/completions", json=body)

        assert response.status_code == 200
        assert "sk-secret" not in response.text

    def test_compare(self, test_client):
        """Comparison returns one outcome per configured target."""
        body = {
            "messages": [{"role": "user", "content": "hi"}],
            "targets": [
                {"provider": "openai", "model": "gpt-4o"},
                {"provider": "anthropic", "model": "claude-3-haiku-20240307"},
                {"provider": "groq", "model": "mixtral-8x7b-32768"},
            ],
        }

        data = test_client.post("/chat/compare", json=body).json()

        assert [o["provider"] for o in data] == ["openai", "groq"]
        assert all(o["error"] is None for o in data)

    def test_embedding(self, test_client):
        """Embeddings return the vector."""
        body = {"text": "sample text", "config": {"provider": "openai", "model": "text-embedding-3-small"}}
        response = test_client.post("/embeddings", json=body)

        assert response.status_code == 200
        assert response.json()["vector"] == [0.5, 0.25]


class TestCostEndpoint:
    """Tests for /cost/estimate."""

    def test_estimate(self, test_client):
        """The gpt-4 preview totals 0.045."""
        body = {"provider": "openai", "model": "gpt-4", "input_tokens": 500, "output_tokens": 500}
        data = test_client.post("/cost/estimate", json=body).json()

        assert data["pricing_kind"] == "asymmetric"
        assert data["total_tokens"] == 1000
        assert data["total_cost_usd"] == pytest.approx(0.045)
        assert data["input_cost_usd"] == pytest.approx(0.015)

    def test_estimate_free(self, test_client):
        """Free models preview at zero."""
        body = {"provider": "local", "model": "codellama:7b", "input_tokens": 9000, "output_tokens": 1}
        assert test_client.post("/cost/estimate", json=body).json()["total_cost_usd"] == 0

    def test_estimate_negative_tokens(self, test_client):
        """Negative token counts fail validation."""
        body = {"provider": "openai", "model": "gpt-4", "input_tokens": -1, "output_tokens": 0}
        response = test_client.post("/cost/estimate", json=body)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_estimate_unknown_model(self, test_client):
        """Unknown models are 404."""
        body = {"provider": "openai", "model": "gpt-99", "input_tokens": 1, "output_tokens": 1}
        response = test_client.post("/cost/estimate", json=body)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "UNKNOWN_MODEL"


class TestErrorHandling:
    """Tests for error translation."""

    def test_not_configured_is_503(self, test_client):
        """Unconfigured providers map to 503 and name the provider."""
        body = {**CHAT_BODY, "config": {"provider": "anthropic", "model": "claude-3-5-sonnet-20241022"}}
        response = test_client.post("/chat/completions", json=body)
        error = response.json()["error"]

        assert response.status_code == 503
        assert error["code"] == "PROVIDER_NOT_CONFIGURED"
        assert error["provider"] == "anthropic"

    def test_invalid_messages_is_422(self, test_client):
        """A conversation with no user/assistant turn is rejected."""
        body = {**CHAT_BODY, "messages": [{"role": "system", "content": "only"}]}
        response = test_client.post("/chat/completions", json=body)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "INVALID_MESSAGES"

    def test_bad_role_is_validation_error(self, test_client):
        """Unknown roles fail request validation."""
        body = {**CHAT_BODY, "messages": [{"role": "tool", "content": "x"}]}
        response = test_client.post("/chat/completions", json=body)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_embedding_not_supported_is_400(self, test_client):
        """Embedding on anthropic is a 400."""
        body = {"text": "sample text", "config": {"provider": "anthropic", "model": "x"}}
        response = test_client.post("/embeddings", json=body)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "EMBEDDING_NOT_SUPPORTED"

    def test_provider_unavailable_is_502(self, test_client, fake_adapters):
        """Unreachable backends map to 502."""
        from archmen_llm.errors import ProviderUnavailableError

        fake_adapters[ProviderId.LOCAL]._error = ProviderUnavailableError(
            "Local model server unreachable", provider="local"
        )
        body = {**CHAT_BODY, "config": {"provider": "local", "model": "llama3.1:8b"}}
        response = test_client.post("/chat/completions", json=body)

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "PROVIDER_UNAVAILABLE"

    def test_sdk_status_error_keeps_status(self, test_client, fake_adapters):
        """Provider SDK status errors pass their HTTP status through."""
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        fake_adapters[ProviderId.OPENAI]._error = openai.RateLimitError(
            "Rate limit reached",
            response=httpx.Response(429, request=request),
            body=None,
        )

        response = test_client.post("/chat/completions", json=CHAT_BODY)

        assert response.status_code == 429
        assert response.json()["error"]["code"] == "PROVIDER_ERROR"
