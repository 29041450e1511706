"""Unit tests for the llm module."""
from types import SimpleNamespace

import pytest
from hypothesis import given
from hypothesis import strategies as st

from playground.errors import GatewayError, GatewayErrorKind
from playground.llm import (
    CompletionGateway,
    CompletionMessage,
    OpenAICompletionGateway,
    create_completion_gateway,
    validate_conversation,
    with_system_preamble,
)


def user(content: str) -> CompletionMessage:
    return CompletionMessage(role="user", content=content)


class FakeCompletions:
    """Stands in for ``AsyncOpenAI().chat.completions``."""

    def __init__(self, response=None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.requests: list[dict] = []

    async def create(self, **params):
        self.requests.append(params)
        if self.error is not None:
            raise self.error
        return self.response


def openai_response(content: str | None = "Hi there", choices: bool = True):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(role="assistant", content=content))]
        if choices else [],
        model="gpt-4o-mini-2024-07-18",
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=3, total_tokens=13),
    )


def make_gateway(completions: FakeCompletions, **kwargs) -> OpenAICompletionGateway:
    async def close():
        pass

    client = SimpleNamespace(chat=SimpleNamespace(completions=completions), close=close)
    return OpenAICompletionGateway(api_key="fake-key", client=client, **kwargs)


class TestCompletionGatewayInterface:
    def test_gateway_is_abstract(self):
        with pytest.raises(TypeError):
            CompletionGateway()  # type: ignore


class TestValidateConversation:
    def test_empty_conversation(self):
        with pytest.raises(GatewayError) as exc_info:
            validate_conversation([])
        assert exc_info.value.kind == GatewayErrorKind.INVALID_REQUEST
        assert exc_info.value.user_message == "Messages array is required"

    def test_missing_content(self):
        with pytest.raises(GatewayError, match="Each message must have role and content"):
            validate_conversation([CompletionMessage(role="user", content="")])

    def test_unknown_role(self):
        with pytest.raises(GatewayError, match="Invalid message role"):
            validate_conversation([CompletionMessage(role="tool", content="x")])

    def test_valid_conversation(self):
        validate_conversation([
            CompletionMessage(role="system", content="be nice"),
            user("hello"),
            CompletionMessage(role="assistant", content="hi"),
        ])


class TestSystemPreamble:
    def test_preamble_prepended(self):
        result = with_system_preamble([user("hello")], "You are helpful.")
        assert [m.role for m in result] == ["system", "user"]
        assert result[0].content == "You are helpful."

    def test_existing_system_message_kept(self):
        messages = [CompletionMessage(role="system", content="custom"), user("hello")]
        assert with_system_preamble(messages, "You are helpful.") == messages


class TestOpenAICompletionGateway:
    async def test_request_parameters(self):
        completions = FakeCompletions(openai_response())
        gateway = make_gateway(completions, system_prompt="Be brief.")

        response = await gateway.complete([user("hello")])

        request = completions.requests[0]
        assert request["model"] == "gpt-4o-mini"
        assert request["max_tokens"] == 1000
        assert request["temperature"] == 0.7
        assert request["top_p"] == 1
        assert request["frequency_penalty"] == 0
        assert request["presence_penalty"] == 0
        assert request["messages"] == [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "hello"},
        ]
        assert response.content == "Hi there"
        assert response.role == "assistant"
        assert response.usage == {"prompt_tokens": 10, "completion_tokens": 3, "total_tokens": 13}

    async def test_packaged_preamble_is_default(self):
        completions = FakeCompletions(openai_response())
        gateway = make_gateway(completions)

        await gateway.complete([user("hello")])

        first = completions.requests[0]["messages"][0]
        assert first["role"] == "system"
        assert "Personal Playground" in first["content"]

    async def test_overrides(self):
        completions = FakeCompletions(openai_response())
        gateway = make_gateway(completions)

        await gateway.complete([user("hello")], model="gpt-4o", temperature=0.8, max_tokens=100)

        request = completions.requests[0]
        assert request["model"] == "gpt-4o"
        assert request["temperature"] == 0.8
        assert request["max_tokens"] == 100

    async def test_invalid_conversation_is_not_sent(self):
        completions = FakeCompletions(openai_response())
        gateway = make_gateway(completions)

        with pytest.raises(GatewayError):
            await gateway.complete([])
        assert completions.requests == []

    async def test_remote_failure_is_classified(self):
        completions = FakeCompletions(error=RuntimeError("Error code: 429 - insufficient_quota"))
        gateway = make_gateway(completions)

        with pytest.raises(GatewayError) as exc_info:
            await gateway.complete([user("hello")])
        assert exc_info.value.kind == GatewayErrorKind.QUOTA_EXCEEDED
        assert exc_info.value.user_message == "API quota exceeded. Please check your OpenAI account."
        assert len(completions.requests) == 1

    async def test_empty_choices(self):
        completions = FakeCompletions(openai_response(choices=False))
        gateway = make_gateway(completions)

        with pytest.raises(GatewayError) as exc_info:
            await gateway.complete([user("hello")])
        assert exc_info.value.kind == GatewayErrorKind.UNKNOWN

    @pytest.mark.parametrize("content", [None, "", "   \n"])
    async def test_blank_content_is_unknown_error(self, content):
        gateway = make_gateway(FakeCompletions(openai_response(content=content)))

        with pytest.raises(GatewayError) as exc_info:
            await gateway.complete([user("hello")])
        assert exc_info.value.kind == GatewayErrorKind.UNKNOWN


class TestCompletionGatewayFactory:
    def test_create_openai_gateway(self):
        gateway = create_completion_gateway("openai", api_key="fake-key", model="gpt-4o")
        assert isinstance(gateway, OpenAICompletionGateway)
        assert gateway.model == "gpt-4o"
        assert gateway.client.max_retries == 0

    def test_missing_api_key(self):
        with pytest.raises(TypeError, match="api_key"):
            create_completion_gateway("openai")

    @given(st.text(min_size=1).filter(lambda s: s.lower() != "openai"))
    def test_unknown_provider(self, provider: str):
        """Property test: anything but 'openai' is rejected."""
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_completion_gateway(provider, api_key="fake-key")
