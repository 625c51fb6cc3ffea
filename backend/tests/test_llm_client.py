"""
Tests for the structured-output LLM client used by creative approaches.
"""
import json
from types import SimpleNamespace

import pytest
from tenacity import wait_none

from briefboarder.schemas.caa import AdConceptResponse, CAAResponse
from briefboarder.services.caa.llm_client import (
    LLMClient,
    StructuredOutputError,
    build_full_system_prompt,
    schema_for_prompt,
)
from tests.fixtures.caa_fixtures import caa_reply, fake_openai, make_context


@pytest.fixture
def no_wait(monkeypatch):
    monkeypatch.setattr(LLMClient, "_wait", lambda self: wait_none())


def _messages(client, call_index=0):
    return client.chat.completions.create.call_args_list[call_index].kwargs["messages"]


class TestCallWithStructuredOutput:
    def test_valid_reply_parses_on_first_attempt(self, no_wait):
        openai = fake_openai(caa_reply(action="generate", enhancedPrompt="a red bicycle"))
        llm = LLMClient("test/model", client=openai, max_attempts=3)

        result = llm.call_with_structured_output(
            system_prompt="APPROACH", user_prompt="bike", context=make_context()
        )

        assert isinstance(result, CAAResponse)
        assert result.action == "generate"
        assert result.enhanced_prompt == "a red bicycle"
        assert openai.chat.completions.create.call_count == 1

        kwargs = openai.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test/model"
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 2048
        assert kwargs["response_format"] == {"type": "json_object"}

    def test_images_precede_text_in_user_message(self, no_wait):
        openai = fake_openai(caa_reply(action="edit", enhancedPrompt="add text"))
        llm = LLMClient("test/model", client=openai)
        context = make_context(images=2)

        llm.call_with_structured_output(system_prompt="", user_prompt="edit it", context=context)

        user_content = _messages(openai)[1]["content"]
        assert [part["type"] for part in user_content] == ["image_url", "image_url", "text"]
        assert user_content[0]["image_url"]["url"] == context.selected_images[0].transformed_url
        assert user_content[-1]["text"] == "edit it"

    def test_system_prompt_carries_context_and_schema(self, no_wait):
        openai = fake_openai(caa_reply())
        llm = LLMClient("test/model", client=openai)

        llm.call_with_structured_output(
            system_prompt="APPROACH BLOCK", user_prompt="x", context=make_context(images=1)
        )

        system = _messages(openai)[0]["content"]
        assert "APPROACH BLOCK" in system
        assert "Brief: Summer Launch - Sparkling water for runners" in system
        assert "Selected Images: 1" in system
        assert "Logo (logo), Brand Pattern (brand-pattern)" in system
        assert '"enhancedPrompt"' in system
        assert "Return ONLY the JSON object" in system

    def test_retries_then_succeeds_with_reminder(self, no_wait):
        openai = fake_openai("not json at all", caa_reply(action="answer", noteText="They match."))
        llm = LLMClient("test/model", client=openai, max_attempts=3)

        result = llm.call_with_structured_output(
            system_prompt="", user_prompt="compare", context=make_context()
        )

        assert result.note_text == "They match."
        assert openai.chat.completions.create.call_count == 2
        first_system, first_user = _messages(openai, 0)
        retry_system, retry_user = _messages(openai, 1)
        assert "failed validation" not in first_system["content"]
        assert "failed validation" in retry_system["content"]
        assert retry_user["content"][-1]["text"].endswith(
            "Return ONLY valid JSON matching the specified schema."
        )

    def test_waits_one_then_two_seconds_between_attempts(self):
        wait = LLMClient("test/model", client=fake_openai(), max_attempts=3)._wait()
        delays = [wait(SimpleNamespace(attempt_number=n)) for n in (1, 2)]
        assert delays == [1, 2]

    def test_exhausted_attempts_raise(self, no_wait):
        openai = fake_openai(None, "{}", json.dumps({"action": "dance", "reasoning": "x"}))
        llm = LLMClient("test/model", client=openai, max_attempts=3)

        with pytest.raises(StructuredOutputError) as exc:
            llm.call_with_structured_output(
                system_prompt="", user_prompt="x", context=make_context()
            )

        assert "after 3 attempts" in str(exc.value)
        assert openai.chat.completions.create.call_count == 3

    def test_empty_content_counts_as_failure(self, no_wait):
        openai = fake_openai(None)
        llm = LLMClient("test/model", client=openai, max_attempts=1)

        with pytest.raises(StructuredOutputError, match="No response content from LLM"):
            llm.call_with_structured_output(
                system_prompt="", user_prompt="x", context=make_context()
            )

    def test_json_wrapped_in_prose_is_salvaged(self, no_wait):
        wrapped = "Sure! Here you go:\n```json\n" + caa_reply(action="generate") + "\n```"
        openai = fake_openai(wrapped)
        llm = LLMClient("test/model", client=openai, max_attempts=1)

        result = llm.call_with_structured_output(
            system_prompt="", user_prompt="x", context=make_context()
        )
        assert result.action == "generate"

    def test_without_caa_preamble(self, no_wait):
        reply = json.dumps(
            {"textPlacement": "none", "imagePrompt": "a beach", "reasoning": "calm"}
        )
        openai = fake_openai(reply)
        llm = LLMClient("test/model", client=openai)

        result = llm.call_with_structured_output(
            system_prompt="AD DIRECTOR",
            user_prompt="x",
            context=make_context(),
            schema=AdConceptResponse,
            include_caa_preamble=False,
        )

        assert result.image_prompt == "a beach"
        system = _messages(openai)[0]["content"]
        assert system.startswith("AD DIRECTOR")
        assert "Creative Approach Agent" not in system


class TestPromptHelpers:
    def test_schema_for_prompt_uses_wire_names(self):
        schema = schema_for_prompt(CAAResponse)
        assert set(schema["properties"]) == {
            "action",
            "enhancedPrompt",
            "includeAssets",
            "noteText",
            "reasoning",
        }
        assert schema["required"] == ["action", "reasoning"]
        assert schema["properties"]["noteText"]["type"] == "string"
        assert "title" not in schema["properties"]["action"]

    def test_full_system_prompt_lists_actions(self):
        prompt = build_full_system_prompt("X", make_context())
        for action in ("generate", "edit", "answer", "generate_and_note"):
            assert f'action: "{action}"' in prompt
