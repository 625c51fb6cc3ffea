# briefboarder/services/caa/llm_client.py
from __future__ import annotations

import json
import logging
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError
from tenacity import RetryError, Retrying, stop_after_attempt, wait_incrementing

from ...core.config import get_settings
from ...schemas.caa import CAAContext, CAAResponse
from ..llm import get_llm_client, limit_llm_concurrency

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

LLM_TEMPERATURE = 0.7
LLM_MAX_TOKENS = 2048

RETRY_SYSTEM_INSTRUCTION = (
    "\n\nIMPORTANT: Your previous response failed validation. PLEASE RETURN ONLY VALID JSON "
    "AS INSTRUCTED ABOVE. No markdown, no backticks, just the raw JSON object."
)
RETRY_USER_REMINDER = "\n\nREMINDER: Return ONLY valid JSON matching the specified schema."


class StructuredOutputError(RuntimeError):
    """The LLM never produced a response that parsed and validated."""


class EmptyLLMResponse(ValueError):
    pass


def schema_for_prompt(schema: Type[BaseModel]) -> dict[str, Any]:
    """
    JSON schema shown to the model. Keys are the camelCase wire names; pydantic
    titles are noise for the model so they are stripped.
    """
    raw = schema.model_json_schema(by_alias=True)
    properties = {}
    for key, prop in (raw.get("properties") or {}).items():
        prop = {k: v for k, v in prop.items() if k not in ("title", "default")}
        # Optional[X] is rendered as anyOf [X, null]; collapse it back to X.
        any_of = prop.pop("anyOf", None)
        if any_of:
            non_null = [p for p in any_of if p.get("type") != "null"]
            if len(non_null) == 1:
                prop = {**non_null[0], **prop}
        properties[key] = prop
    return {
        "type": "object",
        "properties": properties,
        "required": list(raw.get("required") or []),
    }


def build_full_system_prompt(approach_prompt: str, context: CAAContext) -> str:
    asset_labels = ", ".join(a.label for a in context.available_assets)
    asset_refs = ", ".join(f"{a.label} ({a.name})" for a in context.available_assets)

    return f"""You are a Creative Approach Agent helping users create visual moodboards and brief boards.

CONTEXT:
- Brief: {context.brief_name} - {context.brief_description}
- Selected Images: {len(context.selected_images)}
- Selected Post-its: {len(context.selected_postits)}
- Available Assets: {asset_labels}

{approach_prompt}

YOUR TASK:
Analyze the user's request and canvas context, then choose ONE action:

1. **Generate new image**: User has no images selected, wants to create something new
   → Set action: "generate"
   → Provide enhancedPrompt

2. **Edit existing image(s)**: User has 1-8 images selected, wants to modify them
   → Set action: "edit"
   → Provide enhancedPrompt
   → If user mentions "logo", "brand", "watermark" → include asset names in includeAssets

3. **Answer question**: User asks about images (e.g., "how are these different?", "what's the common theme?")
   → Set action: "answer"
   → Provide noteText with a thoughtful 2-4 sentence answer

4. **Generate with explanation**: Rare cases where context suggests both image and note
   → Set action: "generate_and_note"
   → Provide both enhancedPrompt and noteText

ASSET MATCHING:
Available assets: {asset_refs}
When user mentions: "logo", "brand", "watermark", "pattern" → include matching asset names

IMPORTANT:
- Be concise but detailed in prompts
- For questions, provide thoughtful multi-sentence answers
- Always provide reasoning to explain your decision"""


class LLMClient:
    """
    Structured-output client used by creative approaches.

    One instance per request; the underlying OpenAI-compatible client is shared
    process-wide via get_llm_client().
    """

    def __init__(self, model_id: str, *, client: Any | None = None, max_attempts: int | None = None):
        self.model_id = model_id
        self._client = client
        self.max_attempts = max_attempts or get_settings().CAA_MAX_ATTEMPTS

    @property
    def client(self):
        if self._client is None:
            self._client = get_llm_client()
        return self._client

    def _wait(self):
        # 1s, 2s, ... between attempts
        return wait_incrementing(start=1, increment=1)

    def call_with_structured_output(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        context: CAAContext,
        schema: Type[T] = CAAResponse,
        include_caa_preamble: bool = True,
    ) -> T:
        full_system_prompt = (
            build_full_system_prompt(system_prompt, context)
            if include_caa_preamble
            else system_prompt
        )
        json_schema = schema_for_prompt(schema)
        enhanced_system_prompt = f"""{full_system_prompt}

IMPORTANT: You MUST return a valid JSON object that matches exactly this schema:
{json.dumps(json_schema, indent=2)}

Return ONLY the JSON object, no markdown formatting, no backticks, no additional text."""

        last_error: Exception | None = None
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=self._wait(),
                reraise=False,
            ):
                with attempt:
                    is_retry = attempt.retry_state.attempt_number > 1
                    try:
                        return self._call_once(
                            system_prompt=enhanced_system_prompt
                            + (RETRY_SYSTEM_INSTRUCTION if is_retry else ""),
                            user_prompt=user_prompt + (RETRY_USER_REMINDER if is_retry else ""),
                            context=context,
                            schema=schema,
                        )
                    except Exception as e:
                        last_error = e
                        logger.warning(
                            "Structured LLM call failed (attempt %d/%d): %s",
                            attempt.retry_state.attempt_number,
                            self.max_attempts,
                            e,
                            extra={"model": self.model_id, "step": "caa_structured_call"},
                        )
                        raise
        except RetryError:
            raise StructuredOutputError(
                f"Failed to get valid structured response after {self.max_attempts} attempts. "
                f"Last error: {last_error}"
            ) from last_error

        raise StructuredOutputError("Unexpected error in CAA LLM call")

    def _call_once(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        context: CAAContext,
        schema: Type[T],
    ) -> T:
        # Images first, then the text prompt
        user_content: list[dict[str, Any]] = [
            {"type": "image_url", "image_url": {"url": img.transformed_url}}
            for img in context.selected_images
        ]
        user_content.append({"type": "text", "text": user_prompt})

        with limit_llm_concurrency():
            completion = self.client.chat.completions.create(
                model=self.model_id,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content},
                ],
                temperature=LLM_TEMPERATURE,
                max_tokens=LLM_MAX_TOKENS,
                response_format={"type": "json_object"},
            )

        choices = getattr(completion, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content:
            raise EmptyLLMResponse("No response content from LLM")

        try:
            return schema.model_validate_json(content)
        except ValidationError:
            # Some providers still wrap JSON in prose or fences; salvage the
            # outermost object before giving up on this attempt.
            start, end = content.find("{"), content.rfind("}")
            if start == -1 or end <= start:
                raise
            return schema.model_validate(json.loads(content[start : end + 1]))
