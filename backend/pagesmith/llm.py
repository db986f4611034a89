"""
LLM module for handling AI model interactions
"""

import base64
import json
from typing import Any, Dict, List, Optional, Protocol

import openai
from google import genai
from google.genai import types

import config
from pagesmith import fallback
from pagesmith.models import (
    GenerateRequest,
    GenerateResult,
    LlmSettings,
    ModelReply,
    PromptPart,
    ToolCall,
)
from pagesmith.parser import parse_response
from pagesmith.prompt import build_parts
from pagesmith.variants import (
    COUNT_DESCRIPTION,
    INSTRUCTIONS_DESCRIPTION,
    MAX_VARIANTS,
    MIN_VARIANTS,
    VARIANTS_TOOL_DESCRIPTION,
    VARIANTS_TOOL_NAME,
    interpret_tool_calls,
)
from pagesmith.logger import get_logger

logger = get_logger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-1.5-pro-002"
DEFAULT_OPENAI_MODEL = "gpt-5.1-codex"
GEMINI_PREFIX = "gemini"


def load_settings() -> LlmSettings:
    """Snapshot the process configuration; read once at startup"""
    return LlmSettings(
        model=config.MODEL,
        gemini_api_key=config.GEMINI_API_KEY,
        openai_api_key=config.OPENAI_API_KEY,
    )


def resolve_gemini_model(override: Optional[str]) -> str:
    if override and override.startswith(GEMINI_PREFIX):
        return override
    return DEFAULT_GEMINI_MODEL


def resolve_openai_model(override: Optional[str]) -> str:
    if override and override.strip():
        return override.strip()
    return DEFAULT_OPENAI_MODEL


class ModelInvoker(Protocol):
    async def invoke(self, parts: List[PromptPart], allow_variants: bool) -> ModelReply:
        ...


class GeminiInvoker:
    """Calls Gemini through the google-genai SDK"""

    def __init__(self, api_key: str, model: str):
        self.model = model
        self._client = genai.Client(api_key=api_key)

    def build_config(self, allow_variants: bool) -> types.GenerateContentConfig:
        tools = None
        if allow_variants:
            tools = [
                types.Tool(
                    function_declarations=[
                        types.FunctionDeclaration(
                            name=VARIANTS_TOOL_NAME,
                            description=VARIANTS_TOOL_DESCRIPTION,
                            parameters=types.Schema(
                                type=types.Type.OBJECT,
                                properties={
                                    "count": types.Schema(
                                        type=types.Type.NUMBER,
                                        description=COUNT_DESCRIPTION,
                                    ),
                                    "instructions": types.Schema(
                                        type=types.Type.ARRAY,
                                        items=types.Schema(type=types.Type.STRING),
                                        description=INSTRUCTIONS_DESCRIPTION,
                                    ),
                                },
                                required=["count", "instructions"],
                            ),
                        )
                    ]
                )
            ]
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            tools=tools,
        )

    @staticmethod
    def to_part(part: PromptPart) -> types.Part:
        if part.is_inline:
            return types.Part.from_bytes(data=part.data, mime_type=part.mime_type)
        return types.Part.from_text(text=part.text or "")

    async def invoke(self, parts: List[PromptPart], allow_variants: bool) -> ModelReply:
        logger.info(
            f"Calling Gemini model {self.model} with {len(parts)} parts "
            f"(variants tool: {allow_variants})"
        )
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=[
                types.Content(role="user", parts=[self.to_part(part) for part in parts])
            ],
            config=self.build_config(allow_variants),
        )

        if response.usage_metadata:
            logger.info(
                f"Gemini token usage: prompt={response.usage_metadata.prompt_token_count}, "
                f"completion={response.usage_metadata.candidates_token_count}"
            )

        tool_calls = [
            ToolCall(name=call.name or "", args=dict(call.args or {}))
            for call in response.function_calls or []
        ]
        return ModelReply(tool_calls=tool_calls, text=response.text)


class OpenAIInvoker:
    """Calls an OpenAI model through the Responses API"""

    def __init__(self, api_key: str, model: str):
        self.model = model
        self._client = openai.AsyncOpenAI(api_key=api_key)

    @staticmethod
    def variants_tool() -> Dict[str, Any]:
        return {
            "type": "function",
            "name": VARIANTS_TOOL_NAME,
            "description": VARIANTS_TOOL_DESCRIPTION,
            "parameters": {
                "type": "object",
                "properties": {
                    "count": {
                        "type": "number",
                        "description": COUNT_DESCRIPTION,
                        "minimum": MIN_VARIANTS,
                        "maximum": MAX_VARIANTS,
                    },
                    "instructions": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": INSTRUCTIONS_DESCRIPTION,
                    },
                },
                "required": ["count", "instructions"],
                "additionalProperties": False,
            },
            "strict": True,
        }

    @staticmethod
    def to_content(part: PromptPart) -> Dict[str, Any]:
        if part.is_inline:
            encoded = base64.b64encode(part.data).decode("utf-8")
            return {
                "type": "input_image",
                "image_url": f"data:{part.mime_type};base64,{encoded}",
            }
        return {"type": "input_text", "text": part.text or ""}

    @staticmethod
    def extract_tool_calls(response) -> List[ToolCall]:
        tool_calls = []
        for item in getattr(response, "output", None) or []:
            if getattr(item, "type", None) != "function_call":
                continue
            try:
                args = json.loads(item.arguments or "{}")
            except json.JSONDecodeError as e:
                logger.warning(f"Failed to parse arguments of tool call {item.name}: {e}")
                continue
            tool_calls.append(ToolCall(name=item.name, args=args if isinstance(args, dict) else {}))
        return tool_calls

    async def invoke(self, parts: List[PromptPart], allow_variants: bool) -> ModelReply:
        request: Dict[str, Any] = {
            "model": self.model,
            "input": [
                {"role": "user", "content": [self.to_content(part) for part in parts]}
            ],
            "text": {"format": {"type": "json_object"}},
        }
        if allow_variants:
            request["tools"] = [self.variants_tool()]

        logger.info(
            f"Calling OpenAI model {self.model} with {len(parts)} parts "
            f"(variants tool: {allow_variants})"
        )
        response = await self._client.responses.create(**request)

        if getattr(response, "usage", None) is not None:
            logger.info(f"OpenAI token usage: {response.usage}")

        tool_calls = self.extract_tool_calls(response)
        return ModelReply(tool_calls=tool_calls, text=response.output_text)


class PageGenerator:
    """Turns a page edit request into new page files or a variant directive.

    `invoker` is None when no credential is configured; the canned
    `unavailable` result is then returned without any model call.
    """

    def __init__(
        self,
        invoker: Optional[ModelInvoker],
        unavailable: GenerateResult,
        label: str = "",
    ):
        self.invoker = invoker
        self.unavailable = unavailable
        self.label = label

    async def generate_page(self, request: GenerateRequest) -> GenerateResult:
        if self.invoker is None:
            logger.warning("No model credential configured, returning canned response")
            return fallback.missing_credentials(self.unavailable)

        parts = build_parts(request)

        try:
            reply = await self.invoker.invoke(parts, request.allow_variants)
        except Exception as e:
            logger.error(f"Failed to generate page with {self.label or 'model'}: {e}", exc_info=True)
            return fallback.invocation_failure(request.files, e, self.label)

        if reply.tool_calls:
            variants = interpret_tool_calls(reply.tool_calls, request.files)
            if variants is not None:
                return variants

        return parse_response(reply.text or "", request.files)


def create_gemini_client(settings: LlmSettings) -> PageGenerator:
    invoker = None
    if settings.gemini_api_key:
        invoker = GeminiInvoker(settings.gemini_api_key, resolve_gemini_model(settings.model))
        logger.info(f"Gemini client initialized with model: {invoker.model}")
    else:
        logger.warning("Gemini API key not configured")
    return PageGenerator(invoker, fallback.GEMINI_UNAVAILABLE, label="Gemini")


def create_openai_client(settings: LlmSettings) -> PageGenerator:
    invoker = None
    if settings.openai_api_key:
        invoker = OpenAIInvoker(settings.openai_api_key, resolve_openai_model(settings.model))
        logger.info(f"OpenAI client initialized with model: {invoker.model}")
    else:
        logger.warning("OpenAI API key not configured")
    return PageGenerator(invoker, fallback.OPENAI_UNAVAILABLE)


def get_client(settings: LlmSettings) -> PageGenerator:
    """Pick the provider from the configured model name"""
    if settings.model and settings.model.startswith(GEMINI_PREFIX):
        return create_gemini_client(settings)
    return create_openai_client(settings)
