from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Literal, Any, Dict


class SessionFiles(BaseModel):
    html: str
    css: str
    js: str


class ConversationEntry(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class Attachment(BaseModel):
    type: Literal["screenshot"] = "screenshot"
    selector: Optional[str] = None
    data_url: str

    @property
    def media_type(self) -> Optional[str]:
        """Media type declared in the data URI header, e.g. image/png"""
        if not self.data_url.startswith("data:"):
            return None
        header = self.data_url[len("data:") :].split(",", 1)[0]
        media_type = header.split(";", 1)[0].strip()
        return media_type or None


class GenerateRequest(BaseModel):
    session_id: Optional[str] = None
    instructions: str
    conversation: List[ConversationEntry] = Field(default_factory=list)
    files: SessionFiles
    attachments: Optional[List[Attachment]] = None
    allow_variants: bool = False


class VariantRequest(BaseModel):
    count: int = Field(ge=2, le=5)
    # Not required to match count
    instructions: List[str] = Field(default_factory=list)


class GenerateResult(BaseModel):
    summary: str
    files: SessionFiles
    variant_request: Optional[VariantRequest] = None


class PromptPart(BaseModel):
    """A single prompt part: either text or inline binary data"""

    text: Optional[str] = None
    data: Optional[bytes] = None
    mime_type: Optional[str] = None

    @property
    def is_inline(self) -> bool:
        return self.data is not None


class ToolCall(BaseModel):
    name: str
    args: Dict[str, Any] = Field(default_factory=dict)


class ModelReply(BaseModel):
    tool_calls: List[ToolCall] = Field(default_factory=list)
    text: Optional[str] = None


class LlmSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    model: Optional[str] = None
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
