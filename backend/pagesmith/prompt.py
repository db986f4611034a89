"""Prompt construction for page generation requests"""

import base64
import binascii
import re
from typing import List

from pagesmith.models import GenerateRequest, PromptPart
from pagesmith.logger import get_logger

logger = get_logger(__name__)

BASE64_MARKER = "base64,"
PLACEHOLDER = re.compile(r"\{(HTML|CSS|JS)\}")
DEFAULT_MIME_TYPE = "application/octet-stream"

prompt = """You are an assistant that generates or updates a simple web page composed of three files: index.html, styles.css, and script.js.
Respond to the latest user instructions by updating these files. Always return a valid JSON object with the following shape:

```json
{
  "summary": "Explain in natural language what changed.",
  "files": {
    "html": "...complete HTML...",
    "css": "...complete CSS...",
    "js": "...complete JavaScript..."
  }
}
```

Current files:
[index.html]
{HTML}

[styles.css]
{CSS}

[script.js]
{JS}
"""


def build_system_prompt(request: GenerateRequest) -> str:
    # Single pass so file contents are never substituted again
    contents = {
        "HTML": request.files.html,
        "CSS": request.files.css,
        "JS": request.files.js,
    }
    return PLACEHOLDER.sub(lambda match: contents[match.group(1)], prompt)


def build_history(request: GenerateRequest) -> str:
    return "\n".join(
        f"{entry.role.upper()}: {entry.content}" for entry in request.conversation
    )


def build_parts(request: GenerateRequest) -> List[PromptPart]:
    """Build the ordered prompt parts for a request.

    Order is fixed: system prompt with current files, conversation history
    (only when non-empty), latest instructions (always, even if empty), then
    one inline part per attachment carrying a base64 payload.
    """
    parts = [PromptPart(text=build_system_prompt(request))]

    if request.conversation:
        parts.append(PromptPart(text=f"Previous conversation:\n{build_history(request)}"))

    parts.append(PromptPart(text=f"User instructions:\n{request.instructions}"))

    for index, attachment in enumerate(request.attachments or []):
        if BASE64_MARKER not in attachment.data_url:
            continue
        payload = attachment.data_url.split(BASE64_MARKER, 1)[1]
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.warning(f"Skipping attachment {index}: invalid base64 payload ({e})")
            continue
        mime_type = attachment.media_type or DEFAULT_MIME_TYPE
        parts.append(PromptPart(data=data, mime_type=mime_type))

    return parts
