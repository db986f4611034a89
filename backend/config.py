import dotenv
import os

dotenv.load_dotenv()

PORT = int(os.getenv("PORT", "8000"))
MODEL = os.getenv("MODEL")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")


if not PORT:
    raise ValueError("PORT is not set")

if not GEMINI_API_KEY and not OPENAI_API_KEY:
    print(
        "Warning: neither GEMINI_API_KEY nor OPENAI_API_KEY is set. "
        "Page generation will return placeholder content."
    )
