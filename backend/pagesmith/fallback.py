"""Recovery results returned whenever the pipeline cannot produce new files"""

from pagesmith.models import GenerateResult, SessionFiles

DEFAULT_SUMMARY = "Updated page assets."
VARIANTS_SUMMARY = "Generating variants..."

INVOCATION_FAILURE_SUMMARY = (
    "Не удалось получить ответ от {model}: {error}. "
    "Предыдущая версия страницы сохранена."
)
PARSE_FAILURE_SUMMARY = (
    "Не удалось обработать ответ от модели. Предыдущая версия страницы сохранена."
)

GEMINI_UNAVAILABLE = GenerateResult(
    summary=(
        "Gemini API key not configured. Returning existing files without modifications. "
        "Set GEMINI_API_KEY to enable Gemini-powered generation."
    ),
    files=SessionFiles(
        html=(
            '<!DOCTYPE html>\n<html lang="en">\n  <head>\n    <meta charset="UTF-8" />\n'
            "    <title>Preview Unavailable</title>\n  </head>\n  <body>\n"
            "    <h1>Enable Gemini Integration</h1>\n"
            "    <p>Provide a GEMINI_API_KEY to generate content.</p>\n  </body>\n</html>"
        ),
        css="",
        js="",
    ),
)

OPENAI_UNAVAILABLE = GenerateResult(
    summary=(
        "API key not configured. Returning existing files without modifications. "
        "Set OPENAI_API_KEY to enable GPT-powered generation."
    ),
    files=SessionFiles(
        html=(
            '<!DOCTYPE html>\n<html lang="en">\n  <head>\n    <meta charset="UTF-8" />\n'
            '    <meta name="viewport" content="width=device-width, initial-scale=1.0" />\n'
            "    <title>Preview Unavailable</title>\n"
            '    <link rel="stylesheet" href="styles.css" />\n  </head>\n  <body>\n'
            "    <h1>Enable GPT Integration</h1>\n"
            "    <p>Provide an OPENAI_API_KEY to generate content.</p>\n"
            '    <script src="script.js"></script>\n  </body>\n</html>'
        ),
        css=(
            "body {\n  font-family: system-ui, sans-serif;\n  max-width: 720px;\n"
            "  margin: 0 auto;\n  padding: 3rem 1.5rem;\n}\n"
        ),
        js='console.warn("GPT integration disabled. Enable OPENAI_API_KEY to generate content.");\n',
    ),
)


def format_error(error: BaseException) -> str:
    return str(error) or type(error).__name__


def missing_credentials(canned: GenerateResult) -> GenerateResult:
    # Copy so callers never share the module-level constant
    return canned.model_copy(deep=True)


def invocation_failure(files: SessionFiles, error: BaseException, label: str) -> GenerateResult:
    return GenerateResult(
        summary=INVOCATION_FAILURE_SUMMARY.format(
            model=f"модели {label}" if label else "модели", error=format_error(error)
        ),
        files=files,
    )


def parse_failure(files: SessionFiles) -> GenerateResult:
    return GenerateResult(summary=PARSE_FAILURE_SUMMARY, files=files)
