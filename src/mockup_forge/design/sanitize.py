FALLBACK_PLACEHOLDER = "<!-- Failed to generate content -->"

FENCE = "```"


def _strip_opening_fence(text: str) -> str:
    body = text.lstrip()
    if not body.startswith(FENCE):
        return text
    body = body[len(FENCE):]
    if body[:4].lower() == "html":
        body = body[4:]
    return body.lstrip()


def _strip_closing_fence(text: str) -> str:
    body = text.rstrip()
    if not body.endswith(FENCE):
        return text
    return body[: -len(FENCE)].rstrip()


def sanitize(raw_text: str | None) -> str:
    """Strip Markdown code fences around the model's HTML.

    Stripping repeats until nothing changes, and a response that is empty
    (before or after stripping) becomes ``FALLBACK_PLACEHOLDER``, so the
    function is idempotent.
    """
    if not raw_text:
        return FALLBACK_PLACEHOLDER

    text = raw_text
    while True:
        stripped = _strip_closing_fence(_strip_opening_fence(text))
        if stripped == text:
            break
        text = stripped
    return text or FALLBACK_PLACEHOLDER
