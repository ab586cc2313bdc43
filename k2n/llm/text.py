"""
Response text cleanup shared by all providers.
"""

import re

# ```<lang>\n<body>\n``` spanning the whole (trimmed) response
_FENCED_RE = re.compile(r'```[A-Za-z0-9_+-]*\n(.*?)\n```', re.DOTALL)


def strip_code_fences(text: str) -> str:
    """
    Remove a code fence that wraps the entire response.

    Fences that appear in the middle of the text are left alone.

    Args:
        text: Raw response text from the LLM.

    Returns:
        The fenced body, or the input unchanged.
    """
    match = _FENCED_RE.fullmatch(text.strip())
    if match:
        return match.group(1)
    return text
