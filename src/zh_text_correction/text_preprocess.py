"""
Input preparation before text is sent for correction.
"""

import re
from dataclasses import dataclass, field

# Control characters except tab, newline and carriage return
CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

SCRIPT_TAG_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
JS_PROTOCOL_RE = re.compile(r"javascript:", re.IGNORECASE)
EVENT_HANDLER_RE = re.compile(r"on\w+\s*=", re.IGNORECASE)


@dataclass
class PreprocessResult:
    """Text ready for the vendor plus what was changed to get there."""
    text: str
    warnings: list[str] = field(default_factory=list)
    original_length: int = 0
    truncated: bool = False

    @property
    def processed_length(self) -> int:
        return len(self.text)


def preprocess_text(text, max_length: int = 2000) -> PreprocessResult:
    """
    Truncate overlong input and strip invisible control characters.

    Args:
        text: Input text. Non-string or empty input yields an empty result
            with a warning.
        max_length: Longest text kept.

    Returns:
        PreprocessResult with the cleaned text and warnings.
    """
    if not text or not isinstance(text, str):
        return PreprocessResult(text="", warnings=["文本为空或格式无效"])

    result = PreprocessResult(text=text, original_length=len(text))
    if len(text) > max_length:
        result.text = text[:max_length]
        result.truncated = True
        result.warnings.append(f"文本过长，已截取前{max_length}个字符")

    cleaned = CONTROL_CHARS_RE.sub("", result.text)
    if len(cleaned) != len(result.text):
        result.warnings.append("已移除不可见控制字符")
    result.text = cleaned
    return result


def sanitize_input(text: str) -> str:
    """Remove script tags, javascript: URLs and inline event handlers, then trim."""
    if not isinstance(text, str):
        return text
    text = SCRIPT_TAG_RE.sub("", text)
    text = JS_PROTOCOL_RE.sub("", text)
    text = EVENT_HANDLER_RE.sub("", text)
    return text.strip()
