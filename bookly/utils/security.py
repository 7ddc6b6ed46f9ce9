"""Security helpers: PII masking for log lines."""
import re

EMAIL_RE = re.compile(r"\b([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+\.[A-Za-z]{2,})\b")


def mask_pii(text: str) -> str:
    if not text:
        return text
    masked = EMAIL_RE.sub(lambda m: f"{m.group(1)}***@{m.group(2)}", text)
    masked = re.sub(r"\b\d{10,}\b", "[REDACTED]", masked)
    return masked
