"""Very small rule-based entity extractor for support queries."""
import re

from ..schemas.io_models import ExtractedEntities

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
ORDER_ID_RE = re.compile(r"(ORD-\d+)", re.IGNORECASE)


class EntityExtractor:
    def extract_email(self, text: str):
        m = EMAIL_RE.search(text or "")
        return m.group(0) if m else None

    def extract_order_id(self, text: str):
        m = ORDER_ID_RE.search(text or "")
        return m.group(1).upper() if m else None

    def extract(self, text: str) -> ExtractedEntities:
        return ExtractedEntities(
            email=self.extract_email(text),
            order_id=self.extract_order_id(text),
        )
