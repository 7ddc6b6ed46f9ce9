"""Pydantic models for the query API and the records passed between pipeline stages.

Each retrieval stage returns its own record (matches plus the tool tags it
fired); the controller merges them instead of threading a shared list.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

class ExtractedEntities(BaseModel):
    email: Optional[str] = None
    order_id: Optional[str] = None

class OrderRetrieval(BaseModel):
    """Orders found for a query.

    `single` is True when the order was looked up by its identifier; the
    prompt then carries the full order detail block.
    """
    orders: List[Any] = Field(default_factory=list)
    single: bool = False
    tools: List[str] = Field(default_factory=list)

class KnowledgeRetrieval(BaseModel):
    articles: List[Any] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    degraded: bool = False
    tools: List[str] = Field(default_factory=list)

class QueryResult(BaseModel):
    intent: str
    entities: ExtractedEntities
    orders: OrderRetrieval
    knowledge: KnowledgeRetrieval
    prompt: str
    response: str
    tools_used: List[str] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "success": True,
            "response": self.response,
            "tools_used": list(self.tools_used),
            "intent": self.intent,
            "metadata": {
                "found_orders": len(self.orders.orders),
                "found_knowledge": len(self.knowledge.articles),
            },
        }

class QueryRequest(BaseModel):
    query: Optional[str] = None

class QueryMetadata(BaseModel):
    found_orders: int
    found_knowledge: int

class QueryResponse(BaseModel):
    success: bool = True
    response: str
    tools_used: List[str] = Field(default_factory=list)
    intent: str
    metadata: QueryMetadata

class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[str] = None

class FeedbackRequest(BaseModel):
    helpful: Optional[bool] = None
    knowledge_id: Optional[int] = None
