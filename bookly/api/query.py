"""
Thin API routes for the support query pipeline.

No business logic: validates the request, calls Controller.handle_query()
and shapes the response. Errors are rendered by the app's exception handlers.
"""
from fastapi import APIRouter, Depends

from .deps import get_controller, get_store
from ..app.controller import Controller
from ..data.store import SupportStore
from ..schemas.io_models import FeedbackRequest, QueryRequest, QueryResponse

router = APIRouter(prefix="/api/query", tags=["Query"])


@router.post("", response_model=QueryResponse)
def answer_query(request: QueryRequest, controller: Controller = Depends(get_controller)):
    result = controller.handle_query(request.query)
    return result.to_payload()


@router.post("/feedback")
def record_feedback(request: FeedbackRequest, store: SupportStore = Depends(get_store)):
    if request.helpful and request.knowledge_id:
        if store.get_article(request.knowledge_id) is not None:
            store.mark_helpful(request.knowledge_id)
    return {"success": True, "message": "Feedback recorded"}
