"""
Knowledge-base article routes.

Every create/update/delete is mirrored into the relevance index.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from .deps import get_retriever, get_store
from ..app.retrieval import SupportRetriever
from ..data.models import KnowledgeArticle, KnowledgeCategory
from ..data.store import SupportStore
from ..schemas.knowledge_models import KnowledgeCreate, KnowledgeOut, KnowledgeUpdate
from ..utils.errors import InputError, NotFoundError

router = APIRouter(prefix="/api/knowledge", tags=["Knowledge"])


def _load(store: SupportStore, article_pk: int) -> KnowledgeArticle:
    article = store.get_article(article_pk)
    if article is None:
        raise NotFoundError("Knowledge entry not found")
    return article


def _reindex(store: SupportStore, article: KnowledgeArticle) -> None:
    if store.index is not None:
        store.index.upsert(article)


@router.post("", status_code=201)
def create_article(body: KnowledgeCreate, store: SupportStore = Depends(get_store)):
    article = KnowledgeArticle(**body.model_dump())
    store.save(article)
    _reindex(store, article)
    return {"success": True, "data": KnowledgeOut.model_validate(article)}


@router.get("/search")
def search_articles(
    q: Optional[str] = None,
    category: Optional[KnowledgeCategory] = None,
    limit: int = Query(10, ge=1, le=100),
    retriever: SupportRetriever = Depends(get_retriever),
):
    if not q or not q.strip():
        raise InputError("Search query 'q' is required")

    result = retriever.search_knowledge(q, q.split(), limit=limit, category=category)
    data = [KnowledgeOut.model_validate(a) for a in result.articles]
    retriever.record_views(result.articles)
    return {"success": True, "data": data, "degraded": result.degraded}


@router.get("")
def list_articles(category: Optional[KnowledgeCategory] = None, store: SupportStore = Depends(get_store)):
    articles = store.list_articles(category)
    return {"success": True, "data": [KnowledgeOut.model_validate(a) for a in articles]}


@router.get("/{article_pk}")
def get_article(article_pk: int, store: SupportStore = Depends(get_store)):
    article = _load(store, article_pk)
    store.increment_views(article.id)
    return {"success": True, "data": KnowledgeOut.model_validate(store.refresh(article))}


@router.put("/{article_pk}")
def update_article(article_pk: int, body: KnowledgeUpdate, store: SupportStore = Depends(get_store)):
    article = _load(store, article_pk)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(article, field, value)
    store.save(article)
    _reindex(store, article)
    return {"success": True, "data": KnowledgeOut.model_validate(article)}


@router.delete("/{article_pk}")
def delete_article(article_pk: int, store: SupportStore = Depends(get_store)):
    article = _load(store, article_pk)
    payload = KnowledgeOut.model_validate(article)
    store.delete(article)
    if store.index is not None:
        store.index.remove(article_pk)
    return {"success": True, "data": payload}


@router.post("/{article_pk}/helpful")
def mark_helpful(article_pk: int, store: SupportStore = Depends(get_store)):
    article = _load(store, article_pk)
    store.mark_helpful(article.id)
    return {"success": True, "data": KnowledgeOut.model_validate(store.refresh(article))}
