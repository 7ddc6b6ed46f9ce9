"""FastAPI dependencies shared by the routers.

Tests swap these out through `app.dependency_overrides`.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from ..app.controller import Controller
from ..app.generate import GenerationClient
from ..app.retrieval import SupportRetriever
from ..data.database import get_db
from ..data.knowledge_index import KnowledgeIndex
from ..data.store import SupportStore

_knowledge_index = None


def get_knowledge_index() -> KnowledgeIndex:
    global _knowledge_index
    if _knowledge_index is None:
        _knowledge_index = KnowledgeIndex()
    return _knowledge_index


def get_store(
    db: Session = Depends(get_db),
    index: KnowledgeIndex = Depends(get_knowledge_index),
) -> SupportStore:
    return SupportStore(db, index)


def get_retriever(store: SupportStore = Depends(get_store)) -> SupportRetriever:
    return SupportRetriever(store)


def get_generator() -> GenerationClient:
    return GenerationClient()


def get_controller(
    store: SupportStore = Depends(get_store),
    generator: GenerationClient = Depends(get_generator),
) -> Controller:
    return Controller(store=store, generator=generator)
