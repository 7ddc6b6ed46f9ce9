"""Persistence capability interface used by the query pipeline and the REST routes.

Wraps one SQLAlchemy session plus the knowledge relevance index. Database
failures surface as PersistenceError; relevance-search failures surface as
SearchDegraded so callers can fall back to substring search.
"""
from typing import List, Optional, Tuple

from sqlalchemy import String, asc, desc, func, or_, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .knowledge_index import KnowledgeIndex
from .models import KnowledgeArticle, KnowledgeCategory, Order
from ..schemas.order_models import OrderQuery
from ..utils.errors import InvalidOperation, PersistenceError, SearchDegraded


class SupportStore:
    def __init__(self, db: Session, index: Optional[KnowledgeIndex] = None):
        self.db = db
        self.index = index

    # Orders

    def find_order_by_id(self, order_id: str) -> Optional[Order]:
        try:
            return self.db.query(Order).filter(Order.order_id == order_id.upper()).first()
        except SQLAlchemyError as e:
            raise PersistenceError("Order lookup failed", details=str(e)) from e

    def find_orders_by_email(self, email: str, limit: int) -> List[Order]:
        """Most recent orders first."""
        orders, _ = self.list_orders(OrderQuery(customer_email=email, limit=limit, sort="-order_date"), count=False)
        return orders

    def list_orders(self, params: OrderQuery, count: bool = True) -> Tuple[List[Order], int]:
        q = self.db.query(Order)
        if params.order_id:
            q = q.filter(Order.order_id == params.order_id.upper())
        if params.customer_email:
            q = q.filter(Order.customer_email == params.customer_email.lower())
        if params.email_contains:
            q = q.filter(Order.customer_email.contains(params.email_contains.lower(), autoescape=True))
        if params.order_id_contains:
            q = q.filter(func.upper(Order.order_id, type_=String).contains(params.order_id_contains.upper(), autoescape=True))
        if params.status:
            q = q.filter(Order.status == params.status)
        if params.from_date:
            q = q.filter(Order.order_date >= params.from_date)
        if params.to_date:
            q = q.filter(Order.order_date <= params.to_date)

        column = getattr(Order, params.sort_field)
        ordering = desc(column) if params.descending else asc(column)

        try:
            total = q.count() if count else 0
            orders = q.order_by(ordering, desc(Order.id)).offset(params.skip).limit(params.limit).all()
        except SQLAlchemyError as e:
            raise PersistenceError("Order search failed", details=str(e)) from e
        return orders, total

    def get_order(self, pk: int) -> Optional[Order]:
        try:
            return self.db.get(Order, pk)
        except SQLAlchemyError as e:
            raise PersistenceError("Order lookup failed", details=str(e)) from e

    def save(self, obj):
        try:
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
        except IntegrityError as e:
            self.db.rollback()
            raise InvalidOperation("Record conflicts with an existing one", details=str(e.orig)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Write failed", details=str(e)) from e
        return obj

    def refresh(self, obj):
        """Reload `obj` from the database, e.g. after a counter update expired it."""
        try:
            self.db.refresh(obj)
        except SQLAlchemyError as e:
            raise PersistenceError("Reload failed", details=str(e)) from e
        return obj

    def delete(self, obj) -> None:
        try:
            self.db.delete(obj)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Delete failed", details=str(e)) from e

    # Knowledge

    def get_article(self, pk: int) -> Optional[KnowledgeArticle]:
        try:
            return self.db.get(KnowledgeArticle, pk)
        except SQLAlchemyError as e:
            raise PersistenceError("Knowledge lookup failed", details=str(e)) from e

    def list_articles(self, category: Optional[KnowledgeCategory] = None) -> List[KnowledgeArticle]:
        q = self.db.query(KnowledgeArticle)
        if category:
            q = q.filter(KnowledgeArticle.category == category)
        try:
            return q.order_by(desc(KnowledgeArticle.priority), desc(KnowledgeArticle.views)).all()
        except SQLAlchemyError as e:
            raise PersistenceError("Knowledge listing failed", details=str(e)) from e

    def search_knowledge(
        self, text: str, limit: int, category: Optional[KnowledgeCategory] = None
    ) -> List[KnowledgeArticle]:
        """Relevance-ranked search. Raises SearchDegraded when the index cannot serve it."""
        if self.index is None:
            raise SearchDegraded("No knowledge index configured")

        # with a category filter, rank over everything and filter afterwards
        ranked = self.index.search(text, limit if category is None else None)
        if not ranked:
            return []

        ids = [article_id for article_id, _ in ranked]
        try:
            q = self.db.query(KnowledgeArticle).filter(KnowledgeArticle.id.in_(ids))
            if category:
                q = q.filter(KnowledgeArticle.category == category)
            rows = {a.id: a for a in q.all()}
        except SQLAlchemyError as e:
            raise PersistenceError("Knowledge lookup failed", details=str(e)) from e
        # index order; ids deleted since the last rebuild are dropped
        return [rows[i] for i in ids if i in rows][:limit]

    def search_knowledge_fallback(
        self, tokens: List[str], limit: int, category: Optional[KnowledgeCategory] = None
    ) -> List[KnowledgeArticle]:
        """Case-insensitive substring match of any token against title or content."""
        if not tokens:
            return []
        conditions = []
        for token in tokens:
            needle = token.lower()
            conditions.append(func.lower(KnowledgeArticle.content, type_=String).contains(needle, autoescape=True))
            conditions.append(func.lower(KnowledgeArticle.title, type_=String).contains(needle, autoescape=True))
        q = self.db.query(KnowledgeArticle).filter(or_(*conditions))
        if category:
            q = q.filter(KnowledgeArticle.category == category)
        try:
            return q.limit(limit).all()
        except SQLAlchemyError as e:
            raise PersistenceError("Knowledge substring search failed", details=str(e)) from e

    def increment_views(self, article_id: int) -> None:
        try:
            self.db.execute(
                update(KnowledgeArticle)
                .where(KnowledgeArticle.id == article_id)
                .values(views=KnowledgeArticle.views + 1)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("View counter update failed", details=str(e)) from e

    def mark_helpful(self, article_id: int) -> None:
        try:
            self.db.execute(
                update(KnowledgeArticle)
                .where(KnowledgeArticle.id == article_id)
                .values(helpful_count=KnowledgeArticle.helpful_count + 1)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Helpful counter update failed", details=str(e)) from e
