"""Aggregate queries behind the analytics and order-stats endpoints.

Read-only; every function takes an open SQLAlchemy session.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, List

from sqlalchemy import desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import KnowledgeArticle, Order
from ..utils.errors import PersistenceError


def _value(enum_or_str):
    return getattr(enum_or_str, "value", enum_or_str)


def order_status_breakdown(db: Session, with_amounts: bool = False) -> List[Dict[str, Any]]:
    columns = [Order.status, func.count(Order.id)]
    if with_amounts:
        columns.append(func.coalesce(func.sum(Order.total_amount), 0.0))
    rows = db.query(*columns).group_by(Order.status).all()
    out = []
    for row in rows:
        entry = {"_id": _value(row[0]), "count": row[1]}
        if with_amounts:
            entry["totalAmount"] = round(float(row[2]), 2)
        out.append(entry)
    return out


def order_overview(db: Session) -> Dict[str, Any]:
    try:
        return {
            "totalOrders": db.query(func.count(Order.id)).scalar(),
            "byStatus": order_status_breakdown(db, with_amounts=True),
        }
    except SQLAlchemyError as e:
        raise PersistenceError("Order statistics failed", details=str(e)) from e


def orders_trend(db: Session, days: int = 30, now: datetime = None) -> List[Dict[str, Any]]:
    since = (now or datetime.now()) - timedelta(days=days)
    day = func.date(Order.order_date)
    rows = (
        db.query(day, func.count(Order.id))
        .filter(Order.order_date >= since)
        .group_by(day)
        .order_by(day)
        .all()
    )
    return [{"_id": str(d), "count": c} for d, c in rows]


def dashboard(db: Session) -> Dict[str, Any]:
    try:
        recent = db.query(Order).order_by(desc(Order.order_date)).limit(5).all()

        by_category = (
            db.query(
                KnowledgeArticle.category,
                func.count(KnowledgeArticle.id),
                func.coalesce(func.sum(KnowledgeArticle.views), 0),
            )
            .group_by(KnowledgeArticle.category)
            .all()
        )
        top_articles = db.query(KnowledgeArticle).order_by(desc(KnowledgeArticle.views)).limit(5).all()

        return {
            "orders": {
                "total": db.query(func.count(Order.id)).scalar(),
                "byStatus": order_status_breakdown(db),
                "recent": [
                    {
                        "order_id": o.order_id,
                        "customer_email": o.customer_email,
                        "status": _value(o.status),
                        "order_date": o.order_date,
                    }
                    for o in recent
                ],
                "trend": orders_trend(db),
            },
            "knowledge": {
                "total": db.query(func.count(KnowledgeArticle.id)).scalar(),
                "byCategory": [
                    {"_id": _value(cat), "count": count, "totalViews": int(views)}
                    for cat, count, views in by_category
                ],
                "topArticles": [
                    {
                        "id": a.id,
                        "title": a.title,
                        "category": _value(a.category),
                        "views": a.views,
                        "helpful_count": a.helpful_count,
                    }
                    for a in top_articles
                ],
            },
            "timestamp": datetime.now().isoformat(),
        }
    except SQLAlchemyError as e:
        raise PersistenceError("Dashboard analytics failed", details=str(e)) from e


def top_customers(db: Session, limit: int = 10) -> List[Dict[str, Any]]:
    order_count = func.count(Order.id).label("orderCount")
    try:
        rows = (
            db.query(
                Order.customer_email,
                order_count,
                func.coalesce(func.sum(Order.total_amount), 0.0),
                func.max(Order.order_date),
            )
            .group_by(Order.customer_email)
            .order_by(desc(order_count))
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as e:
        raise PersistenceError("Customer analytics failed", details=str(e)) from e
    return [
        {"_id": email, "orderCount": count, "totalSpent": round(float(spent), 2), "lastOrder": last}
        for email, count, spent, last in rows
    ]
