#!/usr/bin/env python3
"""
Database State Checker

Prints the orders and knowledge articles currently stored for the
Bookly support backend.
"""

from bookly.data.analytics import order_overview
from bookly.data.database import SessionLocal
from bookly.data.models import KnowledgeArticle, Order


def check_database_state(limit: int = 10):
    """Check and display the current database state."""
    db = SessionLocal()

    try:
        print("=" * 80)
        print("CURRENT DATABASE STATE")
        print("=" * 80)

        overview = order_overview(db)
        print(f"\nOrders ({overview['totalOrders']} total):")
        for row in overview["byStatus"]:
            print(f"  - {row['_id']}: {row['count']}")

        print(f"\nMost recent {limit}:")
        for o in db.query(Order).order_by(Order.order_date.desc()).limit(limit):
            print(f"  - {o.order_id} [{o.status.value}] {o.customer_email}")
            print(f"    Items: {', '.join(o.items or [])}")
            print(f"    Total: ${o.total_amount or 0:.2f}")
            print(f"    Ordered: {o.order_date}")

        articles = db.query(KnowledgeArticle).order_by(KnowledgeArticle.priority.desc()).all()
        print(f"\nKnowledge articles ({len(articles)} total):")
        for a in articles:
            print(f"  - [{a.category.value}] {a.title} (priority {a.priority}, {a.views} views, {a.helpful_count} helpful)")

        print("\n" + "=" * 80)

    except Exception as e:
        print(f"Error checking database: {e}")
    finally:
        db.close()


if __name__ == "__main__":
    check_database_state()
