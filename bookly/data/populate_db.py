"""Seed the database with sample book orders and support articles.

Usage:
  python -m bookly.data.populate_db [--orders 100] [--force]
"""
import argparse
import random
from datetime import datetime, timedelta

from .database import SessionLocal, create_tables
from .knowledge_index import KnowledgeIndex
from .models import KnowledgeArticle, KnowledgeCategory, Order, OrderStatus
from ..utils.logger import get_logger

logger = get_logger(__name__)

BOOK_TITLES = [
    "The Great Gatsby",
    "To Kill a Mockingbird",
    "1984",
    "Pride and Prejudice",
    "The Catcher in the Rye",
    "Harry Potter and the Sorcerer's Stone",
    "The Lord of the Rings",
    "Animal Farm",
    "Brave New World",
    "The Hobbit",
    "Fahrenheit 451",
    "Jane Eyre",
    "Wuthering Heights",
    "The Odyssey",
    "Moby Dick",
]

FIRST_NAMES = ["alice", "bob", "carla", "dev", "emma", "farid", "grace", "hiro", "ines", "jon"]
DOMAINS = ["example.com", "mail.test", "books.example"]
STREETS = ["Maple Ave", "Oak Street", "Pine Road", "Cedar Lane", "Elm Drive", "Birch Way"]
CITIES = [("Portland", "OR"), ("Austin", "TX"), ("Denver", "CO"), ("Raleigh", "NC"), ("Madison", "WI")]

KNOWLEDGE_ARTICLES = [
    {
        "category": KnowledgeCategory.shipping,
        "title": "Shipping Times and Options",
        "content": "Standard shipping takes 5-7 business days. Express shipping takes 2-3 business days. "
                   "Orders over $35 ship free with standard shipping. Orders are processed within 24 hours.",
        "keywords": ["shipping", "delivery", "express", "free shipping", "how long"],
        "priority": 10,
    },
    {
        "category": KnowledgeCategory.shipping,
        "title": "Tracking Your Order",
        "content": "Once your order ships you receive an email with a tracking number. Use it on the carrier's "
                   "website to follow your package. Tracking can take up to 24 hours to update.",
        "keywords": ["tracking", "track", "where is my order", "package"],
        "priority": 9,
    },
    {
        "category": KnowledgeCategory.shipping,
        "title": "International Shipping",
        "content": "We ship to over 50 countries. International delivery takes 10-21 business days. "
                   "Customs duties and taxes are the responsibility of the recipient.",
        "keywords": ["international", "customs", "overseas", "abroad"],
        "priority": 6,
    },
    {
        "category": KnowledgeCategory.returns,
        "title": "Return Policy",
        "content": "Books can be returned within 30 days of delivery in their original condition. "
                   "Start a return from your account page to get a prepaid return label. "
                   "Refunds are issued to the original payment method within 5-7 business days of receipt.",
        "keywords": ["return", "refund", "money back", "exchange"],
        "priority": 10,
    },
    {
        "category": KnowledgeCategory.returns,
        "title": "Damaged or Incorrect Items",
        "content": "If a book arrives damaged or you received the wrong title, contact support within 7 days "
                   "with a photo. We ship a replacement at no cost and you keep or recycle the damaged copy.",
        "keywords": ["damaged", "wrong item", "broken", "replacement"],
        "priority": 8,
    },
    {
        "category": KnowledgeCategory.payment,
        "title": "Accepted Payment Methods",
        "content": "We accept Visa, Mastercard, American Express, PayPal and Bookly gift cards. "
                   "Payment is charged when the order ships.",
        "keywords": ["payment", "credit card", "paypal", "gift card", "charge"],
        "priority": 7,
    },
    {
        "category": KnowledgeCategory.account,
        "title": "Resetting Your Password",
        "content": "Click 'Forgot password' on the login page and enter your email address. "
                   "You will receive a reset link valid for 1 hour. Check your spam folder if it does not arrive.",
        "keywords": ["password", "reset", "login", "forgot", "sign in"],
        "priority": 8,
    },
    {
        "category": KnowledgeCategory.account,
        "title": "Cancelling an Order",
        "content": "Orders can be cancelled while they are pending or processing. Once an order has shipped "
                   "it can no longer be cancelled, but you can return it after delivery.",
        "keywords": ["cancel", "cancellation", "stop order"],
        "priority": 9,
    },
    {
        "category": KnowledgeCategory.products,
        "title": "Book Formats and Editions",
        "content": "Most titles are available in hardcover and paperback. Product pages list the edition, "
                   "page count and publisher. Signed editions are marked with a badge.",
        "keywords": ["hardcover", "paperback", "edition", "format"],
        "priority": 5,
    },
    {
        "category": KnowledgeCategory.general,
        "title": "Contacting Customer Support",
        "content": "Our support team is available Monday to Friday, 9am to 6pm Eastern. "
                   "Chat with us here or email support@bookly.example.",
        "keywords": ["contact", "support", "hours", "help"],
        "priority": 4,
    },
]


def generate_orders(count: int = 100, rng: random.Random = None):
    rng = rng or random.Random()
    now = datetime.now()
    seen = set()
    orders = []

    while len(orders) < count:
        order_id = f"ORD-{rng.randint(10000, 99999)}"
        if order_id in seen:
            continue
        seen.add(order_id)

        status = rng.choice(list(OrderStatus))
        order_date = now - timedelta(days=rng.randint(0, 365), hours=rng.randint(0, 23))
        city, state = rng.choice(CITIES)

        orders.append(Order(
            order_id=order_id,
            customer_email=f"{rng.choice(FIRST_NAMES)}{rng.randint(1, 40)}@{rng.choice(DOMAINS)}",
            status=status,
            items=rng.sample(BOOK_TITLES, rng.randint(1, 4)),
            shipping_address=f"{rng.randint(1, 9999)} {rng.choice(STREETS)}, {city}, {state} {rng.randint(10000, 99999)}",
            order_date=order_date,
            tracking_number=(
                f"TRK{''.join(rng.choices('ABCDEFGHJKLMNPQRSTUVWXYZ0123456789', k=10))}"
                if status in (OrderStatus.shipped, OrderStatus.delivered) else None
            ),
            estimated_delivery=(
                order_date + timedelta(days=rng.randint(3, 14)) if status != OrderStatus.cancelled else None
            ),
            total_amount=round(rng.uniform(15.99, 199.99), 2),
        ))

    return orders


def populate(order_count: int = 100, force: bool = False, index: KnowledgeIndex = None):
    """Insert sample data and rebuild the knowledge index."""
    create_tables()

    db = SessionLocal()
    try:
        if force:
            db.query(Order).delete()
            db.query(KnowledgeArticle).delete()
            db.commit()

        if db.query(Order).count() > 0:
            logger.info("Orders table is not empty. Skipping order seeding.")
        else:
            db.add_all(generate_orders(order_count))
            logger.info(f"Seeded {order_count} orders")

        if db.query(KnowledgeArticle).count() > 0:
            logger.info("Knowledge table is not empty. Skipping article seeding.")
        else:
            db.add_all(KnowledgeArticle(**article) for article in KNOWLEDGE_ARTICLES)
            logger.info(f"Seeded {len(KNOWLEDGE_ARTICLES)} knowledge articles")

        db.commit()

        (index or KnowledgeIndex()).rebuild(db.query(KnowledgeArticle).all())
    except Exception:
        db.rollback()
        logger.exception("Error populating database")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the Bookly support database")
    parser.add_argument("--orders", type=int, default=100, help="number of orders to generate")
    parser.add_argument("--force", action="store_true", help="delete existing orders and articles first")
    args = parser.parse_args()
    populate(order_count=args.orders, force=args.force)
