from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, JSON, Text
from sqlalchemy.orm import validates
from sqlalchemy.sql import func
from .database import Base
import enum

class OrderStatus(str, enum.Enum):
    pending = "pending"
    processing = "processing"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"

CANCELLABLE_STATUSES = (OrderStatus.pending, OrderStatus.processing)

class KnowledgeCategory(str, enum.Enum):
    shipping = "shipping"
    returns = "returns"
    payment = "payment"
    account = "account"
    products = "products"
    general = "general"

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String, unique=True, index=True, nullable=False)
    customer_email = Column(String, index=True, nullable=False)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.pending, index=True)
    items = Column(JSON, nullable=False, default=list)
    shipping_address = Column(String, nullable=False)
    order_date = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    tracking_number = Column(String, nullable=True)
    estimated_delivery = Column(DateTime(timezone=True), nullable=True)
    total_amount = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @validates("customer_email")
    def _lower_email(self, key, value):
        return value.lower() if value else value

    def can_be_cancelled(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

class KnowledgeArticle(Base):
    __tablename__ = "knowledge_articles"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(Enum(KnowledgeCategory), nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    keywords = Column(JSON, nullable=False, default=list)
    priority = Column(Integer, nullable=False, default=1)
    views = Column(Integer, nullable=False, default=0)
    helpful_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @validates("keywords")
    def _lower_keywords(self, key, value):
        return [k.lower() for k in (value or [])]
