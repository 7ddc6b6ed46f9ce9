#!/usr/bin/env python3
"""
Prompt builder module for the Bookly support backend.

This module assembles the single prompt sent to the LLM from the persona
preamble, any matched orders, any matched knowledge articles and the
customer's question. It is pure string assembly; nothing here calls the LLM.
"""

from datetime import datetime
from typing import Any, List, Optional

from ..schemas.io_models import KnowledgeRetrieval, OrderRetrieval

PERSONA = "You are Bookly's helpful customer support agent. "

NO_CONTEXT = (
    "\n\nNo specific order or knowledge base information found. "
    "Provide a helpful general response based on common e-commerce support practices."
)

INSTRUCTIONS = """Provide a helpful, concise, and friendly response. If order information is provided, reference specific details.
Be professional but conversational. If you don't have enough information, politely ask for more details.
Do not mention that you're using a knowledge base or database - just provide the information naturally."""


def format_date(value: Optional[datetime]) -> str:
    """Calendar-date form, e.g. 'Wed Jan 15 2025'."""
    if value is None:
        return "unknown"
    return value.strftime("%a %b %d %Y")


def _status(order) -> str:
    status = order.status
    return getattr(status, "value", status)


class PromptBuilder:
    """Builds the support prompt from retrieval results."""

    def order_detail_block(self, order: Any) -> str:
        text = "\n\nORDER DETAILS:\n"
        text += f"Order ID: {order.order_id}\n"
        text += f"Status: {_status(order)}\n"
        text += f"Items: {', '.join(order.items or [])}\n"
        text += f"Order Date: {format_date(order.order_date)}\n"
        if order.tracking_number:
            text += f"Tracking Number: {order.tracking_number}\n"
        if order.estimated_delivery:
            text += f"Estimated Delivery: {format_date(order.estimated_delivery)}\n"
        text += f"Shipping Address: {order.shipping_address}\n"
        return text

    def order_list_block(self, orders: List[Any]) -> str:
        text = "\n\nRECENT ORDERS FOR CUSTOMER:\n"
        for order in orders:
            text += f"- Order {order.order_id}: {_status(order)}, ordered on {format_date(order.order_date)}"
            if order.tracking_number:
                text += f", tracking: {order.tracking_number}"
            text += "\n"
        return text

    def knowledge_block(self, articles: List[Any]) -> str:
        text = "\n\nRELEVANT KNOWLEDGE BASE:\n"
        for article in articles:
            category = getattr(article.category, "value", article.category)
            text += f"\n[{category.upper()}] {article.title}\n{article.content}\n"
        return text

    def build_context(self, orders: OrderRetrieval, knowledge: KnowledgeRetrieval) -> str:
        context = PERSONA

        if orders.orders:
            if orders.single:
                context += self.order_detail_block(orders.orders[0])
            else:
                context += self.order_list_block(orders.orders)

        if knowledge.articles:
            context += self.knowledge_block(knowledge.articles)

        if not orders.orders and not knowledge.articles:
            context += NO_CONTEXT

        return context

    def build_prompt(self, query: str, orders: OrderRetrieval, knowledge: KnowledgeRetrieval) -> str:
        """
        Build a prompt for the LLM.

        Args:
            query: The customer's question, verbatim
            orders: Order retrieval result
            knowledge: Knowledge retrieval result

        Returns:
            Formatted prompt string
        """
        context = self.build_context(orders, knowledge)
        return f"{context}\n\nUSER QUESTION: {query}\n\n{INSTRUCTIONS}"
