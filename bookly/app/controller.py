"""Controller / Orchestrator for support queries.

One call handles one query from start to finish:
extract -> classify -> retrieve -> compose -> generate -> shape result.
Nothing is kept between calls.
"""
from typing import Optional

from .generate import GenerationClient
from .prompt_builder import PromptBuilder
from .retrieval import SupportRetriever
from ..data.store import SupportStore
from ..nlu.entity_extractor import EntityExtractor
from ..nlu.rules import classify_intent
from ..schemas.io_models import QueryResult
from ..utils.errors import InputError
from ..utils.logger import get_logger
from ..utils.security import mask_pii

logger = get_logger(__name__)


class Controller:
    def __init__(
        self,
        store: SupportStore,
        generator: Optional[GenerationClient] = None,
        retriever: Optional[SupportRetriever] = None,
        builder: Optional[PromptBuilder] = None,
        extractor: Optional[EntityExtractor] = None,
    ):
        self.store = store
        self.generator = generator or GenerationClient()
        self.retriever = retriever or SupportRetriever(store)
        self.builder = builder or PromptBuilder()
        self.entity_extractor = extractor or EntityExtractor()

    def handle_query(self, query: Optional[str]) -> QueryResult:
        """
        Answer one customer query.

        Raises:
            ConfigurationError: no generation credential; raised before any retrieval
            InputError: missing or blank query
            PersistenceError, ProviderError, GenerationTimeoutError: abort the request
        """
        # credential check precedes input validation and every lookup
        self.generator.ensure_configured()

        if query is None or not str(query).strip():
            raise InputError("Query is required")

        logger.info(f"[WORKFLOW] 1. Controller received query: '{mask_pii(query)}'")

        intent = classify_intent(query)
        logger.info(f"[WORKFLOW] 2. Detected intent: {intent}")

        entities = self.entity_extractor.extract(query)
        logger.info(
            f"[WORKFLOW] 3. Entities extracted: order_id={entities.order_id} "
            f"email={'yes' if entities.email else 'no'}"
        )

        logger.info("[WORKFLOW] 4. Retrieving orders and knowledge...")
        orders = self.retriever.retrieve_orders(intent, entities)
        knowledge = self.retriever.retrieve_knowledge(query)

        prompt = self.builder.build_prompt(query, orders, knowledge)
        logger.info(f"[WORKFLOW] 5. Prompt built, total length: {len(prompt)}")
        self.retriever.record_views(knowledge.articles)

        tools_used = orders.tools + knowledge.tools + [self.generator.tool_name]
        response = self.generator.generate_answer(prompt)
        logger.info(f"[WORKFLOW] 7. Response generated using: {', '.join(tools_used)}")

        return QueryResult(
            intent=intent,
            entities=entities,
            orders=orders,
            knowledge=knowledge,
            prompt=prompt,
            response=response,
            tools_used=tools_used,
        )
