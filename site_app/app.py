"""Storefront service bootstrap."""

import logging
from typing import Any, Dict, List, Optional

from site_app.config import SiteConfig
from site_app.logging_config import configure_logging, get_logger, log_event, operation_context
from logic import quote_cart
from memory.quote_sessions import (
    JSONQuoteSessionStore,
    QuoteSessionManager,
    QuoteSessionStore,
    SQLiteQuoteSessionStore,
)
from models.quote import Customization
from models.seed_content import DEFAULT_CONTENT
from tools.catalogue_service import PRODUCTS_KEY, CatalogueService
from tools.content_store import CREDENTIAL_KEY, ContentStore, JSONContentStore, SQLiteContentStore
from tools.product_advisor import ProductAdvisor
from tools.quote_sheet import GoogleSheetsQuoteSink, MockQuoteSink, QuoteSink


LOGGER = get_logger(__name__)


class StorefrontApp:
    """Wires together content, catalogue, quote carts, the quote sink and the advisor."""

    def __init__(
        self,
        config: SiteConfig | None = None,
        *,
        content_store: ContentStore | None = None,
        quote_session_store: QuoteSessionStore | None = None,
        quote_sink: QuoteSink | None = None,
        advisor: ProductAdvisor | None = None,
    ) -> None:
        self.config = config or SiteConfig.from_env()
        configure_logging()

        self.content_store = content_store or self._build_content_store()
        self.catalogue = CatalogueService(self.content_store)
        self.quote_sessions = QuoteSessionManager(quote_session_store or self._build_quote_session_store())
        self.quote_sink = quote_sink or self._build_quote_sink()
        self.advisor = advisor or ProductAdvisor(
            model_name=self.config.model,
            brand_name=self.config.brand_name,
            api_key=self.config.gemini_api_key,
        )

    def _build_content_store(self) -> ContentStore:
        if self.config.content_store_backend.lower() == "json":
            return JSONContentStore(self.config.content_store_path or "data/content")
        return SQLiteContentStore(self.config.content_store_path or "data/content.db")

    def _build_quote_session_store(self) -> QuoteSessionStore:
        if self.config.quote_session_backend.lower() == "sqlite":
            return SQLiteQuoteSessionStore(self.config.quote_session_path or "data/quote_sessions.db")
        return JSONQuoteSessionStore(self.config.quote_session_path or "data/quote_sessions")

    def _build_quote_sink(self) -> QuoteSink:
        if self.config.quote_sink.lower() == "sheets":
            return GoogleSheetsQuoteSink(
                sheet_id=self.config.google_sheet_id or "",
                credentials_path=self.config.google_credentials_path,
                service_account_email=self.config.google_service_account_email,
                private_key=self.config.google_private_key,
            )
        return MockQuoteSink()

    def seed_content(self) -> List[str]:
        """Write the default content entries, plus the admin credential when configured."""

        written = []
        for key, value in DEFAULT_CONTENT.items():
            self.content_store.put(key, value)
            written.append(key)
        if self.config.admin_username and self.config.admin_password:
            self.content_store.put(
                CREDENTIAL_KEY,
                {"username": self.config.admin_username, "password": self.config.admin_password},
            )
            written.append(CREDENTIAL_KEY)
        log_event(LOGGER, logging.INFO, "content_seeded", keys=written)
        return written

    def add_to_quote(self, session_id: str, request: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Resolve product and colour by name, then add the line to the session cart.

        Raises :class:`LookupError` for unknown products or colours.
        """

        product = self.catalogue.find_product(request["product_id"])
        if product is None:
            raise LookupError(f"Unknown product {request['product_id']}")
        color = product.color(request["color_name"])
        if color is None:
            raise LookupError(f"Product {product.id} has no colour {request['color_name']}")
        customizations = [Customization(**entry) for entry in request.get("customizations") or []]
        items = self.quote_sessions.add_item(
            session_id,
            product,
            color,
            request["size_quantities"],
            logo_file=request.get("logo_filename"),
            design_file=request.get("design_filename"),
            customizations=customizations,
        )
        return self.describe_items(items)

    @staticmethod
    def describe_items(items: List[Any]) -> List[Dict[str, Any]]:
        return [
            {"quoteItemId": item.quote_item_id, "totalQuantity": quote_cart.total_quantity(item), **item.to_submission()}
            for item in items
        ]

    def quote_session_view(self, session_id: str) -> Dict[str, Any]:
        items = self.quote_sessions.get_items(session_id)
        return {
            "session_id": session_id,
            "items": self.describe_items(items),
            "summary": quote_cart.quote_summary(items),
        }

    def submit_quote(self, contact: Dict[str, Any], items: List[Dict[str, Any]]) -> str:
        """Send an already serialised quote to the sink."""

        with operation_context("app:submit_quote") as correlation_id:
            quote_id = self.quote_sink.submit(contact, items)
            log_event(
                LOGGER,
                logging.INFO,
                "quote_submitted",
                quote_id=quote_id,
                item_count=len(items),
                correlation_id=correlation_id,
            )
            return quote_id

    def submit_session_quote(self, session_id: str, contact: Dict[str, Any]) -> str:
        """Submit a session cart; the cart is only cleared once the sink accepted it."""

        items = self.quote_sessions.get_items(session_id)
        if not items:
            raise ValueError("Your quote list is empty.")
        quote_id = self.submit_quote(contact, quote_cart.to_submitted_items(items))
        self.quote_sessions.clear(session_id)
        return quote_id

    def advise(self, history: List[Dict[str, Any]], products: Optional[List[Dict[str, Any]]] = None) -> str:
        if products is None:
            products = self.content_store.get(PRODUCTS_KEY) or []
        return self.advisor.reply(history, products)


__all__ = ["StorefrontApp"]
