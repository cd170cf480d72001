"""Invoice cache manager."""

import logging
from typing import Any, Dict, List, Optional

from ..services.entity_cache_manager import EntityCacheManager
from ....config.constants import CacheGroups, CacheKeyTypes, CacheTTL

logger = logging.getLogger(__name__)


class InvoiceCacheManager(EntityCacheManager):
    """Caches membership invoices, per-customer invoice lists and numbering."""

    CACHE_GROUP = CacheGroups.INVOICE
    CACHE_EXPIRY = CacheTTL.INVOICE
    ENTITY_NAME = "invoice"
    KNOWN_CACHE_TYPES = (
        "invoice",
        "invoice_list",
        "invoice_stats",
        "invoice_total_count",
        "invoice_by_customer",
        "invoice_by_status",
        "invoice_by_number",
        "invoice_next_number",
        "invoice_relation",
        "invoice_ids",
        "number_exists",
        CacheKeyTypes.DATATABLE,
    )

    LIST_CONTEXT = "invoice_list"

    async def get_invoice(self, invoice_id: int) -> Optional[Dict[str, Any]]:
        return await self.get("invoice", invoice_id)

    async def set_invoice(self, invoice_id: int, invoice: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        return await self.set("invoice", invoice, invoice_id, ttl=ttl)

    async def get_invoice_by_number(self, invoice_number: str) -> Optional[Dict[str, Any]]:
        return await self.get("invoice_by_number", invoice_number)

    async def set_invoice_by_number(
        self,
        invoice_number: str,
        invoice: Dict[str, Any],
        ttl: Optional[int] = None,
    ) -> bool:
        return await self.set("invoice_by_number", invoice, invoice_number, ttl=ttl)

    async def get_invoices_by_customer(self, customer_id: int) -> Optional[List[Dict[str, Any]]]:
        return await self.get("invoice_by_customer", customer_id)

    async def set_invoices_by_customer(
        self,
        customer_id: int,
        invoices: List[Dict[str, Any]],
        ttl: Optional[int] = None,
    ) -> bool:
        return await self.set("invoice_by_customer", invoices, customer_id, ttl=ttl)

    async def get_next_invoice_number(self, prefix: str) -> Optional[int]:
        """Get the next sequence number for an invoice prefix (e.g. 'INV-202501')."""
        return await self.get("invoice_next_number", prefix)

    async def set_next_invoice_number(self, prefix: str, next_number: int) -> bool:
        # Numbering races with concurrent creation, keep it short-lived
        return await self.set("invoice_next_number", next_number, prefix, ttl=300)

    async def invalidate(self, entity_id: int, tenant_id: Optional[int] = None) -> None:
        """Invalidate caches that could contain one invoice."""
        await self.delete("invoice", entity_id)
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)
        await self.clear("invoice_stats")
        await self.clear("invoice_total_count")
        await self.delete("invoice_ids", "active")
        await self.clear("invoice_relation")
        await self.clear("invoice_next_number")

        if tenant_id is not None:
            await self.delete("invoice_by_customer", tenant_id)
        logger.debug(f"Invalidated invoice cache for invoice {entity_id} (customer {tenant_id})")

    async def invalidate_tenant_collection(self, tenant_id: int) -> None:
        """Invalidate one customer's invoice list."""
        await self.delete("invoice_by_customer", tenant_id)
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)
