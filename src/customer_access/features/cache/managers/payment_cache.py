"""Payment cache manager."""

import logging
from typing import Any, Dict, List, Optional

from ..services.entity_cache_manager import EntityCacheManager
from ....config.constants import CacheGroups, CacheKeyTypes, CacheTTL

logger = logging.getLogger(__name__)


class PaymentCacheManager(EntityCacheManager):
    """Caches invoice payments and their per-invoice and per-customer lists."""

    CACHE_GROUP = CacheGroups.PAYMENT
    CACHE_EXPIRY = CacheTTL.PAYMENT
    ENTITY_NAME = "payment"
    KNOWN_CACHE_TYPES = (
        "payment",
        "payment_list",
        "payment_stats",
        "payment_total_count",
        "payment_by_invoice",
        "payment_by_customer",
        "payment_by_status",
        "payment_pending",
        "payment_relation",
        "payment_ids",
        CacheKeyTypes.DATATABLE,
    )

    LIST_CONTEXT = "payment_list"

    async def get_payment(self, payment_id: int) -> Optional[Dict[str, Any]]:
        return await self.get("payment", payment_id)

    async def set_payment(self, payment_id: int, payment: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        return await self.set("payment", payment, payment_id, ttl=ttl)

    async def get_payments_by_invoice(self, invoice_id: int) -> Optional[List[Dict[str, Any]]]:
        return await self.get("payment_by_invoice", invoice_id)

    async def set_payments_by_invoice(
        self,
        invoice_id: int,
        payments: List[Dict[str, Any]],
        ttl: Optional[int] = None,
    ) -> bool:
        return await self.set("payment_by_invoice", payments, invoice_id, ttl=ttl)

    async def get_payments_by_customer(self, customer_id: int) -> Optional[List[Dict[str, Any]]]:
        return await self.get("payment_by_customer", customer_id)

    async def set_payments_by_customer(
        self,
        customer_id: int,
        payments: List[Dict[str, Any]],
        ttl: Optional[int] = None,
    ) -> bool:
        return await self.set("payment_by_customer", payments, customer_id, ttl=ttl)

    async def get_pending_payments(self) -> Optional[List[Dict[str, Any]]]:
        return await self.get("payment_pending")

    async def set_pending_payments(self, payments: List[Dict[str, Any]]) -> bool:
        # Pending queue changes often
        return await self.set("payment_pending", payments, ttl=1800)

    async def invalidate(
        self,
        entity_id: int,
        tenant_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
    ) -> None:
        """Invalidate caches that could contain one payment."""
        await self.delete("payment", entity_id)
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)
        await self.clear("payment_stats")
        await self.clear("payment_total_count")
        await self.delete("payment_ids", "active")
        await self.clear("payment_relation")
        await self.delete("payment_pending")

        if invoice_id is not None:
            await self.delete("payment_by_invoice", invoice_id)
        if tenant_id is not None:
            await self.delete("payment_by_customer", tenant_id)
        logger.debug(f"Invalidated payment cache for payment {entity_id} (invoice {invoice_id}, customer {tenant_id})")

    async def invalidate_tenant_collection(self, tenant_id: int) -> None:
        """Invalidate one customer's payment list."""
        await self.delete("payment_by_customer", tenant_id)
        await self.invalidate_datatable_cache(self.LIST_CONTEXT)
