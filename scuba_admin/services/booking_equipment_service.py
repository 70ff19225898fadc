"""
Equipment assignment and basket services.

Availability conflicts are detected by the server; a create or update that
overlaps another assignment of the same item fails with
:class:`~scuba_admin.services.errors.AvailabilityConflictError`.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Union

from scuba_admin.models.base import Page
from scuba_admin.models.booking_equipment import (
    AvailabilityCheck,
    AvailabilityResult,
    BookingEquipment,
    BulkCreateResult,
    BulkReturnResult,
    DamageInfo,
    EquipmentBasket,
)
from scuba_admin.services.base import FormLike, ResourceService, to_payload

logger = logging.getLogger(__name__)

DamageMap = Mapping[int, Union[DamageInfo, Mapping]]


def damage_payload(damage_info: Optional[DamageMap]) -> Optional[Dict[str, dict]]:
    """Damage details keyed by assignment id, as the return endpoints expect."""
    if not damage_info:
        return None
    return {str(equipment_id): to_payload(info) for equipment_id, info in damage_info.items()}


class BookingEquipmentService(ResourceService[BookingEquipment]):
    """Equipment assignments under ``/booking-equipment``."""

    path = "/booking-equipment"
    record_model = BookingEquipment

    def list(self, page: int = 1) -> Page:
        return self._list({"page": page})

    def check_availability(self, check: FormLike) -> AvailabilityResult:
        """Ask whether an item is free between two dates."""
        payload = self.client.post(f"{self.path}/check-availability", json=to_payload(check))
        return AvailabilityResult.model_validate(payload or {})

    def bulk_check_availability(
        self, checks: Iterable[Union[AvailabilityCheck, Mapping]]
    ) -> List[AvailabilityResult]:
        payload = self.client.post(
            f"{self.path}/bulk-check-availability",
            json={"items": [to_payload(c) for c in checks]},
        )
        return [AvailabilityResult.model_validate(r) for r in (payload or {}).get("results", [])]

    def return_equipment(
        self, record_id: int, damage: Optional[Union[DamageInfo, Mapping]] = None
    ) -> BookingEquipment:
        """Mark one assignment returned, with optional damage details."""
        body = to_payload(damage) if damage is not None else {}
        return self._record(self.client.put(f"{self._item_path(record_id)}/return", json=body))

    def bulk_return(
        self, equipment_ids: Iterable[int], damage_info: Optional[DamageMap] = None
    ) -> BulkReturnResult:
        """Return several assignments in one request."""
        body = {"equipment_ids": list(equipment_ids)}
        damage = damage_payload(damage_info)
        if damage:
            body["damage_info"] = damage
        payload = self.client.post(f"{self.path}/bulk-return", json=body)
        return BulkReturnResult.model_validate(payload or {})

    def bulk_create(self, items: Iterable[FormLike]) -> BulkCreateResult:
        """Create many assignments in one request; the server reports per-item failures."""
        payload = self.client.post(
            f"{self.path}/bulk", json={"items": [to_payload(i) for i in items]}
        )
        result = BulkCreateResult.model_validate(payload or {})
        logger.info(
            f"Bulk assignment created {result.success_count}, failed {result.failed_count}"
        )
        return result


class EquipmentBasketService(ResourceService[EquipmentBasket]):
    """Rental baskets under ``/equipment-baskets``."""

    path = "/equipment-baskets"
    record_model = EquipmentBasket

    def list(self, status: Optional[str] = None, customer_id: Optional[int] = None) -> Page:
        return self._list({"status": status, "customer_id": customer_id})

    def return_basket(
        self,
        basket_id: int,
        equipment_ids: Optional[Iterable[int]] = None,
        damage_info: Optional[DamageMap] = None,
    ) -> EquipmentBasket:
        """
        Return a basket, or only some of its assignments.

        Args:
            basket_id: Basket to return
            equipment_ids: Assignments to return (all when omitted)
            damage_info: Damage details per assignment id
        """
        body = {}
        if equipment_ids is not None:
            body["equipment_ids"] = list(equipment_ids)
        damage = damage_payload(damage_info)
        if damage:
            body["damage_info"] = damage
        basket = self._record(self.client.put(f"{self._item_path(basket_id)}/return", json=body))
        logger.info(f"Returned basket {basket_id}")
        return basket
