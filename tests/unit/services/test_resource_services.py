"""Tests for the REST resource services."""

import datetime as dt
from decimal import Decimal

import pytest

from scuba_admin.models.booking_equipment import AvailabilityCheck, DamageInfo
from scuba_admin.models.customer import Customer, CustomerForm
from scuba_admin.models.equipment import ServiceHistoryForm
from scuba_admin.services.agent_service import AgentService
from scuba_admin.services.base import to_payload, unwrap_record
from scuba_admin.services.billing_service import InvoiceService, PaymentService
from scuba_admin.services.booking_equipment_service import (
    BookingEquipmentService,
    EquipmentBasketService,
    damage_payload,
)
from scuba_admin.services.customer_service import BookingService, CustomerService
from scuba_admin.services.equipment_service import (
    XLSX_MIME,
    EquipmentItemService,
    EquipmentService,
    ServiceHistoryService,
)
from scuba_admin.services.package_service import DiveLogService, PackageService


class TestHelpers:
    def test_unwrap_envelope(self):
        assert unwrap_record({"data": {"id": 1}}) == {"id": 1}

    def test_unwrap_leaves_record(self):
        record = {"id": 1, "data": {"x": 1}}
        assert unwrap_record(record) is record

    def test_to_payload_mapping(self):
        assert to_payload({"a": 1}) == {"a": 1}

    def test_damage_payload_keys_are_strings(self):
        result = damage_payload(
            {5: DamageInfo(damage_reported=True, damage_description="Dent"), 6: {"damage_reported": False}}
        )
        assert result == {
            "5": {"damage_reported": True, "damage_description": "Dent", "charge_customer": False},
            "6": {"damage_reported": False},
        }
        assert damage_payload({}) is None


class TestCustomerService:
    """Test CRUD plumbing through the customer service."""

    def test_list(self, mock_client, customer_payload, paginated):
        mock_client.get.return_value = paginated([customer_payload], last_page=2, total=25)

        page = CustomerService(mock_client).list(page=1, per_page=20, search="ana")

        mock_client.get.assert_called_once_with(
            "/customers", params={"page": 1, "per_page": 20, "search": "ana"}
        )
        assert isinstance(page.data[0], Customer)
        assert page.has_next

    def test_get_unwraps(self, mock_client, customer_payload):
        mock_client.get.return_value = {"data": customer_payload}
        customer = CustomerService(mock_client).get(7)
        mock_client.get.assert_called_once_with("/customers/7")
        assert customer.full_name == "Ana Reef"

    def test_create_sends_payload(self, mock_client, customer_payload):
        mock_client.post.return_value = customer_payload
        CustomerService(mock_client).create(CustomerForm(full_name="Ana Reef", email=""))
        mock_client.post.assert_called_once_with("/customers", json={"full_name": "Ana Reef"})

    def test_update_and_delete(self, mock_client, customer_payload):
        mock_client.put.return_value = customer_payload
        service = CustomerService(mock_client)

        service.update(7, {"phone": "123"})
        service.delete(7)

        mock_client.put.assert_called_once_with("/customers/7", json={"phone": "123"})
        mock_client.delete.assert_called_once_with("/customers/7")

    def test_bulk_assign_agent(self, mock_client):
        mock_client.post.return_value = {"success_count": 2, "failed_count": 0}
        result = CustomerService(mock_client).bulk_assign_agent(iter([1, 2]), 3)
        mock_client.post.assert_called_once_with(
            "/customers/bulk-assign-agent", json={"customer_ids": [1, 2], "agent_id": 3}
        )
        assert result.success_count == 2

    def test_bulk_assign_needs_customers(self, mock_client):
        with pytest.raises(ValueError, match="Select at least one customer"):
            CustomerService(mock_client).bulk_assign_agent([], 3)
        mock_client.post.assert_not_called()


class TestBookingService:
    def test_list(self, mock_client, paginated):
        mock_client.get.return_value = paginated([{"id": 1, "status": "Pending"}])
        page = BookingService(mock_client).list(page=2)
        mock_client.get.assert_called_once_with("/bookings", params={"page": 2})
        assert page.data[0].status == "Pending"


class TestEquipmentServices:
    """Test equipment, item and service history services."""

    def test_bulk_create(self, mock_client):
        mock_client.post.return_value = {"success_count": 1, "error_count": 0}
        EquipmentService(mock_client).bulk_create([{"name": "BCD"}])
        mock_client.post.assert_called_once_with("/equipment/bulk", json={"equipment": [{"name": "BCD"}]})

    def test_import_preview(self, mock_client):
        mock_client.upload.return_value = {"valid": [{"name": "BCD"}], "summary": {"valid": 1}}
        preview = EquipmentService(mock_client).import_preview("equipment.xlsx")
        mock_client.upload.assert_called_once_with("/equipment/import-preview", "equipment.xlsx")
        assert preview.summary == {"valid": 1}

    def test_download_template_rejects_json(self, mock_client, tmp_path):
        destination = tmp_path / "template.xlsx"
        mock_client.download.return_value = destination
        assert EquipmentService(mock_client).download_template(destination) == destination
        mock_client.download.assert_called_once_with(
            "/equipment/import-template", destination, accept=XLSX_MIME, reject_json=True
        )

    def test_item_list_filters(self, mock_client, paginated):
        mock_client.get.return_value = paginated([])
        EquipmentItemService(mock_client).list(equipment_id=3, status="Available")
        mock_client.get.assert_called_once_with(
            "/equipment-items",
            params={
                "page": 1,
                "per_page": None,
                "search": None,
                "equipment_id": 3,
                "status": "Available",
            },
        )

    def test_service_history_fills_due_date(self, mock_client):
        mock_client.post.return_value = {"data": {"id": 5, "service_date": "2024-03-01"}}
        record = ServiceHistoryService(mock_client).create(
            4, ServiceHistoryForm(service_date=dt.date(2024, 3, 1), cost=Decimal("35")), 30
        )
        mock_client.post.assert_called_once_with(
            "/equipment-items/4/service-history",
            json={"service_date": "2024-03-01", "cost": 35.0, "next_service_due_date": "2024-03-31"},
        )
        assert record.id == 5

    def test_service_history_paths(self, mock_client):
        mock_client.get.return_value = {"id": 5}
        mock_client.put.return_value = {"id": 5}
        service = ServiceHistoryService(mock_client)

        service.get(4, 5)
        service.update(4, 5, {"notes": "o-rings"})
        service.delete(4, 5)

        mock_client.get.assert_called_once_with("/equipment-items/4/service-history/5")
        mock_client.put.assert_called_once_with(
            "/equipment-items/4/service-history/5", json={"notes": "o-rings"}
        )
        mock_client.delete.assert_called_once_with("/equipment-items/4/service-history/5")

    def test_bulk_service(self, mock_client):
        mock_client.post.return_value = {"created_count": 2, "errors": None}
        result = ServiceHistoryService(mock_client).bulk_create({"equipment_item_ids": [1, 2]})
        assert result.created_count == 2
        assert result.errors == []


class TestBookingEquipmentService:
    """Test assignments and baskets."""

    def test_check_availability(self, mock_client):
        mock_client.post.return_value = {"available": False, "conflicting_assignments": [{"id": 9}]}
        result = BookingEquipmentService(mock_client).check_availability(
            AvailabilityCheck(equipment_item_id=4, checkout_date="2024-06-01", return_date="2024-06-03")
        )
        mock_client.post.assert_called_once_with(
            "/booking-equipment/check-availability",
            json={"equipment_item_id": 4, "checkout_date": "2024-06-01", "return_date": "2024-06-03"},
        )
        assert not result.available
        assert result.conflicting_assignments[0].id == 9

    def test_bulk_check(self, mock_client):
        mock_client.post.return_value = {"results": [{"index": 0, "available": True}]}
        results = BookingEquipmentService(mock_client).bulk_check_availability(
            [{"equipment_item_id": 4, "checkout_date": "2024-06-01", "return_date": "2024-06-02"}]
        )
        assert results[0].available

    def test_return_without_damage(self, mock_client):
        mock_client.put.return_value = {"id": 3, "assignment_status": "Returned"}
        record = BookingEquipmentService(mock_client).return_equipment(3)
        mock_client.put.assert_called_once_with("/booking-equipment/3/return", json={})
        assert record.assignment_status == "Returned"

    def test_bulk_return_with_damage(self, mock_client):
        mock_client.post.return_value = {"message": "ok", "equipment": []}
        BookingEquipmentService(mock_client).bulk_return(
            [3, 4], {4: DamageInfo(damage_reported=True, damage_description="Torn")}
        )
        mock_client.post.assert_called_once_with(
            "/booking-equipment/bulk-return",
            json={
                "equipment_ids": [3, 4],
                "damage_info": {
                    "4": {"damage_reported": True, "damage_description": "Torn", "charge_customer": False}
                },
            },
        )

    def test_bulk_create(self, mock_client):
        mock_client.post.return_value = {
            "success_count": 1,
            "failed_count": 1,
            "success": [{"id": 10}],
            "failed": [{"index": 1, "error": "Not available", "conflicting_assignments": None}],
        }
        result = BookingEquipmentService(mock_client).bulk_create([{"basket_id": 1}, {"basket_id": 1}])
        assert result.failed[0].conflicting_assignments == []

    def test_return_whole_basket(self, mock_client):
        mock_client.put.return_value = {"id": 2, "status": "Returned"}
        basket = EquipmentBasketService(mock_client).return_basket(2)
        mock_client.put.assert_called_once_with("/equipment-baskets/2/return", json={})
        assert basket.status == "Returned"

    def test_return_part_of_basket(self, mock_client):
        mock_client.put.return_value = {"id": 2, "status": "Active"}
        EquipmentBasketService(mock_client).return_basket(2, equipment_ids=[7])
        mock_client.put.assert_called_once_with(
            "/equipment-baskets/2/return", json={"equipment_ids": [7]}
        )


class TestAgentService:
    def test_performance(self, mock_client):
        mock_client.get.return_value = {"agent": {"id": 1, "agent_name": "Blue"}, "metrics": {"total_clients": 4}}
        perf = AgentService(mock_client).performance(1)
        mock_client.get.assert_called_once_with("/agents/1/performance")
        assert perf.metrics["total_clients"] == 4

    def test_commissions(self, mock_client, paginated):
        mock_client.get.return_value = paginated([{"id": 1, "commission_amount": "12.00"}])
        page = AgentService(mock_client).commissions(1, page=2)
        mock_client.get.assert_called_once_with(
            "/agents/1/commissions", params={"page": 2, "per_page": None, "search": None}
        )
        assert page.data[0]["commission_amount"] == "12.00"

    def test_calculate_all(self, mock_client):
        mock_client.post.return_value = {"message": "done"}
        AgentService(mock_client).calculate_commissions(1)
        mock_client.post.assert_called_once_with(
            "/agents/1/commissions/calculate", json={"invoice_ids": None}
        )


class TestBillingServices:
    def test_generate_from_booking(self, mock_client):
        mock_client.post.return_value = {"data": {"id": 4, "invoice_no": "INV-4", "total": "100"}}
        invoice = InvoiceService(mock_client).generate_from_booking({"booking_id": 3})
        mock_client.post.assert_called_once_with(
            "/invoices/generate-from-booking", json={"booking_id": 3}
        )
        assert invoice.total == Decimal("100")

    def test_invoice_filters(self, mock_client, paginated):
        mock_client.get.return_value = paginated([])
        InvoiceService(mock_client).list(status="Draft", invoice_type="Full")
        mock_client.get.assert_called_once_with(
            "/invoices",
            params={"status": "Draft", "customer_id": None, "invoice_type": "Full", "page": 1},
        )

    def test_payments_for_invoice(self, mock_client):
        mock_client.get.return_value = [{"id": 1, "amount": "50"}]
        page = PaymentService(mock_client).list(invoice_id=4)
        mock_client.get.assert_called_once_with("/payments", params={"invoice_id": 4})
        assert page.data[0].amount == Decimal("50")


class TestPackageServices:
    """Test package and dive log services."""

    def test_calculate_price(self, mock_client):
        mock_client.post.return_value = {"package_id": 1, "persons": 3, "total_price": "2550"}
        result = PackageService(mock_client).calculate_price(1, 3, option_ids=[2])
        mock_client.post.assert_called_once_with(
            "/packages/1/calculate", json={"persons": 3, "option_ids": [2]}
        )
        assert result.total_price == Decimal("2550")

    def test_calculate_without_options(self, mock_client):
        mock_client.post.return_value = {"persons": 1, "total_price": "850"}
        PackageService(mock_client).calculate_price(1, 1)
        mock_client.post.assert_called_once_with("/packages/1/calculate", json={"persons": 1})

    def test_breakdown(self, mock_client):
        mock_client.get.return_value = {"breakdown": [], "total_price": "0"}
        PackageService(mock_client).breakdown(1)
        mock_client.get.assert_called_once_with("/packages/1/breakdown")

    def test_customer_dive_logs(self, mock_client, paginated):
        mock_client.get.return_value = paginated([{"id": 3, "total_dive_time": 45}])
        page = DiveLogService(mock_client).list_for_customer(7, date_from="2024-01-01")
        mock_client.get.assert_called_once_with(
            "/customers/7/dive-logs",
            params={"page": 1, "per_page": None, "date_from": "2024-01-01", "date_to": None},
        )
        assert page.data[0].total_dive_time == 45
