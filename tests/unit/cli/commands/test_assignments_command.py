"""Tests for equipment assignment commands."""

from scuba_admin.cli import cli
from scuba_admin.services.errors import AvailabilityConflictError

CONFLICT = {
    "id": 31,
    "customer_name": "Rui Costa",
    "checkout_date": "2024-06-01",
    "return_date": "2024-06-04",
    "basket_no": "B-0007",
    "assignment_status": "Checked Out",
}


class TestCreateAssignment:
    """Test 'assignments create'."""

    def test_return_date_defaults_to_next_day(self, runner, cli_obj, mock_client):
        mock_client.post.return_value = {"id": 90, "equipment_item_id": 40}
        result = runner.invoke(
            cli,
            ["assignments", "create", "--booking-id", "12", "--item-id", "40", "--checkout-date", "2024-06-01"],
            obj=cli_obj,
        )
        assert result.exit_code == 0
        assert "(2024-06-01 to 2024-06-02)" in result.output
        mock_client.post.assert_called_once_with(
            "/booking-equipment",
            json={
                "booking_id": 12,
                "equipment_source": "Center",
                "equipment_item_id": 40,
                "checkout_date": "2024-06-01",
                "return_date": "2024-06-02",
            },
        )

    def test_missing_item(self, runner, cli_obj, mock_client):
        result = runner.invoke(cli, ["assignments", "create", "--booking-id", "12"], obj=cli_obj)
        assert result.exit_code == 3
        assert "Equipment item is required for Center equipment" in result.output

    def test_conflict(self, runner, cli_obj, mock_client):
        mock_client.post.side_effect = AvailabilityConflictError(
            "Equipment is not available for the requested dates.",
            422,
            {
                "message": "Equipment is not available for the requested dates.",
                "checkout_date": "2024-06-02",
                "return_date": "2024-06-03",
                "conflicting_assignments": [CONFLICT],
            },
        )
        result = runner.invoke(
            cli,
            ["assignments", "create", "--basket-id", "2", "--item-id", "40", "--checkout-date", "2024-06-02"],
            obj=cli_obj,
        )
        assert result.exit_code == 8
        assert "1. Customer: Rui Costa (Basket: B-0007)" in result.output
        assert "Status: Checked Out" in result.output


class TestCheckAvailability:
    def test_single_available(self, runner, cli_obj, mock_client):
        mock_client.post.return_value = {"available": True}
        result = runner.invoke(
            cli, ["assignments", "check", "40", "--checkout-date", "2024-06-01"], obj=cli_obj
        )
        assert result.exit_code == 0
        assert "Item 40 is available" in result.output

    def test_bulk_with_conflict(self, runner, cli_obj, mock_client):
        mock_client.post.return_value = {
            "results": [
                {"index": 0, "available": True},
                {"index": 1, "available": False, "conflicting_assignments": [CONFLICT]},
            ]
        }
        result = runner.invoke(
            cli,
            ["assignments", "check", "40", "41", "--checkout-date", "2024-06-01", "--return-date", "2024-06-03"],
            obj=cli_obj,
        )
        assert result.exit_code == 8
        assert "Item 41: Equipment is not available" in result.output
        assert "Requested dates: 2024-06-01 to 2024-06-03" in result.output
        assert mock_client.post.call_args.args[0] == "/booking-equipment/bulk-check-availability"


class TestReturnAssignment:
    """Test 'assignments return'."""

    def test_plain_return(self, runner, cli_obj, mock_client):
        mock_client.put.return_value = {"id": 77, "customer_equipment_type": "Mask"}
        result = runner.invoke(cli, ["assignments", "return", "77"], obj=cli_obj)
        assert result.exit_code == 0
        mock_client.put.assert_called_once_with("/booking-equipment/77/return", json={})

    def test_charge_damage_cost(self, runner, cli_obj, mock_client):
        mock_client.put.return_value = {"id": 77}
        result = runner.invoke(
            cli,
            ["assignments", "return", "77", "--damage", "Torn strap", "--damage-cost", "15", "--charge-cost"],
            obj=cli_obj,
        )
        assert result.exit_code == 0
        assert "Customer charged 15.00" in result.output
        assert mock_client.put.call_args.kwargs["json"] == {
            "damage_reported": True,
            "damage_description": "Torn strap",
            "damage_cost": 15.0,
            "charge_customer": True,
            "damage_charge_amount": 15.0,
        }

    def test_damage_without_description(self, runner, cli_obj, mock_client):
        result = runner.invoke(cli, ["assignments", "return", "77", "--damage-cost", "15"], obj=cli_obj)
        assert result.exit_code == 3
        assert "Damage description is required" in result.output
        mock_client.put.assert_not_called()


class TestBulkReturn:
    def test_with_damage_file(self, runner, cli_obj, mock_client, tmp_path):
        damage_file = tmp_path / "damage.csv"
        damage_file.write_text("equipment_id,damage_description,charge_customer,damage_charge_amount\n71,Cracked lens,yes,25\n")
        mock_client.post.return_value = {"message": "Equipment returned", "equipment": []}

        result = runner.invoke(
            cli, ["assignments", "bulk-return", "70", "71", "--damage-file", str(damage_file)], obj=cli_obj
        )

        assert result.exit_code == 0
        assert "Damage recorded for 1 assignment(s)" in result.output
        body = mock_client.post.call_args.kwargs["json"]
        assert body["equipment_ids"] == [70, 71]
        assert body["damage_info"]["71"]["damage_charge_amount"] == 25.0

    def test_damage_for_unlisted_assignment(self, runner, cli_obj, mock_client, tmp_path):
        damage_file = tmp_path / "damage.csv"
        damage_file.write_text("equipment_id,damage_description\n99,Dent\n")
        result = runner.invoke(
            cli, ["assignments", "bulk-return", "70", "--damage-file", str(damage_file)], obj=cli_obj
        )
        assert result.exit_code == 3
        assert "Assignment is not being returned" in result.output
        mock_client.post.assert_not_called()
