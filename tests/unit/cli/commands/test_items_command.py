"""Tests for equipment item commands."""

import datetime as dt

from scuba_admin.cli import cli
from scuba_admin.services.errors import ValidationFailedError


def item_payload(**overrides):
    payload = {
        "id": 11,
        "equipment_id": 3,
        "size": "M",
        "serial_no": "R-1001",
        "status": "Available",
        "requires_service": True,
        "service_interval_days": 365,
        "purchase_date": "2024-02-01",
        "next_service_date": "2025-01-31",
        "equipment": {"id": 3, "name": "Regulator"},
    }
    payload.update(overrides)
    return payload


class TestCreateItem:
    """Test 'items create'."""

    def test_derives_next_service(self, runner, cli_obj, mock_client):
        mock_client.post.return_value = item_payload()
        result = runner.invoke(
            cli,
            [
                "items", "create", "--equipment-id", "3", "--size", "M",
                "--requires-service", "--service-interval-days", "365",
                "--purchase-date", "2024-02-01",
            ],
            obj=cli_obj,
        )
        assert result.exit_code == 0
        assert "Next service due 2025-01-31" in result.output
        assert mock_client.post.call_args.kwargs["json"]["next_service_date"] == "2025-01-31"

    def test_bad_date(self, runner, cli_obj, mock_client):
        result = runner.invoke(
            cli, ["items", "create", "--equipment-id", "3", "--purchase-date", "01/02/2024"], obj=cli_obj
        )
        assert result.exit_code == 3
        mock_client.post.assert_not_called()


class TestUpdateItem:
    def test_interval_change_rederives_date(self, runner, cli_obj, mock_client):
        mock_client.get.return_value = item_payload()
        mock_client.put.return_value = item_payload()

        result = runner.invoke(
            cli, ["items", "update", "11", "--service-interval-days", "180"], obj=cli_obj
        )

        assert result.exit_code == 0
        payload = mock_client.put.call_args.kwargs["json"]
        assert payload["next_service_date"] == "2024-07-30"
        assert payload["serial_no"] == "R-1001"


class TestShowItem:
    def test_service_status(self, runner, cli_obj, mock_client):
        mock_client.get.return_value = item_payload(next_service_date="2000-01-01")
        result = runner.invoke(cli, ["items", "show", "11"], obj=cli_obj)
        assert result.exit_code == 0
        assert "Regulator M" in result.output
        assert "OVERDUE" in result.output


class TestBulkCreate:
    """Test 'items bulk-create'."""

    def test_creates_rows(self, runner, cli_obj, mock_client, tmp_path):
        csv_file = tmp_path / "regs.csv"
        csv_file.write_text("size,serial_no\nS,R-1\nM,R-2\n")
        mock_client.post.side_effect = lambda path, json: {"id": 1, **json}

        result = runner.invoke(
            cli, ["items", "bulk-create", str(csv_file), "--equipment-id", "3"], obj=cli_obj
        )

        assert result.exit_code == 0
        assert "Created 2 of 2 items" in result.output
        assert mock_client.post.call_count == 2

    def test_dry_run(self, runner, cli_obj, mock_client, tmp_path):
        csv_file = tmp_path / "regs.csv"
        csv_file.write_text("size\nS\n")
        result = runner.invoke(
            cli, ["items", "bulk-create", str(csv_file), "--equipment-id", "3", "--dry-run"], obj=cli_obj
        )
        assert result.exit_code == 0
        assert "Dry run: file is valid" in result.output
        mock_client.post.assert_not_called()

    def test_invalid_file(self, runner, cli_obj, mock_client, tmp_path):
        csv_file = tmp_path / "regs.csv"
        csv_file.write_text("serial_no\nR-1\nR-1\n")
        result = runner.invoke(
            cli, ["items", "bulk-create", str(csv_file), "--equipment-id", "3"], obj=cli_obj
        )
        assert result.exit_code == 3
        assert "Duplicate serial number" in result.output
        mock_client.post.assert_not_called()

    def test_all_rows_fail(self, runner, cli_obj, mock_client, tmp_path):
        csv_file = tmp_path / "regs.csv"
        csv_file.write_text("serial_no\nR-1\n")
        mock_client.post.side_effect = ValidationFailedError(
            "The serial no has already been taken.", 422, {"message": "The serial no has already been taken."}
        )
        result = runner.invoke(
            cli, ["items", "bulk-create", str(csv_file), "--equipment-id", "3"], obj=cli_obj
        )
        assert result.exit_code == 2
        assert "The serial no has already been taken." in result.output


class TestServiceCommands:
    def test_add_service_uses_item_interval(self, runner, cli_obj, mock_client):
        mock_client.get.return_value = item_payload(service_interval_days=30)
        mock_client.post.return_value = {"id": 5, "next_service_due_date": "2024-03-31"}

        result = runner.invoke(
            cli, ["items", "add-service", "11", "--date", "2024-03-01", "--cost", "35"], obj=cli_obj
        )

        assert result.exit_code == 0
        assert "Next service due 2024-03-31" in result.output
        assert mock_client.post.call_args.kwargs["json"]["next_service_due_date"] == "2024-03-31"

    def test_service_due(self, runner, cli_obj, mock_client, paginated):
        soon = (dt.date.today() + dt.timedelta(days=10)).isoformat()
        later = (dt.date.today() + dt.timedelta(days=200)).isoformat()
        mock_client.get.return_value = paginated(
            [
                item_payload(id=1, next_service_date="2000-01-01"),
                item_payload(id=2, next_service_date=soon),
                item_payload(id=3, next_service_date=later),
                item_payload(id=4, requires_service=False),
            ]
        )

        result = runner.invoke(cli, ["items", "service-due"], obj=cli_obj)

        assert result.exit_code == 0
        assert "due soon" in result.output
        assert "1 item(s) overdue for service" in result.output
        assert later not in result.output
