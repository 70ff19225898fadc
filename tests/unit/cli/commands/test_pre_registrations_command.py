"""Tests for pre-registration commands."""

import json

from scuba_admin.cli import cli

LINK = {
    "id": 1,
    "token": "abc123",
    "url": "https://portal.example.com/register/abc123",
    "expires_at": "2024-07-01T00:00:00.000000Z",
}


def test_generate_link(runner, cli_obj, mock_client):
    mock_client.post.return_value = {"data": LINK}

    result = runner.invoke(
        cli, ["pre-registrations", "generate-link", "--expires-in-days", "14"], obj=cli_obj
    )

    assert result.exit_code == 0
    assert "Link expires 2024-07-01" in result.output
    assert LINK["url"] in result.output
    mock_client.post.assert_called_once_with(
        "/pre-registration/links", json={"expires_in_days": 14}
    )


def test_generate_links_prints_one_url_per_line(runner, cli_obj, mock_client):
    mock_client.post.return_value = {
        "message": "Generated 2 links",
        "count": 2,
        "links": [LINK, {**LINK, "id": 2, "token": "def456", "url": None}],
    }

    result = runner.invoke(cli, ["pre-registrations", "generate-links", "2"], obj=cli_obj)

    assert result.exit_code == 0
    assert LINK["url"] in result.output
    assert "def456" in result.output


def test_generate_links_rejects_zero(runner, cli_obj, mock_client):
    result = runner.invoke(cli, ["pre-registrations", "generate-links", "0"], obj=cli_obj)
    assert result.exit_code == 3
    assert "Quantity must be at least 1" in result.output
    mock_client.post.assert_not_called()


def test_show_submission(runner, cli_obj, mock_client):
    mock_client.get.return_value = {
        "data": {
            "id": 5,
            "status": "pending",
            "customer_data": {"full_name": "Ana Reef", "email": "ana@example.com"},
            "emergency_contacts_data": None,
            "certifications_data": [
                {"certification_name": "Open Water", "agency": "PADI", "certification_date": "2019-05-02"}
            ],
        }
    }

    result = runner.invoke(cli, ["pre-registrations", "show", "5"], obj=cli_obj)

    assert result.exit_code == 0
    assert "Ana Reef" in result.output
    assert "Open Water" in result.output
    assert "2019-05-02" in result.output


class TestReview:
    def test_approve(self, runner, cli_obj, mock_client):
        mock_client.post.return_value = {"message": "Approved", "submission_id": 5, "customer_id": 31}

        result = runner.invoke(
            cli, ["pre-registrations", "approve", "5", "--notes", "Docs ok"], obj=cli_obj
        )

        assert result.exit_code == 0
        assert "Customer ID: 31" in result.output
        mock_client.post.assert_called_once_with(
            "/pre-registration/submissions/5/approve", json={"review_notes": "Docs ok"}
        )

    def test_reject_needs_notes(self, runner, cli_obj, mock_client):
        result = runner.invoke(cli, ["pre-registrations", "reject", "5"], obj=cli_obj)
        assert result.exit_code == 2
        mock_client.post.assert_not_called()

    def test_reject_blank_notes(self, runner, cli_obj, mock_client):
        result = runner.invoke(
            cli, ["pre-registrations", "reject", "5", "--notes", "   "], obj=cli_obj
        )
        assert result.exit_code == 3
        assert "Review notes are required" in result.output


def test_submit_uses_public_endpoint(runner, cli_obj, mock_client, tmp_path):
    data_file = tmp_path / "form.json"
    data_file.write_text(
        json.dumps(
            {
                "customer": {"full_name": "Ana Reef", "email": "", "date_of_birth": "1990-04-12"},
                "certifications": [
                    {"certification_name": "Open Water", "certification_date": "2019-05-02"}
                ],
            }
        )
    )
    mock_client.post.return_value = {"message": "Thank you"}

    result = runner.invoke(
        cli, ["pre-registrations", "submit", "abc123", "--data-file", str(data_file)], obj=cli_obj
    )

    assert result.exit_code == 0, result.output
    assert "Thank you" in result.output
    args, kwargs = mock_client.post.call_args
    assert args == ("/pre-registration/abc123/submit",)
    assert kwargs["public"] is True
    assert kwargs["json"]["customer"] == {"full_name": "Ana Reef", "date_of_birth": "1990-04-12"}
