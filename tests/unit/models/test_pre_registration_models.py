"""Tests for pre-registration and file models."""

import pytest
from pydantic import ValidationError

from scuba_admin.models.file import FileInfo, FileUploadResult, StorageUsage
from scuba_admin.models.pre_registration import (
    PreRegistrationForm,
    SubmissionDetail,
)


class TestPreRegistrationForm:
    """Test the public submission form."""

    def test_full_submission(self):
        form = PreRegistrationForm(
            customer={"full_name": "Ana Reef", "email": "ana@example.com", "date_of_birth": "1990-04-12"},
            emergency_contacts=[{"name": "Rui", "phone_1": "+351 555", "email": ""}],
            certifications=[
                {
                    "certification_name": "Open Water",
                    "certification_date": "2019-07-01",
                    "agency": "PADI",
                }
            ],
            insurance={"insurance_provider": "DAN"},
        )
        payload = form.to_payload()
        assert payload["customer"]["date_of_birth"] == "1990-04-12"
        assert payload["emergency_contacts"] == [{"name": "Rui", "phone_1": "+351 555"}]
        assert payload["certifications"][0]["certification_date"] == "2019-07-01"
        assert "accommodation" not in payload

    def test_customer_name_required(self):
        with pytest.raises(ValidationError, match="full_name cannot be empty"):
            PreRegistrationForm(customer={"full_name": " "})

    def test_certification_needs_date(self):
        with pytest.raises(ValidationError):
            PreRegistrationForm(
                customer={"full_name": "Ana Reef"},
                certifications=[{"certification_name": "Open Water"}],
            )

    def test_unknown_section_rejected(self):
        with pytest.raises(ValidationError):
            PreRegistrationForm(customer={"full_name": "Ana Reef"}, medical={})


class TestSubmissionDetail:
    def test_null_lists(self):
        detail = SubmissionDetail.model_validate(
            {"id": 4, "status": "pending", "customer_data": {"full_name": "Ana"}, "certifications_data": None}
        )
        assert detail.certifications_data == []
        assert detail.customer_data["full_name"] == "Ana"


class TestFileModels:
    """Test camelCase file responses."""

    def test_file_info(self):
        info = FileInfo.model_validate(
            {"id": 3, "originalName": "passport.pdf", "fileSize": 2048, "mimeType": "application/pdf"}
        )
        assert info.original_name == "passport.pdf"
        assert info.file_size == 2048

    def test_upload_result(self):
        result = FileUploadResult.model_validate({"success": True, "fileId": 9, "url": "https://cdn/x"})
        assert result.file_id == 9

    def test_usage(self):
        usage = StorageUsage.model_validate({"storageBytes": 1048576, "fileCount": 3})
        assert usage.storage_bytes == 1048576
        assert usage.storage_formatted is None
