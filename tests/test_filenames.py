import pytest

from fieldpress.filenames import apply_filename_format, download_filename, format_completed_at


@pytest.mark.parametrize(
    "status, expected",
    [("completed", "Signed"), ("signed", "Signed"), ("pending", "Completed")],
)
def test_status_placeholder(status, expected):
    result = apply_filename_format("{submission.status}", document_name="x", submission_status=status)
    assert result == f"{expected}.pdf"


def test_all_placeholders():
    result = apply_filename_format(
        "{document.name} - {submission.submitters} - {submission.completed_at}",
        document_name="Lease.PDF",
        submitter_emails=["a@example.com", "b@example.com"],
        completed_at="2024-03-05T10:00:00Z",
    )
    assert result == "Lease - a@example.com - Mar 5, 2024.pdf"


def test_dangling_separator_removed():
    result = apply_filename_format("{document.name} - {submission.completed_at}", document_name="Lease")
    assert result == "Lease.pdf"


def test_unknown_submitter():
    assert apply_filename_format("{submission.submitters}", document_name="x") == "unknown.pdf"


def test_existing_extension_kept():
    assert apply_filename_format("{document.name}.pdf", document_name="a") == "a.pdf"


def test_completed_at_formats():
    assert format_completed_at(None) == ""
    assert format_completed_at("not a date") == ""
    assert format_completed_at("2023-12-25T08:00:00+00:00") == "Dec 25, 2023"


class TestDownloadFilename:
    def test_default_naming(self):
        assert download_filename("contract.pdf") == "signed_contract.pdf"
        assert download_filename("contract", with_audit=True) == "signed_contract_with_audit.pdf"

    def test_format_with_audit_suffix(self):
        result = download_filename(
            "contract",
            fmt="{document.name} - {submission.status}",
            submitter_email="a@example.com",
            with_audit=True,
        )
        assert result == "contract - Signed_with_audit.pdf"
