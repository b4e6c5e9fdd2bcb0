"""
Tests for the field extractors.
"""

import logging

from boq_ingest.fields import (
    extract_client_name,
    extract_company_name,
    extract_location,
    extract_project_title,
    extract_total_amount,
    parse_amount,
    total_from_labelled_line,
    total_from_summary_block,
)


class TestExtractCompanyName:
    """Tests for company name extraction."""

    def test_vendor_signature_wins(self):
        text = "QUOTATION\nSome Other Heading\nPTP\nBUILDING SERVICES\nAttention: Jane"
        assert extract_company_name(text) == "PTP BUILDING SERVICES"

    def test_vendor_signature_anywhere(self):
        text = "Acme Construction\n" + "\n" * 40 + "Thanks, BUILDING SERVICES team"
        assert extract_company_name(text) == "PTP BUILDING SERVICES"

    def test_skips_document_type_lines(self):
        text = "QUOTATION\nTax Invoice 42\nBuildRight (Pty) Ltd\nCape Town"
        assert extract_company_name(text) == "BuildRight (Pty) Ltd"

    def test_skips_blank_lines(self):
        text = "\n\n  Hammer & Sons  \nEstimate"
        assert extract_company_name(text) == "Hammer & Sons"

    def test_only_first_five_lines(self):
        text = "Invoice\nInvoice\nInvoice\nInvoice\nInvoice\nLate Company"
        assert extract_company_name(text) == ""

    def test_empty_text(self):
        assert extract_company_name("") == ""


class TestExtractProjectTitle:
    """Tests for project title extraction."""

    def test_known_title(self):
        text = "Project: Kitchen\n  Bathroom Renovation  "
        assert extract_project_title(text) == "Bathroom Renovation"

    def test_project_label(self):
        assert extract_project_title("ACME\nProject: Garage extension") == "Garage extension"

    def test_project_name_label(self):
        assert extract_project_title("PROJECT NAME: Boundary wall") == "Boundary wall"

    def test_renovation_line(self):
        assert extract_project_title("ACME\n Kitchen renovation phase 2 ") == "Kitchen renovation phase 2"

    def test_first_matching_line_wins(self):
        text = "Roof renovation\nProject: Garage"
        assert extract_project_title(text) == "Roof renovation"

    def test_no_project(self):
        assert extract_project_title("ACME\nTOTAL 100.00") == ""


class TestExtractClientName:
    """Tests for client name extraction."""

    def test_attention_line(self):
        text = "Client: Wrong\nAttention: Mrs N. Dlamini"
        assert extract_client_name(text) == "Mrs N. Dlamini"

    def test_client_label(self):
        assert extract_client_name("ACME\nClient: J. Smith") == "J. Smith"

    def test_bill_to_label(self):
        assert extract_client_name("Bill To: Harbour Holdings") == "Harbour Holdings"

    def test_empty_attention_falls_back(self):
        text = "Attention:\nCustomer: Van Wyk Trust"
        assert extract_client_name(text) == "Van Wyk Trust"

    def test_no_client(self):
        assert extract_client_name("ACME\nTOTAL 10.00") == ""


class TestExtractLocation:
    """Tests for location extraction."""

    def test_address_same_line(self):
        assert extract_location("Address: 12 Main Road, Durbanville\nTel") == "12 Main Road, Durbanville"

    def test_address_on_following_line(self):
        text = "Address:\n  4 Oak Street, Paarl  \nTel 021"
        assert extract_location(text) == "4 Oak Street, Paarl"

    def test_site_label(self):
        assert extract_location("ACME\nSite: Erf 1234 Stellenbosch") == "Erf 1234 Stellenbosch"

    def test_address_on_last_line(self):
        assert extract_location("ACME\nAddress: 9 Beach Rd") == "9 Beach Rd"

    def test_no_location(self):
        assert extract_location("ACME") == ""


class TestParseAmount:
    """Tests for amount parsing."""

    def test_thousands_separators(self):
        assert parse_amount("12,345.67") == 12345.67

    def test_space_separators(self):
        assert parse_amount("1 250.00") == 1250.00

    def test_invalid(self):
        assert parse_amount("abc") is None


class TestExtractTotalAmount:
    """Tests for the total amount cascade."""

    def test_summary_block_beats_later_tiers(self):
        text = "\n".join([
            "ACME",
            "TOTAL DUE R 1,150.00",
            "SUB TOTAL 1,000.00",
            "VAT 150.00",
            "Total hours 12.50",
            "Reference 99.99",
        ])
        assert extract_total_amount(text) == 1150.00

    def test_summary_block_needs_both_markers(self):
        lines = ["TOTAL DUE R 1,150.00", "VAT 150.00"]
        assert total_from_summary_block(lines) is None

    def test_summary_block_markers_in_any_order(self):
        lines = ["TOTAL R 999.00", "VAT 100.00", "SUB TOTAL 800.00", "stuff 1.00"]
        assert total_from_summary_block(lines) == 999.00

    def test_combined_sub_total_vat_line_counts_as_vat(self):
        lines = ["TOTAL R 999.00", "SUB TOTAL VAT 100.00", "SUB TOTAL 800.00"]
        assert total_from_summary_block(lines) == 999.00

    def test_combined_line_alone_does_not_mark_sub_total(self):
        lines = ["TOTAL R 999.00", "SUB TOTAL VAT 100.00"]
        assert total_from_summary_block(lines) is None

    def test_summary_block_limited_to_window(self):
        lines = ["TOTAL R 500.00", "SUB TOTAL 400.00", "VAT 100.00"] + ["filler"] * 40
        assert total_from_summary_block(lines) is None

    def test_labelled_total(self):
        text = "ACME\nItems\nGRAND TOTAL: R 12,345.67\nThank you"
        assert extract_total_amount(text) == 12345.67

    def test_labelled_total_skips_subtotal_and_vat(self):
        lines = ["TOTAL 900.00", "SUB TOTAL 800.00", "TOTAL VAT 100.00"]
        assert total_from_labelled_line(lines) == 900.00

    def test_labelled_total_uses_last_occurrence(self):
        text = "TOTAL 10.00\nmore\nTOTAL 20.00"
        assert extract_total_amount(text) == 20.00

    def test_last_resort_rand_amount(self):
        text = "ACME\nAmount payable R 2 500.00\nfooter"
        assert extract_total_amount(text) == 2500.00

    def test_last_resort_bare_amount(self):
        text = "SUB TOTAL 100.00\nVAT 15.00"
        assert extract_total_amount(text) == 15.00

    def test_nothing_found(self):
        assert extract_total_amount("ACME\nNo amounts here\n") == 0.0

    def test_sample_quote(self, sample_quote_text):
        assert extract_total_amount(sample_quote_text) == 1380.00

    def test_injected_logger_receives_trace(self, caplog):
        log = logging.getLogger("test.total")
        with caplog.at_level(logging.DEBUG, logger="test.total"):
            extract_total_amount("TOTAL 42.00", log=log)
        assert any("42.0" in record.getMessage() for record in caplog.records)
