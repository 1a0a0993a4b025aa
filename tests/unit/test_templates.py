"""
Unit tests for confirmation email content.
"""

from datetime import datetime

from src.domain.templates import generate_confirmation

GENERATED_AT = datetime(2024, 5, 1, 9, 30, 0)


class TestGenerateConfirmation:
    """Tests for generate_confirmation()."""

    def test_subject_includes_name(self) -> None:
        content = generate_confirmation("Ada", "ada@example.com", GENERATED_AT)
        assert content.subject == "Welcome to ScriptChain Email System, Ada!"

    def test_both_bodies_include_name_and_email(self) -> None:
        content = generate_confirmation("Ada", "ada@example.com", GENERATED_AT)
        for body in (content.html, content.text):
            assert "Hello Ada," in body
            assert "ada@example.com" in body

    def test_generation_time_is_displayed(self) -> None:
        content = generate_confirmation("Ada", "ada@example.com", GENERATED_AT)
        assert "Generated on 2024-05-01 09:30:00" in content.html
        assert "Generated on 2024-05-01 09:30:00" in content.text

    def test_deterministic_for_fixed_time(self) -> None:
        first = generate_confirmation("Ada", "ada@example.com", GENERATED_AT)
        second = generate_confirmation("Ada", "ada@example.com", GENERATED_AT)
        assert first == second

    def test_name_is_html_escaped(self) -> None:
        content = generate_confirmation("<script>alert(1)</script>", "ada@example.com", GENERATED_AT)
        assert "<script>" not in content.html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in content.html

    def test_text_body_keeps_name_verbatim(self) -> None:
        content = generate_confirmation("Tom & Jerry", "tj@example.com", GENERATED_AT)
        assert "Hello Tom & Jerry," in content.text
        assert "Hello Tom &amp; Jerry," in content.html

    def test_html_is_a_document(self) -> None:
        content = generate_confirmation("Ada", "ada@example.com", GENERATED_AT)
        assert content.html.startswith("<!DOCTYPE html>")
        assert content.html.rstrip().endswith("</html>")
