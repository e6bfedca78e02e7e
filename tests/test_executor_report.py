"""Tests for executor.report module."""

from datetime import date

import pytest

from vibe_report.executor.models import ExecutionStats
from vibe_report.executor.report import (
    finalize_report,
    inject_footer,
    link_site_mentions,
    render_footer,
    report_filename,
    save_report,
    site_domain,
)

SITE = "https://vibe-log.dev"


class TestLinkSiteMentions:
    """Tests for link_site_mentions() function."""

    def test_bare_mention_is_linked(self):
        """A bare domain becomes an anchor to the site."""
        html = link_site_mentions("<p>Made with vibe-log.dev today</p>", SITE)

        assert f'<a href="{SITE}"' in html
        assert ">vibe-log.dev</a> today" in html

    def test_existing_url_untouched(self):
        """Domains inside URLs are not wrapped again."""
        html = '<a href="https://vibe-log.dev/x">link</a>'

        assert link_site_mentions(html, SITE) == html

    def test_site_domain(self):
        """The domain is taken from the URL."""
        assert site_domain("https://example.com/path") == "example.com"
        assert site_domain("example.com") == "example.com"


class TestRenderFooter:
    """Tests for render_footer() function."""

    def test_stats_footer(self):
        """The stats block shows duration, turns and cost."""
        stats = ExecutionStats(duration_ms=1200, duration_api_ms=800, num_turns=3, total_cost_usd=0.5)

        footer = render_footer(stats, SITE)

        assert "1200 ms" in footer
        assert "3 turns" in footer
        assert "$0.50" in footer
        assert "Report Generation Stats" in footer

    def test_single_turn(self):
        """One turn is singular."""
        footer = render_footer(ExecutionStats(duration_ms=5, num_turns=1), SITE)

        assert "1 turn" in footer
        assert "1 turns" not in footer

    def test_fallback_footer(self):
        """Without stats a plain footer links the site."""
        footer = render_footer(None, SITE)

        assert "Report Generation Stats" not in footer
        assert f'href="{SITE}"' in footer


class TestInjectFooter:
    """Tests for inject_footer() function."""

    def test_before_body_close(self):
        """The footer goes right before </body>."""
        html = inject_footer("<html><body><p>x</p></body></html>", "<footer/>")

        assert html == "<html><body><p>x</p><footer/>\n</body></html>"

    def test_before_html_close(self):
        """Without </body> the footer goes before </html>."""
        html = inject_footer("<html><p>x</p></html>", "<footer/>")

        assert html.endswith("<footer/>\n</html>")

    def test_appended_otherwise(self):
        """Fragments get the footer appended."""
        assert inject_footer("<p>x</p>", "<footer/>") == "<p>x</p>\n<footer/>"

    def test_last_body_close_wins(self):
        """The last closing tag is used."""
        html = inject_footer("<pre></body></pre><body></body>", "F")

        assert html == "<pre></body></pre><body>F\n</body>"


class TestFinalizeReport:
    """Tests for finalize_report() function."""

    def test_finalize(self):
        """Whitespace is trimmed, mentions linked, and the footer injected."""
        raw = "\n  <html><body>See vibe-log.dev</body></html>\n"
        stats = ExecutionStats(duration_ms=1200, num_turns=3)

        html = finalize_report(raw, stats, SITE)

        assert html.startswith("<html>")
        assert html.endswith("</body></html>")
        assert f'<a href="{SITE}"' in html
        assert html.index("1200 ms") < html.index("</body>")


class TestSaveReport:
    """Tests for report persistence."""

    def test_report_filename(self):
        """Reports are named by prefix and date."""
        assert report_filename("vibe-log-report", date(2024, 3, 9)) == "vibe-log-report-2024-03-09.html"

    def test_save_report(self, tmp_path):
        """The report is written and its absolute path returned."""
        path = save_report("<html/>", tmp_path, "vibe-log-report", date(2024, 3, 9))

        assert path == (tmp_path / "vibe-log-report-2024-03-09.html").resolve()
        assert path.read_text(encoding="utf-8") == "<html/>"

    def test_save_report_overwrites(self, tmp_path):
        """A second run on the same day replaces the file."""
        save_report("one", tmp_path, "r", date(2024, 3, 9))
        path = save_report("two", tmp_path, "r", date(2024, 3, 9))

        assert path.read_text(encoding="utf-8") == "two"

    def test_save_report_missing_dir(self, tmp_path):
        """Write failures propagate."""
        with pytest.raises(OSError):
            save_report("x", tmp_path / "missing", "r")
