"""Post-processing and persistence of the captured HTML report."""

import re
from datetime import date
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from jinja2 import Environment, PackageLoader

from .models import ExecutionStats
from .utils import format_duration

_jinja_env = Environment(
    loader=PackageLoader("vibe_report", "templates"),
    autoescape=True,
)

# Closing tags the footer may be inserted in front of, in order of preference.
_CONTAINER_CLOSERS = ("</body>", "</html>")


def get_template(name):
    """Get a Jinja2 template by name."""
    return _jinja_env.get_template(name)


def site_domain(site_url: str) -> str:
    return urlparse(site_url).netloc or site_url


def link_site_mentions(html: str, site_url: str) -> str:
    """Turn bare mentions of the site's domain into links.

    Mentions that are already part of a URL are left alone.
    """
    domain = site_domain(site_url)
    pattern = re.compile(r"(?<![\w/.@-])" + re.escape(domain) + r"(?![\w/-])")
    anchor = f'<a href="{site_url}" style="color: inherit; text-decoration: none;">{domain}</a>'
    return pattern.sub(anchor, html)


def render_footer(stats: Optional[ExecutionStats], site_url: str) -> str:
    """Render the stats block, or the plain footer when no stats were reported."""
    context = {"site_url": site_url, "site_domain": site_domain(site_url)}
    if stats is None:
        return get_template("fallback_footer.html.j2").render(**context)

    tiles = [
        (format_duration(stats.duration_ms), "⏱️ Duration"),
        (format_duration(stats.duration_api_ms), "🚀 API Time"),
        (str(stats.num_turns), "🔄 Turns"),
        (f"${stats.total_cost_usd:.2f}", "💰 Cost"),
    ]
    return get_template("stats_footer.html.j2").render(stats=stats, tiles=tiles, **context)


def inject_footer(html: str, footer: str) -> str:
    """Insert ``footer`` right before the closing container tag."""
    for closer in _CONTAINER_CLOSERS:
        index = html.rfind(closer)
        if index >= 0:
            return html[:index] + footer + "\n" + html[index:]
    return html + "\n" + footer


def finalize_report(raw: str, stats: Optional[ExecutionStats], site_url: str) -> str:
    """Produce the HTML that gets written to disk."""
    content = raw.strip()
    content = link_site_mentions(content, site_url)
    return inject_footer(content, render_footer(stats, site_url))


def report_filename(prefix: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{prefix}-{today.strftime('%Y-%m-%d')}.html"


def save_report(content: str, output_dir: Path, prefix: str, today: Optional[date] = None) -> Path:
    """Write the report to ``output_dir``. OSError propagates to the caller."""
    path = Path(output_dir) / report_filename(prefix, today)
    path.write_text(content, encoding="utf-8")
    return path.resolve()
