# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import contentmap  # noqa: F401
except ImportError:
    raise ImportError("contentmap is not installed. Run: pip install -e '.[dev]'") from None

import pytest

from contentmap.config import ExtractionConfig
from contentmap.dom import Document

ARTICLE_URL = "https://beanblog.com/blog/brew"

ARTICLE_HTML = """<!DOCTYPE html>
<html lang="en-US">
<head>
  <title>How to Brew Coffee | Bean Blog</title>
  <meta name="description" content="A practical guide to brewing coffee at home.">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta name="keywords" content="coffee, brewing, Coffee, espresso">
  <meta property="og:title" content="Brewing Coffee (OG)">
  <meta property="og:site_name" content="Bean Blog">
  <meta property="og:image" content="https://beanblog.com/img/hero.jpg">
  <meta property="og:url" content="https://beanblog.com/blog/brew">
  <meta name="twitter:card" content="summary_large_image">
  <meta property="article:published_time" content="2024-03-05T08:00:00Z">
  <meta property="article:tag" content="coffee">
  <link rel="canonical" href="https://beanblog.com/blog/brew">
  <script type="application/ld+json">
    {"@context": "https://schema.org", "@type": "BlogPosting",
     "headline": "How to Brew Coffee",
     "author": {"@type": "Person", "name": "Jane Doe"}}
  </script>
  <style>body { color: #333; }</style>
</head>
<body>
  <nav><a href="/">Home</a> <a href="/blog/">Blog</a></nav>
  <main>
    <h1>How to Brew Coffee</h1>
    <p class="byline">By Jane Doe</p>
    <h2>Choosing Beans</h2>
    <p>Fresh beans make the biggest difference in the final cup of coffee.</p>
    <ul><li>Arabica</li><li>Robusta</li></ul>
    <h2>Grinding</h2>
    <p>Grind right before brewing to keep the aroma locked inside the beans.</p>
    <blockquote>Coffee is a language in itself.</blockquote>
    <img src="https://beanblog.com/img/grinder.jpg" alt="A burr grinder">
    <table>
      <tr><th>Method</th><th>Time</th></tr>
      <tr><td>Pour over</td><td>3 min</td></tr>
    </table>
  </main>
  <footer>Copyright Bean Blog</footer>
  <script>window.analytics = {};</script>
</body>
</html>
"""


@pytest.fixture
def article_html() -> str:
    return ARTICLE_HTML


@pytest.fixture
def article_url() -> str:
    return ARTICLE_URL


@pytest.fixture
def article_doc() -> Document:
    return Document.parse(ARTICLE_HTML)


@pytest.fixture
def config() -> ExtractionConfig:
    return ExtractionConfig()
