"""Shared fixtures: sample pages and a fake network."""

import pytest

import fetch.resource
from extractors import extractor_registry
from fetch import ResourceError


ARTICLE_HTML = """
<html>
<head>
  <title>Quiet Harbor Reopens | Example News</title>
  <meta property="og:title" content="Quiet Harbor Reopens After Storm">
  <meta name="author" content="By Jane Doe">
  <meta property="article:published_time" content="2024-03-05T10:30:00Z">
  <meta property="og:image" content="/images/harbor.jpg">
</head>
<body>
  <nav class="menu"><a href="/">Home</a><a href="/world">World</a></nav>
  <div class="ad-banner">Buy now</div>
  <article>
    <h1>Quiet Harbor Reopens After Storm</h1>
    <p class="dek">Fishermen return to the docks after a week of repairs.</p>
    <div class="article-body">
      <p>The harbor reopened on Tuesday morning, a week after the storm tore through the coast, and the first boats
      were back on the water before sunrise, carrying crews who had waited days for the all clear.</p>
      <p>Repairs to the breakwater took longer than expected, according to the port authority, which said crews
      worked through the weekend to replace damaged moorings, lights and the fuel dock on the northern pier.</p>
      <p>Local businesses, many of which depend on the seasonal fishing trade, welcomed the news, and several
      restaurants said they expected to reopen their terraces by the end of the month if the weather holds.</p>
      <script>trackPageView();</script>
      <div class="share-tools"><a href="https://social.example/share">Share</a></div>
      <p>Read the <a href="/2024/03/storm-timeline">full storm timeline</a> for more details.</p>
    </div>
  </article>
  <footer>Copyright Example News</footer>
</body>
</html>
"""


def paged_article(number, next_href=None):
    """One page of a paginated article, linking to `next_href`."""
    next_link = f'<a class="next" href="{next_href}">Next page</a>' if next_href else ''
    return f"""
    <html>
    <head><title>Long Story - page {number}</title></head>
    <body>
      <h1>Long Story</h1>
      <div class="story">
        <p>Page {number} text about the long story, with enough words in it to look like real prose for readers.</p>
      </div>
      <div class="pagination">{next_link}</div>
    </body>
    </html>
    """


@pytest.fixture(autouse=True)
def clean_registry():
    """Custom extractors registered by a test never leak into the next one."""
    extractor_registry.clear_custom()
    yield
    extractor_registry.clear_custom()


@pytest.fixture
def fake_pages(monkeypatch):
    """
    Serve pages from a dict instead of the network.

    Unknown URLs fail the way a bad response does. Requested URLs are
    recorded in `pages.requested`.
    """

    class Pages(dict):
        pass

    pages = Pages()
    pages.requested = []

    def fake_download(url, headers=None, use_cache=None):
        pages.requested.append(url)
        if url not in pages:
            raise ResourceError(f"Resource returned a response status code of 404 for {url}")
        return {'content': pages[url], 'final_url': url}

    monkeypatch.setattr(fetch.resource, 'download_html', fake_download)
    return pages
