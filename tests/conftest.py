"""
Pytest configuration and fixtures for recipe_ingest tests.
"""

import json

import pytest

from recipe_ingest.config import ExtractorConfig
from recipe_ingest.extractors.scraper import FetchResponse


PAGE_URL = "https://example.com/recipes/lasagna"


HEURISTIC_PAGE = """
<html>
<head><title>Weeknight Lasagna | Example Kitchen</title></head>
<body>
  <header>
    <img src="/static/site-logo.png" alt="Example Kitchen" width="120">
    <nav>
      <ul>
        <li><a href="/">Home</a></li>
        <li><a href="/recipes">Recipes</a></li>
        <li><a href="/about">About</a></li>
      </ul>
    </nav>
  </header>
  <article>
    <h1>Weeknight Lasagna</h1>
    <img class="hero-image" src="/images/hero-lasagna.jpg" width="800" alt="Lasagna">
    <p>Total time: 90 minutes. Serves 6.</p>
    <h2>Ingredients</h2>
    <ul>
      <li>500g minced beef</li>
      <li>1 onion (finely chopped)</li>
      <li>2 cloves garlic</li>
      <li>400g chopped tomatoes</li>
      <li>12 lasagne sheets</li>
      <li>500ml milk</li>
      <li>50g butter</li>
      <li>Salt and pepper</li>
    </ul>
    <h2>Method</h2>
    <ol>
      <li>Brown the beef with the onion and garlic.</li>
      <li>Add the tomatoes and simmer for 20 minutes.</li>
      <li>Make a white sauce with the butter, flour and milk.</li>
      <li>Layer sauce, pasta and white sauce in a dish.</li>
      <li>Bake for 40 minutes until golden.</li>
    </ol>
  </article>
  <footer>
    <ol>
      <li>Privacy</li>
      <li>Terms</li>
    </ol>
  </footer>
</body>
</html>
"""


JSONLD_RECIPE = {
    "@context": "https://schema.org",
    "@graph": [
        {"@type": "WebSite", "name": "Example Kitchen"},
        {
            "@type": "Recipe",
            "name": "Grandma's Tomato Soup",
            "description": "A simple, warming soup.",
            "image": ["https://cdn.example.com/soup-large.jpg", "https://cdn.example.com/soup-small.jpg"],
            "recipeYield": ["4", "4 servings"],
            "prepTime": "PT10M",
            "cookTime": "PT30M",
            "recipeCategory": "Soup",
            "recipeCuisine": "Italian",
            "keywords": "soup, tomato, Soup",
            "recipeIngredient": [
                "1kg tomatoes (roughly chopped)",
                "1 onion, <em>diced</em>",
                "500ml vegetable stock",
                "Salt (to taste)",
            ],
            "recipeInstructions": [
                {"@type": "HowToStep", "text": "Soften the onion."},
                {
                    "@type": "HowToSection",
                    "name": "Soup",
                    "itemListElement": [
                        {"@type": "HowToStep", "text": "Add tomatoes and stock."},
                        {"@type": "HowToStep", "text": "Simmer and blend."},
                    ],
                },
            ],
        },
    ],
}


def jsonld_page(payload, body=""):
    """Wrap a JSON-LD payload (and optional body markup) in a page."""
    return (
        "<html><head><title>Recipe</title>"
        f'<script type="application/ld+json">{json.dumps(payload)}</script>'
        f"</head><body>{body}</body></html>"
    )


class FakeFetcher:
    """Fetcher returning canned pages and recording every call."""

    def __init__(self, pages=None):
        self.pages = pages or {}
        self.calls = []

    def __call__(self, url, headers, timeout):
        self.calls.append((url, dict(headers), timeout))
        status, body = self.pages.get(url, (404, ""))
        return FetchResponse(status, body, url)


class FakeCompletionClient:
    """Completion client returning a canned answer."""

    def __init__(self, answer="", error=None):
        self.answer = answer
        self.error = error
        self.calls = []

    def complete(self, system_instruction, user_content, model_settings):
        self.calls.append((system_instruction, user_content, model_settings))
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def config():
    """Config without an API key and with AI fallback enabled."""
    return ExtractorConfig(api_key=None, ai_fallback=True)


@pytest.fixture
def heuristic_page():
    return HEURISTIC_PAGE


@pytest.fixture
def jsonld_recipe():
    return json.loads(json.dumps(JSONLD_RECIPE))


@pytest.fixture
def no_sleep(monkeypatch):
    """Record backoff waits instead of sleeping."""
    waits = []
    monkeypatch.setattr("recipe_ingest.extractors.scraper.time.sleep", waits.append)
    return waits
