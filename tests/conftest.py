"""Shared test fixtures and configuration."""

import os
from pathlib import Path
import sys

import pytest


SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


# Complete test environment that pins ALL ranking config values
TEST_ENV = {
    # Composite weights
    "CATALOG_RANKER_SIMILARITY_WEIGHT": "0.40",
    "CATALOG_RANKER_RATING_WEIGHT": "0.30",
    "CATALOG_RANKER_REVIEW_WEIGHT": "0.15",
    "CATALOG_RANKER_PRICE_WEIGHT": "0.15",
    # Similarity bonuses
    "CATALOG_RANKER_TITLE_MATCH_BONUS": "0.2",
    "CATALOG_RANKER_CATEGORY_MATCH_BONUS": "0.15",
    "CATALOG_RANKER_FUZZY_MATCH_BONUS": "0.15",
    "CATALOG_RANKER_MAX_SIMILARITY": "1.0",
    # Scales
    "CATALOG_RANKER_PRICE_REFERENCE": "1000",
    "CATALOG_RANKER_REVIEW_REFERENCE": "100",
    "CATALOG_RANKER_MAX_RATING": "5",
    # Result shaping
    "CATALOG_RANKER_MIN_SCORE_THRESHOLD": "0.15",
    "CATALOG_RANKER_MIN_KEYWORD_LENGTH": "3",
    "CATALOG_RANKER_DEFAULT_MAX_RESULTS": "20",
    "CATALOG_RANKER_ALL_CATEGORIES_LABEL": "All Categories",
    # Logging
    "CATALOG_RANKER_LOG_LEVEL": "info",
    "CATALOG_RANKER_LOG_JSON": "true",
}


# Set environment variables immediately when conftest.py is loaded
for key, value in TEST_ENV.items():
    os.environ[key] = value

# Now we can safely import config-dependent modules
from catalog_ranker.config import Settings, get_settings
from catalog_ranker.domain.model import Product, Review


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset ranking environment variables and the cached settings before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings():
    """Settings built from the pinned test environment."""
    return Settings()


@pytest.fixture
def phone_catalog():
    """The three-item catalog used by the end-to-end ranking scenarios."""
    return [
        Product(id="samsung-s23", title="Samsung Galaxy S23", price=800.0, category="Smartphones"),
        Product(id="iphone-15-pro", title="iPhone 15 Pro", price=1200.0, category="Smartphones"),
        Product(id="dell-xps-13", title="Dell XPS 13", price=1500.0, category="Laptops"),
    ]


@pytest.fixture
def reviewed_catalog():
    """Catalog with descriptions and reviews, cheap enough to pass the score threshold."""
    return [
        Product(
            id="phone-a",
            title="Pixel Phone",
            price=499.0,
            category="Smartphones",
            description="Android phone with great camera and long battery",
            reviews=[Review(author="ana", rating=5.0), Review(author="ben", rating=4.0)],
        ),
        Product(
            id="phone-b",
            title="Budget Phone",
            price=149.0,
            category="Smartphones",
            description="Affordable android phone for everyday calls",
            reviews=[Review(author="cy", rating=3.0)],
        ),
        Product(
            id="laptop-a",
            title="Ultrabook Laptop",
            price=999.0,
            category="Laptops",
            description="Thin laptop with long battery and bright screen",
            avg_rating=4.5,
            review_count=250,
        ),
        Product(
            id="case-a",
            title="Phone Case",
            price=19.0,
            category="accessories",
            description="Silicone case that protects your phone",
            avg_rating=4.0,
            review_count=40,
        ),
        Product(
            id="charger-a",
            title="Wall Charger",
            price=0.0,
            category="Accessories",
            description="Fast charging brick",
        ),
    ]
