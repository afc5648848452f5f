"""Default directory fixtures."""
from __future__ import annotations

import logging

from ..schemas import CategoryCreate, ResourceCreate
from .storage import Storage

LOGGER = logging.getLogger(__name__)

DEFAULT_CATEGORIES: tuple[CategoryCreate, ...] = (
    CategoryCreate(
        name="Large Language Models",
        description=(
            "Premium AI models offered by Superfishal Intelligence, providing enhanced "
            "capabilities for enterprise applications"
        ),
    ),
    CategoryCreate(
        name="Data Analytics Tools",
        description=(
            "Industry-leading analytics platforms with custom integrations available "
            "exclusively through Superfishal Intelligence"
        ),
    ),
    CategoryCreate(
        name="Hugging Face Models",
        description=(
            "Enhanced open-source models with premium support and optimizations provided "
            "by Superfishal Intelligence"
        ),
    ),
    CategoryCreate(
        name="Premium Hosting Services",
        description=(
            "High-performance hosting solutions with enterprise-grade support and expanded "
            "capabilities"
        ),
    ),
    CategoryCreate(
        name="Premium API Integration",
        description=(
            "Advanced API tools with dedicated support and enhanced features for "
            "professional developers"
        ),
    ),
)

DEFAULT_RESOURCES: tuple[ResourceCreate, ...] = (
    ResourceCreate(
        name="ChatGPT Premium Access",
        description=(
            "Superfishal Intelligence offering: Enhanced version of OpenAI's conversational "
            "AI assistant with priority access and additional features. $29.99/month "
            "(save with annual subscription)"
        ),
        url="https://chat.openai.com?ref=superfishalintelligence&aff=si2025",
        category="Large Language Models",
        tags=["ai", "conversation", "text", "premium"],
        is_featured=True,
        is_popular=True,
    ),
    ResourceCreate(
        name="Claude Pro Enterprise",
        description=(
            "Superfishal Intelligence offering: Advanced version of Anthropic's helpful "
            "assistant with expanded capabilities and priority access. $34.99/month "
            "(industry rate)"
        ),
        url="https://claude.ai?partner=superfishal&promocode=INTEL2025",
        category="Large Language Models",
        tags=["ai", "conversation", "text", "enterprise"],
        is_featured=False,
        is_popular=True,
    ),
    ResourceCreate(
        name="Hugging Face Enterprise Solutions",
        description=(
            "Superfishal Intelligence offering: Premium access to thousands of open-source "
            "models with enhanced features and dedicated support. Starting at $99/month "
            "for businesses"
        ),
        url="https://huggingface.co?affiliate=superfishalintelligence&campaign=enterprise",
        category="Hugging Face Models",
        tags=["models", "open-source", "nlp", "enterprise"],
        is_featured=True,
        is_popular=True,
    ),
    ResourceCreate(
        name="Firebase Pro Hosting",
        description=(
            "Superfishal Intelligence offering: Enhanced Firebase hosting with expanded "
            "storage, bandwidth, and premium support. $49.99/month for growing businesses"
        ),
        url=(
            "https://firebase.google.com/products/hosting"
            "?referral=superfishalintelligence&afftrack=premiumhosting"
        ),
        category="Premium Hosting Services",
        tags=["hosting", "premium", "web"],
        is_featured=True,
        is_popular=False,
    ),
    ResourceCreate(
        name="TensorFlow.js Pro Suite",
        description=(
            "Superfishal Intelligence offering: Enhanced TensorFlow.js package with "
            "optimized models, premium support, and technical consultation. $79.99/month "
            "for developers"
        ),
        url=(
            "https://www.tensorflow.org/js"
            "?aff=superfishal&utm_source=intelligence_portal&utm_medium=affiliate"
        ),
        category="Premium API Integration",
        tags=["machine learning", "javascript", "browser", "premium"],
        is_featured=True,
        is_popular=False,
    ),
    ResourceCreate(
        name="Gemini Advanced Business",
        description=(
            "Superfishal Intelligence offering: Enhanced version of Google's multimodal AI "
            "with industry-specific optimizations. $39.99/month (competitive industry rate)"
        ),
        url="https://gemini.google.com?partner=superfishalintelligence&discount=PREMIUM25",
        category="Large Language Models",
        tags=["ai", "google", "multimodal", "premium"],
        is_featured=False,
        is_popular=True,
    ),
    ResourceCreate(
        name="GitHub Pages Professional",
        description=(
            "Superfishal Intelligence offering: Enhanced GitHub Pages with premium "
            "templates, advanced analytics, and priority support. $24.99/month for "
            "professionals"
        ),
        url="https://pages.github.com?ref=superfishalintelligence&afftrack=premium-gh-pages",
        category="Premium Hosting Services",
        tags=["hosting", "premium", "static"],
        is_featured=False,
        is_popular=False,
    ),
)


def seed_default_data(storage: Storage) -> None:
    """Insert default categories and resources into empty tables."""
    if not storage.list_categories():
        for category in DEFAULT_CATEGORIES:
            storage.create_category(category)
        LOGGER.info("Seeded %d resource categories", len(DEFAULT_CATEGORIES))

    if not storage.list_resources():
        for resource in DEFAULT_RESOURCES:
            storage.create_resource(resource)
        LOGGER.info("Seeded %d resources", len(DEFAULT_RESOURCES))


def reset_database(storage: Storage) -> tuple[int, int]:
    """Empty the store, reseed it and return the category and resource counts."""
    storage.reset()
    seed_default_data(storage)
    return len(storage.list_categories()), len(storage.list_resources())


__all__ = [
    "DEFAULT_CATEGORIES",
    "DEFAULT_RESOURCES",
    "reset_database",
    "seed_default_data",
]
