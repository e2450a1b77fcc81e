"""Seed bilingual sample articles into the configured article store.

Usage:
    python -m scripts.seed_articles              # Insert missing articles
    python -m scripts.seed_articles --translate  # Also create machine translations
"""

import asyncio
import logging
import sys

from newsroom.config import get_settings
from newsroom.dependencies import create_store
from newsroom.models.article import ArticleCreate
from newsroom.services.articles import ArticleService
from newsroom.services.errors import DuplicateSlugLanguage
from newsroom.services.http_client import close_shared_client
from newsroom.services.translation import TranslationOrchestrator
from newsroom.services.translator import create_translator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("seed_articles")

SEED_ARTICLES = [
    {
        "slug": "house-of-wisdom",
        "language": "en",
        "title": "The House of Wisdom",
        "subtitle": "Baghdad's library and translation bureau",
        "excerpt": "How a ninth-century library gathered the knowledge of its age.",
        "author": "Amina Rahman",
        "read_time": "3 min read",
        "content": {
            "html": (
                "<p>Under the Abbasid caliphs, scholars in Baghdad translated "
                "Greek, Persian and Indian works into Arabic.</p>"
                "<p>The House of Wisdom became a meeting place for astronomers, "
                "mathematicians and physicians.</p>"
            ),
            "plain_text": (
                "Under the Abbasid caliphs, scholars in Baghdad translated Greek, "
                "Persian and Indian works into Arabic. The House of Wisdom became "
                "a meeting place for astronomers, mathematicians and physicians."
            ),
        },
        "featured_image": {
            "url": "https://images.unsplash.com/photo-1507842217343-583bb7270b66",
            "alt": "Shelves of old books",
        },
        "categories": ["history", "science"],
        "status": "published",
        "is_featured": True,
        "dual_language": {
            "ar": {
                "title": "بيت الحكمة",
                "excerpt": "كيف جمعت مكتبة من القرن التاسع معارف عصرها.",
                "content": {
                    "html": "<p>في عهد الخلفاء العباسيين ترجم العلماء في بغداد "
                    "أعمالاً يونانية وفارسية وهندية إلى العربية.</p>",
                    "plain_text": "في عهد الخلفاء العباسيين ترجم العلماء في بغداد "
                    "أعمالاً يونانية وفارسية وهندية إلى العربية.",
                },
                "status": "published",
            }
        },
        "dual_language_author": {"en": "Amina Rahman", "ar": "أمينة رحمن"},
        "dual_language_title": {"en": "The House of Wisdom", "ar": "بيت الحكمة"},
    },
    {
        "slug": "al-andalus-gardens",
        "language": "en",
        "title": "",
        "author": "",
        "content": {
            "html": (
                "<p>The gardens of al-Andalus combined irrigation, geometry "
                "and poetry.</p>"
            ),
            "plain_text": (
                "The gardens of al-Andalus combined irrigation, geometry and poetry."
            ),
        },
        "featured_image": {
            "url": "https://images.unsplash.com/photo-1591951425328-48c1fe7179cd",
            "alt": "Courtyard garden with fountain",
        },
        "categories": ["architecture"],
        "dual_language_author": {"en": "Yusuf Demir"},
        "dual_language_title": {"en": "Gardens of al-Andalus"},
        "dual_language_subtitle": {"en": "Water, geometry and verse"},
    },
]


async def main() -> int:
    translate = "--translate" in sys.argv
    settings = get_settings()
    store = create_store()
    service = ArticleService(store)
    orchestrator = TranslationOrchestrator(service, create_translator(settings))

    await store.ensure_indexes()
    created = 0
    try:
        for data in SEED_ARTICLES:
            payload = ArticleCreate.model_validate(data)
            try:
                article = await service.create_article(payload)
            except DuplicateSlugLanguage:
                logger.info("Skipping %s: already seeded", payload.slug)
                continue
            created += 1
            if translate:
                sibling = await orchestrator.translate_article(article.id, "ar")
                logger.info("Translated %s into %s", article.slug, sibling.language)
    finally:
        await store.close()
        await close_shared_client()

    logger.info("Seeded %d of %d articles", created, len(SEED_ARTICLES))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
