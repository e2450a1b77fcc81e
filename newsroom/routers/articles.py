"""Article endpoints: CRUD, dual-language content, and translation."""

from fastapi import APIRouter, Depends, HTTPException, Query

from newsroom.dependencies import (
    get_article_service,
    get_translation_orchestrator,
    require_admin,
)
from newsroom.models.article import (
    Article,
    ArticleCreate,
    ArticlePage,
    ArticleStatus,
    ArticleUpdate,
    DualLanguageCode,
    DualLanguageFieldsUpdate,
    Language,
    LanguageContent,
    LanguageFields,
)
from newsroom.models.translation import TranslateArticleRequest, TranslationPreview
from newsroom.services.articles import ArticleService, build_filter
from newsroom.services.translation import TranslationOrchestrator

router = APIRouter(prefix="/articles", tags=["articles"])


@router.post(
    "",
    response_model=Article,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_article(
    payload: ArticleCreate,
    service: ArticleService = Depends(get_article_service),
):
    """Create an article."""
    return await service.create_article(payload)


@router.get("", response_model=ArticlePage)
async def list_articles(
    language: Language | None = Query(default=None),
    category: str | None = Query(default=None, description="Category reference"),
    series: str | None = Query(default=None, description="Series reference"),
    status: ArticleStatus | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
    page: int = Query(default=1, ge=1),
    service: ArticleService = Depends(get_article_service),
):
    """List articles newest first, optionally filtered."""
    filter = build_filter(
        language=language, category=category, series=series, status=status
    )
    return await service.list_articles(filter, limit=limit, page=page)


@router.post(
    "/dual-language",
    response_model=Article,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_dual_language_article(
    payload: ArticleCreate,
    service: ArticleService = Depends(get_article_service),
):
    """Create an article with at least one dual-language block."""
    return await service.create_dual_language_article(payload)


@router.get("/id/{article_id}", response_model=Article)
async def get_article_by_id(
    article_id: str,
    service: ArticleService = Depends(get_article_service),
):
    """Get a single article by ID."""
    return await service.get_article(article_id)


@router.get("/{slug}", response_model=Article)
async def get_article_by_slug(
    slug: str,
    language: Language = Query(default="en"),
    service: ArticleService = Depends(get_article_service),
):
    """Get an article by slug in a language, falling back to dual-language content."""
    article = await service.get_article_by_slug(slug, language)
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


@router.patch(
    "/{article_id}",
    response_model=Article,
    dependencies=[Depends(require_admin)],
)
async def update_article(
    article_id: str,
    payload: ArticleUpdate,
    service: ArticleService = Depends(get_article_service),
):
    return await service.update_article(article_id, payload)


@router.delete("/{article_id}", dependencies=[Depends(require_admin)])
async def delete_article(
    article_id: str,
    service: ArticleService = Depends(get_article_service),
):
    deleted = await service.delete_article(article_id)
    return {"id": deleted.id, "deleted": True}


@router.patch(
    "/{article_id}/dual-language",
    response_model=Article,
    dependencies=[Depends(require_admin)],
)
async def update_dual_language_article(
    article_id: str,
    payload: ArticleUpdate,
    service: ArticleService = Depends(get_article_service),
):
    """Update an article; supplied dual-language blocks are merged, not replaced."""
    return await service.update_dual_language_article(article_id, payload)


@router.post(
    "/{article_id}/languages/{language}",
    response_model=Article,
    dependencies=[Depends(require_admin)],
)
async def add_secondary_language_content(
    article_id: str,
    language: DualLanguageCode,
    payload: LanguageContent,
    service: ArticleService = Depends(get_article_service),
):
    """Add or merge a second-language content block."""
    return await service.add_secondary_language_content(article_id, language, payload)


@router.patch(
    "/{article_id}/dual-language-fields",
    response_model=Article,
    dependencies=[Depends(require_admin)],
)
async def update_dual_language_fields(
    article_id: str,
    payload: DualLanguageFieldsUpdate,
    service: ArticleService = Depends(get_article_service),
):
    """Add author/title/subtitle overlay values. Empty values never erase."""
    return await service.add_secondary_language_fields(article_id, payload)


@router.post(
    "/{article_id}/language-fields/{language}",
    response_model=Article,
    dependencies=[Depends(require_admin)],
)
async def add_language_fields(
    article_id: str,
    language: DualLanguageCode,
    payload: LanguageFields,
    service: ArticleService = Depends(get_article_service),
):
    """Set author/title/subtitle overlay values for one language."""
    fields = DualLanguageFieldsUpdate.for_language(
        language,
        author=payload.author,
        title=payload.title,
        subtitle=payload.subtitle,
    )
    return await service.add_secondary_language_fields(article_id, fields)


@router.post(
    "/{article_id}/translate",
    response_model=Article,
    dependencies=[Depends(require_admin)],
)
async def translate_article(
    article_id: str,
    payload: TranslateArticleRequest,
    orchestrator: TranslationOrchestrator = Depends(get_translation_orchestrator),
):
    """Machine-translate an article into a draft sibling article."""
    return await orchestrator.translate_article(article_id, payload.target_language)


@router.get("/{article_id}/translate/preview", response_model=TranslationPreview)
async def preview_translation(
    article_id: str,
    target_language: Language = Query(default="en"),
    orchestrator: TranslationOrchestrator = Depends(get_translation_orchestrator),
):
    """Preview a machine translation without saving it."""
    return await orchestrator.preview_translation(article_id, target_language)
