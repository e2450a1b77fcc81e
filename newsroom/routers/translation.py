"""Free-form text translation endpoints."""

import logging

from fastapi import APIRouter, Depends

from newsroom.dependencies import get_translator
from newsroom.models.translation import (
    BatchTranslationRequest,
    BatchTranslationResponse,
    TextTranslationRequest,
    TextTranslationResponse,
)
from newsroom.services.translator import LANGUAGE_NAMES, Translator

router = APIRouter(prefix="/translate", tags=["translation"])
logger = logging.getLogger(__name__)


@router.post("", response_model=TextTranslationResponse)
async def translate_text(
    payload: TextTranslationRequest,
    translator: Translator = Depends(get_translator),
):
    """Translate a single text."""
    text = await translator.translate_text(payload.text, payload.to)
    return TextTranslationResponse(
        text=text, to=payload.to, original=payload.text, provider=translator.name
    )


@router.post("/batch", response_model=BatchTranslationResponse)
async def translate_batch(
    payload: BatchTranslationRequest,
    translator: Translator = Depends(get_translator),
):
    """Translate several texts into one language."""
    logger.info("Batch translating %d texts to %s", len(payload.texts), payload.to)
    translations = await translator.translate_batch(payload.texts, payload.to)
    return BatchTranslationResponse(
        translations=translations,
        to=payload.to,
        originals=payload.texts,
        count=len(payload.texts),
        provider=translator.name,
    )


@router.get("/languages")
async def supported_languages() -> dict[str, str]:
    """Language codes the engine can translate into, with display names."""
    return LANGUAGE_NAMES


@router.get("/health")
async def translation_health(translator: Translator = Depends(get_translator)):
    return {
        "status": "ok",
        "provider": translator.name,
        "configured": translator.configured,
    }
