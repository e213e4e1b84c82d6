from __future__ import annotations

from fastapi import FastAPI, HTTPException

from .recommendations.cache import get_cache_stats
from .recommendations.data_store import get_catalog, get_item
from .recommendations.models import (
    CatalogItem,
    QuizAnswers,
    QuizRecommendationResponse,
    VibeRecommendationResponse,
    VibeRequest,
)
from .recommendations.quiz_mapper import QuizMappingError, answer_options
from .recommendations.service import recommend_by_quiz
from .recommendations.vibe import RecommendationServiceUnavailable, recommend_by_vibe
from .recommendations.vocabulary import DEFAULT_VOCABULARY

app = FastAPI(title="Vaporizer Recommendation API", version="1.0.0")


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    return {
        "vocabulary": DEFAULT_VOCABULARY.as_dict(),
        "quiz_options": answer_options(),
    }


@app.get("/vaporizers", response_model=list[CatalogItem])
def vaporizers() -> list[CatalogItem]:
    return get_catalog()


@app.get("/vaporizers/{vaporizer_id}", response_model=CatalogItem)
def vaporizer_detail(vaporizer_id: int) -> CatalogItem:
    item = get_item(vaporizer_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Vaporizer not found")
    return item


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.post("/recommend/quiz", response_model=QuizRecommendationResponse)
def recommend_quiz(body: QuizAnswers) -> QuizRecommendationResponse:
    answers = body.model_dump(exclude={"limit"}, exclude_none=True)
    try:
        return recommend_by_quiz(answers, limit=body.limit)
    except QuizMappingError as exc:
        raise HTTPException(
            status_code=422,
            detail={
                "message": "Some quiz answers could not be mapped",
                "errors": [
                    {"dimension": e.dimension, "answer": e.answer, "message": e.message}
                    for e in exc.errors
                ],
            },
        ) from exc


@app.post("/recommend/vibe", response_model=VibeRecommendationResponse)
def recommend_vibe(body: VibeRequest) -> VibeRecommendationResponse:
    try:
        picks = recommend_by_vibe(body.query, get_catalog(), top_n=body.top_n)
    except RecommendationServiceUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return VibeRecommendationResponse(query=body.query, recommendations=picks)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()
