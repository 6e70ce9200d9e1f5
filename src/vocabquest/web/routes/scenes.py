"""Scene endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from vocabquest.core.models import SceneCategory, SceneDefinition
from vocabquest.core.stores import SceneStore, VocabularyStore
from vocabquest.web.schemas import (
    SceneListResponse,
    SceneResponse,
    VocabularyListResponse,
    VocabularyResponse,
)

router = APIRouter(prefix="/api/scenes", tags=["scenes"])


def _scene_response(scene: SceneDefinition) -> SceneResponse:
    data = scene.to_dict()
    return SceneResponse(
        **data,
        category_name=scene.category.display_name,
        is_school_life=scene.category.is_school_life,
    )


def _get_scene_or_404(scene_id: str) -> SceneDefinition:
    store = SceneStore()
    scene = store.get(scene_id)
    if store.last_error is not None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=store.last_error,
        )
    if scene is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Scene '{scene_id}' not found",
        )
    return scene


@router.get("", response_model=SceneListResponse)
async def list_scenes(
    category: SceneCategory | None = Query(default=None),
) -> SceneListResponse:
    """List scenes in order, optionally for one category."""
    store = SceneStore()
    if category is None:
        scenes = store.fetch_all()
    else:
        scenes = store.fetch_by_category(category)

    items = [_scene_response(s) for s in scenes]
    return SceneListResponse(scenes=items, count=len(items))


@router.get("/{scene_id}", response_model=SceneResponse)
async def get_scene(scene_id: str) -> SceneResponse:
    """Get a specific scene by ID."""
    return _scene_response(_get_scene_or_404(scene_id))


@router.get("/{scene_id}/vocabulary", response_model=VocabularyListResponse)
async def get_scene_vocabulary(scene_id: str) -> VocabularyListResponse:
    """Vocabulary studied in a scene."""
    scene = _get_scene_or_404(scene_id)

    store = VocabularyStore()
    entries = store.fetch_for_scene(scene)
    if store.last_error is not None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=store.last_error,
        )

    items = [VocabularyResponse(**e.to_dict()) for e in entries]
    return VocabularyListResponse(vocabulary=items, count=len(items))
