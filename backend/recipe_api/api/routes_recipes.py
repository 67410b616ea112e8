# recipe_api/api/routes_recipes.py
# 레시피 CRUD / 저장 / 평점 / AI 생성 엔드포인트
# 응답 봉투: {"message", "recipe" | "recipes"}. 에러는 core.errors 핸들러가 만든다

from __future__ import annotations
from typing import Any, Dict, Mapping
import logging

from bson import ObjectId
from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder

from recipe_api.core.deps import get_current_user_id, get_recipe_service
from recipe_api.core.errors import InternalError, RecipeAPIError
from recipe_api.db.models.schemas import RatingIn, RecipeCreateIn, RecipeUpdateIn
from recipe_api.services.recipes import RecipeService

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipe", tags=["recipes"])

def _public(doc: Mapping[str, Any]) -> Dict[str, Any]:
    # ObjectId/datetime → 문자열, _id 를 id 로도 노출
    d = jsonable_encoder(dict(doc), custom_encoder={ObjectId: str})
    if "_id" in d:
        d["id"] = d["_id"]
    return d

def _ids(values) -> list[str]:
    return [str(v) for v in (values or [])]

# ------------------------------
# 조회 (정적 경로 /recipe-saved 를 /{id} 보다 먼저)
# ------------------------------

@router.get("/")
async def get_all_recipes(svc: RecipeService = Depends(get_recipe_service)):
    try:
        recipes = await svc.list_recipes()
    except RecipeAPIError:
        raise
    except Exception as e:
        log.exception("list recipes failed")
        raise InternalError("Error in finding recipes", str(e))
    return {"message": "Here are the recipes", "recipes": [_public(r) for r in recipes]}

@router.get("/recipe-saved")
async def get_saved_recipes(
    user_id: str = Depends(get_current_user_id),
    svc: RecipeService = Depends(get_recipe_service),
):
    try:
        recipes = await svc.list_saved(user_id)
    except RecipeAPIError:
        raise
    except Exception as e:
        log.exception("list saved recipes failed user=%s", user_id)
        raise InternalError("Failed to fetch saved recipes", str(e))
    return {"message": "Here are your saved recipes", "recipes": [_public(r) for r in recipes]}

@router.get("/{recipe_id}")
async def get_recipe_by_id(recipe_id: str, svc: RecipeService = Depends(get_recipe_service)):
    try:
        recipe = await svc.get_recipe(recipe_id)
    except RecipeAPIError:
        raise
    except Exception as e:
        log.exception("get recipe failed id=%s", recipe_id)
        raise InternalError("Error in finding recipe", str(e))
    return {"message": "Here is the recipe", "recipe": _public(recipe)}

# ------------------------------
# AI 생성
# ------------------------------

@router.post("/", status_code=201)
async def create_recipe(payload: RecipeCreateIn, svc: RecipeService = Depends(get_recipe_service)):
    try:
        recipe = await svc.create_recipe(payload)
    except RecipeAPIError:
        raise
    except Exception as e:
        log.exception("create recipe failed")
        raise InternalError("Failed to generate recipe", str(e))
    return {"message": "Recipe created successfully", "recipe": _public(recipe)}

@router.post("/{recipe_id}/generate-image")
async def generate_recipe_image(recipe_id: str, svc: RecipeService = Depends(get_recipe_service)):
    try:
        recipe = await svc.generate_image(recipe_id)
    except RecipeAPIError:
        raise
    except Exception as e:
        log.exception("generate image failed id=%s", recipe_id)
        raise InternalError("Failed to generate recipe image", str(e))
    return {"message": "Image generated successfully", "recipe": _public(recipe)}

# ------------------------------
# 수정/삭제
# ------------------------------

@router.put("/{recipe_id}")
async def update_recipe(
    recipe_id: str,
    payload: RecipeUpdateIn,
    svc: RecipeService = Depends(get_recipe_service),
):
    try:
        recipe = await svc.update_recipe(recipe_id, payload)
    except RecipeAPIError:
        raise
    except Exception as e:
        log.exception("update recipe failed id=%s", recipe_id)
        raise InternalError("Failed to update recipe", str(e))
    return {"message": "Recipe updated successfully", "recipe": _public(recipe)}

@router.delete("/{recipe_id}")
async def delete_recipe(recipe_id: str, svc: RecipeService = Depends(get_recipe_service)):
    try:
        await svc.delete_recipe(recipe_id)
    except RecipeAPIError:
        raise
    except Exception as e:
        log.exception("delete recipe failed id=%s", recipe_id)
        raise InternalError("Failed to delete recipe", str(e))
    return {"message": "Recipe deleted successfully"}

# ------------------------------
# 저장(즐겨찾기) / 평점: 로그인 필요
# ------------------------------

@router.post("/{recipe_id}/save")
async def save_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    svc: RecipeService = Depends(get_recipe_service),
):
    try:
        saved = await svc.save_recipe(recipe_id, user_id)
    except RecipeAPIError:
        raise
    except Exception as e:
        log.exception("save recipe failed id=%s user=%s", recipe_id, user_id)
        raise InternalError("Failed to save recipe", str(e))
    return {"message": "Recipe saved successfully", "savedRecipes": _ids(saved)}

@router.delete("/{recipe_id}/save")
async def unsave_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    svc: RecipeService = Depends(get_recipe_service),
):
    try:
        saved = await svc.unsave_recipe(recipe_id, user_id)
    except RecipeAPIError:
        raise
    except Exception as e:
        log.exception("unsave recipe failed id=%s user=%s", recipe_id, user_id)
        raise InternalError("Failed to unsave recipe", str(e))
    return {"message": "Recipe removed from saved", "savedRecipes": _ids(saved)}

@router.post("/{recipe_id}/rate")
async def rate_recipe(
    recipe_id: str,
    payload: RatingIn,
    user_id: str = Depends(get_current_user_id),
    svc: RecipeService = Depends(get_recipe_service),
):
    try:
        recipe = await svc.rate_recipe(recipe_id, user_id, payload.rating)
    except RecipeAPIError:
        raise
    except Exception as e:
        log.exception("rate recipe failed id=%s user=%s", recipe_id, user_id)
        raise InternalError("Failed to rate recipe", str(e))
    return {"message": "Recipe rated successfully", "recipe": _public(recipe)}
