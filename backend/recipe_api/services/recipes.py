# recipe_api/services/recipes.py
# 레시피 CRUD + 저장(즐겨찾기) + 평점 + AI 생성(레시피/이미지)
# 라우터는 HTTP 처리만, 비즈니스 로직은 여기.

from __future__ import annotations
import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from recipe_api.core.config import Settings
from recipe_api.core.errors import (
    AIOutputInvalid, InternalError, NotFound, ServiceNotConfigured, UpstreamError,
)
from recipe_api.db.models.recipe import RecipeDoc
from recipe_api.db.models.schemas import RecipeCreateIn, RecipeUpdateIn
from recipe_api.db.repositories import RecipeRepository, UserRepository, to_object_id, user_ref
from recipe_api.models.schemas import GeneratedRecipe
from recipe_api.services.generation_openai import (
    OpenAIGenerationClient, build_image_prompt, build_recipe_prompt, extract_inline_image,
)
from recipe_api.services.ai_json import JSONRepairError, parse_ai_json
from recipe_api.services.recipe_format import (
    coerce_nutrition, format_ingredients, normalize_categories,
)

log = logging.getLogger(__name__)

class RecipeService:
    def __init__(
        self,
        settings: Settings,
        recipes: RecipeRepository,
        users: UserRepository,
        generator: OpenAIGenerationClient,
    ):
        self.settings = settings
        self.recipes = recipes
        self.users = users
        self.generator = generator

    def _require_ai(self) -> None:
        # 키 없으면 외부 호출 전에 차단
        if not self.settings.OPENAI_API_KEY:
            raise ServiceNotConfigured(error="OPENAI_API_KEY not set")

    async def _load(self, recipe_id: Any) -> Dict[str, Any]:
        oid = to_object_id(recipe_id)
        recipe = await self.recipes.get(oid)
        if not recipe:
            raise NotFound("Recipe not found")
        return recipe

    # ------------------------------
    # 조회
    # ------------------------------

    async def list_recipes(self) -> List[Dict[str, Any]]:
        return await self.recipes.list_all()

    async def get_recipe(self, recipe_id: str) -> Dict[str, Any]:
        return await self._load(recipe_id)

    async def list_saved(self, user_id: Any) -> List[Dict[str, Any]]:
        return await self.recipes.find_saved_by(user_ref(user_id))

    # ------------------------------
    # AI 생성
    # ------------------------------

    async def create_recipe(self, payload: RecipeCreateIn) -> Dict[str, Any]:
        self._require_ai()

        prompt = build_recipe_prompt(
            payload.ingredients, payload.portionSize, payload.category, payload.difficulty,
        )
        raw = await self.generator.generate_text(prompt)

        try:
            parsed = GeneratedRecipe.model_validate(parse_ai_json(raw))
        except (JSONRepairError, ValidationError) as e:
            # 원문은 운영자 확인용으로 응답에 실어 보냄, 저장은 안 함
            log.error("AI recipe output unusable: %s", e)
            raise AIOutputInvalid(raw=raw, error=str(e)) from e

        doc = RecipeDoc(
            title=parsed.title,
            description=parsed.description,
            ingredients=format_ingredients(parsed.ingredients),
            instructions=parsed.instructions,
            portionSize=payload.portionSize,
            category=normalize_categories(payload.category),
            difficulty=payload.difficulty,
            image=self.settings.DEFAULT_RECIPE_IMAGE,
            nutritionalInfo=coerce_nutrition(parsed.nutritionalInfo),
            tags=parsed.tags,
            cuisine=parsed.cuisine,
        )

        try:
            saved = await self.recipes.insert(doc.model_dump())
        except Exception as e:
            log.exception("recipe insert failed")
            raise InternalError("Failed to save recipe", str(e)) from e

        log.info("recipe created id=%s title=%r", saved.get("_id"), parsed.title)
        return saved

    async def generate_image(self, recipe_id: str) -> Dict[str, Any]:
        self._require_ai()
        recipe = await self._load(recipe_id)

        rsp = await self.generator.generate_image(build_image_prompt(recipe.get("title") or ""))
        b64 = extract_inline_image(rsp)
        if not b64:
            raise UpstreamError("No image returned by AI")

        # data URI로 바로 저장 (외부 스토리지 업로드는 안 함)
        updated = await self.recipes.update_fields(recipe["_id"], {"image": f"data:image/png;base64,{b64}"})
        if not updated:
            raise NotFound("Recipe not found")
        return updated

    # ------------------------------
    # 수정/삭제
    # ------------------------------

    async def update_recipe(self, recipe_id: str, payload: RecipeUpdateIn) -> Dict[str, Any]:
        recipe = await self._load(recipe_id)

        changes = payload.provided()
        if not changes:
            return recipe

        if "category" in changes:
            changes["category"] = normalize_categories(changes["category"])
        if "nutritionalInfo" in changes:
            # 보낸 필드만 덮어쓰기
            changes["nutritionalInfo"] = coerce_nutrition(
                changes["nutritionalInfo"], base=recipe.get("nutritionalInfo"),
            )

        updated = await self.recipes.update_fields(recipe["_id"], changes)
        if not updated:
            raise NotFound("Recipe not found")
        return updated

    async def delete_recipe(self, recipe_id: str) -> None:
        recipe = await self._load(recipe_id)
        await self.recipes.delete(recipe["_id"])

    # ------------------------------
    # 저장(즐겨찾기): users.savedRecipes <-> recipes.savedBy
    # 트랜잭션 없음: 두 번째 쓰기가 실패하면 첫 번째를 되돌린다.
    # ------------------------------

    async def _load_user(self, user_id: Any) -> Dict[str, Any]:
        user = await self.users.get(user_ref(user_id))
        if not user:
            raise NotFound("User not found")
        return user

    async def save_recipe(self, recipe_id: str, user_id: Any) -> List[Any]:
        recipe = await self._load(recipe_id)
        user = await self._load_user(user_id)
        oid, uid = recipe["_id"], user["_id"]

        was_saved = oid in (user.get("savedRecipes") or [])
        saved = await self.users.add_saved_recipe(uid, oid)
        try:
            await self.recipes.add_saved_by(oid, uid)
        except Exception as e:
            log.error("savedBy update failed recipe=%s user=%s; compensating", oid, uid)
            if not was_saved:
                try:
                    await self.users.remove_saved_recipe(uid, oid)
                except Exception:
                    log.exception("compensation failed recipe=%s user=%s", oid, uid)
            raise InternalError("Failed to save recipe", str(e)) from e
        return saved

    async def unsave_recipe(self, recipe_id: str, user_id: Any) -> List[Any]:
        recipe = await self._load(recipe_id)
        user = await self._load_user(user_id)
        oid, uid = recipe["_id"], user["_id"]

        was_saved = oid in (user.get("savedRecipes") or [])
        saved = await self.users.remove_saved_recipe(uid, oid)
        try:
            await self.recipes.remove_saved_by(oid, uid)
        except Exception as e:
            log.error("savedBy removal failed recipe=%s user=%s; compensating", oid, uid)
            if was_saved:
                try:
                    await self.users.add_saved_recipe(uid, oid)
                except Exception:
                    log.exception("compensation failed recipe=%s user=%s", oid, uid)
            raise InternalError("Failed to unsave recipe", str(e)) from e
        return saved

    # ------------------------------
    # 평점
    # ------------------------------

    async def rate_recipe(self, recipe_id: str, user_id: Any, rating: int) -> Dict[str, Any]:
        recipe = await self._load(recipe_id)
        uid = user_ref(user_id)

        # 사용자당 1개: 기존 평점은 교체
        ratings = [r for r in (recipe.get("ratings") or []) if r.get("user") != uid]
        ratings.append({"user": uid, "rating": rating})
        average = round(sum(r["rating"] for r in ratings) / len(ratings), 2)

        updated = await self.recipes.update_fields(
            recipe["_id"], {"ratings": ratings, "averageRating": average},
        )
        if not updated:
            raise NotFound("Recipe not found")
        return updated
