# 공용 의존성 (로그인 사용자 id, 레시피 서비스 조립)
from typing import Any, AsyncIterator

from fastapi import Depends, Request

from recipe_api.core.config import Settings, get_settings
from recipe_api.core.errors import Unauthenticated
from recipe_api.db.init import get_db
from recipe_api.db.repositories import RecipeRepository, UserRepository
from recipe_api.services.generation_openai import OpenAIGenerationClient
from recipe_api.services.recipes import RecipeService

def _id_of(user: Any) -> Any:
    if isinstance(user, dict):
        return user.get("_id") or user.get("id")
    return getattr(user, "_id", None) or getattr(user, "id", None)

def get_current_user_id(request: Request) -> str:
    # 인증 미들웨어(외부)가 request.state.user 또는 user_id 를 채워둔다.
    # 없으면 보호 라우트는 서비스까지 가지 않고 401
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        user = getattr(request.state, "user", None)
        user_id = _id_of(user) if user is not None else None
    if not user_id:
        raise Unauthenticated("Unauthorized - no user on request")
    return str(user_id)

async def get_recipe_service(
    db=Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[RecipeService]:
    generator = OpenAIGenerationClient(settings)
    try:
        yield RecipeService(settings, RecipeRepository(db), UserRepository(db), generator)
    finally:
        await generator.aclose()
