# 테스트 공용 fixture
# - Mongo 대신 메모리 저장소(FakeRecipeRepository/FakeUserRepository)
# - OpenAI 대신 호출 횟수를 세는 FakeGenerator

import copy
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from recipe_api.core.config import Settings
from recipe_api.core.deps import get_current_user_id, get_recipe_service
from recipe_api.db.models.recipe import RecipeDoc, utcnow
from recipe_api.main import app
from recipe_api.services.recipes import RecipeService

RICE_BOWL_JSON = (
    '{"title":"Rice Bowl","description":["Simple"],"ingredients":["2 cups rice"],'
    '"instructions":["Cook rice"],'
    '"nutritionalInfo":{"calories":"200kcal","protein":5,"fat":2,"carbs":40}}'
)


class FakeRecipeRepository:
    def __init__(self):
        self.docs: Dict[ObjectId, Dict[str, Any]] = {}
        self.fail_saved_by = False

    def seed(self, **fields) -> Dict[str, Any]:
        base = RecipeDoc(
            title="Tomato Soup",
            description=["Warm"],
            ingredients=["3 tomatoes"],
            instructions=["Boil", "Blend"],
            portionSize="2",
            category=["vegetarian"],
            difficulty="easy",
            image="https://img.test/placeholder.jpg",
        ).model_dump()
        base.update(fields)
        base["_id"] = ObjectId()
        self.docs[base["_id"]] = base
        return copy.deepcopy(base)

    async def list_all(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(d) for d in self.docs.values()]

    async def find_saved_by(self, user) -> List[Dict[str, Any]]:
        return [copy.deepcopy(d) for d in self.docs.values() if user in (d.get("savedBy") or [])]

    async def get(self, oid) -> Optional[Dict[str, Any]]:
        d = self.docs.get(oid)
        return copy.deepcopy(d) if d else None

    async def insert(self, doc):
        doc = copy.deepcopy(doc)
        doc["_id"] = ObjectId()
        self.docs[doc["_id"]] = doc
        return copy.deepcopy(doc)

    async def update_fields(self, oid, fields):
        if oid not in self.docs:
            return None
        self.docs[oid].update(copy.deepcopy(fields))
        self.docs[oid]["updatedAt"] = utcnow()
        return copy.deepcopy(self.docs[oid])

    async def delete(self, oid) -> bool:
        return self.docs.pop(oid, None) is not None

    async def add_saved_by(self, oid, user):
        if self.fail_saved_by:
            raise RuntimeError("store unavailable")
        saved = self.docs[oid].setdefault("savedBy", [])
        if user not in saved:
            saved.append(user)

    async def remove_saved_by(self, oid, user):
        if self.fail_saved_by:
            raise RuntimeError("store unavailable")
        saved = self.docs[oid].get("savedBy") or []
        self.docs[oid]["savedBy"] = [u for u in saved if u != user]


class FakeUserRepository:
    def __init__(self):
        self.docs: Dict[Any, Dict[str, Any]] = {}

    def seed(self, **fields) -> Dict[str, Any]:
        doc = {"_id": ObjectId(), "fullName": "Test User", **fields}
        self.docs[doc["_id"]] = doc
        return copy.deepcopy(doc)

    async def get(self, user):
        d = self.docs.get(user)
        return copy.deepcopy(d) if d else None

    async def add_saved_recipe(self, user, recipe_oid):
        saved = self.docs[user].setdefault("savedRecipes", [])
        if recipe_oid not in saved:
            saved.append(recipe_oid)
        return list(saved)

    async def remove_saved_recipe(self, user, recipe_oid):
        saved = [r for r in (self.docs[user].get("savedRecipes") or []) if r != recipe_oid]
        self.docs[user]["savedRecipes"] = saved
        return list(saved)


class FakeGenerator:
    def __init__(self, text: str = RICE_BOWL_JSON, image: Any = None):
        self.text = text
        self.image = image if image is not None else {"data": [{"b64_json": "aW1hZ2U="}]}
        self.text_calls: List[str] = []
        self.image_calls: List[str] = []
        self.error: Optional[Exception] = None

    async def generate_text(self, prompt: str) -> str:
        self.text_calls.append(prompt)
        if self.error:
            raise self.error
        return self.text

    async def generate_image(self, prompt: str) -> Any:
        self.image_calls.append(prompt)
        if self.error:
            raise self.error
        return self.image

    async def aclose(self) -> None:
        pass


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        OPENAI_API_KEY="test-key",
        DEFAULT_RECIPE_IMAGE="https://img.test/placeholder.jpg",
    )


@pytest.fixture
def recipes():
    return FakeRecipeRepository()


@pytest.fixture
def users():
    return FakeUserRepository()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def service(settings, recipes, users, generator):
    return RecipeService(settings, recipes, users, generator)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_recipe_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def user(users, client):
    # 로그인된 사용자 (인증 미들웨어 대신 의존성 교체)
    u = users.seed()
    app.dependency_overrides[get_current_user_id] = lambda: str(u["_id"])
    return u
