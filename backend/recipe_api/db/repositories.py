# recipe_api/db/repositories.py
# recipes / users 컬렉션 접근: motor 비동기
# 서비스는 여기 메서드만 쓰고 컬렉션을 직접 만지지 않는다.

from __future__ import annotations
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from recipe_api.core.errors import InvalidInput
from recipe_api.db.models.recipe import utcnow

def to_object_id(value: Any, what: str = "recipe") -> ObjectId:
    # URL 등에서 온 id → ObjectId. 형식이 틀리면 400
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise InvalidInput(f"Invalid {what} id", str(value))

def user_ref(value: Any) -> Any:
    # 인증 쪽 사용자 id: ObjectId 형식이면 ObjectId, 아니면 문자열 그대로
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value

class RecipeRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["recipes"]

    async def list_all(self) -> List[Dict[str, Any]]:
        # _id 오름차순 = 삽입 순서
        cur = self.col.find({}).sort("_id", 1)
        return await cur.to_list(length=None)

    async def find_saved_by(self, user: Any) -> List[Dict[str, Any]]:
        cur = self.col.find({"savedBy": user}).sort("_id", 1)
        return await cur.to_list(length=None)

    async def get(self, oid: ObjectId) -> Optional[Dict[str, Any]]:
        return await self.col.find_one({"_id": oid})

    async def insert(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        result = await self.col.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def update_fields(self, oid: ObjectId, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        fields = {**fields, "updatedAt": utcnow()}
        return await self.col.find_one_and_update(
            {"_id": oid},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    async def delete(self, oid: ObjectId) -> bool:
        result = await self.col.delete_one({"_id": oid})
        return result.deleted_count > 0

    # --- savedBy (users.savedRecipes 와 짝) ---
    async def add_saved_by(self, oid: ObjectId, user: Any) -> None:
        await self.col.update_one({"_id": oid}, {"$addToSet": {"savedBy": user}})

    async def remove_saved_by(self, oid: ObjectId, user: Any) -> None:
        await self.col.update_one({"_id": oid}, {"$pull": {"savedBy": user}})

class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["users"]

    async def get(self, user: Any) -> Optional[Dict[str, Any]]:
        return await self.col.find_one({"_id": user})

    async def add_saved_recipe(self, user: Any, recipe_oid: ObjectId) -> List[Any]:
        # $addToSet: 배열 없으면 생성, 이미 있으면 그대로 (멱등)
        doc = await self.col.find_one_and_update(
            {"_id": user},
            {"$addToSet": {"savedRecipes": recipe_oid}},
            return_document=ReturnDocument.AFTER,
        )
        return (doc or {}).get("savedRecipes") or []

    async def remove_saved_recipe(self, user: Any, recipe_oid: ObjectId) -> List[Any]:
        doc = await self.col.find_one_and_update(
            {"_id": user},
            {"$pull": {"savedRecipes": recipe_oid}},
            return_document=ReturnDocument.AFTER,
        )
        return (doc or {}).get("savedRecipes") or []
