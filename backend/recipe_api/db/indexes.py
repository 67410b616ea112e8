# 컬렉션 인덱스 생성
# 앱 스타트업에서 한 번 ensure_indexes()를 await로 호출한다.

from recipe_api.db.init import get_db

async def ensure_recipe_indexes(db):
    col = db["recipes"]
    # 저장한 레시피 조회 (savedBy 멤버십)
    await col.create_index("savedBy")
    await col.create_index("category")
    await col.create_index([("title", 1)])

async def ensure_indexes():
    db = get_db()

    await ensure_recipe_indexes(db)

    # users 컬렉션은 인증 쪽 소유, 여기선 savedRecipes만 건드림
    await db["users"].create_index("savedRecipes")
