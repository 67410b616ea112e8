# recipe_api/db/init.py
# Mongo 커넥션 수명 관리: motor 클라이언트 하나를 앱 전체가 공유
# init_db(settings)는 startup에서, get_db()는 의존성에서, close_db()는 shutdown에서

from __future__ import annotations
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from recipe_api.core.config import Settings

_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None

async def init_db(settings: Settings) -> AsyncIOMotorDatabase:
    global _client, _db
    if _db is not None:
        return _db

    client = AsyncIOMotorClient(settings.MONGO_URI, tz_aware=True)
    db = client[settings.MONGO_DB]
    try:
        # ping 실패하면 반쯤 열린 클라이언트를 남기지 않는다 (startup 재시도용)
        await db.command("ping")
    except Exception:
        client.close()
        raise

    _client, _db = client, db
    return _db

def get_db() -> AsyncIOMotorDatabase:
    if _db is None:
        raise RuntimeError("MongoDB is not initialized yet.")
    return _db

async def close_db() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None
