# recipe_api/main.py
# FastAPI 앱 초기화 및 라우터 설정

from __future__ import annotations

import logging
from asyncio import sleep
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recipe_api.api.routes_recipes import router as recipes_router
from recipe_api.core.config import Settings, get_settings
from recipe_api.core.errors import register_exception_handlers

# DB 초기화/인덱스
# init_db/close_db: 앱 시작/종료 시 커넥션 생성/정리
# get_db: 런타임에 DB 핸들 얻기
from recipe_api.db.init import get_db, init_db, close_db
from recipe_api.db.indexes import ensure_indexes

log = logging.getLogger(__name__)

DB_INIT_RETRIES = 20

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Recipe AI - API", version="0.1.0")

    # CORS: 프론트(vite 5173) 허용 + 쿠키 전달
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # 앱 시작/종료 이벤트 핸들러
    @app.on_event("startup")
    async def on_startup() -> None:
        # 1) DB 먼저 붙는다 (최대 20회, 1초 간격)
        db = None
        for i in range(DB_INIT_RETRIES):
            try:
                db = await init_db(settings)
                log.info("[startup] db ready")
                break
            except Exception as e:
                log.warning("[startup] db init retry %d: %s", i + 1, e)
                await sleep(1.0)
        if db is None:
            log.error("[startup] db init failed after retries")
            return

        # 2) 인덱스 보장
        try:
            await ensure_indexes()
            log.info("[startup] indexes ensured")
        except Exception as e:
            log.warning("[startup] ensure_indexes failed: %s", e)

        if not settings.OPENAI_API_KEY:
            log.warning("[startup] OPENAI_API_KEY not set; AI generation endpoints will return 500")

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        # 몽고db 커넥션 정리
        await close_db()

    @app.get("/")
    async def root():
        return {"status": "ok"}

    @app.get("/health")
    async def health():
        ok = {"status": "ok", "db": "skip"}
        try:
            db = get_db()
            await db.command("ping")
            ok["db"] = "ok"
        except Exception as e:
            ok["db"] = f"error: {e}"
        return ok

    app.include_router(recipes_router)
    return app

app = create_app()
