# recipe_api/services/generation_openai.py
# 레시피 텍스트/이미지 생성 (OpenAI)
# - 텍스트: Chat Completions, JSON만 받도록 요청 (보정은 ai_json에서)
# - 이미지: Images API, base64 인라인 결과만 사용
# - 재시도 없음, 타임아웃은 설정값

from __future__ import annotations
import logging
from typing import Any, List, Optional

from openai import AsyncOpenAI, OpenAIError

from recipe_api.core.config import Settings
from recipe_api.core.errors import ServiceNotConfigured, UpstreamError

log = logging.getLogger(__name__)

# 응답 JSON 스키마(권고용 설명)
RECIPE_SCHEMA_HINT = """{
  "title": "Recipe title",
  "description": ["bullet point 1", "bullet point 2"],
  "ingredients": [{ "item": "x", "amount": "y", "unit": "z" }],
  "instructions": ["step 1", "step 2", "step 3"],
  "nutritionalInfo": { "calories": 0, "protein": 0, "fat": 0, "carbs": 0 },
  "tags": ["tag 1", "tag 2"],
  "cuisine": "Cuisine name"
}"""


def build_recipe_prompt(ingredients: List[str], portion_size: str, category: Any, difficulty: str) -> str:
    if isinstance(category, list):
        category = ", ".join(str(c) for c in category)
    return (
        "Generate a detailed recipe with the following details:\n"
        f"- Portion size: {portion_size}\n"
        f"- Category: {category}\n"
        f"- Difficulty: {difficulty}\n"
        f"- Ingredients: {', '.join(ingredients)}\n\n"
        "Format the response as **valid JSON** only, including nested nutritionalInfo object.\n"
        "nutritionalInfo values are per portion (calories in kcal, protein/fat/carbs in grams).\n"
        f"{RECIPE_SCHEMA_HINT}\n"
    )


def build_image_prompt(title: str) -> str:
    return (
        f"Create a professional, restaurant-quality food photo of the dish: {title}.\n"
        "Style: realistic, appetizing, high resolution, well-lit."
    )


def extract_inline_image(rsp: Any) -> Optional[str]:
    """Images API 응답에서 첫 번째 base64 이미지. 없으면 None"""
    data = getattr(rsp, "data", None)
    if data is None and isinstance(rsp, dict):
        data = rsp.get("data")
    for item in data or []:
        b64 = item.get("b64_json") if isinstance(item, dict) else getattr(item, "b64_json", None)
        if b64:
            return b64
    return None


class OpenAIGenerationClient:
    def __init__(self, settings: Settings):
        self.settings = settings
        self._client: AsyncOpenAI | None = None

    @property
    def configured(self) -> bool:
        return bool(self.settings.OPENAI_API_KEY)

    def _get_client(self) -> AsyncOpenAI:
        if not self.configured:
            raise ServiceNotConfigured(error="OPENAI_API_KEY not set")
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.OPENAI_API_KEY,
                timeout=self.settings.AI_TIMEOUT_SECONDS,
                max_retries=0,
            )
        return self._client

    async def generate_text(self, prompt: str) -> str:
        client = self._get_client()
        try:
            chat = await client.chat.completions.create(
                model=self.settings.OPENAI_TEXT_MODEL,
                temperature=0.7,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            log.exception("recipe text generation failed")
            raise UpstreamError("Failed to generate recipe", str(e)) from e

        text = chat.choices[0].message.content if chat and chat.choices else ""
        if not text:
            log.warning("text generation returned empty content")
            raise UpstreamError("Failed to generate recipe", "AI returned empty response")
        return text

    async def generate_image(self, prompt: str) -> Any:
        client = self._get_client()
        model = self.settings.OPENAI_IMAGE_MODEL
        params = {"model": model, "prompt": prompt, "size": "1024x1024", "n": 1}
        # gpt-image-* 는 항상 b64, dall-e 계열은 기본이 url이라 명시
        if not model.startswith("gpt-image"):
            params["response_format"] = "b64_json"
        try:
            return await client.images.generate(**params)
        except OpenAIError as e:
            log.exception("recipe image generation failed")
            raise UpstreamError("Failed to generate recipe image", str(e)) from e

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
