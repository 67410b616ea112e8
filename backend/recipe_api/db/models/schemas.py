# recipe_api/db/models/schemas.py
# 요청 바디 Pydantic 모델
# RecipeCreateIn: AI 생성 입력
# RecipeUpdateIn: 부분 수정 (보낸 필드만 반영)
from __future__ import annotations
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from recipe_api.db.models.recipe import Difficulty

def _as_text(v: Any) -> Any:
    # 프론트가 portionSize를 숫자로 보내는 경우 대응
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v

class RecipeCreateIn(BaseModel):
    ingredients: List[str] = Field(..., min_length=1)
    portionSize: str
    category: Union[str, List[str]] = "other"
    difficulty: Difficulty

    @field_validator("portionSize", mode="before")
    @classmethod
    def _v_portion(cls, v):
        return _as_text(v)

_BLANK_IGNORED = ("title", "portionSize", "image", "category")

class RecipeUpdateIn(BaseModel):
    title: Optional[str] = None
    description: Optional[List[str]] = None
    ingredients: Optional[List[str]] = None
    instructions: Optional[List[str]] = None
    portionSize: Optional[str] = None
    category: Optional[Union[str, List[str]]] = None
    difficulty: Optional[Difficulty] = None
    nutritionalInfo: Optional[Dict[str, Any]] = None
    image: Optional[str] = None
    tags: Optional[List[str]] = None
    cuisine: Optional[str] = None

    @field_validator("portionSize", mode="before")
    @classmethod
    def _v_portion(cls, v):
        return _as_text(v)

    def provided(self) -> Dict[str, Any]:
        # 명시적으로 보낸 + null 아닌 필드만. 제목/분량/이미지/카테고리는 빈 문자열도 무시
        out = {}
        for k, v in self.model_dump(exclude_unset=True).items():
            if v is None:
                continue
            if k in _BLANK_IGNORED and isinstance(v, str) and not v.strip():
                continue
            out[k] = v
        return out

class RatingIn(BaseModel):
    rating: int = Field(..., ge=1, le=5)
