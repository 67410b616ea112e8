# AI가 돌려준 레시피 JSON 스키마
# 재료는 문자열 또는 {item, amount, unit} 두 가지 → kind 태그로 구분해 받는다.
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


def _text(v: Any) -> str:
    if v is None:
        return ""
    return str(v).strip()


class PlainIngredient(BaseModel):
    kind: Literal["plain"] = "plain"
    text: str


class StructuredIngredient(BaseModel):
    kind: Literal["structured"] = "structured"
    item: str = ""
    amount: str = ""
    unit: str = ""

    @field_validator("item", "amount", "unit", mode="before")
    @classmethod
    def _v_text(cls, v):
        return _text(v)


Ingredient = Annotated[Union[PlainIngredient, StructuredIngredient], Field(discriminator="kind")]


def _tag_ingredient(raw: Any) -> Any:
    if isinstance(raw, str):
        return {"kind": "plain", "text": raw}
    if isinstance(raw, dict) and "kind" not in raw:
        return {"kind": "structured", **raw}
    return raw


def _as_lines(v: Any) -> List[str]:
    # "문장" 하나로 오면 한 줄짜리 리스트로
    if v is None:
        return []
    if isinstance(v, str):
        return [v.strip()] if v.strip() else []
    if isinstance(v, list):
        return [_text(x) for x in v if _text(x)]
    return v


class GeneratedRecipe(BaseModel):
    title: str = Field(..., min_length=1)
    description: List[str] = Field(default_factory=list)
    ingredients: List[Ingredient] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    nutritionalInfo: Dict[str, Any] = Field(default_factory=dict)
    tags: List[str] = Field(default_factory=list)
    cuisine: Optional[str] = None

    @field_validator("description", "instructions", "tags", mode="before")
    @classmethod
    def _v_lines(cls, v):
        return _as_lines(v)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _v_ingredients(cls, v):
        if v is None:
            return []
        if not isinstance(v, list):
            v = [v]
        return [_tag_ingredient(x) for x in v]

    @field_validator("nutritionalInfo", mode="before")
    @classmethod
    def _v_nutrition(cls, v):
        return v if isinstance(v, dict) else {}

    @field_validator("cuisine", mode="before")
    @classmethod
    def _v_cuisine(cls, v):
        return _text(v) or None

    @field_validator("title", mode="before")
    @classmethod
    def _v_title(cls, v):
        return _text(v)
