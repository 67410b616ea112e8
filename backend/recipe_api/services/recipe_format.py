# recipe_api/services/recipe_format.py
# 레시피 필드 정규화 유틸
# - 카테고리 문자열 → 고정 태그(vegetarian/non-vegetarian/vegan/spicy/other)
# - 영양정보 "200kcal" → 200.0 (소수 2자리)
# - 재료 {item, amount, unit} → "amount unit item"

from __future__ import annotations
import re
from typing import Any, Dict, Iterable, List, Union

from recipe_api.models.schemas import Ingredient, PlainIngredient, StructuredIngredient

# 소문자 + 영문자만 남긴 키 → 저장용 태그 (매핑 테이블)
_CATEGORY_MAP = {
    "veg": "vegetarian",
    "vegetarian": "vegetarian",
    "nonveg": "non-vegetarian",
    "nonvegetarian": "non-vegetarian",
    "vegan": "vegan",
    "spicy": "spicy",
}

NUTRITION_FIELDS = ("calories", "protein", "fat", "carbs")

_NON_NUMERIC_RE = re.compile(r"[^\d.]")
_LEADING_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?|\.\d+")

def normalize_category(cat: Any) -> str:
    if not cat or not isinstance(cat, str):
        return "other"
    cleaned = re.sub(r"[^a-z]", "", cat.lower())
    return _CATEGORY_MAP.get(cleaned, "other")

def normalize_categories(cats: Union[str, Iterable[str], None]) -> List[str]:
    # 단일 값이면 1개짜리 리스트, 중복 제거(순서 유지)
    if cats is None or isinstance(cats, str):
        cats = [cats]
    out: List[str] = []
    for c in cats:
        tag = normalize_category(c)
        if tag not in out:
            out.append(tag)
    return out or ["other"]

def parse_nutrition(value: Any) -> float:
    if not value or isinstance(value, bool):
        return 0.0
    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    m = _LEADING_NUMBER_RE.match(cleaned)
    if not m:
        return 0.0
    try:
        return round(float(m.group(0)), 2)
    except ValueError:
        return 0.0

def coerce_nutrition(info: Dict[str, Any] | None, base: Dict[str, Any] | None = None) -> Dict[str, float]:
    """
    영양정보 4개 필드를 숫자로 강제.
    base가 있으면 info에 없는 필드는 base 값을 유지(부분 수정용).
    """
    info = info or {}
    base = base or {}
    out: Dict[str, float] = {}
    for k in NUTRITION_FIELDS:
        src = info[k] if k in info else base.get(k)
        out[k] = parse_nutrition(src)
    return out

def format_ingredient(ing: Ingredient) -> str:
    if isinstance(ing, PlainIngredient):
        text = ing.text
    elif isinstance(ing, StructuredIngredient):
        text = " ".join(p for p in (ing.amount, ing.unit, ing.item) if p)
    else:
        raise TypeError(f"unsupported ingredient: {ing!r}")
    return re.sub(r"\s+", " ", text).strip()

def format_ingredients(items: Iterable[Ingredient]) -> List[str]:
    out = [format_ingredient(i) for i in items]
    return [s for s in out if s]
