# 레시피 저장 문서 스키마 (recipes 컬렉션)
from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field

Category = Literal["vegetarian", "non-vegetarian", "vegan", "spicy", "other"]
Difficulty = Literal["easy", "medium", "hard"]

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class NutritionalInfo(BaseModel):
    calories: float = 0
    protein: float = 0
    fat: float = 0
    carbs: float = 0

class Rating(BaseModel):
    user: Any                     # ObjectId 또는 인증 쪽 문자열 id
    rating: int = Field(..., ge=1, le=5)

class RecipeDoc(BaseModel):
    title: str
    description: List[str] = Field(default_factory=list)    # AI 불릿
    ingredients: List[str] = Field(default_factory=list)    # "amount unit item"
    instructions: List[str] = Field(default_factory=list)
    portionSize: str
    category: List[Category] = Field(default_factory=lambda: ["other"])
    difficulty: Difficulty
    image: str
    ratings: List[Rating] = Field(default_factory=list)
    averageRating: float = 0
    savedBy: List[Any] = Field(default_factory=list)
    nutritionalInfo: NutritionalInfo = Field(default_factory=NutritionalInfo)
    tags: List[str] = Field(default_factory=list)
    cuisine: Optional[str] = None
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)
