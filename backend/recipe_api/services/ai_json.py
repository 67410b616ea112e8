# recipe_api/services/ai_json.py
# LLM 응답 JSON 파싱
# - ```json 펜스 제거
# - 그대로 json.loads → 실패 시 json_repair로 1회 보정
# 보정 결과가 비었거나 객체/배열이 아니면 실패로 본다

from __future__ import annotations
import json
import logging
import re
from typing import Any

import json_repair

log = logging.getLogger(__name__)


class JSONRepairError(ValueError):
    pass


_FENCE_RE = re.compile(r"```(?:json|JSON)?")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def parse_ai_json(raw: str) -> Any:
    """펜스 제거 → 엄격 파싱 → 실패 시 보정 1회 → 그래도 못 쓰면 JSONRepairError"""
    text = strip_code_fences(raw)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        log.warning("AI JSON strict parse failed (%s); trying repair", e.msg)

    try:
        repaired = json_repair.loads(text)
    except ValueError as e:
        raise JSONRepairError(f"JSON repair failed: {e}") from e

    if not repaired or not isinstance(repaired, (dict, list)):
        raise JSONRepairError("JSON repair failed: no object or array in AI output")
    return repaired
