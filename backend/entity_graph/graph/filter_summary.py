"""
Filter 可读摘要

把事件动作上的 filters JSON 转成一句可读条件，拼入 transition 的 description。

支持:
  单条子句  {"test": "is_family", "subject": "other", "operator": "==", "value": "player"}
  子句集合  {"all_of": [...]} / {"any_of": [...]} / {"none_of": [...]}（可嵌套）
  子句数组  [...]  （等价于 all_of）
"""
from __future__ import annotations

from typing import Any, List, Optional

_DEFAULT_SUBJECT = "self"

_OPERATOR_PHRASES = {
    "==": "",
    "=": "",
    "equals": "",
    "!=": "not ",
    "<>": "not ",
    "not": "not ",
    "<": "less than ",
    "<=": "at most ",
    ">": "more than ",
    ">=": "at least ",
}

_SET_KEYS = (
    ("all_of", " and "),
    ("any_of", " or "),
)


def _describe_clause(clause: dict) -> Optional[str]:
    test = clause.get("test")
    if not isinstance(test, str) or not test:
        return None

    subject = clause.get("subject") or _DEFAULT_SUBJECT
    text = f"{subject} {test.replace('_', ' ')}"

    if "value" not in clause:
        return text

    value = clause["value"]
    operator = str(clause.get("operator", "=="))
    phrase = _OPERATOR_PHRASES.get(operator, operator + " ")

    if isinstance(value, bool):
        negated = phrase == "not "
        if value != negated:
            return text
        return f"{text} is false"

    return f"{text} {phrase}{value}"


def describe_filter(filters: Any) -> Optional[str]:
    """filters JSON → 条件文本；无法识别时返回 None。"""
    if isinstance(filters, list):
        return _join([describe_filter(f) for f in filters], " and ")

    if not isinstance(filters, dict):
        return None

    if "test" in filters:
        return _describe_clause(filters)

    for key, separator in _SET_KEYS:
        if key in filters:
            members = filters[key]
            if isinstance(members, dict):
                members = [members]
            if isinstance(members, list):
                return _join([describe_filter(m) for m in members], separator)

    if "none_of" in filters:
        members = filters["none_of"]
        if isinstance(members, dict):
            members = [members]
        if isinstance(members, list):
            inner = _join([describe_filter(m) for m in members], " or ")
            if inner:
                return f"not ({inner})"

    return None


def _join(parts: List[Optional[str]], separator: str) -> Optional[str]:
    texts = [p for p in parts if p]
    if not texts:
        return None
    if len(texts) == 1:
        return texts[0]
    return "(" + separator.join(texts) + ")"


def get_human_summary(filters: Any) -> str:
    """用于拼接到条件描述中的片段，如 'when self is baby,'；无 filter 返回空串。"""
    text = describe_filter(filters)
    if not text:
        return ""
    return f"when {text},"
