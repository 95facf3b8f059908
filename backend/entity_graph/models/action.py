"""
Event Action Models

事件 payload 的显式和类型 (tagged union):

  ActionNodeKind.ACTION     → LeafAction          单个动作 (add/remove/trigger/queue_command/...)
  ActionNodeKind.SEQUENCE   → SequenceActionSet   按顺序执行每个子节点
  ActionNodeKind.RANDOMIZE  → RandomizeActionSet  按 weight 随机选择一个子节点

原始 JSON 没有类型字段，由 parse_action_node() 根据 randomize / sequence 键判定:
  - randomize 为 list → RANDOMIZE（优先）
  - sequence 为 list  → SEQUENCE
  - 其他（包括 randomize/sequence 不是 list）→ ACTION

所有变体都保留 filters 和 weight，它们描述的是"父节点在什么条件下选择本节点"。
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class ActionNodeKind(str, Enum):
    ACTION = "action"
    SEQUENCE = "sequence"
    RANDOMIZE = "randomize"


class _ActionNodeBase(BaseModel):
    model_config = ConfigDict(extra="ignore")

    filters: Optional[Any] = None
    weight: Optional[Union[int, float]] = None

    raw: Any = Field(default=None, exclude=True)
    """原始 JSON，用于 to_json / 调试输出"""


class LeafAction(_ActionNodeBase):
    """单个动作节点。"""
    kind: Literal[ActionNodeKind.ACTION] = ActionNodeKind.ACTION

    add_groups: Optional[List[str]] = None
    remove_groups: Optional[List[str]] = None

    trigger: Optional[str] = None
    """本动作再触发的事件 id（'trigger' 可为字符串或 {event: ...}）"""

    command: Optional[str] = None
    sound: Optional[str] = None
    vibration: Optional[str] = None
    particle: Optional[str] = None


class SequenceActionSet(_ActionNodeBase):
    kind: Literal[ActionNodeKind.SEQUENCE] = ActionNodeKind.SEQUENCE
    children: List["ActionNode"] = Field(default_factory=list)


class RandomizeActionSet(_ActionNodeBase):
    kind: Literal[ActionNodeKind.RANDOMIZE] = ActionNodeKind.RANDOMIZE
    children: List["ActionNode"] = Field(default_factory=list)


ActionNode = Union[LeafAction, SequenceActionSet, RandomizeActionSet]

SequenceActionSet.model_rebuild()
RandomizeActionSet.model_rebuild()


# =============================================================================
# Parsing
# =============================================================================


def _group_list(block: Any) -> Optional[List[str]]:
    """{"component_groups": [...]} → [...]；格式不符时返回 None。"""
    if not isinstance(block, dict):
        return None
    groups = block.get("component_groups")
    if isinstance(groups, str):
        return [groups]
    if not isinstance(groups, list):
        return None
    return [g for g in groups if isinstance(g, str)]


def _nested_str(block: Any, key: str) -> Optional[str]:
    if not isinstance(block, dict):
        return None
    val = block.get(key)
    return val if isinstance(val, str) else None


def _command(block: Any) -> Optional[str]:
    """queue_command.command 可为字符串或字符串数组。"""
    if not isinstance(block, dict):
        return None
    command = block.get("command")
    if isinstance(command, list):
        return "; ".join(c for c in command if isinstance(c, str))
    return command if isinstance(command, str) else None


def _weight(raw: Dict[str, Any]) -> Optional[Union[int, float]]:
    weight = raw.get("weight")
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        return None
    return weight


def _trigger_event(raw_trigger: Any) -> Optional[str]:
    if isinstance(raw_trigger, str):
        return raw_trigger
    return _nested_str(raw_trigger, "event")


def parse_action_node(raw: Any) -> ActionNode:
    """原始事件 JSON → ActionNode。

    不会因数据不规范而抛异常：非 dict 的 payload 视为空动作，
    非 dict 的子节点被跳过。
    """
    if not isinstance(raw, dict):
        return LeafAction(raw=raw)

    filters = raw.get("filters")
    weight = _weight(raw)

    randomize = raw.get("randomize")
    if isinstance(randomize, list):
        return RandomizeActionSet(
            filters=filters,
            weight=weight,
            raw=raw,
            children=[parse_action_node(c) for c in randomize if isinstance(c, dict)],
        )

    sequence = raw.get("sequence")
    if isinstance(sequence, list):
        return SequenceActionSet(
            filters=filters,
            weight=weight,
            raw=raw,
            children=[parse_action_node(c) for c in sequence if isinstance(c, dict)],
        )

    if "randomize" in raw or "sequence" in raw:
        logger.debug("[parse_action_node] randomize/sequence 不是数组，按单个动作处理")

    return LeafAction(
        filters=filters,
        weight=weight,
        raw=raw,
        add_groups=_group_list(raw.get("add")),
        remove_groups=_group_list(raw.get("remove")),
        trigger=_trigger_event(raw.get("trigger")),
        command=_command(raw.get("queue_command")),
        sound=_nested_str(raw.get("play_sound"), "sound"),
        vibration=_nested_str(raw.get("emit_vibration"), "vibration"),
        particle=_nested_str(raw.get("emit_particle"), "particle"),
    )
