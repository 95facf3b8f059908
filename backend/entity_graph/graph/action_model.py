"""
ActionModel -- 事件 payload 的只读包装

包装一个 ActionNode（LeafAction / SequenceActionSet / RandomizeActionSet），提供:
  - add_groups / remove_groups: 仅叶子动作有 add/remove 指令时存在，组合节点恒为 None
  - potential_actions(seed): 把嵌套 sequence/randomize 展平成叶子动作列表，
    每个叶子带一句由祖先上下文拼成的条件描述

展平规则:
  RANDOMIZE → 每个子节点: seed + [filter 摘要] + "randomly chosen" / "randomly chosen with weight N"
  SEQUENCE  → 每个子节点: seed + [filter 摘要] + "runs"
  ACTION    → [(seed + "fires", self)]

每个子节点从父节点的 seed 出发，兄弟节点之间互不累加。
源数据中的组合嵌套是有限树（无环），递归必然终止。
"""
from __future__ import annotations

import json
from typing import Any, List, Optional, Union

from entity_graph.graph.filter_summary import get_human_summary
from entity_graph.models.action import (
    ActionNode,
    ActionNodeKind,
    LeafAction,
    RandomizeActionSet,
    SequenceActionSet,
    parse_action_node,
)
from entity_graph.models.state import PotentialAction


def _extend_seed(seed: str, *phrases: str) -> str:
    parts = [seed] if seed else []
    parts.extend(p for p in phrases if p)
    return " ".join(parts)


def _format_weight(weight: Union[int, float]) -> str:
    if isinstance(weight, float) and weight.is_integer():
        return str(int(weight))
    return str(weight)


class ActionModel:
    """事件动作 / 动作集合的只读包装。

    Usage::

        model = ActionModel(entity.definition.events["minecraft:entity_spawned"])
        for potential in model.potential_actions():
            print(potential.condition_description, potential.action.add_groups)
    """

    def __init__(self, data: Union[ActionNode, Any]) -> None:
        if isinstance(data, (LeafAction, SequenceActionSet, RandomizeActionSet)):
            self.node: ActionNode = data
        else:
            self.node = parse_action_node(data)

    # =========================================================================
    # 变体判定
    # =========================================================================

    @property
    def kind(self) -> ActionNodeKind:
        return self.node.kind

    @property
    def is_leaf(self) -> bool:
        return self.node.kind == ActionNodeKind.ACTION

    @property
    def randomize(self) -> Optional[List["ActionModel"]]:
        if self.node.kind != ActionNodeKind.RANDOMIZE:
            return None
        return [ActionModel(child) for child in self.node.children]

    @property
    def sequence(self) -> Optional[List["ActionModel"]]:
        if self.node.kind != ActionNodeKind.SEQUENCE:
            return None
        return [ActionModel(child) for child in self.node.children]

    # =========================================================================
    # 通用字段
    # =========================================================================

    @property
    def filters(self) -> Any:
        return self.node.filters

    @property
    def weight(self) -> Optional[Union[int, float]]:
        return self.node.weight

    # =========================================================================
    # 叶子字段（组合节点返回 None）
    # =========================================================================

    def _leaf(self) -> Optional[LeafAction]:
        return self.node if isinstance(self.node, LeafAction) else None

    @property
    def add_groups(self) -> Optional[List[str]]:
        leaf = self._leaf()
        return leaf.add_groups if leaf else None

    @property
    def remove_groups(self) -> Optional[List[str]]:
        leaf = self._leaf()
        return leaf.remove_groups if leaf else None

    @property
    def trigger(self) -> Optional[str]:
        leaf = self._leaf()
        return leaf.trigger if leaf else None

    @property
    def command(self) -> str:
        leaf = self._leaf()
        return (leaf.command if leaf else None) or ""

    @property
    def sound(self) -> Optional[str]:
        leaf = self._leaf()
        return leaf.sound if leaf else None

    @property
    def vibration(self) -> Optional[str]:
        leaf = self._leaf()
        return leaf.vibration if leaf else None

    @property
    def particle(self) -> Optional[str]:
        leaf = self._leaf()
        return leaf.particle if leaf else None

    @property
    def has_add_remove(self) -> bool:
        return self.add_groups is not None or self.remove_groups is not None

    @property
    def changes_groups(self) -> bool:
        """add 或 remove 列表非空。只有这类叶子会产生状态转移。"""
        return bool(self.add_groups) or bool(self.remove_groups)

    @property
    def has_command(self) -> bool:
        return bool(self.command)

    @property
    def has_sound(self) -> bool:
        return self.sound is not None

    @property
    def has_vibration(self) -> bool:
        return self.vibration is not None

    @property
    def has_particle(self) -> bool:
        return self.particle is not None

    @property
    def has_trigger(self) -> bool:
        return self.trigger is not None

    # =========================================================================
    # 展平
    # =========================================================================

    def potential_actions(self, condition_seed: str = "") -> List[PotentialAction]:
        """展平为叶子动作列表。"""
        node = self.node

        if node.kind == ActionNodeKind.RANDOMIZE:
            results: List[PotentialAction] = []
            for child in node.children:
                if child.weight:
                    phrase = f"randomly chosen with weight {_format_weight(child.weight)}"
                else:
                    phrase = "randomly chosen"
                child_seed = _extend_seed(
                    condition_seed, get_human_summary(child.filters), phrase
                )
                results.extend(ActionModel(child).potential_actions(child_seed))
            return results

        if node.kind == ActionNodeKind.SEQUENCE:
            results = []
            for child in node.children:
                child_seed = _extend_seed(
                    condition_seed, get_human_summary(child.filters), "runs"
                )
                results.extend(ActionModel(child).potential_actions(child_seed))
            return results

        return [
            PotentialAction(
                condition_description=_extend_seed(condition_seed, "fires"),
                action=self,
            )
        ]

    def iter_leaf_actions(self) -> List["ActionModel"]:
        """所有叶子动作（不带条件描述）。"""
        return [p.action for p in self.potential_actions()]

    # =========================================================================
    # 输出
    # =========================================================================

    def to_json(self) -> Any:
        if self.node.raw is not None:
            return self.node.raw
        return self.node.model_dump(exclude_none=True, mode="json")

    def __str__(self) -> str:
        return json.dumps(self.to_json(), ensure_ascii=False)

    def __repr__(self) -> str:
        return f"ActionModel(kind={self.kind.value!r})"
