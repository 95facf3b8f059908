"""
EntityModel -- 实体定义的只读访问层

为状态图构建提供:
  - 基础组件集 (base)
  - 具名组件组 / 事件表
  - effective_components(mutation_list): 在基础组件上应用组件组增删后的合并组件集

合并规则:
  按 mutation list 顺序，把每个 "+group" 的组件覆盖写入基础组件（后写覆盖先写）。
  "-group" 表示该组不在当前配置中，不贡献组件，也不删除基础组件自带的同名组件。
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from entity_graph.models.entity import (
    ComponentGroup,
    ComponentSet,
    EntityDefinition,
    EventWrapper,
    is_add_token,
    join_mutations,
    token_group_id,
)

logger = logging.getLogger(__name__)


class EntityModel(ComponentSet):
    """实体 = 基础组件集 + 组件组 + 事件。

    自身即基础组件集（id 为实体 identifier），
    因此可以直接传给 TriggerIndex.get_triggers()。

    Usage::

        model = EntityModel.from_json(json.loads(path.read_text()))
        merged = model.effective_components(["+cg_baby", "-cg_adult"])
    """

    definition: EntityDefinition

    @classmethod
    def from_definition(cls, definition: EntityDefinition) -> "EntityModel":
        return cls(
            id=definition.identifier,
            components=dict(definition.components),
            definition=definition,
        )

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "EntityModel":
        return cls.from_definition(EntityDefinition.from_json(data))

    # =========================================================================
    # 组件组
    # =========================================================================

    def get_component_groups(self) -> List[ComponentGroup]:
        """按文档顺序返回所有组件组。"""
        return [
            ComponentGroup(id=group_id, components=dict(data))
            for group_id, data in self.definition.component_groups.items()
        ]

    def get_component_group(self, group_id: str) -> Optional[ComponentGroup]:
        data = self.definition.component_groups.get(group_id)
        if data is None:
            return None
        return ComponentGroup(id=group_id, components=dict(data))

    def get_core_and_component_group_list(self) -> List[ComponentSet]:
        """基础组件集在前，然后是各组件组。"""
        result: List[ComponentSet] = [self]
        result.extend(self.get_component_groups())
        return result

    # =========================================================================
    # 事件
    # =========================================================================

    def get_events(self) -> List[EventWrapper]:
        return [
            EventWrapper(id=event_id, event=payload)
            for event_id, payload in self.definition.events.items()
        ]

    def get_event(self, event_id: str) -> Optional[EventWrapper]:
        if event_id not in self.definition.events:
            return None
        return EventWrapper(id=event_id, event=self.definition.events[event_id])

    # =========================================================================
    # 有效组件
    # =========================================================================

    def effective_components(self, mutation_list: List[str]) -> ComponentSet:
        """在基础组件上应用 mutation list，返回合并后的组件集。

        空 list 返回 self（基础实体本身）。
        """
        if not mutation_list:
            return self

        merged: Dict[str, Any] = dict(self.components)
        for token in mutation_list:
            if not is_add_token(token):
                continue
            group_id = token_group_id(token)
            group_data = self.definition.component_groups.get(group_id)
            if group_data is None:
                logger.warning(
                    "[EntityModel] '%s' 引用了不存在的组件组 '%s'",
                    self.id, group_id,
                )
                continue
            merged.update(group_data)

        return ComponentSet(
            id=f"{self.id}#{join_mutations(mutation_list)}",
            components=merged,
        )
