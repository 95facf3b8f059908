"""
GroupsAndEventsBuilder -- 组件组 / 事件接线图

与状态图互补的第二种视图：不推导状态，只展示"谁引用了谁"。

节点:
  component_set  基础实体 + 每个组件组（data: triggers = 该组件集的 TriggerDescriptor 列表）
  event          每个事件（data: action = ActionModel）

边 (relation):
  triggers  component_set → event   组件字段引用了该事件（key = descriptor path）
  adds      event → component_set   事件的某个叶子动作添加该组件组
  removes   event → component_set   事件的某个叶子动作移除该组件组
  fires     event → event           事件的某个叶子动作通过 trigger 再触发另一个事件

引用了不存在的事件 / 组件组时不建边。
"""
from __future__ import annotations

import logging
from enum import Enum

import networkx as nx

from entity_graph.graph.action_model import ActionModel
from entity_graph.graph.entity_model import EntityModel
from entity_graph.graph.trigger_index import TriggerIndex

logger = logging.getLogger(__name__)


class WiringNodeType(str, Enum):
    COMPONENT_SET = "component_set"
    EVENT = "event"


class WiringEdgeType(str, Enum):
    TRIGGERS = "triggers"
    ADDS = "adds"
    REMOVES = "removes"
    FIRES = "fires"


def event_node_id(event_id: str) -> str:
    """事件与组件组可能同名，节点 id 加前缀区分。"""
    return f"event:{event_id}"


def component_set_node_id(component_set_id: str) -> str:
    return f"set:{component_set_id}"


class GroupsAndEventsBuilder:
    """构建组件组 / 事件接线图。

    Usage::

        graph = await GroupsAndEventsBuilder(trigger_index).build(entity_model)
        graph.out_edges(component_set_node_id(entity_model.id), data=True)
    """

    def __init__(self, trigger_index: TriggerIndex) -> None:
        self.trigger_index = trigger_index

    async def build(self, entity_model: EntityModel) -> nx.MultiDiGraph:
        graph = nx.MultiDiGraph(entity_id=entity_model.id)

        events = {w.id: ActionModel(w.event) for w in entity_model.get_events() if w.id}
        for event_id, action in events.items():
            graph.add_node(
                event_node_id(event_id),
                type=WiringNodeType.EVENT.value,
                event_id=event_id,
                action=action,
            )

        group_ids = set()
        for component_set in entity_model.get_core_and_component_group_list():
            is_base = component_set is entity_model
            if not is_base:
                group_ids.add(component_set.id)
            triggers = await self.trigger_index.get_triggers(component_set, is_base)
            node_id = component_set_node_id(component_set.id)
            graph.add_node(
                node_id,
                type=WiringNodeType.COMPONENT_SET.value,
                component_set_id=component_set.id,
                is_base=is_base,
                triggers=triggers,
            )
            for trigger in triggers:
                ref = trigger.reference_event_id
                if not ref or ref not in events:
                    continue
                graph.add_edge(
                    node_id,
                    event_node_id(ref),
                    key=trigger.path,
                    relation=WiringEdgeType.TRIGGERS.value,
                    path=trigger.path,
                )

        for event_id, action in events.items():
            self._add_event_edges(graph, event_id, action, group_ids, events)

        logger.info(
            "[GroupsAndEventsBuilder] '%s' 构建完成: %d nodes, %d edges",
            entity_model.id,
            graph.number_of_nodes(),
            graph.number_of_edges(),
        )
        return graph

    @staticmethod
    def _add_event_edges(
        graph: nx.MultiDiGraph,
        event_id: str,
        action: ActionModel,
        group_ids: set,
        events: dict,
    ) -> None:
        source = event_node_id(event_id)
        for potential in action.potential_actions():
            leaf = potential.action
            for relation, groups in (
                (WiringEdgeType.ADDS, leaf.add_groups),
                (WiringEdgeType.REMOVES, leaf.remove_groups),
            ):
                for group_id in groups or []:
                    if group_id not in group_ids:
                        continue
                    key = f"{relation.value}:{group_id}"
                    if graph.has_edge(source, component_set_node_id(group_id), key):
                        continue
                    graph.add_edge(
                        source,
                        component_set_node_id(group_id),
                        key=key,
                        relation=relation.value,
                        description=potential.condition_description,
                    )

            fired = leaf.trigger
            if fired and fired in events:
                key = f"{WiringEdgeType.FIRES.value}:{fired}"
                if not graph.has_edge(source, event_node_id(fired), key):
                    graph.add_edge(
                        source,
                        event_node_id(fired),
                        key=key,
                        relation=WiringEdgeType.FIRES.value,
                        description=potential.condition_description,
                    )
