"""
Entity State Graph Package -- 实体行为状态图

EntityModel       实体定义只读访问 + 有效组件计算
FormSchemaProvider 组件表单 schema 异步查找（内存 / 文件 / HTTP）
TriggerIndex      schema 驱动的事件引用发现
ActionModel       事件 payload 包装 + sequence/randomize 展平
StateGraphBuilder 带记忆的状态图展开 + 两轮 likely 剪枝
GroupsAndEventsBuilder 组件组 / 事件接线图
export            networkx / dict 导出
"""
from entity_graph.graph.entity_model import EntityModel

from entity_graph.graph.schema_provider import (
    FormSchemaProvider,
    InMemoryFormSchemaProvider,
    FileFormSchemaProvider,
    HttpFormSchemaProvider,
    form_id_for_component,
)

from entity_graph.graph.filter_summary import describe_filter, get_human_summary

from entity_graph.graph.action_model import ActionModel

from entity_graph.graph.trigger_index import TriggerIndex, index_by_event

from entity_graph.graph.state_builder import StateGraphBuilder, make_state_id

from entity_graph.graph.groups_events import (
    GroupsAndEventsBuilder,
    WiringEdgeType,
    WiringNodeType,
    component_set_node_id,
    event_node_id,
)

from entity_graph.graph.export import (
    StateRecord,
    TransitionRecord,
    graph_stats,
    states_to_dict,
    states_to_networkx,
)

__all__ = [
    # Entity
    "EntityModel",
    # Schema lookup
    "FormSchemaProvider",
    "InMemoryFormSchemaProvider",
    "FileFormSchemaProvider",
    "HttpFormSchemaProvider",
    "form_id_for_component",
    # Actions
    "ActionModel",
    "describe_filter",
    "get_human_summary",
    # Triggers
    "TriggerIndex",
    "index_by_event",
    # Builder
    "StateGraphBuilder",
    "make_state_id",
    # Wiring graph
    "GroupsAndEventsBuilder",
    "WiringEdgeType",
    "WiringNodeType",
    "component_set_node_id",
    "event_node_id",
    # Export
    "StateRecord",
    "TransitionRecord",
    "states_to_networkx",
    "states_to_dict",
    "graph_stats",
]
