"""
State Graph Models

状态图的内存结构。EntityState 与 StateTransition 互相引用（source/target），
用 dataclass 而非 pydantic，避免循环校验；序列化由 graph/export.py 负责。

生命周期: 只存在于一次 StateGraphBuilder.get_states() 调用中，不持久化。
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from entity_graph.graph.action_model import ActionModel


@dataclass(frozen=True)
class TriggerDescriptor:
    """从组件 schema 发现的事件引用点。

    path: 组件内字段路径，如 "minecraft:interact.interactions[0].on_interact"
    reference_event_id: 该字段当前引用的事件 id；字段未赋值时为 None
    """
    path: str
    reference_event_id: Optional[str] = None
    component_id: Optional[str] = None


@dataclass
class PotentialAction:
    """ActionModel.potential_actions() 的单项结果。"""
    condition_description: str
    action: "ActionModel"


@dataclass(eq=False)
class StateTransition:
    """事件触发的有向边: source --triggerEventId--> target。

    target 在同一次递归步骤中同步填充（新建或复用目标状态）。
    """
    source: "EntityState"
    trigger_event_id: str
    title: str
    is_likely: bool = False
    description: Optional[str] = None
    target: Optional["EntityState"] = None


@dataclass(eq=False)
class EntityState:
    """一个行为配置 = 基础实体 + 一组组件组增删。

    id 格式: "<componentSetId 或空串>|<mutation tokens 以 | 连接>"
    根状态 id 为 "|"。
    """
    id: str
    title: str
    mutation_list: List[str] = field(default_factory=list)
    is_likely: bool = False
    inbound_connections: List[StateTransition] = field(default_factory=list)
    outbound_connections: List[StateTransition] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return not self.mutation_list

    def attach_inbound(self, connection: StateTransition) -> None:
        """把 connection 指向本状态；likely 的入边会提升本状态为 likely。"""
        connection.target = self
        if connection.is_likely:
            self.is_likely = True
        self.inbound_connections.append(connection)
