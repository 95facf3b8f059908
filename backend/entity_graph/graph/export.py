"""
State Graph Export

把 get_states() 的结果交给渲染层:
  - states_to_networkx(): nx.MultiDiGraph（可选只保留 likely 部分，即图表默认视图）
  - states_to_dict():     JSON 可序列化快照 {states: [...], transitions: [...]}
  - graph_stats():        数量统计

纯转换，不修改输入的状态对象。
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import networkx as nx
from pydantic import BaseModel, Field

from entity_graph.models.state import EntityState


# =============================================================================
# Records
# =============================================================================


class StateRecord(BaseModel):
    id: str
    title: str
    is_likely: bool
    mutation_list: List[str] = Field(default_factory=list)


class TransitionRecord(BaseModel):
    source: str
    target: Optional[str] = None
    trigger_event_id: str
    title: str
    is_likely: bool
    description: Optional[str] = None


# =============================================================================
# networkx
# =============================================================================


def states_to_networkx(
    states: Dict[str, EntityState],
    likely_only: bool = False,
) -> nx.MultiDiGraph:
    """状态表 → MultiDiGraph。

    边 key 为 "<eventId>#<n>"（同一对状态之间同一事件可能有多个叶子动作）。
    没有 target 的转移跳过。likely_only=True 时只保留 likely 状态和两端都 likely 的 likely 边。
    """
    graph = nx.MultiDiGraph()

    for state in states.values():
        if likely_only and not state.is_likely:
            continue
        graph.add_node(
            state.id,
            title=state.title,
            is_likely=state.is_likely,
            mutation_list=list(state.mutation_list),
        )

    for state in states.values():
        counters: Dict[tuple, int] = {}
        for conn in state.outbound_connections:
            if conn.target is None:
                continue
            if conn.source.id not in graph or conn.target.id not in graph:
                continue
            if likely_only and not conn.is_likely:
                continue
            counter_key = (conn.target.id, conn.trigger_event_id)
            n = counters.get(counter_key, 0)
            counters[counter_key] = n + 1
            graph.add_edge(
                conn.source.id,
                conn.target.id,
                key=f"{conn.trigger_event_id}#{n}",
                trigger_event_id=conn.trigger_event_id,
                title=conn.title,
                is_likely=conn.is_likely,
                description=conn.description,
            )

    return graph


# =============================================================================
# dict
# =============================================================================


def states_to_dict(states: Dict[str, EntityState]) -> Dict[str, Any]:
    """状态表 → JSON 可序列化 dict（保持插入顺序）。"""
    state_records = [
        StateRecord(
            id=s.id,
            title=s.title,
            is_likely=s.is_likely,
            mutation_list=list(s.mutation_list),
        )
        for s in states.values()
    ]
    transition_records = [
        TransitionRecord(
            source=conn.source.id,
            target=conn.target.id if conn.target is not None else None,
            trigger_event_id=conn.trigger_event_id,
            title=conn.title,
            is_likely=conn.is_likely,
            description=conn.description,
        )
        for s in states.values()
        for conn in s.outbound_connections
    ]
    return {
        "states": [r.model_dump() for r in state_records],
        "transitions": [r.model_dump() for r in transition_records],
    }


def graph_stats(states: Dict[str, EntityState]) -> Dict[str, int]:
    transitions = [c for s in states.values() for c in s.outbound_connections]
    return {
        "state_count": len(states),
        "likely_state_count": sum(1 for s in states.values() if s.is_likely),
        "transition_count": len(transitions),
        "likely_transition_count": sum(1 for c in transitions if c.is_likely),
    }
