"""
StateGraphBuilder -- 实体行为状态图构建

从实体的组件组 (component groups) 和事件 (events) 推导可达的行为配置（状态）
以及事件触发的状态转移，并给每个状态/转移打上 "likely" 标记。

构建步骤:
  Step 1: setup   — 基础实体 trigger 扫描（含 base-only 组件）；每个事件包成 ActionModel
  Step 2: explore — 从根状态（空 mutation list）做带记忆的深度优先展开
  Step 3: prune 1 — 非 likely 状态的所有出边置为非 likely
  Step 4: prune 2 — 没有任何 likely 入边/出边的 likely 状态降级为非 likely
  Step 5: 返回完整状态表（非 likely 状态保留，由调用方决定是否显示）

=== 展开规则 ===

  state_id = "<componentSetId 或空串>|<mutation tokens 以 | 连接>"

  已存在 → 只挂入边（likely 入边提升目标为 likely），不重复展开
  新状态 → 计算有效组件 → 扫描 live triggers → 创建状态 (is_likely=False)
          → 挂入边 → 检查节点上限 → 对每个事件的每个改变组件组的叶子动作:
               new_list = copy(list); 先 remove 再 add（同组先剥离旧 token）
               new_list 与当前不同 → 建转移边 (likely = 该事件被当前状态的 live trigger 引用)
                                    → 进入 new_list 对应状态

  深度优先顺序与逐层递归完全一致，但用显式栈实现（每个栈帧是一个惰性的出边生成器），
  避免深链触发 Python 递归上限。

  节点上限 (默认 1024) 到达后不再创建新状态；此后的出边只允许连回已存在的状态，
  图被截断但内部一致（没有 target 为空的边）。

=== 已知行为（保持原样）===

  根状态初始 is_likely=False，只有 likely 入边才能提升。根状态没有天然入边，
  除非某个事件以 likely 转移回到根状态，否则根状态始终为非 likely。

  状态等价按插入顺序 join 判断，不排序：不同事件顺序到达的同一组合会是不同状态。
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from entity_graph.config import settings
from entity_graph.graph.action_model import ActionModel
from entity_graph.graph.entity_model import EntityModel
from entity_graph.graph.schema_provider import FormSchemaProvider
from entity_graph.graph.trigger_index import TriggerIndex, index_by_event
from entity_graph.models.entity import (
    ComponentSet,
    apply_mutations,
    is_add_token,
    join_mutations,
    token_group_id,
)
from entity_graph.models.state import EntityState, StateTransition, TriggerDescriptor
from entity_graph.utils.naming import humanify_name, humanify_name_remove_namespaces

logger = logging.getLogger(__name__)

STATE_ID_SEPARATOR = "|"

# 一条待进入的出边: (目标 mutation list, 已挂到 source 上的转移)
_Expansion = Tuple[List[str], StateTransition]


@dataclass
class StateBuildContext:
    """单次构建的可变上下文。"""
    entity_model: EntityModel
    max_states: int
    base_triggers: List[TriggerDescriptor] = field(default_factory=list)
    events_by_id: Dict[str, ActionModel] = field(default_factory=dict)
    states: Dict[str, EntityState] = field(default_factory=dict)
    truncated: bool = False

    @property
    def at_capacity(self) -> bool:
        return len(self.states) >= self.max_states


def make_state_id(
    component_set: ComponentSet,
    entity_model: EntityModel,
    mutation_list: List[str],
) -> str:
    prefix = "" if component_set is entity_model else component_set.id
    return prefix + STATE_ID_SEPARATOR + join_mutations(mutation_list)


class StateGraphBuilder:
    """实体行为状态图构建器。

    Usage::

        builder = StateGraphBuilder(FileFormSchemaProvider("./data/forms"))
        states = await builder.get_states(entity_model)
        likely = [s for s in states.values() if s.is_likely]
    """

    def __init__(
        self,
        schema_provider: Optional[FormSchemaProvider] = None,
        trigger_index: Optional[TriggerIndex] = None,
        max_states: Optional[int] = None,
    ) -> None:
        if trigger_index is None:
            if schema_provider is None:
                raise ValueError("需要 schema_provider 或 trigger_index")
            trigger_index = TriggerIndex(schema_provider)
        self.trigger_index = trigger_index
        self.max_states = max_states if max_states is not None else settings.max_states

    # =========================================================================
    # 入口
    # =========================================================================

    async def get_states(self, entity_model: EntityModel) -> Dict[str, EntityState]:
        """构建 entity_model 的状态图，返回 {state_id: EntityState}（插入顺序）。"""
        ctx = await self.explore(entity_model)
        self.prune(ctx.states)

        transition_count = sum(len(s.outbound_connections) for s in ctx.states.values())
        logger.info(
            "[StateGraphBuilder] '%s' 构建完成: %d states (%d likely), %d transitions",
            entity_model.id,
            len(ctx.states),
            sum(1 for s in ctx.states.values() if s.is_likely),
            transition_count,
        )
        return ctx.states

    async def explore(self, entity_model: EntityModel) -> StateBuildContext:
        """Step 1 + 2: 展开状态图，不剪枝（likely 标记为 trigger 匹配的原始结果）。"""
        ctx = StateBuildContext(entity_model=entity_model, max_states=self.max_states)

        ctx.base_triggers = await self.trigger_index.get_triggers(entity_model, True)
        for wrapper in entity_model.get_events():
            if wrapper.id and wrapper.event:
                ctx.events_by_id[wrapper.id] = ActionModel(wrapper.event)

        stack: List[Iterator[_Expansion]] = []
        root = await self._enter_state(ctx, entity_model, [])
        if root is not None:
            stack.append(root)

        while stack:
            step = next(stack[-1], None)
            if step is None:
                stack.pop()
                continue
            new_list, connection = step
            child = await self._enter_state(ctx, entity_model, new_list, connection)
            if child is not None:
                stack.append(child)

        if ctx.truncated:
            logger.warning(
                "[StateGraphBuilder] '%s' 达到状态上限 %d，状态图已截断",
                entity_model.id, ctx.max_states,
            )
        return ctx

    # =========================================================================
    # Step 2: explore
    # =========================================================================

    async def _enter_state(
        self,
        ctx: StateBuildContext,
        component_set: ComponentSet,
        mutation_list: List[str],
        inbound_connection: Optional[StateTransition] = None,
    ) -> Optional[Iterator[_Expansion]]:
        """进入一个状态。新状态返回其出边生成器；已存在或到达上限返回 None。"""
        entity_model = ctx.entity_model
        state_id = make_state_id(component_set, entity_model, mutation_list)

        existing = ctx.states.get(state_id)
        if existing is not None:
            if inbound_connection is not None and inbound_connection.source is not existing:
                existing.attach_inbound(inbound_connection)
            return None

        effective = entity_model.effective_components(mutation_list)
        triggers = await self.trigger_index.get_triggers(effective, len(mutation_list) == 0)

        state = EntityState(
            id=state_id,
            title=self._state_title(entity_model, mutation_list),
            mutation_list=mutation_list,
        )
        ctx.states[state_id] = state

        if inbound_connection is not None:
            state.attach_inbound(inbound_connection)

        if ctx.at_capacity:
            ctx.truncated = True
            return None

        return self._expansions(ctx, state, index_by_event(triggers))

    def _expansions(
        self,
        ctx: StateBuildContext,
        state: EntityState,
        triggers_by_event: Dict[str, TriggerDescriptor],
    ) -> Iterator[_Expansion]:
        """按事件顺序惰性产出 state 的出边；每条边在产出时才挂到 state 上。"""
        entity_model = ctx.entity_model
        current_key = join_mutations(state.mutation_list)

        for event_id, event_model in ctx.events_by_id.items():
            is_likely = event_id in triggers_by_event

            for potential in event_model.potential_actions():
                action = potential.action
                if not action.changes_groups:
                    continue

                # 只用叶子自身的 add/remove；组合节点上的顶层 add/remove 不参与
                new_list = apply_mutations(
                    state.mutation_list, action.remove_groups, action.add_groups
                )
                if join_mutations(new_list) == current_key:
                    continue

                # 上限已到: 只允许连回已存在的状态
                if (
                    ctx.at_capacity
                    and make_state_id(entity_model, entity_model, new_list) not in ctx.states
                ):
                    ctx.truncated = True
                    continue

                connection = StateTransition(
                    source=state,
                    trigger_event_id=event_id,
                    title=humanify_name(event_id),
                    is_likely=is_likely,
                    description=potential.condition_description,
                )
                state.outbound_connections.append(connection)
                yield new_list, connection

    def _state_title(self, entity_model: EntityModel, mutation_list: List[str]) -> str:
        """'Mob: +Cg Angry -Cg Baby'；找不到的组件组追加 ' (missing!)'。"""
        parts: List[str] = []
        for token in mutation_list:
            group_id = token_group_id(token)
            title = humanify_name_remove_namespaces(group_id)
            if entity_model.get_component_group(group_id) is None:
                title += " (missing!)"
            parts.append(("+" if is_add_token(token) else "-") + title)

        entity_title = humanify_name_remove_namespaces(entity_model.id)
        return f"{entity_title}: {' '.join(parts)}".strip()

    # =========================================================================
    # Step 3 + 4: prune
    # =========================================================================

    @classmethod
    def prune(cls, states: Dict[str, EntityState]) -> None:
        cls._prune_unlikely_sources(states)
        cls._demote_isolated_likely(states)

    @staticmethod
    def _prune_unlikely_sources(states: Dict[str, EntityState]) -> None:
        """非 likely 状态的出边不可能是 likely。"""
        for state in states.values():
            if not state.is_likely:
                for conn in state.outbound_connections:
                    conn.is_likely = False

    @staticmethod
    def _demote_isolated_likely(states: Dict[str, EntityState]) -> None:
        """没有任何 likely 边的 likely 状态视为噪声，降级。"""
        for state in states.values():
            if not state.is_likely:
                continue
            has_likely_edge = any(c.is_likely for c in state.outbound_connections) or any(
                c.is_likely for c in state.inbound_connections
            )
            if not has_likely_edge:
                state.is_likely = False
