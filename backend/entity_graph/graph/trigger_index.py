"""
TriggerIndex -- 组件 schema 驱动的事件引用发现

对一个组件集（基础实体或合并后的有效组件集）中的每个组件:
  1. 按组件 id 推导表单 id，异步加载字段 schema（缺失则静默跳过）
  2. 递归遍历 schema 字段:
       object / objectArray / keyedObjectCollection 且有子表单 → 进入对应的嵌套数据
       minecraftEventReference                → 值本身就是事件 id
       minecraftEventTrigger                  → 值为 {event: ...} 或字符串
       minecraftEventTriggerArray             → 每个数组元素一个 descriptor
  3. 每个事件字段输出一个 TriggerDescriptor；字段未赋值时 reference_event_id=None

base-only 组件（默认 minecraft:genetics）只在 include_base_only_components=True 时参与扫描。

schema 是有限且不自引用的，递归天然有界，不需要额外的环检测。
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from entity_graph.config import settings
from entity_graph.graph.schema_provider import FormSchemaProvider, form_id_for_component
from entity_graph.models.entity import ComponentSet
from entity_graph.models.form import FieldDataType, FieldDefinition, FormDefinition
from entity_graph.models.state import TriggerDescriptor

logger = logging.getLogger(__name__)


def _reference_of(value: Any) -> Optional[str]:
    """字段值 → 被引用的事件 id。"""
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        event = value.get("event")
        if isinstance(event, str) and event:
            return event
    return None


class TriggerIndex:
    """扫描组件集，产出 TriggerDescriptor 列表。

    Usage::

        index = TriggerIndex(provider)
        triggers = await index.get_triggers(entity_model, include_base_only_components=True)
    """

    def __init__(
        self,
        schema_provider: FormSchemaProvider,
        domain: Optional[str] = None,
        base_only_component_id: Optional[str] = None,
    ) -> None:
        self.schema_provider = schema_provider
        self.domain = domain or settings.form_domain
        self.base_only_component_id = (
            base_only_component_id
            if base_only_component_id is not None
            else settings.base_only_component_id
        )

    async def get_triggers(
        self,
        component_set: ComponentSet,
        include_base_only_components: bool,
    ) -> List[TriggerDescriptor]:
        component_ids = [
            cid for cid in component_set.get_component_ids()
            if self._should_scan(cid, include_base_only_components)
        ]

        # 并行取 schema，按组件顺序串行遍历
        schemas = await asyncio.gather(*(
            self.schema_provider.load_schema(self.domain, form_id_for_component(cid))
            for cid in component_ids
        ))

        results: List[TriggerDescriptor] = []
        for component_id, schema in zip(component_ids, schemas):
            if schema is None:
                logger.debug(
                    "[TriggerIndex] 组件 '%s' 无 schema，跳过", component_id
                )
                continue
            data = component_set.get_component(component_id)
            await self._walk_form(
                schema,
                data if isinstance(data, dict) else None,
                component_id,
                component_id,
                results,
            )

        return results

    def _should_scan(self, component_id: str, include_base_only: bool) -> bool:
        if component_id == self.base_only_component_id and not include_base_only:
            logger.debug(
                "[TriggerIndex] base-only 组件 '%s' 不参与非基础状态扫描",
                component_id,
            )
            return False
        return True

    async def _resolve_sub_form(self, field: FieldDefinition) -> Optional[FormDefinition]:
        if field.sub_form is not None:
            return field.sub_form
        if field.sub_form_id:
            return await self.schema_provider.load_schema(self.domain, field.sub_form_id)
        return None

    async def _walk_form(
        self,
        form: FormDefinition,
        data: Optional[Dict[str, Any]],
        path: str,
        component_id: str,
        results: List[TriggerDescriptor],
    ) -> None:
        for field in form.fields:
            value = data.get(field.id) if data is not None else None
            field_path = f"{path}.{field.id}"

            if field.is_nested:
                await self._walk_nested(field, value, field_path, component_id, results)
            elif field.is_event_field:
                self._emit_event_field(field, value, field_path, component_id, results)

    async def _walk_nested(
        self,
        field: FieldDefinition,
        value: Any,
        path: str,
        component_id: str,
        results: List[TriggerDescriptor],
    ) -> None:
        sub_form = await self._resolve_sub_form(field)
        if sub_form is None:
            return

        if field.data_type == FieldDataType.OBJECT:
            await self._walk_form(
                sub_form,
                value if isinstance(value, dict) else None,
                path,
                component_id,
                results,
            )
        elif field.data_type == FieldDataType.OBJECT_ARRAY:
            if not isinstance(value, list):
                return
            for i, entry in enumerate(value):
                if isinstance(entry, dict):
                    await self._walk_form(sub_form, entry, f"{path}[{i}]", component_id, results)
        elif field.data_type == FieldDataType.KEYED_OBJECT_COLLECTION:
            if not isinstance(value, dict):
                return
            for key, entry in value.items():
                if isinstance(entry, dict):
                    await self._walk_form(sub_form, entry, f"{path}.{key}", component_id, results)

    def _emit_event_field(
        self,
        field: FieldDefinition,
        value: Any,
        path: str,
        component_id: str,
        results: List[TriggerDescriptor],
    ) -> None:
        if field.data_type == FieldDataType.MINECRAFT_EVENT_TRIGGER_ARRAY and isinstance(value, list):
            if not value:
                results.append(TriggerDescriptor(path=path, component_id=component_id))
            for i, entry in enumerate(value):
                results.append(TriggerDescriptor(
                    path=f"{path}[{i}]",
                    reference_event_id=_reference_of(entry),
                    component_id=component_id,
                ))
            return

        results.append(TriggerDescriptor(
            path=path,
            reference_event_id=_reference_of(value),
            component_id=component_id,
        ))


def index_by_event(triggers: List[TriggerDescriptor]) -> Dict[str, TriggerDescriptor]:
    """按 reference_event_id 建索引；未赋值的 descriptor 不入索引。"""
    return {t.reference_event_id: t for t in triggers if t.reference_event_id}
