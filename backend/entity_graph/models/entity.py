"""
Entity Definition Models

实体定义 JSON 的只读模型 + 组件组变更 token 工具。

实体文档结构（行为包格式）::

    {
      "format_version": "1.20.0",
      "minecraft:entity": {
        "description": {"identifier": "test:mob"},
        "components": {"minecraft:health": {...}, ...},
        "component_groups": {"cg_baby": {"minecraft:is_baby": {}}, ...},
        "events": {"evt_grow_up": {"remove": {"component_groups": ["cg_baby"]}}, ...}
      }
    }

=== Mutation token ===

  "+groupId" — 相对基础实体添加组件组
  "-groupId" — 相对基础实体移除组件组

Mutation list 不变量: 同一个 group id 至多出现一次。
写入新 token 前先剥离该 group 的旧 token（last-applied wins）。
两个 list 的状态等价性按 "|".join(tokens) 判断（插入顺序，不排序）。
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

ENTITY_ROOT_KEY = "minecraft:entity"

ADD_PREFIX = "+"
REMOVE_PREFIX = "-"
MUTATION_SEPARATOR = "|"


class EntityDefinitionError(ValueError):
    """实体文档缺少 description / identifier。"""


# =============================================================================
# Component sets
# =============================================================================


class ComponentSet(BaseModel):
    """一组组件 {component_id: component_data}。

    基础实体、组件组、合并后的有效组件集都用此模型表示。
    """
    model_config = ConfigDict(frozen=True)

    id: str
    components: Dict[str, Any] = Field(default_factory=dict)

    def get_component_ids(self) -> List[str]:
        return list(self.components.keys())

    def get_component(self, component_id: str) -> Any:
        return self.components.get(component_id)

    def has_component(self, component_id: str) -> bool:
        return component_id in self.components


class ComponentGroup(ComponentSet):
    """具名组件组，定义后不可变，按 id 引用。"""


class EventWrapper(BaseModel):
    """事件表中的一项: {id, event}，event 为原始 action / action set JSON。"""
    id: str
    event: Any = None


class EntityDefinition(BaseModel):
    """实体定义文档（行为包 minecraft:entity 内层对象）。"""
    model_config = ConfigDict(extra="ignore")

    identifier: str
    format_version: Optional[str] = None
    components: Dict[str, Any] = Field(default_factory=dict)
    component_groups: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    events: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "EntityDefinition":
        """接受完整行为包 wrapper 或内层对象。"""
        if not isinstance(data, dict):
            raise EntityDefinitionError("实体文档必须是 JSON object")

        format_version = data.get("format_version")
        inner = data.get(ENTITY_ROOT_KEY, data)
        if not isinstance(inner, dict):
            raise EntityDefinitionError(f"'{ENTITY_ROOT_KEY}' 必须是 JSON object")

        description = inner.get("description")
        identifier = None
        if isinstance(description, dict):
            identifier = description.get("identifier")
        if not identifier:
            identifier = inner.get("identifier")
        if not identifier or not isinstance(identifier, str):
            raise EntityDefinitionError("实体文档缺少 description.identifier")

        return cls(
            identifier=identifier,
            format_version=format_version if isinstance(format_version, str) else None,
            components=_as_dict(inner.get("components")),
            component_groups={
                k: v for k, v in _as_dict(inner.get("component_groups")).items()
                if isinstance(v, dict)
            },
            events=_as_dict(inner.get("events")),
        )


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


# =============================================================================
# Mutation tokens
# =============================================================================


def add_token(group_id: str) -> str:
    return ADD_PREFIX + group_id


def remove_token(group_id: str) -> str:
    return REMOVE_PREFIX + group_id


def token_group_id(token: str) -> str:
    """'+cg_baby' → 'cg_baby'"""
    return token[1:]


def is_add_token(token: str) -> bool:
    return token.startswith(ADD_PREFIX)


def join_mutations(tokens: Iterable[str]) -> str:
    """Mutation list 的规范 join 串，即状态等价性的判断依据。"""
    return MUTATION_SEPARATOR.join(tokens)


def strip_group(tokens: List[str], group_id: str) -> List[str]:
    """返回去掉该 group 所有 token 后的新列表。"""
    return [t for t in tokens if token_group_id(t) != group_id]


def apply_mutations(
    tokens: List[str],
    remove_groups: Optional[Iterable[str]] = None,
    add_groups: Optional[Iterable[str]] = None,
) -> List[str]:
    """复制 tokens，先应用 remove，再应用 add。

    同一事件既移除又添加同一个 group 时，add 后写入，最终为 "+group"。
    """
    result = list(tokens)
    for group_id in remove_groups or []:
        result = strip_group(result, group_id)
        result.append(remove_token(group_id))
    for group_id in add_groups or []:
        result = strip_group(result, group_id)
        result.append(add_token(group_id))
    return result
