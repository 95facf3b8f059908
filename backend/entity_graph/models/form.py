"""
Form Schema Models

组件表单 schema：描述一个组件 JSON 的字段结构。
状态图构建只关心其中两类信息:
  - 哪些字段是事件引用 (minecraftEventReference / minecraftEventTrigger / minecraftEventTriggerArray)
  - 哪些字段有嵌套子表单 (object / objectArray / keyedObjectCollection)，需要递归
其余字段类型原样保留，不做校验。
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FieldDataType(str, Enum):
    """表单字段数据类型（仅列出遍历逻辑会区分的类型）"""
    STRING = "string"
    NUMBER = "number"
    INT = "int"
    BOOLEAN = "boolean"
    STRING_ARRAY = "stringArray"
    OBJECT = "object"                                   # 嵌套子表单
    OBJECT_ARRAY = "objectArray"                        # 子表单数组
    KEYED_OBJECT_COLLECTION = "keyedObjectCollection"   # {key: 子表单}
    MINECRAFT_FILTER = "minecraftFilter"
    MINECRAFT_EVENT_REFERENCE = "minecraftEventReference"        # 值为事件 id 字符串
    MINECRAFT_EVENT_TRIGGER = "minecraftEventTrigger"            # 值为 {event, target, filters}
    MINECRAFT_EVENT_TRIGGER_ARRAY = "minecraftEventTriggerArray"  # 值为 trigger 对象数组
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "FieldDataType":
        return cls.UNKNOWN


# 会产生 TriggerDescriptor 的字段类型
EVENT_FIELD_TYPES = frozenset({
    FieldDataType.MINECRAFT_EVENT_REFERENCE,
    FieldDataType.MINECRAFT_EVENT_TRIGGER,
    FieldDataType.MINECRAFT_EVENT_TRIGGER_ARRAY,
})

# 需要向下递归的字段类型
NESTED_FIELD_TYPES = frozenset({
    FieldDataType.OBJECT,
    FieldDataType.OBJECT_ARRAY,
    FieldDataType.KEYED_OBJECT_COLLECTION,
})


class FieldDefinition(BaseModel):
    """表单中的单个字段"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    data_type: FieldDataType = Field(default=FieldDataType.UNKNOWN, alias="dataType")
    title: Optional[str] = None
    description: Optional[str] = None

    sub_form: Optional["FormDefinition"] = Field(default=None, alias="subForm")
    """内联子表单"""

    sub_form_id: Optional[str] = Field(default=None, alias="subFormId")
    """按 id 引用的子表单（由 schema provider 解析）"""

    @property
    def is_event_field(self) -> bool:
        return self.data_type in EVENT_FIELD_TYPES

    @property
    def is_nested(self) -> bool:
        return self.data_type in NESTED_FIELD_TYPES


class FormDefinition(BaseModel):
    """组件表单 schema"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    title: Optional[str] = None
    fields: List[FieldDefinition] = Field(default_factory=list)


FieldDefinition.model_rebuild()
