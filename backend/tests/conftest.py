"""
共享 fixtures: 测试实体 + 内存表单 schema。

实体 test:mob:
  组件组  cg_baby, cg_angry
  事件    evt_grow_up (remove cg_baby), evt_anger (add cg_angry), evt_calm (remove cg_angry)
  基础组件 minecraft:test_trigger.on_anger 引用 evt_anger
"""
import pytest

from entity_graph.graph.entity_model import EntityModel
from entity_graph.graph.schema_provider import InMemoryFormSchemaProvider
from entity_graph.graph.trigger_index import TriggerIndex


def make_entity_json(
    components=None,
    component_groups=None,
    events=None,
    identifier="test:mob",
) -> dict:
    return {
        "format_version": "1.20.0",
        "minecraft:entity": {
            "description": {"identifier": identifier},
            "components": components or {},
            "component_groups": component_groups or {},
            "events": events or {},
        },
    }


def reference_form(field_id: str) -> dict:
    """只有一个 minecraftEventReference 字段的表单。"""
    return {"id": field_id, "fields": [{"id": field_id, "dataType": "minecraftEventReference"}]}


FORMS = {
    "entity": {
        "minecraft_test_trigger": reference_form("on_anger"),
        "minecraft_test_calm": reference_form("on_calm"),
        "minecraft_genetics": {
            "fields": [{"id": "birth_event", "dataType": "minecraftEventTrigger"}],
        },
        "minecraft_health": {
            "fields": [{"id": "value", "dataType": "int"}],
        },
    },
}


SCENARIO_EVENTS = {
    "evt_grow_up": {"remove": {"component_groups": ["cg_baby"]}},
    "evt_anger": {"add": {"component_groups": ["cg_angry"]}},
    "evt_calm": {"remove": {"component_groups": ["cg_angry"]}},
}


@pytest.fixture
def schema_provider() -> InMemoryFormSchemaProvider:
    return InMemoryFormSchemaProvider(FORMS)


@pytest.fixture
def trigger_index(schema_provider) -> TriggerIndex:
    return TriggerIndex(schema_provider, domain="entity", base_only_component_id="minecraft:genetics")


@pytest.fixture
def scenario_entity() -> EntityModel:
    """三个事件，只有 evt_anger 被基础组件引用。"""
    return EntityModel.from_json(make_entity_json(
        components={
            "minecraft:health": {"value": 10},
            "minecraft:test_trigger": {"on_anger": "evt_anger"},
        },
        component_groups={
            "cg_baby": {"minecraft:is_baby": {}},
            "cg_angry": {"minecraft:angry": {}},
        },
        events=SCENARIO_EVENTS,
    ))


@pytest.fixture
def angry_calm_entity() -> EntityModel:
    """在 scenario 基础上，cg_angry 自带一个引用 evt_calm 的组件。"""
    return EntityModel.from_json(make_entity_json(
        components={
            "minecraft:health": {"value": 10},
            "minecraft:test_trigger": {"on_anger": "evt_anger"},
        },
        component_groups={
            "cg_baby": {"minecraft:is_baby": {}},
            "cg_angry": {
                "minecraft:angry": {},
                "minecraft:test_calm": {"on_calm": "evt_calm"},
            },
        },
        events=SCENARIO_EVENTS,
    ))
