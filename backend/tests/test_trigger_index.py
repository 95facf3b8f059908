"""
Tests for TriggerIndex.

测试 schema 驱动的事件引用发现:
  - 三种事件字段类型
  - 三种嵌套字段类型 + subFormId 解析
  - base-only 组件过滤
  - 无 schema 的组件跳过
"""
from unittest.mock import AsyncMock

import pytest

from entity_graph.graph.schema_provider import InMemoryFormSchemaProvider
from entity_graph.graph.trigger_index import TriggerIndex, index_by_event
from entity_graph.models.entity import ComponentSet
from entity_graph.models.state import TriggerDescriptor


NESTED_FORMS = {
    "entity": {
        "minecraft_damage_sensor": {
            "fields": [
                {
                    "id": "triggers",
                    "dataType": "objectArray",
                    "subForm": {"fields": [
                        {"id": "on_damage", "dataType": "minecraftEventTrigger"},
                        {"id": "cause", "dataType": "string"},
                    ]},
                },
            ],
        },
        "minecraft_ageable": {
            "fields": [
                {
                    "id": "grow_up",
                    "dataType": "object",
                    "subForm": {"fields": [{"id": "event", "dataType": "minecraftEventReference"}]},
                },
            ],
        },
        "minecraft_behavior_states": {
            "fields": [
                {"id": "states", "dataType": "keyedObjectCollection", "subFormId": "state_entry"},
            ],
        },
        "state_entry": {
            "fields": [{"id": "on_enter", "dataType": "minecraftEventTrigger"}],
        },
        "minecraft_timer": {
            "fields": [{"id": "time_down_events", "dataType": "minecraftEventTriggerArray"}],
        },
        "minecraft_genetics": {
            "fields": [{"id": "birth_event", "dataType": "minecraftEventTrigger"}],
        },
    },
}


@pytest.fixture
def index() -> TriggerIndex:
    return TriggerIndex(
        InMemoryFormSchemaProvider(NESTED_FORMS),
        domain="entity",
        base_only_component_id="minecraft:genetics",
    )


def _refs(triggers):
    return [(t.path, t.reference_event_id) for t in triggers]


class TestEventFields:
    @pytest.mark.asyncio
    async def test_reference_field(self, trigger_index, scenario_entity):
        triggers = await trigger_index.get_triggers(scenario_entity, False)
        assert triggers == [
            TriggerDescriptor(
                path="minecraft:test_trigger.on_anger",
                reference_event_id="evt_anger",
                component_id="minecraft:test_trigger",
            )
        ]

    @pytest.mark.asyncio
    async def test_unassigned_field_has_no_reference(self, trigger_index):
        component_set = ComponentSet(id="cs", components={"minecraft:test_trigger": {}})
        triggers = await trigger_index.get_triggers(component_set, False)
        assert _refs(triggers) == [("minecraft:test_trigger.on_anger", None)]
        assert index_by_event(triggers) == {}

    @pytest.mark.asyncio
    async def test_trigger_array(self, index):
        component_set = ComponentSet(id="cs", components={
            "minecraft:timer": {"time_down_events": [{"event": "evt_a"}, "evt_b", {"target": "self"}]},
        })
        triggers = await index.get_triggers(component_set, False)
        assert _refs(triggers) == [
            ("minecraft:timer.time_down_events[0]", "evt_a"),
            ("minecraft:timer.time_down_events[1]", "evt_b"),
            ("minecraft:timer.time_down_events[2]", None),
        ]

    @pytest.mark.asyncio
    async def test_empty_trigger_array(self, index):
        component_set = ComponentSet(id="cs", components={"minecraft:timer": {"time_down_events": []}})
        triggers = await index.get_triggers(component_set, False)
        assert _refs(triggers) == [("minecraft:timer.time_down_events", None)]


class TestNestedFields:
    @pytest.mark.asyncio
    async def test_object_array(self, index):
        component_set = ComponentSet(id="cs", components={
            "minecraft:damage_sensor": {"triggers": [
                {"cause": "fall"},
                {"on_damage": {"event": "evt_hurt", "target": "self"}},
            ]},
        })
        triggers = await index.get_triggers(component_set, False)
        assert _refs(triggers) == [
            ("minecraft:damage_sensor.triggers[0].on_damage", None),
            ("minecraft:damage_sensor.triggers[1].on_damage", "evt_hurt"),
        ]
        assert {t.component_id for t in triggers} == {"minecraft:damage_sensor"}

    @pytest.mark.asyncio
    async def test_object(self, index):
        component_set = ComponentSet(id="cs", components={
            "minecraft:ageable": {"grow_up": {"event": "evt_grow_up"}},
        })
        triggers = await index.get_triggers(component_set, False)
        assert _refs(triggers) == [("minecraft:ageable.grow_up.event", "evt_grow_up")]

    @pytest.mark.asyncio
    async def test_object_without_data_still_reports_field(self, index):
        component_set = ComponentSet(id="cs", components={"minecraft:ageable": {}})
        triggers = await index.get_triggers(component_set, False)
        assert _refs(triggers) == [("minecraft:ageable.grow_up.event", None)]

    @pytest.mark.asyncio
    async def test_keyed_collection_with_sub_form_id(self, index):
        component_set = ComponentSet(id="cs", components={
            "minecraft:behavior.states": {"states": {
                "idle": {"on_enter": {"event": "evt_idle"}},
                "alert": {"on_enter": "evt_alert"},
            }},
        })
        triggers = await index.get_triggers(component_set, False)
        assert _refs(triggers) == [
            ("minecraft:behavior.states.states.idle.on_enter", "evt_idle"),
            ("minecraft:behavior.states.states.alert.on_enter", "evt_alert"),
        ]


class TestComponentSelection:
    @pytest.mark.asyncio
    async def test_base_only_component_filtered(self, index):
        component_set = ComponentSet(id="cs", components={
            "minecraft:genetics": {"birth_event": {"event": "evt_born"}},
        })
        assert await index.get_triggers(component_set, False) == []
        included = await index.get_triggers(component_set, True)
        assert _refs(included) == [("minecraft:genetics.birth_event", "evt_born")]

    @pytest.mark.asyncio
    async def test_component_without_schema_skipped(self, index):
        component_set = ComponentSet(id="cs", components={
            "minecraft:unknown": {"on_anything": "evt_x"},
            "minecraft:ageable": {"grow_up": {"event": "evt_grow_up"}},
        })
        triggers = await index.get_triggers(component_set, False)
        assert [t.component_id for t in triggers] == ["minecraft:ageable"]

    @pytest.mark.asyncio
    async def test_component_order_preserved(self, index):
        component_set = ComponentSet(id="cs", components={
            "minecraft:timer": {"time_down_events": [{"event": "evt_t"}]},
            "minecraft:ageable": {"grow_up": {"event": "evt_g"}},
        })
        triggers = await index.get_triggers(component_set, False)
        assert [t.reference_event_id for t in triggers] == ["evt_t", "evt_g"]


class TestIndexByEvent:
    def test_skips_unassigned(self):
        triggers = [
            TriggerDescriptor(path="a", reference_event_id="evt_a"),
            TriggerDescriptor(path="b"),
        ]
        assert list(index_by_event(triggers)) == ["evt_a"]


class TestSchemaLookups:
    @pytest.mark.asyncio
    async def test_form_ids_and_domain(self):
        provider = AsyncMock()
        provider.load_schema.return_value = None
        index = TriggerIndex(provider, domain="entity", base_only_component_id="minecraft:genetics")

        component_set = ComponentSet(id="cs", components={
            "minecraft:behavior.float": {},
            "minecraft:genetics": {},
        })
        assert await index.get_triggers(component_set, False) == []
        provider.load_schema.assert_awaited_once_with("entity", "minecraft_behavior_float")
