"""
数据模型包
"""
from .form import (
    EVENT_FIELD_TYPES,
    NESTED_FIELD_TYPES,
    FieldDataType,
    FieldDefinition,
    FormDefinition,
)
from .entity import (
    ComponentGroup,
    ComponentSet,
    EntityDefinition,
    EntityDefinitionError,
    EventWrapper,
    add_token,
    apply_mutations,
    is_add_token,
    join_mutations,
    remove_token,
    strip_group,
    token_group_id,
)
from .action import (
    ActionNode,
    ActionNodeKind,
    LeafAction,
    RandomizeActionSet,
    SequenceActionSet,
    parse_action_node,
)
from .state import (
    EntityState,
    PotentialAction,
    StateTransition,
    TriggerDescriptor,
)

__all__ = [
    # Form schema
    "FieldDataType",
    "FieldDefinition",
    "FormDefinition",
    "EVENT_FIELD_TYPES",
    "NESTED_FIELD_TYPES",
    # Entity
    "ComponentSet",
    "ComponentGroup",
    "EntityDefinition",
    "EntityDefinitionError",
    "EventWrapper",
    # Mutation tokens
    "add_token",
    "remove_token",
    "token_group_id",
    "is_add_token",
    "join_mutations",
    "strip_group",
    "apply_mutations",
    # Actions
    "ActionNode",
    "ActionNodeKind",
    "LeafAction",
    "SequenceActionSet",
    "RandomizeActionSet",
    "parse_action_node",
    # State graph
    "TriggerDescriptor",
    "PotentialAction",
    "EntityState",
    "StateTransition",
]
