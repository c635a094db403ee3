from tree_sitter import Node

from resolver_status.core.ast import node_text
from resolver_status.models import EnvironmentConfig

ENVIRONMENT_NAMES = frozenset({"local", "dev", "stage", "prod"})


def parse_environment_config(node: Node | None) -> EnvironmentConfig:
    """Read an ``{ dev: true, prod: false }`` literal into an EnvironmentConfig.

    The check is purely syntactic: a flag is true only when its value is the
    literal ``true``. Anything else, ``!false`` or a variable included, is false.
    A node that is not an object literal gives an empty config.
    """
    if node is None or node.type != "object":
        return EnvironmentConfig()

    flags: dict[str, bool] = {}
    for prop in node.named_children:
        if prop.type != "pair":
            continue
        key = prop.child_by_field_name("key")
        value = prop.child_by_field_name("value")
        if key is None or key.type != "property_identifier":
            continue
        env_name = node_text(key)
        if env_name in ENVIRONMENT_NAMES:
            flags[env_name] = node_text(value) == "true"
    return EnvironmentConfig(**flags)
