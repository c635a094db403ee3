"""Classify one resolver declaration by name convention and environment flags.

The classification is a naming heuristic, not type inference: a resolver named
``Admin.UPDATE_WIDGET_MUTATION`` is an admin mutation because its constant says
so and because ``Admin`` was imported from the admin types namespace.
"""

from tree_sitter import Node

from resolver_status.core.ast import node_text
from resolver_status.core.environments import parse_environment_config
from resolver_status.core.imports import ImportTable
from resolver_status.models import (
    DeploymentStatus,
    EnvironmentConfig,
    ResolverCategory,
    ResolverOperation,
    ResolverRecord,
)

ADMIN_NAMESPACE_MARKER = "@adminTypes"

# Checked in this order; the first marker contained in the name wins.
OPERATION_MARKERS: tuple[tuple[str, ResolverOperation], ...] = (
    ("MUTATION", "mutation"),
    ("QUERY", "query"),
    ("SUBSCRIPTION", "subscription"),
    ("TASK", "task"),
)


def determine_operation(full_name: str) -> ResolverOperation:
    for marker, operation in OPERATION_MARKERS:
        if marker in full_name:
            return operation
    return "unknown"


def determine_status(
    environments: EnvironmentConfig | None,
    admin_environments: EnvironmentConfig | None = None,
) -> DeploymentStatus:
    """Derive the deployment status; ``admin_environments`` shadows ``environments``.

    A resolver without any recognized flag is assumed to be live in prod.
    """
    envs = admin_environments if admin_environments is not None else environments
    if envs is None or not envs.recognized_fields():
        return DeploymentStatus.PROD
    if envs.prod:
        return DeploymentStatus.PROD
    if envs.stage:
        return DeploymentStatus.STAGE
    if envs.dev:
        return DeploymentStatus.DEV
    if envs.local:
        return DeploymentStatus.CODE_COMPLETE
    return DeploymentStatus.IN_PROGRESS


def _root_identifier(expr: Node) -> str:
    current = expr
    while current.type == "member_expression":
        obj = current.child_by_field_name("object")
        if obj is None:
            break
        current = obj
    return node_text(current)


def _string_value(node: Node) -> str:
    text = node_text(node)
    return text[1:-1] if len(text) >= 2 else ""


def classify_resolver(
    obj: Node,
    imports: ImportTable,
    admin_marker: str = ADMIN_NAMESPACE_MARKER,
) -> ResolverRecord | None:
    """Build a ResolverRecord from one object literal, or None if it has no usable name."""
    name = ""
    category: ResolverCategory = "unknown"
    operation: ResolverOperation = "unknown"
    environments: EnvironmentConfig | None = None
    admin_environments: EnvironmentConfig | None = None
    is_scheduled = False

    for prop in obj.named_children:
        if prop.type != "pair":
            continue
        key = prop.child_by_field_name("key")
        value = prop.child_by_field_name("value")
        if key is None or key.type != "property_identifier" or value is None:
            continue

        key_name = node_text(key)
        if key_name == "name":
            if value.type == "member_expression":
                full_name = node_text(value)
                name = node_text(value.child_by_field_name("property"))
                import_path = imports.get(_root_identifier(value), "")
                category = "admin" if admin_marker in import_path else "api"
                operation = determine_operation(full_name)
            elif value.type == "string":
                name = _string_value(value)
        elif key_name == "environments":
            environments = parse_environment_config(value)
        elif key_name == "adminEnvironments":
            admin_environments = parse_environment_config(value)
        elif key_name == "scheduleInfo":
            is_scheduled = True

    if is_scheduled:
        category = "scheduled"
        operation = "task"

    if not name:
        return None

    return ResolverRecord(
        name=name,
        category=category,
        operation=operation,
        status=determine_status(environments, admin_environments),
    )
