"""Built-in task calls and the registry that exposes them."""

from opsbot.calls.add_issue_to_project import add_issue_to_github_project_v2
from opsbot.calls.print_to_console import print_to_console
from opsbot.calls.update_project_item_field import update_github_project_v2_item_field
from opsbot.framework.registry import TaskRegistry, TaskRegistryBuilder

BUILTIN_CALLS = {
    "print-to-console": print_to_console,
    "add-issue-to-github-project-v2": add_issue_to_github_project_v2,
    "update-github-project-v2-item-field": update_github_project_v2_item_field,
}


def register_builtin_calls(builder: TaskRegistryBuilder) -> TaskRegistryBuilder:
    """Add every built-in call to ``builder``."""
    for name, call in BUILTIN_CALLS.items():
        builder.add(name, call)
    return builder


def default_registry() -> TaskRegistry:
    """Registry holding exactly the built-in calls."""
    return register_builtin_calls(TaskRegistryBuilder()).build()


__all__ = [
    "BUILTIN_CALLS",
    "register_builtin_calls",
    "default_registry",
    "add_issue_to_github_project_v2",
    "print_to_console",
    "update_github_project_v2_item_field",
]
