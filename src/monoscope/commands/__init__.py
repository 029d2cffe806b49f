"""monoscope commands."""

from monoscope.commands.base import CommandContext, SyncCommand
from monoscope.commands.changed import (
    ChangedCommand,
    ChangedOptions,
    ChangedPackage,
    ChangedResult,
    get_changed_packages,
    handle_changed_command,
)
from monoscope.commands.list import (
    ListCommand,
    ListFormat,
    ListOptions,
    ListResult,
    PackageInfo,
    handle_list_command,
    list_packages,
)

__all__ = [
    # Base
    "CommandContext",
    "SyncCommand",
    # Changed
    "ChangedCommand",
    "ChangedOptions",
    "ChangedPackage",
    "ChangedResult",
    "get_changed_packages",
    "handle_changed_command",
    # List
    "ListCommand",
    "ListFormat",
    "ListOptions",
    "ListResult",
    "PackageInfo",
    "handle_list_command",
    "list_packages",
]
