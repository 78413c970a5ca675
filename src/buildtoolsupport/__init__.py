"""Portable build tool plugin support.

Lets a build tool plugin describe its commands portably and translates them
into the host build system's native commands, resolving executables and
repairing paths across operating systems.

Core Components:
    - commands: Executable and build command descriptions
    - planner: Resolution of executables into invocations (InvocationPlanner)
    - emitter: Translation into host commands (CommandEmitter)
    - locator: Executable search (ExecutableLocator)
    - paths: Platform path repair (repair, PlatformPath)
    - process: Synchronous process execution (run, run_process)
    - plugin: Plugin base class (BuildToolPlugin)
"""

from buildtoolsupport.commands import (
    BuildCommand,
    Command,
    Executable,
    File,
    HostBuildCommand,
    HostCommand,
    HostPrebuildCommand,
    Invocation,
    OnDemandCommand,
    Script,
    TargetInPackage,
    ToolchainCommand,
    UnconditionalCommand,
)
from buildtoolsupport.errors import (
    BuildToolError,
    ErrorCode,
    NonzeroExitError,
    ResolutionError,
    ScratchDirectoryError,
)

__all__ = [
    "BuildCommand",
    "BuildToolError",
    "Command",
    "ErrorCode",
    "Executable",
    "File",
    "HostBuildCommand",
    "HostCommand",
    "HostPrebuildCommand",
    "Invocation",
    "NonzeroExitError",
    "OnDemandCommand",
    "ResolutionError",
    "Script",
    "ScratchDirectoryError",
    "TargetInPackage",
    "ToolchainCommand",
    "UnconditionalCommand",
]


def __getattr__(name: str):
    """Lazy import for the heavier modules."""
    if name == "BuildToolPlugin":
        from buildtoolsupport import plugin

        return plugin.BuildToolPlugin
    if name == "CommandEmitter":
        from buildtoolsupport import emitter

        return emitter.CommandEmitter
    if name == "InvocationPlanner":
        from buildtoolsupport import planner

        return planner.InvocationPlanner
    if name == "ExecutableLocator":
        from buildtoolsupport import locator

        return locator.ExecutableLocator
    if name in ("PluginContext", "StaticPluginContext", "Package", "Target"):
        from buildtoolsupport import context

        return getattr(context, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
