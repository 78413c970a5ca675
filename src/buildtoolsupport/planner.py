"""Invocation planning.

Turns a portable ``Executable`` description into the concrete executable,
the arguments that must precede the caller's, and the extra source files
that must be tracked as build inputs.

Classes:
    - InvocationPlanner: Resolves each Executable variant to an Invocation
"""

import os
import uuid
from pathlib import Path

import structlog

from buildtoolsupport.commands import (
    Command,
    Executable,
    File,
    Invocation,
    Script,
    TargetInPackage,
    ToolchainCommand,
)
from buildtoolsupport.config import SupportSettings
from buildtoolsupport.context import PluginContext
from buildtoolsupport.errors import ResolutionError
from buildtoolsupport.locator import ExecutableLocator
from buildtoolsupport.paths import repair
from buildtoolsupport.scratch import make_scratch_directory

logger = structlog.get_logger()

# Compiles the script into a private scratch directory, then runs it with
# the remaining positional parameters. Positional parameters:
#   $0 ignored, $1 scratch directory, $2 script, $3... forwarded arguments.
SCRIPT_PIPELINE = """\
SCRATCH="$1"
SCRIPT="$2"
shift 2
mkdir -p "$SCRATCH"/module-cache
{compiler} -module-cache-path "$SCRATCH"/module-cache "$SCRIPT" -o "$SCRATCH"/runner
"$SCRATCH"/runner "$@"
"""


class InvocationPlanner:
    """Computes the Invocation for an Executable.

    Attributes:
        context: The host context of the running plugin.
        locator: Used to find commands and toolchain executables.
        settings: Resolution settings.

    Example:
        planner = InvocationPlanner(context, locator)
        invocation = planner.plan(Command("sh"))
    """

    def __init__(
        self,
        context: PluginContext,
        locator: ExecutableLocator,
        settings: SupportSettings | None = None,
    ) -> None:
        self.context = context
        self.locator = locator
        self.settings = settings or locator.settings
        self._platform = locator.environment.platform

    def plan(self, executable: Executable) -> Invocation:
        """Return the invocation that runs ``executable``.

        Raises:
            ResolutionError: If the executable cannot be resolved.
            TypeError: If ``executable`` is not an Executable variant.
        """
        if isinstance(executable, File):
            return Invocation(executable=self._repaired(executable.path))
        if isinstance(executable, Command):
            return Invocation(executable=self.locator.locate(executable.name))
        if isinstance(executable, ToolchainCommand):
            return Invocation(
                executable=self.locator.toolchain_executable(executable.name)
            )
        if isinstance(executable, TargetInPackage):
            return self._plan_target(executable.name)
        if isinstance(executable, Script):
            return self._plan_script(executable.path)
        raise TypeError(f"Not an executable description: {executable!r}")

    def _repaired(self, path: Path) -> Path:
        return Path(repair(path, self._platform))

    @property
    def builds_targets_reentrantly(self) -> bool:
        """Whether package targets are built by running the build tool itself.

        Where the host cannot let a plugin depend on one of the package's
        own executables without breaking the link, the tool is built and
        run through a nested invocation of the build tool instead.
        """
        if self.settings.reentrant_target_builds is not None:
            return self.settings.reentrant_target_builds
        return not self._platform.supports_tool_dependencies

    def _plan_target(self, name: str) -> Invocation:
        package = self.context.package
        sources = frozenset(
            self._repaired(p) for p in self.context.source_dependencies(name)
        )

        if not self.builds_targets_reentrantly:
            try:
                return Invocation(
                    executable=self.context.tool_path(name),
                    additional_sources=sources,
                )
            except ResolutionError as e:
                logger.warning(
                    "target_tool_lookup_failed",
                    target=name,
                    error=str(e),
                    fallback="reentrant_build",
                )

        build_tool = self.locator.toolchain_executable(self.settings.build_tool)
        arguments = [
            "run",
            "--disable-sandbox",
            "--package-path",
            repair(package.directory, self._platform),
        ]
        if self.settings.reuse_build_output:
            arguments.append("--skip-build")
        else:
            scratch = make_scratch_directory(
                self.context.work_directory, self.settings.scratch_attempts
            )
            arguments.extend(["--scratch-path", repair(scratch, self._platform)])
        arguments.append(name)

        return Invocation(
            executable=build_tool,
            argument_prefix=tuple(arguments),
            additional_sources=sources,
        )

    def _shell(self) -> Path:
        if self._platform.script_shell_beside_git:
            # The host needs git on the search path anyway; a working bash
            # ships alongside it.
            git = self.locator.locate("git")
            return git.parent.parent / "bin" / "bash.exe"
        return self.locator.locate("bash")

    def _plan_script(self, script: Path) -> Invocation:
        shell = self._shell()
        compiler = self.settings.script_compiler or self._platform.script_compiler
        scratch = self.context.work_directory / uuid.uuid4().hex
        repaired_script = self._repaired(script)

        return Invocation(
            executable=shell,
            argument_prefix=(
                "-eo",
                "pipefail",
                "-c",
                SCRIPT_PIPELINE.format(compiler=compiler),
                "ignored",
                repair(scratch, self._platform),
                os.fspath(repaired_script),
            ),
            additional_sources=frozenset({repaired_script}),
        )
