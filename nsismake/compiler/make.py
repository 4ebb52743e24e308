"""Compile an NSIS script into an installer executable."""

import logging
import time
from typing import Callable, Optional

from nsismake.compiler.command_builder import CommandBuilder, resolve_executable
from nsismake.compiler.invocation import InvocationConfig
from nsismake.compiler.nsis_dir import aux_dir_environment
from nsismake.compiler.preflight import PreflightChecks, validate_script
from nsismake.project.artifacts import ArtifactRegistry
from nsismake.util.path_resolver import PathResolver
from nsismake.util.platform_detect import PlatformKind
from nsismake.util.process_output import ProcessOutputReader, default_output_encoding
from nsismake.util.running_process import (
    ExitEvaluator,
    ProcessResult,
    launch_process,
)


logger = logging.getLogger(__name__)

ARTIFACT_TYPE = "exe"

# How long to let the reader flush trailing lines before the completion line
_READER_GRACE_SECONDS = 0.5


class MakeRunner:
    """Runs makensis for an InvocationConfig.

    Args:
        platform: The platform rules to apply.
        sink: Receives every line of compiler output plus the completion line.
        artifacts: Receives the installer after a successful run.
        resolver: Used to find the makensis binary in the OS path.
        clock: Monotonic clock in seconds.
    """

    def __init__(
        self,
        platform: PlatformKind,
        sink: Callable[[str], None],
        artifacts: Optional[ArtifactRegistry] = None,
        resolver: Optional[PathResolver] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.platform = platform
        self.sink = sink
        self.artifacts = artifacts
        self.resolver = resolver if resolver is not None else PathResolver(platform)
        self.clock = clock
        self.last_command: Optional[list[str]] = None

    def make(self, config: InvocationConfig) -> Optional[ProcessResult]:
        """Compile the script.

        Returns:
            The ProcessResult, or None if the configuration is disabled.

        Raises:
            NsisMakeException: Any failure aborts the whole invocation.
        """
        if config.disabled:
            logger.info("NSIS make is disabled. Doing nothing.")
            return None

        validated = validate_script(
            config.script_path, PreflightChecks.from_config(config)
        )
        executable = resolve_executable(config, self.platform, self.resolver)

        environment = dict(config.environment)
        environment.update(
            aux_dir_environment(
                executable,
                self.platform,
                auto_detect=config.auto_detect_aux_dir,
                override=config.aux_dir_override,
                env_overrides=config.environment,
                environ=self.resolver.environ,
            )
        )

        builder = CommandBuilder(self.platform)
        command = builder.build(config, validated, executable)
        self.last_command = command

        started_at = self.clock()
        process = launch_process(
            command, config.process_directory, environment, self.platform
        )
        assert process.stdout is not None
        reader = ProcessOutputReader(
            process.stdout, self.sink, default_output_encoding(self.platform)
        )
        reader.start()

        evaluator = ExitEvaluator(self.sink, clock=self.clock)
        result = evaluator.wait(
            process, started_at, on_exit=lambda: reader.join(_READER_GRACE_SECONDS)
        )

        output = builder.resolved_output_file
        if config.attach_artifact and self.artifacts is not None:
            if output is None:
                logger.warning(
                    "No output file is configured, there is no installer to attach"
                )
            else:
                self.artifacts.attach(
                    output.absolute_path, config.classifier, ARTIFACT_TYPE
                )
        return result
