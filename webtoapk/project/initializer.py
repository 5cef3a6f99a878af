"""Create and prepare the Capacitor project that wraps a web application."""

import asyncio
import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from webtoapk.adapters.process_adapter import ProcessError
from webtoapk.config.settings import WebToAPKSettings
from webtoapk.core.errors import (
    BuildError,
    ErrorCategory,
    ProcessFailureKind,
    ResourceError,
    WebToAPKError,
)
from webtoapk.core.structlog_logger import StructlogMixin
from webtoapk.diagnostics.error_classifier import NPM_ERROR_CLASSIFIER, ErrorClassifier
from webtoapk.models.app_config import AppConfig
from webtoapk.models.results import ProcessResult
from webtoapk.project.templates import (
    CAPACITOR_WEB_DIR,
    PROJECT_DIRECTORIES,
    render_capacitor_config,
    render_package_json,
)
from webtoapk.protocols import (
    ProcessRunnerProtocol,
    ResourceProcessorProtocol,
    ToolLocatorProtocol,
)
from webtoapk.resources.processor import create_resource_processor
from webtoapk.tools.locator import SDK_ENV_VARS
from webtoapk.utils.error_utils import wrap_error
from webtoapk.utils.file_utils import copy_directory
from webtoapk.utils.stream_process import LoggerOutputMiddleware


logger = logging.getLogger(__name__)

ANDROID_RES_DIR = Path("android", "app", "src", "main", "res")


class ProjectInitializer(StructlogMixin):
    """Materialize a native Android project from an ``AppConfig``.

    Steps are meant to run in order: ``create_project``,
    ``install_dependencies``, ``add_platform`` and ``sync_project``. Every
    external command runs with the project root as its working directory.
    """

    def __init__(
        self,
        runner: ProcessRunnerProtocol,
        locator: ToolLocatorProtocol,
        resource_processor: ResourceProcessorProtocol | None = None,
        settings: WebToAPKSettings | None = None,
        environ: Mapping[str, str] | None = None,
        classifier: ErrorClassifier = NPM_ERROR_CLASSIFIER,
    ) -> None:
        super().__init__()
        self.runner = runner
        self.locator = locator
        self.resource_processor = resource_processor
        self.settings = settings or WebToAPKSettings()
        self.environ = environ if environ is not None else os.environ
        self.classifier = classifier

    async def create_project(self, config: AppConfig, project_path: Path) -> None:
        """Write the project skeleton, manifests, web assets and resources.

        Raises:
            ResourceError: If the web assets cannot be copied
            BuildError: If the skeleton or manifests cannot be written
        """
        project_path = Path(project_path)
        log = self.log_operation("create_project", project_path=str(project_path))
        try:
            for directory in PROJECT_DIRECTORIES:
                (project_path / directory).mkdir(parents=True, exist_ok=True)

            (project_path / "package.json").write_text(
                render_package_json(
                    config,
                    core_version=self.settings.capacitor_core_version,
                    cli_version=self.settings.capacitor_cli_version,
                    android_version=self.settings.capacitor_android_version,
                ),
                encoding="utf-8",
            )
            (project_path / "capacitor.config.ts").write_text(
                render_capacitor_config(config), encoding="utf-8"
            )
            log.debug("project_files_written")

            if config.web_dir:
                await self.copy_web_assets(
                    Path(config.web_dir), project_path / CAPACITOR_WEB_DIR
                )

            await self.process_resources(config, project_path)
        except WebToAPKError:
            raise
        except Exception as e:
            raise wrap_error(
                e,
                ErrorCategory.BUILD,
                "Failed to create Capacitor project",
                {"project_path": str(project_path), "config": config},
            ) from e

        log.info("project_created")

    async def copy_web_assets(self, source_dir: Path, target_dir: Path) -> int:
        """Recursively copy the web application into the project.

        Raises:
            ResourceError: If the copy fails
        """
        try:
            copied = await asyncio.to_thread(copy_directory, source_dir, target_dir)
        except OSError as e:
            raise ResourceError(
                f"Failed to copy web assets: {e}",
                {"source_dir": str(source_dir), "target_dir": str(target_dir)},
            ) from e
        self.logger.info(
            "web_assets_copied", source_dir=str(source_dir), file_count=copied
        )
        return copied

    async def process_resources(self, config: AppConfig, project_path: Path) -> None:
        """Generate icons and splash screens; failures only log warnings."""
        if self.resource_processor is None or not (config.icon or config.splash_screen):
            return

        res_dir = project_path / ANDROID_RES_DIR
        res_dir.mkdir(parents=True, exist_ok=True)

        if config.icon:
            try:
                await self.resource_processor.process_icon(Path(config.icon), res_dir)
            except Exception as e:
                self.logger.warning(
                    "icon_processing_failed", icon=config.icon, error=str(e)
                )

        if config.splash_screen:
            try:
                await self.resource_processor.process_splash_screen(
                    Path(config.splash_screen), res_dir
                )
            except Exception as e:
                self.logger.warning(
                    "splash_processing_failed",
                    splash_screen=config.splash_screen,
                    error=str(e),
                )

    async def install_dependencies(
        self, project_path: Path, plugins: Sequence[str] = ()
    ) -> None:
        """Install Capacitor packages, package.json dependencies and plugins.

        Raises:
            BuildError: If any npm invocation fails
        """
        project_path = Path(project_path)
        npm = self.locator.executable("npm")
        settings = self.settings
        steps: list[list[str]] = [
            [
                "install",
                f"@capacitor/core@{settings.capacitor_core_version}",
                f"@capacitor/cli@{settings.capacitor_cli_version}",
                f"@capacitor/android@{settings.capacitor_android_version}",
            ],
            ["install"],
        ]
        if plugins:
            steps.append(["install", *plugins])

        context = {"project_path": str(project_path), "plugins": list(plugins)}
        for args in steps:
            await self._run_step(
                "Failed to install dependencies",
                npm,
                args,
                project_path,
                timeout=settings.install_timeout,
                context=context,
            )
        self.logger.info("dependencies_installed", project_path=str(project_path))

    async def verify_environment(self) -> None:
        """Check JDK and Android SDK availability.

        Raises:
            BuildError: Listing every problem found, not only the first
        """
        errors: list[str] = []
        timeout = self.settings.verify_timeout

        if not self.environ.get("JAVA_HOME"):
            errors.append("JAVA_HOME environment variable is not set")
        elif not await self._probe(self.locator.locate_java(), ["-version"], timeout):
            errors.append("Java is not accessible or not properly installed")

        sdk_root = next(
            (self.environ[var] for var in SDK_ENV_VARS if self.environ.get(var)), None
        )
        if sdk_root is None:
            errors.append(
                "ANDROID_SDK_ROOT or ANDROID_HOME environment variable is not set"
            )
        elif not Path(sdk_root).is_dir():
            errors.append(f"Android SDK directory does not exist: {sdk_root}")

        if not await self._probe(
            self.locator.executable("sdkmanager"), ["--version"], timeout
        ):
            errors.append(
                "Android SDK command line tools (sdkmanager) are not available"
            )

        if errors:
            raise BuildError(
                "Android development environment is not properly configured",
                {"errors": errors},
            )
        self.logger.debug("environment_verified")

    async def add_platform(self, project_path: Path) -> None:
        """Verify the environment, then run ``npx cap add android``.

        Raises:
            BuildError: If the environment is incomplete or the command fails
        """
        project_path = Path(project_path)
        await self.verify_environment()
        await self._run_step(
            "Failed to add Android platform",
            self.locator.executable("npx"),
            ["cap", "add", "android"],
            project_path,
            timeout=self.settings.platform_timeout,
            env=self._android_env(),
            context={
                "project_path": str(project_path),
                "android_sdk_root": self.environ.get("ANDROID_SDK_ROOT"),
                "android_home": self.environ.get("ANDROID_HOME"),
                "java_home": self.environ.get("JAVA_HOME"),
            },
        )
        self.logger.info("android_platform_added", project_path=str(project_path))

    async def sync_project(self, project_path: Path) -> None:
        """Copy web assets into the native project with ``npx cap sync android``.

        Raises:
            BuildError: If the command fails
        """
        project_path = Path(project_path)
        await self._run_step(
            "Failed to sync project",
            self.locator.executable("npx"),
            ["cap", "sync", "android"],
            project_path,
            timeout=self.settings.sync_timeout,
            context={"project_path": str(project_path)},
        )
        self.logger.info("project_synced", project_path=str(project_path))

    def _android_env(self) -> dict[str, str]:
        env = dict(self.environ)
        sdk = env.get("ANDROID_SDK_ROOT") or env.get("ANDROID_HOME")
        if sdk:
            env.setdefault("ANDROID_SDK_ROOT", sdk)
            env.setdefault("ANDROID_HOME", sdk)
        return env

    async def _probe(self, command: str, args: list[str], timeout: float | None) -> bool:
        try:
            result = await self.runner.run(
                command,
                args,
                timeout=timeout,
                middleware=LoggerOutputMiddleware(logger),
            )
        except ProcessError as e:
            self.logger.debug("probe_failed", command=command, error=str(e))
            return False
        return result.success

    async def _run_step(
        self,
        message: str,
        command: str,
        args: list[str],
        project_path: Path,
        *,
        timeout: float | None,
        context: dict[str, Any],
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        tail = self.settings.output_tail_chars
        try:
            result = await self.runner.run(
                command,
                args,
                cwd=project_path,
                env=env,
                timeout=timeout,
                middleware=LoggerOutputMiddleware(logger),
            )
        except ProcessError as e:
            raise BuildError(
                f"{message}: {e}",
                {**context, "command": e.command, "failure_kind": e.kind},
            ) from e

        if not result.success:
            diagnosis = self.classifier.classify(result.combined_output)
            raise BuildError(
                f"{message}: {diagnosis}",
                {
                    **context,
                    "command": result.command,
                    "exit_code": result.exit_code,
                    "failure_kind": ProcessFailureKind.EXIT,
                    "stdout": result.stdout_tail(tail),
                    "stderr": result.stderr_tail(tail),
                },
            )
        return result


def create_project_initializer(
    runner: ProcessRunnerProtocol,
    locator: ToolLocatorProtocol,
    resource_processor: ResourceProcessorProtocol | None = None,
    settings: WebToAPKSettings | None = None,
) -> ProjectInitializer:
    """Factory function to create a ProjectInitializer instance.

    Icons and splash screens are rendered with Pillow unless another
    resource processor is given.
    """
    return ProjectInitializer(
        runner=runner,
        locator=locator,
        resource_processor=resource_processor or create_resource_processor(),
        settings=settings,
    )


__all__ = ["ANDROID_RES_DIR", "ProjectInitializer", "create_project_initializer"]
