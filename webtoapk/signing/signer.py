"""APK signing with apksigner and debug keystore generation with keytool."""

import logging
from enum import Enum
from pathlib import Path
from typing import Any

from webtoapk.adapters.process_adapter import ProcessError
from webtoapk.config.settings import WebToAPKSettings
from webtoapk.core.errors import (
    ErrorCategory,
    ProcessFailureKind,
    SignatureVerificationError,
    SigningError,
    WebToAPKError,
    scrub_output,
)
from webtoapk.core.structlog_logger import StructlogMixin
from webtoapk.diagnostics.error_classifier import (
    SIGNING_ERROR_CLASSIFIER,
    ErrorClassifier,
)
from webtoapk.models.keystore import DebugKeystoreConfig, KeystoreConfig
from webtoapk.protocols import ProcessRunnerProtocol, ToolLocatorProtocol
from webtoapk.utils.error_utils import wrap_error
from webtoapk.utils.file_utils import artifact_timestamp, unused_path
from webtoapk.utils.stream_process import LoggerOutputMiddleware


logger = logging.getLogger(__name__)

APK_SUFFIX = ".apk"


class SigningStage(str, Enum):
    """Stages of one signing attempt, recorded in error contexts."""

    VALIDATE_INPUTS = "validate"
    INVOKE_SIGNING_TOOL = "sign"
    VERIFY_SIGNATURE = "verify"
    DONE = "done"
    FAILED = "failed"


def signed_artifact_path(artifact_path: Path, timestamp: str | None = None) -> Path:
    """``app-debug.apk`` becomes ``app-debug-signed-<timestamp>.apk`` alongside it.

    A counter is appended when that name is taken, so a second signature in
    the same millisecond never overwrites the first.
    """
    timestamp = timestamp or artifact_timestamp()
    stem = artifact_path.name[: -len(APK_SUFFIX)]
    return unused_path(
        artifact_path.with_name(f"{stem}-signed-{timestamp}{APK_SUFFIX}")
    )


class ArtifactSigner(StructlogMixin):
    """Sign APKs and verify their signatures.

    Each ``sign`` call runs validate, sign and verify once, in order. The
    first failing stage ends the attempt; there are no retries.

    Args:
        runner: Process runner used for apksigner and keytool
        locator: Resolves the apksigner and keytool executables
        debug_keystore: Definition of the development keystore
        settings: Diagnostic limits
    """

    def __init__(
        self,
        runner: ProcessRunnerProtocol,
        locator: ToolLocatorProtocol,
        debug_keystore: DebugKeystoreConfig | None = None,
        settings: WebToAPKSettings | None = None,
        classifier: ErrorClassifier = SIGNING_ERROR_CLASSIFIER,
    ) -> None:
        super().__init__()
        self.runner = runner
        self.locator = locator
        self.settings = settings or WebToAPKSettings()
        self.debug_keystore = debug_keystore or self.settings.debug_keystore
        self.classifier = classifier

    async def sign(self, artifact_path: Path, keystore_config: KeystoreConfig) -> Path:
        """Sign ``artifact_path`` into a new file and verify the result.

        Returns:
            Path of the signed APK, never equal to ``artifact_path``

        Raises:
            SigningError: If inputs are invalid or apksigner fails
            SignatureVerificationError: If the signed APK does not verify
            ConfigError: If apksigner cannot be located
        """
        return await self._sign(
            Path(artifact_path), keystore_config, secrets=keystore_config.secrets()
        )

    async def sign_with_debug_keystore(self, artifact_path: Path) -> Path:
        """Sign with the development keystore, creating it first if needed."""
        try:
            keystore_path = await self.ensure_debug_keystore()
            keystore_config = self.debug_keystore.to_keystore_config()
            keystore_config.path = str(keystore_path)
            self.logger.info("signing_with_debug_keystore", artifact=str(artifact_path))
            # Debug credentials are public, only the structured fields are masked
            return await self._sign(Path(artifact_path), keystore_config, secrets=())
        except WebToAPKError:
            raise
        except Exception as e:
            raise wrap_error(
                e,
                ErrorCategory.SIGNING,
                "Failed to sign APK with debug keystore",
                {"artifact_path": str(artifact_path)},
            ) from e

    async def verify_signature(self, artifact_path: Path) -> bool:
        """Run ``apksigner verify --verbose``.

        Returns:
            True if the tool exits with status 0

        Raises:
            SigningError: If the artifact is invalid or the tool cannot start
        """
        artifact_path = Path(artifact_path)
        self.validate_artifact(artifact_path)
        apksigner = self.locator.locate_signing_tool()
        try:
            result = await self.runner.run(
                apksigner,
                ["verify", "--verbose", str(artifact_path)],
                middleware=LoggerOutputMiddleware(logger),
            )
        except ProcessError as e:
            raise SigningError(
                f"Failed to start APK signature verification: {e}",
                {
                    "artifact_path": str(artifact_path),
                    "stage": SigningStage.VERIFY_SIGNATURE,
                    "failure_kind": e.kind,
                },
            ) from e

        if result.success:
            self.logger.info("signature_verified", artifact=str(artifact_path))
            return True

        tail = self.settings.signing_tail_chars
        self.logger.warning(
            "signature_verification_failed",
            artifact=str(artifact_path),
            exit_code=result.exit_code,
            stdout=result.stdout_tail(tail),
            stderr=result.stderr_tail(tail),
        )
        return False

    async def ensure_debug_keystore(self) -> Path:
        """Return the debug keystore path, generating the keystore if absent.

        Existence is checked on disk on every call. Two processes creating
        the keystore at the same time can race; this is not guarded.

        Raises:
            SigningError: If keytool fails or produces no file
        """
        debug = self.debug_keystore
        keystore_path = Path(debug.path).expanduser()
        if keystore_path.is_file() and keystore_path.stat().st_size > 0:
            self.logger.debug("debug_keystore_exists", path=str(keystore_path))
            return keystore_path

        context: dict[str, Any] = {"keystore_path": str(keystore_path)}
        try:
            keystore_path.parent.mkdir(parents=True, exist_ok=True)
            # keytool refuses to add a key to an existing empty file
            keystore_path.unlink(missing_ok=True)
        except OSError as e:
            raise wrap_error(
                e, ErrorCategory.SIGNING, "Failed to generate debug keystore", context
            ) from e

        args = [
            "-genkeypair",
            "-v",
            "-keystore",
            str(keystore_path),
            "-alias",
            debug.alias,
            "-keyalg",
            debug.key_algorithm,
            "-keysize",
            str(debug.key_size),
            "-validity",
            str(debug.validity_days),
            "-storepass",
            debug.password,
            "-keypass",
            debug.alias_password,
            "-dname",
            debug.dname,
        ]
        try:
            result = await self.runner.run(
                self.locator.locate_key_tool(),
                args,
                middleware=LoggerOutputMiddleware(logger),
            )
        except ProcessError as e:
            raise SigningError(
                f"Failed to start keytool process: {e}",
                {**context, "failure_kind": e.kind},
            ) from e

        if not result.success:
            tail = self.settings.signing_tail_chars
            raise SigningError(
                f"Keytool failed with exit code {result.exit_code}: "
                f"{result.stderr.strip() or result.stdout.strip()}",
                {
                    **context,
                    "exit_code": result.exit_code,
                    "failure_kind": ProcessFailureKind.EXIT,
                    "stdout": result.stdout_tail(tail),
                    "stderr": result.stderr_tail(tail),
                },
            )

        if not keystore_path.is_file():
            raise SigningError(
                f"Failed to generate debug keystore: {keystore_path} was not created",
                context,
            )

        self.logger.info("debug_keystore_generated", path=str(keystore_path))
        return keystore_path

    def validate_artifact(self, artifact_path: Path) -> None:
        """Check that the APK exists, is non-empty and has the .apk suffix.

        Raises:
            SigningError: On the first violated condition
        """
        context = {
            "artifact_path": str(artifact_path),
            "stage": SigningStage.VALIDATE_INPUTS,
        }
        if not artifact_path.is_file():
            raise SigningError(f"APK file not found: {artifact_path}", context)
        size = artifact_path.stat().st_size
        if size == 0:
            raise SigningError(
                f"APK file is empty: {artifact_path}", {**context, "size": size}
            )
        if not artifact_path.name.lower().endswith(APK_SUFFIX):
            raise SigningError(f"Invalid APK file extension: {artifact_path}", context)

    def validate_keystore(self, keystore_config: KeystoreConfig) -> None:
        """Check that all credentials are present and the keystore is a file.

        Raises:
            SigningError: Naming the missing fields or the bad keystore file
        """
        context: dict[str, Any] = {
            "stage": SigningStage.VALIDATE_INPUTS,
            "keystore_config": keystore_config.to_redacted_dict(),
        }
        missing = keystore_config.missing_fields()
        if missing:
            raise SigningError(
                "Missing required keystore configuration fields: "
                + ", ".join(missing),
                {**context, "missing_fields": missing},
            )

        keystore_path = Path(keystore_config.path).expanduser()
        if not keystore_path.is_file():
            raise SigningError(
                f"Keystore file not found: {keystore_config.path}",
                context,
            )
        if keystore_path.stat().st_size == 0:
            raise SigningError(
                f"Keystore file is empty: {keystore_config.path}",
                {**context, "size": 0},
            )

    async def _sign(
        self,
        artifact_path: Path,
        keystore_config: KeystoreConfig,
        secrets: tuple[str, ...],
    ) -> Path:
        log = self.log_operation("sign", artifact=str(artifact_path))
        stage = SigningStage.VALIDATE_INPUTS
        redacted_config = keystore_config.to_redacted_dict()
        try:
            self.validate_artifact(artifact_path)
            self.validate_keystore(keystore_config)
            apksigner = self.locator.locate_signing_tool()

            stage = SigningStage.INVOKE_SIGNING_TOOL
            output_path = signed_artifact_path(artifact_path)
            await self._invoke_signing_tool(
                apksigner, artifact_path, output_path, keystore_config, secrets
            )

            stage = SigningStage.VERIFY_SIGNATURE
            if not await self.verify_signature(output_path):
                raise SignatureVerificationError(
                    "APK signature verification failed after signing",
                    {
                        "artifact_path": str(artifact_path),
                        "signed_path": str(output_path),
                        "stage": SigningStage.VERIFY_SIGNATURE,
                        "keystore_config": redacted_config,
                    },
                )
        except WebToAPKError as e:
            log.error("signing_failed", stage=stage.value, error=e.message)
            raise
        except Exception as e:
            log.error("signing_failed", stage=stage.value, error=str(e))
            raise wrap_error(
                e,
                ErrorCategory.SIGNING,
                "Failed to sign APK",
                {
                    "artifact_path": str(artifact_path),
                    "stage": stage,
                    "keystore_config": redacted_config,
                },
            ) from e

        log.info("apk_signed", signed_path=str(output_path))
        return output_path

    async def _invoke_signing_tool(
        self,
        apksigner: Path,
        artifact_path: Path,
        output_path: Path,
        keystore_config: KeystoreConfig,
        secrets: tuple[str, ...],
    ) -> None:
        password, alias_password = keystore_config.secrets()
        args = [
            "sign",
            "--ks",
            str(Path(keystore_config.path).expanduser()),
            "--ks-key-alias",
            keystore_config.alias,
            "--ks-pass",
            f"pass:{password}",
            "--key-pass",
            f"pass:{alias_password}",
            "--out",
            str(output_path),
            str(artifact_path),
        ]
        context: dict[str, Any] = {
            "artifact_path": str(artifact_path),
            "output_path": str(output_path),
            "stage": SigningStage.INVOKE_SIGNING_TOOL,
        }
        try:
            result = await self.runner.run(
                apksigner, args, middleware=LoggerOutputMiddleware(logger)
            )
        except ProcessError as e:
            raise SigningError(
                f"Failed to start APK signing process: {e}",
                {**context, "apksigner_path": str(apksigner), "failure_kind": e.kind},
            ) from e

        if not result.success:
            tail = self.settings.signing_tail_chars
            diagnosis = scrub_output(
                self.classifier.classify(result.combined_output), secrets
            )
            raise SigningError(
                f"APK signing failed with exit code {result.exit_code}: {diagnosis}",
                {
                    **context,
                    "exit_code": result.exit_code,
                    "failure_kind": ProcessFailureKind.EXIT,
                    "stdout": result.stdout_tail(tail),
                    "stderr": result.stderr_tail(tail),
                },
                secrets=secrets,
            )


def create_artifact_signer(
    runner: ProcessRunnerProtocol,
    locator: ToolLocatorProtocol,
    settings: WebToAPKSettings | None = None,
) -> ArtifactSigner:
    """Factory function to create an ArtifactSigner instance."""
    settings = settings or WebToAPKSettings()
    return ArtifactSigner(
        runner=runner,
        locator=locator,
        debug_keystore=settings.debug_keystore,
        settings=settings,
    )


__all__ = [
    "APK_SUFFIX",
    "ArtifactSigner",
    "SigningStage",
    "create_artifact_signer",
    "signed_artifact_path",
]
