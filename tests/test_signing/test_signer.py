"""Tests for ArtifactSigner."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from webtoapk.adapters.process_adapter import ProcessSpawnError
from webtoapk.core.errors import (
    ConfigError,
    ErrorCategory,
    ProcessFailureKind,
    SignatureVerificationError,
    SigningError,
)
from webtoapk.models.keystore import KeystoreConfig
from webtoapk.models.results import ProcessResult
from webtoapk.signing.signer import ArtifactSigner, signed_artifact_path


class FakeSigningTools:
    """Stand-in for apksigner and keytool that writes their output files."""

    def __init__(self) -> None:
        self.sign_result = ProcessResult(exit_code=0)
        self.verify_result = ProcessResult(exit_code=0)
        self.keytool_result = ProcessResult(exit_code=0)
        self.calls: list[tuple[str, list[str]]] = []

    async def run(self, command: Any, args: list[str], **kwargs: Any) -> ProcessResult:
        self.calls.append((str(command), list(args)))
        if args[0] == "sign":
            if self.sign_result.success:
                out = Path(args[args.index("--out") + 1])
                out.write_bytes(b"PK\x03\x04 signed")
            return self.sign_result
        if args[0] == "verify":
            return self.verify_result
        if args[0] == "-genkeypair":
            keystore = Path(args[args.index("-keystore") + 1])
            if keystore.exists():
                message = "keytool error: Keystore file exists, but is empty"
                return ProcessResult(exit_code=1, stderr=message)
            if self.keytool_result.success:
                keystore.write_bytes(b"debug keystore")
            return self.keytool_result
        raise AssertionError(f"unexpected command {command} {args}")

    def commands(self, first_arg: str) -> list[list[str]]:
        return [args for _, args in self.calls if args[0] == first_arg]


@pytest.fixture
def tools(mock_runner) -> FakeSigningTools:
    fake = FakeSigningTools()
    mock_runner.run.side_effect = fake.run
    return fake


@pytest.fixture
def signer(mock_runner, mock_locator, settings, tools) -> ArtifactSigner:
    return ArtifactSigner(runner=mock_runner, locator=mock_locator, settings=settings)


def test_signed_artifact_path():
    path = signed_artifact_path(Path("/out/app-release.apk"), "2024-05-01T10-20-30-123Z")

    assert path == Path("/out/app-release-signed-2024-05-01T10-20-30-123Z.apk")


def test_signed_artifact_path_skips_taken_names(tmp_path):
    apk = tmp_path / "app.apk"
    (tmp_path / "app-signed-T.apk").write_bytes(b"first")
    (tmp_path / "app-signed-T-1.apk").write_bytes(b"second")

    assert signed_artifact_path(apk, "T") == tmp_path / "app-signed-T-2.apk"


class TestSign:
    async def test_sign_and_verify(self, signer, tools, apk_file, keystore_config):
        store_password, key_password = keystore_config.secrets()
        signed = await signer.sign(apk_file, keystore_config)

        assert signed != apk_file
        assert signed.parent == apk_file.parent
        assert signed.name.startswith("app-debug-signed-")
        assert signed.exists()
        assert apk_file.read_bytes().startswith(b"PK")

        sign_args = tools.commands("sign")[0]
        assert sign_args[:5] == [
            "sign",
            "--ks",
            keystore_config.path,
            "--ks-key-alias",
            "release",
        ]
        assert f"pass:{store_password}" in sign_args
        assert f"pass:{key_password}" in sign_args
        assert sign_args[-1] == str(apk_file)
        assert tools.commands("verify") == [["verify", "--verbose", str(signed)]]

    async def test_each_call_writes_a_new_file(
        self, signer, tools, apk_file, keystore_config
    ):
        with patch(
            "webtoapk.signing.signer.artifact_timestamp",
            return_value="2024-05-01T10-20-30-123Z",
        ):
            first = await signer.sign(apk_file, keystore_config)
            second = await signer.sign(apk_file, keystore_config)

        assert first != second
        assert first.exists()
        assert second.exists()
        assert second.name == "app-debug-signed-2024-05-01T10-20-30-123Z-1.apk"

    async def test_surrounding_whitespace_in_passwords_is_kept(
        self, signer, tools, apk_file, keystore_file
    ):
        config = KeystoreConfig(
            path=str(keystore_file),
            password="  pw  ",
            alias="release",
            alias_password=" k ",
        )

        assert config.secrets() == ("  pw  ", " k ")

        await signer.sign(apk_file, config)

        sign_args = tools.commands("sign")[0]
        assert sign_args[sign_args.index("--ks-pass") + 1] == "pass:  pw  "
        assert sign_args[sign_args.index("--key-pass") + 1] == "pass: k "

    async def test_empty_password_fails_before_spawning(
        self, signer, mock_runner, apk_file, keystore_file
    ):
        config = KeystoreConfig(
            path=str(keystore_file), password="", alias="a", alias_password="x"
        )

        with pytest.raises(SigningError) as exc_info:
            await signer.sign(apk_file, config)

        error = exc_info.value
        assert error.message == "Missing required keystore configuration fields: password"
        assert error.context["missing_fields"] == ["password"]
        assert error.context["stage"] == "validate"
        mock_runner.run.assert_not_called()

    async def test_every_missing_field_is_named(self, signer, apk_file):
        with pytest.raises(SigningError) as exc_info:
            await signer.sign(apk_file, KeystoreConfig())

        assert exc_info.value.context["missing_fields"] == [
            "path",
            "password",
            "alias",
            "alias_password",
        ]

    async def test_missing_keystore_file(self, signer, apk_file, keystore_config, tmp_path):
        keystore_config.path = str(tmp_path / "missing.jks")

        with pytest.raises(SigningError, match="Keystore file not found"):
            await signer.sign(apk_file, keystore_config)

    @pytest.mark.parametrize(
        ("name", "content", "message"),
        [
            ("missing.apk", None, "APK file not found"),
            ("empty.apk", b"", "APK file is empty"),
            ("app.zip", b"PK", "Invalid APK file extension"),
        ],
    )
    async def test_invalid_artifact(
        self, signer, keystore_config, tmp_path, name, content, message
    ):
        artifact = tmp_path / name
        if content is not None:
            artifact.write_bytes(content)

        with pytest.raises(SigningError, match=message) as exc_info:
            await signer.sign(artifact, keystore_config)

        assert exc_info.value.context["stage"] == "validate"

    async def test_signing_tool_failure_is_classified(
        self, signer, tools, apk_file, keystore_config
    ):
        tools.sign_result = ProcessResult(
            exit_code=1,
            stderr="Failed to load signer\n"
            "java.io.IOException: Keystore was tampered with, or password was incorrect",
        )

        with pytest.raises(SigningError) as exc_info:
            await signer.sign(apk_file, keystore_config)

        error = exc_info.value
        assert error.message == (
            "APK signing failed with exit code 1: "
            "Incorrect keystore password or corrupted keystore file"
        )
        assert error.context["stage"] == "sign"
        assert error.failure_kind is ProcessFailureKind.EXIT
        assert tools.commands("verify") == []

    async def test_verification_failure_after_signing(
        self, signer, tools, apk_file, keystore_config
    ):
        tools.verify_result = ProcessResult(
            exit_code=1, stdout="DOES NOT VERIFY\nERROR: JAR signer CERT.RSA"
        )

        with pytest.raises(SignatureVerificationError) as exc_info:
            await signer.sign(apk_file, keystore_config)

        error = exc_info.value
        assert isinstance(error, SigningError)
        assert error.category == ErrorCategory.SIGNING
        assert error.message == "APK signature verification failed after signing"
        assert error.context["stage"] == "verify"

    async def test_spawn_failure(self, signer, mock_runner, apk_file, keystore_config):
        mock_runner.run.side_effect = ProcessSpawnError(
            "Failed to start apksigner: No such file", ["apksigner"]
        )

        with pytest.raises(SigningError) as exc_info:
            await signer.sign(apk_file, keystore_config)

        assert exc_info.value.message.startswith("Failed to start APK signing process")
        assert exc_info.value.failure_kind is ProcessFailureKind.SPAWN

    async def test_unlocatable_signing_tool(
        self, signer, mock_locator, apk_file, keystore_config
    ):
        mock_locator.locate_signing_tool.side_effect = ConfigError("apksigner not found")

        with pytest.raises(ConfigError, match="apksigner not found"):
            await signer.sign(apk_file, keystore_config)

    async def test_passwords_never_reach_errors(
        self, signer, tools, apk_file, keystore_config
    ):
        store_password, key_password = keystore_config.secrets()
        tools.sign_result = ProcessResult(
            exit_code=2,
            stdout=f"args: --ks-pass pass:{store_password}",
            stderr=f"ERROR: bad key password {key_password}",
            command=["apksigner", f"pass:{store_password}"],
        )

        with pytest.raises(SigningError) as exc_info:
            await signer.sign(apk_file, keystore_config)

        error = exc_info.value
        payload = json.dumps(error.to_dict())
        assert store_password not in payload
        assert key_password not in payload
        assert store_password not in str(error)
        assert key_password not in str(error)

    async def test_short_password_keeps_field_names_readable(
        self, signer, apk_file, keystore_file
    ):
        config = KeystoreConfig(
            path=str(keystore_file), password="", alias="key0", alias_password="word"
        )

        with pytest.raises(SigningError) as exc_info:
            await signer.sign(apk_file, config)

        error = exc_info.value
        assert error.message == (
            "Missing required keystore configuration fields: password"
        )
        assert error.context["missing_fields"] == ["password"]
        assert error.context["keystore_config"]["alias_password"] == "***"

    async def test_echoed_password_is_scrubbed_from_diagnosis(
        self, signer, tools, apk_file, keystore_config
    ):
        store_password, _ = keystore_config.secrets()
        tools.sign_result = ProcessResult(
            exit_code=1, stderr=f"Exception: unexpected token {store_password}"
        )

        with pytest.raises(SigningError) as exc_info:
            await signer.sign(apk_file, keystore_config)

        assert store_password not in exc_info.value.message
        assert store_password not in exc_info.value.context["stderr"]


class TestVerifySignature:
    async def test_returns_exit_status(self, signer, tools, apk_file):
        assert await signer.verify_signature(apk_file) is True

        tools.verify_result = ProcessResult(exit_code=1)
        assert await signer.verify_signature(apk_file) is False


class TestDebugKeystore:
    async def test_generated_when_missing(self, signer, tools, settings):
        keystore = await signer.ensure_debug_keystore()

        assert keystore == settings.debug_keystore.path
        assert keystore.exists()
        args = tools.commands("-genkeypair")[0]
        assert args[args.index("-alias") + 1] == "androiddebugkey"
        assert args[args.index("-storepass") + 1] == "android"
        assert args[args.index("-validity") + 1] == "10000"
        assert args[args.index("-dname") + 1] == "CN=Android Debug,O=Android,C=US"

    async def test_existing_keystore_is_reused(self, signer, tools, settings):
        settings.debug_keystore.path.parent.mkdir(parents=True)
        settings.debug_keystore.path.write_bytes(b"existing")

        assert await signer.ensure_debug_keystore() == settings.debug_keystore.path
        assert tools.calls == []

    async def test_empty_keystore_is_regenerated(self, signer, tools, settings):
        settings.debug_keystore.path.parent.mkdir(parents=True)
        settings.debug_keystore.path.write_bytes(b"")

        keystore = await signer.ensure_debug_keystore()

        assert keystore.read_bytes() == b"debug keystore"
        assert len(tools.commands("-genkeypair")) == 1

    async def test_keytool_failure(self, signer, tools):
        tools.keytool_result = ProcessResult(
            exit_code=1, stderr="keytool error: java.lang.Exception: bad dname"
        )

        with pytest.raises(SigningError) as exc_info:
            await signer.ensure_debug_keystore()

        assert exc_info.value.message == (
            "Keytool failed with exit code 1: "
            "keytool error: java.lang.Exception: bad dname"
        )

    async def test_keytool_spawn_failure(self, signer, mock_runner):
        mock_runner.run.side_effect = ProcessSpawnError("no keytool", ["keytool"])

        with pytest.raises(SigningError, match="Failed to start keytool process"):
            await signer.ensure_debug_keystore()

    async def test_sign_with_debug_keystore(self, signer, tools, apk_file, settings):
        signed = await signer.sign_with_debug_keystore(apk_file)

        assert signed.exists()
        assert len(tools.commands("-genkeypair")) == 1
        sign_args = tools.commands("sign")[0]
        assert sign_args[sign_args.index("--ks") + 1] == str(settings.debug_keystore.path)
        assert "pass:android" in sign_args

        await signer.sign_with_debug_keystore(apk_file)
        assert len(tools.commands("-genkeypair")) == 1
