"""APK signing."""

from .signer import ArtifactSigner, SigningStage, create_artifact_signer


__all__ = ["ArtifactSigner", "SigningStage", "create_artifact_signer"]
