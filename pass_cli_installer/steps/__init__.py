from .step_10_resolve_platform import ResolvePlatformStep
from .step_20_fetch_artifact import FetchArtifactStep
from .step_30_install_binary import InstallBinaryStep
from .step_40_generate_completions import GenerateCompletionsStep
from .step_50_install_docs import InstallDocsStep
from .step_90_post_install_advisory import PostInstallAdvisoryStep

__all__ = [
    "ResolvePlatformStep",
    "FetchArtifactStep",
    "InstallBinaryStep",
    "GenerateCompletionsStep",
    "InstallDocsStep",
    "PostInstallAdvisoryStep",
]
