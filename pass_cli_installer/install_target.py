from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# Completion file locations relative to the completions dir, per shell.
COMPLETION_PATHS = {
    "bash": "bash-completion/completions/{name}",
    "zsh": "zsh/site-functions/_{name}",
    "fish": "fish/vendor_completions.d/{name}.fish",
}


@dataclass(frozen=True)
class InstallTarget:
    name: str
    binary_path: Path
    completions_dir: Path
    docs_dir: Path

    @classmethod
    def for_prefix(cls, prefix: str | Path, name: str = "pass-cli") -> "InstallTarget":
        p = Path(prefix).expanduser()
        return cls(
            name=name,
            binary_path=p / "bin" / name,
            completions_dir=p / "share",
            docs_dir=p / "share" / "doc" / name,
        )

    def completion_path(self, shell: str) -> Path:
        try:
            rel = COMPLETION_PATHS[shell]
        except KeyError:
            raise ValueError(f"Unsupported completion shell: {shell}") from None
        return self.completions_dir / rel.format(name=self.name)
