from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .core.confirm import ConfirmMode
from .domain.models import OverwritePolicy


class LoggingConfig(BaseModel):
    level: str = Field("WARNING")
    file_name: str | None = Field(None)  # relative to workdir

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"invalid log level: {value}")
        return level


class ArtifactsConfig(BaseModel):
    passwords_file: str = Field("passwords.txt")
    md5_file: str = Field("md5_hashes.txt")
    sha256_file: str = Field("sha256_hashes.txt")
    sha512crypt_file: str = Field("sha512crypt_hashes.txt")
    wordlist_file: str = Field("small_wordlist.txt")
    salted_label: str = Field("user")
    overwrite: OverwritePolicy = Field(OverwritePolicy.KEEP)

    @field_validator("passwords_file", "md5_file", "sha256_file", "sha512crypt_file", "wordlist_file")
    @classmethod
    def _validate_file_name(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(f"artifact file name must be a plain file name: {value!r}")
        return value

    @field_validator("salted_label")
    @classmethod
    def _validate_label(cls, value: str) -> str:
        if not value or ":" in value or any(c.isspace() for c in value):
            raise ValueError("salted_label must be non-empty without ':' or whitespace")
        return value


class HashingConfig(BaseModel):
    salt_length: int = Field(8, ge=1, le=16)
    sha512_rounds: int = Field(5000, ge=1000, le=999_999_999)


class JohnConfig(BaseModel):
    enabled: bool = Field(True)
    path: str = Field("john")
    pot_file: str | None = Field(None)  # None = john's own default potfile


class HashcatConfig(BaseModel):
    enabled: bool = Field(True)
    path: str = Field("hashcat")
    potfile_name: str = Field("hashcat.pot")  # kept inside the lab directory
    mask: str = Field("?l?l?l?l?l?l?d?d")
    rules_file: str | None = Field(None)
    workload_profile: int | None = Field(None, ge=1, le=4)

    @field_validator("mask")
    @classmethod
    def _validate_mask(cls, value: str) -> str:
        if not value or any(c.isspace() for c in value):
            raise ValueError("mask cannot be empty or contain whitespace")
        return value


class ToolsConfig(BaseModel):
    confirm: ConfirmMode = Field(ConfirmMode.ASK)
    wordlist: str | None = Field(None)  # known name ("rockyou") or path; None = small wordlist
    john: JohnConfig = Field(default_factory=JohnConfig)
    hashcat: HashcatConfig = Field(default_factory=HashcatConfig)

    def executables(self) -> dict[str, str]:
        tools: dict[str, str] = {}
        if self.john.enabled:
            tools["john"] = self.john.path
        if self.hashcat.enabled:
            tools["hashcat"] = self.hashcat.path
        return tools


class InstallerConfig(BaseModel):
    package_manager: str = Field("auto")

    @field_validator("package_manager")
    @classmethod
    def _validate_pm(cls, value: str) -> str:
        if value not in ("auto", "brew", "apt-get"):
            raise ValueError(f"unsupported package manager: {value}")
        return value


class LabConfig(BaseModel):
    workdir: Path = Field(Path("~/password_lab"), validate_default=True)
    artifacts: ArtifactsConfig = Field(default_factory=ArtifactsConfig)
    hashing: HashingConfig = Field(default_factory=HashingConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    installer: InstallerConfig = Field(default_factory=InstallerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("workdir")
    @classmethod
    def _expand_workdir(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def hashcat_potfile(self) -> Path:
        return self.workdir / self.tools.hashcat.potfile_name

    @property
    def log_file(self) -> Path | None:
        if not self.logging.file_name:
            return None
        return self.workdir / self.logging.file_name


def load_config(path: Path | None) -> LabConfig:
    """Load YAML config from PATH; missing PATH means defaults."""
    if path is None or not Path(path).expanduser().exists():
        return LabConfig()
    with Path(path).expanduser().open("r", encoding="utf-8") as fp:
        raw = yaml.safe_load(fp) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    try:
        return LabConfig.model_validate(raw)
    except ValidationError as exc:  # pragma: no cover - formatting
        raise ValueError(str(exc)) from exc


def resolve_config_path(cli_path: Path | None) -> Path:
    """Resolve config path by priority: CLI, env, user config dir, repo configs."""
    candidates: list[Path] = []
    if cli_path:
        p = Path(cli_path).expanduser()
        if p.exists():
            return p.resolve()
        candidates.append(p)
    env = os.environ.get("PWLAB_CONFIG")
    if env:
        p = Path(env).expanduser()
        if p.exists():
            return p.resolve()
        candidates.append(p)
    for p in [Path("~/.config/pwlab/pwlab.yml").expanduser(), Path("configs/pwlab.yml")]:
        if p.exists():
            return p.resolve()
        candidates.append(p)
    # Fallback to first candidate even if not exists; load_config then uses defaults
    return candidates[0]
