"""In-memory collaborators for update repository tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Sequence

from core.errors import PackageDownloadError, PackageExtractionError
from core.types import CommandResult, SourceConfig
from update.commands import Command


@dataclass
class FakeResolver:
    """Resolver double recording every call it receives."""

    probed: str | None = "RPMMD"
    source_id: int = 1
    refreshed: bool = True
    resolvables: list[Mapping[str, object]] = field(default_factory=list)
    remote_schemes: tuple[str, ...] = ("http", "https", "ftp", "nfs")
    calls: list[tuple[str, tuple[object, ...]]] = field(default_factory=list)
    added_configs: list[SourceConfig] = field(default_factory=list)

    def probe(self, url: str, product_dir: str) -> str | None:
        self.calls.append(("probe", (url, product_dir)))
        return self.probed

    def add_source(self, config: SourceConfig) -> int:
        self.calls.append(("add_source", (config,)))
        self.added_configs.append(config)
        return self.source_id

    def refresh(self, source_id: int) -> bool:
        self.calls.append(("refresh", (source_id,)))
        return self.refreshed

    def load_sources(self) -> bool:
        self.calls.append(("load_sources", ()))
        return True

    def list_resolvables(self, kind: str) -> Sequence[Mapping[str, object]]:
        self.calls.append(("list_resolvables", (kind,)))
        return list(self.resolvables)

    def provide_package(self, source_id: int, name: str, destination: Path) -> bool:
        self.calls.append(("provide_package", (source_id, name, destination)))
        destination.write_bytes(b"package")
        return True

    def delete_source(self, source_id: int) -> bool:
        self.calls.append(("delete_source", (source_id,)))
        return True

    def release_all(self) -> bool:
        self.calls.append(("release_all", ()))
        return True

    def save_all(self) -> bool:
        self.calls.append(("save_all", ()))
        return True

    def url_scheme_is_remote(self, scheme: str) -> bool:
        self.calls.append(("url_scheme_is_remote", (scheme,)))
        return scheme in self.remote_schemes

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeRunner:
    """Process runner that records commands and creates squashfs outputs."""

    def __init__(self, exit_codes: Mapping[str, int] | None = None) -> None:
        self.exit_codes = dict(exit_codes or {})
        self.commands: list[Command] = []

    def run(self, command: Command) -> CommandResult:
        self.commands.append(command)
        exit_code = self.exit_codes.get(command.program, 0)
        if command.program == "mksquashfs":
            Path(command.args[1]).write_bytes(b"hsqs")
        if exit_code != 0:
            return CommandResult(exit_code=exit_code, stderr=f"{command.program} failed")
        return CommandResult(exit_code=0)

    def programs(self) -> list[str]:
        return [command.program for command in self.commands]


@dataclass
class FakeDownloader:
    """Downloader writing a stub payload, or failing on request."""

    source_id: int
    package_name: str
    fail: bool = False

    def download(self, destination: Path) -> None:
        if self.fail:
            raise PackageDownloadError(f"cannot fetch {self.package_name}")
        destination.write_bytes(self.package_name.encode("utf-8"))


@dataclass
class FakeExtractor:
    """Extractor writing one file into the destination, or failing on request."""

    package_file: Path
    fail: bool = False

    def extract(self, destination: Path) -> None:
        if self.fail:
            raise PackageExtractionError(f"cannot extract {self.package_file}")
        (destination / "payload.txt").write_bytes(self.package_file.read_bytes())


def downloader_factory(failing: set[str] | None = None) -> Callable[[int, str], FakeDownloader]:
    """Build a downloader factory that fails for the named packages."""
    failing_names = failing or set()

    def _factory(source_id: int, package_name: str) -> FakeDownloader:
        return FakeDownloader(source_id, package_name, fail=package_name in failing_names)

    return _factory


def extractor_factory(fail: bool = False) -> Callable[[Path], FakeExtractor]:
    """Build an extractor factory."""

    def _factory(package_file: Path) -> FakeExtractor:
        return FakeExtractor(package_file, fail=fail)

    return _factory


def package_payload(name: str, source: int) -> dict[str, object]:
    """Build a resolver resolvable payload."""
    return {"name": name, "path": f"./x86_64/{name}-3.1.x86_64.rpm", "source": source}
