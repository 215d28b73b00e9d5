"""Pytest configuration and shared fixtures for bedrock_updater tests."""

import io
import stat
import tempfile
import zipfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from bedrock_updater.core.config import UpdaterConfig

DOWNLOAD_BASE = "https://www.minecraft.net/bedrockdedicatedserver/bin-linux"


def build_zip(files: dict[str, bytes], executables: tuple[str, ...] = ()) -> bytes:
    """Build an in-memory zip archive from a name -> content mapping."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in files.items():
            info = zipfile.ZipInfo(name)
            info.create_system = 3
            mode = 0o755 if name in executables else 0o644
            info.external_attr = (stat.S_IFREG | mode) << 16
            archive.writestr(info, content)
    return buffer.getvalue()


def download_page(*links: str, platform: str = "serverBedrockLinux") -> str:
    """Render a download page with one anchor per link."""
    anchors = "\n".join(
        f'<a class="btn downloadlink" role="button" href="{link}" '
        f'data-platform="{platform}">Download</a>'
        for link in links
    )
    return f"""<!DOCTYPE html>
<html lang="en">
<head><title>Bedrock Dedicated Server</title></head>
<body>
  <div class="server-card">
    <a class="downloadlink" href="{DOWNLOAD_BASE}/bedrock-server-1.0.0.0.zip"
       data-platform="serverBedrockWindows">Windows</a>
    {anchors}
  </div>
</body>
</html>"""


class FakeSource:
    """In-memory page and archive transport."""

    def __init__(self, page: str, archives: dict[str, bytes] | None = None):
        self.page = page
        self.archives = archives or {}
        self.page_requests: list[str] = []
        self.downloads: list[str] = []

    def fetch_page(self, url: str) -> str:
        self.page_requests.append(url)
        return self.page

    def download(self, url: str) -> bytes:
        self.downloads.append(url)
        return self.archives[url]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def server_dir(temp_dir: Path) -> Path:
    """A live server installation with operator config and world data."""
    root = temp_dir / "server"
    root.mkdir()
    (root / "bedrock_server").write_bytes(b"binary v1")
    (root / "server.properties").write_text("server-name=Operator World\n")
    (root / "permissions.json").write_text('[{"permission": "operator"}]')
    (root / "worlds" / "Bedrock level").mkdir(parents=True)
    (root / "worlds" / "Bedrock level" / "level.dat").write_bytes(b"save data")
    return root


@pytest.fixture
def server_archive() -> bytes:
    """A release archive wrapped in a single top-level directory."""
    return build_zip(
        {
            "bedrock-server/bedrock_server": b"binary v2",
            "bedrock-server/server.properties": b"server-name=Dedicated Server\n",
            "bedrock-server/permissions.json": b"[]",
            "bedrock-server/allowlist.json": b"[]",
            "bedrock-server/release-notes.txt": b"notes",
            "bedrock-server/worlds/README.txt": b"worlds go here",
            "bedrock-server/behavior_packs/vanilla/manifest.json": b"{}",
        },
        executables=("bedrock-server/bedrock_server",),
    )


@pytest.fixture
def config() -> UpdaterConfig:
    """Default updater configuration."""
    return UpdaterConfig()


@pytest.fixture
def make_source() -> Callable[..., FakeSource]:
    """Factory for fake transports serving a single release."""

    def _make(file_name: str, archive: bytes = b"") -> FakeSource:
        url = f"{DOWNLOAD_BASE}/{file_name}"
        return FakeSource(download_page(url), {url: archive})

    return _make


# Pytest configuration
def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest settings."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:
    """Add the unit marker to every test not marked integration."""
    for item in items:
        if not any(marker.name == "integration" for marker in item.iter_markers()):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def zip_builder() -> Callable[..., bytes]:
    """Expose :func:`build_zip` to tests."""
    return build_zip


@pytest.fixture
def page_builder() -> Callable[..., str]:
    """Expose :func:`download_page` to tests."""
    return download_page
