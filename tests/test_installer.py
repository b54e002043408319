"""
Tests for install orchestration and the action entry point.

Unit tests replace the tool cache with FakeToolCache and mock the releases
API with responses; the integration class installs into a real LocalToolCache.
"""

import io
import logging
import os
import tarfile
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import responses

from setup_inspequte.config import SetupSettings
from setup_inspequte.core.exceptions import DownloadError
from setup_inspequte.core.tool_cache import LocalToolCache
from setup_inspequte.installer import (
    InspequteInstaller,
    SetupOutcome,
    apply_outcome,
    build_installer,
    run,
)
from setup_inspequte.release.fetcher import ReleaseFetcher
from setup_inspequte.release.models import Release, ReleaseAsset
from setup_inspequte.runner import ActionsRunner
from tests.mocks import (
    RELEASES_URL,
    asset_json,
    cli_asset_name,
    release_by_tag_url,
    release_json,
)

LINUX_ASSET = cli_asset_name("v0.13.0", "x86_64-unknown-linux-gnu")
LINUX_URL = f"https://example.com/download/{LINUX_ASSET}"


def _runner(temp_dir: Path):
    output_file = temp_dir / "github_output"
    path_file = temp_dir / "github_path"
    output_file.touch()
    path_file.touch()
    environ = {
        "GITHUB_OUTPUT": str(output_file),
        "GITHUB_PATH": str(path_file),
        "PATH": "/usr/bin",
    }
    return ActionsRunner(environ=environ, stdout=io.StringIO()), output_file, path_file


def _installer(tool_cache, platform="linux", arch="x64"):
    return InspequteInstaller(tool_cache, ReleaseFetcher(), platform=platform, arch=arch)


class TestSetupOutcome:
    def test_success(self):
        outcome = SetupOutcome.success("inspequte-v1.0.0", "/opt/tool")

        assert outcome.succeeded
        assert outcome.tool_path == Path("/opt/tool")
        assert outcome.from_cache is False

    def test_failure(self):
        outcome = SetupOutcome.failure("boom")

        assert not outcome.succeeded
        assert outcome.tag_name is None
        assert outcome.tool_path is None


class TestInstall:
    """Test InspequteInstaller.install()."""

    @responses.activate
    def test_latest_install_on_cache_miss(self, fake_tool_cache):
        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[release_json("inspequte-v0.13.0", [asset_json(LINUX_ASSET)])],
        )

        outcome = _installer(fake_tool_cache).install("")

        assert outcome == SetupOutcome.success(
            "inspequte-v0.13.0", Path("/tmp/cached-tool")
        )
        assert fake_tool_cache.calls == [
            ("find", "inspequte", "0.13.0", "x64"),
            ("download_tool", LINUX_URL),
            ("extract_tar", Path("/tmp/inspequte-archive")),
            ("cache_dir", Path("/tmp/extracted"), "inspequte", "0.13.0", "x64"),
        ]

    @responses.activate
    def test_cache_hit_skips_download(self, fake_tool_cache):
        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[release_json("inspequte-v0.13.0", [asset_json(LINUX_ASSET)])],
        )
        fake_tool_cache.add_entry("inspequte", "0.13.0", "x64", "/cache/inspequte")

        outcome = _installer(fake_tool_cache).install("")

        assert outcome.succeeded
        assert outcome.from_cache is True
        assert outcome.tool_path == Path("/cache/inspequte")
        assert fake_tool_cache.calls_to("download_tool") == []
        assert fake_tool_cache.calls_to("cache_dir") == []

    @responses.activate
    def test_pinned_install_requests_tag(self, fake_tool_cache):
        responses.add(
            responses.GET,
            release_by_tag_url("inspequte-v0.13.0"),
            json=release_json("inspequte-v0.13.0", [asset_json(LINUX_ASSET)]),
        )

        outcome = _installer(fake_tool_cache).install("v0.13.0")

        assert outcome.tag_name == "inspequte-v0.13.0"
        assert len(responses.calls) == 1
        assert responses.calls[0].request.url == release_by_tag_url(
            "inspequte-v0.13.0"
        )

    @responses.activate
    def test_windows_uses_zip(self, fake_tool_cache):
        asset = cli_asset_name("v0.13.0", "x86_64-pc-windows-msvc", "zip")
        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[
                release_json(
                    "inspequte-v0.13.0",
                    [asset_json(LINUX_ASSET), asset_json(asset)],
                )
            ],
        )

        outcome = _installer(fake_tool_cache, platform="win32").install("")

        assert outcome.succeeded
        assert fake_tool_cache.calls_to("extract_zip") == [
            ("extract_zip", Path("/tmp/inspequte-archive"))
        ]
        assert fake_tool_cache.calls_to("extract_tar") == []
        assert fake_tool_cache.calls_to("download_tool") == [
            ("download_tool", f"https://example.com/download/{asset}")
        ]

    def test_unsupported_platform(self, fake_tool_cache):
        fetcher = Mock(spec=ReleaseFetcher)
        installer = InspequteInstaller(
            fake_tool_cache, fetcher, platform="linux", arch="ppc64"
        )

        outcome = installer.install("")

        assert outcome.error == "Unsupported platform/arch combination: linux/ppc64"
        fetcher.get_releases.assert_not_called()
        assert fake_tool_cache.calls == []

    @responses.activate
    def test_registry_failure(self, fake_tool_cache):
        responses.add(responses.GET, RELEASES_URL, json={}, status=500)

        outcome = _installer(fake_tool_cache).install("")

        assert outcome.error == (
            "Failed to fetch inspequte releases: 500 Internal Server Error"
        )
        assert fake_tool_cache.calls == []

    @responses.activate
    def test_download_failure_is_reported(self, fake_tool_cache):
        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[release_json("inspequte-v0.13.0", [asset_json(LINUX_ASSET)])],
        )
        fake_tool_cache.download_tool = Mock(side_effect=DownloadError("network down"))

        outcome = _installer(fake_tool_cache).install("")

        assert outcome.error == "network down"
        assert fake_tool_cache.calls_to("cache_dir") == []

    @responses.activate
    def test_unexpected_error_is_reported(self, fake_tool_cache):
        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[release_json("inspequte-v0.13.0", [asset_json(LINUX_ASSET)])],
        )
        fake_tool_cache.extract_tar = Mock(
            side_effect=EOFError("Compressed file ended before the end-of-stream")
        )

        outcome = _installer(fake_tool_cache).install("")

        assert outcome.error == "Compressed file ended before the end-of-stream"
        assert fake_tool_cache.calls_to("cache_dir") == []

    def test_detects_host_when_not_given(self, fake_tool_cache):
        with patch("setup_inspequte.core.platform.sys.platform", "darwin"), patch(
            "setup_inspequte.core.platform.platform.machine", return_value="arm64"
        ):
            installer = InspequteInstaller(fake_tool_cache, Mock(spec=ReleaseFetcher))

        assert (installer.platform, installer.arch) == ("darwin", "arm64")


class TestResolveOnly:
    def test_returns_target_asset_and_cache_version(self, fake_tool_cache):
        fetcher = Mock(spec=ReleaseFetcher)
        fetcher.get_release_by_tag.return_value = Release(
            tag_name="inspequte-v0.16.0",
            assets=(
                ReleaseAsset("inspequte-aarch64-apple-darwin.tar.gz", "https://e/mac"),
            ),
        )
        installer = InspequteInstaller(
            fake_tool_cache, fetcher, platform="darwin", arch="arm64"
        )

        target, resolved, cache_version = installer.resolve_only("0.16.0")

        assert target.target_triple == "aarch64-apple-darwin"
        assert resolved.download_url == "https://e/mac"
        assert cache_version == "0.16.0"
        assert fake_tool_cache.calls == []


class TestApplyOutcome:
    def test_success_sets_path_and_output(self, temp_dir):
        runner, output_file, path_file = _runner(temp_dir)

        apply_outcome(SetupOutcome.success("inspequte-v1.0.0", "/opt/tool"), runner)

        assert path_file.read_text() == f"{Path('/opt/tool')}\n"
        assert "inspequte-v1.0.0" in output_file.read_text()
        assert runner.failed is False

    def test_success_logs_location(self, temp_dir, caplog):
        runner, _, _ = _runner(temp_dir)

        with caplog.at_level(logging.INFO, logger="setup_inspequte.runner"):
            apply_outcome(SetupOutcome.success("inspequte-v1.0.0", "/opt/tool"), runner)

        expected = f"inspequte-v1.0.0 is available at {Path('/opt/tool')}"
        assert expected in caplog.text

    def test_failure_sets_failed(self, temp_dir):
        runner, output_file, path_file = _runner(temp_dir)

        apply_outcome(SetupOutcome.failure("boom"), runner)

        assert runner.failure_message == "boom"
        assert output_file.read_text() == ""
        assert path_file.read_text() == ""


class TestRun:
    """Test the action entry point."""

    @responses.activate
    def test_end_to_end_latest(self, temp_dir, fake_tool_cache):
        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[release_json("inspequte-v0.13.0", [asset_json(LINUX_ASSET)])],
        )
        runner, output_file, path_file = _runner(temp_dir)

        outcome = run("", runner=runner, installer=_installer(fake_tool_cache))

        assert outcome.succeeded
        assert path_file.read_text() == f"{Path('/tmp/cached-tool')}\n"
        assert "version<<" in output_file.read_text()
        assert "\ninspequte-v0.13.0\n" in output_file.read_text()
        assert runner.environ["PATH"].startswith(str(Path("/tmp/cached-tool")))
        assert len(fake_tool_cache.calls_to("download_tool")) == 1
        assert len(fake_tool_cache.calls_to("extract_tar")) == 1
        assert len(fake_tool_cache.calls_to("cache_dir")) == 1

    @responses.activate
    def test_end_to_end_cache_hit(self, temp_dir, fake_tool_cache):
        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[release_json("inspequte-v0.13.0", [asset_json(LINUX_ASSET)])],
        )
        fake_tool_cache.add_entry("inspequte", "0.13.0", "x64", "/cache/inspequte")
        runner, output_file, path_file = _runner(temp_dir)

        run("", runner=runner, installer=_installer(fake_tool_cache))

        assert path_file.read_text() == f"{Path('/cache/inspequte')}\n"
        assert "\ninspequte-v0.13.0\n" in output_file.read_text()
        assert fake_tool_cache.calls == [("find", "inspequte", "0.13.0", "x64")]

    @responses.activate
    def test_reads_version_input(self, temp_dir, fake_tool_cache):
        responses.add(
            responses.GET,
            release_by_tag_url("inspequte-v0.13.0"),
            json=release_json("inspequte-v0.13.0", [asset_json(LINUX_ASSET)]),
        )
        runner, _, _ = _runner(temp_dir)
        runner.environ["INPUT_VERSION"] = " 0.13.0 "

        outcome = run(runner=runner, installer=_installer(fake_tool_cache))

        assert outcome.tag_name == "inspequte-v0.13.0"

    @responses.activate
    def test_failure_writes_nothing(self, temp_dir, fake_tool_cache):
        responses.add(responses.GET, RELEASES_URL, json={}, status=500)
        runner, output_file, path_file = _runner(temp_dir)

        outcome = run("", runner=runner, installer=_installer(fake_tool_cache))

        assert not outcome.succeeded
        assert runner.failed is True
        assert runner.failure_message == (
            "Failed to fetch inspequte releases: 500 Internal Server Error"
        )
        assert runner.stdout.getvalue().startswith("::error::Failed to fetch")
        assert output_file.read_text() == ""
        assert path_file.read_text() == ""
        assert runner.environ["PATH"] == "/usr/bin"

    def test_settings_failure_is_reported(self, temp_dir):
        runner, output_file, _ = _runner(temp_dir)

        outcome = run("", runner=runner, config_file=temp_dir / "missing.yaml")

        assert not outcome.succeeded
        assert runner.failed is True
        assert "Configuration file not found" in runner.failure_message
        assert runner.stdout.getvalue().startswith("::error::Configuration file")
        assert output_file.read_text() == ""

    def test_build_failure_is_reported(self, temp_dir):
        runner, _, _ = _runner(temp_dir)

        with patch(
            "setup_inspequte.installer.build_installer",
            side_effect=OSError("read-only file system"),
        ):
            outcome = run("", runner=runner, settings=SetupSettings())

        assert outcome.error == "read-only file system"
        assert runner.failed is True


class TestBuildInstaller:
    def test_wires_settings(self, temp_dir):
        settings = SetupSettings(
            api_url="https://ghe.example.com/api/v3",
            token="secret",
            tool_cache_dir=temp_dir / "cache",
            temp_dir=temp_dir / "tmp",
            timeout=7,
        )

        installer = build_installer(settings)

        assert isinstance(installer.tool_cache, LocalToolCache)
        assert installer.tool_cache.cache_root == temp_dir / "cache"
        assert installer.tool_cache.timeout == 7
        assert installer.fetcher.api_url == "https://ghe.example.com/api/v3"
        assert installer.fetcher.token == "secret"
        assert (temp_dir / "cache").is_dir()


@pytest.mark.integration
class TestInstallIntoLocalCache:
    """Install through the real filesystem tool cache."""

    @responses.activate
    def test_second_install_uses_cache(self, temp_dir):
        archive = temp_dir / "asset.tar.gz"
        binary = temp_dir / "inspequte"
        binary.write_text("#!/bin/sh\necho inspequte\n")
        with tarfile.open(archive, "w:gz") as tar:
            tar.add(binary, arcname="inspequte")

        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[release_json("inspequte-v0.13.0", [asset_json(LINUX_ASSET)])],
        )
        responses.add(responses.GET, LINUX_URL, body=archive.read_bytes())
        settings = SetupSettings(
            tool_cache_dir=temp_dir / "cache", temp_dir=temp_dir / "tmp"
        )

        installer = build_installer(settings)
        installer.platform, installer.arch = "linux", "x64"
        first = installer.install("")
        second = installer.install("")

        assert first.succeeded and not first.from_cache
        assert (first.tool_path / "inspequte").exists()
        assert second.from_cache is True
        assert second.tool_path == first.tool_path
        downloads = [c for c in responses.calls if c.request.url == LINUX_URL]
        assert len(downloads) == 1
        assert os.path.isfile(first.tool_path / "inspequte")

    @responses.activate
    def test_truncated_archive_is_reported(self, temp_dir):
        """A download cut short fails the install instead of raising."""
        archive = temp_dir / "asset.tar.gz"
        with tarfile.open(archive, "w:gz") as tar:
            info = tarfile.TarInfo("inspequte")
            payload = os.urandom(64 * 1024)
            info.size = len(payload)
            tar.addfile(info, io.BytesIO(payload))
        data = archive.read_bytes()

        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[release_json("inspequte-v0.13.0", [asset_json(LINUX_ASSET)])],
        )
        responses.add(responses.GET, LINUX_URL, body=data[: len(data) // 2])
        settings = SetupSettings(
            tool_cache_dir=temp_dir / "cache", temp_dir=temp_dir / "tmp"
        )
        installer = build_installer(settings)
        installer.platform, installer.arch = "linux", "x64"

        outcome = installer.install("")

        assert not outcome.succeeded
        assert "Failed to extract" in outcome.error
        assert installer.tool_cache.find("inspequte", "0.13.0", "x64") == ""
