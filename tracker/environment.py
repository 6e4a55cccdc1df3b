# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: tracker/environment.py
# Purpose: Preflight checks for the Polymarket CLI collaborator
# =============================================================================
#
# FATAL (before the loop starts):
# - Unsupported OS / architecture
# - CLI binary missing or not runnable
#
# INFORMATIONAL:
# - Latest CLI release on GitHub (no API key needed)
#
# This module never installs or upgrades anything.
#
# =============================================================================

import logging
import platform
import re
import shutil
from pathlib import Path
from typing import Optional, Tuple

import requests

from collector.client import PolymarketCli
from tracker.errors import CollaboratorNotFoundError, UnsupportedPlatformError

logger = logging.getLogger(__name__)

CLI_REPO = "polymarket/polymarket-cli"
CLI_BINARY = "polymarket"
GITHUB_API_BASE = "https://api.github.com"
DEFAULT_TIMEOUT = 10

INSTALL_HINT = (
    f"Install it with:\n"
    f"  curl -sSL https://raw.githubusercontent.com/{CLI_REPO}/main/install.sh | sh\n"
    f"or set POLYMARKET_CLI / --cli to its path."
)

# (system, machine) -> release target triple
RELEASE_TARGETS = {
    ("Darwin", "x86_64"): "x86_64-apple-darwin",
    ("Darwin", "arm64"): "aarch64-apple-darwin",
    ("Linux", "x86_64"): "x86_64-unknown-linux-gnu",
    ("Linux", "aarch64"): "aarch64-unknown-linux-gnu",
    ("Linux", "arm64"): "aarch64-unknown-linux-gnu",
}

VERSION_PATTERN = re.compile(r"v?(\d+\.\d+\.\d+(?:[-+][\w.]+)?)")


def detect_release_target(
    system: Optional[str] = None,
    machine: Optional[str] = None,
) -> str:
    """
    Map the host platform to the CLI's release target triple.

    Raises:
        UnsupportedPlatformError: No build exists for this platform
    """
    system = system or platform.system()
    machine = machine or platform.machine()

    if system not in ("Darwin", "Linux"):
        raise UnsupportedPlatformError(f"Unsupported OS: {system}")

    target = RELEASE_TARGETS.get((system, machine))
    if target is None:
        raise UnsupportedPlatformError(f"Unsupported architecture: {machine}")
    return target


def release_asset_url(tag: str, target: str) -> str:
    """Download URL of the release archive for a tag and target."""
    return (
        f"https://github.com/{CLI_REPO}/releases/download/"
        f"{tag}/{CLI_BINARY}-{tag}-{target}.tar.gz"
    )


def parse_version(text: Optional[str]) -> Optional[str]:
    """'polymarket 0.1.4' -> '0.1.4'."""
    if not text:
        return None
    match = VERSION_PATTERN.search(text)
    return match.group(1) if match else None


def resolve_binary(binary: str) -> Path:
    """
    Locate the CLI on PATH or as a path.

    Raises:
        CollaboratorNotFoundError: If it cannot be found
    """
    found = shutil.which(binary)
    if found is None:
        raise CollaboratorNotFoundError(f"Polymarket CLI not found: {binary}\n{INSTALL_HINT}")
    return Path(found)


def ensure_collaborator(binary: str = CLI_BINARY, timeout: float = DEFAULT_TIMEOUT) -> Tuple[Path, str]:
    """
    Verify the CLI exists and answers --version.

    Returns:
        (resolved path, version string)

    Raises:
        CollaboratorNotFoundError: Missing, or --version fails
    """
    path = resolve_binary(binary)
    result = PolymarketCli(binary=str(path), timeout=timeout).version()
    if not result.success:
        raise CollaboratorNotFoundError(
            f"Polymarket CLI at {path} is not usable ({result.status.value}): "
            f"{result.error_message}\n{INSTALL_HINT}"
        )

    version = parse_version(result.stdout) or result.stdout.strip()
    logger.info(f"Polymarket CLI {version} at {path}")
    return path, version


def latest_release_tag(timeout: int = DEFAULT_TIMEOUT) -> Optional[str]:
    """
    Latest CLI release tag from GitHub, e.g. 'v0.1.4'.

    Returns None if the request fails.
    """
    try:
        resp = requests.get(
            f"{GITHUB_API_BASE}/repos/{CLI_REPO}/releases/latest",
            timeout=timeout,
            headers={
                "User-Agent": "PolymarketWindowTracker/1.0",
                "Accept": "application/vnd.github+json",
            },
        )
        resp.raise_for_status()
        tag = resp.json().get("tag_name")
    except requests.exceptions.Timeout:
        logger.warning(f"Release check: timeout after {timeout}s")
        return None
    except requests.exceptions.RequestException as e:
        logger.warning(f"Release check failed: {e}")
        return None
    except (ValueError, AttributeError) as e:
        logger.warning(f"Release check: unexpected response: {e}")
        return None

    if not isinstance(tag, str) or not tag:
        logger.warning("Release check: no tag_name in response")
        return None
    return tag


def is_update_available(current: Optional[str], latest_tag: Optional[str]) -> bool:
    """True if the latest tag differs from the installed version."""
    if not current or not latest_tag:
        return False
    return parse_version(latest_tag) != parse_version(current)
