"""Machine identifier (MID) derivation and caching."""

from __future__ import annotations

import hashlib
import logging
import re
import uuid
from pathlib import Path
from typing import Callable

import psutil

from tiauth.fs import read_json, write_json_atomic

_logger = logging.getLogger(__name__)

MID_FILENAME = "mid.json"

# Common names for wired adapters on Linux, macOS and Windows.
_WIRED_NAME_RE = re.compile(r"^(eth|en|Local Area Connection)")
_NULL_MAC = "00:00:00:00:00:00"

Interfaces = dict[str, dict[str, str | None]]


def list_interfaces() -> Interfaces:
    """Map each network interface name to its MAC address (or None)."""
    result: Interfaces = {}
    for name, addrs in psutil.net_if_addrs().items():
        mac = None
        for addr in addrs:
            if addr.family == psutil.AF_LINK and addr.address:
                mac = addr.address.replace("-", ":").lower()
                break
        result[name] = {"mac_address": mac}
    return result


def pick_mac_address(interfaces: Interfaces) -> str | None:
    """Prefer the first wired adapter by name, else the first MAC seen."""
    first_mac = None
    for name in sorted(interfaces):
        mac = (interfaces[name] or {}).get("mac_address")
        if not mac or mac == _NULL_MAC:
            continue
        if _WIRED_NAME_RE.match(name):
            return mac
        if first_mac is None:
            first_mac = mac
    return first_mac


def derive_mid(seed: str) -> str:
    return hashlib.md5(seed.encode("utf-8")).hexdigest()


class MachineIdentity:
    """Resolve and cache the MID stored in ``<home_dir>/mid.json``."""

    def __init__(
        self,
        home_dir: str | Path,
        interfaces: Callable[[], Interfaces] = list_interfaces,
    ) -> None:
        self.home_dir = Path(home_dir)
        self.mid_file = self.home_dir / MID_FILENAME
        self._interfaces = interfaces
        self._cached: str | None = None

    def resolve(self, supplied_mid: str | None = None) -> str:
        """Return the MID, generating and persisting one if necessary.

        A non-empty ``supplied_mid`` wins and is cached without touching disk.
        """
        if supplied_mid:
            self._cached = supplied_mid
            return supplied_mid
        if self._cached:
            return self._cached

        stored = self._load()
        if stored:
            self._cached = stored
            return stored

        seed = pick_mac_address(self._interfaces())
        if seed is None:
            _logger.debug("No MAC address found, seeding MID with a random UUID")
            seed = str(uuid.uuid4())

        mid = derive_mid(seed)
        write_json_atomic(self.mid_file, {"mid": mid})
        _logger.info("Generated new machine id in %s", self.mid_file)
        self._cached = mid
        return mid

    def reset(self) -> None:
        """Forget the in-process MID (the file is left alone)."""
        self._cached = None

    def _load(self) -> str | None:
        if not self.mid_file.exists():
            return None
        try:
            mid = read_json(self.mid_file).get("mid")
        except (OSError, ValueError, AttributeError) as exc:
            _logger.debug("Ignoring unreadable MID file %s: %s", self.mid_file, exc)
            return None
        if isinstance(mid, str) and mid:
            return mid
        return None
