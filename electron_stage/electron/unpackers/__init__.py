"""
Distribution unpackers.

An unpacker obtains the Electron runtime for a target (download, cache,
extract) and writes it into the stage directory. The production
implementation shells out to the ``app-builder`` worker; tests register an
in-memory one.

Unpackers register themselves via the @register_unpacker decorator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Type

from electron_stage.core.models import DownloadOptions


class AcquisitionError(Exception):
    """Raised when the stage directory cannot be populated."""

    pass


class UnpackError(AcquisitionError):
    """Raised when the unpack worker fails."""

    pass


class DistributionUnpacker(ABC):
    """
    Base class for unpack strategies.

    Subclasses must define:
    - name: Unique unpacker identifier (e.g., "app-builder")
    """

    name: str

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if ABC in cls.__bases__:
            return
        if not getattr(cls, "name", None):
            raise TypeError(f"{cls.__name__} must define 'name' class attribute")

    @staticmethod
    def is_available() -> bool:
        """True when this unpacker can run in the current environment."""
        return True

    @abstractmethod
    def unpack(self, options: Sequence[DownloadOptions], output: Path, dist_mac_os_app_name: str) -> None:
        """Populate ``output`` with the distribution described by ``options``.

        Raises:
            UnpackError: If the distribution cannot be obtained.
        """
        pass


_UNPACKERS: Dict[str, Type[DistributionUnpacker]] = {}


def register_unpacker(cls: Type[DistributionUnpacker]) -> Type[DistributionUnpacker]:
    _UNPACKERS[cls.name] = cls
    return cls


def get_unpacker(name: Optional[str] = None) -> DistributionUnpacker:
    """Instance of the named unpacker, or the first available one."""
    if name is not None:
        try:
            return _UNPACKERS[name]()
        except KeyError:
            raise ValueError(f"Unknown unpacker: {name}") from None

    for unpacker_cls in _UNPACKERS.values():
        if unpacker_cls.is_available():
            return unpacker_cls()
    raise UnpackError(f"No distribution unpacker available (registered: {', '.join(_UNPACKERS) or 'none'})")


def list_unpackers() -> List[str]:
    return list(_UNPACKERS)


# Import implementations to trigger registration
from electron_stage.electron.unpackers import app_builder  # noqa: F401, E402
