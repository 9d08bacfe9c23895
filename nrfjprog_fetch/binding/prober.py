"""
Capability probe for the nrfjprog binding.

The probe loads the configured binding module and asks it for the library
version. It never raises: every outcome is returned as a ProbeResult so the
caller can classify failures in one place.
"""

import importlib
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from nrfjprog_fetch.core.exceptions import BindingsNotFoundError
from nrfjprog_fetch.core.platform import PlatformConfig

logger = logging.getLogger(__name__)

DEFAULT_BINDING_MODULE = "nrfjprog_fetch.binding.native"


@dataclass(frozen=True)
class ProbeFailure:
    """
    A failed version query.

    Attributes:
        message: Human-readable error message
        errno: Numeric error code reported by the binding, if any
        errcode: Symbolic error name reported by the binding, if any
    """

    message: str
    errno: Optional[int] = None
    errcode: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ProbeFailure":
        errno = getattr(exc, "errno", None)
        errcode = getattr(exc, "errcode", None)
        return cls(
            message=str(exc),
            errno=errno if isinstance(errno, int) else None,
            errcode=errcode if isinstance(errcode, str) else None,
        )

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a capability probe: a version or a failure."""

    version: Optional[str] = None
    failure: Optional[ProbeFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def _names_binding(missing: Optional[str], module_name: str) -> bool:
    """Whether a missing module name is module_name or one of its parents."""
    if not missing:
        return False
    return missing == module_name or module_name.startswith(missing + ".")


def load_binding(module_name: str, config: PlatformConfig):
    """
    Import a binding module and return the object exposing get_library_version().

    A module may provide ``bind(config)`` to build a binding for the selected
    platform; otherwise the module itself is the binding.

    Args:
        module_name: Dotted module name of the binding
        config: Selected platform configuration

    Returns:
        Object with a ``get_library_version()`` method

    Raises:
        BindingsNotFoundError: If the module itself cannot be found
        ModuleNotFoundError: If the module imports a dependency that is missing
    """
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        # A missing dependency of the binding is not a missing binding
        if not _names_binding(e.name, module_name):
            raise
        raise BindingsNotFoundError(
            f"Could not locate the bindings file. Tried: {module_name} ({e})"
        ) from e

    factory = getattr(module, "bind", None)
    if callable(factory):
        return factory(config)
    return module


class CapabilityProber:
    """Load the binding and query its library version."""

    def __init__(
        self,
        config: PlatformConfig,
        module_name: str = DEFAULT_BINDING_MODULE,
        loader: Callable = load_binding,
    ):
        """
        Initialize the prober.

        Args:
            config: Selected platform configuration
            module_name: Binding module to import
            loader: Callable(module_name, config) returning the binding
        """
        self.config = config
        self.module_name = module_name
        self.loader = loader

    def probe(self) -> ProbeResult:
        """
        Run the version query.

        Returns:
            ProbeResult with the version, or the failure that prevented it
        """
        logger.debug(f"Probing nrfjprog binding {self.module_name}")
        try:
            binding = self.loader(self.module_name, self.config)
            version = binding.get_library_version()
        except Exception as e:
            failure = ProbeFailure.from_exception(e)
            logger.debug(
                f"Probe failed: {failure.message} "
                f"(errno={failure.errno}, errcode={failure.errcode})"
            )
            return ProbeResult(failure=failure)

        return ProbeResult(version=str(version))
