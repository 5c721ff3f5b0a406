"""aliaslab: signal, spectrum and reconstruction engine for aliasing demos."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]

try:
    __version__: str = version("aliaslab")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
