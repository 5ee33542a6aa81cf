# This constant is put into a _version.py file by the release build. If it
# is present, then we want to import it here, so it can be reported.

try:
    from crosswalk._version import __version__
except (ModuleNotFoundError, ImportError):
    __version__ = None

__all__ = ["__version__"]
