"""Version information for workbloom."""

try:
    from importlib.metadata import version, PackageNotFoundError

    __version__ = version("workbloom")
except PackageNotFoundError:
    # Running from source without an installed distribution
    __version__ = "0.0.0+unknown"
