from importlib.metadata import PackageNotFoundError, version


def get_client_version() -> str:
    """Get the version from the installed package metadata."""
    try:
        return version("horizon-client")
    except PackageNotFoundError:
        return "unknown"
