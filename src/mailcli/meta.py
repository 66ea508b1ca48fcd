"""Package metadata for mailcli."""

__app_name__ = "mailcli"
__version__ = "0.1.0"
__description__ = "Compose and send a single email from the command line"
__license_type__ = "MIT"

__all__ = ["__app_name__", "__description__", "__license_type__", "__version__"]
