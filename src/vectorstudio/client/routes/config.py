"""Shared configuration for route modules."""

from dataclasses import dataclass, field
from pathlib import Path

from vectorstudio.constants import ALLOWED_UPLOAD_EXTENSIONS
from vectorstudio.service.actions import StudioActions


@dataclass
class RouteConfig:
    """Configuration container for Flask route dependencies.

    Holds the actions object every route delegates to, so tests can swap
    in one backed by an in-process store.
    """

    actions: StudioActions | None = None
    upload_folder: Path | None = None
    allowed_extensions: set[str] = field(default_factory=lambda: set(ALLOWED_UPLOAD_EXTENSIONS))


# Single shared config instance
_config = RouteConfig()


def get_config() -> RouteConfig:
    """Get the shared route configuration.

    Returns:
        RouteConfig instance with current settings
    """
    return _config


def init_config(
    actions: StudioActions | None = None,
    upload_folder: Path | None = None,
) -> None:
    """Initialize the shared route configuration.

    Args:
        actions: StudioActions instance used by all routes
        upload_folder: Path to upload folder
    """
    if actions is not None:
        _config.actions = actions
    if upload_folder is not None:
        _config.upload_folder = upload_folder
