from daykit_core.config import Config, ScopePaths, config_path, load_config, save_config
from daykit_core.errors import (
    ConfigConflictError,
    ConfigError,
    DaykitError,
    DestinationExistsError,
    DuplicateMemberError,
    IoError,
    MalformedManifestError,
    ManifestNotFoundError,
    ManifestParseError,
    NotFoundError,
    TemplateError,
    TransportError,
)
from daykit_core.manifest import Manifest, add_member, load_manifest
from daykit_core.paths import PathOptions, absolutize, reconcile, reconcile_scope
from daykit_core.scaffold import clear_templates, initialize, initialize_scope, unit_name
from daykit_core.templates import TEMPLATE_FILES, TemplateFetcher, ensure_templates, render
from daykit_core.writes import append_if_absent, ensure_file, write_new

__all__ = [
    "TEMPLATE_FILES",
    "Config",
    "ConfigConflictError",
    "ConfigError",
    "DaykitError",
    "DestinationExistsError",
    "DuplicateMemberError",
    "IoError",
    "MalformedManifestError",
    "Manifest",
    "ManifestNotFoundError",
    "ManifestParseError",
    "NotFoundError",
    "PathOptions",
    "ScopePaths",
    "TemplateError",
    "TemplateFetcher",
    "TransportError",
    "absolutize",
    "add_member",
    "append_if_absent",
    "clear_templates",
    "config_path",
    "ensure_file",
    "ensure_templates",
    "initialize",
    "initialize_scope",
    "load_config",
    "load_manifest",
    "reconcile",
    "reconcile_scope",
    "render",
    "save_config",
    "unit_name",
    "write_new",
]
