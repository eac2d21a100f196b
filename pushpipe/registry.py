"""Extension registry for process-wide helper functions.

Helpers are installed once (usually at startup) and looked up by name
afterwards. cancel and off are always installed.

Extensions can also be declared in a YAML file:

    # extensions.yaml
    double: "myapp.stages:double"
    slow_double:
      target: "myapp.stages:slow_double"
      enabled: false
"""

import importlib
import logging
from typing import Any, Callable, Dict, List, Optional

import yaml

from .config import get_config
from .errors import ExtensionCollisionError, InvalidExtensionError
from .signals import cancel, off

logger = logging.getLogger(__name__)

BUILTIN_EXTENSIONS: Dict[str, Callable[..., Any]] = {
    "cancel": cancel,
    "off": off,
}


class ExtensionRegistry:
    """Name to function map that refuses to overwrite an existing name."""

    def __init__(self, builtins: Optional[Dict[str, Callable[..., Any]]] = None):
        self._extensions: Dict[str, Callable[..., Any]] = {}
        for name, fn in (builtins or {}).items():
            self.install(name, fn)

    def install(self, name: str, fn: Callable[..., Any]) -> "ExtensionRegistry":
        """
        Register fn under name.

        Args:
            name: Non-empty Python identifier
            fn: Callable to register

        Returns:
            The registry, for chaining

        Raises:
            InvalidExtensionError: If name or fn is invalid
            ExtensionCollisionError: If name is already installed
        """
        if not isinstance(name, str) or not name.isidentifier():
            raise InvalidExtensionError(
                f"Please provide a name (as identifier string) for your extension, got {name!r}"
            )
        if not callable(fn):
            raise InvalidExtensionError(
                f"Please provide a function for your extension {name}"
            )
        if name in self._extensions:
            raise ExtensionCollisionError(name)

        self._extensions[name] = fn
        logger.info(f"Installed extension: {name}")
        return self

    def get(self, name: str) -> Optional[Callable[..., Any]]:
        """Get extension by name, or None if not installed."""
        return self._extensions.get(name)

    def names(self) -> List[str]:
        return list(self._extensions)

    def load(self, path: str) -> List[str]:
        """
        Install every enabled extension declared in a YAML file.

        Args:
            path: YAML mapping of name -> "module:attribute" or
                  name -> {target: "module:attribute", enabled: bool}

        Returns:
            Names installed from the file

        Raises:
            InvalidExtensionError: Malformed file, entry, or unimportable target
            ExtensionCollisionError: If a name is already installed
        """
        with open(path, "r") as f:
            configs = yaml.safe_load(f) or {}

        if not isinstance(configs, dict):
            raise InvalidExtensionError(f"{path} must contain a mapping of extension names")

        installed = []
        for name, entry in configs.items():
            if isinstance(entry, dict):
                if not entry.get("enabled", True):
                    logger.debug(f"Extension {name} disabled (skipping)")
                    continue
                target = entry.get("target")
            else:
                target = entry

            if not isinstance(target, str):
                raise InvalidExtensionError(f"Extension {name} has no target in {path}")

            self.install(name, resolve_target(target))
            installed.append(name)

        return installed

    def __contains__(self, name: object) -> bool:
        return name in self._extensions

    def __len__(self) -> int:
        return len(self._extensions)

    def __repr__(self) -> str:
        return f"ExtensionRegistry(extensions={self.names()})"


def resolve_target(target: str) -> Callable[..., Any]:
    """
    Import the object referenced by "package.module:attribute".

    Raises:
        InvalidExtensionError: If the reference is malformed or cannot be imported
    """
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise InvalidExtensionError(f"Invalid extension target format: {target}")

    try:
        obj: Any = importlib.import_module(module_name)
        for part in attribute.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        logger.error(f"Failed to import extension target {target}: {e}")
        raise InvalidExtensionError(f"Cannot import extension target {target}") from e

    return obj


_registry = ExtensionRegistry(BUILTIN_EXTENSIONS)


def get_registry() -> ExtensionRegistry:
    """Get the process-wide extension registry."""
    return _registry


def reset_registry() -> ExtensionRegistry:
    """Replace the process-wide registry with one holding only the builtins."""
    global _registry
    _registry = ExtensionRegistry(BUILTIN_EXTENSIONS)
    return _registry


def install(name: str, fn: Callable[..., Any]) -> ExtensionRegistry:
    """Install an extension in the process-wide registry (see ExtensionRegistry.install)."""
    return _registry.install(name, fn)


def get_extension(name: str) -> Optional[Callable[..., Any]]:
    return _registry.get(name)


def list_extensions() -> List[str]:
    return _registry.names()


def load_extensions(path: Optional[str] = None) -> List[str]:
    """
    Load extensions from a YAML file into the process-wide registry.

    Args:
        path: YAML file, defaults to PUSHPIPE_EXTENSIONS_FILE

    Returns:
        Names installed (empty when no file is configured)
    """
    path = path or get_config().extensions_file
    if not path:
        logger.debug("No extensions file configured")
        return []
    return _registry.load(path)
