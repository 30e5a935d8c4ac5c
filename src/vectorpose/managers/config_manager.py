"""
Config Manager

Loads the declarative pose configuration (YAML or JSON, inline or from a
file), resolves `include:` directives and validates the result into a
PoseConfig. Every failure surfaces as ConfigurationError.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from vectorpose.models.config import PoseConfig
from vectorpose.models.enums import LogCategory
from vectorpose.models.errors import ConfigurationError
from vectorpose.utils.logger import get_logger

log = get_logger().for_category(LogCategory.CONFIG)

ConfigSource = Union[PoseConfig, Dict[str, Any], str, Path]

_FILE_SUFFIXES = (".yaml", ".yml", ".json")


def _format_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


def _merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Merge overlay into base; nested mappings (routes, actions) merge one level deep"""
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """
    Configuration manager with include system support

    Accepts a dict, an inline YAML/JSON string, or a path to a .yaml/.yml/.json
    file. A document may list sibling files under `include:`; their keys are
    merged in order and the including document's own keys win.

    Example:
        config = ConfigManager("poses/walker.yaml").load()

        config.initial_state           # "center"
        config.actions["shuffle"].kind # ActionKind.LOOP
    """

    def __init__(self, source: ConfigSource, base_dir: Optional[Path] = None):
        """
        Initialize ConfigManager

        Args:
            source: Config dict, inline text, file path, or an already-built PoseConfig
            base_dir: Directory for resolving includes of inline sources (default: cwd)
        """
        self.source = source
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.data: Dict[str, Any] = {}
        self._config: Optional[PoseConfig] = None

    @property
    def config(self) -> PoseConfig:
        if self._config is None:
            return self.load()
        return self._config

    def load(self) -> PoseConfig:
        """
        Load, merge includes, and validate

        Raises:
            ConfigurationError: Unreadable source, invalid YAML/JSON, or schema violation
        """
        if isinstance(self.source, PoseConfig):
            self._config = self.source
            return self._config

        raw, base_dir = self._read_source(self.source)

        if "include" in raw:
            includes = raw.pop("include")
            if not isinstance(includes, list) or not all(isinstance(i, str) for i in includes):
                raise ConfigurationError('"include" must be an array of file names')
            log.info("Using include-based configuration", files=len(includes))
            raw = _merge(self._load_with_includes(includes, base_dir), raw)

        self.data = raw

        try:
            self._config = PoseConfig.model_validate(raw)
        except ValidationError as e:
            message = _format_validation_error(e)
            log.error("Invalid configuration", problems=message)
            raise ConfigurationError(f"Invalid configuration: {message}") from e

        for action_name, action in self._config.actions.items():
            if action.is_noop:
                log.warn(f'Action "{action_name}" has no valid order, it will be a no-op')

        log.info(
            "Configuration loaded",
            name=self._config.name,
            initial_state=self._config.initial_state,
            routes=len(self._config.routes),
            actions=len(self._config.actions),
        )
        return self._config

    # ------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------

    def _read_source(self, source: Union[Dict[str, Any], str, Path]):
        if isinstance(source, dict):
            return dict(source), self.base_dir

        if isinstance(source, Path) or self._looks_like_path(source):
            path = Path(source)
            return self._read_file(path), path.parent

        if isinstance(source, str):
            return self._parse_text(source, "<inline>"), self.base_dir

        raise ConfigurationError("Configuration must be a mapping, YAML/JSON text, or a file path")

    @staticmethod
    def _looks_like_path(source: Any) -> bool:
        if not isinstance(source, str) or "\n" in source or source.lstrip().startswith("{"):
            return False
        if source.strip().lower().endswith(_FILE_SUFFIXES):
            return True
        try:
            return Path(source).is_file()
        except OSError:
            return False

    def _read_file(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            log.error(f"Cannot read {path}", error=str(e))
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
        return self._parse_text(text, str(path))

    @staticmethod
    def _parse_text(text: str, origin: str) -> Dict[str, Any]:
        try:
            if origin.lower().endswith(".json"):
                data = json.loads(text)
            else:
                # YAML is a superset of JSON, so inline JSON parses here too
                data = yaml.safe_load(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Invalid configuration syntax in {origin}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration in {origin} must be an object")
        return data

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        """
        Load and merge multiple files from an include list

        Args:
            include_list: File names relative to config_dir (e.g. ["routes.yaml", "actions.yaml"])
            config_dir: Directory containing the included files

        Returns:
            Merged config dict
        """
        merged: Dict[str, Any] = {}

        for filename in include_list:
            file_data = self._read_file(config_dir / filename)
            file_data.pop("include", None)
            merged = _merge(merged, file_data)
            log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))

        return merged


def load_config(source: ConfigSource, base_dir: Optional[Path] = None) -> PoseConfig:
    """Shortcut for ConfigManager(source, base_dir).load()"""
    return ConfigManager(source, base_dir).load()
