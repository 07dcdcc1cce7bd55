import configparser
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union, get_args, get_origin

from pydantic import BaseModel, SecretStr
from pydantic_settings import BaseSettings


class MONGOWRAP_LOGGER(BaseModel):
    USE_STRUCTLOG: bool


class MONGOWRAP_DIR_PATHS(BaseModel):
    ROOT: str
    LOGGER_DIR: str
    STRUCT_LOGGER_DIR: str


class MONGOWRAP_MONGO(BaseModel):
    DEFAULT_URI: SecretStr
    DEFAULT_DB: str
    DEFAULT_COLLECTION: str
    SERVER_SELECTION_TIMEOUT_MS: int
    CONNECT_TIMEOUT_MS: int
    APP_NAME: str


def load_ini_as_dict(ini_path: Path) -> Dict[str, Any]:
    """
    Load and parse an INI file into a nested dictionary with normalized keys.

    Sections and keys are converted to uppercase for uniform access. Tilde (`~`)
    in values is expanded to the user home directory.

    Args:
        ini_path (Path): Path to the `.ini` configuration file.

    Returns:
        Dict[str, Any]: A dictionary where each section is a key mapped to another
        dictionary of key-value pairs from that section.

    Example:
        .. code-block:: ini

            [MONGOWRAP_DIR_PATHS]
            LOGGER_DIR = ~/logs

        .. code-block:: python

            config = load_ini_as_dict(Path("config.ini"))
            print(config["MONGOWRAP_DIR_PATHS"]["LOGGER_DIR"])
    """
    if not ini_path.exists():
        return {}

    config = configparser.ConfigParser(interpolation=configparser.ExtendedInterpolation())
    config.optionxform = str
    config.read(ini_path)

    result = {}
    for section in config.sections():
        result[section.upper()] = {
            key.upper(): os.path.expanduser(value) if value.startswith("~") else value
            for key, value in config[section].items()
        }
    return result


def load_ini_settings() -> Dict[str, Any]:
    ini_path = Path(__file__).parent / "config.ini"
    return load_ini_as_dict(ini_path)


class CoreSettings(BaseSettings):
    MONGOWRAP_LOGGER: MONGOWRAP_LOGGER
    MONGOWRAP_DIR_PATHS: MONGOWRAP_DIR_PATHS
    MONGOWRAP_MONGO: MONGOWRAP_MONGO

    model_config = {
        "env_nested_delimiter": "__",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        def _expand_tilde(obj):
            if isinstance(obj, str):
                return os.path.expanduser(obj) if obj.startswith("~") else obj
            if isinstance(obj, dict):
                return {k: _expand_tilde(v) for k, v in obj.items()}
            return obj

        def env_settings_expanded():
            return _expand_tilde(env_settings())

        return (
            init_settings,  # constructor kwargs
            env_settings_expanded,  # env vars (with '~' expanded) take precedence
            dotenv_settings,  # then .env
            load_ini_settings,  # then INI file (lowest precedence)
            file_secret_settings,
        )


# Union alias used across the package for configuration overrides
SettingsLike = Union[
    Dict[str, Any],
    List[Union[Dict[str, Any], BaseSettings, BaseModel]],
    BaseSettings,
    BaseModel,
    None,
]


class _AttrView:
    """
    Lightweight attribute-access wrapper around a mapping.

    Enables access like obj.SECTION.KEY for nested dictionaries.
    """

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    def __getattr__(self, name: str):
        if name in self._data:
            return _wrap(self._data[name])
        raise AttributeError(f"No such attribute: {name}")

    def __getitem__(self, key: str):
        return _wrap(self._data[key])

    def __repr__(self) -> str:
        return f"_AttrView({self._data!r})"


def _wrap(value: Any) -> Any:
    if isinstance(value, dict):
        return _AttrView(value)
    if isinstance(value, list):
        return [(_AttrView(v) if isinstance(v, dict) else v) for v in value]
    return value


class Config(dict):
    """
    Unified configuration manager for mongowrap components.

    The `Config` class consolidates configuration from dictionaries and Pydantic `BaseSettings`
    or `BaseModel` objects, overlays environment variables (`SECTION__KEY`) and masks secrets.

    Key Features:
    -------------
    - Accepts `dict`, `BaseModel`, `BaseSettings`, or lists of these; later items win.
    - Attr-style and dict-style access to nested keys.
    - `pydantic.SecretStr` fields are masked; the real value is available via `get_secret`.
    - All leaf values are stored as strings, with `~` expanded.

    Args:
        extra_settings: Configuration overrides or full config objects.
        apply_env: Whether to overlay `SECTION__KEY` environment variables.

    Example:
        >>> from mongowrap.core.config import Config, CoreSettings
        >>> config = Config(CoreSettings())
        >>> config.MONGOWRAP_MONGO.DEFAULT_URI  # '********'
        >>> config.get_secret("MONGOWRAP_MONGO", "DEFAULT_URI")  # real value
    """

    def __init__(self, extra_settings: SettingsLike = None, *, apply_env: bool = True):
        self._secret_paths: set[Tuple[str, ...]] = set()
        self._secrets: Dict[Tuple[str, ...], str] = {}

        merged: Dict[str, Any] = {}
        for override in self._normalize(extra_settings):
            merged = self._deep_update(merged, override)

        # Overlay environment variables last so they can override provided settings
        if apply_env:
            merged = self._apply_env_overrides(merged)

        super().__init__(self._stringify_and_mask(merged))

    def __getattr__(self, name: str):
        """Enable attribute-style access for top-level keys."""
        if name in self:
            return _wrap(self[name])
        raise AttributeError(f"No such attribute: {name}")

    def _normalize(self, extra_settings: SettingsLike) -> List[Dict[str, Any]]:
        if extra_settings is None:
            return []
        items = extra_settings if isinstance(extra_settings, list) else [extra_settings]
        converted: List[Dict[str, Any]] = []
        for item in items:
            if isinstance(item, (BaseSettings, BaseModel)):
                self._secret_paths.update(self._collect_secret_paths_from_model(type(item)))
                converted.append(item.model_dump())
            elif isinstance(item, Config):
                self._secret_paths.update(item._secret_paths)
                converted.append(item.to_revealed())
            elif isinstance(item, dict):
                converted.append(deepcopy(item))
        return converted

    def get_secret(self, *path: str) -> Optional[str]:
        """Retrieve a secret by path components, e.g. get_secret("MONGOWRAP_MONGO", "DEFAULT_URI")."""
        return self._secrets.get(tuple(path))

    def secret_paths(self) -> List[str]:
        """Return dotted paths of fields considered secrets."""
        return sorted(".".join(p) for p in self._secret_paths)

    def to_revealed(self) -> Dict[str, Any]:
        """Return a plain dict copy with real secret values in place of the mask."""
        data = deepcopy(dict(self))
        for path, value in self._secrets.items():
            node = data
            for key in path[:-1]:
                node = node[key]
            node[path[-1]] = value
        return data

    @staticmethod
    def _deep_update(base: dict, override: dict) -> dict:
        """Recursively update nested dictionaries."""
        for k, v in (override or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                base[k] = Config._deep_update(base.get(k, {}), v)
            else:
                base[k] = v
        return base

    @staticmethod
    def _apply_env_overrides(base: dict, delimiter: str = "__") -> dict:
        result = deepcopy(base)

        for env_key, env_value in os.environ.items():
            if delimiter not in env_key:
                continue
            parts = [p.strip().upper() for p in env_key.split(delimiter) if p.strip()]
            # Only overlay keys that belong to a section already present in the config
            if len(parts) < 2 or parts[0] not in result:
                continue
            node = result
            for key in parts[:-1]:
                if key not in node or not isinstance(node[key], dict):
                    node[key] = {}
                node = node[key]
            node[parts[-1]] = env_value

        return result

    def _stringify_and_mask(self, data: Dict[str, Any], mask: str = "********") -> Dict[str, Any]:
        def convert(v: Any, path: Tuple[str, ...]):
            if isinstance(v, SecretStr):
                self._secrets[path] = v.get_secret_value()
                return mask
            if isinstance(v, dict):
                return {k: convert(x, path + (k,)) for k, x in v.items()}
            if isinstance(v, (list, tuple, set)):
                return [convert(x, path) for x in v]
            sval = str(v)
            if path in self._secret_paths:
                self._secrets[path] = sval
                return mask
            return os.path.expanduser(sval) if sval.startswith("~") else sval

        return convert(data, ())  # type: ignore

    def _collect_secret_paths_from_model(
        self, model_cls: type[BaseModel] | type[BaseSettings], prefix: Tuple[str, ...] = ()
    ) -> set[Tuple[str, ...]]:
        paths: set[Tuple[str, ...]] = set()
        fields = getattr(model_cls, "__pydantic_fields__", {})
        for name, field in fields.items():
            ann = getattr(field, "annotation", None)
            if self._is_secret_annotation(ann):
                paths.add(prefix + (name,))
                continue
            nested_cls = self._extract_model_class(ann)
            if nested_cls is not None:
                paths.update(self._collect_secret_paths_from_model(nested_cls, prefix + (name,)))
        return paths

    @staticmethod
    def _is_secret_annotation(ann: Any) -> bool:
        if ann is None:
            return False
        if ann is SecretStr:
            return True
        return any(a is SecretStr for a in get_args(ann)) if get_origin(ann) is Union else False

    @staticmethod
    def _extract_model_class(ann: Any) -> Optional[type]:
        candidates = get_args(ann) if get_origin(ann) is Union else (ann,)
        for candidate in candidates:
            if isinstance(candidate, type) and issubclass(candidate, BaseModel):
                return candidate
        return None


class CoreConfig(Config):
    """
    Wrapper around `Config` that always includes `CoreSettings` by default.

    Usage:
        from mongowrap.core.config import CoreConfig
        cfg = CoreConfig()  # loads CoreSettings (env + .env + INI with '~' expansion)

    Extra overrides are applied on top of CoreSettings and remain highest precedence. Env is not
    re-applied at the Config layer.
    """

    def __init__(self, extra_settings: SettingsLike = None):
        if extra_settings is None:
            extras: List[Any] = [CoreSettings()]
        elif isinstance(extra_settings, list):
            extras = [CoreSettings()] + extra_settings
        else:
            extras = [CoreSettings(), extra_settings]
        super().__init__(extras, apply_env=False)
