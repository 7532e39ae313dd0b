"""Where crudwizard keeps its settings, and how it picks the active profile.

On disk there are three kinds of file, all plain JSON:

* ``config.json`` in the config directory -- :class:`~crudwizard.models.GlobalConfig`.
* ``profiles/<name>.json`` -- one :class:`~crudwizard.models.Profile` per API.
* ``crudwizard.json`` in the working directory -- pins a project's profile.

The config directory follows XDG on Linux and BSD and is ``~/.crudwizard``
elsewhere. Every write goes through :func:`_atomic_write`.

:func:`resolve_config` picks the active profile, :func:`resolve_credential`
reads plugin secrets, and :class:`ConfigProvider` turns a profile into a
resolved document plus its declared resources.
"""

from __future__ import annotations

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from crudwizard.exceptions import ConfigError
from crudwizard.models import GlobalConfig, Profile, Resource
from crudwizard.parser.loader import aload_document, validate_swagger_version
from crudwizard.parser.resolver import resolve_all_references

logger = logging.getLogger(__name__)

_APP_NAME = "crudwizard"
_PROJECT_CONFIG_FILENAME = "crudwizard.json"
PROFILE_ENV_VAR = "CRUDWIZARD_PROFILE"

# kind -> (XDG variable, default under $HOME, subdirectory of ~/.crudwizard elsewhere)
_DIRECTORIES = {
    "config": ("XDG_CONFIG_HOME", (".config",), ""),
    "data": ("XDG_DATA_HOME", (".local", "share"), "logs"),
}


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    env_var, home_segments, fallback = _DIRECTORIES[kind]
    if _is_xdg_platform():
        base = os.environ.get(env_var) or Path.home().joinpath(*home_segments)
        path = Path(base) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/crudwizard`` or ``~/.crudwizard``; created on demand."""
    return _app_dir("config")


def get_data_dir() -> Path:
    """Crash-log directory: ``$XDG_DATA_HOME/crudwizard`` or ``~/.crudwizard/logs``."""
    return _app_dir("data")


def get_profiles_dir() -> Path:
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- JSON files ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* via a sibling temp file and ``os.replace``.

    A failed write leaves the previous content and no temp file behind.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_name: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise


def _write_json(path: Path, data: Any) -> None:
    _atomic_write(path, json.dumps(data, indent=2) + "\n")


def _read_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


def _global_config_path() -> Path:
    return get_config_dir() / "config.json"


def load_global_config() -> GlobalConfig:
    """Read ``config.json``; defaults when it does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or does not validate.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(_read_json(path, "global config"))
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    _write_json(_global_config_path(), config.model_dump(mode="json"))


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


def load_profile(name: str) -> Profile:
    """Read ``profiles/<name>.json``.

    Raises:
        ConfigError: If the profile is missing, is not JSON, or does not
            validate (a profile needs at least ``name`` and ``spec``).
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    what = f"profile '{name}'"
    try:
        return Profile.model_validate(_read_json(path, what))
    except ValueError as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


def save_profile(profile: Profile) -> None:
    """Write *profile* under its own name, using wire names (``namePlural``)."""
    _write_json(
        _profile_path(profile.name),
        profile.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


# --- Project pin ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``./crudwizard.json``, or ``None`` when the project has none."""
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json(path, "project config")


def write_project_config(default_profile: str) -> Path:
    """Pin *default_profile* for the working directory and return the file."""
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    _write_json(path, {"default_profile": default_profile})
    return path


# --- Active profile ---


def resolve_config(
    cli_profile: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[Profile]]:
    """Return the global config and the active profile, if any.

    The first non-empty name wins, in this order: *cli_profile*, the
    ``CRUDWIZARD_PROFILE`` variable, the project pin, the global
    ``default_profile``. With none set and ``auto_select_single_profile``
    on, a lone profile on disk is used.

    Raises:
        ConfigError: If the chosen profile cannot be loaded.
    """
    global_cfg = load_global_config()
    project = load_project_config() or {}

    candidates = (
        cli_profile,
        os.environ.get(PROFILE_ENV_VAR),
        project.get("default_profile"),
        global_cfg.default_profile,
    )
    name = next((candidate for candidate in candidates if candidate), None)

    if name is None and global_cfg.auto_select_single_profile:
        profiles = list_profiles()
        if len(profiles) == 1:
            name = profiles[0]

    return global_cfg, load_profile(name) if name is not None else None


# --- Credentials ---


def _credential_from_env(var_name: str) -> str:
    value = os.environ.get(var_name)
    if value is None:
        raise ConfigError(f"Environment variable '{var_name}' is not set")
    return value


def _credential_from_file(location: str) -> str:
    path = Path(location).expanduser()
    if not path.is_file():
        raise ConfigError(f"Credential file not found: {path}")
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc


_CREDENTIAL_SOURCES = {
    "env": _credential_from_env,
    "file": _credential_from_file,
}


def resolve_credential(source: str) -> str:
    """Read a secret named by ``env:VAR`` or ``file:/path`` (whitespace stripped).

    Raises:
        ConfigError: If the scheme is unknown or the secret is unavailable.
    """
    scheme, sep, target = source.partition(":")
    reader = _CREDENTIAL_SOURCES.get(scheme) if sep else None
    if reader is None:
        raise ConfigError(f"Unknown credential source format: {source}")
    return reader(target)


# --- Config provider ---


class ConfigProvider:
    """Supplies a resolved document and the declared resources for one profile.

    :meth:`load_config` is the only suspending call; afterwards
    :attr:`document` and :meth:`get_resources` are plain reads.

    Example::

        provider = ConfigProvider()
        await provider.load_config("petstore")
        for resource in provider.get_resources():
            print(resource.id, resource.name_plural)
        result = await dispatcher.invoke(provider.document, "getPetById", {"petId": 1})
    """

    def __init__(self) -> None:
        self._profile: Optional[Profile] = None
        self._document: Optional[dict[str, Any]] = None

    async def load_config(self, context_id: str) -> None:
        """Load the profile named *context_id* and its resolved document.

        Raises:
            ConfigError: If the profile cannot be loaded.
            SpecParseError: If its document cannot be fetched or is not
                Swagger 2.0.
        """
        await self.load_profile(load_profile(context_id))

    async def load_profile(self, profile: Profile) -> None:
        """Like :meth:`load_config` for an already constructed profile."""
        raw = await aload_document(profile.spec)
        validate_swagger_version(raw)
        self._document = resolve_all_references(raw)
        self._profile = profile
        logger.debug("Loaded document for profile '%s' from %s", profile.name, profile.spec)

    @property
    def loaded(self) -> bool:
        return self._document is not None

    @property
    def profile(self) -> Profile:
        if self._profile is None:
            raise ConfigError("No configuration loaded. Call load_config() first.")
        return self._profile

    @property
    def document(self) -> dict[str, Any]:
        """The resolved document of the loaded profile."""
        if self._document is None:
            raise ConfigError("No configuration loaded. Call load_config() first.")
        return self._document

    def get_resources(self) -> list[Resource]:
        """Return the loaded profile's declared resources (empty before loading)."""
        if self._profile is None:
            return []
        return list(self._profile.resources)
