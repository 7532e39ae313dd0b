"""Canonical Pydantic models shared across all crudwizard modules.

Swagger documents themselves stay plain ``dict`` objects all the way through
the engine: the resolver, locator and classifier operate on the JSON shape
directly. The models here describe everything *around* the document:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`ApiKeyConfig`, :class:`OutputConfig`,
    :class:`PluginsConfig`, :class:`GlobalConfig`, :class:`Resource`, and
    :class:`Profile`.

**Engine models** -- produced while locating, building and dispatching an
operation:
    :class:`ParameterPlacement`, :class:`OperationLocation`,
    :class:`ClassifiedParameters`, :class:`RequestDescriptor`, and
    :class:`DispatchResult`.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field


# --- Config ---


class RequestConfig(BaseModel):
    """HTTP transport settings applied to every dispatched operation."""

    timeout: Optional[float] = Field(
        default=30.0,
        description="Transport timeout in seconds (None waits indefinitely)",
    )
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class ApiKeyConfig(BaseModel):
    """Settings for the built-in ``api_key`` plugin.

    The plugin fills the argument named ``argument`` from ``source`` whenever
    the caller did not pass one, so the key travels wherever the document
    declares that parameter (usually the query string).

    Example::

        ApiKeyConfig(argument="api_key", source="env:PETSTORE_KEY")
    """

    argument: str = Field(default="api_key", description="Argument name to fill")
    source: str = Field(description="Credential source: env:VAR or file:/path")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class PluginsConfig(BaseModel):
    """Explicit plugin allow/deny lists stored in :class:`GlobalConfig`."""

    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/crudwizard/config.json``.

    Fields here have the lowest precedence. See
    :func:`~crudwizard.config.resolve_config` for the full chain.
    """

    default_profile: Optional[str] = None
    auto_select_single_profile: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)


class Resource(BaseModel):
    """A navigable resource declared by a profile (e.g. ``pet`` / ``Pets``).

    The wire form uses ``namePlural``; both spellings are accepted.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: Optional[str] = None
    name_plural: str = Field(alias="namePlural")


class Profile(BaseModel):
    """Per-API profile stored as JSON under the ``profiles/`` config directory.

    A profile names one Swagger document (local file or URL) and the
    resources exposed for it. Extra fields are preserved in ``model_extra``
    so plugins can attach their own settings.

    See Also:
        :func:`~crudwizard.config.load_profile`: Deserialise a profile by name.
        :class:`~crudwizard.config.ConfigProvider`: Loads the profile's document.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    spec: str = Field(description="URL or file path to the Swagger document")
    resources: list[Resource] = Field(default_factory=list)
    request: RequestConfig = Field(default_factory=RequestConfig)
    api_key: Optional[ApiKeyConfig] = None
    strict_arguments: bool = Field(
        default=False,
        description="Reject arguments that match no declared parameter",
    )


# --- Engine ---


class ParameterPlacement(str, enum.Enum):
    """Where a Swagger 2.0 parameter lives in the request, per its ``in`` field."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    BODY = "body"
    FORM_DATA = "formData"


class OperationLocation(BaseModel):
    """An operation found by :func:`~crudwizard.parser.locator.find_operation`.

    ``method`` and ``path`` are derived from where the operation sits in the
    document; the operation itself is the raw (resolved) dict.
    """

    method: str
    path: str
    operation: dict[str, Any]

    @property
    def operation_id(self) -> Optional[str]:
        return self.operation.get("operationId")


class ClassifiedParameters(BaseModel):
    """An operation's dereferenced parameters partitioned by placement.

    Each list keeps declaration order.
    """

    path: list[dict[str, Any]] = Field(default_factory=list)
    query: list[dict[str, Any]] = Field(default_factory=list)
    header: list[dict[str, Any]] = Field(default_factory=list)
    body: list[dict[str, Any]] = Field(default_factory=list)
    form_data: list[dict[str, Any]] = Field(default_factory=list)

    def names(self) -> set[str]:
        """Return the names of every classified parameter."""
        return {
            param["name"]
            for group in (self.path, self.query, self.header, self.body, self.form_data)
            for param in group
            if "name" in param
        }


class RequestDescriptor(BaseModel):
    """A concrete HTTP request produced by :func:`~crudwizard.client.builder.build_request`."""

    method: str
    url: str
    params: list[tuple[str, str]] = Field(
        default_factory=list, description="Query entries in declaration order"
    )
    headers: dict[str, str] = Field(default_factory=dict)
    json_body: Any = None
    has_body: bool = False

    @property
    def full_url(self) -> str:
        """The URL including its query string."""
        return str(httpx.URL(self.url, params=self.params))


class DispatchResult(BaseModel):
    """Tagged outcome of :meth:`~crudwizard.client.Dispatcher.invoke`.

    ``ok`` is ``True`` only when the HTTP call returned a success status and
    every response interceptor completed. On failure ``error`` holds the
    cause and ``response`` holds the failed response when one was received,
    or ``None`` when the call failed before a response arrived.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    operation_id: str
    ok: bool
    response: Optional[httpx.Response] = None
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return not self.ok

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status of the response, ``None`` when no response was received."""
        return self.response.status_code if self.response is not None else None
