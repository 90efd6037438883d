"""
Resolves the JavaScript-side name of data members.

The emitter never looks at annotations itself; it asks a `MetadataProvider`
for the display name of `(declaring_type, member_name)`. The default provider,
`AttributeMetadataProvider`, understands these markers:

    - `Annotated[str, JsMember("otherName")]` on a class annotation
    - `@JsMember("otherName")` on a method or property getter
    - `dataclasses.field(metadata={"js_name": "otherName"})`
    - any marker inside `Annotated[...]` that exposes a string `alias`
      attribute (the convention of serialization libraries' field infos)

With `use_cache=True` resolved names are kept in a process-wide snapshot that
is replaced, never mutated: readers use whatever snapshot they grabbed without
locking, writers build a complete copy under a lock and publish it with one
reference assignment.
"""

import dataclasses
import threading
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Protocol, get_origin, get_type_hints

JS_NAME_METADATA_KEY = "js_name"


@dataclass(frozen=True)
class JsMember:
    """Marks a member with the name it takes in generated JavaScript.

    Usable inside `Annotated[...]` or as a decorator on methods and properties.
    """

    member_name: str

    def __call__(self, func: Callable[..., Any]) -> Callable[..., Any]:
        func.__js_member__ = self  # type: ignore[attr-defined]
        return func


@dataclass(frozen=True)
class MemberMetadata:
    member_name: str


class MetadataProvider(Protocol):  # pragma: no cover
    """Interface consulted for member display names."""

    def get_member_metadata(
        self, declaring_type: Any, name: str
    ) -> MemberMetadata | None: ...


def _read_alias(marker: Any) -> str | None:
    alias = getattr(marker, "alias", None)
    return alias if isinstance(alias, str) else None


def _alias_reader_for(marker_type: type) -> Callable[[Any], str | None] | None:
    if issubclass(marker_type, JsMember):
        return lambda marker: marker.member_name
    if marker_type.__module__ == "builtins":
        return None
    return _read_alias


class AttributeMetadataProvider:
    """Reads member names from annotations, decorators and dataclass fields.

    Attributes:
        use_cache (bool): Whether resolved names are memoized across calls.
    """

    def __init__(self, use_cache: bool = False) -> None:
        self.use_cache = use_cache
        self._lock = threading.Lock()
        self._cache: dict[tuple[Any, str], MemberMetadata | None] = {}
        # marker type -> how to read a name from it (None: carries no name)
        self._readers: dict[type, Callable[[Any], str | None] | None] = {}

    def get_member_metadata(
        self, declaring_type: Any, name: str
    ) -> MemberMetadata | None:
        """Resolves the display name of a member.

        Args:
            declaring_type: The class owning the member (may be None).
            name: The Python member name.

        Returns:
            `MemberMetadata` with the resolved name (the Python name when no
            marker is present), or None when `name` is empty.
        """
        if not name:
            return None
        if not self.use_cache:
            return self._resolve(declaring_type, name)

        key = (declaring_type, name)
        snapshot = self._cache
        if key in snapshot:
            return snapshot[key]
        with self._lock:
            snapshot = self._cache
            if key in snapshot:
                return snapshot[key]
            metadata = self._resolve(declaring_type, name)
            updated = dict(snapshot)
            updated[key] = metadata
            self._cache = updated
        return metadata

    def cache_size(self) -> int:
        return len(self._cache)

    def _reader(self, marker: Any) -> Callable[[Any], str | None] | None:
        marker_type = type(marker)
        if not self.use_cache:
            return _alias_reader_for(marker_type)
        readers = self._readers
        if marker_type in readers:
            return readers[marker_type]
        with self._lock:
            readers = self._readers
            if marker_type not in readers:
                updated = dict(readers)
                updated[marker_type] = _alias_reader_for(marker_type)
                self._readers = updated
                readers = updated
        return readers[marker_type]

    def _resolve(self, declaring_type: Any, name: str) -> MemberMetadata:
        resolved = self._from_annotations(declaring_type, name)
        if resolved is None:
            resolved = self._from_dataclass_field(declaring_type, name)
        if resolved is None:
            resolved = self._from_decorator(declaring_type, name)
        return MemberMetadata(resolved or name)

    def _from_annotations(self, declaring_type: Any, name: str) -> str | None:
        if not isinstance(declaring_type, type):
            return None
        try:
            hints = get_type_hints(declaring_type, include_extras=True)
        except (NameError, TypeError):
            hints = getattr(declaring_type, "__annotations__", {})
        hint = hints.get(name)
        if hint is None or get_origin(hint) is not Annotated:
            return None
        for marker in hint.__metadata__:
            reader = self._reader(marker)
            if reader is not None:
                alias = reader(marker)
                if alias:
                    return alias
        return None

    def _from_dataclass_field(self, declaring_type: Any, name: str) -> str | None:
        if not (isinstance(declaring_type, type) and dataclasses.is_dataclass(declaring_type)):
            return None
        for f in dataclasses.fields(declaring_type):
            if f.name == name:
                value = f.metadata.get(JS_NAME_METADATA_KEY)
                return value if isinstance(value, str) else None
        return None

    def _from_decorator(self, declaring_type: Any, name: str) -> str | None:
        attr = getattr(declaring_type, name, None)
        if isinstance(attr, property):
            attr = attr.fget
        marker = getattr(attr, "__js_member__", None)
        return marker.member_name if isinstance(marker, JsMember) else None


_default_provider: MetadataProvider = AttributeMetadataProvider(use_cache=True)


def get_default_metadata_provider() -> MetadataProvider:
    return _default_provider


def set_default_metadata_provider(provider: MetadataProvider) -> None:
    """Replaces the provider used when options do not name one.

    Raises:
        TypeError: If `provider` is None.
    """
    global _default_provider
    if provider is None:
        raise TypeError("The default metadata provider cannot be None")
    _default_provider = provider


def resolve_member_name(
    provider: MetadataProvider, declaring_type: Any, name: str
) -> str:
    """Display name of a member, falling back to its Python name."""
    metadata = provider.get_member_metadata(declaring_type, name)
    return metadata.member_name if metadata is not None else name
