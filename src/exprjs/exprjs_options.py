"""
Compilation options for the exprjs compiler.

`CompilationOptions` is an immutable value object built once by the caller and
read by every stage of a compile call. It carries:

    - flags (`JsCompilationFlags`): BODY_ONLY, SCOPE_PARAMETER
    - script_version (`ScriptVersion`): target edition and dialect
    - extensions: ordered conversion extensions, offered every node first
    - metadata_provider: member name resolver (process default when None)
    - undefined_literal: text written where JavaScript needs `undefined`

Options can also be loaded from a plain mapping or a JSON file:

    {
        "flags": ["BODY_ONLY", "SCOPE_PARAMETER"],
        "script_version": "ES60",
        "script_version_modifiers": ["non_standard", {"javascript": 181}],
        "extensions": ["static_math", {"enum": ["USE_STRINGS", "FLAGS_AS_ARRAY"]}],
        "undefined_literal": "void 0"
    }
"""

import dataclasses
import json
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any, Callable, Mapping

from exprjs.exprjs_errors import OptionsError
from exprjs.exprjs_metadata import MetadataProvider, get_default_metadata_provider
from exprjs.exprjs_script_version import ScriptVersion


class JsCompilationFlags(IntFlag):
    NONE = 0
    BODY_ONLY = 1
    SCOPE_PARAMETER = 2


DEFAULT_FLAGS = JsCompilationFlags.BODY_ONLY | JsCompilationFlags.SCOPE_PARAMETER

_OPTION_KEYS = frozenset(
    {"flags", "script_version", "script_version_modifiers", "extensions", "undefined_literal"}
)


@dataclass(frozen=True)
class CompilationOptions:
    """Immutable options of one or many compile calls.

    Extensions are stored as a tuple in registration order; any iterable is
    accepted at construction.
    """

    flags: JsCompilationFlags = DEFAULT_FLAGS
    script_version: ScriptVersion = ScriptVersion.ES50
    extensions: tuple[Any, ...] = field(default=())
    metadata_provider: MetadataProvider | None = None
    undefined_literal: str = "undefined"

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", JsCompilationFlags(self.flags))
        object.__setattr__(self, "script_version", ScriptVersion(self.script_version))
        object.__setattr__(self, "extensions", tuple(self.extensions))

    def has_flag(self, flag: JsCompilationFlags) -> bool:
        return bool(self.flags & flag)

    def get_metadata_provider(self) -> MetadataProvider:
        return self.metadata_provider or get_default_metadata_provider()

    def with_extensions(self, *extensions: Any) -> "CompilationOptions":
        """Returns a copy with `extensions` appended after the current ones."""
        return dataclasses.replace(self, extensions=self.extensions + extensions)

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "CompilationOptions":
        """Builds options from a plain mapping (e.g. parsed JSON).

        Args:
            cfg: A mapping using the keys shown in the module docstring.

        Returns:
            The corresponding `CompilationOptions`.

        Raises:
            OptionsError: If any key or value is not recognized. All problems
                are collected in `OptionsError.problems`.
        """
        if not isinstance(cfg, Mapping):
            raise OptionsError("Options configuration must be a mapping")

        problems: list[str] = [
            f"unknown option {key!r}" for key in cfg if key not in _OPTION_KEYS
        ]
        flags = _parse_flags(cfg.get("flags", DEFAULT_FLAGS), problems)
        version = _parse_version(
            cfg.get("script_version", ScriptVersion.ES50),
            cfg.get("script_version_modifiers", ()),
            problems,
        )
        extensions = _parse_extensions(cfg.get("extensions", ()), problems)
        undefined_literal = cfg.get("undefined_literal", "undefined")
        if not isinstance(undefined_literal, str) or not undefined_literal:
            problems.append("undefined_literal must be a non-empty string")

        if problems:
            raise OptionsError("Invalid compilation options", problems)
        return cls(
            flags=flags,
            script_version=version,
            extensions=extensions,
            undefined_literal=undefined_literal,
        )

    @classmethod
    def from_json(cls, path: str) -> "CompilationOptions":
        """Loads options from a JSON file.

        Raises:
            OptionsError: If the file cannot be read or parsed, or holds
                invalid options.
        """
        try:
            with open(path, encoding="utf-8") as f:
                raw_cfg = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise OptionsError(f"Failed to load options file: {e}") from e
        return cls.from_mapping(raw_cfg)


def _parse_flags(raw: Any, problems: list[str]) -> JsCompilationFlags:
    if isinstance(raw, int):
        return JsCompilationFlags(raw)
    if isinstance(raw, str):
        raw = [raw]
    flags = JsCompilationFlags.NONE
    for name in raw:
        member = JsCompilationFlags.__members__.get(str(name).upper())
        if member is None:
            problems.append(f"unknown flag {name!r}")
        else:
            flags |= member
    return flags


def _parse_version(raw: Any, modifiers: Any, problems: list[str]) -> ScriptVersion:
    try:
        version = ScriptVersion(raw) if isinstance(raw, int) else ScriptVersion.from_name(str(raw))
    except ValueError as e:
        problems.append(str(e))
        return ScriptVersion.ES50

    for modifier in modifiers:
        if isinstance(modifier, Mapping):
            for name, arg in modifier.items():
                if name == "javascript":
                    version = version.javascript(int(arg))
                elif name == "microsoft_jscript":
                    version = version.microsoft_jscript(int(arg))
                else:
                    problems.append(f"unknown script version modifier {name!r}")
        elif modifier == "non_standard":
            version = version.non_standard()
        elif modifier == "proposals":
            version = version.proposals()
        elif modifier == "deprecated":
            version = version.deprecated()
        else:
            problems.append(f"unknown script version modifier {modifier!r}")
    return version


def _extension_factories() -> dict[str, Callable[[Any], Any]]:
    from exprjs.extensions.custom_methods import CustomMethods
    from exprjs.extensions.enum_conversion import EnumConversionExtension, EnumOptions
    from exprjs.extensions.linq_methods import LinqMethods
    from exprjs.extensions.member_init_json import MemberInitAsJson
    from exprjs.extensions.static_math_methods import StaticMathMethods
    from exprjs.extensions.static_string_methods import StaticStringMethods

    return {
        "static_math": lambda arg: StaticMathMethods(**(arg or {})),
        "static_string": lambda arg: StaticStringMethods(),
        "linq": lambda arg: LinqMethods(),
        "enum": lambda arg: EnumConversionExtension(EnumOptions.parse(arg)),
        "member_init_as_json": lambda arg: MemberInitAsJson.for_all_types(),
        "custom_methods": lambda arg: CustomMethods(**(arg or {})),
    }


def _parse_extensions(raw: Any, problems: list[str]) -> tuple[Any, ...]:
    factories = _extension_factories()
    extensions: list[Any] = []
    for entry in raw:
        if isinstance(entry, str):
            items: list[tuple[str, Any]] = [(entry, None)]
        elif isinstance(entry, Mapping):
            items = list(entry.items())
        else:
            problems.append(f"invalid extension entry {entry!r}")
            continue
        for name, arg in items:
            factory = factories.get(name)
            if factory is None:
                problems.append(f"unknown extension {name!r}")
                continue
            try:
                extensions.append(factory(arg))
            except (TypeError, ValueError) as e:
                problems.append(f"invalid arguments for extension {name!r}: {e}")
    return tuple(extensions)
