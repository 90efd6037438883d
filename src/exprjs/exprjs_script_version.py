"""
Target JavaScript versions and the capability matrix consulted during emission.

A `ScriptVersion` is an integer laid out in decimal fields:

    flavor * 10**8 + flavor_version * 10**5 + es_version * 100 + modifiers

where `es_version` is the ECMAScript edition times ten (ES5 -> 50, ES2015 -> 60,
ES2020 -> 110), `flavor` selects a dialect (0 = standard ECMAScript,
1 = non-standard legacy aliases, 2 = Mozilla JavaScript, 3 = Microsoft JScript)
and the modifier bits mark "proposals" (1) and "deprecated" (2).

Example:
    >>> ScriptVersion.ES50.non_standard()
    100005000
    >>> ScriptVersion.ES60.supports(JavascriptSyntaxFeature.ARROW_FUNCTION)
    True
"""

from enum import Enum
from typing import Union

_FLAVOR_FACTOR = 10**8
_FLAVOR_VERSION_FACTOR = 10**5
_ES_FACTOR = 100

_PROPOSALS = 1
_DEPRECATED = 2

FLAVOR_STANDARD = 0
FLAVOR_NON_STANDARD = 1
FLAVOR_JAVASCRIPT = 2
FLAVOR_MICROSOFT_JSCRIPT = 3


class JavascriptSyntaxFeature(Enum):
    """Syntax forms whose availability depends on the target version."""

    ARROW_FUNCTION = "arrow_function"
    ARRAY_SPREAD = "array_spread"
    NULLISH_COALESCING = "nullish_coalescing"
    REGEX_NAMED_GROUPS = "regex_named_groups"
    REGEX_LOOKBEHIND = "regex_lookbehind"
    REGEX_DOTALL_FLAG = "regex_dotall_flag"


class JavascriptApiFeature(Enum):
    """Standard-library members whose availability depends on the target version."""

    STRING_PROTOTYPE_INDEX_OF = "String.prototype.indexOf"
    STRING_PROTOTYPE_LAST_INDEX_OF = "String.prototype.lastIndexOf"
    STRING_PROTOTYPE_INCLUDES = "String.prototype.includes"
    STRING_PROTOTYPE_STARTS_WITH = "String.prototype.startsWith"
    STRING_PROTOTYPE_ENDS_WITH = "String.prototype.endsWith"
    STRING_PROTOTYPE_TO_LOWER_CASE = "String.prototype.toLowerCase"
    STRING_PROTOTYPE_TO_UPPER_CASE = "String.prototype.toUpperCase"
    STRING_PROTOTYPE_TRIM = "String.prototype.trim"
    STRING_PROTOTYPE_TRIM_START = "String.prototype.trimStart"
    STRING_PROTOTYPE_TRIM_END = "String.prototype.trimEnd"
    STRING_PROTOTYPE_TRIM_LEFT = "String.prototype.trimLeft"
    STRING_PROTOTYPE_TRIM_RIGHT = "String.prototype.trimRight"
    STRING_PROTOTYPE_SUBSTRING = "String.prototype.substring"
    STRING_PROTOTYPE_PAD_START = "String.prototype.padStart"
    STRING_PROTOTYPE_PAD_END = "String.prototype.padEnd"
    ARRAY_PROTOTYPE_INDEX_OF = "Array.prototype.indexOf"
    ARRAY_PROTOTYPE_INCLUDES = "Array.prototype.includes"
    ARRAY_PROTOTYPE_FILTER = "Array.prototype.filter"
    ARRAY_PROTOTYPE_MAP = "Array.prototype.map"
    ARRAY_PROTOTYPE_SOME = "Array.prototype.some"
    ARRAY_PROTOTYPE_EVERY = "Array.prototype.every"
    ARRAY_PROTOTYPE_REDUCE = "Array.prototype.reduce"
    MATH_ES2015_FUNCTIONS = "Math.trunc"


Feature = Union[JavascriptSyntaxFeature, JavascriptApiFeature]

# Minimum standard ECMAScript edition (times ten) for each feature.
_MINIMUM_ES_VERSION: dict[Feature, int] = {
    JavascriptSyntaxFeature.ARROW_FUNCTION: 60,
    JavascriptSyntaxFeature.ARRAY_SPREAD: 60,
    JavascriptSyntaxFeature.NULLISH_COALESCING: 110,
    JavascriptSyntaxFeature.REGEX_NAMED_GROUPS: 90,
    JavascriptSyntaxFeature.REGEX_LOOKBEHIND: 90,
    JavascriptSyntaxFeature.REGEX_DOTALL_FLAG: 90,
    JavascriptApiFeature.STRING_PROTOTYPE_INDEX_OF: 30,
    JavascriptApiFeature.STRING_PROTOTYPE_LAST_INDEX_OF: 30,
    JavascriptApiFeature.STRING_PROTOTYPE_INCLUDES: 60,
    JavascriptApiFeature.STRING_PROTOTYPE_STARTS_WITH: 60,
    JavascriptApiFeature.STRING_PROTOTYPE_ENDS_WITH: 60,
    JavascriptApiFeature.STRING_PROTOTYPE_TO_LOWER_CASE: 30,
    JavascriptApiFeature.STRING_PROTOTYPE_TO_UPPER_CASE: 30,
    JavascriptApiFeature.STRING_PROTOTYPE_TRIM: 51,
    JavascriptApiFeature.STRING_PROTOTYPE_TRIM_START: 100,
    JavascriptApiFeature.STRING_PROTOTYPE_TRIM_END: 100,
    JavascriptApiFeature.STRING_PROTOTYPE_SUBSTRING: 30,
    JavascriptApiFeature.STRING_PROTOTYPE_PAD_START: 80,
    JavascriptApiFeature.STRING_PROTOTYPE_PAD_END: 80,
    JavascriptApiFeature.ARRAY_PROTOTYPE_INDEX_OF: 50,
    JavascriptApiFeature.ARRAY_PROTOTYPE_INCLUDES: 70,
    JavascriptApiFeature.ARRAY_PROTOTYPE_FILTER: 50,
    JavascriptApiFeature.ARRAY_PROTOTYPE_MAP: 50,
    JavascriptApiFeature.ARRAY_PROTOTYPE_SOME: 50,
    JavascriptApiFeature.ARRAY_PROTOTYPE_EVERY: 50,
    JavascriptApiFeature.ARRAY_PROTOTYPE_REDUCE: 50,
    JavascriptApiFeature.MATH_ES2015_FUNCTIONS: 60,
}

# Legacy aliases: available in every non-standard dialect, and in standard
# ECMAScript from ES2019 on (Annex B) when deprecated members are allowed.
_LEGACY_ALIASES: dict[Feature, int] = {
    JavascriptApiFeature.STRING_PROTOTYPE_TRIM_LEFT: 100,
    JavascriptApiFeature.STRING_PROTOTYPE_TRIM_RIGHT: 100,
}

# One edition step: what the "proposals" modifier looks ahead by.
_PROPOSAL_STEP = 10


class ScriptVersion(int):
    """An integer-encoded JavaScript target version.

    Instances are plain integers, so they compare, hash and serialize as such.
    The transform methods return new versions and never mutate.
    """

    # Populated below the class body.
    ES30: "ScriptVersion"
    ES50: "ScriptVersion"
    ES51: "ScriptVersion"
    ES60: "ScriptVersion"
    ES70: "ScriptVersion"
    ES80: "ScriptVersion"
    ES90: "ScriptVersion"
    ES100: "ScriptVersion"
    ES110: "ScriptVersion"
    ES_LATEST_STABLE: "ScriptVersion"
    ES_NEXT: "ScriptVersion"

    @property
    def flavor(self) -> int:
        return int(self) // _FLAVOR_FACTOR

    @property
    def flavor_version(self) -> int:
        return (int(self) // _FLAVOR_VERSION_FACTOR) % 1000

    @property
    def es_version(self) -> int:
        return (int(self) // _ES_FACTOR) % 1000

    @property
    def is_proposals(self) -> bool:
        return bool(int(self) & _PROPOSALS)

    @property
    def is_deprecated(self) -> bool:
        return bool(int(self) & _DEPRECATED)

    def _with_flavor(self, flavor: int, version: int) -> "ScriptVersion":
        if not 0 <= version < 1000:
            raise ValueError(f"Flavor version out of range: {version}")
        base = int(self) % _FLAVOR_VERSION_FACTOR
        return ScriptVersion(
            flavor * _FLAVOR_FACTOR + version * _FLAVOR_VERSION_FACTOR + base
        )

    def non_standard(self) -> "ScriptVersion":
        """Allows non-standard legacy aliases such as `trimLeft`."""
        return self._with_flavor(FLAVOR_NON_STANDARD, 0)

    def javascript(self, version: int) -> "ScriptVersion":
        """Targets a Mozilla JavaScript release (e.g. 181 for JavaScript 1.8.1)."""
        return self._with_flavor(FLAVOR_JAVASCRIPT, version)

    def microsoft_jscript(self, version: int) -> "ScriptVersion":
        """Targets a Microsoft JScript release (e.g. 90 for JScript 9.0)."""
        return self._with_flavor(FLAVOR_MICROSOFT_JSCRIPT, version)

    def proposals(self) -> "ScriptVersion":
        """Allows features proposed for the next edition."""
        return ScriptVersion(int(self) | _PROPOSALS)

    def deprecated(self) -> "ScriptVersion":
        """Allows members that are deprecated but still supported."""
        return ScriptVersion(int(self) | _DEPRECATED)

    def supports(self, feature: Feature) -> bool:
        """Checks the capability matrix for a syntax or API feature.

        Args:
            feature: A `JavascriptSyntaxFeature` or `JavascriptApiFeature`.

        Returns:
            True if code targeting this version may use the feature.

        Raises:
            ValueError: If the feature is not part of the matrix.
        """
        es_version = self.es_version
        if self.is_proposals:
            es_version += _PROPOSAL_STEP

        if feature in _LEGACY_ALIASES:
            if self.flavor != FLAVOR_STANDARD:
                return True
            return self.is_deprecated and es_version >= _LEGACY_ALIASES[feature]

        if feature not in _MINIMUM_ES_VERSION:
            raise ValueError(f"Unknown script feature: {feature!r}")
        return es_version >= _MINIMUM_ES_VERSION[feature]

    def __repr__(self) -> str:
        parts = [f"es={self.es_version}"]
        if self.flavor:
            parts.append(f"flavor={self.flavor}:{self.flavor_version}")
        if self.is_proposals:
            parts.append("proposals")
        if self.is_deprecated:
            parts.append("deprecated")
        return f"ScriptVersion({int(self)}, {', '.join(parts)})"

    @classmethod
    def from_name(cls, name: str) -> "ScriptVersion":
        """Looks up a named edition such as "ES60" or "ES_NEXT" (case-insensitive).

        Raises:
            ValueError: If the name is not a known edition.
        """
        key = name.strip().upper()
        if key not in _NAMED_VERSIONS:
            raise ValueError(f"Unknown script version: {name!r}")
        return _NAMED_VERSIONS[key]


ScriptVersion.ES30 = ScriptVersion(3000)
ScriptVersion.ES50 = ScriptVersion(5000)
ScriptVersion.ES51 = ScriptVersion(5100)
ScriptVersion.ES60 = ScriptVersion(6000)
ScriptVersion.ES70 = ScriptVersion(7000)
ScriptVersion.ES80 = ScriptVersion(8000)
ScriptVersion.ES90 = ScriptVersion(9000)
ScriptVersion.ES100 = ScriptVersion(10000)
ScriptVersion.ES110 = ScriptVersion(11000)
ScriptVersion.ES_LATEST_STABLE = ScriptVersion.ES110
ScriptVersion.ES_NEXT = ScriptVersion.ES110.proposals()

_NAMED_VERSIONS: dict[str, ScriptVersion] = {
    "ES30": ScriptVersion.ES30,
    "ES50": ScriptVersion.ES50,
    "ES51": ScriptVersion.ES51,
    "ES60": ScriptVersion.ES60,
    "ES70": ScriptVersion.ES70,
    "ES80": ScriptVersion.ES80,
    "ES90": ScriptVersion.ES90,
    "ES100": ScriptVersion.ES100,
    "ES110": ScriptVersion.ES110,
    "ES_LATEST_STABLE": ScriptVersion.ES_LATEST_STABLE,
    "ES_NEXT": ScriptVersion.ES_NEXT,
}
