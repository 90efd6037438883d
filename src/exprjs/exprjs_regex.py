"""
Regular expression checks and literal rendering for the JavaScript target.

A constant pattern is rendered as a native literal (`/pattern/gim`), so it must
be valid under ECMAScript rules at compile time. Validation happens in two
passes:

    1. A scanner walks the pattern (skipping escapes and character classes) and
       rejects constructs that only exist in Python's `re` syntax, or that need
       a newer target version (named groups, lookbehind).
    2. ECMAScript-only spellings are translated to their `re` equivalents and
       the result is compiled with `re.compile`, which catches everything else
       (unbalanced groups, bad quantifiers, bad ranges).
"""

import re

from exprjs.exprjs_errors import InvalidRegexError
from exprjs.exprjs_script_version import JavascriptSyntaxFeature, ScriptVersion

_SUPPORTED_FLAGS = re.IGNORECASE | re.MULTILINE | re.DOTALL | re.UNICODE
_INLINE_FLAGS = re.compile(r"\(\?[aiLmsux-]+[:)]")
_QUANTIFIER_ENDS = frozenset("*+?}")


def _reject(message: str, pattern: str) -> InvalidRegexError:
    return InvalidRegexError(f"Invalid JavaScript regular expression {pattern!r}: {message}", pattern)


def _scan(pattern: str, version: ScriptVersion) -> str:
    """Rejects non-ECMAScript syntax; returns the pattern translated to `re` syntax."""
    out: list[str] = []
    i = 0
    n = len(pattern)
    in_class = False
    after_quantifier = False
    while i < n:
        ch = pattern[i]
        if ch == "\\":
            if i + 1 >= n:
                raise _reject("trailing backslash", pattern)
            nxt = pattern[i + 1]
            if nxt in "AZ":
                raise _reject(f"anchor \\{nxt} is not supported", pattern)
            if nxt == "k" and not in_class:
                end = pattern.find(">", i)
                if i + 2 >= n or pattern[i + 2] != "<" or end < 0:
                    raise _reject("malformed named back-reference", pattern)
                if not version.supports(JavascriptSyntaxFeature.REGEX_NAMED_GROUPS):
                    raise _reject("named back-references need ES2018", pattern)
                out.append(f"(?P={pattern[i + 3:end]})")
                i = end + 1
            else:
                out.append(pattern[i : i + 2])
                i += 2
            after_quantifier = False
            continue
        if in_class:
            if ch == "]":
                in_class = False
            out.append(ch)
            i += 1
            continue
        if ch == "[":
            # a leading `]` is literal in `re` but closes the class in JavaScript
            if pattern.startswith("]", i + 1) or pattern.startswith("^]", i + 1):
                raise _reject("empty character class", pattern)
            in_class = True
        elif ch == "+" and after_quantifier:
            raise _reject("possessive quantifiers are not supported", pattern)
        elif ch == "(" and pattern.startswith("(?", i):
            rest = pattern[i + 2 : i + 4]
            if rest.startswith("P"):
                raise _reject("Python named-group syntax", pattern)
            if rest.startswith("#"):
                raise _reject("inline comments are not supported", pattern)
            if rest.startswith(">"):
                raise _reject("atomic groups are not supported", pattern)
            if rest in ("<=", "<!"):
                if not version.supports(JavascriptSyntaxFeature.REGEX_LOOKBEHIND):
                    raise _reject("lookbehind needs ES2018", pattern)
            elif rest.startswith("<"):
                if not version.supports(JavascriptSyntaxFeature.REGEX_NAMED_GROUPS):
                    raise _reject("named groups need ES2018", pattern)
                out.append("(?P<")
                i += 3
                after_quantifier = False
                continue
            elif _INLINE_FLAGS.match(pattern, i):
                raise _reject("inline flags are not supported", pattern)
        # `?` after a quantifier makes it lazy, which ends the quantifier
        after_quantifier = ch in _QUANTIFIER_ENDS and not (ch == "?" and after_quantifier)
        out.append(ch)
        i += 1
    return "".join(out)


def validate_pattern(pattern: str, version: ScriptVersion) -> None:
    """Checks that a pattern is valid ECMAScript for the target version.

    Args:
        pattern: The pattern source text.
        version: The target script version.

    Raises:
        InvalidRegexError: If the pattern uses unsupported syntax or does not compile.
    """
    translated = _scan(pattern, version)
    try:
        re.compile(translated)
    except re.error as e:
        raise _reject(str(e), pattern) from e


def regex_flags(flags: int, version: ScriptVersion, pattern: str = "") -> str:
    """Translates `re` flags into JavaScript literal flags (always global).

    Raises:
        InvalidRegexError: If a flag has no JavaScript counterpart.
    """
    if flags & ~_SUPPORTED_FLAGS:
        raise _reject(f"unsupported flags {re.RegexFlag(flags & ~_SUPPORTED_FLAGS)!r}", pattern)
    js = "g"
    if flags & re.IGNORECASE:
        js += "i"
    if flags & re.MULTILINE:
        js += "m"
    if flags & re.DOTALL:
        if not version.supports(JavascriptSyntaxFeature.REGEX_DOTALL_FLAG):
            raise _reject("the dotAll flag needs ES2018", pattern)
        js += "s"
    return js


def escape_literal_body(pattern: str) -> str:
    """Escapes unescaped `/` so the pattern can sit between literal slashes."""
    out: list[str] = []
    escaped = False
    for ch in pattern:
        if escaped:
            out.append(ch)
            escaped = False
        elif ch == "\\":
            out.append(ch)
            escaped = True
        elif ch == "/":
            out.append("\\/")
        else:
            out.append(ch)
    return "".join(out) or "(?:)"


def regex_literal(pattern: str, flags: int, version: ScriptVersion) -> str:
    """Validates a constant pattern and returns its `/body/flags` literal."""
    validate_pattern(pattern, version)
    js_flags = regex_flags(flags, version, pattern)
    return f"/{escape_literal_body(pattern)}/{js_flags}"
