"""
Exception types raised while compiling expression trees to JavaScript.

Every failure is immediate: the compile call that hit it produces no output.
All compile-time failures derive from `JsCompilationError`, which carries the
offending node (when one is known) for error reporting. The "not supported"
family also derives from the built-in `NotImplementedError`, and the invalid
input family from `ValueError`, so callers may catch either the specific class
or the built-in category.

Classes:
    - JsCompilationError: Base class, carries `.node`.
    - NotSupportedError: A construct with no JavaScript rendering.
    - UnsupportedConstructError: Statement-shaped or otherwise unknown nodes.
    - UnsupportedMemberInitError: Member initialization with no claiming extension.
    - UnsupportedInstanceMethodError: Instance method without a rewrite rule.
    - AmbiguousFlagsError: Several flags selected without a combine mode.
    - ByRefParameterError: Lambda parameter passed by reference.
    - UnresolvableConstantError: Constant value with no literal representation.
    - InvalidRegexError: Constant pattern rejected by the ECMAScript rules.
    - ScopeParameterError: Scope-parameter mode used on a lambda of the wrong arity.
    - OptionsError: Invalid compilation options mapping or file.
"""

from typing import Any


class JsCompilationError(Exception):
    """Base class for errors raised while compiling an expression tree.

    Attributes:
        node: The node being emitted when the error was detected, or None.
    """

    def __init__(self, message: str, node: Any = None):
        super().__init__(message)
        self.node = node


class NotSupportedError(JsCompilationError, NotImplementedError):
    """Raised when a construct has no JavaScript rendering.

    Conversion extensions raise this for extension-specific failures.
    """


class UnsupportedConstructError(NotSupportedError):
    pass


class UnsupportedMemberInitError(NotSupportedError):
    pass


class UnsupportedInstanceMethodError(NotSupportedError):
    pass


class AmbiguousFlagsError(NotSupportedError):
    pass


class ByRefParameterError(NotSupportedError):
    pass


class UnresolvableConstantError(NotSupportedError):
    pass


class InvalidRegexError(JsCompilationError, ValueError):
    """Raised when a constant regular expression is not valid ECMAScript.

    Attributes:
        pattern: The rejected pattern text.
    """

    def __init__(self, message: str, pattern: str, node: Any = None):
        super().__init__(message, node)
        self.pattern = pattern


class ScopeParameterError(JsCompilationError, ValueError):
    pass


class OptionsError(ValueError):
    """Raised when compilation options cannot be built from a mapping or file.

    Attributes:
        problems (list[str]): One entry per rejected key or value.

    Example:
        raise OptionsError("Invalid options", ["unknown flag 'BODY'"])
    """

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = problems or []
