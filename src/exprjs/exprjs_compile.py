"""
Provides the `JsCompiler` class, the entry point that turns expression trees
into JavaScript source text.

Modes (selected by `CompilationOptions.flags`):
    - BODY_ONLY | SCOPE_PARAMETER (default): members of the single lambda
      parameter become bare identifiers and only the body is written.
          x => x.Age + 1                          ->  Age+1
    - SCOPE_PARAMETER only: the body is written first, then wrapped in a
      function whose parameters are the scope members the body used.
          x => x.Age + x.Name                     ->  function(Age,Name){return Age+Name;}
    - BODY_ONLY only: the body is written with parameters kept as-is.
          x => x.Age                              ->  x.Age
    - neither: the whole lambda is written as a function.
          x => x.Age                              ->  function(x){return x.Age;}

Each compile call uses a fresh writer and emitter, so a compiler instance can be
shared between threads as long as its options are not shared mutable state
(they are immutable).

Example:
    >>> x = Parameter("x", Person)
    >>> compile_to_javascript(Lambda((x,), Member(x, "Age", int)))
    'Age'

Raises:
    ScopeParameterError: SCOPE_PARAMETER with a lambda that does not have
        exactly one parameter.
    JsCompilationError: Any construct the emitter or the extensions reject.
"""

from dataclasses import dataclass, field

from exprjs.emitters.js_emitter import JavascriptEmitter
from exprjs.exprjs_ast import Lambda, Node
from exprjs.exprjs_errors import ScopeParameterError
from exprjs.exprjs_options import CompilationOptions, JsCompilationFlags
from exprjs.exprjs_script_version import JavascriptSyntaxFeature
from exprjs.exprjs_writer import JavascriptWriter


@dataclass(frozen=True)
class CompilationResult:
    """Output of one compile call.

    Attributes:
        code: The generated JavaScript.
        used_scope_members: Distinct scope members referenced by the body, in
            first-use order. Empty unless SCOPE_PARAMETER is set.
        placeholders: Placeholder name to the argument node it stands for, as
            written by extensions that lift arguments out of the code.
    """

    code: str
    used_scope_members: tuple[str, ...] = ()
    placeholders: dict[str, Node] = field(default_factory=dict)


class JsCompiler:
    """Compiles expression trees to JavaScript under a fixed set of options.

    Attributes:
        options (CompilationOptions): Options applied to every call.
        emitter_class (type[JavascriptEmitter]): Emitter used for each call.
    """

    def __init__(
        self,
        options: CompilationOptions | None = None,
        emitter_class: type[JavascriptEmitter] = JavascriptEmitter,
    ) -> None:
        self.options = options or CompilationOptions()
        self.emitter_class = emitter_class

    def _new_emitter(self, scope_parameter: Node | None = None) -> JavascriptEmitter:
        return self.emitter_class(self.options, JavascriptWriter(), scope_parameter)

    def compile(self, tree: Node) -> str:
        """Compiles a lambda (or a bare expression) and returns the code."""
        return self.compile_result(tree).code

    def compile_result(self, tree: Node) -> CompilationResult:
        """
        Compiles a lambda according to the option flags.

        Parameters
        ----------
        tree : Node
            Usually a `Lambda`; any other node is compiled as an expression.

        Returns
        -------
        CompilationResult
            The code, the scope members the body referenced and the
            placeholders extensions wrote.

        Raises
        ------
        ScopeParameterError
            If SCOPE_PARAMETER is set and the lambda does not have exactly one
            parameter.
        """
        if not isinstance(tree, Lambda):
            emitter = self._new_emitter()
            emitter.visit(tree)
            return CompilationResult(emitter.get_output(), placeholders=emitter.placeholders)

        options = self.options
        body_only = options.has_flag(JsCompilationFlags.BODY_ONLY)

        if not options.has_flag(JsCompilationFlags.SCOPE_PARAMETER):
            emitter = self._new_emitter()
            emitter.visit(tree.body if body_only else tree)
            return CompilationResult(emitter.get_output(), placeholders=emitter.placeholders)

        if len(tree.params) != 1:
            raise ScopeParameterError(
                "When using SCOPE_PARAMETER flag, the lambda must have exactly one parameter, "
                f"got {len(tree.params)}",
                tree,
            )
        emitter = self._new_emitter(tree.params[0])
        emitter.visit(tree.body)
        body = emitter.get_output()
        members = tuple(emitter.used_scope_members)
        if not body_only:
            body = self._wrap_in_function(body, members)
        return CompilationResult(body, members, emitter.placeholders)

    def _wrap_in_function(self, body: str, params: tuple[str, ...]) -> str:
        names = ",".join(params)
        if self.options.script_version.supports(JavascriptSyntaxFeature.ARROW_FUNCTION):
            head = names if len(params) == 1 else f"({names})"
            if body.startswith("{"):
                body = f"({body})"
            return f"{head}=>{body}"
        return f"function({names}){{return {body};}}"

    def compile_expression(self, node: Node) -> str:
        """Compiles any expression node, with no scope parameter."""
        emitter = self._new_emitter()
        emitter.visit(node)
        return emitter.get_output()


def compile_to_javascript(tree: Node, options: CompilationOptions | None = None) -> str:
    return JsCompiler(options).compile(tree)


def compile_expression(node: Node, options: CompilationOptions | None = None) -> str:
    return JsCompiler(options).compile_expression(node)
