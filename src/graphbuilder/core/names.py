"""Rules for names that end up as identifiers in generated code.

Node names, decision function names and the spec name are written verbatim
as `def <name>` / `function <name>` in both target languages, so they must be
identifiers in Python and TypeScript and must not rebind anything the
templates define or import.
"""

from __future__ import annotations

import keyword
from typing import Optional

# ECMAScript reserved words (module code is strict) plus TypeScript's.
TYPESCRIPT_KEYWORDS = frozenset(
    {
        "arguments", "await", "break", "case", "catch", "class", "const", "continue",
        "debugger", "default", "delete", "do", "else", "enum", "eval", "export",
        "extends", "false", "finally", "for", "function", "if", "implements",
        "import", "in", "instanceof", "interface", "let", "new", "null", "package",
        "private", "protected", "public", "return", "static", "super", "switch",
        "this", "throw", "true", "try", "typeof", "undefined", "var", "void",
        "while", "with", "yield",
    }
)

# Names bound by the stub, implementation and single-file templates.
RESERVED_NAMES = frozenset(
    {
        "__start__", "__end__", "START", "END",
        # python
        "State", "SomeState", "StateGraph", "TypedDict", "Literal", "Annotated",
        "operator", "RunnableConfig", "Any", "Callable", "Optional", "Type",
        "builder", "workflow", "graph", "agent", "compiled_agent",
        "print", "dict", "list", "str",
        # typescript
        "Annotation", "AnnotationRoot", "StateAnnotation", "BaseMessage",
        "Implementation", "NodeFn", "RouterFn", "FanOutFn", "console",
    }
)


def identifier_problem(name: Optional[str]) -> Optional[str]:
    """Why `name` cannot be emitted as a function name, or None when it can."""
    if not isinstance(name, str) or not name.isidentifier():
        return "is not a valid identifier"
    if keyword.iskeyword(name) or name in TYPESCRIPT_KEYWORDS:
        return "is a reserved keyword"
    if name in RESERVED_NAMES:
        return "is reserved by the generated code"
    return None
