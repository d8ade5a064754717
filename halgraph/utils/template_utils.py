"""
URI Template Utilities

Helpers for inspecting and expanding the simple URI templates used by link
hrefs and curie namespaces (RFC 6570 level 1 expressions plus the common
operator prefixes).
"""

import re
from typing import Dict, Any, List
from urllib.parse import quote

_EXPRESSION = re.compile(r"\{([^{}]+)\}")
_OPERATORS = "+#./;?&"


def template_variables(template: str) -> List[str]:
    """
    Return the variable names referenced by a URI template, in order.

    Args:
        template: URI template text, e.g. ``http://host/rels/{rel}``

    Returns:
        List of variable names without operators or modifiers
    """
    names = []
    for expression in _EXPRESSION.findall(template or ""):
        if expression[0] in _OPERATORS:
            expression = expression[1:]
        for name in expression.split(","):
            name = name.strip().rstrip("*").split(":")[0]
            if name and name not in names:
                names.append(name)
    return names


def is_templated(href: str) -> bool:
    """Check whether an href contains at least one template expression."""
    return bool(template_variables(href))


def expand_template(template: str, values: Dict[str, Any]) -> str:
    """
    Expand a URI template with the given values.

    Simple expressions are percent-encoded, reserved (``+``) and fragment
    (``#``) expressions keep reserved characters, query expressions (``?``
    and ``&``) render ``name=value`` pairs. Variables without a value are
    dropped from the result.

    Args:
        template: URI template text
        values: Mapping of variable name to value

    Returns:
        Expanded URI
    """

    def _expand(match) -> str:
        expression = match.group(1)
        operator = expression[0] if expression[0] in _OPERATORS else ""
        names = [n.strip().rstrip("*").split(":")[0] for n in (expression[len(operator):]).split(",")]
        present = [(n, values[n]) for n in names if values.get(n) is not None]

        if not present:
            return ""

        safe = ":/?#[]@!$&'()*+,;=" if operator in ("+", "#") else ""
        encoded = [(n, quote(str(v), safe=safe)) for n, v in present]

        if operator in ("?", "&"):
            return operator + "&".join(f"{n}={v}" for n, v in encoded)
        if operator == ";":
            return "".join(f";{n}={v}" for n, v in encoded)
        if operator in ("#", ".", "/"):
            joiner = "," if operator == "#" else operator
            return operator + joiner.join(v for _, v in encoded)
        return ",".join(v for _, v in encoded)

    return _EXPRESSION.sub(_expand, template)
