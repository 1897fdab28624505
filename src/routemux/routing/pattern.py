"""Route template compilation.

Turns an author-facing template such as ``/user/:id([0-9]+)/posts/:slug``
into a regular expression plus the ordered list of parameter names::

    "/user/:id"            -> r"/user/([^/]+)",        ("id",)
    "/user/:id([0-9]+)"    -> r"/user/([0-9]+)",       ("id",)
    "/a/:x/b/:y"           -> r"/a/([^/]+)/b/([^/]+)", ("x", "y")

Segments without the ``:`` marker are kept as regular-expression text.
"""

import re
from dataclasses import dataclass

from routemux.errors import PatternError

PARAM_MARKER = ":"

# one or more characters, excluding "/"
DEFAULT_PARAM_EXPR = "([^/]+)"


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A compiled route template.

    ``params[i]`` is the name of the parameter captured by group ``i + 1``.
    Matching is always against the full path.
    """

    template: str
    regex: re.Pattern[str]
    params: tuple[str, ...]

    def params_map(self) -> dict[int, str]:
        """Capture position (0-based) -> parameter name."""
        return dict(enumerate(self.params))

    def match(self, path: str) -> tuple[str, ...] | None:
        """Return the captured values if *path* matches in full, else None."""
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        return tuple(value or "" for value in m.groups())


def compile_template(template: str) -> CompiledPattern:
    """Compile *template* into a ``CompiledPattern``.

    Raises ``PatternError`` if the result is not a valid regular expression,
    if a parameter segment has no name, or if the capturing groups do not
    line up one-to-one with the named parameters.
    """
    parts = template.split("/")
    params: list[str] = []

    for i, part in enumerate(parts):
        if not part.startswith(PARAM_MARKER):
            continue
        expr = DEFAULT_PARAM_EXPR
        name = part[len(PARAM_MARKER) :]
        # inline override, e.g. ":id([0-9]+)"
        index = part.find("(")
        if index != -1:
            expr = part[index:]
            name = part[len(PARAM_MARKER) : index]
        if not name:
            raise PatternError(template, f"segment {part!r} has no parameter name")
        params.append(name)
        parts[i] = expr

    source = "/".join(parts)
    try:
        regex = re.compile(source)
    except re.error as exc:
        raise PatternError(template, str(exc)) from exc

    if regex.groups != len(params):
        raise PatternError(
            template,
            f"{regex.groups} capturing group(s) for {len(params)} parameter(s); "
            "use (?:...) for grouping inside an override",
        )

    return CompiledPattern(template=template, regex=regex, params=tuple(params))
