"""URL templates compiled into matchers and renderers.

A route's template is the concatenation of its ancestors' fragments::

    "/foo/:fooId"  +  "/biz?bizId"   ->   /foo/:fooId/biz   query: (bizId,)

Matching is structural: the URL must have exactly as many segments as
the template, literals must compare equal, and each ``:param`` captures
one non-empty segment. A template with more segments never matches a
shorter URL and vice versa.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl, quote, unquote, urlencode

from wayfinder.errors import ConfigurationError, DuplicateParamError, MissingParamError
from wayfinder.routing.params import format_param
from wayfinder.routing.route import PathSegment

_PARAM_NAME = re.compile(r"^\w+$")


def split_template(fragment: str) -> tuple[str, tuple[str, ...]]:
    """Split a URL fragment into its path and declared query names.

    Examples::

        "/foo/:fooId"     -> ("/foo/:fooId", ())
        "/biz?bizId"      -> ("/biz", ("bizId",))
        "?page&sort"      -> ("", ("page", "sort"))
    """
    path, _, query = fragment.partition("?")
    names = tuple(name for name in query.split("&") if name)
    return path, names


def parse_path(path: str) -> list[PathSegment]:
    """Parse a template path into segments.

    Examples::

        "/users"             -> [PathSegment("users")]
        "/users/:id"         -> [PathSegment("users"), PathSegment(":id", is_param=True, ...)]
        "/"                  -> []
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            msg = (
                f"Template {path!r} uses {{param}} syntax. "
                f"Path params are written as :param, e.g. '/:{part[1:-1]}'."
            )
            raise ConfigurationError(msg)
        if part.startswith(":"):
            name = part[1:]
            if not _PARAM_NAME.match(name):
                msg = f"Invalid path param {part!r} in template {path!r}."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, is_param=True, param_name=name))
        else:
            segments.append(PathSegment(value=part))
    return segments


@dataclass(frozen=True, slots=True)
class UrlPattern:
    """A compiled full URL template.

    ``template`` is empty when no fragment in the chain declares a path;
    such a pattern renders as ``/`` but is not URL-addressable.
    """

    template: str
    segments: tuple[PathSegment, ...] = ()
    query_names: tuple[str, ...] = ()

    @property
    def addressable(self) -> bool:
        """True if URLs can be matched against this pattern."""
        return bool(self.template)

    @property
    def param_names(self) -> tuple[str, ...]:
        """Path param names in template order."""
        return tuple(seg.param_name for seg in self.segments if seg.param_name)

    @property
    def names(self) -> tuple[str, ...]:
        """All declared param names: path params, then query params."""
        return self.param_names + self.query_names

    def __str__(self) -> str:
        if self.query_names:
            return f"{self.template}?{'&'.join(self.query_names)}"
        return self.template

    def match(self, path: str, query: str = "") -> dict[str, str] | None:
        """Match a literal path (and optional raw query string).

        Returns the bound params on success, ``None`` otherwise. Query
        pairs are merged only for declared query names; the first value
        for a name wins.
        """
        parts = [unquote(p) for p in path.strip("/").split("/") if p]
        if len(parts) != len(self.segments):
            return None

        params: dict[str, str] = {}
        for seg, part in zip(self.segments, parts, strict=True):
            if seg.param_name:
                params[seg.param_name] = part
            elif seg.value != part:
                return None

        if query and self.query_names:
            for key, value in parse_qsl(query, keep_blank_values=True):
                if key in self.query_names and key not in params:
                    params[key] = value

        return params

    def render(self, params: Mapping[str, Any]) -> str:
        """Render *params* back into a path plus query string.

        Raises ``MissingParamError`` if a path param is absent, ``None``,
        or empty. Query params bound to ``None`` are omitted; any other
        value — including ``0``, ``False``, and ``''`` — is rendered.
        """
        parts: list[str] = []
        for seg in self.segments:
            if seg.param_name:
                value = params.get(seg.param_name)
                if value is None or value == "":
                    raise MissingParamError(seg.param_name, self.template)
                parts.append(quote(format_param(value), safe=""))
            else:
                parts.append(seg.value)

        path = "/" + "/".join(parts)

        query = [
            (name, format_param(params[name]))
            for name in self.query_names
            if params.get(name) is not None
        ]
        if query:
            path = f"{path}?{urlencode(query)}"
        return path


def compile_pattern(fragments: Iterable[str]) -> UrlPattern:
    """Compile an ancestor chain's URL fragments (root first) into one pattern.

    Raises ``DuplicateParamError`` if a param name is declared twice
    anywhere in the chain.
    """
    segments: list[PathSegment] = []
    query_names: list[str] = []
    has_path = False

    for fragment in fragments:
        path, names = split_template(fragment)
        if path:
            has_path = True
            segments.extend(parse_path(path))
        for name in names:
            if name not in query_names:
                query_names.append(name)

    template = "/" + "/".join(seg.value for seg in segments) if has_path else ""

    seen: set[str] = set()
    for seg in segments:
        if seg.param_name in seen:
            raise DuplicateParamError(seg.param_name, template)
        if seg.param_name:
            seen.add(seg.param_name)
    for name in query_names:
        if name in seen:
            raise DuplicateParamError(name, template)

    return UrlPattern(
        template=template,
        segments=tuple(segments),
        query_names=tuple(query_names),
    )
