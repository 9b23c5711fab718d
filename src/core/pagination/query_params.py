from collections.abc import Iterable, Mapping
import re
from typing import Any

from starlette.datastructures import QueryParams

_KEY_PATTERN = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT_PATTERN = re.compile(r"\[([^\[\]]*)\]")


def _split_key(key: str) -> list[str] | None:
    match = _KEY_PATTERN.match(key)
    if match is None:
        return None
    return [match.group(1), *_SEGMENT_PATTERN.findall(match.group(2))]


def _assign(target: dict[str, Any], path: list[str], value: str) -> None:
    node: Any = target
    for index, segment in enumerate(path):
        is_last = index == len(path) - 1
        if isinstance(node, list):
            # "key[]" appends, nothing can be nested below a list entry
            if is_last:
                node.append(value)
            return
        if is_last:
            node[segment] = value
            return
        next_is_append = path[index + 1] == ""
        child = node.get(segment)
        if next_is_append and not isinstance(child, list):
            child = []
            node[segment] = child
        elif not next_is_append and not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child


def parse_nested_query(
    query_params: QueryParams | Mapping[str, str] | Iterable[tuple[str, str]],
) -> dict[str, Any]:
    """
    Decode bracket-notation query keys into nested dictionaries.

    ``filters[name][operator]=like&filters[name][data]=john&sort[name]=ASC``
    becomes ``{"filters": {"name": {"operator": "like", "data": "john"}},
    "sort": {"name": "ASC"}}``. ``key[]=a&key[]=b`` becomes a list. Keys keep
    the order they appear in, so sort entries stack in request order. Keys
    that are not valid bracket expressions are kept verbatim.
    """
    if isinstance(query_params, QueryParams):
        items: Iterable[tuple[str, str]] = query_params.multi_items()
    elif isinstance(query_params, Mapping):
        items = query_params.items()
    else:
        items = query_params

    result: dict[str, Any] = {}
    for key, value in items:
        path = _split_key(key)
        if path is None:
            result[key] = value
            continue
        _assign(result, path, value)
    return result
