"""Flatten nested selector descriptions into single CSS selector strings.

Configuration files describe selectors as trees so that long, repetitive
descendant queries stay readable::

    ".page-content .contents":
      - h1
      - ".custom-tip": [p, div]

resolves to ``".page-content .contents h1, .page-content .contents .custom-tip p,
.page-content .contents .custom-tip div"``.
"""

from typing import Any

from content_to_reader.models.selector_models import Leaf, Node, SelectorTree


def build_selector_tree(raw: Any, path: str = "") -> SelectorTree:
    """Convert a raw YAML value into a tagged selector tree.

    Args:
        raw: A selector string or a mapping of parent selector to a list of subtrees
        path: Dotted location of ``raw`` inside the tree, used in error messages

    Returns:
        ``Leaf`` for strings, ``Node`` for mappings

    Raises:
        ValueError: If any level has an unsupported shape
    """
    where = f" at {path}" if path else ""
    if isinstance(raw, str):
        if not raw.strip():
            raise ValueError(f"Selector can't be an empty string{where}")
        return Leaf(raw.strip())

    if isinstance(raw, dict):
        # Nested empty mappings collapse to their parent; a root one selects nothing
        if not raw and not path:
            raise ValueError("Selector mapping can't be empty")
        children: dict[str, list[SelectorTree]] = {}
        for key, subtrees in raw.items():
            key_path = f"{path}.{key}" if path else str(key)
            if not isinstance(key, str) or not key.strip():
                raise ValueError(f"Parent selector must be a non-empty string{where}")
            if not isinstance(subtrees, list):
                raise ValueError(
                    f"Nested selectors must be a list at {key_path}, "
                    f"got {type(subtrees).__name__}"
                )
            children[key.strip()] = [
                build_selector_tree(subtree, f"{key_path}.{index}")
                for index, subtree in enumerate(subtrees)
            ]
        return Node(children)

    raise ValueError(
        f"Selector must be a string or a mapping{where}, got {type(raw).__name__}"
    )


def resolve(tree: SelectorTree, separator: str = ",", prefix: str = "") -> str:
    """Resolve a selector tree into one flat selector string.

    Every leaf contributes its fully-qualified descendant path. Paths are
    emitted depth first in insertion order and are not deduplicated.

    Args:
        tree: Tree to resolve
        separator: Joins the individual paths (followed by a space)
        prefix: Ancestor selectors accumulated so far

    Returns:
        Flat selector string, e.g. ``"a b c, a b d"`` for
        ``{"a": [{"b": ["c", "d"]}]}``
    """
    if isinstance(tree, Leaf):
        return f"{prefix} {tree.value}".strip()

    if not tree.children:
        return prefix.strip()

    joiner = f"{separator} "
    parts: list[str] = []
    for class_name, subtrees in tree.children.items():
        child_prefix = f"{prefix} {class_name}"
        if not subtrees:
            parts.append(child_prefix.strip())
            continue
        parts.append(
            joiner.join(resolve(subtree, separator, child_prefix) for subtree in subtrees)
        )
    return joiner.join(parts).strip()
