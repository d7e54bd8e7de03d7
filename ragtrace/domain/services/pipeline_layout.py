"""Pure layout computation for the pipeline trace graph.

Up to SINGLE_ROW_MAX_STEPS steps: a single horizontal row (left to right).
More steps: a two-row U-shape, top row left to right, bottom row right to
left starting under the last top node. The layout never uses more than
two rows; large step counts only make the rows wider.

The result depends on the step count alone, so it is cached per count.
"""

import math
from dataclasses import dataclass
from functools import lru_cache

NODE_WIDTH = 160
NODE_HEIGHT = 56
GAP_X = 30
GAP_Y = 44

SINGLE_ROW_MAX_STEPS = 3


@dataclass(frozen=True)
class NodeLayout:
    """Placement of the step at position index (top-left corner in x/y)."""

    index: int
    row: int
    col: int
    x: int
    y: int


@dataclass(frozen=True)
class EdgeLayout:
    """Connector between two consecutive nodes."""

    from_index: int
    to_index: int
    path: str  # SVG path "d" attribute
    path_id: str


@dataclass(frozen=True)
class GraphLayout:
    """Node/edge geometry plus bounding box."""

    nodes: tuple[NodeLayout, ...]
    edges: tuple[EdgeLayout, ...]
    width: int
    height: int


EMPTY_LAYOUT = GraphLayout(nodes=(), edges=(), width=0, height=0)


def _fmt(value: float) -> str:
    """Render a coordinate without a trailing '.0'."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _place(index: int, row: int, col: int) -> NodeLayout:
    return NodeLayout(
        index=index,
        row=row,
        col=col,
        x=col * (NODE_WIDTH + GAP_X),
        y=row * (NODE_HEIGHT + GAP_Y),
    )


def _place_nodes(step_count: int) -> list[NodeLayout]:
    if step_count <= SINGLE_ROW_MAX_STEPS:
        return [_place(i, 0, i) for i in range(step_count)]

    top_count = math.ceil(step_count / 2)
    bottom_count = step_count - top_count
    nodes = [_place(i, 0, i) for i in range(top_count)]
    # Bottom row runs right to left so its first node sits under the last top node
    nodes.extend(_place(top_count + i, 1, top_count - 1 - i) for i in range(bottom_count))
    return nodes


def edge_path(source: NodeLayout, target: NodeLayout) -> str:
    """SVG path between two nodes.

    Same row: shallow quadratic between the facing sides at mid-height.
    Row change: cubic from bottom-centre of source to top-centre of target,
    both control points on the vertical midpoint.
    """
    if source.row == target.row:
        going_right = target.x > source.x
        start_x = source.x + NODE_WIDTH if going_right else source.x
        end_x = target.x if going_right else target.x + NODE_WIDTH
        start_y = source.y + NODE_HEIGHT / 2
        end_y = target.y + NODE_HEIGHT / 2
        mid_x = (start_x + end_x) / 2
        return (
            f"M {_fmt(start_x)} {_fmt(start_y)} "
            f"Q {_fmt(mid_x)} {_fmt(start_y)} {_fmt(end_x)} {_fmt(end_y)}"
        )

    start_x = source.x + NODE_WIDTH / 2
    start_y = source.y + NODE_HEIGHT
    end_x = target.x + NODE_WIDTH / 2
    end_y = target.y
    mid_y = (start_y + end_y) / 2
    return (
        f"M {_fmt(start_x)} {_fmt(start_y)} "
        f"C {_fmt(start_x)} {_fmt(mid_y)} {_fmt(end_x)} {_fmt(mid_y)} {_fmt(end_x)} {_fmt(end_y)}"
    )


@lru_cache(maxsize=64)
def _compute_layout_cached(step_count: int) -> GraphLayout:
    if step_count == 0:
        return EMPTY_LAYOUT

    nodes = _place_nodes(step_count)
    edges = tuple(
        EdgeLayout(
            from_index=i,
            to_index=i + 1,
            path=edge_path(nodes[i], nodes[i + 1]),
            path_id=f"edge-{i}-{i + 1}",
        )
        for i in range(len(nodes) - 1)
    )
    return GraphLayout(
        nodes=tuple(nodes),
        edges=edges,
        width=max(n.x + NODE_WIDTH for n in nodes),
        height=max(n.y + NODE_HEIGHT for n in nodes),
    )


def compute_layout(step_count: int) -> GraphLayout:
    """Compute graph geometry for step_count steps.

    Raises:
        TypeError: step_count is not an int.
        ValueError: step_count is negative.
    """
    if isinstance(step_count, bool) or not isinstance(step_count, int):
        raise TypeError(f"step_count must be an int, got {type(step_count).__name__}")
    if step_count < 0:
        raise ValueError(f"step_count must be >= 0, got {step_count}")
    return _compute_layout_cached(step_count)
