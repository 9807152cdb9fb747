"""Typed filter graph plan and its serialization to FFmpeg filter_complex syntax."""

import re
from typing import Any, Dict, List, Optional, Tuple, Union
from pydantic import BaseModel, Field
from .timing import format_seconds
from ..core.errors import StructuralGraphError
from ..core.types import Operation

NodeInput = Union[int, str]

LABEL_RE = re.compile(r"^[A-Za-z0-9_]+$")

# Number of inputs each operation consumes
ARITY = {
    Operation.TRIM: 1,
    Operation.CROP: 1,
    Operation.SCALE: 1,
    Operation.OVERLAY: 2,
    Operation.COLOR: 0,
}


class GraphNode(BaseModel):
    """One filter in the graph: an operation, its inputs and its output label."""

    operation: Operation
    inputs: Tuple[NodeInput, ...] = ()
    output: Optional[str] = None  # None only for the sink
    params: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def filter_expr(self) -> str:
        """Filter name and arguments, e.g. "scale=960:540"."""
        p = self.params
        if self.operation == Operation.TRIM:
            return (
                f"trim=start={format_seconds(p['start'])}"
                f":end={format_seconds(p['end'])}"
            )
        elif self.operation == Operation.CROP:
            return f"crop={p['width']}:{p['height']}:{p['x']}:{p['y']}"
        elif self.operation == Operation.SCALE:
            return f"scale={p['width']}:{p['height']}"
        elif self.operation == Operation.OVERLAY:
            return f"overlay=x={p['x']}:y={p['y']}"
        elif self.operation == Operation.COLOR:
            return (
                f"color=c={p['color']}:s={p['width']}x{p['height']}"
                f":r={p['fps']:g}:d={format_seconds(p['duration'])}"
            )
        raise ValueError(f"Unknown operation: {self.operation}")

    def to_filter(self) -> str:
        """Serialize with input and output pads, e.g. "[0:v]scale=960:540[front]"."""
        pads = "".join(
            f"[{inp}:v]" if isinstance(inp, int) else f"[{inp}]" for inp in self.inputs
        )
        out = f"[{self.output}]" if self.output else ""
        return f"{pads}{self.filter_expr()}{out}"


class FilterGraphPlan(BaseModel):
    """Ordered filter graph over `input_count` raw input streams."""

    input_count: int
    nodes: Tuple[GraphNode, ...]

    model_config = {"frozen": True}

    @property
    def sink(self) -> GraphNode:
        return self.nodes[-1]

    def labels(self) -> List[str]:
        """Output labels in emission order."""
        return [node.output for node in self.nodes if node.output]

    def validate_graph(self) -> "FilterGraphPlan":
        """
        Check structural invariants.

        Every input is a valid raw stream index or the label of an earlier
        node, labels are unique and consumed exactly once, and only the final
        node (the sink) has no output label.

        Returns:
            self, for chaining

        Raises:
            StructuralGraphError: the graph is malformed
        """
        if not self.nodes:
            raise StructuralGraphError("Filter graph has no nodes")

        produced: Dict[str, int] = {}  # label -> times consumed
        last = len(self.nodes) - 1

        for i, node in enumerate(self.nodes):
            expected = ARITY[node.operation]
            if len(node.inputs) != expected:
                raise StructuralGraphError(
                    f"Node {i} ({node.operation.value}) takes {expected} inputs, "
                    f"got {len(node.inputs)}"
                )

            for inp in node.inputs:
                if isinstance(inp, int):
                    if not 0 <= inp < self.input_count:
                        raise StructuralGraphError(
                            f"Node {i} references input stream {inp}, "
                            f"only {self.input_count} inputs exist"
                        )
                elif inp not in produced:
                    raise StructuralGraphError(
                        f"Node {i} references label '{inp}' before it is produced"
                    )
                else:
                    produced[inp] += 1

            if i == last:
                if node.output is not None:
                    raise StructuralGraphError(
                        f"Sink node must not have an output label, got '{node.output}'"
                    )
                continue

            if not node.output:
                raise StructuralGraphError(f"Node {i} has no output label")
            if not LABEL_RE.match(node.output):
                raise StructuralGraphError(f"Invalid label '{node.output}'")
            if node.output in produced:
                raise StructuralGraphError(f"Duplicate label '{node.output}'")
            produced[node.output] = 0

        for label, count in produced.items():
            if count != 1:
                raise StructuralGraphError(
                    f"Label '{label}' consumed {count} times, expected once"
                )

        return self

    def to_filter_complex(self) -> str:
        """Serialize the whole graph as a -filter_complex argument."""
        return ";".join(node.to_filter() for node in self.nodes)
