"""
Mock Engine - Simulated processing engine for running without the real one.

Provides an in-memory engine with generational node handles, nested
subgraph processors, textual parameters and a small 2D geometry catalog,
so the editor core can be exercised end to end.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from nodescope.core.codec import decode_value, is_well_formed
from nodescope.core.engine import NO_RESULT, ProcessingEngine
from nodescope.core.errors import EngineError
from nodescope.core.handles import InputArity, NodeTypeDescriptor, ParameterDescriptor
from nodescope.core.types import InputArityKind, ParameterKind

logger = logging.getLogger(__name__)

World = Dict[str, Dict[int, Dict[str, Any]]]


@dataclass(frozen=True)
class EngineHandle:
    """Generational node handle issued by the mock engine."""
    index: int
    generation: int

    def __str__(self) -> str:
        return f"{self.index}v{self.generation}"


@dataclass(frozen=True)
class EnginePath:
    """Chain of subgraph nodes leading from the root graph to a nested graph."""
    nodes: Tuple[EngineHandle, ...] = ()


@dataclass
class MockNodeType:
    """Catalog entry plus the processor that evaluates it."""
    descriptor: NodeTypeDescriptor
    defaults: Dict[str, str]
    process: Callable[[List[World], Dict[str, Any]], World]
    is_subgraph: bool = False


@dataclass
class MockNode:
    """A node instance inside a mock graph."""
    node_type: MockNodeType
    parameters: Dict[str, str]
    slots: List[Optional[EngineHandle]] = field(default_factory=list)
    inputs: List[EngineHandle] = field(default_factory=list)
    subgraph: Optional["MockGraph"] = None

    @property
    def arity(self) -> InputArity:
        return self.node_type.descriptor.input_arity

    def upstream(self) -> List[EngineHandle]:
        if self.arity.kind == InputArityKind.SLOTTED:
            return [h for h in self.slots if h is not None]
        return list(self.inputs)

    def is_input_satisfied(self) -> bool:
        if self.arity.kind == InputArityKind.SLOTTED:
            return all(h is not None for h in self.slots)
        return self.arity.zero_allowed or len(self.inputs) > 0


class MockGraph:
    """Node storage for one graph level, with generational handle reuse."""

    def __init__(self):
        self._nodes: List[Optional[MockNode]] = []
        self._generations: List[int] = []
        self.output: Optional[EngineHandle] = None

    def add(self, node: MockNode) -> EngineHandle:
        for index, slot in enumerate(self._nodes):
            if slot is None:
                self._nodes[index] = node
                return EngineHandle(index, self._generations[index])
        self._nodes.append(node)
        self._generations.append(0)
        return EngineHandle(len(self._nodes) - 1, 0)

    def get(self, handle: Any, operation: str) -> MockNode:
        if (
            not isinstance(handle, EngineHandle)
            or handle.index >= len(self._nodes)
            or self._generations[handle.index] != handle.generation
            or self._nodes[handle.index] is None
        ):
            raise EngineError(operation, "InvalidHandle")
        return self._nodes[handle.index]

    def remove(self, handle: EngineHandle, operation: str) -> None:
        self.get(handle, operation)
        self._nodes[handle.index] = None
        self._generations[handle.index] += 1

        for node in self.nodes():
            node.slots = [None if h == handle else h for h in node.slots]
            node.inputs = [h for h in node.inputs if h != handle]
        if self.output == handle:
            self.output = None

    def nodes(self) -> List[MockNode]:
        return [n for n in self._nodes if n is not None]

    def depends_on(self, handle: EngineHandle, other: EngineHandle) -> bool:
        """Whether ``handle`` is ``other`` or reads from it, directly or not."""
        pending = [handle]
        seen = set()
        while pending:
            current = pending.pop()
            if current == other:
                return True
            if current in seen:
                continue
            seen.add(current)
            pending.extend(self.get(current, "depends_on").upstream())
        return False


# =============================================================================
# Geometry processors
# =============================================================================

def _empty_world() -> World:
    return {"shapes": {}, "points": {}}


def _world_from_outlines(outlines: List[Tuple[List[Tuple[float, float]], bool]]) -> World:
    world = _empty_world()
    for positions, closed in outlines:
        vertices = []
        for x, y in positions:
            key = len(world["points"])
            world["points"][key] = {
                "position": [x, y],
                "in_tangent": [0.0, 0.0],
                "out_tangent": [0.0, 0.0],
            }
            vertices.append({"index": key})
        world["shapes"][len(world["shapes"])] = {"vertices": vertices, "closed": closed}
    return world


def _map_points(
    world: World,
    transform: Callable[[float, float], Tuple[float, float]],
    tangent_transform: Optional[Callable[[float, float], Tuple[float, float]]] = None,
) -> World:
    """Move point positions. Tangents are relative vectors, changed only by ``tangent_transform``."""
    result = _empty_world()
    result["shapes"] = {k: dict(v) for k, v in world["shapes"].items()}
    for key, point in world["points"].items():
        moved = {"position": list(transform(*point["position"]))}
        for tangent in ("in_tangent", "out_tangent"):
            value = list(point[tangent])
            # [0,0] marks "no tangent" and must stay as is
            if tangent_transform is not None and value != [0.0, 0.0]:
                value = list(tangent_transform(*value))
            moved[tangent] = value
        result["points"][key] = moved
    return result


def _merge_worlds(worlds: List[World]) -> World:
    result = _empty_world()
    for world in worlds:
        offset = len(result["points"])
        for key, point in world["points"].items():
            result["points"][offset + key] = point
        for shape in world["shapes"].values():
            result["shapes"][len(result["shapes"])] = {
                "vertices": [{"index": offset + v["index"]} for v in shape["vertices"]],
                "closed": shape["closed"],
            }
    return result


def _process_empty(inputs: List[World], params: Dict[str, Any]) -> World:
    return _empty_world()


def _process_circle(inputs: List[World], params: Dict[str, Any]) -> World:
    cx, cy = params["center"]
    radius = params["radius"]
    segments = max(params["segments"], 3)
    outline = [
        (cx + radius * math.cos(2 * math.pi * i / segments),
         cy + radius * math.sin(2 * math.pi * i / segments))
        for i in range(segments)
    ]
    return _world_from_outlines([(outline, True)])


def _process_rectangle(inputs: List[World], params: Dict[str, Any]) -> World:
    x, y = params["position"]
    w, h = params["width"], params["height"]
    return _world_from_outlines([([(x, y), (x + w, y), (x + w, y + h), (x, y + h)], True)])


def _process_add_points(inputs: List[World], params: Dict[str, Any]) -> World:
    return _world_from_outlines([(params["points"], params["closed"])])


def _process_translate(inputs: List[World], params: Dict[str, Any]) -> World:
    dx, dy = params["offset"]
    return _map_points(inputs[0], lambda x, y: (x + dx, y + dy))


def _process_scale(inputs: List[World], params: Dict[str, Any]) -> World:
    factor = params["factor"]

    def scale(x: float, y: float) -> Tuple[float, float]:
        return x * factor, y * factor

    return _map_points(inputs[0], scale, scale)


def _process_copy_and_offset(inputs: List[World], params: Dict[str, Any]) -> World:
    dx, dy = params["offset"]
    copies = [
        _map_points(inputs[0], lambda x, y, i=i: (x + i * dx, y + i * dy))
        for i in range(params["copies"] + 1)
    ]
    return _merge_worlds(copies)


def _process_merge(inputs: List[World], params: Dict[str, Any]) -> World:
    return _merge_worlds(inputs)


def _node_type(
    name: str,
    arity: InputArity,
    params: List[Tuple[str, ParameterKind, str]],
    process: Callable[[List[World], Dict[str, Any]], World],
    is_subgraph: bool = False,
) -> MockNodeType:
    descriptor = NodeTypeDescriptor(
        name=name,
        input_arity=arity,
        parameters=tuple(ParameterDescriptor(n, k) for n, k, _ in params),
    )
    return MockNodeType(
        descriptor=descriptor,
        defaults={n: default for n, _, default in params},
        process=process,
        is_subgraph=is_subgraph,
    )


def default_node_types() -> List[MockNodeType]:
    """The catalog served by the mock engine, in menu order."""
    return [
        _node_type("Empty", InputArity.slotted(0), [], _process_empty),
        _node_type("Circle", InputArity.slotted(0), [
            ("center", ParameterKind.POSITION, "0,0"),
            ("radius", ParameterKind.FLOAT, "10"),
            ("segments", ParameterKind.UNSIGNED_INT, "8"),
        ], _process_circle),
        _node_type("Rectangle", InputArity.slotted(0), [
            ("position", ParameterKind.POSITION, "0,0"),
            ("width", ParameterKind.FLOAT, "100"),
            ("height", ParameterKind.FLOAT, "100"),
        ], _process_rectangle),
        _node_type("AddPoints", InputArity.slotted(0), [
            ("points", ParameterKind.POSITION_LIST, "0,0;10,0"),
            ("closed", ParameterKind.BOOLEAN, "false"),
        ], _process_add_points),
        _node_type("Translate", InputArity.slotted(1), [
            ("offset", ParameterKind.POSITION, "0,0"),
        ], _process_translate),
        _node_type("Scale", InputArity.slotted(1), [
            ("factor", ParameterKind.FLOAT, "1"),
        ], _process_scale),
        _node_type("CopyAndOffset", InputArity.slotted(1), [
            ("copies", ParameterKind.UNSIGNED_INT, "1"),
            ("offset", ParameterKind.POSITION, "10,0"),
        ], _process_copy_and_offset),
        _node_type("Merge", InputArity.multiple(zero_allowed=False), [], _process_merge),
        _node_type("Subgraph", InputArity.slotted(0), [], _process_empty, is_subgraph=True),
    ]


class InMemoryEngine(ProcessingEngine):
    """
    Mock engine implementation for running and testing without the real engine.

    Keeps every graph level in memory. Subgraph nodes own a nested graph
    whose output node is their result.
    """

    def __init__(self, node_types: Optional[List[MockNodeType]] = None):
        self._types: Dict[str, MockNodeType] = {
            t.descriptor.name: t for t in (node_types or default_node_types())
        }
        self._root = MockGraph()
        logger.info(f"InMemoryEngine: Ready with {len(self._types)} node types")

    def _graph(self, path: Any, operation: str) -> MockGraph:
        if not isinstance(path, EnginePath):
            raise EngineError(operation, "InvalidGraphPath")
        graph = self._root
        for handle in path.nodes:
            node = graph.get(handle, operation)
            if node.subgraph is None:
                raise EngineError(operation, "NotASubgraphProcessor")
            graph = node.subgraph
        return graph

    def get_root_path(self) -> EnginePath:
        return EnginePath()

    def get_graph_path(self, parent_path: Any, handle: Any) -> EnginePath:
        node = self._graph(parent_path, "get_graph_path").get(handle, "get_graph_path")
        if node.subgraph is None:
            raise EngineError("get_graph_path", "NotASubgraphProcessor")
        return EnginePath(parent_path.nodes + (handle,))

    def hash_graph_path(self, path: Any) -> str:
        self._graph(path, "hash_graph_path")
        return "r" + "".join(f"/{h.index}.{h.generation}" for h in path.nodes)

    def get_node_types(self) -> List[Dict[str, Any]]:
        return [t.descriptor.to_dict() for t in self._types.values()]

    def add_processor_node(self, path: Any, type_name: str) -> EngineHandle:
        node_type = self._types.get(type_name)
        if node_type is None:
            raise EngineError("add_processor_node", "UnknownNodeType")
        arity = node_type.descriptor.input_arity
        node = MockNode(
            node_type=node_type,
            parameters=dict(node_type.defaults),
            slots=[None] * arity.slot_count if arity.kind == InputArityKind.SLOTTED else [],
            subgraph=MockGraph() if node_type.is_subgraph else None,
        )
        handle = self._graph(path, "add_processor_node").add(node)
        logger.debug(f"InMemoryEngine: Added {type_name} node {handle}")
        return handle

    def remove_node(self, path: Any, handle: Any) -> None:
        self._graph(path, "remove_node").remove(handle, "remove_node")
        logger.debug(f"InMemoryEngine: Removed node {handle}")

    def is_node_subgraph_processor(self, path: Any, handle: Any) -> bool:
        node = self._graph(path, "is_node_subgraph_processor").get(handle, "is_node_subgraph_processor")
        return node.node_type.is_subgraph

    def _check_link(self, graph: MockGraph, from_handle: Any, to_handle: Any, operation: str) -> MockNode:
        graph.get(from_handle, operation)
        target = graph.get(to_handle, operation)
        if graph.depends_on(from_handle, to_handle):
            raise EngineError(operation, "WouldCreateCycle")
        return target

    def connect_nodes(self, path: Any, from_handle: Any, to_handle: Any) -> None:
        graph = self._graph(path, "connect_nodes")
        target = self._check_link(graph, from_handle, to_handle, "connect_nodes")
        if target.arity.kind != InputArityKind.MULTIPLE:
            raise EngineError("connect_nodes", "NodeHasSlottedInput")
        if from_handle not in target.inputs:
            target.inputs.append(from_handle)
        logger.debug(f"InMemoryEngine: Connected {from_handle} -> {to_handle}")

    def connect_nodes_slotted(self, path: Any, from_handle: Any, to_handle: Any, slot: int) -> None:
        graph = self._graph(path, "connect_nodes_slotted")
        target = self._check_link(graph, from_handle, to_handle, "connect_nodes_slotted")
        if target.arity.kind != InputArityKind.SLOTTED:
            raise EngineError("connect_nodes_slotted", "NodeHasMultipleInput")
        if not 0 <= slot < len(target.slots):
            raise EngineError("connect_nodes_slotted", "SlotOutOfRange")
        target.slots[slot] = from_handle
        logger.debug(f"InMemoryEngine: Connected {from_handle} -> {to_handle}[{slot}]")

    def disconnect_nodes(self, path: Any, from_handle: Any, to_handle: Any) -> None:
        graph = self._graph(path, "disconnect_nodes")
        graph.get(from_handle, "disconnect_nodes")
        target = graph.get(to_handle, "disconnect_nodes")
        target.inputs = [h for h in target.inputs if h != from_handle]

    def disconnect_nodes_slotted(self, path: Any, from_handle: Any, to_handle: Any, slot: int) -> None:
        graph = self._graph(path, "disconnect_nodes_slotted")
        graph.get(from_handle, "disconnect_nodes_slotted")
        target = graph.get(to_handle, "disconnect_nodes_slotted")
        if 0 <= slot < len(target.slots) and target.slots[slot] == from_handle:
            target.slots[slot] = None

    def set_output_node(self, path: Any, handle: Any) -> None:
        graph = self._graph(path, "set_output_node")
        graph.get(handle, "set_output_node")
        graph.output = handle

    def get_output_node(self, path: Any) -> Optional[EngineHandle]:
        """Get the output node of a graph level, if any."""
        return self._graph(path, "get_output_node").output

    def run_processors(self, path: Any) -> Union[World, str]:
        graph = self._graph(path, "run_processors")
        if graph.output is None:
            return NO_RESULT
        world = self._evaluate(graph, graph.output)
        return NO_RESULT if world is None else world

    def _evaluate(self, graph: MockGraph, handle: EngineHandle) -> Optional[World]:
        node = graph.get(handle, "run_processors")
        if not node.is_input_satisfied():
            return None

        if node.subgraph is not None:
            if node.subgraph.output is None:
                return None
            return self._evaluate(node.subgraph, node.subgraph.output)

        inputs = []
        for upstream in node.upstream():
            world = self._evaluate(graph, upstream)
            if world is None:
                return None
            inputs.append(world)

        params = {
            p.name: decode_value(p.kind, node.parameters[p.name])
            for p in node.node_type.descriptor.parameters
        }
        return node.node_type.process(inputs, params)

    def get_node_parameter(self, path: Any, handle: Any, name: str) -> str:
        node = self._graph(path, "get_node_parameter").get(handle, "get_node_parameter")
        if name not in node.parameters:
            raise EngineError("get_node_parameter", "ExposedParameterDoesNotExist")
        return node.parameters[name]

    def set_node_parameter(self, path: Any, handle: Any, name: str, value: str) -> None:
        node = self._graph(path, "set_node_parameter").get(handle, "set_node_parameter")
        param = node.node_type.descriptor.parameter(name)
        if param is None:
            raise EngineError("set_node_parameter", "ExposedParameterDoesNotExist")
        if not is_well_formed(param.kind, value.strip()):
            raise EngineError("set_node_parameter", "InvalidParameterValue")
        node.parameters[name] = value.strip()
        logger.debug(f"InMemoryEngine: Set {handle}.{name} = {value}")

    def is_input_satisfied(self, path: Any, handle: Any) -> bool:
        return self._graph(path, "is_input_satisfied").get(handle, "is_input_satisfied").is_input_satisfied()
