"""
NodeScope Main Entry Point

Boots the editor core against the in-memory engine and a headless diagram,
then runs a short scripted session that descends into a subgraph and comes
back, printing the breadcrumb trail and render summary along the way.

Usage:
    python -m nodescope              # Run the scripted session
    python -m nodescope --no-demo    # Only initialize and list node types
    python -m nodescope --debug      # Show every bus message
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from nodescope.core.config import EditorConfig, set_config
from nodescope.core.diagram import InMemoryDiagram
from nodescope.core.editor_core import EditorCore
from nodescope.core.handles import NodeHandle
from nodescope.core.messages import (
    CreateLink,
    CreateNode,
    MoveLevelUp,
    NodeCreated,
    SetOutputNode,
    SubgraphNodeSelected,
)
from nodescope.core.mock_engine import InMemoryEngine
from nodescope.core.render_world import RenderWorld
from nodescope.core.types import MessageKind

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)

logger = logging.getLogger("nodescope")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="nodescope",
        description="NodeScope - Presentation core of a node-graph visual editor",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Load configuration from this file",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-demo",
        action="store_true",
        help="Only initialize the core and list node types",
    )
    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging level."""
    level = logging.DEBUG if debug else logging.INFO
    logging.getLogger("nodescope").setLevel(level)


def describe_world(world: Optional[RenderWorld]) -> str:
    if world is None:
        return "nothing rendered"
    return f"{len(world.shapes)} shape(s), {len(world.points)} point(s)"


def run_demo(core: EditorCore) -> None:
    """Build a small graph with one nested level and walk into and out of it."""
    created: List[NodeHandle] = []
    core.bus.subscribe(MessageKind.NODE_CREATED, lambda m: created.append(m.handle))
    separator = core.config.navigation.breadcrumb_separator

    def create(type_name: str) -> NodeHandle:
        core.dispatch(CreateNode(type_name))
        return created[-1]

    circle = create("Circle")
    core.dispatch(SetOutputNode(circle))
    print(f"[{core.breadcrumbs.render(separator)}] {describe_world(core.state.render_result)}")

    subgraph = create("Subgraph")
    core.dispatch(SubgraphNodeSelected(subgraph))

    rectangle = create("Rectangle")
    translate = create("Translate")
    core.dispatch(CreateLink(rectangle, translate, 0))
    core.dispatch(SetOutputNode(translate))
    print(f"[{core.breadcrumbs.render(separator)}] {describe_world(core.state.render_result)}")

    core.dispatch(MoveLevelUp())
    print(f"[{core.breadcrumbs.render(separator)}] output {core.state.output_node}, "
          f"{describe_world(core.state.render_result)}")

    merge = create("Merge")
    core.dispatch(CreateLink(circle, merge))
    core.dispatch(CreateLink(subgraph, merge))
    core.dispatch(SetOutputNode(merge))
    print(f"[{core.breadcrumbs.render(separator)}] {describe_world(core.state.render_result)}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.debug)

    config = EditorConfig.load(args.config)
    set_config(config)

    core = EditorCore(InMemoryEngine(), InMemoryDiagram(), config)
    core.on_error(lambda message, error: print(f"{type(message).__name__} failed: {error}"))
    core.initialize()

    try:
        if args.no_demo:
            for node_type in core.state.node_types:
                print(node_type.name)
        else:
            run_demo(core)
    finally:
        core.shutdown()

    return 0


if __name__ == "__main__":
    sys.exit(main())
