#!/usr/bin/env python3
"""
Examples of using the connector router.

Run this file to route example diagrams and save them as PNG files.
"""

from manhattan_router import CostPolicy, ManhattanRouter, parse_diagram, render_to_png


def example_side_by_side():
    """Two boxes joined by a straight connector"""
    print("Example 1: Side by Side")

    diagram = parse_diagram(
        """
        shape SOURCE 0 100 80 40
        shape TARGET 240 100 80 40
        SOURCE.right -> TARGET.left
        """
    )

    ManhattanRouter(diagram).route_all()
    render_to_png(diagram, "example_side_by_side.png", scale=2)
    print("  Saved: example_side_by_side.png\n")


def example_detour():
    """A connector bending around a shape in its way"""
    print("Example 2: Detour")

    diagram = parse_diagram(
        """
        shape CLIENT 0 100 80 40
        shape FIREWALL 140 60 40 120
        shape SERVER 240 100 80 40
        CLIENT.right -> SERVER.left
        """
    )

    routes = ManhattanRouter(diagram).route_all()
    for name, route in routes.items():
        print(f"  {name}: {route.bend_count} bends")
    render_to_png(diagram, "example_detour.png", scale=2)
    print("  Saved: example_detour.png\n")


def example_pipeline():
    """ETL pipeline; later connectors avoid earlier ones"""
    print("Example 3: Data Pipeline")

    diagram = parse_diagram(
        """
        shape EXTRACT 0 0 100 40
        shape TRANSFORM 160 0 100 40
        shape VALIDATE 160 120 100 40
        shape LOAD 320 120 100 40
        shape ERROR 160 240 100 40

        EXTRACT.right -> TRANSFORM.left
        TRANSFORM.bottom -> VALIDATE.top
        VALIDATE.right -> LOAD.left
        VALIDATE.bottom -> ERROR.top
        ERROR.left -> EXTRACT.bottom
        """
    )

    ManhattanRouter(diagram).route_all()
    render_to_png(diagram, "example_pipeline.png", scale=2)
    print("  Saved: example_pipeline.png\n")


def example_jump_point():
    """Pipeline connectors routed with jump point search"""
    print("Example 4: Jump Point Search")

    diagram = parse_diagram(
        """
        shape EXTRACT 0 0 100 40
        shape TRANSFORM 160 0 100 40
        shape VALIDATE 160 120 100 40
        shape LOAD 320 120 100 40
        EXTRACT.bottom -> LOAD.bottom
        TRANSFORM.right -> LOAD.top
        """
    )

    ManhattanRouter(diagram, policy=CostPolicy.JUMP_POINT).route_all()
    render_to_png(diagram, "example_jump_point.png", scale=2)
    print("  Saved: example_jump_point.png\n")


def example_debug_trace():
    """Inspecting a route computation"""
    print("Example 5: Debug Trace")

    diagram = parse_diagram(
        """
        shape A 0 0 60 40
        shape WALL 100 -20 20 100
        shape B 160 0 60 40
        A.right -> B.left
        """
    )

    router = ManhattanRouter(diagram, debug=True)
    router.compute_route(diagram.connectors[0])
    trace = router.get_trace()
    print(trace.summary())
    trace.dump_to_file("example_trace.txt")
    print("  Saved: example_trace.txt\n")


def main():
    """Run all examples."""
    print("=" * 50)
    print("Connector Router Examples")
    print("=" * 50)
    print()

    example_side_by_side()
    example_detour()
    example_pipeline()
    example_jump_point()
    example_debug_trace()

    print("=" * 50)
    print("All examples generated!")
    print("=" * 50)


if __name__ == "__main__":
    main()
