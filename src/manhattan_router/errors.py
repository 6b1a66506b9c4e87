"""
Exceptions raised by the connector router.

Routable failures (an unreachable goal, an anchor buried inside a shape)
never raise: the router degrades to a direct two-point route so the host
diagram always has something to draw. The exceptions below signal either a
broken internal invariant or misuse of the host layer.
"""


class RoutingError(Exception):
    """Base class for routing errors."""

    pass


class DiagonalMoveError(RoutingError):
    """Raised when a search step would move along both axes at once."""

    pass


class SelfConnectionError(RoutingError):
    """Raised when a self connection is routed without a self-loop router."""

    pass


class UnknownShapeError(RoutingError):
    """Raised when a shape name is not part of the diagram."""

    pass
