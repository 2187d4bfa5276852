#!/usr/bin/env python3
"""
Update ordering over the attractor graph.

A body that orbits another simulated body must be advanced after it in the same
frame, otherwise it would pull toward where its parent was last frame. Each body
has at most one attractor, so the graph is a forest when it is acyclic; a stable
topological sort keeps construction order wherever the graph allows it.
"""
import logging
from collections import deque
from typing import Dict, List, Sequence

from .errors import ConfigurationError

log = logging.getLogger(__name__)


def parent_of(body, simulated_ids):
    """The simulated body this body is attracted to, or None."""
    attractor = body.attractor
    if attractor is None:
        return None
    source = getattr(attractor, "source_body", None)
    if source is None or id(source) not in simulated_ids:
        return None
    return source


def update_order(bodies: Sequence) -> List:
    """
    Return bodies ordered so every body comes after the body it orbits.

    Bodies attracted to fixed points (or to bodies outside the set) have no
    dependency. Raises ConfigurationError when a body attracts itself or the
    attractor references form a cycle.
    """
    simulated_ids = {id(b): i for i, b in enumerate(bodies)}
    if len(simulated_ids) != len(bodies):
        raise ConfigurationError("The same body was registered twice")

    children: Dict[int, List[int]] = {i: [] for i in range(len(bodies))}
    pending = [0] * len(bodies)
    for i, body in enumerate(bodies):
        parent = parent_of(body, simulated_ids)
        if parent is None:
            continue
        if parent is body:
            raise ConfigurationError(f"{body.name} uses itself as attractor")
        children[simulated_ids[id(parent)]].append(i)
        pending[i] = 1

    ready = deque(i for i in range(len(bodies)) if pending[i] == 0)
    order: List = []
    while ready:
        i = ready.popleft()
        order.append(bodies[i])
        for child in children[i]:
            pending[child] -= 1
            if pending[child] == 0:
                ready.append(child)

    if len(order) != len(bodies):
        stuck = [bodies[i].name for i in range(len(bodies)) if pending[i] > 0]
        raise ConfigurationError(f"Cyclic attractor references among: {', '.join(stuck)}")

    log.debug("Update order: %s", [b.name for b in order])
    return order
