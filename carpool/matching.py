"""
Carpool matching: proximity ranking of providers and pickup sequencing.

Sequencing is a greedy nearest-neighbour walk, not an optimal tour: from the
current point it always moves to the closest pickup that has not been
visited yet, then finishes at the end point.
"""
from operator import attrgetter

from utils.distance_calculator import DistanceCalculator


def rank_by_proximity(items, reference, location_of=attrgetter('start_location')):
    """Stable sort of ``items`` by distance from ``reference``.

    Items whose location is ``None`` keep their relative order and come after
    every item that has one. Without a reference the order is unchanged.
    """
    items = list(items)
    if reference is None:
        return items

    def sort_key(item):
        location = location_of(item)
        if location is None:
            return (1, 0.0)
        return (0, DistanceCalculator.between(reference, location))

    return sorted(items, key=sort_key)


def sequence_pickups(start, end, pickups):
    """Visiting order start -> nearest unvisited pickup -> ... -> end"""
    route = [start]
    unvisited = list(pickups)
    current = start

    while unvisited:
        # min() keeps the first of equally distant points
        index = min(
            range(len(unvisited)),
            key=lambda i: DistanceCalculator.between(current, unvisited[i]),
        )
        current = unvisited.pop(index)
        route.append(current)

    route.append(end)
    return route
