import math

import pytest

from binroute.models.domain import Coordinate, Stop
from binroute.services.routing.distance import RoadLeg
from binroute.services.routing.errors import MissingEndpointError, UnreachableStopError
from binroute.services.routing.models import PlanningContext
from binroute.services.routing.solver import build_visiting_order, select_nearest

from fakes import FailingRouter, StraightLineRouter, _stop

GARAGE = Coordinate(0.0, 0.0)
DISPOSAL = Coordinate(2.0, 2.0)


def _leg(length_deg: float | None) -> RoadLeg:
    if length_deg is None:
        return RoadLeg(start=GARAGE, end=GARAGE, polyline=())
    return RoadLeg(start=GARAGE, end=Coordinate(length_deg, 0.0), polyline=(GARAGE, Coordinate(length_deg, 0.0)))


def _context(stops, garage=GARAGE, disposal=DISPOSAL) -> PlanningContext:
    return PlanningContext(stops=tuple(stops), garage=garage, disposal_site=disposal)


def test_select_nearest_prefers_strictly_shorter_leg():
    assert select_nearest([_leg(0.5), _leg(0.2), _leg(0.3)]) == 1


def test_select_nearest_breaks_ties_by_input_order():
    assert select_nearest([_leg(0.4), _leg(0.2), _leg(0.2)]) == 1


def test_select_nearest_skips_unreachable_legs():
    legs = [_leg(None), _leg(0.9), _leg(None)]
    assert legs[0].distance_km == math.inf
    assert select_nearest(legs) == 1


def test_select_nearest_returns_none_when_nothing_reachable():
    assert select_nearest([_leg(None), _leg(None)]) is None
    assert select_nearest([]) is None


def test_select_nearest_ignores_non_finite_lengths():
    nan_leg = RoadLeg(start=GARAGE, end=GARAGE, polyline=(GARAGE, Coordinate(float("nan"), 0.0)))
    assert math.isnan(nan_leg.length_km)

    assert select_nearest([nan_leg, _leg(0.7)]) == 1
    assert select_nearest([nan_leg]) is None


def test_stops_not_due_for_collection_are_never_visited():
    skipped = Stop(stop_id="SKIP", location=Coordinate(0.05, 0.0), due_for_collection=False)
    s1 = _stop("S1", 0.1, 0.0)
    router = StraightLineRouter()

    order, _ = build_visiting_order(_context([skipped, s1]), router, max_parallel_requests=1)

    assert [stop.stop_id for stop in order] == ["S1"]
    assert all(end != skipped.location for _, end in router.calls)


def test_only_stops_not_due_make_no_calls():
    skipped = Stop(stop_id="SKIP", location=Coordinate(1.0, 0.0), due_for_collection=False)

    assert build_visiting_order(_context([skipped]), FailingRouter()) == ([], [])


def test_nearest_neighbour_scenario_from_garage():
    s1 = _stop("S1", 1.0, 0.0)
    s2 = _stop("S2", 0.0, 1.0)
    router = StraightLineRouter()

    order, legs = build_visiting_order(_context([s1, s2]), router, max_parallel_requests=1)

    assert [stop.stop_id for stop in order] == ["S1", "S2"]
    assert len(legs) == 2
    assert legs[0].end == s1.location


def test_visits_closest_stop_first_regardless_of_input_order():
    far = _stop("FAR", 0.9, 0.9)
    near = _stop("NEAR", 0.1, 0.0)
    middle = _stop("MID", 0.4, 0.3)

    order, _ = build_visiting_order(_context([far, near, middle]), StraightLineRouter(), max_parallel_requests=1)

    assert [stop.stop_id for stop in order] == ["NEAR", "MID", "FAR"]


def test_order_is_permutation_of_eligible_stops():
    stops = [_stop(f"S{i}", 0.01 * ((i * 7) % 11), 0.01 * ((i * 3) % 5)) for i in range(8)]

    order, legs = build_visiting_order(_context(stops), StraightLineRouter(), max_parallel_requests=1)

    assert len(order) == len(stops)
    assert sorted(stop.stop_id for stop in order) == sorted(stop.stop_id for stop in stops)
    assert len(legs) == len(stops)


def test_concurrent_evaluation_matches_sequential():
    stops = [_stop(f"S{i}", 0.05 * (i % 4), 0.05 * (i // 4)) for i in range(12)]

    sequential, _ = build_visiting_order(_context(stops), StraightLineRouter(), max_parallel_requests=1)
    concurrent, _ = build_visiting_order(_context(stops), StraightLineRouter(), max_parallel_requests=6)

    assert [stop.stop_id for stop in concurrent] == [stop.stop_id for stop in sequential]


def test_router_call_count_is_triangular():
    stops = [_stop(f"S{i}", 0.1 * i, 0.0) for i in range(1, 5)]
    router = StraightLineRouter()

    build_visiting_order(_context(stops), router, max_parallel_requests=1)

    assert len(router.calls) == 4 + 3 + 2 + 1


@pytest.mark.parametrize(
    "garage, disposal, missing",
    [
        (None, DISPOSAL, ("garage",)),
        (GARAGE, None, ("disposal_site",)),
        (None, None, ("garage", "disposal_site")),
    ],
)
def test_missing_endpoint_fails_before_routing(garage, disposal, missing):
    context = _context([_stop("S1", 1.0, 0.0)], garage=garage, disposal=disposal)

    with pytest.raises(MissingEndpointError) as excinfo:
        build_visiting_order(context, FailingRouter())

    assert excinfo.value.missing == missing


def test_empty_stop_set_makes_no_calls():
    order, legs = build_visiting_order(_context([]), FailingRouter())

    assert order == []
    assert legs == []


def test_unreachable_stop_is_deferred_until_forced():
    s1 = _stop("S1", 0.1, 0.0)
    s3 = _stop("S3", 0.05, 0.0)
    s2 = _stop("S2", 0.2, 0.0)
    router = StraightLineRouter(unreachable=[(0.05, 0.0)])

    with pytest.raises(UnreachableStopError) as excinfo:
        build_visiting_order(_context([s1, s3, s2]), router, max_parallel_requests=1)

    assert excinfo.value.remaining_ids == ("S3",)
    assert excinfo.value.position == s2.location


def test_all_candidates_unreachable_from_garage():
    stops = [_stop("S1", 1.0, 0.0), _stop("S2", 0.0, 1.0)]
    router = StraightLineRouter(unreachable=[(0.0, 0.0)])

    with pytest.raises(UnreachableStopError) as excinfo:
        build_visiting_order(_context(stops), router, max_parallel_requests=1)

    assert excinfo.value.position == GARAGE
    assert excinfo.value.remaining_ids == ("S1", "S2")
