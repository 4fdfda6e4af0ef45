from __future__ import annotations

import numpy as np
import pytest

from easywand.correspondences import CorrespondenceRecord, CorrespondenceSet, Observation
from easywand.errors import MalformedInput, MissingProfile
from easywand.profiles import ProfileStore, parse_camera_profile


def test_per_camera_accessor_and_pairs():
    wand = CorrespondenceSet.from_arrays(
        {2: [[5.0, 6.0], [7.0, 8.0]], 1: [[1.0, 2.0], [3.0, 4.0]]},
        markers=[0, 1],
        frames=[0, 0],
    )
    assert wand.camera_ids == (1, 2)
    assert wand.points(2).tolist() == [[5.0, 6.0], [7.0, 8.0]]
    assert wand.pairs(1, 2).tolist() == [[1.0, 2.0, 5.0, 6.0], [3.0, 4.0, 7.0, 8.0]]
    assert wand.pairs(2, 1)[:, :2].tolist() == [[5.0, 6.0], [7.0, 8.0]]
    assert len(wand.select_markers(1)) == 1


def test_records_must_observe_same_cameras():
    r0 = CorrespondenceRecord(frame=0, marker=0, observations={1: Observation(0.0, 0.0), 2: Observation(1.0, 1.0)})
    r1 = CorrespondenceRecord(frame=1, marker=0, observations={1: Observation(0.0, 0.0)})
    with pytest.raises(MalformedInput):
        CorrespondenceSet([r0, r1])


def test_records_are_read_only():
    r = CorrespondenceRecord(frame=0, marker=0, observations={1: Observation(0.0, 0.0)})
    with pytest.raises(TypeError):
        r.observations[2] = Observation(1.0, 1.0)  # type: ignore[index]


def test_unobserved_camera():
    wand = CorrespondenceSet.from_arrays({1: np.zeros((3, 2)), 2: np.ones((3, 2))})
    with pytest.raises(MalformedInput):
        wand.points(3)


def test_from_arrays_length_mismatch():
    with pytest.raises(MalformedInput):
        CorrespondenceSet.from_arrays({1: np.zeros((3, 2)), 2: np.zeros((4, 2))})


def test_profile_store_lookup():
    store = ProfileStore([parse_camera_profile(1, 1000.0, 640, 480, 320.0, 240.0)])
    assert store.get(1).resolution == (640, 480)
    assert 1 in store and 2 not in store
    with pytest.raises(MissingProfile):
        store.get(2)


@pytest.mark.parametrize(
    "args",
    [
        (1, 0.0, 640, 480, 320.0, 240.0),
        (1, float("nan"), 640, 480, 320.0, 240.0),
        (1, 1000.0, 0, 480, 320.0, 240.0),
        (1, 1000.0, 640, 480, float("inf"), 240.0),
    ],
)
def test_parse_camera_profile_rejects(args):
    with pytest.raises(MalformedInput):
        parse_camera_profile(*args)


def test_profile_store_rejects_duplicates():
    p = parse_camera_profile(1, 1000.0, 640, 480, 320.0, 240.0)
    with pytest.raises(MalformedInput):
        ProfileStore([p, p])
