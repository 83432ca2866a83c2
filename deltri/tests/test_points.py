import pytest

from deltri.core.geometry import Point
from deltri.core.points import PointProvider


def test_generated_points_within_bounds():
    provider = PointProvider(None, -2.0, 3.0, 10.0, 11.0, seed=7)
    for p in provider.take(200):
        assert -2.0 <= p.x < 3.0
        assert 10.0 <= p.y < 11.0
    assert len(provider) == 200


def test_seed_is_reproducible():
    a = PointProvider(None, 0.0, 1.0, 0.0, 1.0, seed=3).take(10)
    b = PointProvider(None, 0.0, 1.0, 0.0, 1.0, seed=3).take(10)
    assert a == b


def test_save_then_replay(tmp_path):
    path = str(tmp_path / "session.txt")
    first = PointProvider(path, 0.0, 100.0, 0.0, 100.0, seed=1)
    drawn = first.take(5)
    first.save()

    replay = PointProvider(path, 0.0, 100.0, 0.0, 100.0, seed=99)
    assert len(replay) == 5
    assert replay.take(5) == drawn
    # past the saved history new points are generated and recorded
    extra = replay.next_point()
    assert isinstance(extra, Point)
    assert len(replay) == 6


def test_reset_forgets_history(tmp_path):
    path = str(tmp_path / "session.txt")
    provider = PointProvider(path, 0.0, 1.0, 0.0, 1.0, seed=5)
    provider.take(3)
    provider.reset()
    assert len(provider) == 0
    provider.next_point()
    assert len(provider) == 1
    provider.save()
    assert len(PointProvider(path, 0.0, 1.0, 0.0, 1.0)) == 1


def test_missing_file_starts_empty(tmp_path):
    provider = PointProvider(str(tmp_path / "nope.txt"), 0.0, 1.0, 0.0, 1.0)
    assert len(provider) == 0


def test_invalid_bounds_and_save_without_file():
    with pytest.raises(ValueError):
        PointProvider(None, 1.0, 1.0, 0.0, 1.0)
    with pytest.raises(ValueError):
        PointProvider(None, 0.0, 1.0, 0.0, 1.0).save()
