import pytest

from ipod_encoder.domain.temp_models import TransientResources


def test_paths_removed_on_normal_exit(tmp_path):
    a = tmp_path / "a.fifo"
    b = tmp_path / "b.avi"
    with TransientResources() as tracked:
        for path in (a, b):
            path.write_bytes(b"x")
            tracked.append(path)
        assert a.exists() and b.exists()
    assert not a.exists()
    assert not b.exists()


def test_body_failure_is_reraised_after_cleanup(tmp_path):
    path = tmp_path / "tmp.avi"

    def body(tracked):
        path.write_bytes(b"x")
        tracked.append(path)
        raise RuntimeError("stage exploded")

    with pytest.raises(RuntimeError, match="stage exploded"):
        TransientResources().open(body)
    assert not path.exists()


def test_open_returns_body_result(tmp_path):
    assert TransientResources().open(lambda tracked: 42) == 42


def test_already_removed_paths_are_ignored(tmp_path):
    path = tmp_path / "intermediate.avi"
    with TransientResources() as tracked:
        path.write_bytes(b"x")
        tracked.append(path)
        path.unlink()
    assert not path.exists()


def test_cleanup_is_idempotent(tmp_path):
    path = tmp_path / "x.fifo"
    path.write_bytes(b"x")
    tracked = TransientResources()
    tracked.append(str(path))
    tracked.cleanup()
    tracked.cleanup()
    assert not path.exists()
    assert len(tracked) == 1


def test_deletion_errors_do_not_mask_body_failure(tmp_path):
    # A directory cannot be unlinked; cleanup must swallow that.
    directory = tmp_path / "not-a-file"
    directory.mkdir()

    with pytest.raises(KeyError):
        with TransientResources() as tracked:
            tracked.append(directory)
            raise KeyError("primary")
    assert directory.exists()
