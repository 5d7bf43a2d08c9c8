import threading

import pytest

from lacquer.runner import ScopedRunner
from photos import Photo


@pytest.fixture
def runner():
    return ScopedRunner("photo")


def test_runner_is_idle_initially(runner):
    assert runner.current is None
    assert not runner.running


def test_run_designates_receiver_for_block(runner):
    photo = Photo()
    during = []

    result = runner.run(photo, lambda p: during.append((runner.current, runner.running)))

    assert result is photo
    assert during == [(photo, True)]
    assert runner.current is None
    assert not runner.running


def test_run_ignores_block_result(runner):
    photo = Photo()

    assert runner.run(photo, lambda p: "something else") is photo


def test_run_clears_receiver_when_block_raises(runner):
    def explode(p):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        runner.run(Photo(), explode)

    assert runner.current is None
    second = Photo()
    assert runner.run(second, lambda p: p.add_person("Ann")) is second
    assert second.people[0].name == "Ann"


def test_scoped_context_manager(runner):
    photo = Photo()

    with runner.scoped(photo) as receiver:
        assert receiver is photo
        assert runner.current is photo

    assert runner.current is None


def test_receivers_are_isolated_between_threads(runner):
    started = threading.Event()
    release = threading.Event()
    seen_in_thread = []

    def block(p):
        started.set()
        release.wait(timeout=5)
        seen_in_thread.append(runner.current is p)

    thread = threading.Thread(target=runner.run, args=(Photo(), block))
    thread.start()
    try:
        assert started.wait(timeout=5)
        assert runner.current is None
        assert not runner.running
    finally:
        release.set()
        thread.join(timeout=5)

    assert seen_in_thread == [True]
