import pytest

from plugins.price_estimator.backend import utils
from plugins.price_estimator.core import RawDataset


@pytest.fixture(autouse=True)
def fresh_store():
    utils.reset_session_store()
    yield
    utils.reset_session_store()


def _dataset() -> RawDataset:
    rows = [{"x": value, "price": value * 10} for value in range(1, 6)]
    return RawDataset(rows=rows, headers=["x", "price"])


def test_each_session_gets_its_own_runner():
    _, first = utils.new_session(_dataset(), delay=0.0)
    _, second = utils.new_session(_dataset(), delay=0.25)
    assert first.estimator.runner is not second.estimator.runner
    assert first.estimator.runner.delay == 0.0
    assert second.estimator.runner.delay == 0.25


def test_deferred_training_is_not_queued_behind_other_sessions():
    _, slow = utils.new_session(_dataset(), delay=2.0)
    _, fast = utils.new_session(_dataset(), delay=0.0)
    slow.estimator.train_async()
    outcome = fast.estimator.train_async().result(timeout=1.5)
    assert outcome.evaluation.n == 5


def test_clearing_a_session_shuts_down_its_runner():
    session_id, data = utils.new_session(_dataset(), delay=0.0)
    runner = data.estimator.runner
    utils.clear_session(session_id)
    with pytest.raises(RuntimeError):
        runner.submit(lambda: None)
    with pytest.raises(KeyError):
        utils.get_session(session_id)


def test_session_cap_rejects_new_sessions():
    utils.configure_session_store(1)
    utils.new_session(_dataset(), delay=0.0)
    with pytest.raises(ValueError, match="Too many active sessions"):
        utils.new_session(_dataset(), delay=0.0)
