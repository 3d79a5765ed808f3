from task_tracker.services.sync import UIState


def test_latest_error_replaces_earlier_one():
    state = UIState()
    state.set_error("first")
    state.set_error("second")
    assert state.error == "second"

    state.clear_error()
    assert state.error is None


def test_listeners_are_notified_until_unsubscribed():
    state = UIState()
    seen = []
    unsubscribe = state.subscribe(lambda s: seen.append(s.error))

    state.set_error("boom")
    state.clear_error()
    state.clear_error()  # no change, no notification
    unsubscribe()
    state.set_error("ignored")

    assert seen == ["boom", None]


def test_selection_and_loading():
    state = UIState()
    state.set_selected_task("3")
    state.set_loading(True)

    assert state.selected_task_id == "3"
    assert state.is_loading is True
