"""
End-to-end scenario on the todo list application.
"""

import copy

from statetree.core.canonical import canonical_json_str
from statetree.core.errors import NestedDispatchError
from statetree.core.store import create_store
from statetree.demo import todos as app


def test_initial_state():
    store = create_store(app.root_reducer)

    assert store.get_state() == {"todos": [], "visibility_filter": "SHOW_ALL"}


def test_todo_scenario():
    store = create_store(app.root_reducer)

    store.dispatch({"type": "ADD_TODO", "text": "Eat food"})
    assert store.get_state()["todos"] == [{"text": "Eat food", "completed": False}]

    store.dispatch({"type": "TOGGLE_TODO", "index": 0})
    assert store.get_state()["todos"][0]["completed"] is True

    todos_before = store.get_state()["todos"]
    store.dispatch({"type": "SET_VISIBILITY_FILTER", "filter": "SHOW_COMPLETED"})

    assert store.get_state()["visibility_filter"] == "SHOW_COMPLETED"
    assert store.get_state()["todos"] is todos_before


def test_no_mutation_of_prior_state():
    """No field reachable from the prior state is altered by a transition."""
    store = create_store(app.root_reducer)
    store.dispatch(app.add_todo("Eat food"))
    store.dispatch(app.add_todo("Sleep"))
    prior = store.get_state()
    snapshot = copy.deepcopy(prior)

    store.dispatch(app.toggle_todo(1))
    store.dispatch(app.add_todo("Repeat"))
    store.dispatch(app.set_visibility_filter(app.SHOW_ACTIVE))

    assert prior == snapshot
    assert store.get_state() is not prior


def test_toggle_reuses_untouched_items():
    store = create_store(app.root_reducer)
    store.dispatch(app.add_todo("a"))
    store.dispatch(app.add_todo("b"))
    first = store.get_state()["todos"][0]

    store.dispatch(app.toggle_todo(1))

    assert store.get_state()["todos"][0] is first


def test_out_of_range_toggle_and_unknown_filter_are_noops():
    store = create_store(app.root_reducer)
    store.dispatch(app.add_todo("a"))
    state = store.get_state()

    store.dispatch(app.toggle_todo(5))
    store.dispatch(app.set_visibility_filter("SHOW_SOMETIMES"))

    assert store.get_state() is state


def test_unrelated_event_keeps_state_reference():
    store = create_store(app.root_reducer)
    state = store.get_state()

    store.dispatch({"type": "SOMETHING_ELSE"})

    assert store.get_state() is state


def test_visible_todos():
    store = create_store(app.root_reducer)
    for text in ("a", "b", "c"):
        store.dispatch(app.add_todo(text))
    store.dispatch(app.toggle_todo(1))

    store.dispatch(app.set_visibility_filter(app.SHOW_COMPLETED))
    assert [t["text"] for t in app.visible_todos(store.get_state())] == ["b"]

    store.dispatch(app.set_visibility_filter(app.SHOW_ACTIVE))
    assert [t["text"] for t in app.visible_todos(store.get_state())] == ["a", "c"]


def test_root_reducer_determinism():
    state = create_store(app.root_reducer).get_state()
    ev = app.add_todo("x")

    outputs = {canonical_json_str(app.root_reducer(state, ev)) for _ in range(50)}

    assert len(outputs) == 1


def test_subscriber_dispatch_is_rejected():
    """A subscriber may not feed results back synchronously."""
    store = create_store(app.root_reducer)
    errors = []

    def autocomplete():
        try:
            store.dispatch(app.toggle_todo(0))
        except NestedDispatchError as ex:
            errors.append(ex)

    store.subscribe(autocomplete)
    store.dispatch(app.add_todo("Eat food"))

    assert len(errors) == 1
    assert store.get_state()["todos"][0]["completed"] is False


def test_events_with_missing_or_mistyped_fields_are_noops():
    """Handlers return the prior state instead of raising on bad payloads."""
    store = create_store(app.root_reducer)
    store.dispatch(app.add_todo("a"))
    state = store.get_state()

    for bad in (
        {"type": "TOGGLE_TODO"},
        {"type": "TOGGLE_TODO", "index": "0"},
        {"type": "TOGGLE_TODO", "index": True},
        {"type": "TOGGLE_TODO", "index": 0.0},
        {"type": "SET_VISIBILITY_FILTER"},
        {"type": "SET_VISIBILITY_FILTER", "filter": ["SHOW_ALL"]},
        {"type": "ADD_TODO"},
        {"type": "ADD_TODO", "text": 5},
    ):
        store.dispatch(bad)

    assert store.get_state() is state
