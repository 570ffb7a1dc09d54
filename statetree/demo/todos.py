"""
Todo list application state.

State shape:
    {
        "todos": [{"text": str, "completed": bool}, ...],
        "visibility_filter": "SHOW_ALL" | "SHOW_COMPLETED" | "SHOW_ACTIVE",
    }
"""

from typing import Any, Dict, List

from ..core.events import Event
from ..core.reducer import Reducer, combine

ADD_TODO = "ADD_TODO"
TOGGLE_TODO = "TOGGLE_TODO"
SET_VISIBILITY_FILTER = "SET_VISIBILITY_FILTER"

SHOW_ALL = "SHOW_ALL"
SHOW_COMPLETED = "SHOW_COMPLETED"
SHOW_ACTIVE = "SHOW_ACTIVE"
FILTERS = (SHOW_ALL, SHOW_COMPLETED, SHOW_ACTIVE)

todos = Reducer(initial=[])
visibility_filter = Reducer(initial=SHOW_ALL)


@todos.on(ADD_TODO)
def _add_todo(items: List[Dict[str, Any]], ev: Event) -> List[Dict[str, Any]]:
    text = ev.get("text")
    if not isinstance(text, str):
        return items
    return items + [{"text": text, "completed": False}]


@todos.on(TOGGLE_TODO)
def _toggle_todo(items: List[Dict[str, Any]], ev: Event) -> List[Dict[str, Any]]:
    index = ev.get("index")
    if isinstance(index, bool) or not isinstance(index, int):
        return items
    if not 0 <= index < len(items):
        return items
    # Untouched items are reused by reference
    return [
        dict(item, completed=not item["completed"]) if i == index else item
        for i, item in enumerate(items)
    ]


@visibility_filter.on(SET_VISIBILITY_FILTER)
def _set_filter(current: str, ev: Event) -> str:
    value = ev.get("filter")
    return value if isinstance(value, str) and value in FILTERS else current


root_reducer = combine({
    "todos": todos,
    "visibility_filter": visibility_filter,
})


def add_todo(text: str) -> Event:
    return Event(type=ADD_TODO, payload={"text": text})


def toggle_todo(index: int) -> Event:
    return Event(type=TOGGLE_TODO, payload={"index": index})


def set_visibility_filter(value: str) -> Event:
    return Event(type=SET_VISIBILITY_FILTER, payload={"filter": value})


def visible_todos(state: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Select the todos the current filter lets through."""
    mode = state["visibility_filter"]
    if mode == SHOW_COMPLETED:
        return [t for t in state["todos"] if t["completed"]]
    if mode == SHOW_ACTIVE:
        return [t for t in state["todos"] if not t["completed"]]
    return list(state["todos"])
