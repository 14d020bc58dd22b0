"""Selection and scroll movement over the coin table.

Every function takes the dashboard state and the number of table rows that
are currently visible (which changes with the terminal size). After any call
the selected row is inside the viewport:

    scroll_offset <= selected_index <= scroll_offset + visible_rows - 1
"""

from coindash.constants import (
    CHART_HEIGHT_DIVISOR, FOOTER_ROWS, TABLE_CHROME_ROWS,
)


def visible_rows_for_height(height: int) -> int:
    """Number of coin rows that fit in a terminal of ``height`` lines."""
    chart = height // CHART_HEIGHT_DIVISOR
    return max(1, height - chart - FOOTER_ROWS - TABLE_CHROME_ROWS)


def _viewport(state, visible_rows: int) -> int:
    rows = max(1, visible_rows)
    state.viewport_rows = rows
    return rows


def reconcile_scroll(state, visible_rows: int):
    rows = _viewport(state, visible_rows)
    if state.selected_index >= state.scroll_offset + rows:
        state.scroll_offset = state.selected_index - rows + 1
    elif state.selected_index < state.scroll_offset:
        state.scroll_offset = state.selected_index


def move_up(state, visible_rows: int):
    if state.selected_index > 0:
        state.selected_index -= 1
    reconcile_scroll(state, visible_rows)


def move_down(state, visible_rows: int):
    if state.selected_index < len(state.coins) - 1:
        state.selected_index += 1
    reconcile_scroll(state, visible_rows)


def page_up(state, visible_rows: int):
    rows = _viewport(state, visible_rows)
    if not state.coins:
        return
    state.selected_index = max(0, state.selected_index - rows)
    if state.selected_index < state.scroll_offset:
        state.scroll_offset = state.selected_index
    # the viewport may have shrunk since the last call
    reconcile_scroll(state, rows)


def page_down(state, visible_rows: int):
    rows = _viewport(state, visible_rows)
    if not state.coins:
        return
    state.selected_index = min(len(state.coins) - 1, state.selected_index + rows)
    reconcile_scroll(state, rows)


def go_to_top(state, visible_rows: int = 1):
    _viewport(state, visible_rows)
    if not state.coins:
        return
    state.selected_index = 0
    state.scroll_offset = 0


def go_to_bottom(state, visible_rows: int):
    if not state.coins:
        _viewport(state, visible_rows)
        return
    state.selected_index = len(state.coins) - 1
    reconcile_scroll(state, visible_rows)
