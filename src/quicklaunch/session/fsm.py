"""Overlay phase state chart.

The chart validates phase changes; the Session data itself lives on
SessionStateMachine. ``first`` exists only so the first tick resolves to
``unopened`` instead of assuming a stale default.
"""

from __future__ import annotations

from statemachine import State, StateMachine


class LauncherPhaseSM(StateMachine):
    """Three-state phase chart for the overlay.

    States:
        first    -- construction only; left on the first tick, never re-entered.
        unopened -- overlay hidden, waiting for the hotkey.
        opened   -- overlay visible with a live Session.
    """

    first = State("first", initial=True, value="first")
    unopened = State("unopened", value="unopened")
    opened = State("opened", value="opened")

    resolve = first.to(unopened)
    idle = unopened.to.itself()
    summon = unopened.to(opened)
    refresh = opened.to.itself()
    dismiss = opened.to(unopened)
