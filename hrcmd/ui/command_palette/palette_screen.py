"""
Command Palette Screen - modal overlay hosted in a small Textual app.

The app owns the global key listener: it registers the presenter's hotkey
handler on mount and removes it on unmount. The screen is a thin view over
PaletteState; all decisions live in the presenter.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from contextlib import ExitStack

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, ListItem, ListView, Static

from hrcmd.services.types import ScoredResult

from .palette_presenter import KeyListener, PalettePresenter, PaletteState

logger = logging.getLogger(__name__)

PresenterFactory = Callable[[Callable[[str], None]], PalettePresenter]


class PaletteResultWidget(ListItem):
    """Widget for a single palette result."""

    DEFAULT_CSS = """
    PaletteResultWidget {
        height: 2;
        padding: 0 1;
    }
    """

    def __init__(self, scored: ScoredResult, pin_label: str, **kwargs):
        super().__init__(**kwargs)
        self.scored = scored
        self.pin_label = pin_label

    def compose(self) -> ComposeResult:
        result = self.scored.result
        title = result.title
        subtitle = result.subtitle or result.href

        # Truncate long titles
        if len(title) > 50:
            title = title[:47] + "..."
        if len(subtitle) > 35:
            subtitle = subtitle[:32] + "..."

        style = "dim" if result.disabled else "bold"
        yield Static(
            f"[{style}]{title}[/{style}]  [dim]{subtitle}[/dim]"
            f"  [dim italic]{result.kind.value} · {self.pin_label}[/dim italic]"
        )


class CommandPaletteScreen(ModalScreen):
    """Command palette modal overlay."""

    CSS = """
    CommandPaletteScreen {
        align: center top;
        padding-top: 5;
    }

    #palette-container {
        width: 80;
        height: auto;
        max-height: 30;
        background: $surface;
        border: solid $primary;
    }

    #palette-input {
        width: 100%;
        height: 3;
        border: none;
        border-bottom: solid $primary-darken-1;
        background: $surface-darken-1;
        padding: 0 1;
    }

    #palette-results {
        height: auto;
        max-height: 20;
        min-height: 5;
        padding: 0;
    }

    #palette-status, #palette-hints {
        height: 1;
        background: $surface-darken-1;
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("up", "cursor_up", "Up", show=False),
        Binding("down", "cursor_down", "Down", show=False),
        Binding("ctrl+t", "toggle_pin", "Pin", show=False),
    ]

    def __init__(self, presenter: PalettePresenter, **kwargs):
        super().__init__(**kwargs)
        self.presenter = presenter
        self._unsubscribe: Callable[[], None] | None = None
        self._render_id = 0

    def compose(self) -> ComposeResult:
        with Vertical(id="palette-container"):
            yield Input(
                placeholder="Search people, jobs, candidates, or actions…",
                id="palette-input",
            )
            yield ListView(id="palette-results")
            yield Static("", id="palette-status")
            yield Static(
                "↑↓ Navigate │ Enter Select │ Ctrl+T Pin │ Esc Close",
                id="palette-hints",
            )

    def on_mount(self) -> None:
        self._unsubscribe = self.presenter.subscribe(self._on_state_update)
        self.query_one("#palette-input", Input).focus()
        self._on_state_update(self.presenter.state)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_state_update(self, state: PaletteState) -> None:
        """Schedule a render; renders superseded by a newer one are skipped."""
        self._render_id += 1
        self.call_later(self._render_state, self._render_id)

    async def _render_state(self, render_id: int) -> None:
        if render_id != self._render_id:
            return

        state = self.presenter.state
        status = self.query_one("#palette-status", Static)
        if state.error:
            status.update(f"[red]{state.error}[/red]")
        elif state.loading:
            status.update("Searching…")
        elif len(state.query.strip()) >= 2 and not state.results:
            status.update("No results.")
        else:
            status.update(f"{len(state.context_actions)} context · {len(state.pinned)} pinned")

        results_view = self.query_one("#palette-results", ListView)
        await results_view.clear()
        for scored in state.results:
            results_view.append(
                PaletteResultWidget(scored, self.presenter.pin_label(scored.result))
            )
        if state.results:
            results_view.index = min(state.selected_index, len(state.results) - 1)

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "palette-input":
            self.presenter.set_query(event.value)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        await self.action_select()

    def action_cursor_up(self) -> None:
        self.presenter.move_selection(-1)

    def action_cursor_down(self) -> None:
        self.presenter.move_selection(1)

    def action_toggle_pin(self) -> None:
        selected = self.presenter.get_selected_result()
        if selected is not None:
            self.presenter.toggle_pin(selected)

    async def action_select(self) -> None:
        await self.presenter.select()

    async def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, PaletteResultWidget):
            await self.presenter.select(event.item.scored.result)


class PaletteApp(App):
    """Minimal host: a location display plus the global palette hotkey."""

    TITLE = "hrcmd"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+k", "palette_key('ctrl+k')", "Palette", priority=True),
        Binding("escape", "palette_key('escape')", "Close", show=False, priority=True),
    ]

    def __init__(
        self,
        presenter_factory: PresenterFactory,
        *,
        on_shutdown: Callable[[], Awaitable[None]] | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.presenter = presenter_factory(self.navigate)
        self._on_shutdown = on_shutdown
        self._key_listeners: list[KeyListener] = []
        self._resources = ExitStack()
        self._screen_open = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(self._location_text(), id="location")
        yield Footer()

    def _location_text(self) -> str:
        location = self.presenter.location or "/"
        return f"Viewing [bold]{location}[/bold]\n\nPress Ctrl+K to open the command palette."

    # Key source

    def add_key_listener(self, listener: KeyListener) -> None:
        self._key_listeners.append(listener)

    def remove_key_listener(self, listener: KeyListener) -> None:
        if listener in self._key_listeners:
            self._key_listeners.remove(listener)

    def action_palette_key(self, key: str) -> None:
        for listener in list(self._key_listeners):
            if listener(key):
                break

    # Lifecycle

    async def on_mount(self) -> None:
        await self.presenter.load_initial_state()
        self._resources.enter_context(self.presenter.attach(self))
        self._resources.callback(self.presenter.subscribe(self._sync_screen))

    async def on_unmount(self) -> None:
        self._resources.close()
        if self._on_shutdown:
            await self._on_shutdown()

    def _sync_screen(self, state: PaletteState) -> None:
        if state.open and not self._screen_open:
            self._screen_open = True
            self.push_screen(CommandPaletteScreen(self.presenter))
        elif not state.open and self._screen_open:
            self._screen_open = False
            self.pop_screen()
            if state.notice:
                self.notify(state.notice)

    def navigate(self, href: str) -> None:
        logger.info("Navigating to %s", href)
        self.sub_title = href
        try:
            self.query_one("#location", Static).update(f"Viewing [bold]{href}[/bold]")
        except NoMatches as e:
            logger.debug("Location widget not mounted yet: %s", e)
