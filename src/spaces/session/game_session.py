"""Wire one tab's state store to its URL sync controller.

Local actions flow store -> debounced URL write. States arriving through the
URL flow controller -> staleness screen -> store. A replayed link never reaches
the store; it parks a CompletedRoundNotice until the player goes home.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from spaces.logic.settings import DEFAULT_RULES
from spaces.logic.staleness import check_incoming_state
from spaces.logic.state import create_initial_state
from spaces.logic.store import GameStateStore
from spaces.session.sync import UrlSyncController

if TYPE_CHECKING:
    from collections.abc import Callable

    from spaces.logic.settings import GameRules
    from spaces.logic.staleness import CompletedRoundNotice
    from spaces.logic.state import GameState
    from spaces.logic.types import UserProfile
    from spaces.session.address_bar import AddressBar
    from spaces.settings import SyncSettings

logger = structlog.get_logger()


class GameSession:
    """The protocol surface a UI binds to: ``store`` for play, ``sync`` for sharing."""

    def __init__(
        self,
        address_bar: AddressBar,
        user: UserProfile,
        settings: SyncSettings | None = None,
        rules: GameRules = DEFAULT_RULES,
        *,
        on_error: Callable[[str], None] | None = None,
        on_notice: Callable[[CompletedRoundNotice], None] | None = None,
    ) -> None:
        self._on_notice = on_notice
        self._notice: CompletedRoundNotice | None = None
        self.store = GameStateStore(create_initial_state(user), rules, on_change=self._publish)
        self.sync = UrlSyncController(
            address_bar,
            settings,
            on_error=on_error,
            on_game_state_received=self._receive,
        )

    @property
    def notice(self) -> CompletedRoundNotice | None:
        """Pending 'round already completed' outcome, if the last link was a replay."""
        return self._notice

    def mount(self) -> None:
        self.sync.mount()

    def unmount(self) -> None:
        self.sync.unmount()

    def _publish(self, state: GameState) -> None:
        self.sync.update_url(state)

    def _receive(self, incoming: GameState) -> None:
        notice = check_incoming_state(self.store.state, incoming)
        if notice is not None:
            self._notice = notice
            # the replayed token must not stay in the address bar
            self.sync.update_url_immediate(self.store.state)
            if self._on_notice is not None:
                self._on_notice(notice)
            return
        self._notice = None
        self.store.load_state(incoming)

    def go_home(self) -> None:
        """Recovery from a replay notice: fresh game for the same user, empty URL."""
        self._notice = None
        self.store.reset_game()
        self.sync.clear_url()
        logger.debug("returned home")
