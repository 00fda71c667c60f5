"""Keep one tab's GameState and its URL fragment in step.

The URL is the only channel between the two players, so the controller owns
every read and write of the fragment:

1. ``mount()`` reads the fragment once. Empty means a new game; otherwise the
   token is decoded and either adopted or reported as an error.
2. External hash changes (back/forward, a link pasted into the same tab) are
   handled exactly like mount.
3. ``update_url()`` coalesces rapid local changes into one write after the
   debounce window; ``update_url_immediate()`` writes now and drops any
   pending debounced write.

Writes always replace the current history entry so the back button cannot
resurrect an earlier round's partial state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from spaces.messaging.codec import decode_game_state, encode_game_state
from spaces.session.debounce import DebounceTimer
from spaces.settings import SyncSettings

if TYPE_CHECKING:
    from collections.abc import Callable

    from spaces.logic.state import GameState
    from spaces.session.address_bar import AddressBar

logger = structlog.get_logger()

MOUNT_DECODE_ERROR = "Failed to load game from URL - the link may be corrupted"
HASH_CHANGE_DECODE_ERROR = "Failed to load game from URL"
ENCODE_ERROR = "Failed to encode game state to URL"


class UrlSyncController:
    """Owns the serialized game state of one tab.

    Lifecycle:
    1. mount() - parse the current fragment and start listening for hash changes
    2. update_url(state) / update_url_immediate(state) - publish local changes
    3. unmount() - stop listening and cancel any pending write
    """

    def __init__(
        self,
        address_bar: AddressBar,
        settings: SyncSettings | None = None,
        *,
        on_error: Callable[[str], None] | None = None,
        on_url_updated: Callable[[str], None] | None = None,
        on_game_state_received: Callable[[GameState], None] | None = None,
    ) -> None:
        self._address_bar = address_bar
        self._settings = settings or SyncSettings()
        self._on_error = on_error
        self._on_url_updated = on_url_updated
        self._on_game_state_received = on_game_state_received
        self._timer = DebounceTimer(self._settings.debounce_seconds)
        self._game_state: GameState | None = None
        self._error: str | None = None
        self._is_loading = True
        self._mounted = False

    @property
    def game_state(self) -> GameState | None:
        """State last read from or written to the URL; None for a new game."""
        return self._game_state

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_loading(self) -> bool:
        """True until mount() has parsed the initial fragment."""
        return self._is_loading

    @property
    def has_pending_write(self) -> bool:
        return self._timer.pending

    def mount(self) -> None:
        if self._mounted:
            return
        self._mounted = True
        fragment = self._address_bar.hash
        if fragment:
            self._adopt_fragment(fragment, MOUNT_DECODE_ERROR)
        else:
            logger.debug("no fragment on mount, starting new game")
        self._is_loading = False
        self._address_bar.add_hash_change_listener(self._handle_hash_change)

    def unmount(self) -> None:
        """Stop listening and cancel any pending write so nothing lands after teardown."""
        self._timer.cancel()
        if self._mounted:
            self._address_bar.remove_hash_change_listener(self._handle_hash_change)
            self._mounted = False

    def _handle_hash_change(self) -> None:
        fragment = self._address_bar.hash
        if not fragment:
            self._game_state = None
            self._error = None
            logger.debug("fragment cleared, resetting to new game")
            return
        self._adopt_fragment(fragment, HASH_CHANGE_DECODE_ERROR)

    def _adopt_fragment(self, fragment: str, error_message: str) -> None:
        decoded = decode_game_state(fragment)
        if decoded is None:
            self._report_error(error_message)
            return
        self._game_state = decoded
        self._error = None
        logger.info("adopted game state from URL", rounds=len(decoded.round_history), game_id=decoded.game_id)
        if self._on_game_state_received is not None:
            self._on_game_state_received(decoded)

    def _report_error(self, message: str) -> None:
        self._error = message
        logger.warning("url sync error", error=message)
        if self._on_error is not None:
            self._on_error(message)

    def _write(self, state: GameState) -> None:
        token = encode_game_state(state, self._settings.max_token_length)
        if token is None:
            # local play continues; only sharing is broken
            self._report_error(ENCODE_ERROR)
            return
        url = self._address_bar.replace_hash(token)
        self._game_state = state
        self._error = None
        logger.debug("wrote game state to URL", length=len(token))
        if self._on_url_updated is not None:
            self._on_url_updated(url)

    def update_url(self, state: GameState) -> None:
        """Write ``state`` after the debounce window; a later call replaces this one."""
        self._timer.schedule(lambda: self._write(state))

    def update_url_immediate(self, state: GameState) -> None:
        """Write ``state`` now, cancelling any pending debounced write."""
        self._timer.cancel()
        self._write(state)

    def clear_url(self) -> None:
        """Drop the fragment and any pending write; the tab is back to a new game."""
        self._timer.cancel()
        self._address_bar.clear_hash()
        self._game_state = None
        self._error = None

    async def flush(self) -> None:
        """Wait until a pending debounced write has landed."""
        await self._timer.wait()

    def get_share_url(self) -> str:
        return self._address_bar.href

    async def copy_share_url(self) -> bool:
        """Copy the current URL to the clipboard; False when the clipboard refuses."""
        try:
            await self._address_bar.write_clipboard(self._address_bar.href)
        except OSError as e:
            logger.warning("failed to copy share url", error=str(e))
            return False
        return True
