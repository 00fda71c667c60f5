from urllib.parse import urldefrag

from spaces.session.address_bar import AddressBar, HashChangeListener


class MockAddressBar(AddressBar):
    def __init__(self, url: str = "http://localhost:5173/") -> None:
        base, fragment = urldefrag(url)
        self._base = base
        self._hash = fragment
        self._listeners: list[HashChangeListener] = []
        self._writes: list[str] = []
        self._clipboard: list[str] = []
        self.clipboard_error: OSError | None = None

    @property
    def href(self) -> str:
        return f"{self._base}#{self._hash}" if self._hash else self._base

    @property
    def hash(self) -> str:
        return self._hash

    @property
    def writes(self) -> list[str]:
        """Fragments written through replace_hash, oldest first."""
        return self._writes.copy()

    @property
    def clipboard(self) -> list[str]:
        return self._clipboard.copy()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def replace_hash(self, fragment: str) -> str:
        self._hash = fragment
        self._writes.append(fragment)
        return self.href

    def clear_hash(self) -> None:
        self._hash = ""

    def add_hash_change_listener(self, listener: HashChangeListener) -> None:
        self._listeners.append(listener)

    def remove_hash_change_listener(self, listener: HashChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def write_clipboard(self, text: str) -> None:
        if self.clipboard_error is not None:
            raise self.clipboard_error
        self._clipboard.append(text)

    def simulate_navigation(self, fragment: str) -> None:
        """
        Simulate navigation the tab did not initiate (back/forward, pasted link).
        """
        self._hash = fragment.removeprefix("#")
        for listener in self._listeners.copy():
            listener()
