from abc import ABC, abstractmethod
from collections.abc import Callable

HashChangeListener = Callable[[], None]


class AddressBar(ABC):
    """
    Abstract interface for the page URL and clipboard of one tab.

    This abstraction lets the sync controller run without a browser. Hash
    writes made through ``replace_hash`` must replace the current history entry
    and must not be reported back to hash-change listeners; listeners only
    hear about navigation the tab did not initiate (back/forward, a pasted
    link).
    """

    @property
    @abstractmethod
    def href(self) -> str:
        """
        Full current URL including any fragment.
        """
        ...

    @property
    @abstractmethod
    def hash(self) -> str:
        """
        Current fragment without the leading ``#``; empty when there is none.
        """
        ...

    @abstractmethod
    def replace_hash(self, fragment: str) -> str:
        """
        Set the fragment in place (no new history entry) and return the new URL.
        """
        ...

    @abstractmethod
    def clear_hash(self) -> None:
        """
        Drop the fragment in place.
        """
        ...

    @abstractmethod
    def add_hash_change_listener(self, listener: HashChangeListener) -> None: ...

    @abstractmethod
    def remove_hash_change_listener(self, listener: HashChangeListener) -> None: ...

    @abstractmethod
    async def write_clipboard(self, text: str) -> None:
        """
        Copy text to the clipboard. Raises OSError when the clipboard refuses.
        """
        ...
