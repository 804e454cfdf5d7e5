"""Controller logic for the incremental list."""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Sequence, Set, Tuple, Union

from .config import ListConfig
from .interfaces import RowRenderer, SearchInput
from .models import ListItem, LoadRequest, coerce_item
from .pagination import ScrollSurface, ScrollTrigger, is_near_bottom
from .search import SearchStrategy, create_search_strategy
from .selection import selected_items, toggle_selection
from .sorting import sort_items

logger = logging.getLogger(__name__)

FetchResult = Optional[Sequence[Any]]
FetchFn = Callable[[LoadRequest], Union[FetchResult, Awaitable[FetchResult]]]
Listener = Callable[["ListSnapshot"], None]


class ListLoadError(RuntimeError):
    """Raised when a page could not be loaded."""

    def __init__(self, request: LoadRequest, message: str) -> None:
        super().__init__(message)
        self.request = request


@dataclass(frozen=True)
class ListSnapshot:
    """Immutable view of the controller state handed to listeners."""

    items: Tuple[ListItem, ...]
    page_cursor: int
    is_loading: bool
    is_last_page: bool
    search_text: str
    search_placeholder: str
    search_at_server: bool
    error: Optional[ListLoadError] = None

    @property
    def show_initial_loading(self) -> bool:
        return self.is_loading and self.page_cursor == 1

    @property
    def show_loading_more(self) -> bool:
        return self.search_at_server and not self.is_last_page


class ListController:
    """Loading, ordering, filtering, paging and selection state of one list."""

    def __init__(
        self,
        config: ListConfig | None = None,
        *,
        data: Optional[Iterable[Any]] = None,
        load_callback: Optional[FetchFn] = None,
    ) -> None:
        self.config = config or ListConfig()
        self._data = None if data is None else tuple(coerce_item(item) for item in data)
        self._load_callback = load_callback
        self.search: SearchStrategy = create_search_strategy(
            self.config, has_loader=self._is_remote
        )

        self.canonical: Tuple[ListItem, ...] = ()
        self.displayed: Tuple[ListItem, ...] = ()
        self.page_cursor = 1
        self.is_loading = False
        self.search_query = ""
        self.search_text = ""
        self.is_last_page = False
        self.error: Optional[ListLoadError] = None

        self._unreported_error: Optional[ListLoadError] = None
        self._session = 0
        self._load_lock = asyncio.Lock()
        self._tasks: Set[asyncio.Task[None]] = set()
        self._listeners: List[Listener] = []
        self._scroll_trigger = ScrollTrigger(self.on_scroll)

    @property
    def _is_remote(self) -> bool:
        return self._data is None and self._load_callback is not None

    # -- lifecycle -----------------------------------------------------

    def mount(self, surface: Optional[ScrollSurface] = None) -> Optional[asyncio.Task[None]]:
        """Populate the list and attach the scroll surface, if any."""

        self._scroll_trigger.attach(surface)
        if self._data is not None:
            self.canonical = self._data
            self.displayed = self._data
            self._notify()
            return None
        if self._load_callback is not None:
            return self._schedule_load()
        return None

    async def aclose(self) -> None:
        """Detach the scroll surface, cancel pending loads and drop the state."""

        self._scroll_trigger.detach()
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()
        self._listeners.clear()
        self.canonical = ()
        self.displayed = ()
        self.is_loading = False
        self.error = None
        self._unreported_error = None

    async def __aenter__(self) -> "ListController":
        return self

    async def __aexit__(self, *_exc) -> None:
        await self.aclose()

    async def wait_idle(self) -> None:
        """Wait for all scheduled loads.

        Re-raises the first load failure recorded since the previous call,
        including failures of loads started by the scroll surface.
        """

        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                break
            await asyncio.gather(*pending, return_exceptions=True)
        error, self._unreported_error = self._unreported_error, None
        if error is not None:
            raise error

    # -- data loader ---------------------------------------------------

    def sort(self, items: Iterable[ListItem]) -> Tuple[ListItem, ...]:
        return sort_items(items, self.config.sort_on, self.config.sort_direction)

    def _schedule_load(self) -> asyncio.Task[None]:
        request = LoadRequest(self.page_cursor, self.config.page_size, self.search_query)
        task = asyncio.get_running_loop().create_task(self.load(request, session=self._session))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @staticmethod
    def _on_task_done(task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("List load failed: %s", exc, exc_info=exc)

    async def _fetch(self, request: LoadRequest) -> List[ListItem]:
        result = self._load_callback(request)
        if inspect.isawaitable(result):
            result = await result
        return [coerce_item(item) for item in (result or ())]

    async def load(self, request: LoadRequest, *, session: Optional[int] = None) -> None:
        """Fetch one page and merge it into the collections.

        Loads run one at a time. A load issued for an older search session is
        discarded instead of applied.
        """

        if self._load_callback is None:
            return
        session = self._session if session is None else session
        async with self._load_lock:
            if session != self._session:
                logger.debug("Discarded stale load %s", request)
                return
            self._set_loading(True)
            try:
                batch = await self._fetch(request)
            except asyncio.CancelledError:
                self._set_loading(False)
                raise
            except Exception as exc:
                if session != self._session:
                    logger.debug("Discarded failure of stale load %s: %s", request, exc)
                    self._set_loading(False)
                    return
                error = ListLoadError(request, f"Seite {request.page_number} konnte nicht geladen werden: {exc}")
                self._fail(error)
                raise error from exc

            if session != self._session:
                logger.debug("Discarded stale result for %s", request)
                self._set_loading(False)
                return
            self._apply_batch(request, batch)
            self.is_loading = False
            self._notify()

    def _apply_batch(self, request: LoadRequest, batch: List[ListItem]) -> None:
        self.is_last_page = len(batch) < request.page_size
        if request.page_number == 1:
            self.canonical = self.sort(batch)
            self.displayed = self.canonical
        else:
            self.canonical = self.sort(self.canonical + tuple(batch))
            self.displayed = self.sort(self.displayed + tuple(batch))
        logger.debug(
            "Applied page %s with %s items (last page: %s)",
            request.page_number,
            len(batch),
            self.is_last_page,
        )

    def _fail(self, error: ListLoadError) -> None:
        # Loads queued behind the failed page belong to a dead session.
        self._session += 1
        self.canonical = ()
        self.displayed = ()
        self.page_cursor = 1
        self.error = error
        if self._unreported_error is None:
            self._unreported_error = error
        self._set_loading(False)

    def _start_session(self) -> asyncio.Task[None]:
        self._session += 1
        for task in self._tasks:
            task.cancel()
        self.error = None
        self.page_cursor = 1
        return self._schedule_load()

    def reload(self) -> Optional[asyncio.Task[None]]:
        """Load the current query again from page 1, e.g. after a failure."""

        if not self._is_remote:
            return None
        return self._start_session()

    def _set_loading(self, loading: bool) -> None:
        self.is_loading = loading
        self._notify()

    # -- search --------------------------------------------------------

    def search_callback(self, activation_key: Optional[str], value: str) -> Optional[asyncio.Task[None]]:
        """Handle input of the search box."""

        self.search_text = value or ""
        task = self.search.on_input(self, activation_key, self.search_text)
        if task is None:
            self._notify()
        return task

    def commit_search(self, query: str) -> asyncio.Task[None]:
        """Start a new server-side search session from page 1."""

        self.search_query = query
        return self._start_session()

    def show_matches(self, matches: Sequence[ListItem]) -> None:
        self.displayed = tuple(matches)

    # -- selection -----------------------------------------------------

    def toggle_selection(self, key: Any) -> None:
        self.canonical, self.displayed = toggle_selection(
            self.canonical, self.displayed, key, single_select=self.config.single_select
        )
        self._notify()

    def selected_items(self) -> Tuple[ListItem, ...]:
        return selected_items(self.canonical)

    # -- pagination ----------------------------------------------------

    def attach_surface(self, surface: Optional[ScrollSurface]) -> ScrollTrigger:
        self._scroll_trigger.attach(surface)
        return self._scroll_trigger

    def on_scroll(
        self, scroll_top: float, scroll_height: float, viewport_height: float
    ) -> Optional[asyncio.Task[None]]:
        if not self._is_remote or self.is_last_page or self.error is not None:
            return None
        if not is_near_bottom(scroll_top, scroll_height, viewport_height):
            return None
        self.page_cursor += 1
        return self._schedule_load()

    # -- presentation --------------------------------------------------

    def snapshot(self) -> ListSnapshot:
        return ListSnapshot(
            items=self.displayed,
            page_cursor=self.page_cursor,
            is_loading=self.is_loading,
            is_last_page=self.is_last_page,
            search_text=self.search_text,
            search_placeholder=self.config.search_placeholder,
            search_at_server=self.search.remote,
            error=self.error,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    def render_rows(self, renderer: RowRenderer) -> None:
        for item in self.displayed:
            renderer(item, self.toggle_selection)

    def bind_search_input(self, widget: SearchInput) -> None:
        widget.show(self.search_text, self.config.search_placeholder, self.search_callback)
