"""
Admin Store
Holds the product list state and applies actions through the reducer.
"""

from typing import Callable, List, Optional

from product_admin.core.logger import logger
from product_admin.state.actions import Action
from product_admin.state.reducer import ProductListState, reduce

Listener = Callable[[ProductListState, Action], None]


class AdminStore:
    """Explicit state container passed to the services that need it"""

    def __init__(self, state: Optional[ProductListState] = None):
        self._state = state or ProductListState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> ProductListState:
        return self._state

    def dispatch(self, action: Action) -> ProductListState:
        new_state = reduce(self._state, action)
        logger.debug(
            f"Dispatched {type(action).__name__}",
            metadata={"event": "store_dispatch", "changed": new_state is not self._state},
        )
        if new_state is self._state:
            return new_state
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state, action)
        return new_state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; the returned callable unsubscribes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
