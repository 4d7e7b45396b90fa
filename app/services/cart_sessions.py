# app/services/cart_sessions.py
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Callable

from app.repositories.kv_store import KeyValueStore
from app.services import pricing
from app.services.cart_engine import CartEngine, PromoLookup
from app.services.notifications import NotificationFeed

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1024


class CartSession:
    """
    A shopper's engine plus the feed its notifications go to.
    """

    def __init__(self, session_id: str, engine: CartEngine, feed: NotificationFeed):
        self.session_id = session_id
        self.engine = engine
        self.feed = feed


class CartSessionRegistry:
    """
    LRU cache of CartEngines keyed by shopper session id.

    Engines hold no state the store doesn't have, so evicting one is
    harmless: the next request rebuilds it from the store. Every access
    runs `restore()` to pick up writes made by other workers.
    Lives on `app.state`, created in the FastAPI lifespan.
    """

    def __init__(
        self,
        store_factory: Callable[[str], KeyValueStore],
        promo_lookup: PromoLookup,
        shipping_fee: Decimal = pricing.SHIPPING_FEE,
        free_shipping_threshold: Decimal = pricing.FREE_SHIPPING_THRESHOLD,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ):
        self.store_factory = store_factory
        self.promo_lookup = promo_lookup
        self.shipping_fee = shipping_fee
        self.free_shipping_threshold = free_shipping_threshold
        self.max_sessions = max_sessions

        self._sessions: OrderedDict[str, CartSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def _build(self, session_id: str) -> CartSession:
        feed = NotificationFeed(session_id)
        engine = CartEngine(
            store=self.store_factory(session_id),
            promo_lookup=self.promo_lookup,
            notifier=feed,
            shipping_fee=self.shipping_fee,
            free_shipping_threshold=self.free_shipping_threshold,
        )
        return CartSession(session_id, engine, feed)

    async def get(self, session_id: str) -> CartSession:
        session = self._sessions.get(session_id)
        if session is None:
            session = self._build(session_id)
            self._sessions[session_id] = session
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.debug("Evicted cart session %s", evicted)
        else:
            self._sessions.move_to_end(session_id)

        try:
            await session.engine.restore()
        except Exception:
            # Next request retries from scratch
            if self._sessions.get(session_id) is session:
                del self._sessions[session_id]
            raise
        return session
