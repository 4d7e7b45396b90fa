# app/services/cart_engine.py
import asyncio
import logging
import threading
from datetime import datetime, timezone
from decimal import Decimal
from typing import Awaitable, Callable

from pydantic import TypeAdapter, ValidationError
from starlette.concurrency import run_in_threadpool

from app.repositories.kv_store import KeyValueStore
from app.schemas.cart import CartItemCreate, CartLine, CartSummary, DeliveryAddress
from app.schemas.order import CustomerInfo, OrderDetails
from app.schemas.promo import PromoDetails
from app.services import pricing
from app.services.notifications import Notifier

logger = logging.getLogger(__name__)

CART_KEY = "sandwich-cart"
PROMO_KEY = "promo-code"
ORDER_KEY = "orderDetails"

PromoLookup = Callable[[str], Awaitable[PromoDetails | None]]

_lines_adapter = TypeAdapter(list[CartLine])


class InvalidQuantityError(ValueError):
    """Raised when a cart line would drop below quantity 1."""


class CartEngine:
    """
    Cart & pricing state of one shopper.

    Owns:
      - cart lines (insertion ordered, unique by id)
      - the stored promo code and its resolved details

    The store is authoritative: every mutation re-reads the persisted
    lines, applies the change and writes the whole cart back, so several
    engines over one store (other workers, an evicted and rebuilt
    session) don't overwrite each other. Promo codes are resolved
    through the injected async `promo_lookup`; a response that arrives
    after a newer lookup was started is dropped.

    Sync methods do blocking store I/O and are meant to run in a
    threadpool worker; the async ones offload their store calls.
    """

    def __init__(
        self,
        store: KeyValueStore,
        promo_lookup: PromoLookup,
        notifier: Notifier,
        handoff_store: KeyValueStore | None = None,
        shipping_fee: Decimal = pricing.SHIPPING_FEE,
        free_shipping_threshold: Decimal = pricing.FREE_SHIPPING_THRESHOLD,
    ):
        self.store = store
        self.handoff_store = handoff_store or store
        self.promo_lookup = promo_lookup
        self.notifier = notifier
        self.shipping_fee_amount = shipping_fee
        self.free_shipping_threshold = free_shipping_threshold

        self._lines: dict[str, CartLine] = {}
        self.promo_code: str = ""
        self.promo_details: PromoDetails | None = None
        self._lookup_seq = 0

        # Serializes read-modify-write of the persisted cart across threadpool workers
        self._lock = threading.RLock()
        # Persisted promo code as of the last restore or promo write
        self._loaded_code: str | None = None
        self._restoring: asyncio.Future | None = None

    # ---- persistence ----

    async def restore(self) -> None:
        """
        Bring the engine in line with the store.

        Cart lines are always reloaded. The promo code is re-resolved
        when the persisted one differs from what this engine last saw,
        so inactive codes drop their details and codes applied or
        removed through another engine are picked up. Callers arriving
        while that resolution runs wait for the same lookup.
        """
        code = await run_in_threadpool(self._reload)

        if code != self._loaded_code:
            self._loaded_code = code
            self.promo_code = code
            self._lookup_seq += 1
            self.promo_details = None
            self._restoring = asyncio.ensure_future(self._resolve(code)) if code else None

        pending = self._restoring
        if pending is not None:
            await pending
            if self._restoring is pending:
                self._restoring = None

    def _reload(self) -> str:
        with self._lock:
            self._load_lines()
            return self.store.get(PROMO_KEY) or ""

    def _load_lines(self) -> None:
        raw = self.store.get(CART_KEY)
        lines: list[CartLine] = []
        if raw:
            try:
                lines = _lines_adapter.validate_json(raw)
            except ValidationError:
                logger.warning("Discarding unreadable persisted cart")
        self._lines = {line.id: line for line in lines}

    def _save_cart(self) -> None:
        self.store.set(CART_KEY, _lines_adapter.dump_json(self.lines).decode())

    # ---- cart lines ----

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def get_line(self, item_id: str) -> CartLine | None:
        return self._lines.get(item_id)

    def add_item(self, item: CartItemCreate) -> CartLine:
        """
        Add one unit of `item`.

        An existing line keeps its own metadata and only gains quantity.
        """
        with self._lock:
            self._load_lines()
            line = self._lines.get(item.id)
            if line is not None:
                line.quantity += 1
            else:
                line = CartLine(**item.model_dump(exclude={"quantity"}), quantity=1)
                self._lines[line.id] = line
            self._save_cart()

        self.notifier.success(f"{line.name} ajouté au panier!")
        return line

    def remove_item(self, item_id: str) -> None:
        with self._lock:
            self._load_lines()
            self._lines.pop(item_id, None)
            self._save_cart()

    def update_quantity(self, item_id: str, quantity: int) -> None:
        if quantity < 1:
            raise InvalidQuantityError(f"Quantity must be >= 1 (got {quantity})")

        with self._lock:
            self._load_lines()
            line = self._lines.get(item_id)
            if line is not None:
                line.quantity = quantity
            self._save_cart()

    def clear(self) -> None:
        """Empty the cart and drop any promo code."""
        with self._lock:
            self._lines = {}
            self._forget_promo()
            self._save_cart()

    # ---- promo codes ----

    async def _resolve(self, code: str) -> bool:
        self._lookup_seq += 1
        seq = self._lookup_seq

        try:
            details = await self.promo_lookup(code)
        except Exception:
            # Backend errors count as "not found"
            logger.exception("Promo lookup failed for %r", code)
            details = None

        if seq != self._lookup_seq:
            logger.info("Dropping stale promo lookup for %r", code)
            return False

        if details is None or not details.active:
            self.promo_details = None
            self.notifier.error("Code promo invalide ou expiré")
            return False

        self.promo_details = details
        self.notifier.success(f"Code promo appliqué: {details.discount}€ de réduction")
        return True

    async def apply_promo_code(self, code: str) -> bool:
        """
        Resolve `code` against active promo records.

        The code is used verbatim; callers uppercase it beforehand.
        On success the code becomes the stored promo code. An empty code
        clears the details and voids any lookup still in flight.
        """
        if not code:
            self._lookup_seq += 1
            self.promo_details = None
            return False

        if not await self._resolve(code):
            return False

        self.promo_code = code
        await run_in_threadpool(self.store.set, PROMO_KEY, code)
        self._loaded_code = code
        return True

    def remove_promo_code(self) -> None:
        with self._lock:
            self._forget_promo()
        self.notifier.success("Code promo supprimé")

    def _forget_promo(self) -> None:
        # Invalidates any lookup still in flight
        self._lookup_seq += 1
        self.promo_code = ""
        self.promo_details = None
        self.store.remove(PROMO_KEY)
        self._loaded_code = ""

    # ---- pricing ----

    def subtotal(self) -> Decimal:
        return pricing.compute_subtotal(self._lines.values())

    def shipping_fee(self, subtotal: Decimal) -> Decimal:
        return pricing.compute_shipping_fee(
            subtotal, self.shipping_fee_amount, self.free_shipping_threshold
        )

    def discount(self) -> Decimal:
        return self.promo_details.discount if self.promo_details else pricing.ZERO

    def total(self) -> Decimal:
        subtotal = self.subtotal()
        return pricing.compute_total(subtotal, self.shipping_fee(subtotal), self.discount())

    def summary(self) -> CartSummary:
        subtotal = self.subtotal()
        shipping_fee = self.shipping_fee(subtotal)
        discount = self.discount()
        return CartSummary(
            items=[line.model_copy() for line in self.lines],
            total_quantity=sum(line.quantity for line in self.lines),
            subtotal=subtotal,
            shipping_fee=shipping_fee,
            discount=discount,
            total=pricing.compute_total(subtotal, shipping_fee, discount),
            promo_code=self.promo_code,
            promo=self.promo_details,
            address_locked=self.promo_details is not None,
        )

    # ---- delivery address lock ----

    @property
    def address_locked(self) -> bool:
        return self.promo_details is not None

    def delivery_address(self, typed: DeliveryAddress | None = None) -> DeliveryAddress:
        """
        Delivery fields to show the shopper.

        With a promo applied the promo's address wins and is read-only;
        otherwise whatever the shopper typed comes back editable.
        """
        if self.promo_details is not None:
            return DeliveryAddress(
                address=self.promo_details.delivery_address,
                city=self.promo_details.delivery_city,
                zip_code=self.promo_details.delivery_zipcode,
                locked=True,
            )
        if typed is None:
            return DeliveryAddress()
        return typed.model_copy(update={"locked": False})

    # ---- checkout ----

    def submit_order(self, customer_info: CustomerInfo) -> OrderDetails:
        """
        Snapshot the cart into an OrderDetails, hand it to the
        payment/confirmation steps, then reset the cart.

        Nothing is sent to a remote order system here.
        """
        with self._lock:
            self._load_lines()
            order = self._snapshot(customer_info)
            self.handoff_store.set(ORDER_KEY, order.model_dump_json())
            self.clear()

        logger.info(
            "Order submitted: %d line(s), total %s", len(order.order_items), order.order_total
        )
        return order

    def _snapshot(self, customer_info: CustomerInfo) -> OrderDetails:
        address = self.delivery_address(
            DeliveryAddress(
                address=customer_info.address,
                city=customer_info.city,
                zip_code=customer_info.zip_code,
            )
        )
        customer = customer_info.model_copy(
            update={
                "address": address.address,
                "city": address.city,
                "zip_code": address.zip_code,
            }
        )

        subtotal = self.subtotal()
        shipping_fee = self.shipping_fee(subtotal)
        applied = self.promo_details

        return OrderDetails(
            order_items=[line.model_copy() for line in self.lines],
            customer_info=customer,
            order_date=datetime.now(timezone.utc),
            subtotal=subtotal,
            shipping_fee=shipping_fee,
            order_total=pricing.compute_total(subtotal, shipping_fee, self.discount()),
            promo_code=applied.code if applied else None,
            discount=applied.discount if applied else None,
        )

    def last_order(self) -> OrderDetails | None:
        """Read the order snapshot left by submit_order, if any."""
        raw = self.handoff_store.get(ORDER_KEY)
        if not raw:
            return None
        try:
            return OrderDetails.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable order handoff")
            return None
