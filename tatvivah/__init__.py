"""TatVivah.

Backend for the TatVivah multi-vendor marketplace: buyers browse a catalog of
seller products, keep a cart, check out, pay, and track shipments while admins
moderate sellers, products, and orders.

High-level architecture
-----------------------

Requests flow through a conventional layered stack:

- ``tatvivah.server.api.v1``: FastAPI routers. They validate input with the
  pydantic models in ``tatvivah.core.models.io`` and resolve the caller via
  ``tatvivah.server.services.deps``.
- ``tatvivah.server.services``: business rules (auth, cart, checkout, orders,
  payments, shipments, admin moderation). Services own the unit of work and
  commit the session.
- ``tatvivah.core.database``: SQLModel entities and async repositories.
- ``tatvivah.core.cache``: Redis-backed read-through cache for hot endpoints.
- ``tatvivah.notifications``: persisted email notifications delivered by an
  in-process dispatcher.

Typical buyer workflow
----------------------

1. Register and verify email with a one-time code.
2. Add variants to the cart.
3. ``POST /v1/checkout`` places an order and reserves inventory.
4. Initiate a payment; a successful payment confirms the order and creates
   seller settlements.
5. Sellers create shipments; the order follows them to SHIPPED and DELIVERED.
"""
