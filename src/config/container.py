"""Composition root.

Builds one set of repositories and services and wires them together.
Callers (an HTTP layer, management commands, tests) create a container
and keep it for as long as they need a consistent view; nothing here is
a process-wide singleton.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from modules.compliance.repositories import (
    InMemoryOrderConsultationLinkRepository,
    InMemoryOrderPrescriptionLinkRepository,
    IOrderConsultationLinkRepository,
    IOrderPrescriptionLinkRepository,
    OrderConsultationLinkDjangoRepository,
    OrderPrescriptionLinkDjangoRepository,
)
from modules.compliance.services import OrderComplianceService
from modules.consultations.repositories import (
    ConsultationRequestDjangoRepository,
    IConsultationRequestRepository,
    InMemoryConsultationRequestRepository,
)
from modules.consultations.services import ConsultationService
from modules.orders.cart import CartService
from modules.orders.handlers import register_order_handlers
from modules.orders.queries import OrderQueryService
from modules.orders.repositories import (
    InMemoryOrderRepository,
    IOrderRepository,
    OrderDjangoRepository,
)
from modules.orders.services import OrderCommandService
from modules.prescriptions.repositories import (
    InMemoryPrescriptionRepository,
    IPrescriptionRepository,
    PrescriptionDjangoRepository,
)
from modules.prescriptions.services import PrescriptionService
from modules.products.domain import CatalogProduct
from modules.products.repositories import (
    InMemoryProductRepository,
    IProductRepository,
    ProductDjangoRepository,
)
from modules.products.services import ProductQueryService
from shared.domain.bus import IEventBus
from shared.infrastructure.bus import InMemoryEventBus


@dataclass
class Container:
    order_repository: IOrderRepository
    product_repository: IProductRepository
    prescription_repository: IPrescriptionRepository
    consultation_repository: IConsultationRequestRepository
    prescription_link_repository: IOrderPrescriptionLinkRepository
    consultation_link_repository: IOrderConsultationLinkRepository
    event_bus: IEventBus
    products: ProductQueryService
    compliance: OrderComplianceService
    orders: OrderCommandService
    cart: CartService
    queries: OrderQueryService
    prescriptions: PrescriptionService
    consultations: ConsultationService


def build_container(
    *,
    order_repository: IOrderRepository,
    product_repository: IProductRepository,
    prescription_repository: IPrescriptionRepository,
    consultation_repository: IConsultationRequestRepository,
    prescription_link_repository: IOrderPrescriptionLinkRepository,
    consultation_link_repository: IOrderConsultationLinkRepository,
    event_bus: Optional[IEventBus] = None,
) -> Container:
    if event_bus is None:
        event_bus = register_order_handlers(InMemoryEventBus())

    products = ProductQueryService(product_repository)
    compliance = OrderComplianceService(
        order_repository=order_repository,
        product_service=products,
        prescription_repository=prescription_repository,
        consultation_repository=consultation_repository,
        prescription_link_repository=prescription_link_repository,
        consultation_link_repository=consultation_link_repository,
    )
    orders = OrderCommandService(order_repository, compliance, event_bus)
    return Container(
        order_repository=order_repository,
        product_repository=product_repository,
        prescription_repository=prescription_repository,
        consultation_repository=consultation_repository,
        prescription_link_repository=prescription_link_repository,
        consultation_link_repository=consultation_link_repository,
        event_bus=event_bus,
        products=products,
        compliance=compliance,
        orders=orders,
        cart=CartService(order_repository, products, orders),
        queries=OrderQueryService(order_repository, compliance),
        prescriptions=PrescriptionService(
            prescription_repository, order_repository, prescription_link_repository
        ),
        consultations=ConsultationService(
            consultation_repository, order_repository, consultation_link_repository
        ),
    )


def build_django_container(event_bus: Optional[IEventBus] = None) -> Container:
    return build_container(
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
        prescription_repository=PrescriptionDjangoRepository(),
        consultation_repository=ConsultationRequestDjangoRepository(),
        prescription_link_repository=OrderPrescriptionLinkDjangoRepository(),
        consultation_link_repository=OrderConsultationLinkDjangoRepository(),
        event_bus=event_bus,
    )


def build_in_memory_container(
    products: Iterable[CatalogProduct] = (), event_bus: Optional[IEventBus] = None
) -> Container:
    return build_container(
        order_repository=InMemoryOrderRepository(),
        product_repository=InMemoryProductRepository(products),
        prescription_repository=InMemoryPrescriptionRepository(),
        consultation_repository=InMemoryConsultationRequestRepository(),
        prescription_link_repository=InMemoryOrderPrescriptionLinkRepository(),
        consultation_link_repository=InMemoryOrderConsultationLinkRepository(),
        event_bus=event_bus,
    )
