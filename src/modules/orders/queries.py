"""Order query service (read-only use cases).

- Users only see their own orders.
- History excludes DRAFT orders (carts), most recent first.
- Order detail carries compliance information only for orders with a
  prescription-only item; reading it never changes the order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from django.conf import settings

from modules.core.logging import log_with_correlation
from modules.core.pagination import DEFAULT_LIMIT, MAX_LIMIT
from modules.orders.dtos import (
    OrderDetailDTO,
    OrderHistoryDTO,
    OrderHistoryQueryDTO,
    OrderSummaryDTO,
)
from modules.orders.exceptions import OrderNotFound, UnauthorizedOrderAccess

if TYPE_CHECKING:
    from modules.compliance.services import OrderComplianceService
    from modules.orders.repositories.interfaces import IOrderRepository

CONTEXT = "OrderQueryService"


class OrderQueryService:
    def __init__(
        self,
        order_repository: IOrderRepository,
        compliance_service: OrderComplianceService,
        default_limit: Optional[int] = None,
        max_limit: Optional[int] = None,
    ) -> None:
        self._order_repo = order_repository
        self._compliance = compliance_service
        self._default_limit = default_limit or getattr(
            settings, "ORDER_HISTORY_DEFAULT_LIMIT", DEFAULT_LIMIT
        )
        self._max_limit = max_limit or getattr(settings, "ORDER_HISTORY_MAX_LIMIT", MAX_LIMIT)

    def get_order_history(
        self,
        user_id: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        correlation_id: Optional[str] = None,
    ) -> OrderHistoryDTO:
        """Paginated non-DRAFT orders of *user_id*.

        ``page`` is forced to at least 1 and ``limit`` is clamped to
        ``[1, max_limit]``; missing values fall back to the defaults.
        """
        params = OrderHistoryQueryDTO(page=page, limit=limit).to_params(
            self._default_limit, self._max_limit
        )
        result = self._order_repo.find_by_user_id_paginated(user_id, params)

        log_with_correlation(
            "DEBUG",
            correlation_id,
            "order.history_fetched",
            CONTEXT,
            user_id=user_id,
            page=result.pagination.page,
            limit=result.pagination.limit,
            total=result.pagination.total,
            returned=len(result.items),
        )
        return OrderHistoryDTO(
            orders=[OrderSummaryDTO.from_entity(order) for order in result.items],
            pagination=result.pagination,
        )

    def get_order_by_id(
        self, order_id: str, user_id: str, correlation_id: Optional[str] = None
    ) -> OrderDetailDTO:
        """Ownership-checked order detail.

        Raises:
            OrderNotFound: order does not exist.
            UnauthorizedOrderAccess: the order belongs to someone else.
        """
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            log_with_correlation(
                "WARN",
                correlation_id,
                "order.not_found",
                CONTEXT,
                order_id=order_id,
                user_id=user_id,
            )
            raise OrderNotFound(order_id)
        if not order.is_owned_by(user_id):
            log_with_correlation(
                "WARN",
                correlation_id,
                "order.access_denied",
                CONTEXT,
                order_id=order_id,
                user_id=user_id,
            )
            raise UnauthorizedOrderAccess()

        compliance = self._compliance.get_compliance_info(order.id)
        log_with_correlation(
            "DEBUG",
            correlation_id,
            "order.detail_fetched",
            CONTEXT,
            order_id=order.id,
            user_id=user_id,
            state=str(order.status),
            compliance_status=str(compliance.status) if compliance else None,
        )
        return OrderDetailDTO.from_entity(order, compliance)
