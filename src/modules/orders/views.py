"""Order API views.

Exposes the ``OrderService`` via HTTP using a DRF ViewSet.
Views do not catch domain exceptions: they propagate to
``modules.core.exceptions.api_exception_handler``, which renders the
shared error envelope (400 / 404 / 409 / 422 / 500).
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.catalogue.client import build_catalogue_client
from modules.core.exceptions import FieldValidationFailed
from modules.core.serializers import ErrorResponseSerializer
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderSerializer,
    validate_order_request,
)
from modules.orders.services import OrderService

_UNEXPECTED = OpenApiResponse(
    ErrorResponseSerializer, description="GENERIC-005: unexpected server error."
)


@extend_schema(tags=["Orders"])
class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with an injected catalogue client and
    repository (DIP).  Does **not** extend ``ModelViewSet``: all ORM
    access goes through the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    # Any segment reaches retrieve(); non-integer ids are rejected there.
    lookup_value_regex = "[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            catalogue_client=build_catalogue_client(),
            order_repository=OrderDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @extend_schema(
        summary="Create order",
        description=(
            "Creates an order after checking that every book exists in the "
            "catalogue and is visible for sale. Unit prices are captured "
            "from the catalogue at creation time."
        ),
        request=CreateOrderSerializer,
        responses={
            200: OrderSerializer,
            400: OpenApiResponse(
                ErrorResponseSerializer,
                description="ORDER-00x / ORDER_ITEM-0xx: field validation errors.",
            ),
            409: OpenApiResponse(
                ErrorResponseSerializer,
                description="GENERIC-001..004: data integrity violation.",
            ),
            422: OpenApiResponse(
                ErrorResponseSerializer,
                description="BOOK_NOT_FOUND / BOOK_NOT_VISIBLE.",
            ),
            500: _UNEXPECTED,
        },
    )
    def create(self, request: Request) -> Response:
        """POST /orders"""
        dto, violations = validate_order_request(request.data)
        if violations:
            raise FieldValidationFailed(violations)

        order = self._service.create_order(dto)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    @extend_schema(
        summary="List orders",
        responses={200: OrderSerializer(many=True), 500: _UNEXPECTED},
    )
    def list(self, request: Request) -> Response:
        """GET /orders"""
        orders = self._service.list_orders()
        return Response(OrderSerializer(orders, many=True).data)

    @extend_schema(
        summary="Get order by id",
        responses={
            200: OrderSerializer,
            400: OpenApiResponse(
                ErrorResponseSerializer, description="The id is not an integer."
            ),
            404: OpenApiResponse(
                ErrorResponseSerializer, description="No order has this id."
            ),
            500: _UNEXPECTED,
        },
    )
    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /orders/{pk}"""
        order = self._service.get_order(pk)
        return Response(OrderSerializer(order).data)
