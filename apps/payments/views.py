"""
Wallet and payment views
"""
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.core.pagination import LimitPagePagination
from apps.core.permissions import IsCustomer
from apps.customers.services import get_customer_profile
from .serializers import (
    FundWalletResponseSerializer,
    FundWalletSerializer,
    PayBookingResponseSerializer,
    PayBookingSerializer,
    TransactionFilterSerializer,
    TransactionSerializer,
    WalletBalanceSerializer,
)
from .wallet_service import wallet_service


class PaymentViewSet(viewsets.GenericViewSet):
    """
    Wallet balance, top-ups, booking payments and transaction history
    """
    serializer_class = TransactionSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = LimitPagePagination

    def get_permissions(self):
        """Set permissions based on action"""
        if self.action in ['fund', 'pay_booking']:
            return [IsCustomer()]
        return super().get_permissions()

    @extend_schema(
        summary="Wallet balance",
        description="Customers get their wallet balance; barbers get total earnings from paid bookings",
        responses={200: WalletBalanceSerializer},
        tags=['Payments']
    )
    @action(detail=False, methods=['get'])
    def wallet(self, request):
        return Response(WalletBalanceSerializer(wallet_service.get_balance(request.user)).data)

    @extend_schema(
        summary="Fund wallet",
        description="Start a Paystack checkout. The balance is credited once the payment is confirmed.",
        request=FundWalletSerializer,
        responses={
            200: FundWalletResponseSerializer,
            400: OpenApiResponse(description="Invalid amount"),
            502: OpenApiResponse(description="Payment gateway unavailable")
        },
        tags=['Payments']
    )
    @action(detail=False, methods=['post'], url_path='wallet/fund')
    def fund(self, request):
        serializer = FundWalletSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = wallet_service.fund_wallet(
            get_customer_profile(request.user),
            serializer.validated_data['amount'],
            payment_method=serializer.validated_data.get('payment_method', 'card'),
        )
        return Response(FundWalletResponseSerializer(result).data)

    @extend_schema(
        summary="Pay for booking",
        description="Pay a booking's total from the wallet",
        request=PayBookingSerializer,
        responses={
            200: PayBookingResponseSerializer,
            402: OpenApiResponse(description="Insufficient balance"),
            403: OpenApiResponse(description="Not your booking"),
            404: OpenApiResponse(description="Booking not found"),
            409: OpenApiResponse(description="Already paid or cancelled")
        },
        tags=['Payments']
    )
    @action(detail=False, methods=['post'], url_path='pay-booking')
    def pay_booking(self, request):
        serializer = PayBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = wallet_service.pay_for_booking(
            get_customer_profile(request.user),
            serializer.validated_data['booking_id'],
        )
        return Response(PayBookingResponseSerializer({
            'transaction': result['transaction'],
            'balance': result['wallet'].balance,
            'booking': result['booking'],
        }).data)

    @extend_schema(
        summary="Verify payment",
        description="Ask Paystack for the outcome of a transaction and update the ledger",
        responses={
            200: TransactionSerializer,
            404: OpenApiResponse(description="Transaction not found"),
            502: OpenApiResponse(description="Payment gateway unavailable")
        },
        tags=['Payments']
    )
    @action(detail=False, methods=['get'], url_path=r'verify/(?P<reference>[^/]+)')
    def verify(self, request, reference=None):
        txn = wallet_service.verify_payment(reference, user=request.user)
        return Response(TransactionSerializer(txn).data)

    @extend_schema(
        summary="Transaction history",
        description="The current user's transactions, newest first",
        parameters=[
            OpenApiParameter('type', str, description='deposit, withdrawal, payment or refund'),
            OpenApiParameter('status', str, description='pending, successful or failed'),
            OpenApiParameter('page', int, description='Page number'),
            OpenApiParameter('limit', int, description='Items per page (default 20)'),
        ],
        responses={200: TransactionSerializer(many=True)},
        tags=['Payments']
    )
    @action(detail=False, methods=['get'])
    def transactions(self, request):
        params = TransactionFilterSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        queryset = wallet_service.list_transactions(
            request.user,
            type=params.validated_data.get('type'),
            status=params.validated_data.get('status'),
        )
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(TransactionSerializer(page, many=True).data)
        return Response(TransactionSerializer(queryset, many=True).data)
