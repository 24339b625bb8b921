from rest_framework import status, generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from menu.serializers import MenuItemSerializer
from .models import Bill
from .receipts import receipt_data, render_receipt_pdf
from .serializers import BillCreateSerializer, BillReadSerializer, BillQuoteSerializer
from .services import billable_menu_items


BILL_ITEMS_SCHEMA = openapi.Schema(
    type=openapi.TYPE_ARRAY,
    items=openapi.Schema(
        type=openapi.TYPE_OBJECT,
        required=['menu_item_id', 'quantity'],
        properties={
            'menu_item_id': openapi.Schema(type=openapi.TYPE_INTEGER),
            'quantity': openapi.Schema(type=openapi.TYPE_INTEGER, minimum=1),
            'unit_price': openapi.Schema(type=openapi.TYPE_NUMBER, description='Defaults to the menu price'),
        }
    )
)


class BillListCreateView(generics.ListCreateAPIView):
    """
    get: List bills, newest first
    post: Create a bill with its items
    """
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return BillCreateSerializer
        return BillReadSerializer

    def get_queryset(self):
        queryset = Bill.objects.select_related('user').prefetch_related('items')

        # Filter by payment status
        status_filter = self.request.query_params.get('payment_status')
        if status_filter:
            queryset = queryset.filter(payment_status=status_filter)

        # Filter by payment method
        method_filter = self.request.query_params.get('payment_method')
        if method_filter:
            queryset = queryset.filter(payment_method=method_filter)

        # Filter by date
        date_filter = self.request.query_params.get('date')
        if date_filter:
            queryset = queryset.filter(bill_date__date=date_filter)

        return queryset.order_by('-created_at', '-id')

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('payment_status', openapi.IN_QUERY, description="Filter by payment status", type=openapi.TYPE_STRING),
            openapi.Parameter('payment_method', openapi.IN_QUERY, description="Filter by payment method", type=openapi.TYPE_STRING),
            openapi.Parameter('date', openapi.IN_QUERY, description="Filter by bill date (YYYY-MM-DD)", type=openapi.TYPE_STRING),
        ]
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @swagger_auto_schema(
        operation_description="Create a bill; the bill and its items are saved together",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['items'],
            properties={
                'customer_name': openapi.Schema(type=openapi.TYPE_STRING),
                'customer_phone': openapi.Schema(type=openapi.TYPE_STRING),
                'payment_method': openapi.Schema(type=openapi.TYPE_STRING, enum=['cash', 'card', 'upi', 'other']),
                'payment_status': openapi.Schema(type=openapi.TYPE_STRING, enum=['paid', 'pending']),
                'notes': openapi.Schema(type=openapi.TYPE_STRING),
                'items': BILL_ITEMS_SCHEMA,
            }
        ),
        responses={
            201: BillReadSerializer,
            400: 'Bad Request'
        }
    )
    def post(self, request, *args, **kwargs):
        serializer = BillCreateSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        bill = serializer.save()

        # Return the created bill with its items
        response_serializer = BillReadSerializer(bill)
        return Response(response_serializer.data, status=status.HTTP_201_CREATED)


class BillDetailView(generics.RetrieveAPIView):
    """Retrieve a bill; bills are never edited once created"""
    queryset = Bill.objects.select_related('user').prefetch_related('items')
    serializer_class = BillReadSerializer
    permission_classes = [IsAuthenticated]


@swagger_auto_schema(
    method='get',
    operation_description="Menu items that can be billed: active and available, by name",
    responses={200: MenuItemSerializer(many=True)}
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def billable_items(request):
    menu_items = billable_menu_items().select_related('category')
    return Response(MenuItemSerializer(menu_items, many=True).data)


@swagger_auto_schema(
    method='post',
    operation_description="Compute subtotal, tax and total for a set of rows without saving",
    request_body=openapi.Schema(
        type=openapi.TYPE_OBJECT,
        required=['items'],
        properties={'items': BILL_ITEMS_SCHEMA}
    ),
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def bill_quote(request):
    """Totals preview for the bill form"""
    serializer = BillQuoteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return Response(serializer.get_totals())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def bill_receipt(request, pk):
    """Get receipt data for a bill"""
    bill = get_object_or_404(Bill.objects.select_related('user').prefetch_related('items'), pk=pk)
    return Response(receipt_data(bill))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def bill_receipt_pdf(request, pk):
    """Download the bill as a PDF"""
    bill = get_object_or_404(Bill.objects.prefetch_related('items'), pk=pk)
    response = HttpResponse(render_receipt_pdf(bill), content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{bill.bill_number}.pdf"'
    return response
