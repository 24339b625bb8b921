from rest_framework import generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters
from drf_yasg.utils import swagger_auto_schema

from .models import MenuCategory, MenuItem
from .serializers import MenuCategorySerializer, MenuItemSerializer, MenuOverviewSerializer


class CreatedByMixin:
    """Mixin to record the requesting user on created rows"""

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)


# Category Views
class MenuCategoryListCreateView(CreatedByMixin, generics.ListCreateAPIView):
    """
    get: List all menu categories by display order
    post: Create a new menu category
    """
    queryset = MenuCategory.objects.all()
    serializer_class = MenuCategorySerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['is_active']
    search_fields = ['name', 'description']
    ordering_fields = ['display_order', 'name', 'created_at']
    ordering = ['display_order', 'id']


class MenuCategoryRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    """
    get: Get category details
    put/patch: Update category
    delete: Delete category (its items are kept, uncategorized)
    """
    queryset = MenuCategory.objects.all()
    serializer_class = MenuCategorySerializer
    permission_classes = [IsAuthenticated]


# Menu Item Views
class MenuItemListCreateView(CreatedByMixin, generics.ListCreateAPIView):
    """
    get: List all menu items by display order
    post: Create a new menu item
    """
    queryset = MenuItem.objects.select_related('category')
    serializer_class = MenuItemSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category', 'is_active', 'is_available', 'is_vegetarian']
    search_fields = ['name', 'description', 'hsn_code']
    ordering_fields = ['display_order', 'name', 'price', 'created_at']
    ordering = ['display_order', 'id']


class MenuItemRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    """
    get: Get menu item details
    put/patch: Update menu item
    delete: Delete menu item
    """
    queryset = MenuItem.objects.select_related('category')
    serializer_class = MenuItemSerializer
    permission_classes = [IsAuthenticated]


# Additional utility views
@swagger_auto_schema(
    method='get',
    operation_description="Load categories and items together, both by display order",
    responses={200: MenuOverviewSerializer}
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def menu_overview(request):
    """Get every category and every item in one response"""
    categories = MenuCategory.objects.order_by('display_order', 'id')
    items = MenuItem.objects.select_related('category').order_by('display_order', 'id')
    serializer = MenuOverviewSerializer({'categories': categories, 'items': items})
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def menu_by_category(request, category_id):
    """Get all menu items for a specific category"""
    category = get_object_or_404(MenuCategory, id=category_id)
    menu_items = category.items.select_related('category').order_by('display_order', 'id')

    return Response({
        'category': MenuCategorySerializer(category).data,
        'menu_items': MenuItemSerializer(menu_items, many=True).data
    })
