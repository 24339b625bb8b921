from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView
from drf_yasg.views import get_schema_view
from drf_yasg import openapi
from rest_framework import permissions

# Setup Swagger schema view
schema_view = get_schema_view(
    openapi.Info(
        title='API Documentation POS ADMIN',
        default_version='v1',
        description="API for managing the restaurant menu and bills",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('', RedirectView.as_view(pattern_name='menu_screen', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/menu/', include('menu.urls')),
    path('api/billing/', include('billing.urls')),
    path('dashboard/', include('dashboard.urls')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
]
