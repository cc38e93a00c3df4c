"""
API URLs for the rental admin
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apartments.views import ApartmentViewSet
from tenants.views import TenantViewSet
from rentals.views import RentalViewSet
from dashboard.views import DashboardViewSet

# Create router
router = DefaultRouter()
router.register(r'apartments', ApartmentViewSet, basename='apartment')
router.register(r'tenants', TenantViewSet, basename='tenant')
router.register(r'rentals', RentalViewSet, basename='rental')
router.register(r'dashboard', DashboardViewSet, basename='dashboard')

urlpatterns = [
    # JWT Authentication
    path('auth/login/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # API routes
    path('', include(router.urls)),
]
