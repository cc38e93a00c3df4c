"""
URL configuration for rental_admin project.
"""
from django.contrib import admin
from django.urls import path, include
from django.shortcuts import redirect

# Import admin customization (just to apply it, not to use)
from rental_admin import admin as admin_customization  # noqa: F401

from common.health import get_health_urls


def root_redirect(request):
    """Redirect root to the API index or the login page"""
    if request.user.is_authenticated:
        return redirect('api-root')
    return redirect('rest_framework:login')


urlpatterns = [
    path('', root_redirect, name='root'),
    path('admin/', admin.site.urls),
    path('api/', include('api.urls')),
    path('api-auth/', include('rest_framework.urls')),  # Session login/logout
]

# Health check endpoints (for load balancers, monitoring)
urlpatterns += get_health_urls()
