"""
URL configuration for product API endpoints.
"""

from django.urls import path

from api.v1.product import views

app_name = "product"

urlpatterns = [
    path("activate", views.ActivateLicenseView.as_view(), name="activate-license"),
    path("deactivate", views.DeactivateSeatView.as_view(), name="deactivate-seat"),
    path("status", views.GetLicenseStatusView.as_view(), name="get-license-status"),
    path("activation", views.ActivationStatusView.as_view(), name="activation-status"),
    path("seats", views.ProductSeatsView.as_view(), name="product-seats"),
]
