"""
URL configuration for brand API endpoints.
"""

from django.urls import path

from api.v1.brand import views

app_name = "brand"

urlpatterns = [
    path("license-keys", views.LicenseKeyListView.as_view(), name="create-license-key"),
    path(
        "license-keys/<uuid:license_key_id>",
        views.LicenseKeyDetailView.as_view(),
        name="license-key-detail",
    ),
    path(
        "license-keys/<uuid:license_key_id>/licenses",
        views.LicenseKeyLicensesView.as_view(),
        name="create-license",
    ),
    path("licenses/provision", views.ProvisionLicenseView.as_view(), name="provision-license"),
    path("licenses", views.LicenseListView.as_view(), name="list-licenses"),
    path("licenses/<uuid:license_id>", views.LicenseDetailView.as_view(), name="license-detail"),
    path(
        "licenses/<uuid:license_id>/renew",
        views.RenewLicenseView.as_view(),
        name="renew-license",
    ),
    path(
        "licenses/<uuid:license_id>/suspend",
        views.SuspendLicenseView.as_view(),
        name="suspend-license",
    ),
    path(
        "licenses/<uuid:license_id>/resume",
        views.ResumeLicenseView.as_view(),
        name="resume-license",
    ),
    path(
        "licenses/<uuid:license_id>/cancel",
        views.CancelLicenseView.as_view(),
        name="cancel-license",
    ),
    path(
        "licenses/<uuid:license_id>/seats",
        views.LicenseSeatsView.as_view(),
        name="license-seats",
    ),
    path(
        "licenses/<uuid:license_id>/seats/deactivate-all",
        views.ForceDeactivateSeatsView.as_view(),
        name="force-deactivate-seats",
    ),
    path("products", views.ProductListView.as_view(), name="products"),
    path("statistics", views.BrandStatisticsView.as_view(), name="brand-statistics"),
    path("customers", views.CustomerLicensesView.as_view(), name="customer-licenses"),
    path(
        "customers/all-brands",
        views.CustomerLicensesAcrossBrandsView.as_view(),
        name="customer-licenses-all-brands",
    ),
    path(
        "customers/access",
        views.CustomerProductAccessView.as_view(),
        name="customer-product-access",
    ),
]
