# benefits/urls.py
from django.urls import path

from . import views

app_name = "benefits"

urlpatterns = [
    path("", views.list_view, name="list"),
    path("<uuid:pk>/", views.detail_view, name="detail"),
    path("<uuid:pk>/confirm-client-payment/", views.confirm_client_payment_view, name="confirm_client_payment"),
    path("<uuid:pk>/approve-invoice/", views.approve_invoice_view, name="approve_invoice"),
    path("<uuid:pk>/reject-invoice/", views.reject_invoice_view, name="reject_invoice"),
    path("<uuid:pk>/schedule-payment/", views.schedule_payment_view, name="schedule_payment"),
    path("<uuid:pk>/paid/", views.mark_paid_view, name="mark_paid"),
    path("<uuid:pk>/invoice/", views.upload_invoice_view, name="upload_invoice"),
    path("<uuid:pk>/invoice-url/", views.invoice_url_view, name="invoice_url"),
    path("invoice/<str:token>/", views.invoice_download, name="invoice_download"),
]
