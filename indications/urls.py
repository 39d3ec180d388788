# indications/urls.py
from django.urls import path

from . import views

app_name = "indications"

urlpatterns = [
    path("", views.list_view, name="list"),
    path("new/", views.create_view, name="create"),
    path("<uuid:pk>/", views.detail_view, name="detail"),
    path("<uuid:pk>/approve/", views.approve_view, name="approve"),
    path("<uuid:pk>/reject/", views.reject_view, name="reject"),
    path("<uuid:pk>/contract/", views.contract_view, name="contract"),
    path("<uuid:pk>/lost/", views.lost_view, name="lost"),
    path("<uuid:pk>/crm-stage/", views.crm_stage_view, name="crm_stage"),
    path("<uuid:pk>/status/", views.status_view, name="status"),
]
