# config/urls.py
from django.contrib import admin
from django.db import connection
from django.db.utils import DatabaseError
from django.http import JsonResponse
from django.urls import path, include


def healthz(request):
    try:
        with connection.cursor() as cur:
            cur.execute("SELECT 1")
    except DatabaseError as e:
        return JsonResponse({"status": "error", "db": str(e)}, status=503)
    return JsonResponse({"status": "ok"}, status=200)


urlpatterns = [
    path("accounts/", include("accounts.urls")),
    path("indications/", include("indications.urls")),
    path("benefits/", include("benefits.urls")),
    path("admin/", admin.site.urls),
    path("healthz", healthz, name="healthz"),
    path("healthz/", healthz, name="healthz-slash"),
]
