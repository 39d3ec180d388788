# accounts/urls.py
from django.urls import path

from . import views

app_name = "accounts"

urlpatterns = [
    path("login/", views.login_view, name="login"),
    path("logout/", views.logout_view, name="logout"),
    path("me/", views.me_view, name="me"),
    path("me/course-completed/", views.course_completed_view, name="course_completed"),
    path("experts/<uuid:pk>/approve/", views.expert_approve_view, name="expert_approve"),
    path("experts/<uuid:pk>/reject/", views.expert_reject_view, name="expert_reject"),
]
