from django.urls import path

from core.iam.api import LoginView, logout, refresh_session, users

urlpatterns = [
    path("auth/login", LoginView.as_view(), name="auth-login"),
    path("auth/refresh", refresh_session, name="auth-refresh"),
    path("auth/logout", logout, name="auth-logout"),
    path("users", users, name="users"),
]
