from django.urls import include, path

from tasks.views import ApiInfoAPIView, HealthAPIView, RootAPIView

urlpatterns = [
    path("", RootAPIView.as_view()),
    path("health", HealthAPIView.as_view()),
    path("api", ApiInfoAPIView.as_view()),
    path("api/", include("tasks.urls")),
]

handler404 = "tasks.views.not_found"
