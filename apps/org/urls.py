from django.urls import path
from . import views

app_name = "org"

urlpatterns = [
    path("levels/", views.level_list, name="level_list"),
    path("levels/<int:level_id>/select/", views.level_set, name="level_set"),
]
