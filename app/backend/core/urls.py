"""URL configuration for core app."""

from django.urls import path

from . import views

urlpatterns = [
    path("movies/", views.movie_list, name="movie-list"),
    path("movies/<str:movie_id>/", views.movie_detail, name="movie-detail"),
    path("genres/", views.genre_list, name="genre-list"),
    path("health/", views.health_check, name="health-check"),
    path("config/", views.public_config, name="public-config"),
]
