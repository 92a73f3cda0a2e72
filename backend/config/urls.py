"""URL configuration for clinic-billing project."""
from django.http import JsonResponse
from django.urls import path
from django.views.decorators.csrf import csrf_exempt
from strawberry.django.views import GraphQLView

from .schema import schema


def health_check(request):
    return JsonResponse({"status": "ok"})


urlpatterns = [
    path("graphql", csrf_exempt(GraphQLView.as_view(schema=schema))),
    path("api/health", health_check),
]
