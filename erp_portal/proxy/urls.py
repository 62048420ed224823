from django.urls import path
from .views import proxy_request

urlpatterns = [
    path('<path:path>', proxy_request, name='proxy-request'),
]
