from django.urls import path
from .views import VisitorCountView

app_name = 'visitors'

urlpatterns = [
    path('', VisitorCountView.as_view(), name='count'),
]
