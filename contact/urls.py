"""
Contact URL Configuration
"""
from django.urls import path
from .views import ContactSubmitView

app_name = 'contact'

urlpatterns = [
    path('', ContactSubmitView.as_view(), name='submit'),
]
