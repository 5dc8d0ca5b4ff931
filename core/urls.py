"""
URL configuration for the Portfolio backend.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.urls import path, include

urlpatterns = [
    path('api/visitors', include('visitors.urls')),  # Visit counter (increments on every call)
    path('api/notes', include('notes.urls')),  # Read-only notes listing
    path('api/contact', include('contact.urls')),  # Contact form submission
]
