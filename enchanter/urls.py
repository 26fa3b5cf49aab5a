from django.urls import path

from .views import (
    ImageUploadView,
    ProcessGhibliImageView,
    ProcessImageView,
    ProcessedImageListView,
    TransformationJobDetailView,
    TransformationJobView,
)

app_name = "enchanter"

urlpatterns = [
    path("upload/", ImageUploadView.as_view(), name="upload"),
    path("process-image/", ProcessImageView.as_view(), name="process-image"),
    path("process-ghibli-image/", ProcessGhibliImageView.as_view(), name="process-ghibli-image"),
    # Async path: create a job, then poll its status
    path("transformations/", TransformationJobView.as_view(), name="transformations"),
    path("transformations/<int:pk>/", TransformationJobDetailView.as_view(), name="transformation-detail"),
    path("processed-images/", ProcessedImageListView.as_view(), name="processed-images"),
]
