from django.db import models


class ImageUpload(models.Model):
    original_file = models.ImageField(upload_to='uploads/')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Upload {self.id}"


class ProcessedImage(models.Model):
    original_url = models.URLField(max_length=1000)
    processed_url = models.URLField(max_length=1000)
    filter_type = models.CharField(max_length=20)

    # Settings the prediction ran with (intensity, prompt, ...)
    filter_settings = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.filter_type} #{self.id}"


class TransformationJob(models.Model):
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('PROCESSING', 'Processing'),
        ('COMPLETED', 'Completed'),
        ('FAILED', 'Failed'),
    ]

    image_url = models.URLField(max_length=1000)
    filter_type = models.CharField(max_length=20)
    filter_settings = models.JSONField(default=dict, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING')
    error_kind = models.CharField(max_length=20, blank=True)
    error_log = models.TextField(blank=True)

    # Set only when the prediction succeeded
    result = models.OneToOneField(
        ProcessedImage, null=True, blank=True, on_delete=models.SET_NULL, related_name='job'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Job {self.id} [{self.status}]"
