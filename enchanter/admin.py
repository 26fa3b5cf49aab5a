from django.contrib import admin
from django.utils.html import format_html
from .models import ImageUpload, ProcessedImage, TransformationJob

THUMBNAIL = '<img src="{}" width="80" height="80" style="object-fit: cover; border-radius: 4px;" />'


@admin.register(ProcessedImage)
class ProcessedImageAdmin(admin.ModelAdmin):
    list_display = [
        'id',
        'filter_type',
        'original_image_tag',
        'processed_image_tag',
        'created_at'
    ]
    list_filter = ['filter_type', 'created_at']
    search_fields = ['original_url', 'processed_url']

    # Records are written once by the pipeline
    readonly_fields = [
        'original_url',
        'processed_url',
        'filter_type',
        'filter_settings',
        'original_image_tag',
        'processed_image_tag',
    ]

    def original_image_tag(self, obj):
        """Displays a thumbnail of the source image."""
        if obj.original_url:
            return format_html(THUMBNAIL, obj.original_url)
        return "No Image"
    original_image_tag.short_description = 'Original'

    def processed_image_tag(self, obj):
        if obj.processed_url:
            return format_html(THUMBNAIL, obj.processed_url)
        return "N/A"
    processed_image_tag.short_description = 'Processed'


@admin.register(TransformationJob)
class TransformationJobAdmin(admin.ModelAdmin):
    list_display = ['id', 'status', 'filter_type', 'error_kind', 'created_at', 'updated_at']
    list_filter = ['status', 'error_kind', 'filter_type']
    search_fields = ['id', 'image_url', 'error_log']
    readonly_fields = ['status', 'error_kind', 'error_log', 'result', 'created_at', 'updated_at']


@admin.register(ImageUpload)
class ImageUploadAdmin(admin.ModelAdmin):
    list_display = ['id', 'thumbnail', 'created_at']

    def thumbnail(self, obj):
        if obj.original_file:
            return format_html(THUMBNAIL, obj.original_file.url)
        return "No Image"
    thumbnail.short_description = 'Image'
