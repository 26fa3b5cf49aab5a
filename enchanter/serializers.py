from rest_framework import serializers

from .images import validate_image
from .models import ImageUpload, ProcessedImage, TransformationJob
from .pipeline import validate_request


class ImageUploadSerializer(serializers.ModelSerializer):
    class Meta:
        model = ImageUpload
        fields = ['id', 'original_file', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate_original_file(self, value):
        is_valid, msg = validate_image(value)
        if not is_valid:
            raise serializers.ValidationError(msg)
        return value


class ProcessedImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProcessedImage
        fields = ['id', 'original_url', 'processed_url', 'filter_type', 'filter_settings', 'created_at']


class TransformationJobSerializer(serializers.ModelSerializer):
    result = ProcessedImageSerializer(read_only=True)

    class Meta:
        model = TransformationJob
        fields = [
            'id', 'image_url', 'filter_type', 'filter_settings',
            'status', 'error_kind', 'error_log', 'result',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['status', 'error_kind', 'error_log', 'result', 'created_at', 'updated_at']
        extra_kwargs = {
            'image_url': {'required': False, 'allow_blank': True},
            'filter_type': {'required': False, 'allow_blank': True},
        }

    def validate_filter_settings(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Settings must be an object")
        return value

    def validate(self, attrs):
        message = validate_request(attrs.get('image_url'), attrs.get('filter_type'))
        if message:
            raise serializers.ValidationError({'error': message})
        return attrs
