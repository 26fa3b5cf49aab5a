from collections.abc import Mapping

from rest_framework.views import APIView
from rest_framework.generics import ListAPIView, RetrieveAPIView
from rest_framework.response import Response
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework import status

from .models import ProcessedImage, TransformationJob
from .pipeline import process_image, process_ghibli_image
from .serializers import ImageUploadSerializer, ProcessedImageSerializer, TransformationJobSerializer
from .tasks import process_transformation

# HTTP status for each failure kind of a pipeline result
ERROR_STATUS = {
    'validation': status.HTTP_400_BAD_REQUEST,
    'transport': status.HTTP_502_BAD_GATEWAY,
    'job_failed': status.HTTP_422_UNPROCESSABLE_ENTITY,
    'timeout': status.HTTP_504_GATEWAY_TIMEOUT,
    'internal': status.HTTP_500_INTERNAL_SERVER_ERROR,
}

NOT_AN_OBJECT = {"error": "Request body must be a JSON object", "kind": "validation"}


def pipeline_response(result):
    if 'error' in result:
        return Response(result, status=ERROR_STATUS.get(result['kind'], status.HTTP_500_INTERNAL_SERVER_ERROR))
    return Response(result, status=status.HTTP_200_OK)


class ImageUploadView(APIView):
    # Tells DRF to expect file uploads (multipart/form-data)
    parser_classes = (MultiPartParser, FormParser)

    def post(self, request, *args, **kwargs):
        serializer = ImageUploadSerializer(data={'original_file': request.data.get('file')})

        if serializer.is_valid():
            entry = serializer.save()
            return Response({
                "id": entry.id,
                "url": request.build_absolute_uri(entry.original_file.url),
            }, status=status.HTTP_201_CREATED)

        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class ProcessImageView(APIView):
    """Runs a transformation synchronously and returns the pipeline result."""

    def post(self, request, *args, **kwargs):
        if not isinstance(request.data, Mapping):
            return Response(NOT_AN_OBJECT, status=status.HTTP_400_BAD_REQUEST)

        settings = request.data.get('settings') or {}
        if not isinstance(settings, dict):
            return Response({"error": "Settings must be an object", "kind": "validation"},
                            status=status.HTTP_400_BAD_REQUEST)

        result = process_image(request.data.get('imageUrl'), request.data.get('filterType'), settings)
        return pipeline_response(result)


class ProcessGhibliImageView(APIView):

    def post(self, request, *args, **kwargs):
        if not isinstance(request.data, Mapping):
            return Response(NOT_AN_OBJECT, status=status.HTTP_400_BAD_REQUEST)

        return pipeline_response(process_ghibli_image(request.data.get('imageUrl')))


class TransformationJobView(APIView):

    def post(self, request, *args, **kwargs):
        serializer = TransformationJobSerializer(data=request.data)

        if serializer.is_valid():
            # 1. Save to DB immediately
            entry = serializer.save()

            # 2. Trigger Celery Task
            process_transformation.delay(entry.id)

            return Response({
                "id": entry.id,
                "status": "PENDING",
                "message": "Request accepted, processing started."
            }, status=status.HTTP_201_CREATED)

        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class TransformationJobDetailView(RetrieveAPIView):
    queryset = TransformationJob.objects.select_related('result')
    serializer_class = TransformationJobSerializer


class ProcessedImageListView(ListAPIView):
    serializer_class = ProcessedImageSerializer

    def get_queryset(self):
        queryset = ProcessedImage.objects.all()
        filter_type = self.request.query_params.get('filter_type')
        if filter_type:
            queryset = queryset.filter(filter_type=filter_type)
        return queryset[:50]
