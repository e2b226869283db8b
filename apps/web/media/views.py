"""
Menu image endpoints - upload, replace and delete objects in the image bucket.
"""

from django.core.files.uploadedfile import UploadedFile
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_http_methods, require_POST

from apps.web.core.decorators import store_errors_as_json
from apps.web.core.exceptions import ValidationFailed

from . import storage


def _uploaded_file(request: HttpRequest) -> UploadedFile:
    upload = request.FILES.get("file")
    if upload is None:
        raise ValidationFailed(
            "No file uploaded",
            details=[{"field": "file", "message": "This field is required"}],
        )
    return upload


@require_POST
@store_errors_as_json
def images(request: HttpRequest) -> JsonResponse:
    """
    POST /dashboard/api/images

    Multipart upload with `file` and optional `field` (logo_url,
    banner_image_url or image_url). Returns the object name and public URL.
    """
    stored = storage.upload_image(
        request.caller,  # type: ignore[attr-defined]
        _uploaded_file(request),
        field=request.POST.get("field", "image_url"),
    )
    return JsonResponse({"name": stored.name, "url": stored.url}, status=201)


@require_http_methods(["POST", "DELETE"])
@store_errors_as_json
def image_detail(request: HttpRequest, name: str) -> JsonResponse:
    """
    POST   /dashboard/api/images/{name} - replace the object's content
    DELETE /dashboard/api/images/{name} - remove the object
    """
    caller = request.caller  # type: ignore[attr-defined]

    if request.method == "DELETE":
        storage.delete_image(caller, name)
        return JsonResponse({"deleted": name})

    stored = storage.replace_image(caller, name, _uploaded_file(request))
    return JsonResponse({"name": stored.name, "url": stored.url})
