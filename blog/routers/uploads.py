from __future__ import annotations

from fastapi import APIRouter, File, Request, UploadFile
from fastapi.responses import JSONResponse

from blog.services.image_service import ImageStore, UploadError

router = APIRouter(prefix="/api", tags=["uploads"])


def _get_image_store(request: Request) -> ImageStore:
    store = getattr(getattr(request.app, "state", None), "image_store", None)
    if not store:
        raise RuntimeError("ImageStore not configured")
    return store


# Editor paste/drag uploads and the file picker both post here.
@router.post("/upload-image")
async def upload_image(request: Request, image: UploadFile | None = File(None)):
    if image is None or not image.filename:
        return JSONResponse({"success": False, "error": "No image file provided"}, status_code=400)
    store = _get_image_store(request)
    # At most one byte past the ceiling is buffered.
    data = await image.read(store.max_bytes + 1)
    try:
        url = store.store(data, image.content_type, image.filename)
    except UploadError as exc:
        return JSONResponse({"success": False, "error": str(exc)}, status_code=400)
    finally:
        await image.close()
    return {"success": True, "imageUrl": url}
