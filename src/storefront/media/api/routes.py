"""FastAPI endpoints for admin image uploads."""

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from storefront.identity.guards import admin_user
from storefront.identity.user import User
from storefront.media.uploads import read_upload, store_images

upload_router = APIRouter(prefix="/upload", tags=["uploads"])


class ImageResponse(BaseModel):
    success: bool = True
    image: str


class ImagesResponse(BaseModel):
    success: bool = True
    images: list[str]


@upload_router.post("", response_model=ImageResponse)
async def upload_image(image: UploadFile = File(...), _admin: User = Depends(admin_user)) -> ImageResponse:
    [url] = store_images([await read_upload("image", image)], max_files=1)
    return ImageResponse(image=url)


@upload_router.post("/multiple", response_model=ImagesResponse)
async def upload_images(
    images: list[UploadFile] = File(...),
    _admin: User = Depends(admin_user),
) -> ImagesResponse:
    return ImagesResponse(images=store_images([await read_upload("images", f) for f in images]))
