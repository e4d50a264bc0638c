from typing import Annotated, Optional
from fastapi import APIRouter, Depends, File, UploadFile, status
from app.dependencies import authenticate, get_image_host, DefaultResponseModel, Responses, ErrorResponse
from app.domain.upload import service
from app.domain.upload.schemas import UploadedImage
from app.domain.upload.service import ImageHostClient
from app.domain.user.models import User
from app.exceptions import ValidationError
from app.config import MAX_UPLOAD_SIZE

router = APIRouter(
    prefix='/upload',
    tags=['Upload']
)

@router.post(
    '',
    status_code=status.HTTP_200_OK,
    responses=Responses(
        ErrorResponse(
            status.HTTP_400_BAD_REQUEST, 'Bad Request',
            ('NoFile', 'No image file provided'),
            ('NotImage', 'Only image files are allowed'),
            ('TooLarge', 'Image exceeds the 5MB size limit'),
        ),
        ErrorResponse(
            status.HTTP_500_INTERNAL_SERVER_ERROR, 'Internal Server Error',
            ('HostFailure', 'Failed to upload image: <host message>'),
        )
    )
)
async def upload_image(
    user: Annotated[User, Depends(authenticate)],
    image_host: Annotated[ImageHostClient, Depends(get_image_host)],
    image: Annotated[Optional[UploadFile], File()] = None
) -> UploadedImage:
    if image is None:
        raise ValidationError("No image file provided")

    # One byte past the limit is enough to reject the file
    contents = await image.read(MAX_UPLOAD_SIZE + 1)

    return await service.upload_image(image_host, image.content_type, contents)

@router.delete('/{public_id}', status_code=status.HTTP_200_OK)
async def delete_image(
    public_id: str,
    user: Annotated[User, Depends(authenticate)],
    image_host: Annotated[ImageHostClient, Depends(get_image_host)]
) -> DefaultResponseModel:
    await service.delete_image(image_host, public_id)
    return {"message": "Image deleted successfully"}
