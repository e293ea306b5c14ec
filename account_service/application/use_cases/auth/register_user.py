# Standard library imports
import logging
from typing import Optional

# Local application imports
from ....core.exceptions import ConflictError, DuplicateUserError, InternalError, ValidationError
from ....domain.repositories.user_repository import UserRepository
from ....domain.ports.media_uploader import MediaUploader, MediaUploadResult
from ....domain.constants import UserFields
from ....domain.models.user import validate_user_identity
from ...dto.auth_dto import UserRegistrationRequest
from ...dto.user_dto import UserResponse

logger = logging.getLogger(__name__)

AVATAR_REQUIRED_MESSAGE = "Avatar file is required"
REGISTRATION_FAILED_MESSAGE = "Something went wrong while registering the user"


def check_registration_fields(
    username: Optional[str],
    email: Optional[str],
    full_name: Optional[str],
    password: Optional[str],
) -> None:
    """
    Reject blank or malformed registration fields.

    Runs before any file is staged or uploaded.

    Raises:
        ValidationError: If a field is blank or fails the User invariants
    """
    if any(field is None or field.strip() == "" for field in (full_name, email, username, password)):
        raise ValidationError("All fields are required")
    try:
        validate_user_identity(username.strip().lower(), email.strip(), full_name.strip())
    except ValueError as e:
        raise ValidationError(str(e))


class RegisterUserUseCase:
    """Use case for registering a new user"""

    def __init__(self, user_repository: UserRepository, media_uploader: MediaUploader) -> None:
        self.user_repository = user_repository
        self.media_uploader = media_uploader

    async def execute(self, request: UserRegistrationRequest) -> UserResponse:
        """
        Register a new user

        Args:
            request: Registration fields and staged avatar/cover-image paths

        Returns:
            UserResponse with the created (sanitized) user

        Raises:
            ValidationError: If a field is blank or malformed, or the avatar is missing/unusable
            ConflictError: If the username or email is already taken
            InternalError: If the user cannot be stored or read back
        """
        check_registration_fields(request.username, request.email, request.full_name, request.password)

        username = request.username.strip().lower()
        email = request.email.strip()

        # Check if user already exists
        existing_user = await self.user_repository.find_by_identity(username=username, email=email)
        if existing_user is not None:
            raise ConflictError("User with email or username already exists")

        if not request.avatar_path:
            raise ValidationError(AVATAR_REQUIRED_MESSAGE)

        avatar = await self._upload(request.avatar_path)
        if avatar is None:
            raise ValidationError(AVATAR_REQUIRED_MESSAGE)

        cover_image = None
        if request.cover_image_path:
            cover_image = await self._upload(request.cover_image_path)

        try:
            user = await self.user_repository.create({
                "username": username,
                "email": email,
                "full_name": request.full_name.strip(),
                "password": request.password,
                "avatar": avatar.url,
                "cover_image": cover_image.url if cover_image else "",
            })
        except DuplicateUserError:
            # Lost the race between the existence check and the insert
            raise ConflictError("User with email or username already exists")
        except ValueError as e:
            logger.error(f"User store rejected registration for {username}: {e}")
            raise InternalError(REGISTRATION_FAILED_MESSAGE)

        created_user = await self.user_repository.find_by_id(user.id, exclude=UserFields.SENSITIVE)
        if created_user is None:
            raise InternalError(REGISTRATION_FAILED_MESSAGE)

        logger.info(f"Registered user {created_user.id} ({created_user.username})")
        return UserResponse.from_user(created_user)

    async def _upload(self, local_path: str) -> Optional[MediaUploadResult]:
        try:
            return await self.media_uploader.upload(local_path)
        except Exception as e:
            logger.error(f"Media upload raised: {e}", exc_info=True)
            return None
