from typing import TYPE_CHECKING
from ...core.config import get_settings
from ...domain.repositories.user_repository import UserRepository
from ...domain.ports.media_uploader import MediaUploader
from ...application.services.token_issuer import TokenIssuer, TokenSettings
from ...infrastructure.external.cloudinary_uploader import CloudinaryMediaUploader

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class ServiceProvider:
    """Registers stateless services shared by the use cases"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        settings = get_settings()

        container.register_singleton(
            TokenIssuer,
            TokenIssuer(
                user_repository=container.get(UserRepository),
                token_settings=TokenSettings.from_settings(settings),
            )
        )

        container.register_singleton(MediaUploader, CloudinaryMediaUploader())
