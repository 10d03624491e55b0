from blogapi.services.auth import AuthService
from blogapi.services.images import ImageService, ImageUpload
from blogapi.services.post import PostService

__all__ = ["AuthService", "ImageService", "ImageUpload", "PostService"]
