from featured_images.routers.featured_image import router as featured_image_router
from featured_images.routers.preview import router as preview_router
from featured_images.routers.settings import router as settings_router

__all__ = ["featured_image_router", "preview_router", "settings_router"]
