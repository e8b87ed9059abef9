from featured_images.domain.repositories.featured_image_repository import FeaturedImageStateRepository
from featured_images.domain.repositories.settings_repository import SettingsRepository

__all__ = ["FeaturedImageStateRepository", "SettingsRepository"]
