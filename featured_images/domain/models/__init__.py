from featured_images.domain.models.featured_image import ContentFeaturedImage
from featured_images.domain.models.settings import FeaturedImageSettings, SETTINGS_ROW_ID
