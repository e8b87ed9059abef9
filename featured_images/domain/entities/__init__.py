from featured_images.domain.entities.featured_image import (
    DisplayImage,
    EntityResolutionState,
    ExternalImageRequest,
    FeaturedImageIn,
    FeaturedImageStateOut,
    ImageKind,
    PreviewIn,
    PreviewResult,
    ProviderResolution,
    ResolutionStatus,
    ResolvedImage,
    SizeDescriptor,
    SocialMeta,
    SourceMode,
    UrlKind,
)
from featured_images.domain.entities.settings import (
    PluginSettings,
    SettingsOut,
    SettingsUpdate,
    SizePolicy,
    TtlUnit,
)
