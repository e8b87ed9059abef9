import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Tuple, Union
from uuid import UUID

from featured_images.domain.entities import (
    DisplayImage,
    EntityResolutionState,
    ExternalImageRequest,
    ImageKind,
    PreviewResult,
    ResolutionStatus,
    ResolvedImage,
    SourceMode,
    UrlKind,
)
from featured_images.domain.errors import (
    ContentNotFoundError,
    ErrorKind,
    MSG_HTTPS_ONLY,
    MSG_INVALID_URL,
    MSG_UNSUPPORTED_URL,
    ResolutionError,
)
from featured_images.ports.outbound.content_lookup_port import ContentLookupPort
from featured_images.ports.outbound.state_repository_port import EntityResolutionStateRepository
from featured_images.services.hooks import ResolutionHooks
from featured_images.services.provider_resolver import FlickrResolver
from featured_images.services.settings_service import SettingsService
from featured_images.services.url_classifier import (
    DEFAULT_IMAGE_EXTENSIONS,
    classify,
    is_https,
    validation_message,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean_url(raw_url: Optional[str]) -> Optional[str]:
    if raw_url is None:
        return None
    raw_url = raw_url.strip()
    return raw_url or None


def _invalid_input(raw_url: str) -> ResolutionError:
    msg = MSG_HTTPS_ONLY if not is_https(raw_url) else MSG_UNSUPPORTED_URL
    return ResolutionError(ErrorKind.invalid_input, msg)


@dataclass
class ResolutionOutcome:
    state: EntityResolutionState
    error: Optional[ResolutionError] = None

    @property
    def status(self) -> ResolutionStatus:
        return self.state.status


class FeaturedImageService:
    """
    Per content item resolution state machine.

    States (derived, see EntityResolutionState.status):
      no_external_image -> pending_resolution -> resolved | failed

    - A resolve is only ever triggered explicitly (save, forced resolve, preview)
      or lazily by get_display_image() while still pending. No retries, no polling.
    - Provider failures keep a previously resolved image (stale) and record the
      error; invalid input always clears it.
    """

    def __init__(
        self,
        state_repo: EntityResolutionStateRepository,
        content_repo: ContentLookupPort,
        resolver: FlickrResolver,
        settings_service: SettingsService,
        hooks: Optional[ResolutionHooks] = None,
        clock: Callable[[], datetime] = _utcnow,
        image_extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
    ):
        self.state_repo = state_repo
        self.content_repo = content_repo
        self.resolver = resolver
        self.settings_service = settings_service
        self.hooks = hooks or ResolutionHooks()
        self.clock = clock
        self.image_extensions = tuple(image_extensions)

    async def _load(self, content_id: UUID) -> EntityResolutionState:
        if not await self.content_repo.exists(content_id):
            raise ContentNotFoundError(content_id)
        state = await self.state_repo.get(content_id)
        return state or EntityResolutionState()

    async def get_state(self, content_id: UUID) -> EntityResolutionState:
        return await self._load(content_id)

    # ---------- Editing surface ----------

    async def set_external_image_request(
        self, content_id: UUID, source_mode: SourceMode, raw_url: Optional[str]
    ) -> Optional[str]:
        """Store the editor's request and return its validation message. No network call."""
        state = await self._load(content_id)
        source_mode = SourceMode(source_mode)
        raw_url = _clean_url(raw_url)
        if source_mode != SourceMode.external:
            # switching away from external mode forgets the URL
            raw_url = None

        state.request = ExternalImageRequest(source_mode=source_mode, raw_url=raw_url)
        await self.state_repo.put(content_id, state)

        cfg = await self.settings_service.load()
        return validation_message(source_mode, raw_url, cfg.has_api_key, self.image_extensions)

    async def process(self, content_id: UUID) -> ResolutionOutcome:
        """Content-save trigger: force a resolve unless already resolved for this exact input."""
        state = await self._load(content_id)
        raw_url = state.request.raw_url
        if state.request.wants_external and state.is_current_for(raw_url):
            return ResolutionOutcome(state)
        return await self.resolve(content_id, force=True)

    async def save(
        self, content_id: UUID, source_mode: SourceMode, raw_url: Optional[str]
    ) -> Tuple[ResolutionOutcome, Optional[str]]:
        message = await self.set_external_image_request(content_id, source_mode, raw_url)
        outcome = await self.process(content_id)
        return outcome, message

    # ---------- Resolution ----------

    async def resolve(self, content_id: UUID, force: bool = False) -> ResolutionOutcome:
        state = await self._load(content_id)
        request = state.request

        if not request.wants_external:
            cleared = EntityResolutionState(
                request=ExternalImageRequest(source_mode=request.source_mode, raw_url=None)
            )
            await self.state_repo.put(content_id, cleared)
            return ResolutionOutcome(cleared)

        raw_url = request.raw_url
        kind = classify(raw_url, self.image_extensions)
        if kind == UrlKind.invalid:
            return await self._fail(content_id, state, _invalid_input(raw_url))

        if not force and state.is_current_for(raw_url):
            return ResolutionOutcome(state)

        if kind == UrlKind.direct_image:
            resolved = ResolvedImage(
                chosen_url=raw_url,
                original_url=raw_url,
                kind=ImageKind.direct,
                resolved_at=self.clock(),
            )
            return await self._succeed(content_id, request, resolved)

        cfg = await self.settings_service.load()
        result = await self.resolver.resolve(raw_url, cfg)
        if isinstance(result, ResolutionError):
            return await self._fail(content_id, state, result)

        resolved = ResolvedImage(
            chosen_url=result.chosen_url,
            original_url=raw_url,
            kind=ImageKind.provider,
            provider_id=result.provider_id,
            resolved_at=self.clock(),
        )
        return await self._succeed(content_id, request, resolved)

    async def _succeed(self, content_id: UUID, request: ExternalImageRequest, resolved: ResolvedImage) -> ResolutionOutcome:
        state = EntityResolutionState(request=request, resolved=resolved)
        await self.state_repo.put(content_id, state)
        return ResolutionOutcome(state)

    async def _fail(self, content_id: UUID, state: EntityResolutionState, error: ResolutionError) -> ResolutionOutcome:
        stale = None if error.clears_stale else state.resolved
        new_state = EntityResolutionState(
            request=state.request,
            resolved=stale,
            last_error=error.message,
            last_error_kind=error.kind,
        )
        if stale is not None:
            logger.warning(
                "featured image for %s kept stale value after %s: %s", content_id, error.kind.value, error.message
            )
        else:
            logger.info("featured image for %s failed (%s): %s", content_id, error.kind.value, error.message)
        await self.state_repo.put(content_id, new_state)
        return ResolutionOutcome(new_state, error)

    # ---------- Consumers ----------

    async def get_display_image(self, content_id: UUID) -> Optional[DisplayImage]:
        state = await self._load(content_id)
        if not state.request.wants_external:
            return None
        if state.status == ResolutionStatus.pending_resolution:
            state = (await self.resolve(content_id)).state
        if state.resolved is None:
            return None
        return DisplayImage(
            url=state.resolved.chosen_url,
            kind=state.resolved.kind,
            original_url=state.resolved.original_url,
            provider_id=state.resolved.provider_id,
        )

    async def preview_resolve(self, raw_url: Optional[str]) -> Union[PreviewResult, ResolutionError]:
        """Stateless: same classifier, resolver and cache as the persisted path, never writes state."""
        raw_url = _clean_url(raw_url)
        if not raw_url:
            return ResolutionError(ErrorKind.invalid_input, MSG_INVALID_URL)
        kind = classify(raw_url, self.image_extensions)
        if kind == UrlKind.invalid:
            return _invalid_input(raw_url)
        if kind == UrlKind.direct_image:
            return PreviewResult(url=raw_url, kind=ImageKind.direct)

        cfg = await self.settings_service.load()
        result = await self.resolver.resolve(raw_url, cfg)
        if isinstance(result, ResolutionError):
            return result
        return PreviewResult(url=result.chosen_url, kind=ImageKind.provider, provider_id=result.provider_id)
