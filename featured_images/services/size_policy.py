from typing import Optional, Sequence

from featured_images.domain.entities import SizeDescriptor, SizePolicy

SOCIAL_MIN_WIDTH = 1200


def _largest_available(sizes: Sequence[SizeDescriptor]) -> Optional[str]:
    if not sizes:
        return None
    ordered = sorted(sizes, key=lambda s: (s.width, s.height), reverse=True)
    return ordered[0].source or None


def _optimize_social(sizes: Sequence[SizeDescriptor]) -> Optional[str]:
    candidates = [s for s in sizes if s.media == "photo" and s.source]
    if not candidates:
        return None

    def rank(s: SizeDescriptor):
        social = s.width >= SOCIAL_MIN_WIDTH and s.width >= s.height
        return (0 if social else 1, -s.width, -s.height)

    return min(candidates, key=rank).source


def select_size(sizes: Sequence[SizeDescriptor], policy: SizePolicy) -> Optional[str]:
    """Pick one source URL from a provider size list, or None when nothing fits."""
    if SizePolicy(policy) == SizePolicy.largest_available:
        return _largest_available(sizes)
    return _optimize_social(sizes)
