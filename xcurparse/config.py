from dataclasses import dataclass

__all__ = ('DecoderLimits', 'XCURSOR_MAX_TOC', 'XCURSOR_IMAGE_MAX_SIZE')

# same ceilings libXcursor applies
XCURSOR_MAX_TOC = 0x10000
XCURSOR_IMAGE_MAX_SIZE = 0x7fff


@dataclass(frozen=True)
class DecoderLimits:
    max_toc_entries: int = XCURSOR_MAX_TOC
    max_dimension: int = XCURSOR_IMAGE_MAX_SIZE
    # reject chunks whose type differs from their table of contents entry
    strict_types: bool = False

    def __post_init__(self):
        if self.max_toc_entries < 0 or self.max_dimension < 0:
            raise ValueError('decoder limits must not be negative')
