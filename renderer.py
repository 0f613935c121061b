import pygame

FITS = ("stretch", "contain")


def _contain_size(src: tuple[int, int], dst: tuple[int, int]) -> tuple[int, int]:
    vw, vh = src
    sw, sh = dst
    if not vw or not vh:
        return 0, 0
    scale = min(sw / vw, sh / vh)
    return int(vw * scale), int(vh * scale)


def _clear(surface: pygame.Surface) -> None:
    # alpha targets go fully transparent, opaque ones black
    if surface.get_flags() & pygame.SRCALPHA:
        surface.fill((0, 0, 0, 0))
    else:
        surface.fill((0, 0, 0))


def draw_frame(surface: pygame.Surface, image: pygame.Surface,
               fit: str = "stretch") -> None:
    """
    Overwrite `surface` with `image` scaled to the surface's current size.
    With fit="contain" the image keeps its aspect and is letter-/pillar-boxed.
    """
    sw, sh = surface.get_size()
    if fit == "contain":
        w, h = _contain_size(image.get_size(), (sw, sh))
        _clear(surface)
        if w and h:
            surf = pygame.transform.scale(image, (w, h))
            surface.blit(surf, ((sw - w) // 2, (sh - h) // 2))
        return

    _clear(surface)
    surface.blit(pygame.transform.scale(image, (sw, sh)), (0, 0))


def present(screen: pygame.Surface, canvas: pygame.Surface) -> None:
    """Letter-/pillar-box the offscreen canvas onto the window."""
    draw_frame(screen, canvas, fit="contain")
