"""
Show a finished frame in a pygame window.

Only used by the CLI's --preview flag; pygame is an optional dependency
(`pip install tinyrender[preview]`).
"""
import logging

import numpy as np

from tinyrender.framebuffer import FrameBuffer

logger = logging.getLogger(__name__)


def frame_to_surface(fb: FrameBuffer):
    """
    Copy the frame into a new pygame Surface.

    pygame.surfarray indexes pixels as [x, y, channel], so the (h, w, 3)
    frame is transposed first.
    """
    import pygame

    return pygame.surfarray.make_surface(np.ascontiguousarray(fb.as_array().transpose(1, 0, 2)))


def show(fb: FrameBuffer, title: str = "tinyrender") -> None:
    """Block until the window is closed or ESC is pressed."""
    import pygame

    pygame.init()
    try:
        screen = pygame.display.set_mode((fb.width, fb.height))
        pygame.display.set_caption(title)
        screen.blit(frame_to_surface(fb), (0, 0))
        pygame.display.flip()

        clock = pygame.time.Clock()
        running = True
        while running:
            clock.tick(30)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
    finally:
        pygame.quit()
    logger.debug("Preview window closed")
