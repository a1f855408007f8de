# renderer/preview.py
import pygame

from renderer.framebuffer import FrameBuffer


def show_image(framebuffer: FrameBuffer, title: str = "tiletracer"):
    """
    Open a window with the finished image and block until it is closed
    or Escape is pressed.
    """
    pygame.init()
    try:
        screen = pygame.display.set_mode((framebuffer.width, framebuffer.height))
        pygame.display.set_caption(title)
        # surfarray is indexed (x, y); the frame buffer is (row, column)
        surface = pygame.surfarray.make_surface(framebuffer.pixels.swapaxes(0, 1))
        screen.blit(surface, (0, 0))
        pygame.display.flip()

        clock = pygame.time.Clock()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
            clock.tick(30)
    finally:
        pygame.quit()
