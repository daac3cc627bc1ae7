# RUN THIS FILE TO START THE RIPPLE EFFECT

import argparse
import logging
import sys

import cv2
import numpy as np
import pygame

from rippleConfig import CONFIG_FILE, ConfigManager
from rippleRenderer import RippleRenderer

logger = logging.getLogger("ripple")


def loadImage(path):
    image = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise FileNotFoundError(f"Could not read image {path}")
    return toRGB(image)


def toRGB(image):
    """Any 8 bit grayscale/BGR/BGRA picture as a contiguous RGB grid."""
    if image.dtype != np.uint8:
        image = cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)
    if image.ndim == 2:
        image = cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
    elif image.shape[2] == 4:
        image = cv2.cvtColor(image, cv2.COLOR_BGRA2RGB)
    else:
        image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    return np.ascontiguousarray(image)


def saveImage(path, frame):
    if not cv2.imwrite(path, cv2.cvtColor(np.asarray(frame), cv2.COLOR_RGB2BGR)):
        raise OSError(f"Could not write image {path}")


def translatePoint(x, y, controlSize, imageSize):
    # the window can be resized independently of the texture
    cx = imageSize[0] / controlSize[0]
    cy = imageSize[1] / controlSize[1]
    return int(cx * x), int(cy * y)


class RippleWindow:
    def __init__(self, renderer, config, capture=None):
        self.renderer = renderer
        self.config = config
        self.capture = capture

        self.fps = config["fps"]
        self.clickSplashRadius = config["clickSplashRadius"]
        self.dragSplashRadius = config["dragSplashRadius"]
        self.animationEnabled = config["animationEnabled"]
        self.dragging = False

        pygame.init()
        self.screen = pygame.display.set_mode(tuple(config["windowSize"]), pygame.RESIZABLE)
        pygame.display.set_caption("Ripple Picture Box")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont(None, 24)

    def setAnimationEnabled(self, enabled):
        self.animationEnabled = enabled
        if not enabled:
            self.renderer.clear()
        logger.info("Animation %s", "enabled" if enabled else "disabled")

    def splash(self, x, y, radius):
        imageSize = (self.renderer.width, self.renderer.height)
        ix, iy = translatePoint(x, y, self.screen.get_size(), imageSize)
        self.renderer.splash(ix, iy, radius)

    def handleEvent(self, event):
        if event.type == pygame.QUIT:
            return False
        elif event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
            elif event.key == pygame.K_SPACE:
                self.setAnimationEnabled(not self.animationEnabled)
            elif event.key == pygame.K_c:
                self.renderer.clear()
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.splash(event.pos[0], event.pos[1], self.clickSplashRadius)
            self.dragging = True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.dragging = False
        elif event.type == pygame.MOUSEMOTION and self.dragging:
            self.splash(event.pos[0], event.pos[1], self.dragSplashRadius)
        return True

    def nextTexture(self):
        if self.capture is None:
            return None

        ret, frame = self.capture.read()
        if not ret:
            return None

        frame = toRGB(cv2.flip(frame, 1))
        size = (self.renderer.width, self.renderer.height)
        if (frame.shape[1], frame.shape[0]) != size:
            frame = cv2.resize(frame, size, interpolation=cv2.INTER_AREA)
        return frame

    def run(self):
        running = True

        while running:
            for event in pygame.event.get():
                if not self.handleEvent(event):
                    running = False

            if self.animationEnabled:
                self.renderer.update()

            frame = self.renderer.render(self.nextTexture())

            # pygame surfaces are indexed x first
            surface = pygame.surfarray.make_surface(frame.transpose(1, 0, 2))
            self.screen.blit(pygame.transform.scale(surface, self.screen.get_size()), (0, 0))
            self.drawInteractionHelp()

            pygame.display.flip()
            self.clock.tick(self.fps)

        if self.capture is not None:
            self.capture.release()
        pygame.quit()

    def drawInteractionHelp(self):
        helpText = "Click and drag to splash | Space toggles animation | C clears | Q to quit"

        textSurface = self.font.render(helpText, True, (255, 255, 255))
        width, height = self.screen.get_size()
        textRect = textSurface.get_rect(center=(width // 2, height - 20))

        bgRect = pygame.Rect(textRect.left - 10, textRect.top - 5,
                             textRect.width + 20, textRect.height + 10)
        bgSurface = pygame.Surface((bgRect.width, bgRect.height), pygame.SRCALPHA)
        bgSurface.fill((0, 0, 0, 128))

        self.screen.blit(bgSurface, bgRect)
        self.screen.blit(textSurface, textRect)


def renderHeadless(renderer, frames, radius):
    """Drop one splash in the middle and let it run for a number of steps."""
    renderer.splash(renderer.width // 2, renderer.height // 2, radius)
    for _ in range(frames):
        renderer.update()
    return renderer.render()


def parseArgs(argv=None):
    parser = argparse.ArgumentParser(description="Interactive water ripples over a picture.")
    parser.add_argument("image", nargs="?", help="Picture to ripple (any format OpenCV reads)")
    parser.add_argument("--camera", type=int, default=None,
                        help="Use this webcam index as a live texture instead of a picture")
    parser.add_argument("--config", default=CONFIG_FILE, help="JSON config file")
    parser.add_argument("--fps", type=int, default=None)
    parser.add_argument("--click-radius", type=int, default=None)
    parser.add_argument("--drag-radius", type=int, default=None)
    parser.add_argument("--size", type=int, nargs=2, metavar=("WIDTH", "HEIGHT"), default=None,
                        help="Initial window size")
    parser.add_argument("--frames", type=int, default=None,
                        help="Render without a window: splash once, run this many steps")
    parser.add_argument("--output", default="ripple.png", help="Where --frames writes its frame")
    parser.add_argument("--save-config", action="store_true",
                        help="Write the effective settings back to --config")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def setupLogging(verbose):
    logging.basicConfig(stream=sys.stdout,
                        level=logging.DEBUG if verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")


def main(argv=None):
    args = parseArgs(argv)
    setupLogging(args.verbose)

    config = ConfigManager(args.config)
    config.override(fps=args.fps,
                    clickSplashRadius=args.click_radius,
                    dragSplashRadius=args.drag_radius,
                    windowSize=list(args.size) if args.size else None,
                    image=args.image)
    if args.save_config:
        config.save()

    capture = None
    if args.camera is not None:
        capture = cv2.VideoCapture(args.camera)
        ret, frame = capture.read()
        if not ret:
            capture.release()
            logger.error("Camera %d did not deliver a frame", args.camera)
            return 1
        texture = toRGB(cv2.flip(frame, 1))
    elif config["image"]:
        texture = loadImage(config["image"])
    else:
        logger.error("No picture given; pass an image path or --camera")
        return 2

    renderer = RippleRenderer(texture)
    logger.info("Texture %dx%d", renderer.width, renderer.height)

    if args.frames is not None:
        if capture is not None:
            capture.release()
        frame = renderHeadless(renderer, args.frames, config["clickSplashRadius"])
        saveImage(args.output, frame)
        logger.info("Wrote %s after %d steps", args.output, args.frames)
        return 0

    RippleWindow(renderer, config, capture).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
