import logging

import numpy as np

from heightField import HeightField
from rippleErrors import DimensionMismatch, InvalidDimension, InvalidPixelFormat, NotInitialized

logger = logging.getLogger(__name__)


def readOnly(array):
    view = array.view()
    view.flags.writeable = False
    return view


def checkPixels(image):
    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] != 3:
        raise InvalidPixelFormat(f"Expected an RGB grid of shape (height, width, 3), got {image.shape}")
    if image.dtype != np.uint8:
        raise InvalidPixelFormat(f"Expected 8 bit channels, got {image.dtype}")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidDimension(image.shape[1], image.shape[0])
    return np.ascontiguousarray(image)


class RippleRenderer:
    """Refracts a static RGB texture through a HeightField.

    The texture is a (height, width, 3) uint8 array. Every render samples it
    at an offset given by the local slope of the field, brightens or darkens
    the sample by the same slope and writes the result into one frame buffer
    that is reused across calls.
    """

    def __init__(self, source=None):
        self.source = None
        self.output = None
        self.field = None

        if source is not None:
            self.setSource(source)

    @property
    def texture(self):
        return None if self.source is None else readOnly(self.source)

    @property
    def frame(self):
        return None if self.output is None else readOnly(self.output)

    @property
    def width(self):
        return None if self.field is None else self.field.width

    @property
    def height(self):
        return None if self.field is None else self.field.height

    def setSource(self, image):
        image = checkPixels(image)
        height, width = image.shape[:2]

        self.source = readOnly(image)
        self.field = HeightField(width, height)
        self.output = image.copy()
        logger.debug("Texture set to %dx%d, height field reinitialized", width, height)

    def update(self):
        if self.field is None:
            raise NotInitialized("update")
        self.field.update()

    def splash(self, x, y, radius):
        if self.field is None:
            raise NotInitialized("splash")
        self.field.splash(x, y, radius)

    def clear(self):
        if self.field is not None:
            self.field.clear()

    def render(self, newSource=None):
        if self.field is None:
            raise NotInitialized("render")

        if newSource is not None:
            newSource = checkPixels(newSource)
            if newSource.shape != self.source.shape:
                raise DimensionMismatch(self.source.shape[:2], newSource.shape[:2])
            self.source = readOnly(newSource)

        w, h = self.field.width, self.field.height
        lo, hi = w, w * h - w

        texture = self.source.reshape(-1, 3)
        frame = self.output.reshape(-1, 3)

        if hi > lo:
            # int64 so that extreme heights cannot wrap while computing offsets
            buffer = self.field.front.astype(np.int64)
            xOffset = buffer[lo - 1:hi - 1] - buffer[lo + 1:hi + 1]
            yOffset = buffer[lo - w:hi - w] - buffer[lo + w:hi + w]

            # (xo - yo) / 4, truncated towards zero
            slope = xOffset - yOffset
            shade = np.sign(slope) * (np.abs(slope) // 4)

            stride = w * 3
            pixelIndex = np.arange(lo, hi, dtype=np.int64) * 3
            sampleIndex = pixelIndex + xOffset * 3 + yOffset * stride
            outside = (sampleIndex < 0) | (sampleIndex >= w * h * 3)
            sampleIndex[outside] = pixelIndex[outside]

            sample = texture[sampleIndex // 3].astype(np.int64)
            frame[lo:hi] = np.clip(sample + shade[:, None], 0, 255)

        # edge rows pass through untouched
        frame[:w] = texture[:w]
        frame[w * h - w:] = texture[w * h - w:]

        return self.frame
