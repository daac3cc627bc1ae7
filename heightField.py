import logging

import numpy as np

from rippleErrors import InvalidDimension

logger = logging.getLogger(__name__)


class HeightField:
    """Dual-buffered integer wave heights for a width x height image.

    Both buffers are flat, indexed as ``x + y*width``. ``front`` is the one
    read by the renderer and written by splashes, ``back`` is scratch space
    for the next update. ``update()`` rewrites ``back`` from ``front`` and
    then swaps the two handles.
    """

    def __init__(self, width, height):
        if width <= 0 or height <= 0:
            raise InvalidDimension(width, height)

        self.width = int(width)
        self.height = int(height)

        # which columns of the interior rows evolve; columns 1 and width-1 are
        # frozen, column 0 is not
        columns = np.arange(self.width, self.width * self.height - self.width) % self.width
        self.evolving = (columns != 1) & (columns != self.width - 1)

        self.clear()

    @property
    def size(self):
        return self.width * self.height

    @property
    def front(self):
        return self.buffers[self.current]

    @property
    def back(self):
        return self.buffers[1 - self.current]

    def clear(self):
        # 32 bit ints, overflow wraps
        self.buffers = [np.zeros(self.size, dtype=np.int32),
                        np.zeros(self.size, dtype=np.int32)]
        self.current = 0
        logger.debug("Height field %dx%d cleared", self.width, self.height)

    def update(self):
        w = self.width
        lo, hi = w, self.size - w
        front, back = self.front, self.back

        if hi > lo:
            # every read comes from front or from back[i] itself, so the whole
            # sweep can be computed at once
            neighbours = (front[lo - 1:hi - 1] +
                          front[lo + 1:hi + 1] +
                          front[lo - w:hi - w] +
                          front[lo + w:hi + w])
            wave = (neighbours >> 1) - back[lo:hi]
            wave -= wave >> 5
            np.copyto(back[lo:hi], wave, where=self.evolving)

        self.current = 1 - self.current

    def splash(self, x, y, radius):
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        if radius <= 0:
            return

        xMin, xMax = max(0, x - radius), min(self.width, x + radius)
        yMin, yMax = max(0, y - radius), min(self.height, y + radius)

        iy, ix = np.ogrid[yMin:yMax, xMin:xMax]
        d = np.sqrt((ix - x) ** 2.0 + (iy - y) ** 2.0)
        disc = d < radius

        # peaks at the centre, leaves everything outside the disc alone
        profile = np.trunc(255 - (768 * (1 - d / radius / 2))).astype(np.int32)

        region = self.front.reshape(self.height, self.width)[yMin:yMax, xMin:xMax]
        region[disc] = profile[disc]

    def grid(self):
        """Current buffer as a (height, width) view."""
        return self.front.reshape(self.height, self.width)

    def energy(self):
        return int(np.abs(self.front.astype(np.int64)).sum())
