class RippleError(Exception):
    pass


class InvalidDimension(RippleError, ValueError):
    def __init__(self, width, height):
        super().__init__(f"Invalid buffer size {width}x{height}: both sides must be positive.")
        self.width = width
        self.height = height


class NotInitialized(RippleError, RuntimeError):
    def __init__(self, operation):
        super().__init__(f"Cannot {operation}: no source image has been set.")
        self.operation = operation


class DimensionMismatch(RippleError, ValueError):
    def __init__(self, expected, actual):
        super().__init__(
            f"Source image is {actual[1]}x{actual[0]} but the height field is "
            f"{expected[1]}x{expected[0]}; call setSource() to reinitialize.")
        self.expected = expected
        self.actual = actual


class InvalidPixelFormat(RippleError, ValueError):
    pass
