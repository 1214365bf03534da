class PixelPassError(Exception):
    pass

class EmptyAlphabet(PixelPassError, ValueError):
    """No character class enabled in the CharacterSet."""

class InvalidPolicy(PixelPassError, ValueError):
    pass

class PolicyUnsatisfiable(InvalidPolicy):
    def __init__(self, attempts: int, length: int):
        super().__init__(f"no password of length {length} met the policy after {attempts} attempts")
        self.attempts = attempts
        self.length = length

class NoInputs(PixelPassError, ValueError):
    """Zero images were supplied."""

class EmptyInput(PixelPassError, ValueError):
    pass

class LengthMismatch(PixelPassError, ValueError):
    def __init__(self, expected: int, got: int, index: int):
        super().__init__(f"digest {index} has length {got}, expected {expected}")
        self.expected = expected
        self.got = got
        self.index = index
