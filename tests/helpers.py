def assemble(*words):
    """Pack 16-bit opcodes into big-endian program bytes."""
    return b"".join(w.to_bytes(2, "big") for w in words)


class FixedRandom:
    """Stands in for the random module with a constant byte."""

    def __init__(self, value):
        self.value = value

    def getrandbits(self, bits):
        return self.value
