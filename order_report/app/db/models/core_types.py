import enum

class VatCode(str, enum.Enum):
    standard = "STANDARD"
    reduced = "REDUCED"
    zero = "ZERO"

class ErrorPolicy(str, enum.Enum):
    abort = "abort"
    skip = "skip"
